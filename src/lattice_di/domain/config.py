from typing import FrozenSet

from pydantic import BaseModel, ConfigDict, Field, PositiveInt

from lattice_di.domain.markers import PRODUCER, SERVICE, Marker

DEFAULT_MAX_ITERATIONS = 1000


class InstantiationConfig(BaseModel):
    """Settings for the resolution loop.

    Attributes:
        max_iterations: Bound on total requeues before resolution is abandoned.
            Scale it with the deepest dependency chain, not the service count.
    """

    model_config = ConfigDict(frozen=True)

    max_iterations: PositiveInt = Field(
        default=DEFAULT_MAX_ITERATIONS,
        description="Maximum number of requeues allowed in the resolution loop.",
    )


class MarkerConfig(BaseModel):
    """Markers recognized as "service" and "producer"."""

    model_config = ConfigDict(frozen=True)

    service_markers: FrozenSet[Marker] = Field(
        default_factory=lambda: frozenset({SERVICE}),
        description="Markers that classify a class as a service.",
    )
    producer_markers: FrozenSet[Marker] = Field(
        default_factory=lambda: frozenset({PRODUCER}),
        description="Markers that classify a method as a producer.",
    )

    def with_service_markers(self, *markers: Marker) -> "MarkerConfig":
        return self.model_copy(update={"service_markers": self.service_markers | frozenset(markers)})

    def with_producer_markers(self, *markers: Marker) -> "MarkerConfig":
        return self.model_copy(update={"producer_markers": self.producer_markers | frozenset(markers)})


class ContainerConfig(BaseModel):
    """Top-level configuration handed to bootstrap."""

    model_config = ConfigDict(frozen=True)

    instantiation: InstantiationConfig = Field(default_factory=InstantiationConfig)
    markers: MarkerConfig = Field(default_factory=MarkerConfig)
