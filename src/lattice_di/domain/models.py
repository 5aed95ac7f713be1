from typing import Any, Callable, List, Optional, Type

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from lattice_di.domain.enums import DescriptorKind
from lattice_di.domain.markers import PRODUCER_MARKER_ATTR, Marker
from lattice_di.domain.type_checks import is_assignable

_MISSING: Any = object()


class ProducerSpec(BaseModel):
    """A zero-argument method on a service whose return value is managed too.

    Attributes:
        name: Method name, used in error messages.
        method: Plain function called with the owner's instance.
        return_type: Declared return type; identity of the produced descriptor.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str = Field(..., description="Name of the producer method.")
    method: Callable[[Any], Any] = Field(..., description="Function invoked on the owner instance.")
    return_type: Type = Field(..., description="The type produced by the method.")


class ServiceDescriptor(BaseModel):
    """Metadata and runtime state for one constructible type.

    Attributes:
        service_type: The constructible type.
        constructor: Callable invoked with the resolved dependencies, in order.
        dependencies: Required dependency types, in constructor-parameter order.
        init_hook: Optional function called with the instance after construction.
        destroy_hook: Optional function called with the instance before it is discarded.
        producers: Producer methods declared on the type.
        marker: The marker that classified the type as a service.
        instance: The live object, None while unbuilt or destroyed.
        dependents: Descriptors built later that consumed a type this one provides.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    kind: DescriptorKind = Field(default=DescriptorKind.SERVICE, description="How the instance is built.")
    service_type: Type = Field(..., description="The constructible type.")
    constructor: Optional[Callable[..., Any]] = Field(default=None, description="The designated constructor.")
    dependencies: List[Type] = Field(default_factory=list, description="Required dependency types.")
    init_hook: Optional[Callable[[Any], Any]] = Field(default=None, description="Post-construct hook.")
    destroy_hook: Optional[Callable[[Any], Any]] = Field(default=None, description="Pre-destroy hook.")
    producers: List[ProducerSpec] = Field(default_factory=list, description="Producer methods of the type.")
    marker: Optional[Marker] = Field(default=None, description="Marker that classified the type.")
    instance: Optional[Any] = Field(default=None, description="The live built object.")
    dependents: List["ServiceDescriptor"] = Field(
        default_factory=list,
        description="Descriptors built later that required a type this descriptor provides.",
    )
    _built: bool = PrivateAttr(default=False)

    @property
    def is_built(self) -> bool:
        return self._built

    def set_instance(self, instance: Any) -> None:
        self.instance = instance
        self._built = True

    def clear_instance(self) -> None:
        self.instance = None
        self._built = False

    def add_dependent(self, dependent: "ServiceDescriptor") -> None:
        if not any(existing is dependent for existing in self.dependents):
            self.dependents.append(dependent)

    def provides(self, dependency_type: Any) -> bool:
        """Check whether this descriptor's type can fill a ``dependency_type`` slot."""
        return is_assignable(dependency_type, self.service_type)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.service_type.__name__}, built={self._built})"

    __str__ = __repr__


class ProducerDescriptor(ServiceDescriptor):
    """Descriptor of a value returned by a producer method.

    Built by invoking ``method`` on ``owner.instance``; never has dependencies.
    """

    kind: DescriptorKind = Field(default=DescriptorKind.PRODUCER, description="How the instance is built.")
    method: Callable[[Any], Any] = Field(..., description="The producer method.")
    owner: ServiceDescriptor = Field(..., description="Descriptor owning the producer method.")

    @classmethod
    def from_spec(cls, spec: ProducerSpec, owner: ServiceDescriptor) -> "ProducerDescriptor":
        return cls(
            service_type=spec.return_type,
            method=spec.method,
            owner=owner,
            marker=getattr(spec.method, PRODUCER_MARKER_ATTR, None),
        )


class ResolutionSlot(BaseModel):
    """Tracks which constructor parameters of a descriptor are satisfied.

    Attributes:
        descriptor: The descriptor waiting to be built.
        dependency_types: Copy of the descriptor's dependency types.
        instances: Parallel list of resolved instances.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    descriptor: ServiceDescriptor = Field(..., description="The descriptor being resolved.")
    dependency_types: List[Type] = Field(default_factory=list)
    instances: List[Any] = Field(default_factory=list)

    @classmethod
    def for_descriptor(cls, descriptor: ServiceDescriptor) -> "ResolutionSlot":
        dependency_types = list(descriptor.dependencies)
        return cls(
            descriptor=descriptor,
            dependency_types=dependency_types,
            instances=[_MISSING] * len(dependency_types),
        )

    @property
    def is_resolved(self) -> bool:
        return all(instance is not _MISSING for instance in self.instances)

    def open_dependencies(self) -> List[Type]:
        return [
            dependency_type
            for dependency_type, instance in zip(self.dependency_types, self.instances)
            if instance is _MISSING
        ]

    def accept(self, instance: Any, provided_type: Type) -> bool:
        """Fill the first empty position whose type accepts ``provided_type``.

        Args:
            instance: The newly built instance.
            provided_type: The declared type of the descriptor that built it.

        Returns:
            True if a position was filled.
        """
        for index, dependency_type in enumerate(self.dependency_types):
            if self.instances[index] is _MISSING and is_assignable(dependency_type, provided_type):
                self.instances[index] = instance
                return True
        return False

    def arguments(self) -> List[Any]:
        """Resolved instances in constructor-parameter order."""
        return list(self.instances)
