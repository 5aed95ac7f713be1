from abc import ABC, abstractmethod
from typing import Any, Iterable, List, Optional, Type, TypeVar, Union

from lattice_di.domain.markers import Marker
from lattice_di.domain.models import ProducerDescriptor, ServiceDescriptor

T = TypeVar("T")


class IInstantiationService(ABC):
    """Abstract interface for building and discarding descriptor instances."""

    @abstractmethod
    def create_instance(self, descriptor: ServiceDescriptor, *args: Any) -> None:
        """Call the descriptor's constructor with ``args`` and run its init hook.

        Raises:
            ConstructionError: If the argument count mismatches or the constructor fails.
            InitHookError: If the init hook fails.
        """

    @abstractmethod
    def create_producer_instance(self, descriptor: ProducerDescriptor) -> None:
        """Invoke the producer method on its owner's instance.

        Raises:
            ProducerConstructionError: If the owner is unbuilt or the method fails.
        """

    @abstractmethod
    def destroy_instance(self, descriptor: ServiceDescriptor) -> None:
        """Run the destroy hook, then clear the instance.

        Raises:
            DestroyHookError: If the destroy hook fails. The instance is cleared anyway.
        """


class IResolutionEngine(ABC):
    """Abstract interface for building a full set of descriptors."""

    @abstractmethod
    def instantiate_all(self, descriptors: Iterable[ServiceDescriptor]) -> List[ServiceDescriptor]:
        """Resolve and build every descriptor and its producers.

        Returns:
            Built descriptors in construction order.

        Raises:
            UnsatisfiedDependencyError: If a required type has no candidate.
            ResolutionExhaustedError: If the iteration bound is crossed.
        """


class IContainer(ABC):
    """Abstract interface for the registry of built services."""

    @abstractmethod
    def init(self, descriptors: Iterable[ServiceDescriptor], instantiation_service: IInstantiationService) -> None:
        """Populate the registry. Allowed once per container.

        Raises:
            AlreadyInitializedError: On a second call.
        """

    @abstractmethod
    def get_service(self, service_type: Type[T]) -> Optional[T]:
        """Return the first live instance whose type is assignable to ``service_type``."""

    @abstractmethod
    def get_service_details(self, service_type: Type) -> Optional[ServiceDescriptor]:
        """Return the first descriptor whose type is assignable to ``service_type``."""

    @abstractmethod
    def get_services(self) -> List[Any]:
        """Snapshot of all live instances, in registry order."""

    @abstractmethod
    def get_services_details(self) -> List[ServiceDescriptor]:
        """Snapshot of all descriptors, in registry order."""

    @abstractmethod
    def get_services_by_marker(self, marker: Marker) -> List[ServiceDescriptor]:
        """Descriptors whose originating marker equals ``marker``."""

    @abstractmethod
    def reload(self, target: Union[ServiceDescriptor, Any], cascade: bool = False) -> Any:
        """Destroy and rebuild a service, optionally cascading to its dependents.

        Args:
            target: A descriptor or a live instance held by the container.
            cascade: Also reload every recorded dependent, recursively.

        Returns:
            The new instance.
        """
