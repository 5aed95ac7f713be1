import logging
import threading
from typing import Any, Iterable, List, Optional, Type, TypeVar, Union, cast

from lattice_di.domain import (
    AlreadyInitializedError,
    ContainerNotInitializedError,
    DescriptorKind,
    DestroyHookError,
    IContainer,
    IInstantiationService,
    Marker,
    ProducerDescriptor,
    ServiceDescriptor,
    ServiceNotFoundError,
    UnsatisfiedDependencyError,
)

T = TypeVar("T")

logger = logging.getLogger(__name__)


class ServiceContainer(IContainer):
    """Registry of built services.

    Initialized once with the output of the resolution engine, then serves
    type-based lookups and reload requests. Lookups are covariant and
    first-match in registry order.

    Attributes:
        _registry: Built descriptors in construction order.
        _instantiation_service: Used to destroy and rebuild on reload.
        _initialized: Whether ``init`` already ran.
        _lock: Guards init, reload and registry reads.
    """

    def __init__(self) -> None:
        """Initialize an empty, uninitialized container."""
        self._registry: List[ServiceDescriptor] = []
        self._instantiation_service: Optional[IInstantiationService] = None
        self._initialized = False
        self._lock = threading.RLock()

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    def init(self, descriptors: Iterable[ServiceDescriptor], instantiation_service: IInstantiationService) -> None:
        """Populate the registry with built descriptors.

        Args:
            descriptors: Output of ``ResolutionEngine.instantiate_all``.
            instantiation_service: Service used later to reload descriptors.

        Raises:
            AlreadyInitializedError: If the container was initialized before.
        """
        with self._lock:
            if self._initialized:
                raise AlreadyInitializedError()
            self._registry.extend(descriptors)
            self._instantiation_service = instantiation_service
            self._initialized = True
            logger.debug("Container initialized with %d services", len(self._registry))

    def get_service(self, service_type: Type[T]) -> Optional[T]:
        """Return the live instance of the first service assignable to ``service_type``.

        Returns:
            The instance, or None when no service matches.

        Example:
            >>> repository = container.get_service(Repository)
        """
        descriptor = self.get_service_details(service_type)
        if descriptor is None:
            return None
        return descriptor.instance

    def get_service_details(self, service_type: Type) -> Optional[ServiceDescriptor]:
        with self._lock:
            for descriptor in self._registry:
                if descriptor.provides(service_type):
                    return descriptor
        return None

    def get_services(self) -> List[Any]:
        with self._lock:
            return [descriptor.instance for descriptor in self._registry]

    def get_services_details(self) -> List[ServiceDescriptor]:
        with self._lock:
            return list(self._registry)

    def get_services_by_marker(self, marker: Marker) -> List[ServiceDescriptor]:
        with self._lock:
            return [descriptor for descriptor in self._registry if descriptor.marker == marker]

    def reload(self, target: Union[ServiceDescriptor, Any], cascade: bool = False) -> Any:
        """Destroy and rebuild a service.

        Args:
            target: A descriptor, or a live instance held by the container.
            cascade: Also reload every recorded dependent, recursively, in
                the order they were recorded.

        Returns:
            The new instance of the target.

        Raises:
            ContainerNotInitializedError: If ``init`` has not run.
            ServiceNotFoundError: If ``target`` is not held by this container.
            UnsatisfiedDependencyError: If a dependency no longer resolves.
            DestroyHookError: If a destroy hook failed. Raised after every
                affected service has been rebuilt.

        Example:
            >>> new_cache = container.reload(container.get_service(Cache), cascade=True)
        """
        if isinstance(target, ServiceDescriptor):
            return self.reload_details(target, cascade)
        with self._lock:
            descriptor = self._find_by_instance(target)
            return self.reload_details(descriptor, cascade)

    def reload_details(self, descriptor: ServiceDescriptor, cascade: bool = False) -> Any:
        with self._lock:
            if not self._initialized or self._instantiation_service is None:
                raise ContainerNotInitializedError()
            if not any(registered is descriptor for registered in self._registry):
                raise ServiceNotFoundError(descriptor.service_type)
            hook_failures: List[DestroyHookError] = []
            self._reload(descriptor, cascade, hook_failures)
            if hook_failures:
                raise hook_failures[0]
            return descriptor.instance

    def _reload(self, descriptor: ServiceDescriptor, cascade: bool, hook_failures: List[DestroyHookError]) -> None:
        service = self._instantiation_service
        try:
            service.destroy_instance(descriptor)
        except DestroyHookError as e:
            # The instance is already cleared, so rebuild before reporting.
            logger.warning("Destroy hook failed during reload of %s: %s", descriptor.service_type.__name__, e)
            hook_failures.append(e)

        if descriptor.kind is DescriptorKind.PRODUCER:
            service.create_producer_instance(cast(ProducerDescriptor, descriptor))
        else:
            arguments = [self._resolve_for_reload(descriptor, dependency) for dependency in descriptor.dependencies]
            service.create_instance(descriptor, *arguments)
        logger.debug("Reloaded %s (cascade=%s)", descriptor.service_type.__name__, cascade)

        if cascade:
            for dependent in list(descriptor.dependents):
                self._reload(dependent, cascade, hook_failures)

    def _resolve_for_reload(self, descriptor: ServiceDescriptor, dependency_type: Type) -> Any:
        provider = self.get_service_details(dependency_type)
        if provider is None:
            raise UnsatisfiedDependencyError(dependency_type, descriptor.service_type)
        return provider.instance

    def _find_by_instance(self, instance: Any) -> ServiceDescriptor:
        for descriptor in self._registry:
            if descriptor.is_built and descriptor.instance is instance:
                return descriptor
        raise ServiceNotFoundError(instance)

    def close(self) -> None:
        """Destroy every built service in reverse construction order.

        Runs destroy hooks and empties the registry. The container stays
        initialized and cannot be initialized again.
        """
        with self._lock:
            if self._instantiation_service is not None:
                for descriptor in reversed(self._registry):
                    if descriptor.is_built:
                        self._instantiation_service.destroy_instance(descriptor)
            self._registry.clear()
            logger.debug("Container closed")
