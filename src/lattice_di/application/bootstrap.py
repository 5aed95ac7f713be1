import inspect
import logging
from typing import Iterable, Optional, Type

from lattice_di.application.container import ServiceContainer
from lattice_di.application.instantiation_service import InstantiationService
from lattice_di.application.mapper import ServiceMapper, declared_members
from lattice_di.application.resolution_engine import ResolutionEngine
from lattice_di.domain import ContainerConfig, MappingError, ServiceNotFoundError
from lattice_di.domain.markers import STARTUP_ATTR, has_flag

logger = logging.getLogger(__name__)


def build_container(
    classes: Iterable[Type],
    config: Optional[ContainerConfig] = None,
    container: Optional[ServiceContainer] = None,
) -> ServiceContainer:
    """Map, resolve and register a set of classes.

    Args:
        classes: Candidate classes; only those carrying a recognized service marker are built.
        config: Optional configuration. Defaults are used when omitted.
        container: Uninitialized container to fill. A new one is created when omitted.

    Returns:
        An initialized container.

    Example:
        >>> container = build_container([Repository, UserService])
        >>> container.get_service(UserService).repository is container.get_service(Repository)
        True
    """
    config = config or ContainerConfig()
    instantiation_service = InstantiationService()
    descriptors = ServiceMapper(config.markers).map_services(classes)
    engine = ResolutionEngine(config.instantiation, instantiation_service)
    built = engine.instantiate_all(descriptors)

    if container is None:
        container = ServiceContainer()
    container.init(built, instantiation_service)
    return container


def run_startup_methods(container: ServiceContainer, startup_class: Type) -> None:
    """Invoke every ``@startup`` method of the startup class's instance, in declaration order.

    Raises:
        ServiceNotFoundError: If the startup class is not a managed service.
        MappingError: If a startup method takes arguments.
    """
    instance = container.get_service(startup_class)
    if instance is None:
        raise ServiceNotFoundError(startup_class)

    for name, member in declared_members(startup_class):
        if not inspect.isfunction(member) or not has_flag(member, STARTUP_ATTR):
            continue
        if len(inspect.signature(member).parameters) != 1:
            raise MappingError(startup_class, f"Startup method '{name}' must take no arguments besides self")
        logger.debug("Running startup method %s.%s", startup_class.__name__, name)
        member(instance)
