import sys
from typing import Iterable, Optional, Type

from lattice_di.application import ServiceContainer, build_container, run_startup_methods
from lattice_di.domain import ContainerConfig
from lattice_di.infrastructure.discovery.scanner import scan_package


def run(
    startup_class: Type,
    classes: Optional[Iterable[Type]] = None,
    package: Optional[str] = None,
    config: Optional[ContainerConfig] = None,
) -> ServiceContainer:
    """Build a container and run the startup class's ``@startup`` methods.

    Args:
        startup_class: A service class whose startup methods run once the graph is built.
        classes: Candidate classes. When omitted, ``package`` is scanned.
        package: Package to scan. Defaults to the startup class's package.
        config: Optional configuration.

    Returns:
        The initialized container.

    Example:
        >>> @service
        ... class Application:
        ...     def __init__(self, users: UserService):
        ...         self.users = users
        ...
        ...     @startup
        ...     def start(self):
        ...         self.users.warm_up()
        >>>
        >>> container = run(Application)
    """
    if classes is None:
        if package is None:
            module = sys.modules[startup_class.__module__]
            package = module.__package__ or module.__name__
        classes = scan_package(package)

    container = build_container(classes, config)
    run_startup_methods(container, startup_class)
    return container
