import importlib
import inspect
import logging
import pkgutil
from types import ModuleType
from typing import Dict, List, Type, Union

logger = logging.getLogger(__name__)


def _import_modules(package: ModuleType) -> List[ModuleType]:
    modules = [package]
    search_path = getattr(package, "__path__", None)
    if search_path is None:
        return modules
    for module_info in pkgutil.walk_packages(search_path, prefix=f"{package.__name__}."):
        modules.append(importlib.import_module(module_info.name))
    return modules


def scan_package(package: Union[str, ModuleType]) -> List[Type]:
    """Import a module or package tree and collect the classes defined in it.

    Classes imported from elsewhere are skipped; each class appears once.

    Args:
        package: A module object or a dotted module name.

    Returns:
        Classes in import order.

    Example:
        >>> classes = scan_package("my_app.services")
        >>> container = build_container(classes)
    """
    if isinstance(package, str):
        package = importlib.import_module(package)

    found: Dict[int, Type] = {}
    for module in _import_modules(package):
        for _, cls in inspect.getmembers(module, inspect.isclass):
            if cls.__module__ == module.__name__:
                found.setdefault(id(cls), cls)

    logger.debug("Discovered %d classes in %s", len(found), package.__name__)
    return list(found.values())
