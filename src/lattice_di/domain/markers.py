"""Markers and the decorators that attach them.

Markers are plain values: a class carries the marker that classified it as a
service, and a method carries the marker that classified it as a producer.
Which markers count is decided by :class:`~lattice_di.domain.config.MarkerConfig`.
"""

from typing import Any, Callable, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")

SERVICE_MARKER_ATTR = "__lattice_marker__"
PRODUCER_MARKER_ATTR = "__lattice_producer__"
POST_CONSTRUCT_ATTR = "__lattice_post_construct__"
PRE_DESTROY_ATTR = "__lattice_pre_destroy__"
AUTOWIRED_ATTR = "__lattice_autowired__"
STARTUP_ATTR = "__lattice_startup__"


class Marker(BaseModel):
    """Annotation-equivalent value used to classify services and producers.

    Attributes:
        name: Human readable marker name. Markers compare by value.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Name of the marker.")

    def __str__(self) -> str:
        return self.name


SERVICE = Marker(name="service")
PRODUCER = Marker(name="producer")


def unwrap_function(member: Any) -> Any:
    """Return the plain function behind a classmethod/staticmethod."""
    return getattr(member, "__func__", member)


def service(cls: Optional[type] = None, *, marker: Marker = SERVICE) -> Any:
    """Mark a class as a container-managed service.

    Example:
        >>> @service
        ... class Repository:
        ...     pass
        >>>
        >>> @service(marker=Marker(name="controller"))
        ... class UserController:
        ...     def __init__(self, repository: Repository):
        ...         self.repository = repository
    """

    def decorator(target: type) -> type:
        setattr(target, SERVICE_MARKER_ATTR, marker)
        return target

    if cls is None:
        return decorator
    return decorator(cls)


def producer(func: Optional[Callable] = None, *, marker: Marker = PRODUCER) -> Any:
    """Mark a zero-argument method whose return value becomes a managed service.

    The method must declare a return annotation; it is used as the produced type.
    """

    def decorator(target: Callable) -> Callable:
        setattr(target, PRODUCER_MARKER_ATTR, marker)
        return target

    if func is None:
        return decorator
    return decorator(func)


def _flag(attribute: str) -> Callable[[T], T]:
    def decorator(member: T) -> T:
        setattr(unwrap_function(member), attribute, True)
        return member

    return decorator


post_construct = _flag(POST_CONSTRUCT_ATTR)
post_construct.__doc__ = "Mark a zero-argument method to run right after construction."

pre_destroy = _flag(PRE_DESTROY_ATTR)
pre_destroy.__doc__ = "Mark a zero-argument method to run before the instance is discarded."

autowired = _flag(AUTOWIRED_ATTR)
autowired.__doc__ = "Mark a classmethod or staticmethod as the constructor used for injection."

startup = _flag(STARTUP_ATTR)
startup.__doc__ = "Mark a zero-argument method of the startup class to run after bootstrap."


def has_flag(member: Any, attribute: str) -> bool:
    return bool(getattr(unwrap_function(member), attribute, False))
