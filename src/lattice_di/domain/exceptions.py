from typing import Any, List, Optional, Type


def _name(cls: Any) -> str:
    return getattr(cls, "__name__", repr(cls))


class DIException(Exception):
    """Base exception for DI-related errors."""


class CircularDependencyError(DIException):
    """Raised when a circular dependency is detected.

    Attributes:
        dependency_chain: List of types involved in the circular dependency.
    """

    def __init__(self, dependency_chain: List[Type]) -> None:
        self.dependency_chain = dependency_chain
        message = f"Circular dependency detected: {' -> '.join([_name(cls) for cls in dependency_chain])}"
        super().__init__(message)


class UnsatisfiedDependencyError(DIException):
    """Raised when a required type has no candidate anywhere in the input.

    Attributes:
        dependency_type: The type nobody provides.
        requester: The type whose constructor requires it.
    """

    def __init__(self, dependency_type: Type, requester: Type) -> None:
        self.dependency_type = dependency_type
        self.requester = requester
        super().__init__(f"Unsatisfied dependency: {_name(dependency_type)} required by {_name(requester)}")


class ResolutionExhaustedError(DIException):
    """Raised when the resolution loop exceeds its iteration bound.

    This happens for real cycles as well as for dependency chains deeper than
    the configured bound allows.

    Attributes:
        max_iterations: The bound that was crossed.
        pending: Types still waiting in the queue.
        cycle: A dependency cycle among the pending types, if one was found.
    """

    def __init__(self, max_iterations: int, pending: List[Type], cycle: Optional[List[Type]] = None) -> None:
        self.max_iterations = max_iterations
        self.pending = pending
        self.cycle = cycle
        message = (
            f"Max number of iterations ({max_iterations}) exceeded for instantiation. "
            f"Pending: {', '.join(_name(cls) for cls in pending)}"
        )
        if cycle:
            message += f". Possible cycle: {' -> '.join(_name(cls) for cls in cycle)}"
        super().__init__(message)


class ConstructionError(DIException):
    """Raised when a constructor could not produce an instance.

    This occurs when:
    - The number of arguments does not match the constructor's dependencies.
    - The constructor raised.

    Attributes:
        service_type: The type that could not be built.
        reason: Optional reason for the failure.
    """

    def __init__(self, service_type: Type, reason: Optional[str] = None) -> None:
        self.service_type = service_type
        self.reason = reason
        message = f"Failed to create instance of {_name(service_type)}"
        if reason:
            message += f". Reason: {reason}"
        super().__init__(message)


class ProducerConstructionError(ConstructionError):
    """Raised when a producer method could not produce its value."""


class LifecycleHookError(DIException):
    """Raised when an init or destroy hook fails.

    Attributes:
        service_type: The type whose hook failed.
        hook: Name of the hook method.
        reason: Optional reason for the failure.
    """

    phase = "lifecycle"

    def __init__(self, service_type: Type, hook: str, reason: Optional[str] = None) -> None:
        self.service_type = service_type
        self.hook = hook
        self.reason = reason
        message = f"{self.phase.capitalize()} hook '{hook}' failed for {_name(service_type)}"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class InitHookError(LifecycleHookError):
    """Raised when the post-construct hook fails. The instance was built."""

    phase = "init"


class DestroyHookError(LifecycleHookError):
    """Raised when the pre-destroy hook fails. The instance is cleared anyway."""

    phase = "destroy"


class AlreadyInitializedError(DIException):
    """Raised when a container is initialized a second time."""

    def __init__(self) -> None:
        super().__init__("Container is already initialized")


class ContainerNotInitializedError(DIException):
    """Raised when a container operation requires a finished init."""

    def __init__(self) -> None:
        super().__init__("Container is not initialized")


class ServiceNotFoundError(DIException):
    """Raised when an operation needs a service the container does not hold.

    Attributes:
        target: The requested type or instance.
    """

    def __init__(self, target: Any) -> None:
        self.target = target
        label = _name(target) if isinstance(target, type) else f"instance of {type(target).__name__}"
        super().__init__(f"No service registered for {label}")


class MappingError(DIException):
    """Raised when a class cannot be mapped to a service descriptor.

    This occurs when:
    - More than one constructor is marked for injection.
    - A constructor parameter lacks a type hint.
    - A hook or producer method has an invalid signature.

    Attributes:
        cls: The class being mapped.
        reason: Why the mapping was rejected.
    """

    def __init__(self, cls: Type, reason: str) -> None:
        self.cls = cls
        self.reason = reason
        super().__init__(f"Cannot map {_name(cls)}: {reason}")
