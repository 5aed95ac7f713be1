"""
Domain layer - Core models, rules and contracts.

This layer contains descriptors, markers, configuration and errors.
It has no dependencies on other layers.
"""

from .config import ContainerConfig, InstantiationConfig, MarkerConfig
from .enums import DescriptorKind
from .exceptions import (
    AlreadyInitializedError,
    CircularDependencyError,
    ConstructionError,
    ContainerNotInitializedError,
    DestroyHookError,
    DIException,
    InitHookError,
    LifecycleHookError,
    MappingError,
    ProducerConstructionError,
    ResolutionExhaustedError,
    ServiceNotFoundError,
    UnsatisfiedDependencyError,
)
from .interfaces import IContainer, IInstantiationService, IResolutionEngine
from .markers import (
    PRODUCER,
    SERVICE,
    Marker,
    autowired,
    post_construct,
    pre_destroy,
    producer,
    service,
    startup,
)
from .models import ProducerDescriptor, ProducerSpec, ResolutionSlot, ServiceDescriptor
from .type_checks import is_assignable

__all__ = [
    # Config
    "ContainerConfig",
    "InstantiationConfig",
    "MarkerConfig",
    # Enums
    "DescriptorKind",
    # Exceptions
    "DIException",
    "AlreadyInitializedError",
    "CircularDependencyError",
    "ConstructionError",
    "ContainerNotInitializedError",
    "DestroyHookError",
    "InitHookError",
    "LifecycleHookError",
    "MappingError",
    "ProducerConstructionError",
    "ResolutionExhaustedError",
    "ServiceNotFoundError",
    "UnsatisfiedDependencyError",
    # Interfaces
    "IContainer",
    "IInstantiationService",
    "IResolutionEngine",
    # Markers
    "Marker",
    "SERVICE",
    "PRODUCER",
    "service",
    "producer",
    "post_construct",
    "pre_destroy",
    "autowired",
    "startup",
    # Models
    "ServiceDescriptor",
    "ProducerDescriptor",
    "ProducerSpec",
    "ResolutionSlot",
    # Helpers
    "is_assignable",
]
