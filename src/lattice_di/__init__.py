"""
lattice-di: Queue-based object-graph builder with lifecycle hooks and reloadable services.

Public API exports for the lattice-di package.
"""

# Application exports
from lattice_di.application.bootstrap import build_container, run_startup_methods
from lattice_di.application.container import ServiceContainer
from lattice_di.application.instantiation_service import InstantiationService
from lattice_di.application.mapper import ServiceMapper
from lattice_di.application.resolution_engine import ResolutionEngine

# Domain exports
from lattice_di.domain.config import ContainerConfig, InstantiationConfig, MarkerConfig
from lattice_di.domain.enums import DescriptorKind
from lattice_di.domain.exceptions import (
    AlreadyInitializedError,
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
from lattice_di.domain.markers import (
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
from lattice_di.domain.models import ProducerDescriptor, ServiceDescriptor

# Infrastructure exports
from lattice_di.infrastructure.discovery import run, scan_package

__version__ = "0.1.0"

__all__ = [
    # Entry points
    "build_container",
    "run",
    "run_startup_methods",
    "scan_package",
    # Components
    "ServiceContainer",
    "ResolutionEngine",
    "InstantiationService",
    "ServiceMapper",
    # Config
    "ContainerConfig",
    "InstantiationConfig",
    "MarkerConfig",
    # Models
    "DescriptorKind",
    "ServiceDescriptor",
    "ProducerDescriptor",
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
    # Exceptions
    "DIException",
    "AlreadyInitializedError",
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
]
