"""
Application layer - Use cases and orchestration.

This layer contains the use cases that orchestrate domain objects.
It depends only on the Domain layer.
"""

from .bootstrap import build_container, run_startup_methods
from .container import ServiceContainer
from .cycle_diagnoser import CycleDiagnoser
from .instantiation_service import InstantiationService
from .mapper import ServiceMapper
from .resolution_engine import ResolutionEngine

__all__ = [
    "ServiceContainer",
    "ResolutionEngine",
    "InstantiationService",
    "CycleDiagnoser",
    "ServiceMapper",
    "build_container",
    "run_startup_methods",
]
