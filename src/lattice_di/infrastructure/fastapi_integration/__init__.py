"""
FastAPI integration module.

Provides helpers for exposing lattice-di services to FastAPI endpoints.
"""

from .integration import (
    ContainerMiddleware,
    create_fastapi_dependency,
    create_request_dependency,
)

__all__ = [
    "create_fastapi_dependency",
    "create_request_dependency",
    "ContainerMiddleware",
]
