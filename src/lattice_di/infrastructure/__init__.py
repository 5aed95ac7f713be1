"""
Infrastructure layer - External integrations.

This layer contains discovery and integrations with external frameworks and tools.
It depends on both Application and Domain layers.
"""

from . import discovery, fastapi_integration, testing

__all__ = [
    "discovery",
    "fastapi_integration",
    "testing",
]
