"""
Testing utilities module.

Provides helpers and utilities for testing applications using lattice-di.
"""

from .utilities import TestContainer, create_mock_container, instances_by_type, service_types

__all__ = [
    "TestContainer",
    "create_mock_container",
    "service_types",
    "instances_by_type",
]
