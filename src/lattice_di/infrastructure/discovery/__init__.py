"""
Discovery module.

Finds candidate classes by importing a package tree, and launches applications from them.
"""

from .launcher import run
from .scanner import scan_package

__all__ = [
    "scan_package",
    "run",
]
