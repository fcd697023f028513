"""Snapshot providers for the node tree.

Available providers:
- TreeProvider: Protocol the host's authoritative store implements
- InMemoryTree: Dictionary-backed store for hosts and tests
"""

from .memory import InMemoryTree
from .protocol import TreeProvider

__all__ = [
    "TreeProvider",
    "InMemoryTree",
]
