"""Node tree: the node model, snapshot providers, finders and operations.

The tree is addressed by id. Every node except the root appears in exactly
one parent's child list, and parent links never form a cycle. Mutations
never modify a snapshot; they return a NodePatch the host applies to its
store.

Example:
    >>> from blockengine.tree import InMemoryTree, Node
    >>> from blockengine.tree.operations import detach_node
    >>>
    >>> tree = InMemoryTree(nodes.values())
    >>> tree.apply_patch(detach_node("a", tree.get_all_nodes()).data)
"""

from .models import (
    DeletionTicket,
    Lifecycle,
    Node,
    NodePatch,
    apply_patch,
    get_lifecycle,
    is_reachable,
)
from .storage import InMemoryTree, TreeProvider

__all__ = [
    # Models
    "Node",
    "NodePatch",
    "Lifecycle",
    "DeletionTicket",
    "apply_patch",
    "is_reachable",
    "get_lifecycle",
    # Storage
    "TreeProvider",
    "InMemoryTree",
]
