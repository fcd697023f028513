"""Snapshot provider protocol for the node tree.

Defines the interface the authoritative store must implement.
"""

from typing import Protocol

from ..models import Node, NodePatch


class TreeProvider(Protocol):
    """Protocol defining the snapshot interface consumed by commands.

    The store serializes writes from concurrent callers; the engine only
    reads snapshots and hands back patches.
    """

    def get_node(self, node_id: str) -> Node | None:
        """Get a node by id.

        Args:
            node_id: Node identifier.

        Returns:
            Node if stored, None otherwise.
        """
        ...

    def get_all_nodes(self) -> dict[str, Node]:
        """Get a snapshot of every stored node keyed by id."""
        ...

    def apply_patch(self, patch: NodePatch) -> None:
        """Apply a patch; None values remove their id."""
        ...
