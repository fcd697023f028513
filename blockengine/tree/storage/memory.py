"""In-memory tree store."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from ..models import Node, NodePatch, apply_patch

logger = logging.getLogger(__name__)


class InMemoryTree:
    """Dictionary-backed TreeProvider.

    Every patch replaces the internal snapshot, so snapshots handed out
    earlier are never mutated.

    Example:
        >>> tree = InMemoryTree([Node(id="body", tag="body", definition_key="body")])
        >>> tree.get_node("body").tag
        'body'
    """

    def __init__(self, nodes: Iterable[Node] = ()):
        self._nodes: dict[str, Node] = {node.id: node for node in nodes}

    def get_node(self, node_id: str) -> Node | None:
        return self._nodes.get(node_id)

    def get_all_nodes(self) -> dict[str, Node]:
        return dict(self._nodes)

    def apply_patch(self, patch: NodePatch) -> None:
        self._nodes = apply_patch(self._nodes, patch)
        logger.debug(f"Applied patch touching {len(patch)} nodes")

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes
