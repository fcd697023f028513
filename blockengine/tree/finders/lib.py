"""Index, sibling, descendant and move-position lookups over a snapshot.

Every finder returns a FindResult. "not-found" is a legitimate answer (no
next sibling, move already in place); "error" means the snapshot is
inconsistent or the request is invalid.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass

from blockengine.result import FindResult

from ..models import Node

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Placement:
    """Where a moved node lands: a parent and an index after source removal."""

    parent_id: str
    index: int


def _missing(kind: str, node_id: str) -> FindResult:
    return FindResult.failed(f"{kind} block not found: '{node_id}'")


# =============================================================================
# Children and Siblings
# =============================================================================


def find_child_index(parent_id: str, child_id: str, nodes: Mapping[str, Node]) -> FindResult[int]:
    """Position of `child_id` within `parent_id`'s children."""
    parent = nodes.get(parent_id)
    if parent is None:
        return _missing("Parent", parent_id)
    if child_id not in parent.child_ids:
        return FindResult.not_found()
    return FindResult.found(parent.child_ids.index(child_id))


def find_first_child(node_id: str, nodes: Mapping[str, Node]) -> FindResult[str]:
    node = nodes.get(node_id)
    if node is None:
        return _missing("Source", node_id)
    if not node.child_ids:
        return FindResult.not_found()
    return FindResult.found(node.child_ids[0])


def find_last_child(node_id: str, nodes: Mapping[str, Node]) -> FindResult[str]:
    node = nodes.get(node_id)
    if node is None:
        return _missing("Source", node_id)
    if not node.child_ids:
        return FindResult.not_found()
    return FindResult.found(node.child_ids[-1])


def _find_sibling(node_id: str, nodes: Mapping[str, Node], offset: int) -> FindResult[str]:
    node = nodes.get(node_id)
    if node is None:
        return _missing("Source", node_id)
    if node.parent_id is None:
        return FindResult.not_found()

    index = find_child_index(node.parent_id, node_id, nodes)
    if index.is_error:
        return index
    if not index.is_found:
        return FindResult.failed(f"Block '{node_id}' not found in parent '{node.parent_id}'")

    siblings = nodes[node.parent_id].child_ids
    target = index.data + offset
    if 0 <= target < len(siblings):
        return FindResult.found(siblings[target])
    return FindResult.not_found()


def find_next_sibling(node_id: str, nodes: Mapping[str, Node]) -> FindResult[str]:
    return _find_sibling(node_id, nodes, 1)


def find_previous_sibling(node_id: str, nodes: Mapping[str, Node]) -> FindResult[str]:
    return _find_sibling(node_id, nodes, -1)


# =============================================================================
# Ancestors and Descendants
# =============================================================================


def find_ancestors(node_id: str, nodes: Mapping[str, Node]) -> FindResult[list[str]]:
    """Ancestor ids from the nearest parent up to the top of the chain.

    Returns:
        found with the ids, not-found for a node without a parent, error on
        a missing parent or a circular parent chain.
    """
    node = nodes.get(node_id)
    if node is None:
        return _missing("Source", node_id)

    ancestors: list[str] = []
    visited = {node_id}
    current = node
    while current.parent_id is not None:
        if current.parent_id in visited:
            return FindResult.failed(f"Circular parent chain detected at '{current.parent_id}'")
        parent = nodes.get(current.parent_id)
        if parent is None:
            return _missing("Parent", current.parent_id)
        visited.add(parent.id)
        ancestors.append(parent.id)
        current = parent

    if not ancestors:
        return FindResult.not_found()
    return FindResult.found(ancestors)


def find_descendants(node_id: str, nodes: Mapping[str, Node]) -> FindResult[list[str]]:
    """Every id below `node_id`, in depth-first document order."""
    node = nodes.get(node_id)
    if node is None:
        return _missing("Source", node_id)
    if not node.child_ids:
        return FindResult.not_found()

    descendants: list[str] = []
    visited = {node_id}
    stack = list(reversed(node.child_ids))
    while stack:
        current_id = stack.pop()
        if current_id in visited:
            return FindResult.failed(f"Circular child reference detected at '{current_id}'")
        current = nodes.get(current_id)
        if current is None:
            return _missing("Child", current_id)
        visited.add(current_id)
        descendants.append(current_id)
        stack.extend(reversed(current.child_ids))

    return FindResult.found(descendants)


def find_last_descendant(node_id: str, nodes: Mapping[str, Node]) -> FindResult[str]:
    """Deepest last child below `node_id`."""
    node = nodes.get(node_id)
    if node is None:
        return _missing("Source", node_id)
    if not node.child_ids:
        return FindResult.not_found()

    visited = {node_id}
    current = node
    while current.child_ids:
        last_id = current.child_ids[-1]
        if last_id in visited:
            return FindResult.failed(f"Circular child reference detected at '{last_id}'")
        last = nodes.get(last_id)
        if last is None:
            return _missing("Child", last_id)
        visited.add(last_id)
        current = last
    return FindResult.found(current.id)


def find_next_parent_sibling(node_id: str, nodes: Mapping[str, Node]) -> FindResult[str]:
    """Next sibling of the nearest ancestor that has one."""
    ancestors = find_ancestors(node_id, nodes)
    if not ancestors.is_found:
        return ancestors
    for ancestor_id in ancestors.data:
        sibling = find_next_sibling(ancestor_id, nodes)
        if sibling.is_found or sibling.is_error:
            return sibling
    return FindResult.not_found()


# =============================================================================
# Document Order
# =============================================================================


def find_next_node(node_id: str, nodes: Mapping[str, Node]) -> FindResult[str]:
    """Next node in document order: first child, next sibling, or next parent sibling."""
    first = find_first_child(node_id, nodes)
    if first.is_found or first.is_error:
        return first
    sibling = find_next_sibling(node_id, nodes)
    if sibling.is_found or sibling.is_error:
        return sibling
    return find_next_parent_sibling(node_id, nodes)


def find_previous_node(node_id: str, nodes: Mapping[str, Node], root_id: str) -> FindResult[str]:
    """Previous node in document order, never returning the root."""
    node = nodes.get(node_id)
    if node is None:
        return _missing("Source", node_id)

    sibling = find_previous_sibling(node_id, nodes)
    if sibling.is_error:
        return sibling
    if sibling.is_found:
        last = find_last_descendant(sibling.data, nodes)
        if last.is_error:
            return last
        return last if last.is_found else sibling

    if node.parent_id is None or node.parent_id == root_id:
        return FindResult.not_found()
    return FindResult.found(node.parent_id)


# =============================================================================
# Move Positions
# =============================================================================


def _is_within(candidate_id: str, ancestor_id: str, nodes: Mapping[str, Node]) -> FindResult[bool]:
    """Whether `candidate_id` is `ancestor_id` or lies below it."""
    if candidate_id == ancestor_id:
        return FindResult.found(True)
    ancestors = find_ancestors(candidate_id, nodes)
    if ancestors.is_error:
        return ancestors
    return FindResult.found(ancestors.is_found and ancestor_id in ancestors.data)


def find_move_into_index(
    source_id: str, target_id: str, nodes: Mapping[str, Node]
) -> FindResult[Placement]:
    """Append position for moving `source_id` into `target_id`.

    Returns:
        found with the placement, not-found if the source already is a
        direct child of the target, error for identical ids, missing
        nodes, or a target inside the source subtree.
    """
    if source_id == target_id:
        return FindResult.failed("Source and target blocks are the same.")
    source = nodes.get(source_id)
    if source is None:
        return _missing("Source", source_id)
    target = nodes.get(target_id)
    if target is None:
        return _missing("Target", target_id)

    if source_id in target.child_ids:
        return FindResult.not_found()

    within = _is_within(target_id, source_id, nodes)
    if within.is_error:
        return within
    if within.data:
        return FindResult.failed("Cannot move a block into its own descendant.")

    return FindResult.found(Placement(target_id, len(target.child_ids)))


def _find_sibling_move_index(
    source_id: str, target_id: str, nodes: Mapping[str, Node], after: bool
) -> FindResult[Placement]:
    if source_id == target_id:
        return FindResult.failed("Source and target blocks are the same.")
    source = nodes.get(source_id)
    if source is None:
        return _missing("Source", source_id)
    target = nodes.get(target_id)
    if target is None:
        return _missing("Target", target_id)
    if target.parent_id is None:
        return FindResult.failed("Target block has no parent.")

    parent = nodes.get(target.parent_id)
    if parent is None:
        return _missing("Parent", target.parent_id)
    if target_id not in parent.child_ids:
        return FindResult.failed("Target block not found in parent.")

    within = _is_within(parent.id, source_id, nodes)
    if within.is_error:
        return within
    if within.data:
        return FindResult.failed("Cannot move a block into its own descendant.")

    t = parent.child_ids.index(target_id)
    if source.parent_id != parent.id or source_id not in parent.child_ids:
        return FindResult.found(Placement(parent.id, t + 1 if after else t))

    s = parent.child_ids.index(source_id)
    if after:
        if s == t + 1:
            return FindResult.not_found()
        return FindResult.found(Placement(parent.id, t if s < t else t + 1))

    if s == t - 1:
        return FindResult.not_found()
    return FindResult.found(Placement(parent.id, t - 1 if s < t else t))


def find_move_before_index(
    source_id: str, target_id: str, nodes: Mapping[str, Node]
) -> FindResult[Placement]:
    """Position for moving `source_id` directly before `target_id`.

    Indices are expressed after the source has been removed from its
    parent, so a same-parent move from the left shifts the target index
    down by one.

    Example:
        >>> # children [A, B, C, D], move D before B: s=3, t=1
        >>> find_move_before_index("D", "B", nodes).data
        Placement(parent_id='P', index=1)
    """
    return _find_sibling_move_index(source_id, target_id, nodes, after=False)


def find_move_after_index(
    source_id: str, target_id: str, nodes: Mapping[str, Node]
) -> FindResult[Placement]:
    """Position for moving `source_id` directly after `target_id`."""
    return _find_sibling_move_index(source_id, target_id, nodes, after=True)


__all__ = [
    "Placement",
    "find_child_index",
    "find_first_child",
    "find_last_child",
    "find_next_sibling",
    "find_previous_sibling",
    "find_ancestors",
    "find_descendants",
    "find_last_descendant",
    "find_next_parent_sibling",
    "find_next_node",
    "find_previous_node",
    "find_move_into_index",
    "find_move_before_index",
    "find_move_after_index",
]
