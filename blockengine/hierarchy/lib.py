"""Hierarchy rules approving every insertion and move.

Each predicate returns a CheckResult: `passed` answers the rule's question,
while a failed result means the snapshot could not be evaluated (missing
node, circular parent chain) and must not be read as "rule passed".
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from blockengine.catalog import Catalog, ElementDefinition
from blockengine.result import CheckResult, FindResult
from blockengine.tree import Node
from blockengine.tree.finders import find_descendants

logger = logging.getLogger(__name__)


# =============================================================================
# Predicates
# =============================================================================


def is_child_allowed(parent_def: ElementDefinition, tag: str) -> CheckResult:
    """Whether `tag` may be a child of the parent element.

    Example:
        >>> is_child_allowed(ol_definition, "li").passed
        True
    """
    if parent_def.allowed_children is None:
        return CheckResult.ok(True)
    return CheckResult.ok(tag in parent_def.allowed_children)


def has_forbidden_ancestor(
    child_def: ElementDefinition, parent_node: Node, nodes: Mapping[str, Node]
) -> CheckResult:
    """Whether `parent_node` or any of its ancestors carries a forbidden tag.

    Args:
        child_def: Definition of the element being placed.
        parent_node: Prospective parent; included in the walk.
        nodes: Snapshot used to follow parent links.

    Returns:
        passed=True when a forbidden ancestor exists. Fails on a dangling
        parent id or a circular parent chain.
    """
    forbidden = child_def.forbidden_ancestors
    if not forbidden:
        return CheckResult.ok(False)

    visited: set[str] = set()
    current: Node | None = parent_node
    while current is not None:
        if current.id in visited:
            return CheckResult.fail(f"Circular parent chain detected at '{current.id}'")
        visited.add(current.id)

        if current.tag in forbidden:
            return CheckResult.ok(True)
        if current.parent_id is None:
            break

        parent = nodes.get(current.parent_id)
        if parent is None:
            return CheckResult.fail(f"Ancestor block not found: '{current.parent_id}'")
        current = parent

    return CheckResult.ok(False)


def _child_tags(
    parent_node: Node, nodes: Mapping[str, Node], exclude_id: str | None
) -> FindResult[list[str]]:
    """Tags of the parent's children; fails on a dangling child id."""
    tags: list[str] = []
    for child_id in parent_node.child_ids:
        if child_id == exclude_id:
            continue
        child = nodes.get(child_id)
        if child is None:
            return FindResult.failed(f"Child block not found: '{child_id}'")
        tags.append(child.tag)
    return FindResult.found(tags)


def has_exceeded_unique_limit(
    parent_def: ElementDefinition,
    parent_node: Node,
    tag: str,
    nodes: Mapping[str, Node],
    exclude_id: str | None = None,
) -> CheckResult:
    """Whether the parent already holds as many `tag` children as allowed.

    `exclude_id` is left out of the count so a move can be re-validated
    while the source still sits under the parent.
    """
    limit = (parent_def.unique_children or {}).get(tag)
    if limit is None:
        return CheckResult.ok(False)

    child_tags = _child_tags(parent_node, nodes, exclude_id)
    if child_tags.is_error:
        return CheckResult.fail(child_tags.error)
    tags = child_tags.data

    return CheckResult.ok(tags.count(tag) >= limit)


def has_violated_ordered_children(
    parent_def: ElementDefinition,
    parent_node: Node,
    tag: str,
    nodes: Mapping[str, Node],
    index: int,
    exclude_id: str | None = None,
) -> CheckResult:
    """Whether inserting `tag` at `index` breaks the declared group order.

    The projected child-tag sequence is walked left to right with a pointer
    into the ordered groups that may only move forward. A tag found in no
    group at or after the pointer is a violation.

    Example:
        >>> # table groups: [caption], [thead], [tbody, tr]
        >>> has_violated_ordered_children(table_def, table, "caption", nodes, 1).passed
        True
    """
    groups = parent_def.ordered_children
    if not groups:
        return CheckResult.ok(False)

    child_tags = _child_tags(parent_node, nodes, exclude_id)
    if child_tags.is_error:
        return CheckResult.fail(child_tags.error)
    tags = child_tags.data

    position = max(0, min(index, len(tags)))
    tags.insert(position, tag)

    pointer = 0
    for child_tag in tags:
        group_index = next(
            (i for i in range(pointer, len(groups)) if child_tag in groups[i]), None
        )
        if group_index is None:
            logger.debug(f"Tag '{child_tag}' breaks child order of '{parent_node.tag}'")
            return CheckResult.ok(True)
        pointer = group_index

    return CheckResult.ok(False)


# =============================================================================
# Composition
# =============================================================================


def passes_all_rules(
    source_node: Node,
    target_parent: Node,
    target_parent_def: ElementDefinition,
    source_def: ElementDefinition,
    nodes: Mapping[str, Node],
    insertion_index: int,
) -> CheckResult:
    """Run the four hierarchy predicates with short-circuit AND.

    Args:
        source_node: Node being inserted or moved.
        target_parent: Prospective parent.
        target_parent_def: Element definition of the parent's tag.
        source_def: Element definition of the source's tag.
        nodes: Snapshot the rules are evaluated against.
        insertion_index: Index among the parent's children with the source
            itself left out.

    Returns:
        passed=True only when every rule allows the placement. The first
        evaluation error is returned as is.
    """
    tag = source_node.tag

    allowed = is_child_allowed(target_parent_def, tag)
    if not allowed.success or not allowed.passed:
        return allowed

    forbidden = has_forbidden_ancestor(source_def, target_parent, nodes)
    if not forbidden.success:
        return forbidden
    if forbidden.passed:
        return CheckResult.ok(False)

    exceeded = has_exceeded_unique_limit(
        target_parent_def, target_parent, tag, nodes, exclude_id=source_node.id
    )
    if not exceeded.success:
        return exceeded
    if exceeded.passed:
        return CheckResult.ok(False)

    violated = has_violated_ordered_children(
        target_parent_def,
        target_parent,
        tag,
        nodes,
        insertion_index,
        exclude_id=source_node.id,
    )
    if not violated.success:
        return violated
    return CheckResult.ok(not violated.passed)


def validate_placement(node_id: str, catalog: Catalog, nodes: Mapping[str, Node]) -> CheckResult:
    """Re-run every rule for a node at its current position."""
    node = nodes.get(node_id)
    if node is None:
        return CheckResult.fail(f"Block not found: '{node_id}'")
    if node.parent_id is None:
        return CheckResult.fail(f"Block '{node_id}' has no parent.")

    parent = nodes.get(node.parent_id)
    if parent is None:
        return CheckResult.fail(f"Parent block not found: '{node.parent_id}'")
    if node_id not in parent.child_ids:
        return CheckResult.fail(f"Block '{node_id}' not found in parent '{parent.id}'")

    parent_def = catalog.elements.require(parent.tag)
    if not parent_def.success:
        return CheckResult.fail(parent_def.error)
    source_def = catalog.elements.require(node.tag)
    if not source_def.success:
        return CheckResult.fail(source_def.error)

    return passes_all_rules(
        node,
        parent,
        parent_def.data,
        source_def.data,
        nodes,
        parent.child_ids.index(node_id),
    )


def validate_subtree_placement(
    node_id: str, catalog: Catalog, nodes: Mapping[str, Node]
) -> CheckResult:
    """Re-run every rule for a node and everything below it.

    Used after a node changes in place (e.g. its tag), which can break the
    rules of its own position and of any descendant. A node without a
    parent, such as the root, is not checked itself. The first failed or
    violated placement is returned.
    """
    node = nodes.get(node_id)
    if node is None:
        return CheckResult.fail(f"Block not found: '{node_id}'")

    descendants = find_descendants(node_id, nodes)
    if descendants.is_error:
        return CheckResult.fail(descendants.error)

    checked = [node_id] if node.parent_id is not None else []
    for checked_id in [*checked, *(descendants.data or [])]:
        result = validate_placement(checked_id, catalog, nodes)
        if not result.success or not result.passed:
            return result
    return CheckResult.ok(True)


__all__ = [
    "is_child_allowed",
    "has_forbidden_ancestor",
    "has_exceeded_unique_limit",
    "has_violated_ordered_children",
    "passes_all_rules",
    "validate_placement",
    "validate_subtree_placement",
]
