"""Copy-on-write tree mutations.

Every operation reads an immutable snapshot and returns a NodePatch; none of
them touches the store. Hierarchy rules are not checked here; commands run
them before committing a patch.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from uuid import uuid4

from blockengine.catalog import NodeDefinition, StyleTree
from blockengine.result import OperateResult, ValidateResult

from ..finders import Placement, find_descendants
from ..models import DeletionTicket, Node, NodePatch, apply_patch, is_reachable

logger = logging.getLogger(__name__)

IdFactory = Callable[[], str]


def new_node_id() -> str:
    return str(uuid4())


@dataclass(frozen=True)
class TreeChange:
    """Patch produced by an operation and the node id it concerns."""

    node_id: str
    patch: NodePatch


@dataclass(frozen=True)
class Deletion:
    """Detach patch of a delete and the ticket redeemed by the purge."""

    patch: NodePatch
    ticket: DeletionTicket


def merge_styles(base: StyleTree, override: StyleTree | None) -> StyleTree:
    """Deep-merge two style trees; values in `override` win per property."""
    merged = copy.deepcopy(base)
    for device, orientations in (override or {}).items():
        for orientation, pseudos in orientations.items():
            for pseudo, properties in pseudos.items():
                target = merged.setdefault(device, {}).setdefault(orientation, {})
                target.setdefault(pseudo, {}).update(properties)
    return merged


# =============================================================================
# Creation
# =============================================================================


def create_node(
    definition: NodeDefinition,
    parent_id: str | None = None,
    tag: str | None = None,
    styles: StyleTree | None = None,
    attributes: Mapping[str, str] | None = None,
    id_factory: IdFactory = new_node_id,
) -> ValidateResult[Node]:
    """Build an unattached node from a definition.

    Args:
        definition: Blueprint providing the default tag, styles and attributes.
        parent_id: Intended parent, recorded on the node.
        tag: Tag to render as; must be permitted by the definition.
        styles: Style overrides merged over the definition defaults.
        attributes: Attribute overrides merged over the definition defaults.
        id_factory: Id generator.

    Returns:
        ValidateResult with the new node, or failing for a forbidden tag.
    """
    chosen = tag or definition.default_tag
    if not definition.permits_tag(chosen):
        return ValidateResult.fail(
            f"Tag '{chosen}' is not permitted by node definition '{definition.key}'"
        )

    node = Node(
        id=id_factory(),
        definition_key=definition.key,
        tag=chosen,
        parent_id=parent_id,
        styles=merge_styles(definition.default_styles, styles),
        attributes={**definition.default_attributes, **(attributes or {})},
    )
    return ValidateResult.ok(node)


# =============================================================================
# Linking
# =============================================================================


def attach_node(
    node: Node, parent_id: str, index: int | None, nodes: Mapping[str, Node]
) -> OperateResult[NodePatch]:
    """Insert `node` into `parent_id`'s children at `index` (append when None).

    Existing occurrences of the id under that parent are removed first and
    the index is clamped to the valid range.
    """
    parent = nodes.get(parent_id)
    if parent is None:
        return OperateResult.fail(f"Parent block not found: '{parent_id}'")
    if node.id == parent_id:
        return OperateResult.fail("Cannot attach a block to itself.")

    children = [child_id for child_id in parent.child_ids if child_id != node.id]
    position = len(children) if index is None else max(0, min(index, len(children)))
    children.insert(position, node.id)

    return OperateResult.ok(
        {
            parent_id: parent.model_copy(update={"child_ids": tuple(children)}),
            node.id: node.model_copy(update={"parent_id": parent_id}),
        }
    )


def detach_node(node_id: str, nodes: Mapping[str, Node]) -> OperateResult[NodePatch]:
    """Unlink `node_id` from its parent; its data stays in the store."""
    node = nodes.get(node_id)
    if node is None:
        return OperateResult.fail(f"Block not found: '{node_id}'")
    if node.parent_id is None:
        return OperateResult.fail(f"Block '{node_id}' is not attached.")

    parent = nodes.get(node.parent_id)
    if parent is None:
        return OperateResult.fail(f"Parent block not found: '{node.parent_id}'")

    children = tuple(child_id for child_id in parent.child_ids if child_id != node_id)
    return OperateResult.ok(
        {
            parent.id: parent.model_copy(update={"child_ids": children}),
            node_id: node.model_copy(update={"parent_id": None}),
        }
    )


def add_node(
    node: Node, parent_id: str, index: int | None, nodes: Mapping[str, Node]
) -> OperateResult[NodePatch]:
    """Attach a newly created node, refusing ids already in the store."""
    if node.id in nodes:
        return OperateResult.fail(f"Block id already exists: '{node.id}'")
    return attach_node(node, parent_id, index, nodes)


def add_nodes(
    new_nodes: Sequence[Node],
    parent_id: str,
    index: int | None,
    nodes: Mapping[str, Node],
) -> OperateResult[NodePatch]:
    """Attach several new nodes consecutively, starting at `index`."""
    snapshot = dict(nodes)
    patch: NodePatch = {}
    for offset, node in enumerate(new_nodes):
        position = None if index is None else index + offset
        result = add_node(node, parent_id, position, snapshot)
        if not result.success:
            return result
        patch.update(result.data)
        snapshot = apply_patch(snapshot, result.data)
    return OperateResult.ok(patch)


# =============================================================================
# Cloning
# =============================================================================


def clone_subtree(
    node_id: str, nodes: Mapping[str, Node], id_factory: IdFactory = new_node_id
) -> OperateResult[TreeChange]:
    """Deep-copy the subtree rooted at `node_id` under fresh ids.

    Internal child references are rewritten to the new ids. The clone root
    has no parent and nothing is attached.
    """
    root = nodes.get(node_id)
    if root is None:
        return OperateResult.fail(f"Block not found: '{node_id}'")

    descendants = find_descendants(node_id, nodes)
    if descendants.is_error:
        return OperateResult.fail(descendants.error)

    originals = [node_id, *(descendants.data or [])]
    id_map = {original: id_factory() for original in originals}
    new_parents: dict[str, str | None] = {id_map[node_id]: None}
    for original_id in originals:
        for child_id in nodes[original_id].child_ids:
            new_parents[id_map[child_id]] = id_map[original_id]

    patch: NodePatch = {}
    for original_id in originals:
        original = nodes[original_id]
        new_id = id_map[original_id]
        patch[new_id] = original.model_copy(
            update={
                "id": new_id,
                "parent_id": new_parents[new_id],
                "child_ids": tuple(id_map[child] for child in original.child_ids),
                "styles": copy.deepcopy(original.styles),
                "attributes": dict(original.attributes),
            }
        )

    return OperateResult.ok(TreeChange(id_map[node_id], patch))


def duplicate_subtree(
    node_id: str, nodes: Mapping[str, Node], id_factory: IdFactory = new_node_id
) -> OperateResult[TreeChange]:
    """Clone a subtree and attach the clone right after the original."""
    original = nodes.get(node_id)
    if original is None:
        return OperateResult.fail(f"Block not found: '{node_id}'")
    if original.parent_id is None:
        return OperateResult.fail(f"Block '{node_id}' has no parent to duplicate into.")

    cloned = clone_subtree(node_id, nodes, id_factory)
    if not cloned.success:
        return cloned

    parent = nodes.get(original.parent_id)
    if parent is None:
        return OperateResult.fail(f"Parent block not found: '{original.parent_id}'")

    snapshot = apply_patch(nodes, cloned.data.patch)
    clone_root = snapshot[cloned.data.node_id]
    attached = attach_node(
        clone_root, parent.id, parent.child_ids.index(node_id) + 1, snapshot
    )
    if not attached.success:
        return OperateResult.fail(attached.error)

    return OperateResult.ok(
        TreeChange(cloned.data.node_id, {**cloned.data.patch, **attached.data})
    )


# =============================================================================
# Moving and Replacing
# =============================================================================


def move_node(
    source_id: str, placement: Placement, nodes: Mapping[str, Node]
) -> OperateResult[NodePatch]:
    """Detach `source_id` and attach it at `placement`.

    The placement index is interpreted after the source has been removed.
    """
    detached = detach_node(source_id, nodes)
    if not detached.success:
        return detached

    snapshot = apply_patch(nodes, detached.data)
    attached = attach_node(snapshot[source_id], placement.parent_id, placement.index, snapshot)
    if not attached.success:
        return attached

    return OperateResult.ok({**detached.data, **attached.data})


def overwrite_node(
    target_id: str,
    source_id: str,
    nodes: Mapping[str, Node],
    id_factory: IdFactory = new_node_id,
) -> OperateResult[TreeChange]:
    """Replace the subtree at `target_id` with a fresh clone of `source_id`.

    The clone takes the target's position; the target subtree is removed.
    """
    target = nodes.get(target_id)
    if target is None:
        return OperateResult.fail(f"Target block not found: '{target_id}'")
    if target.parent_id is None:
        return OperateResult.fail(f"Block '{target_id}' has no parent.")
    parent = nodes.get(target.parent_id)
    if parent is None:
        return OperateResult.fail(f"Parent block not found: '{target.parent_id}'")

    descendants = find_descendants(target_id, nodes)
    if descendants.is_error:
        return OperateResult.fail(descendants.error)
    removed = {target_id, *(descendants.data or [])}
    if source_id in removed:
        return OperateResult.fail("Cannot overwrite a block with its own subtree.")

    cloned = clone_subtree(source_id, nodes, id_factory)
    if not cloned.success:
        return cloned

    index = parent.child_ids.index(target_id)
    snapshot = apply_patch(nodes, cloned.data.patch)
    detached = detach_node(target_id, snapshot)
    if not detached.success:
        return OperateResult.fail(detached.error)
    snapshot = apply_patch(snapshot, detached.data)

    attached = attach_node(snapshot[cloned.data.node_id], parent.id, index, snapshot)
    if not attached.success:
        return OperateResult.fail(attached.error)

    patch: NodePatch = {**cloned.data.patch, **detached.data, **attached.data}
    for removed_id in removed:
        patch[removed_id] = None
    return OperateResult.ok(TreeChange(cloned.data.node_id, patch))


# =============================================================================
# Deletion
# =============================================================================


def delete_subtree(node_id: str, nodes: Mapping[str, Node]) -> OperateResult[Deletion]:
    """First deletion phase: detach and issue a ticket for the later purge."""
    detached = detach_node(node_id, nodes)
    if not detached.success:
        return OperateResult.fail(detached.error)

    descendants = find_descendants(node_id, nodes)
    if descendants.is_error:
        return OperateResult.fail(descendants.error)

    ticket = DeletionTicket(
        node_id=node_id,
        parent_id=nodes[node_id].parent_id,
        subtree_ids=frozenset({node_id, *(descendants.data or [])}),
    )
    return OperateResult.ok(Deletion(detached.data, ticket))


def _purge_candidates(ticket: DeletionTicket, nodes: Mapping[str, Node]) -> list[str]:
    """Ticket ids still stored plus everything attached below them since."""
    candidates: list[str] = []
    seen: set[str] = set()
    stack = sorted(ticket.subtree_ids, reverse=True)
    while stack:
        node_id = stack.pop()
        if node_id in seen:
            continue
        seen.add(node_id)
        node = nodes.get(node_id)
        if node is None:
            logger.debug(f"Purge skipped '{node_id}': already removed")
            continue
        candidates.append(node_id)
        stack.extend(reversed(node.child_ids))
    return candidates


def purge_subtree(
    ticket: DeletionTicket, nodes: Mapping[str, Node], root_id: str
) -> NodePatch:
    """Second deletion phase: remove the detached subtree from the store.

    The subtree is walked again in the current snapshot, so nodes created
    or moved below it after the detach go with it. Ids already gone are
    skipped and ids reachable from the root again are kept, so repeating a
    purge is a no-op.
    """
    patch: NodePatch = {}
    for node_id in _purge_candidates(ticket, nodes):
        if is_reachable(node_id, nodes, root_id):
            logger.debug(f"Purge skipped '{node_id}': reachable from '{root_id}'")
            continue
        patch[node_id] = None
    return patch


__all__ = [
    "IdFactory",
    "TreeChange",
    "Deletion",
    "new_node_id",
    "merge_styles",
    "create_node",
    "attach_node",
    "detach_node",
    "add_node",
    "add_nodes",
    "clone_subtree",
    "duplicate_subtree",
    "move_node",
    "overwrite_node",
    "delete_subtree",
    "purge_subtree",
]
