"""Commands consumed by the UI layer.

Each command reads one snapshot from the context's tree provider, runs its
validation, lookup and rule steps through a ResultPipeline and returns an
OperateResult. Nothing is written to the store; on success the result
carries the minimal patch the host applies. Any failure leaves the store
untouched.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from blockengine.catalog import StyleTree
from blockengine.hierarchy import (
    passes_all_rules,
    validate_placement,
    validate_subtree_placement,
)
from blockengine.result import (
    FindResult,
    OperateResult,
    PickResult,
    ResultPipeline,
    ValidateResult,
)
from blockengine.style import get_default_style_context, resolve_style, validate_style
from blockengine.style.update import reset_style as reset_style_tree
from blockengine.style.update import update_style
from blockengine.tree import (
    DeletionTicket,
    Lifecycle,
    Node,
    NodePatch,
    apply_patch,
    get_lifecycle,
)
from blockengine.tree.finders import (
    Placement,
    find_move_after_index,
    find_move_before_index,
    find_move_into_index,
)
from blockengine.tree.operations import (
    Deletion,
    TreeChange,
    add_node,
    create_node as build_node,
    delete_subtree,
    duplicate_subtree,
    move_node as move_subtree,
    overwrite_node,
    purge_subtree,
)

from .models import CommandContext, Finalization, MoveMode
from .protocol import ClipboardPort

logger = logging.getLogger(__name__)


# =============================================================================
# Validators and Pickers
# =============================================================================


def validate_node_id(node_id: object) -> ValidateResult[str]:
    if not isinstance(node_id, str) or not node_id.strip():
        return ValidateResult.fail(f"Invalid block id: {node_id!r}")
    return ValidateResult.ok(node_id)


def validate_definition_key(key: object) -> ValidateResult[str]:
    if not isinstance(key, str) or not key.strip():
        return ValidateResult.fail(f"Invalid node definition key: {key!r}")
    return ValidateResult.ok(key)


def validate_attribute_key(key: object) -> ValidateResult[str]:
    if not isinstance(key, str) or not key.strip() or any(char.isspace() for char in key):
        return ValidateResult.fail(f"Invalid attribute key: {key!r}")
    return ValidateResult.ok(key)


def validate_attribute_value(value: object) -> ValidateResult[str]:
    """Any string is a valid attribute value; "" clears it."""
    if not isinstance(value, str):
        return ValidateResult.fail(f"Invalid attribute value: {value!r}")
    return ValidateResult.ok(value)


def validate_attributes(attributes: object) -> ValidateResult[dict[str, str]]:
    """Validate every key and value of an attribute mapping."""
    if not isinstance(attributes, Mapping):
        return ValidateResult.fail(f"Invalid attributes: {attributes!r}")
    for key, value in attributes.items():
        for result in (validate_attribute_key(key), validate_attribute_value(value)):
            if not result.valid:
                return ValidateResult.fail(result.message)
    return ValidateResult.ok(dict(attributes))


def validate_tag(tag: object) -> ValidateResult[str]:
    if not isinstance(tag, str) or not tag.strip():
        return ValidateResult.fail(f"Invalid element tag: {tag!r}")
    return ValidateResult.ok(tag)


def pick_node(node_id: str | None, nodes: Mapping[str, Node]) -> PickResult[Node]:
    node = nodes.get(node_id) if node_id is not None else None
    if node is None:
        return PickResult.fail(f"Block not found: '{node_id}'")
    return PickResult.ok(node)


def pick_live_node(
    node_id: str | None, nodes: Mapping[str, Node], root_id: str
) -> PickResult[Node]:
    """Pick a node that is still reachable from the root.

    Detached nodes waiting for their purge cannot take part in structural
    commands, otherwise whatever is attached to them would outlive the purge.
    """
    picked = pick_node(node_id, nodes)
    if picked.success and get_lifecycle(picked.data.id, nodes, root_id) != Lifecycle.LIVE:
        return PickResult.fail(f"Block is detached: '{node_id}'")
    return picked


def _finish(pipeline: ResultPipeline, key: str) -> OperateResult:
    data = pipeline.execute()
    if data is None:
        return OperateResult.fail(pipeline.error or "Command failed")
    return OperateResult.ok(data[key])


def _style_patch(node: Node, styles: StyleTree) -> OperateResult[NodePatch]:
    return OperateResult.ok({node.id: node.model_copy(update={"styles": styles})})


# =============================================================================
# Node Commands
# =============================================================================


def create_node(
    ctx: CommandContext,
    definition_key: str,
    parent_id: str,
    index: int | None = None,
    tag: str | None = None,
    styles: StyleTree | None = None,
    attributes: Mapping[str, str] | None = None,
) -> OperateResult[TreeChange]:
    """Create a node from a definition and attach it under `parent_id`.

    The node is appended unless `index` is given. Hierarchy rules are run
    for the new position before anything is returned.

    Args:
        ctx: Command context.
        definition_key: Key of the NodeDefinition to build from.
        parent_id: Parent to attach to.
        index: Position among the parent's children.
        tag: Tag override, must be permitted by the definition.
        styles: Style overrides merged over definition defaults.
        attributes: Attribute overrides merged over definition defaults.

    Returns:
        OperateResult with the new node id and the patch adding it.
    """
    nodes = ctx.tree.get_all_nodes()
    pipeline = (
        ResultPipeline("[BlockManager → createNode]")
        .validate(
            {
                "definition_key": validate_definition_key(definition_key),
                "parent_id": validate_node_id(parent_id),
            }
        )
        .pick(
            lambda d: {
                "definition": ctx.catalog.nodes.require(d["definition_key"]),
                "parent": pick_live_node(d["parent_id"], nodes, ctx.root_id),
            }
        )
        .validate(
            lambda d: {
                "node": build_node(
                    d["definition"],
                    d["parent_id"],
                    tag,
                    styles,
                    attributes,
                    ctx.id_factory,
                )
            }
        )
        .operate(lambda d: {"patch": add_node(d["node"], d["parent_id"], index, nodes)})
        .check(
            lambda d: {
                "placed": validate_placement(
                    d["node"].id, ctx.catalog, apply_patch(nodes, d["patch"])
                )
            }
        )
        .require(lambda d: d["placed"], "Block placement violates hierarchy rules.")
    )
    data = pipeline.execute()
    if data is None:
        return OperateResult.fail(pipeline.error or "Command failed")

    logger.debug(f"Created '{data['node'].id}' under '{parent_id}'")
    return OperateResult.ok(TreeChange(data["node"].id, data["patch"]))


def delete_node(ctx: CommandContext, node_id: str) -> OperateResult[Deletion]:
    """Detach a node and issue the ticket for its later purge.

    The configured root can never be deleted. Apply `result.data.patch`
    now and pass `result.data.ticket` to `finalize_deletion` once the host
    is done with the detached subtree.
    """
    nodes = ctx.tree.get_all_nodes()
    pipeline = (
        ResultPipeline("[BlockManager → deleteNode]")
        .validate({"node_id": validate_node_id(node_id)})
        .require(lambda d: d["node_id"] != ctx.root_id, "Cannot delete the root block.")
        .pick(lambda d: {"node": pick_node(d["node_id"], nodes)})
        .operate(lambda d: {"deletion": delete_subtree(d["node_id"], nodes)})
    )
    return _finish(pipeline, "deletion")


def finalize_deletion(
    ctx: CommandContext, ticket: DeletionTicket, selected_id: str | None = None
) -> OperateResult[Finalization]:
    """Purge a detached subtree and report the selection that survives it.

    Redeeming a ticket twice, or after part of the subtree was re-attached,
    only removes what is still detached.

    Args:
        ctx: Command context.
        ticket: Ticket returned by `delete_node`.
        selected_id: Currently selected node id.

    Returns:
        OperateResult with the removal patch and the new selection, which is
        None when the selected node was purged.
    """
    patch = purge_subtree(ticket, ctx.tree.get_all_nodes(), ctx.root_id)
    if selected_id is not None and selected_id in patch:
        selected_id = None

    logger.debug(f"Purged {len(patch)} nodes for '{ticket.node_id}'")
    return OperateResult.ok(Finalization(patch, selected_id))


def duplicate_node(ctx: CommandContext, node_id: str) -> OperateResult[TreeChange]:
    """Clone a subtree and attach it right after the original.

    The clone is checked against the parent's unique and ordered rules at
    its new position, so duplicating a unique child fails.
    """
    nodes = ctx.tree.get_all_nodes()
    pipeline = (
        ResultPipeline("[BlockManager → duplicateNode]")
        .validate({"node_id": validate_node_id(node_id)})
        .require(lambda d: d["node_id"] != ctx.root_id, "Cannot duplicate the root block.")
        .pick(lambda d: {"node": pick_live_node(d["node_id"], nodes, ctx.root_id)})
        .operate(lambda d: {"change": duplicate_subtree(d["node_id"], nodes, ctx.id_factory)})
        .check(
            lambda d: {
                "placed": validate_placement(
                    d["change"].node_id, ctx.catalog, apply_patch(nodes, d["change"].patch)
                )
            }
        )
        .require(lambda d: d["placed"], "Duplicate violates hierarchy rules.")
    )
    return _finish(pipeline, "change")


def replace_node(
    ctx: CommandContext, target_id: str, source_id: str
) -> OperateResult[TreeChange]:
    """Overwrite the subtree at `target_id` with a copy of `source_id`.

    The copy takes the target's position and must satisfy the hierarchy
    rules there. The old target subtree is removed in the same patch.
    """
    nodes = ctx.tree.get_all_nodes()
    pipeline = (
        ResultPipeline("[BlockManager → replaceNode]")
        .validate(
            {
                "target_id": validate_node_id(target_id),
                "source_id": validate_node_id(source_id),
            }
        )
        .require(lambda d: d["target_id"] != ctx.root_id, "Cannot replace the root block.")
        .pick(
            lambda d: {
                "target": pick_live_node(d["target_id"], nodes, ctx.root_id),
                "source": pick_live_node(d["source_id"], nodes, ctx.root_id),
            }
        )
        .operate(
            lambda d: {
                "change": overwrite_node(
                    d["target_id"], d["source_id"], nodes, ctx.id_factory
                )
            }
        )
        .check(
            lambda d: {
                "placed": validate_placement(
                    d["change"].node_id, ctx.catalog, apply_patch(nodes, d["change"].patch)
                )
            }
        )
        .require(lambda d: d["placed"], "Replacement violates hierarchy rules.")
    )
    return _finish(pipeline, "change")


# =============================================================================
# Move Commands
# =============================================================================


def _find_placement(
    mode: MoveMode, source_id: str, target_id: str, nodes: Mapping[str, Node]
) -> FindResult[Placement]:
    if mode == MoveMode.BEFORE:
        return find_move_before_index(source_id, target_id, nodes)
    if mode == MoveMode.AFTER:
        return find_move_after_index(source_id, target_id, nodes)
    return find_move_into_index(source_id, target_id, nodes)


def move_node(
    ctx: CommandContext, source_id: str, target_id: str, mode: MoveMode
) -> OperateResult[NodePatch]:
    """Move `source_id` before, after or into `target_id`.

    A move to the position the node already occupies succeeds with an empty
    patch. Source and target must both be reachable from the root. The
    hierarchy rules are checked at the computed index before the move is
    committed.

    Returns:
        OperateResult with the move patch.
    """
    nodes = ctx.tree.get_all_nodes()
    label = f"[BlockManager → move{MoveMode(mode).value.capitalize()}]"
    pipeline = (
        ResultPipeline(label)
        .validate(
            {
                "source_id": validate_node_id(source_id),
                "target_id": validate_node_id(target_id),
            }
        )
        .require(lambda d: d["source_id"] != ctx.root_id, "Cannot move the root block.")
        .pick(
            lambda d: {
                "source": pick_live_node(d["source_id"], nodes, ctx.root_id),
                "target": pick_live_node(d["target_id"], nodes, ctx.root_id),
            }
        )
        .find(
            lambda d: {
                "placement": _find_placement(
                    MoveMode(mode), d["source_id"], d["target_id"], nodes
                )
            }
        )
    )
    data = pipeline.execute()
    if data is None:
        return OperateResult.fail(pipeline.error or "Command failed")
    if data["placement"] is None:
        logger.debug(f"{label} '{source_id}' already in place")
        return OperateResult.ok({})

    placement: Placement = data["placement"]
    pipeline = (
        pipeline.pick(lambda d: {"parent": pick_node(placement.parent_id, nodes)})
        .pick(
            lambda d: {
                "source_def": ctx.catalog.elements.require(d["source"].tag),
                "parent_def": ctx.catalog.elements.require(d["parent"].tag),
            }
        )
        .check(
            lambda d: {
                "allowed": passes_all_rules(
                    d["source"],
                    d["parent"],
                    d["parent_def"],
                    d["source_def"],
                    nodes,
                    placement.index,
                )
            }
        )
        .require(lambda d: d["allowed"], "Move violates hierarchy rules.")
        .operate(lambda d: {"patch": move_subtree(d["source_id"], placement, nodes)})
    )
    return _finish(pipeline, "patch")


def move_before(ctx: CommandContext, source_id: str, target_id: str) -> OperateResult[NodePatch]:
    return move_node(ctx, source_id, target_id, MoveMode.BEFORE)


def move_after(ctx: CommandContext, source_id: str, target_id: str) -> OperateResult[NodePatch]:
    return move_node(ctx, source_id, target_id, MoveMode.AFTER)


def move_into(ctx: CommandContext, source_id: str, target_id: str) -> OperateResult[NodePatch]:
    return move_node(ctx, source_id, target_id, MoveMode.INTO)


# =============================================================================
# Attribute and Tag Commands
# =============================================================================


def _attribute_patch(node: Node, attributes: Mapping[str, str]) -> OperateResult[NodePatch]:
    return OperateResult.ok({node.id: node.model_copy(update={"attributes": dict(attributes)})})


def set_attribute(
    ctx: CommandContext, node_id: str, key: str, value: str
) -> OperateResult[NodePatch]:
    """Set one element attribute; other attributes are kept."""
    nodes = ctx.tree.get_all_nodes()
    pipeline = (
        ResultPipeline("[BlockManager → setNodeAttribute]")
        .validate(
            {
                "node_id": validate_node_id(node_id),
                "key": validate_attribute_key(key),
                "value": validate_attribute_value(value),
            }
        )
        .pick(lambda d: {"node": pick_node(d["node_id"], nodes)})
        .operate(
            lambda d: {
                "patch": _attribute_patch(
                    d["node"], {**d["node"].attributes, d["key"]: d["value"]}
                )
            }
        )
    )
    return _finish(pipeline, "patch")


def copy_attributes(ctx: CommandContext, node_id: str) -> OperateResult[dict[str, str]]:
    """Return a copy of a node's attributes for a later `paste_attributes`."""
    nodes = ctx.tree.get_all_nodes()
    pipeline = (
        ResultPipeline("[BlockManager → copyNodeAttributes]")
        .validate({"node_id": validate_node_id(node_id)})
        .pick(lambda d: {"node": pick_node(d["node_id"], nodes)})
    )
    data = pipeline.execute()
    if data is None:
        return OperateResult.fail(pipeline.error or "Command failed")
    return OperateResult.ok(dict(data["node"].attributes))


def paste_attributes(
    ctx: CommandContext, node_id: str, attributes: Mapping[str, str]
) -> OperateResult[NodePatch]:
    """Replace every attribute of a node with `attributes`."""
    nodes = ctx.tree.get_all_nodes()
    pipeline = (
        ResultPipeline("[BlockManager → pasteNodeAttributes]")
        .validate(
            {
                "node_id": validate_node_id(node_id),
                "attributes": validate_attributes(attributes),
            }
        )
        .pick(lambda d: {"node": pick_node(d["node_id"], nodes)})
        .operate(lambda d: {"patch": _attribute_patch(d["node"], d["attributes"])})
    )
    return _finish(pipeline, "patch")


def set_tag(ctx: CommandContext, node_id: str, tag: str) -> OperateResult[NodePatch]:
    """Change the element tag a node renders as.

    The tag must be permitted by the node's definition and known to the
    element catalog. Since a tag carries hierarchy rules, the node and every
    descendant are re-validated with the new tag before the patch is
    returned.

    Args:
        ctx: Command context.
        node_id: Node to retag.
        tag: New element tag.

    Returns:
        OperateResult with the patch replacing the node.
    """
    nodes = ctx.tree.get_all_nodes()
    pipeline = (
        ResultPipeline("[BlockManager → setBlockTag]")
        .validate({"node_id": validate_node_id(node_id), "tag": validate_tag(tag)})
        .pick(lambda d: {"node": pick_live_node(d["node_id"], nodes, ctx.root_id)})
        .pick(
            lambda d: {
                "definition": ctx.catalog.nodes.require(d["node"].definition_key),
                "element": ctx.catalog.elements.require(d["tag"]),
            }
        )
        .require(
            lambda d: d["definition"].permits_tag(d["tag"]),
            f"Tag '{tag}' is not permitted by the block's definition.",
        )
        .operate(
            lambda d: {
                "patch": OperateResult.ok(
                    {d["node_id"]: d["node"].model_copy(update={"tag": d["tag"]})}
                )
            }
        )
        .check(
            lambda d: {
                "placed": validate_subtree_placement(
                    d["node_id"], ctx.catalog, apply_patch(nodes, d["patch"])
                )
            }
        )
        .require(lambda d: d["placed"], "Tag change violates hierarchy rules.")
    )
    return _finish(pipeline, "patch")


# =============================================================================
# Style Commands
# =============================================================================


def set_style(
    ctx: CommandContext, node_id: str, key: str, value: str
) -> OperateResult[NodePatch]:
    """Validate and store a style value at the active style context.

    Shorthands are written to every longhand. An empty value clears the
    property at this context.
    """
    nodes = ctx.tree.get_all_nodes()
    pipeline = (
        ResultPipeline("[BlockManager → setStyle]")
        .validate(
            {
                "node_id": validate_node_id(node_id),
                "value": validate_style(key, value, ctx.catalog),
            }
        )
        .pick(lambda d: {"node": pick_node(d["node_id"], nodes)})
        .operate(
            lambda d: {
                "styles": update_style(
                    d["node"].styles, key, d["value"], ctx.style_context, ctx.catalog
                )
            }
        )
        .operate(lambda d: {"patch": _style_patch(d["node"], d["styles"])})
    )
    return _finish(pipeline, "patch")


def get_style(ctx: CommandContext, node_id: str, key: str) -> OperateResult[str]:
    """Effective value of a style at the active context; "" when unset."""
    nodes = ctx.tree.get_all_nodes()
    pipeline = (
        ResultPipeline("[BlockManager → getStyle]")
        .validate({"node_id": validate_node_id(node_id)})
        .pick(
            lambda d: {
                "node": pick_node(d["node_id"], nodes),
                "definition": ctx.catalog.styles.require(key),
            }
        )
    )
    data = pipeline.execute()
    if data is None:
        return OperateResult.fail(pipeline.error or "Command failed")

    value = resolve_style(
        data["node"].styles,
        key,
        ctx.style_context,
        ctx.catalog,
        get_default_style_context(),
    )
    return OperateResult.ok(value)


def reset_style(ctx: CommandContext, node_id: str, key: str) -> OperateResult[NodePatch]:
    """Clear a style at the active context so lower cascade levels show."""
    nodes = ctx.tree.get_all_nodes()
    pipeline = (
        ResultPipeline("[BlockManager → resetStyle]")
        .validate({"node_id": validate_node_id(node_id)})
        .pick(lambda d: {"node": pick_node(d["node_id"], nodes)})
        .operate(
            lambda d: {
                "styles": reset_style_tree(
                    d["node"].styles, key, ctx.style_context, ctx.catalog
                )
            }
        )
        .operate(lambda d: {"patch": _style_patch(d["node"], d["styles"])})
    )
    return _finish(pipeline, "patch")


def copy_style(
    ctx: CommandContext, node_id: str, key: str, clipboard: ClipboardPort
) -> OperateResult[str]:
    """Write the effective value of a style to the clipboard."""
    result = get_style(ctx, node_id, key)
    if not result.success:
        return result
    clipboard.write_text(result.data)
    return result


def paste_style(
    ctx: CommandContext, node_id: str, key: str, clipboard: ClipboardPort
) -> OperateResult[NodePatch]:
    """Store the clipboard text as a style value after validating it."""
    return set_style(ctx, node_id, key, clipboard.read_text())


__all__ = [
    # Validators and Pickers
    "validate_node_id",
    "validate_definition_key",
    "validate_attribute_key",
    "validate_attribute_value",
    "validate_attributes",
    "validate_tag",
    "pick_node",
    "pick_live_node",
    # Node Commands
    "create_node",
    "delete_node",
    "finalize_deletion",
    "duplicate_node",
    "replace_node",
    # Move Commands
    "move_node",
    "move_before",
    "move_after",
    "move_into",
    # Attribute and Tag Commands
    "set_attribute",
    "copy_attributes",
    "paste_attributes",
    "set_tag",
    # Style Commands
    "set_style",
    "get_style",
    "reset_style",
    "copy_style",
    "paste_style",
]
