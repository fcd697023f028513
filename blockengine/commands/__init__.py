"""Command surface for the UI layer and the BlockManager host facade.

Commands are plain functions over a CommandContext. They validate their
inputs, check hierarchy rules and return an OperateResult carrying the
patch to apply; they never write to the store themselves.

Example:
    >>> from blockengine.commands import CommandContext, move_before
    >>>
    >>> ctx = CommandContext(catalog=catalog, tree=tree)
    >>> result = move_before(ctx, "d", "b")
    >>> tree.apply_patch(result.data)
"""

from .lib import (
    copy_attributes,
    copy_style,
    create_node,
    delete_node,
    duplicate_node,
    finalize_deletion,
    get_style,
    move_after,
    move_before,
    move_into,
    move_node,
    paste_attributes,
    paste_style,
    pick_live_node,
    pick_node,
    replace_node,
    reset_style,
    set_attribute,
    set_style,
    set_tag,
    validate_attribute_key,
    validate_attribute_value,
    validate_attributes,
    validate_definition_key,
    validate_node_id,
    validate_tag,
)
from .manager import BlockManager
from .models import CommandContext, Finalization, MoveMode
from .protocol import ClipboardPort

__all__ = [
    # Models
    "CommandContext",
    "MoveMode",
    "Finalization",
    "ClipboardPort",
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
    # Facade
    "BlockManager",
]
