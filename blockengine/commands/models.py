"""Data models for the command layer."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from blockengine.catalog import Catalog
from blockengine.config import get_root_id
from blockengine.style import StyleContext
from blockengine.tree import NodePatch, TreeProvider
from blockengine.tree.operations import IdFactory, new_node_id


class MoveMode(str, Enum):
    """Where a moved node lands relative to its target."""

    BEFORE = "before"
    AFTER = "after"
    INTO = "into"


@dataclass(frozen=True)
class CommandContext:
    """Everything a command reads: catalogs, the store and the active context.

    Built once by the host. Commands never write to `tree`; they return
    patches the host applies.

    Attributes:
        catalog: Read-only definitions.
        tree: Snapshot provider for the node store.
        style_context: Context style commands read and write at.
        root_id: Id of the undeletable root node.
        id_factory: Generator for new node ids.
    """

    catalog: Catalog
    tree: TreeProvider
    style_context: StyleContext = field(default_factory=StyleContext.defaults)
    root_id: str = field(default_factory=get_root_id)
    id_factory: IdFactory = new_node_id


@dataclass(frozen=True)
class Finalization:
    """Purge patch and the selection that remains valid afterwards."""

    patch: NodePatch
    selected_id: str | None


__all__ = [
    "MoveMode",
    "CommandContext",
    "Finalization",
]
