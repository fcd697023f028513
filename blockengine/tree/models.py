"""Data models for the node tree.

This module defines the single node model, the patch shape emitted by every
mutation, and the deletion lifecycle.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, Field, field_validator

from blockengine.catalog import StyleTree


class Node(BaseModel):
    """One structural unit of the page tree.

    Nodes are immutable; every change produces a new instance through
    `model_copy(update=...)` and reaches the store inside a NodePatch.
    Copies share the `styles` and `attributes` dicts of the node they were
    made from, so those are never mutated in place: operations build a new
    dict and pass it through `update`.

    Attributes:
        id: Unique identifier within the tree.
        parent_id: Id of the parent, or None for the root and detached nodes.
        child_ids: Ordered, duplicate-free child ids.
        tag: Element tag the node renders as.
        definition_key: Key of the NodeDefinition the node was created from.
        styles: device -> orientation -> pseudo -> property -> raw value.
        attributes: Element attributes.
    """

    # Identity
    id: str = Field(..., min_length=1, description="Unique node identifier")
    definition_key: str = Field(..., description="NodeDefinition the node came from")
    tag: str = Field(..., min_length=1, description="Element tag")

    # Structure
    parent_id: str | None = Field(default=None, description="Parent node id")
    child_ids: tuple[str, ...] = Field(
        default_factory=tuple,
        description="Ordered child ids",
    )

    # Content
    styles: StyleTree = Field(default_factory=dict, description="Context-keyed styles")
    attributes: dict[str, str] = Field(default_factory=dict, description="Element attributes")

    model_config = {
        "frozen": True,
    }

    @field_validator("child_ids")
    @classmethod
    def _unique_children(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        if len(set(value)) != len(value):
            raise ValueError("child_ids must not contain duplicates")
        return value


# id -> replacement node, or None to remove the id from the store
NodePatch = dict[str, Node | None]


class Lifecycle(str, Enum):
    """Deletion lifecycle of a node id."""

    LIVE = "live"  # Reachable from the root
    DETACHED = "detached"  # Still stored, no longer reachable
    PURGED = "purged"  # Removed from the store


@dataclass(frozen=True)
class DeletionTicket:
    """Handle returned by a delete, redeemed later to purge the subtree.

    Attributes:
        node_id: Id of the deleted subtree root.
        parent_id: Parent the node was detached from.
        subtree_ids: Every id reachable from the node at detach time.
    """

    node_id: str
    parent_id: str | None
    subtree_ids: frozenset[str]


def is_reachable(node_id: str, nodes: Mapping[str, Node], root_id: str) -> bool:
    """Whether following parent links from `node_id` reaches the root."""
    visited: set[str] = set()
    current = nodes.get(node_id)
    while current is not None:
        if current.id == root_id:
            return True
        if current.id in visited or current.parent_id is None:
            return False
        visited.add(current.id)
        parent = nodes.get(current.parent_id)
        if parent is None or current.id not in parent.child_ids:
            return False
        current = parent
    return False


def get_lifecycle(node_id: str, nodes: Mapping[str, Node], root_id: str) -> Lifecycle:
    """Lifecycle state of `node_id` within a snapshot."""
    if node_id not in nodes:
        return Lifecycle.PURGED
    if is_reachable(node_id, nodes, root_id):
        return Lifecycle.LIVE
    return Lifecycle.DETACHED


def apply_patch(nodes: Mapping[str, Node], patch: NodePatch) -> dict[str, Node]:
    """Return a new snapshot with `patch` applied."""
    updated = dict(nodes)
    for node_id, node in patch.items():
        if node is None:
            updated.pop(node_id, None)
        else:
            updated[node_id] = node
    return updated


__all__ = [
    "Node",
    "NodePatch",
    "Lifecycle",
    "DeletionTicket",
    "is_reachable",
    "get_lifecycle",
    "apply_patch",
]
