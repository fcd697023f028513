"""Host-side facade that runs commands and applies their patches."""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Mapping

from blockengine.catalog import Catalog, StyleTree
from blockengine.config import EnvVar, get_environment
from blockengine.result import OperateResult
from blockengine.style import StyleContext
from blockengine.tree import DeletionTicket, NodePatch, TreeProvider
from blockengine.tree.operations import Deletion, TreeChange

from . import lib
from .models import CommandContext, Finalization, MoveMode
from .protocol import ClipboardPort

logger = logging.getLogger(__name__)


class BlockManager:
    """Command surface bound to one store.

    Runs each command against the store's current snapshot and applies the
    resulting patch on success. Deletions are two-phase: `delete_node`
    detaches immediately and queues a ticket; `finalize_deletions` purges
    every queued subtree when the host is ready (for example after its
    views have released the detached nodes).

    Example:
        >>> manager = BlockManager(catalog, InMemoryTree(nodes.values()))
        >>> created = manager.create_node("container", "body")
        >>> manager.set_style(created.data.node_id, "margin", "4px")
        >>> manager.get_style(created.data.node_id, "margin-top").data
        '4px'

    Args:
        catalog: Read-only definitions.
        tree: Store implementing TreeProvider.
        style_context: Initial style context; defaults from configuration.
        root_id: Root id; defaults from configuration.
        clipboard: Clipboard used by copy/paste style.
    """

    def __init__(
        self,
        catalog: Catalog,
        tree: TreeProvider,
        style_context: StyleContext | None = None,
        root_id: str | None = None,
        clipboard: ClipboardPort | None = None,
    ):
        overrides: dict = {}
        if style_context is not None:
            overrides["style_context"] = style_context
        if root_id is not None:
            overrides["root_id"] = root_id

        self._context = CommandContext(catalog=catalog, tree=tree, **overrides)
        self._clipboard = clipboard
        self._pending: list[DeletionTicket] = []
        self._copied_attributes: dict[str, str] | None = None
        self.selected_id: str | None = None

    @property
    def context(self) -> CommandContext:
        return self._context

    @property
    def purge_delay_ms(self) -> int:
        """Advisory wait between `delete_node` and `finalize_deletions`."""
        return get_environment(EnvVar.PURGE_DELAY_MS)

    @property
    def pending_deletions(self) -> tuple[DeletionTicket, ...]:
        return tuple(self._pending)

    def set_style_context(self, style_context: StyleContext) -> None:
        """Switch the context style commands read and write at."""
        self._context = dataclasses.replace(self._context, style_context=style_context)

    def select(self, node_id: str | None) -> None:
        self.selected_id = node_id

    def _commit(self, result: OperateResult, patch: NodePatch | None) -> None:
        if result.success and patch:
            self._context.tree.apply_patch(patch)

    # =========================================================================
    # Node Commands
    # =========================================================================

    def create_node(
        self,
        definition_key: str,
        parent_id: str,
        index: int | None = None,
        tag: str | None = None,
        styles: StyleTree | None = None,
        attributes: Mapping[str, str] | None = None,
    ) -> OperateResult[TreeChange]:
        result = lib.create_node(
            self._context, definition_key, parent_id, index, tag, styles, attributes
        )
        self._commit(result, result.data.patch if result.success else None)
        return result

    def delete_node(self, node_id: str) -> OperateResult[Deletion]:
        """Detach a node now and queue its purge."""
        result = lib.delete_node(self._context, node_id)
        if result.success:
            self._commit(result, result.data.patch)
            self._pending.append(result.data.ticket)
            logger.debug(f"Queued purge of '{node_id}' ({len(self._pending)} pending)")
        return result

    def finalize_deletions(self) -> list[Finalization]:
        """Purge every queued deletion and update the selection."""
        finalized: list[Finalization] = []
        while self._pending:
            ticket = self._pending.pop(0)
            result = lib.finalize_deletion(self._context, ticket, self.selected_id)
            self._commit(result, result.data.patch)
            self.selected_id = result.data.selected_id
            finalized.append(result.data)
        return finalized

    def duplicate_node(self, node_id: str) -> OperateResult[TreeChange]:
        result = lib.duplicate_node(self._context, node_id)
        self._commit(result, result.data.patch if result.success else None)
        return result

    def replace_node(self, target_id: str, source_id: str) -> OperateResult[TreeChange]:
        result = lib.replace_node(self._context, target_id, source_id)
        self._commit(result, result.data.patch if result.success else None)
        if result.success and self.selected_id == target_id:
            self.selected_id = result.data.node_id
        return result

    # =========================================================================
    # Move Commands
    # =========================================================================

    def move_node(self, source_id: str, target_id: str, mode: MoveMode) -> OperateResult[NodePatch]:
        result = lib.move_node(self._context, source_id, target_id, mode)
        self._commit(result, result.data)
        return result

    def move_before(self, source_id: str, target_id: str) -> OperateResult[NodePatch]:
        return self.move_node(source_id, target_id, MoveMode.BEFORE)

    def move_after(self, source_id: str, target_id: str) -> OperateResult[NodePatch]:
        return self.move_node(source_id, target_id, MoveMode.AFTER)

    def move_into(self, source_id: str, target_id: str) -> OperateResult[NodePatch]:
        return self.move_node(source_id, target_id, MoveMode.INTO)

    # =========================================================================
    # Attribute and Tag Commands
    # =========================================================================

    def set_attribute(self, node_id: str, key: str, value: str) -> OperateResult[NodePatch]:
        result = lib.set_attribute(self._context, node_id, key, value)
        self._commit(result, result.data)
        return result

    def copy_attributes(self, node_id: str) -> OperateResult[dict[str, str]]:
        """Remember a node's attributes for `paste_attributes`."""
        result = lib.copy_attributes(self._context, node_id)
        if result.success:
            self._copied_attributes = result.data
        return result

    def paste_attributes(self, node_id: str) -> OperateResult[NodePatch]:
        if self._copied_attributes is None:
            return OperateResult.fail("No attributes copied.")
        result = lib.paste_attributes(self._context, node_id, self._copied_attributes)
        self._commit(result, result.data)
        return result

    def set_tag(self, node_id: str, tag: str) -> OperateResult[NodePatch]:
        result = lib.set_tag(self._context, node_id, tag)
        self._commit(result, result.data)
        return result

    # =========================================================================
    # Style Commands
    # =========================================================================

    def set_style(self, node_id: str, key: str, value: str) -> OperateResult[NodePatch]:
        result = lib.set_style(self._context, node_id, key, value)
        self._commit(result, result.data)
        return result

    def get_style(self, node_id: str, key: str) -> OperateResult[str]:
        return lib.get_style(self._context, node_id, key)

    def reset_style(self, node_id: str, key: str) -> OperateResult[NodePatch]:
        result = lib.reset_style(self._context, node_id, key)
        self._commit(result, result.data)
        return result

    def copy_style(self, node_id: str, key: str) -> OperateResult[str]:
        if self._clipboard is None:
            return OperateResult.fail("No clipboard available.")
        return lib.copy_style(self._context, node_id, key, self._clipboard)

    def paste_style(self, node_id: str, key: str) -> OperateResult[NodePatch]:
        if self._clipboard is None:
            return OperateResult.fail("No clipboard available.")
        result = lib.paste_style(self._context, node_id, key, self._clipboard)
        self._commit(result, result.data)
        return result


__all__ = ["BlockManager"]
