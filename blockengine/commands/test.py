"""Unit tests for the command layer and the BlockManager facade."""

import itertools

import pytest

from blockengine.style import StyleContext
from blockengine.tree import InMemoryTree, Lifecycle, get_lifecycle
from blockengine.tree.operations import attach_node, detach_node

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
    paste_attributes,
    paste_style,
    pick_node,
    replace_node,
    reset_style,
    set_attribute,
    set_style,
    set_tag,
    validate_attributes,
    validate_node_id,
)
from .manager import BlockManager
from .models import CommandContext, MoveMode

DEFAULTS = StyleContext("all", "all", "all")


class FakeClipboard:
    """In-memory ClipboardPort."""

    def __init__(self, text: str = ""):
        self.text = text

    def read_text(self) -> str:
        return self.text

    def write_text(self, text: str) -> None:
        self.text = text


@pytest.fixture
def ids():
    counter = itertools.count()
    return lambda: f"n{next(counter)}"


@pytest.fixture
def ctx(catalog, tree, ids) -> CommandContext:
    return CommandContext(
        catalog=catalog, tree=tree, style_context=DEFAULTS, root_id="body", id_factory=ids
    )


def _children(tree, node_id):
    return tree.get_node(node_id).child_ids


class TestValidatorsAndPickers:
    """Tests for input validation helpers."""

    @pytest.mark.unit
    @pytest.mark.parametrize("value", ["", "  ", None, 3])
    def test_invalid_ids(self, value):
        """Blank and non-string ids are rejected."""
        assert not validate_node_id(value).valid

    @pytest.mark.unit
    def test_pick_node(self, nodes):
        """Missing nodes are pick failures."""
        assert pick_node("a", nodes).data.id == "a"
        result = pick_node("zzz", nodes)
        assert not result.success
        assert "zzz" in result.error


class TestCreateNode:
    """Tests for the create command."""

    @pytest.mark.unit
    def test_create_appends(self, ctx, tree):
        """A permitted node is appended to its parent."""
        result = create_node(ctx, "list-item", "list")
        assert result.success
        assert result.data.node_id == "n0"
        tree.apply_patch(result.data.patch)
        assert _children(tree, "list") == ("item-1", "item-2", "n0")
        assert tree.get_node("n0").parent_id == "list"

    @pytest.mark.unit
    def test_create_at_index(self, ctx, tree):
        """An explicit index positions the new node."""
        result = create_node(ctx, "container", "body", index=0)
        tree.apply_patch(result.data.patch)
        assert _children(tree, "body")[0] == "n0"

    @pytest.mark.unit
    def test_definition_defaults(self, ctx):
        """Definition defaults are merged with overrides."""
        result = create_node(ctx, "link", "d", attributes={"target": "_blank"})
        node = result.data.patch["n0"]
        assert node.tag == "a"
        assert node.attributes == {"href": "#", "target": "_blank"}

    @pytest.mark.unit
    def test_tag_override(self, ctx):
        """Tags from the definition's set are accepted, others rejected."""
        assert create_node(ctx, "list", "d", tag="ol").data.patch["n0"].tag == "ol"
        result = create_node(ctx, "list", "d", tag="div")
        assert not result.success
        assert "not permitted" in result.error

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "definition,parent",
        [
            ("container", "list"),  # ul accepts only li
            ("link", "link"),  # no nested interactive elements
            ("caption", "table"),  # caption is unique
        ],
    )
    def test_rule_violations(self, ctx, tree, definition, parent):
        """Hierarchy violations abort without touching the store."""
        before = tree.get_all_nodes()
        result = create_node(ctx, definition, parent)
        assert not result.success
        assert result.error == "Block placement violates hierarchy rules."
        assert tree.get_all_nodes() == before

    @pytest.mark.unit
    def test_unknown_definition(self, ctx):
        """Unknown definitions fail the lookup."""
        result = create_node(ctx, "carousel", "body")
        assert not result.success
        assert "carousel" in result.error

    @pytest.mark.unit
    def test_missing_parent(self, ctx):
        """Missing parents fail the lookup."""
        assert not create_node(ctx, "container", "nowhere").success


class TestDeleteNode:
    """Tests for two-phase deletion."""

    @pytest.mark.unit
    def test_root_is_protected(self, ctx):
        """The root can never be deleted."""
        result = delete_node(ctx, "body")
        assert not result.success
        assert result.error == "Cannot delete the root block."

    @pytest.mark.unit
    def test_detach_then_purge(self, ctx, tree):
        """Delete detaches; finalize removes exactly the detached subtree."""
        result = delete_node(ctx, "a")
        assert result.success
        ticket = result.data.ticket
        assert ticket.subtree_ids == frozenset({"a", "list", "item-1", "item-2"})

        tree.apply_patch(result.data.patch)
        assert _children(tree, "body") == ("b", "c", "d")
        assert get_lifecycle("a", tree.get_all_nodes(), "body") == Lifecycle.DETACHED

        finalized = finalize_deletion(ctx, ticket)
        assert set(finalized.data.patch) == ticket.subtree_ids
        tree.apply_patch(finalized.data.patch)
        assert get_lifecycle("a", tree.get_all_nodes(), "body") == Lifecycle.PURGED
        assert len(tree) == 8

    @pytest.mark.unit
    def test_selection(self, ctx, tree):
        """Selection is cleared only when the selected node is purged."""
        deletion = delete_node(ctx, "a").data
        tree.apply_patch(deletion.patch)
        assert finalize_deletion(ctx, deletion.ticket, "item-1").data.selected_id is None
        assert finalize_deletion(ctx, deletion.ticket, "b").data.selected_id == "b"

    @pytest.mark.unit
    def test_finalize_is_idempotent(self, ctx, tree):
        """A second finalize has nothing left to remove."""
        deletion = delete_node(ctx, "b").data
        tree.apply_patch(deletion.patch)
        tree.apply_patch(finalize_deletion(ctx, deletion.ticket).data.patch)
        assert finalize_deletion(ctx, deletion.ticket).data.patch == {}

    @pytest.mark.unit
    def test_reattached_nodes_survive(self, ctx, tree):
        """Nodes re-attached between detach and purge are kept."""
        deletion = delete_node(ctx, "a").data
        tree.apply_patch(deletion.patch)

        # Rescue the list into "d" before the purge runs
        tree.apply_patch(detach_node("list", tree.get_all_nodes()).data)
        snapshot = tree.get_all_nodes()
        tree.apply_patch(attach_node(snapshot["list"], "d", None, snapshot).data)

        patch = finalize_deletion(ctx, deletion.ticket).data.patch
        assert set(patch) == {"a"}

    @pytest.mark.unit
    def test_missing_node(self, ctx):
        """Unknown ids fail."""
        assert not delete_node(ctx, "zzz").success


class TestDetachedWindow:
    """Tests for commands issued between detach and purge."""

    @pytest.fixture
    def detached_d(self, ctx, tree):
        deletion = delete_node(ctx, "d").data
        tree.apply_patch(deletion.patch)
        return deletion

    @pytest.mark.unit
    def test_create_under_detached(self, ctx, detached_d):
        """A detached node cannot receive new children."""
        result = create_node(ctx, "container", "d")
        assert not result.success
        assert result.error == "Block is detached: 'd'"

    @pytest.mark.unit
    def test_create_under_detached_descendant(self, ctx, tree):
        """Descendants of a detached node are detached as well."""
        tree.apply_patch(delete_node(ctx, "a").data.patch)
        assert not create_node(ctx, "list-item", "list").success

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "command,source,target",
        [
            (move_into, "b", "d"),  # detached target
            (move_into, "d", "b"),  # detached source
            (move_before, "link", "d"),
            (move_after, "link", "d"),
        ],
    )
    def test_move_with_detached(self, ctx, tree, detached_d, command, source, target):
        """Moves to or from detached nodes are rejected."""
        before = tree.get_all_nodes()
        result = command(ctx, source, target)
        assert not result.success
        assert result.error == "Block is detached: 'd'"
        assert tree.get_all_nodes() == before

    @pytest.mark.unit
    def test_duplicate_and_replace_detached(self, ctx, detached_d):
        """Detached nodes are neither duplicated nor used for replacement."""
        assert not duplicate_node(ctx, "d").success
        assert not replace_node(ctx, "b", "d").success
        assert not replace_node(ctx, "d", "b").success

    @pytest.mark.unit
    def test_purge_leaves_no_orphans(self, catalog, nodes):
        """After finalize every remaining parent id still exists."""
        manager = BlockManager(
            catalog, InMemoryTree(nodes.values()), style_context=DEFAULTS, root_id="body"
        )
        manager.delete_node("d")
        assert not manager.create_node("container", "d").success
        assert not manager.move_into("b", "d").success

        manager.finalize_deletions()
        remaining = manager.context.tree.get_all_nodes()
        assert "d" not in remaining
        for node in remaining.values():
            assert node.parent_id is None or node.parent_id in remaining


class TestDuplicateNode:
    """Tests for the duplicate command."""

    @pytest.mark.unit
    def test_clone_follows_original(self, ctx, tree):
        """The clone lands right after the original with fresh ids."""
        result = duplicate_node(ctx, "a")
        assert result.success
        tree.apply_patch(result.data.patch)

        clone_id = result.data.node_id
        assert _children(tree, "body") == ("a", clone_id, "b", "c", "d")
        clone_ids = {clone_id, *tree.get_node(clone_id).child_ids}
        assert clone_ids.isdisjoint({"a", "list"})
        assert tree.get_node(clone_id).styles == tree.get_node("a").styles

    @pytest.mark.unit
    def test_repeatable_child(self, ctx, tree):
        """Rows may repeat inside a table."""
        result = duplicate_node(ctx, "row")
        tree.apply_patch(result.data.patch)
        assert _children(tree, "table") == ("caption", "row", result.data.node_id)

    @pytest.mark.unit
    def test_unique_child(self, ctx):
        """A unique caption cannot be duplicated."""
        result = duplicate_node(ctx, "caption")
        assert not result.success
        assert result.error == "Duplicate violates hierarchy rules."

    @pytest.mark.unit
    def test_root(self, ctx):
        """The root is not duplicated."""
        assert not duplicate_node(ctx, "body").success


class TestReplaceNode:
    """Tests for subtree replacement."""

    @pytest.mark.unit
    def test_replace(self, ctx, tree):
        """The copy takes the target's slot and the target is removed."""
        result = replace_node(ctx, "d", "b")
        assert result.success
        tree.apply_patch(result.data.patch)

        new_id = result.data.node_id
        assert _children(tree, "body") == ("a", "b", "c", new_id)
        assert "d" not in tree
        assert tree.get_node(tree.get_node(new_id).child_ids[0]).tag == "a"

    @pytest.mark.unit
    def test_rule_violation(self, ctx):
        """The copy must be valid at the target position."""
        result = replace_node(ctx, "item-1", "d")
        assert not result.success


class TestMoveNode:
    """Tests for the move commands."""

    @pytest.mark.unit
    def test_before_from_right(self, ctx, tree):
        """D before B in [A, B, C, D] yields [A, D, B, C]."""
        result = move_before(ctx, "d", "b")
        assert result.success
        tree.apply_patch(result.data)
        assert _children(tree, "body") == ("a", "d", "b", "c")

    @pytest.mark.unit
    def test_after_from_left(self, ctx, tree):
        """A after B in [A, B, C, D] yields [B, A, C, D]."""
        tree.apply_patch(move_after(ctx, "a", "b").data)
        assert _children(tree, "body") == ("b", "a", "c", "d")

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "command,source,target",
        [
            (move_before, "a", "b"),
            (move_after, "b", "a"),
            (move_into, "list", "a"),
        ],
    )
    def test_noop(self, ctx, command, source, target):
        """Moving to the current position succeeds with an empty patch."""
        result = command(ctx, source, target)
        assert result.success
        assert result.data == {}

    @pytest.mark.unit
    def test_into_other_parent(self, ctx, tree):
        """Moving into a parent appends and relinks."""
        tree.apply_patch(move_into(ctx, "item-1", "d").data)
        assert _children(tree, "d") == ("item-1",)
        assert _children(tree, "list") == ("item-2",)
        assert tree.get_node("item-1").parent_id == "d"

    @pytest.mark.unit
    def test_same_source_and_target(self, ctx):
        """A node cannot move relative to itself."""
        for command in (move_before, move_after, move_into):
            result = command(ctx, "a", "a")
            assert not result.success
            assert result.error == "Source and target blocks are the same."

    @pytest.mark.unit
    def test_into_descendant(self, ctx):
        """A node cannot move inside its own subtree."""
        assert not move_into(ctx, "a", "list").success

    @pytest.mark.unit
    def test_ordered_rule(self, ctx, tree):
        """A div cannot enter a list."""
        before = tree.get_all_nodes()
        result = move_into(ctx, "d", "list")
        assert not result.success
        assert result.error == "Move violates hierarchy rules."
        assert tree.get_all_nodes() == before

    @pytest.mark.unit
    def test_forbidden_ancestor(self, ctx, tree):
        """A link cannot move into a button."""
        tree.apply_patch(create_node(ctx, "button", "d").data.patch)
        assert not move_into(ctx, "link", "n0").success

    @pytest.mark.unit
    def test_root(self, ctx):
        """The root stays where it is."""
        assert not move_into(ctx, "body", "d").success


class TestAttributeAndTagCommands:
    """Tests for attribute and tag editing."""

    @pytest.mark.unit
    def test_set_attribute(self, ctx, tree):
        """Attributes are set one key at a time and others are kept."""
        tree.apply_patch(set_attribute(ctx, "link", "href", "/home").data)
        tree.apply_patch(set_attribute(ctx, "link", "title", "Home").data)
        assert tree.get_node("link").attributes == {"href": "/home", "title": "Home"}

    @pytest.mark.unit
    @pytest.mark.parametrize("key,value", [("", "x"), ("data id", "x"), ("href", 3)])
    def test_set_attribute_invalid(self, ctx, key, value):
        """Blank or spaced keys and non-string values are rejected."""
        assert not set_attribute(ctx, "link", key, value).success

    @pytest.mark.unit
    def test_previous_snapshot_untouched(self, ctx, tree):
        """Writes never alter dicts held by the earlier snapshot."""
        before = tree.get_all_nodes()
        tree.apply_patch(set_attribute(ctx, "a", "id", "hero").data)
        tree.apply_patch(set_style(ctx, "a", "opacity", "0.5").data)
        assert before["a"].attributes == {}
        assert "opacity" not in before["a"].styles["all"]["all"]["all"]

    @pytest.mark.unit
    def test_copy_paste_attributes(self, ctx, tree):
        """Pasting replaces the target's attributes with the copied ones."""
        tree.apply_patch(set_attribute(ctx, "b", "role", "banner").data)
        copied = copy_attributes(ctx, "b").data
        assert copied == {"role": "banner"}

        tree.apply_patch(set_attribute(ctx, "d", "id", "old").data)
        tree.apply_patch(paste_attributes(ctx, "d", copied).data)
        assert tree.get_node("d").attributes == {"role": "banner"}

    @pytest.mark.unit
    def test_validate_attributes(self):
        """Every key and value of a pasted mapping is checked."""
        assert validate_attributes({"id": "x", "class": ""}).valid
        assert not validate_attributes({"bad key": "x"}).valid
        assert not validate_attributes(["id"]).valid

    @pytest.mark.unit
    def test_set_tag(self, ctx, tree):
        """A tag allowed by the definition and the rules is applied."""
        result = set_tag(ctx, "list", "ol")
        assert result.success
        tree.apply_patch(result.data)
        assert tree.get_node("list").tag == "ol"

    @pytest.mark.unit
    def test_set_tag_not_permitted(self, ctx):
        """Tags outside the definition's set are rejected."""
        result = set_tag(ctx, "d", "span")
        assert not result.success
        assert result.error == "Tag 'span' is not permitted by the block's definition."

    @pytest.mark.unit
    def test_set_tag_unknown_element(self, ctx):
        """Tags without an element definition are rejected."""
        result = set_tag(ctx, "d", "marquee")
        assert not result.success
        assert "marquee" in result.error

    @pytest.mark.unit
    def test_set_tag_breaks_children(self, ctx, tree):
        """A tag whose rules reject an existing child is refused."""
        span = create_node(ctx, "text", "d", tag="span").data
        tree.apply_patch(span.patch)
        tree.apply_patch(create_node(ctx, "container", span.node_id).data.patch)

        before = tree.get_all_nodes()
        result = set_tag(ctx, span.node_id, "p")
        assert not result.success
        assert result.error == "Tag change violates hierarchy rules."
        assert tree.get_all_nodes() == before


class TestStyleCommands:
    """Tests for style commands."""

    @pytest.mark.unit
    def test_set_and_get_shorthand(self, ctx, tree):
        """A shorthand written through set_style reads back unchanged."""
        result = set_style(ctx, "d", "margin", "4px")
        assert result.success
        tree.apply_patch(result.data)

        stored = tree.get_node("d").styles["all"]["all"]["all"]
        assert "margin" not in stored
        assert stored["margin-left"] == "4px"
        assert get_style(ctx, "d", "margin").data == "4px"

    @pytest.mark.unit
    def test_set_invalid(self, ctx):
        """Invalid keys and values are rejected."""
        assert not set_style(ctx, "d", "margin", "#fff").success
        assert not set_style(ctx, "d", "colour", "#fff").success
        assert not set_style(ctx, "zzz", "margin", "4px").success

    @pytest.mark.unit
    def test_get_cascades(self, catalog, tree, ids):
        """Reads resolve through the cascade at the active context."""
        hover = CommandContext(
            catalog=catalog,
            tree=tree,
            style_context=StyleContext("mobile", "all", "hover"),
            root_id="body",
            id_factory=ids,
        )
        assert get_style(hover, "a", "color").data == "blue"
        assert get_style(hover, "b", "color").data == ""

    @pytest.mark.unit
    def test_get_unknown_key(self, ctx):
        """Unknown keys fail the lookup."""
        assert not get_style(ctx, "a", "colour").success

    @pytest.mark.unit
    def test_reset(self, ctx, tree):
        """Reset clears the value at the active context only."""
        tree.apply_patch(reset_style(ctx, "a", "color").data)
        styles = tree.get_node("a").styles
        assert styles["all"]["all"]["all"]["color"] == ""
        assert styles["mobile"]["all"]["all"]["color"] == "blue"
        assert get_style(ctx, "a", "color").data == ""

    @pytest.mark.unit
    def test_copy_paste(self, ctx, tree):
        """Copied values paste onto another node after validation."""
        tree.apply_patch(set_style(ctx, "a", "gap", "8px").data)
        clipboard = FakeClipboard()

        assert copy_style(ctx, "a", "gap", clipboard).data == "8px"
        assert clipboard.text == "8px"

        tree.apply_patch(paste_style(ctx, "d", "gap", clipboard).data)
        assert get_style(ctx, "d", "row-gap").data == "8px"

    @pytest.mark.unit
    def test_paste_invalid(self, ctx):
        """Clipboard text is validated like any other value."""
        assert not paste_style(ctx, "d", "margin", FakeClipboard("banana split")).success


class TestBlockManager:
    """Tests for the host facade."""

    @pytest.fixture
    def manager(self, catalog, nodes):
        return BlockManager(
            catalog,
            InMemoryTree(nodes.values()),
            style_context=DEFAULTS,
            root_id="body",
            clipboard=FakeClipboard(),
        )

    @pytest.mark.unit
    def test_commands_apply(self, manager):
        """Successful commands update the store."""
        created = manager.create_node("container", "d")
        tree = manager.context.tree
        assert _children(tree, "d") == (created.data.node_id,)

        manager.move_before("d", "b")
        assert _children(tree, "body") == ("a", "d", "b", "c")

    @pytest.mark.unit
    def test_failures_leave_store(self, manager):
        """Failed commands change nothing."""
        before = manager.context.tree.get_all_nodes()
        manager.move_into("d", "list")
        manager.delete_node("body")
        manager.set_style("d", "margin", "#fff")
        assert manager.context.tree.get_all_nodes() == before

    @pytest.mark.unit
    def test_two_phase_delete(self, manager):
        """Deletion detaches at once and purges on finalize."""
        manager.select("item-2")
        manager.delete_node("a")
        tree = manager.context.tree
        assert "a" in tree
        assert len(manager.pending_deletions) == 1

        finalized = manager.finalize_deletions()
        assert len(finalized) == 1
        assert "a" not in tree
        assert manager.selected_id is None
        assert manager.pending_deletions == ()

    @pytest.mark.unit
    def test_replace_moves_selection(self, manager):
        """Replacing the selected node selects its replacement."""
        manager.select("d")
        result = manager.replace_node("d", "b")
        assert manager.selected_id == result.data.node_id

    @pytest.mark.unit
    def test_style_context_switch(self, manager):
        """Writes follow the active style context."""
        manager.set_style_context(StyleContext("mobile", "all", "all"))
        manager.set_style("d", "opacity", "0.5")
        styles = manager.context.tree.get_node("d").styles
        assert styles["mobile"]["all"]["all"]["opacity"] == "0.5"

        manager.set_style_context(DEFAULTS)
        assert manager.get_style("d", "opacity").data == ""

    @pytest.mark.unit
    def test_clipboard(self, manager):
        """Copy and paste go through the injected clipboard."""
        manager.set_style("a", "color", "#ff0000")
        manager.copy_style("a", "color")
        manager.paste_style("d", "color")
        assert manager.get_style("d", "color").data == "#ff0000"

    @pytest.mark.unit
    def test_without_clipboard(self, catalog, tree):
        """Clipboard commands fail when no clipboard is configured."""
        manager = BlockManager(catalog, tree, style_context=DEFAULTS, root_id="body")
        assert not manager.copy_style("a", "color").success
        assert not manager.paste_style("a", "color").success

    @pytest.mark.unit
    def test_move_mode(self, manager):
        """The generic move dispatches on the mode."""
        assert manager.move_node("a", "b", MoveMode.BEFORE).data == {}

    @pytest.mark.unit
    def test_purge_delay(self, manager, monkeypatch):
        """The advisory purge delay comes from configuration."""
        monkeypatch.setenv("BLOCKENGINE_PURGE_DELAY_MS", "250")
        assert manager.purge_delay_ms == 250

    @pytest.mark.unit
    def test_attributes_and_tag(self, manager):
        """Attribute and tag commands apply through the facade."""
        tree = manager.context.tree
        assert not manager.paste_attributes("d").success

        manager.set_attribute("b", "id", "nav")
        manager.copy_attributes("b")
        manager.paste_attributes("d")
        assert tree.get_node("d").attributes == {"id": "nav"}

        manager.set_tag("list", "ol")
        assert tree.get_node("list").tag == "ol"
