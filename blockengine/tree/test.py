"""Unit tests for the node model, lifecycle and in-memory store."""

import pytest
from pydantic import ValidationError

from .models import Lifecycle, Node, apply_patch, get_lifecycle, is_reachable
from .storage import InMemoryTree


class TestNode:
    """Tests for the Node model."""

    @pytest.mark.unit
    def test_defaults(self):
        """A minimal node has no parent, children, styles or attributes."""
        node = Node(id="x", tag="div", definition_key="container")
        assert node.parent_id is None
        assert node.child_ids == ()
        assert node.styles == {}
        assert node.attributes == {}

    @pytest.mark.unit
    def test_duplicate_children_rejected(self):
        """Duplicate child ids are a construction error."""
        with pytest.raises(ValidationError):
            Node(id="x", tag="div", definition_key="container", child_ids=("a", "a"))

    @pytest.mark.unit
    def test_frozen(self):
        """Nodes cannot be reassigned in place."""
        node = Node(id="x", tag="div", definition_key="container")
        with pytest.raises(ValidationError):
            node.tag = "span"

    @pytest.mark.unit
    def test_copy_on_write(self):
        """model_copy produces an updated node and leaves the original intact."""
        node = Node(id="x", tag="div", definition_key="container")
        updated = node.model_copy(update={"child_ids": ("y",)})
        assert updated.child_ids == ("y",)
        assert node.child_ids == ()


class TestLifecycle:
    """Tests for reachability and lifecycle states."""

    @pytest.mark.unit
    def test_live(self, nodes):
        """Nodes linked to the root are live."""
        assert is_reachable("item-2", nodes, "body")
        assert get_lifecycle("item-2", nodes, "body") == Lifecycle.LIVE

    @pytest.mark.unit
    def test_detached(self, nodes):
        """Unlinked nodes that are still stored are detached."""
        nodes["a"] = nodes["a"].model_copy(update={"parent_id": None})
        nodes["body"] = nodes["body"].model_copy(update={"child_ids": ("b", "c", "d")})
        assert get_lifecycle("a", nodes, "body") == Lifecycle.DETACHED
        assert get_lifecycle("item-1", nodes, "body") == Lifecycle.DETACHED

    @pytest.mark.unit
    def test_purged(self, nodes):
        """Ids absent from the snapshot are purged."""
        assert get_lifecycle("missing", nodes, "body") == Lifecycle.PURGED

    @pytest.mark.unit
    def test_stale_parent_link_not_reachable(self, nodes):
        """A parent link without a matching child entry does not count."""
        nodes["body"] = nodes["body"].model_copy(update={"child_ids": ("b", "c", "d")})
        assert not is_reachable("a", nodes, "body")

    @pytest.mark.unit
    def test_only_configured_root_is_root(self, nodes):
        """A parentless node other than the root is not live."""
        nodes["orphan"] = Node(id="orphan", tag="div", definition_key="container")
        assert get_lifecycle("orphan", nodes, "body") == Lifecycle.DETACHED


class TestPatches:
    """Tests for patch application."""

    @pytest.mark.unit
    def test_apply_patch_replaces_and_removes(self, nodes):
        """None removes an id and nodes replace entries."""
        replacement = nodes["d"].model_copy(update={"tag": "section"})
        updated = apply_patch(nodes, {"d": replacement, "link": None, "ghost": None})
        assert updated["d"].tag == "section"
        assert "link" not in updated
        assert "link" in nodes

    @pytest.mark.unit
    def test_in_memory_tree(self, nodes):
        """The store applies patches and hands out independent snapshots."""
        tree = InMemoryTree(nodes.values())
        before = tree.get_all_nodes()
        tree.apply_patch({"d": None})
        assert tree.get_node("d") is None
        assert "d" in before
        assert "d" not in tree
        assert len(tree) == len(nodes) - 1
