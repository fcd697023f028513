"""Unit tests for copy-on-write tree operations."""

import itertools

import pytest

from ..finders import Placement, find_move_before_index
from ..models import Lifecycle, Node, apply_patch, get_lifecycle
from .lib import (
    add_node,
    add_nodes,
    attach_node,
    clone_subtree,
    create_node,
    delete_subtree,
    detach_node,
    duplicate_subtree,
    merge_styles,
    move_node,
    overwrite_node,
    purge_subtree,
)


def _sequential_ids(prefix: str = "new"):
    counter = itertools.count(1)
    return lambda: f"{prefix}-{next(counter)}"


class TestCreateNode:
    """Tests for node creation from definitions."""

    @pytest.mark.unit
    def test_defaults_merged(self, catalog):
        """Definition defaults are merged under caller overrides."""
        definition = catalog.nodes.lookup("link")
        result = create_node(
            definition,
            "b",
            attributes={"target": "_blank"},
            id_factory=lambda: "fresh",
        )
        assert result.valid
        node = result.value
        assert node.id == "fresh"
        assert node.tag == "a"
        assert node.parent_id == "b"
        assert node.child_ids == ()
        assert node.attributes == {"href": "#", "target": "_blank"}

    @pytest.mark.unit
    def test_caller_styles_win(self, catalog):
        """Caller styles override defaults per property."""
        definition = catalog.nodes.lookup("container")
        styles = {"all": {"all": {"all": {"display": "flex", "color": "red"}}}}
        node = create_node(definition, styles=styles).value
        assert node.styles["all"]["all"]["all"] == {"display": "flex", "color": "red"}
        assert definition.default_styles["all"]["all"]["all"] == {"display": "block"}

    @pytest.mark.unit
    def test_forbidden_tag(self, catalog):
        """Tags outside the definition's tag set are rejected."""
        result = create_node(catalog.nodes.lookup("list"), tag="div")
        assert not result.valid
        assert "not permitted" in result.message

    @pytest.mark.unit
    def test_alternate_tag(self, catalog):
        """Any tag in the definition's tag set may be chosen."""
        assert create_node(catalog.nodes.lookup("list"), tag="ol").value.tag == "ol"

    @pytest.mark.unit
    def test_unique_ids(self, catalog):
        """Generated ids differ between nodes."""
        definition = catalog.nodes.lookup("container")
        assert create_node(definition).value.id != create_node(definition).value.id

    @pytest.mark.unit
    def test_merge_styles_does_not_alias(self):
        """Merging never mutates either input."""
        base = {"all": {"all": {"all": {"color": "red"}}}}
        merged = merge_styles(base, {"all": {"all": {"hover": {"color": "blue"}}}})
        assert merged["all"]["all"] == {"all": {"color": "red"}, "hover": {"color": "blue"}}
        assert base == {"all": {"all": {"all": {"color": "red"}}}}


class TestLinking:
    """Tests for attach, detach and add."""

    @pytest.mark.unit
    def test_attach_clamps_index(self, nodes):
        """Out-of-range indices are clamped."""
        patch = attach_node(nodes["link"], "d", 99, nodes).data
        assert patch["d"].child_ids == ("link",)
        assert patch["link"].parent_id == "d"

    @pytest.mark.unit
    def test_attach_removes_existing_occurrence(self, nodes):
        """Re-attaching under the same parent never duplicates the id."""
        patch = attach_node(nodes["a"], "body", 2, nodes).data
        assert patch["body"].child_ids == ("b", "c", "a", "d")

    @pytest.mark.unit
    def test_attach_missing_parent(self, nodes):
        """Attaching to an unknown parent fails."""
        assert not attach_node(nodes["d"], "ghost", 0, nodes).success

    @pytest.mark.unit
    def test_detach(self, nodes):
        """Detach unlinks the node and keeps its data."""
        patch = detach_node("b", nodes).data
        assert patch["body"].child_ids == ("a", "c", "d")
        assert patch["b"].parent_id is None
        assert patch["b"].child_ids == ("link",)
        assert nodes["body"].child_ids == ("a", "b", "c", "d")

    @pytest.mark.unit
    def test_detach_root_fails(self, nodes):
        """A node without a parent cannot be detached."""
        assert not detach_node("body", nodes).success

    @pytest.mark.unit
    def test_add_existing_id_fails(self, nodes):
        """Adding an id already in the store is refused."""
        result = add_node(nodes["d"], "a", 0, nodes)
        assert not result.success
        assert "already exists" in result.error

    @pytest.mark.unit
    def test_add_nodes_in_order(self, nodes):
        """Several nodes are inserted consecutively."""
        new = [Node(id=f"n{i}", tag="div", definition_key="container") for i in range(3)]
        patch = add_nodes(new, "body", 1, nodes).data
        assert patch["body"].child_ids == ("a", "n0", "n1", "n2", "b", "c", "d")
        assert all(patch[f"n{i}"].parent_id == "body" for i in range(3))


class TestCloning:
    """Tests for subtree cloning and duplication."""

    @pytest.mark.unit
    def test_clone_disjoint_ids(self, nodes):
        """A clone is isomorphic with an entirely new id set."""
        change = clone_subtree("a", nodes, _sequential_ids()).data
        assert change.node_id == "new-1"
        assert set(change.patch).isdisjoint(nodes)
        root = change.patch[change.node_id]
        assert root.parent_id is None
        [list_id] = root.child_ids
        clone_list = change.patch[list_id]
        assert clone_list.tag == "ul"
        assert clone_list.parent_id == root.id
        assert len(clone_list.child_ids) == 2
        assert all(change.patch[child].parent_id == list_id for child in clone_list.child_ids)

    @pytest.mark.unit
    def test_clone_attaches_nothing(self, nodes):
        """Cloning leaves every existing node untouched."""
        change = clone_subtree("a", nodes).data
        assert not set(change.patch) & set(nodes)

    @pytest.mark.unit
    def test_clone_copies_styles(self, nodes):
        """Cloned styles are independent copies."""
        change = clone_subtree("a", nodes).data
        styles = change.patch[change.node_id].styles
        assert styles == nodes["a"].styles
        assert styles is not nodes["a"].styles

    @pytest.mark.unit
    def test_duplicate_after_original(self, nodes):
        """Duplicates are attached directly after the original."""
        change = duplicate_subtree("b", nodes, _sequential_ids("dup")).data
        assert change.patch["body"].child_ids == ("a", "b", "dup-1", "c", "d")
        assert change.patch["dup-1"].parent_id == "body"
        assert change.patch["dup-2"].tag == "a"

    @pytest.mark.unit
    def test_duplicate_root_fails(self, nodes):
        """The root has no parent to duplicate into."""
        assert not duplicate_subtree("body", nodes).success


class TestMoveAndOverwrite:
    """Tests for moving and replacing subtrees."""

    @pytest.mark.unit
    def test_move_before(self, nodes):
        """Moving D before B in [A, B, C, D] gives [A, D, B, C]."""
        placement = find_move_before_index("d", "b", nodes).data
        patch = move_node("d", placement, nodes).data
        assert patch["body"].child_ids == ("a", "d", "b", "c")
        assert patch["d"].parent_id == "body"

    @pytest.mark.unit
    def test_move_across_parents(self, nodes):
        """Moving to another parent updates both child lists and the parent link."""
        patch = move_node("link", Placement("list", 0), nodes).data
        updated = apply_patch(nodes, patch)
        assert updated["b"].child_ids == ()
        assert updated["list"].child_ids == ("link", "item-1", "item-2")
        assert updated["link"].parent_id == "list"

    @pytest.mark.unit
    def test_overwrite(self, nodes):
        """A clone of the source takes the target's place."""
        change = overwrite_node("b", "d", nodes, _sequential_ids("ow")).data
        updated = apply_patch(nodes, change.patch)
        assert updated["body"].child_ids == ("a", "ow-1", "c", "d")
        assert "b" not in updated
        assert "link" not in updated
        assert updated["ow-1"].tag == "div"

    @pytest.mark.unit
    def test_overwrite_with_own_subtree_fails(self, nodes):
        """A subtree cannot be replaced by part of itself."""
        assert not overwrite_node("a", "item-1", nodes).success


class TestDeletion:
    """Tests for two-phase deletion."""

    @pytest.mark.unit
    def test_two_phase_delete(self, nodes):
        """Detach keeps data; purge removes exactly the subtree."""
        deletion = delete_subtree("a", nodes).data
        assert deletion.ticket.subtree_ids == {"a", "list", "item-1", "item-2"}

        detached = apply_patch(nodes, deletion.patch)
        assert get_lifecycle("a", detached, "body") == Lifecycle.DETACHED
        assert "item-1" in detached

        purged = apply_patch(detached, purge_subtree(deletion.ticket, detached, "body"))
        assert set(nodes) - set(purged) == {"a", "list", "item-1", "item-2"}
        assert get_lifecycle("a", purged, "body") == Lifecycle.PURGED

    @pytest.mark.unit
    def test_purge_idempotent(self, nodes):
        """A second purge of the same ticket is a no-op."""
        deletion = delete_subtree("b", nodes).data
        snapshot = apply_patch(nodes, deletion.patch)
        snapshot = apply_patch(snapshot, purge_subtree(deletion.ticket, snapshot, "body"))
        assert purge_subtree(deletion.ticket, snapshot, "body") == {}

    @pytest.mark.unit
    def test_purge_spares_reattached(self, nodes):
        """Nodes re-attached during the window survive the purge."""
        deletion = delete_subtree("b", nodes).data
        snapshot = apply_patch(nodes, deletion.patch)
        snapshot = apply_patch(snapshot, move_node("link", Placement("d", 0), snapshot).data)
        patch = purge_subtree(deletion.ticket, snapshot, "body")
        assert patch == {"b": None}

    @pytest.mark.unit
    def test_purge_takes_late_children(self, nodes):
        """Nodes attached below the detached subtree are purged with it."""
        deletion = delete_subtree("d", nodes).data
        snapshot = apply_patch(nodes, deletion.patch)

        late = Node(id="late", tag="span", definition_key="text")
        snapshot = apply_patch(snapshot, add_node(late, "d", None, snapshot).data)
        snapshot = apply_patch(snapshot, move_node("b", Placement("d", 0), snapshot).data)

        patch = purge_subtree(deletion.ticket, snapshot, "body")
        assert set(patch) == {"d", "b", "link", "late"}

        purged = apply_patch(snapshot, patch)
        for node in purged.values():
            assert node.parent_id is None or node.parent_id in purged

    @pytest.mark.unit
    def test_delete_unknown(self, nodes):
        """Deleting an unknown id fails."""
        assert not delete_subtree("ghost", nodes).success
