"""Unit tests for tree finders."""

import pytest

from blockengine.result import FindStatus

from ..models import Node
from .lib import (
    Placement,
    find_ancestors,
    find_child_index,
    find_descendants,
    find_first_child,
    find_last_child,
    find_last_descendant,
    find_move_after_index,
    find_move_before_index,
    find_move_into_index,
    find_next_node,
    find_next_parent_sibling,
    find_next_sibling,
    find_previous_node,
    find_previous_sibling,
)


class TestChildrenAndSiblings:
    """Tests for child and sibling lookups."""

    @pytest.mark.unit
    def test_child_index(self, nodes):
        """Child positions are reported and absence is not-found."""
        assert find_child_index("body", "c", nodes).data == 2
        assert find_child_index("body", "link", nodes).status == FindStatus.NOT_FOUND
        assert find_child_index("ghost", "a", nodes).is_error

    @pytest.mark.unit
    def test_first_and_last_child(self, nodes):
        """First and last children are found; leaves have none."""
        assert find_first_child("body", nodes).data == "a"
        assert find_last_child("body", nodes).data == "d"
        assert find_first_child("d", nodes).status == FindStatus.NOT_FOUND

    @pytest.mark.unit
    def test_siblings(self, nodes):
        """Neighbouring siblings are found; edges are not-found."""
        assert find_next_sibling("a", nodes).data == "b"
        assert find_previous_sibling("b", nodes).data == "a"
        assert find_previous_sibling("a", nodes).status == FindStatus.NOT_FOUND
        assert find_next_sibling("d", nodes).status == FindStatus.NOT_FOUND
        assert find_next_sibling("body", nodes).status == FindStatus.NOT_FOUND

    @pytest.mark.unit
    def test_next_parent_sibling(self, nodes):
        """The nearest ancestor with a next sibling provides it."""
        assert find_next_parent_sibling("item-2", nodes).data == "b"
        assert find_next_parent_sibling("d", nodes).status == FindStatus.NOT_FOUND


class TestAncestorsAndDescendants:
    """Tests for vertical traversal."""

    @pytest.mark.unit
    def test_ancestors(self, nodes):
        """Ancestors run from the nearest parent to the root."""
        assert find_ancestors("item-1", nodes).data == ["list", "a", "body"]
        assert find_ancestors("body", nodes).status == FindStatus.NOT_FOUND

    @pytest.mark.unit
    def test_ancestors_cycle_is_error(self, nodes):
        """A circular parent chain is an error, not a loop."""
        nodes["body"] = nodes["body"].model_copy(update={"parent_id": "item-1"})
        result = find_ancestors("item-1", nodes)
        assert result.is_error
        assert "Circular" in result.error

    @pytest.mark.unit
    def test_ancestors_missing_parent_is_error(self, nodes):
        """A dangling parent reference is an error."""
        nodes["d"] = nodes["d"].model_copy(update={"parent_id": "ghost"})
        assert find_ancestors("d", nodes).is_error

    @pytest.mark.unit
    def test_descendants_document_order(self, nodes):
        """Descendants come back in depth-first order."""
        assert find_descendants("a", nodes).data == ["list", "item-1", "item-2"]
        assert find_descendants("d", nodes).status == FindStatus.NOT_FOUND

    @pytest.mark.unit
    def test_descendants_cycle_is_error(self, nodes):
        """A child list pointing back up is an error."""
        nodes["item-1"] = nodes["item-1"].model_copy(update={"child_ids": ("a",)})
        assert find_descendants("a", nodes).is_error

    @pytest.mark.unit
    def test_last_descendant(self, nodes):
        """The deepest last child is found."""
        assert find_last_descendant("c", nodes).data == "row"
        assert find_last_descendant("body", nodes).data == "d"


class TestDocumentOrder:
    """Tests for next/previous navigation."""

    @pytest.mark.unit
    def test_next_node(self, nodes):
        """Next goes down first, then across, then up and across."""
        assert find_next_node("a", nodes).data == "list"
        assert find_next_node("item-1", nodes).data == "item-2"
        assert find_next_node("item-2", nodes).data == "b"
        assert find_next_node("d", nodes).status == FindStatus.NOT_FOUND

    @pytest.mark.unit
    def test_previous_node(self, nodes):
        """Previous goes to the previous sibling's last descendant, or up."""
        assert find_previous_node("b", nodes, "body").data == "item-2"
        assert find_previous_node("item-2", nodes, "body").data == "item-1"
        assert find_previous_node("list", nodes, "body").data == "a"
        assert find_previous_node("a", nodes, "body").status == FindStatus.NOT_FOUND

    @pytest.mark.unit
    def test_previous_leaf_sibling(self, nodes):
        """A previous sibling without children is returned itself."""
        assert find_previous_node("d", nodes, "body").data == "row"
        nodes["c"] = nodes["c"].model_copy(update={"child_ids": ()})
        nodes["table"] = nodes["table"].model_copy(update={"parent_id": None})
        assert find_previous_node("d", nodes, "body").data == "c"


class TestMoveIndex:
    """Tests for move position computation."""

    @pytest.mark.unit
    def test_same_id_errors(self, nodes):
        """Moving a node relative to itself is always an error."""
        for finder in (find_move_before_index, find_move_after_index, find_move_into_index):
            result = finder("b", "b", nodes)
            assert result.is_error
            assert result.error == "Source and target blocks are the same."

    @pytest.mark.unit
    def test_before_from_right(self, nodes):
        """Moving D before B in [A, B, C, D] lands at index 1."""
        assert find_move_before_index("d", "b", nodes).data == Placement("body", 1)

    @pytest.mark.unit
    def test_before_from_left(self, nodes):
        """Moving left-to-right shifts the index down by one."""
        assert find_move_before_index("a", "c", nodes).data == Placement("body", 1)

    @pytest.mark.unit
    def test_before_noop(self, nodes):
        """A node already directly before the target is a no-op."""
        assert find_move_before_index("a", "b", nodes).status == FindStatus.NOT_FOUND

    @pytest.mark.unit
    def test_after(self, nodes):
        """After uses t from the left and t+1 from the right."""
        assert find_move_after_index("a", "c", nodes).data == Placement("body", 2)
        assert find_move_after_index("d", "a", nodes).data == Placement("body", 1)

    @pytest.mark.unit
    def test_after_noop(self, nodes):
        """A node already directly after the target is a no-op."""
        assert find_move_after_index("b", "a", nodes).status == FindStatus.NOT_FOUND

    @pytest.mark.unit
    def test_across_parents(self, nodes):
        """Across parents the target index is used without correction."""
        assert find_move_before_index("d", "item-2", nodes).data == Placement("list", 1)
        assert find_move_after_index("d", "item-2", nodes).data == Placement("list", 2)

    @pytest.mark.unit
    def test_into(self, nodes):
        """Into appends; an existing direct child is a no-op."""
        assert find_move_into_index("d", "list", nodes).data == Placement("list", 2)
        assert find_move_into_index("list", "a", nodes).status == FindStatus.NOT_FOUND

    @pytest.mark.unit
    def test_into_own_descendant_errors(self, nodes):
        """A node cannot move into its own subtree."""
        assert find_move_into_index("a", "item-1", nodes).is_error
        assert find_move_before_index("a", "item-1", nodes).is_error

    @pytest.mark.unit
    def test_target_not_in_parent(self, nodes):
        """A target missing from its parent's children is an error."""
        nodes["body"] = nodes["body"].model_copy(update={"child_ids": ("a", "c", "d")})
        result = find_move_before_index("d", "b", nodes)
        assert result.error == "Target block not found in parent."

    @pytest.mark.unit
    def test_missing_nodes(self, nodes):
        """Unknown source or target ids are errors."""
        assert find_move_into_index("ghost", "a", nodes).is_error
        assert find_move_after_index("a", "ghost", nodes).is_error
        assert find_move_before_index("a", "body", nodes).is_error

    @pytest.mark.unit
    def test_detached_source(self, nodes):
        """A source outside the target parent uses the plain target index."""
        nodes["loose"] = Node(id="loose", tag="div", definition_key="container")
        assert find_move_before_index("loose", "b", nodes).data == Placement("body", 1)
