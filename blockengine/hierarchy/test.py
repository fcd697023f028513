"""Unit tests for the hierarchy rule engine."""

import pytest

from blockengine.tree import Node

from .lib import (
    has_exceeded_unique_limit,
    has_forbidden_ancestor,
    has_violated_ordered_children,
    is_child_allowed,
    passes_all_rules,
    validate_placement,
    validate_subtree_placement,
)


def _element(catalog, tag):
    return catalog.elements.lookup(tag)


class TestAllowedChildren:
    """Tests for the allowed-child predicate."""

    @pytest.mark.unit
    def test_unrestricted(self, catalog):
        """A parent without a child list accepts any tag."""
        assert is_child_allowed(_element(catalog, "div"), "table").passed

    @pytest.mark.unit
    def test_restricted(self, catalog):
        """A restricted parent accepts only its listed tags."""
        ol = _element(catalog, "ol")
        assert is_child_allowed(ol, "li").passed
        assert not is_child_allowed(ol, "div").passed

    @pytest.mark.unit
    def test_void_element(self, catalog):
        """An empty child set forbids every child."""
        assert not is_child_allowed(_element(catalog, "input"), "span").passed


class TestForbiddenAncestors:
    """Tests for the forbidden-ancestor predicate."""

    @pytest.mark.unit
    def test_parent_itself_counts(self, catalog, nodes):
        """The prospective parent is part of the walk."""
        result = has_forbidden_ancestor(_element(catalog, "a"), nodes["link"], nodes)
        assert result.success
        assert result.passed

    @pytest.mark.unit
    def test_distant_ancestor(self, catalog, nodes):
        """Forbidden tags higher up the chain are found."""
        nodes["btn"] = Node(
            id="btn", tag="button", definition_key="button", parent_id="d", child_ids=("inner",)
        )
        nodes["inner"] = Node(id="inner", tag="span", definition_key="text", parent_id="btn")
        nodes["d"] = nodes["d"].model_copy(update={"child_ids": ("btn",)})
        assert has_forbidden_ancestor(_element(catalog, "a"), nodes["inner"], nodes).passed

    @pytest.mark.unit
    def test_clean_chain(self, catalog, nodes):
        """A chain without forbidden tags passes."""
        result = has_forbidden_ancestor(_element(catalog, "a"), nodes["item-1"], nodes)
        assert result.success
        assert not result.passed

    @pytest.mark.unit
    def test_no_forbidden_set(self, catalog, nodes):
        """Elements without forbidden ancestors never match."""
        assert not has_forbidden_ancestor(_element(catalog, "div"), nodes["link"], nodes).passed

    @pytest.mark.unit
    def test_cycle_is_error(self, catalog, nodes):
        """A circular parent chain fails instead of looping."""
        nodes["body"] = nodes["body"].model_copy(update={"parent_id": "d"})
        result = has_forbidden_ancestor(_element(catalog, "a"), nodes["d"], nodes)
        assert not result.success
        assert "Circular" in result.error

    @pytest.mark.unit
    def test_dangling_parent_is_error(self, catalog, nodes):
        """A missing ancestor fails instead of passing."""
        nodes["d"] = nodes["d"].model_copy(update={"parent_id": "ghost"})
        result = has_forbidden_ancestor(_element(catalog, "a"), nodes["d"], nodes)
        assert not result.success


class TestUniqueLimit:
    """Tests for the unique-limit predicate."""

    @pytest.mark.unit
    def test_limit_reached(self, catalog, nodes):
        """A second caption exceeds the limit of one."""
        table = _element(catalog, "table")
        assert has_exceeded_unique_limit(table, nodes["table"], "caption", nodes).passed

    @pytest.mark.unit
    def test_source_excluded(self, catalog, nodes):
        """The moving node itself is not counted."""
        table = _element(catalog, "table")
        result = has_exceeded_unique_limit(
            table, nodes["table"], "caption", nodes, exclude_id="caption"
        )
        assert not result.passed

    @pytest.mark.unit
    def test_unlimited_tag(self, catalog, nodes):
        """Tags without a limit never exceed it."""
        table = _element(catalog, "table")
        assert not has_exceeded_unique_limit(table, nodes["table"], "tr", nodes).passed

    @pytest.mark.unit
    def test_dangling_child_is_error(self, catalog, nodes):
        """A missing child fails the check."""
        nodes["table"] = nodes["table"].model_copy(update={"child_ids": ("caption", "ghost")})
        table = _element(catalog, "table")
        assert not has_exceeded_unique_limit(table, nodes["table"], "caption", nodes).success


class TestOrderedChildren:
    """Tests for the ordered-children predicate."""

    @pytest.mark.unit
    def test_tag_in_no_group(self, catalog, nodes):
        """A ul ordered as [[li]] rejects a div anywhere."""
        ul = _element(catalog, "ul")
        for index in range(3):
            assert has_violated_ordered_children(ul, nodes["list"], "div", nodes, index).passed

    @pytest.mark.unit
    def test_group_order(self, catalog, nodes):
        """Tags may not precede an earlier group's tag already placed."""
        table = _element(catalog, "table")
        assert not has_violated_ordered_children(table, nodes["table"], "thead", nodes, 1).passed
        assert has_violated_ordered_children(table, nodes["table"], "thead", nodes, 2).passed
        assert has_violated_ordered_children(table, nodes["table"], "caption", nodes, 2).passed

    @pytest.mark.unit
    def test_same_group_any_order(self, catalog, nodes):
        """Tags sharing a group may interleave."""
        table = _element(catalog, "table")
        assert not has_violated_ordered_children(table, nodes["table"], "tbody", nodes, 1).passed
        assert not has_violated_ordered_children(table, nodes["table"], "tr", nodes, 2).passed

    @pytest.mark.unit
    def test_index_clamped(self, catalog, nodes):
        """Indices beyond the end append."""
        table = _element(catalog, "table")
        assert not has_violated_ordered_children(table, nodes["table"], "tr", nodes, 99).passed

    @pytest.mark.unit
    def test_unordered_parent(self, catalog, nodes):
        """Parents without groups never violate order."""
        div = _element(catalog, "div")
        assert not has_violated_ordered_children(div, nodes["a"], "span", nodes, 0).passed


class TestPassesAllRules:
    """Tests for the composed rule check."""

    @pytest.mark.unit
    def test_div_into_ul_rejected(self, catalog, nodes):
        """A div cannot be placed in a ul ordered as [[li]]."""
        result = passes_all_rules(
            nodes["d"], nodes["list"], _element(catalog, "ul"), _element(catalog, "div"), nodes, 0
        )
        assert result.success
        assert not result.passed

    @pytest.mark.unit
    def test_li_into_ul_accepted(self, catalog, nodes):
        """A list item fits any position of a ul."""
        li = Node(id="li-3", tag="li", definition_key="list-item")
        result = passes_all_rules(
            li, nodes["list"], _element(catalog, "ul"), _element(catalog, "li"), nodes, 1
        )
        assert result.passed

    @pytest.mark.unit
    def test_moving_caption_within_table(self, catalog, nodes):
        """Re-validating a node under its own parent ignores itself."""
        result = passes_all_rules(
            nodes["caption"],
            nodes["table"],
            _element(catalog, "table"),
            _element(catalog, "caption"),
            nodes,
            0,
        )
        assert result.passed

    @pytest.mark.unit
    def test_errors_propagate(self, catalog, nodes):
        """Evaluation errors are returned, not treated as passing."""
        nodes["b"] = nodes["b"].model_copy(update={"parent_id": "ghost"})
        result = passes_all_rules(
            nodes["d"], nodes["b"], _element(catalog, "div"), _element(catalog, "a"), nodes, 0
        )
        assert not result.success

    @pytest.mark.unit
    def test_nested_link_rejected(self, catalog, nodes):
        """A link inside a link violates the forbidden-ancestor rule."""
        new_link = Node(id="l2", tag="a", definition_key="link")
        result = passes_all_rules(
            new_link, nodes["link"], _element(catalog, "a"), _element(catalog, "a"), nodes, 0
        )
        assert result.success
        assert not result.passed


class TestValidatePlacement:
    """Tests for re-validating existing placements."""

    @pytest.mark.unit
    def test_valid_tree(self, catalog, nodes):
        """Every node in the sample tree is correctly placed."""
        for node_id in nodes:
            if node_id == "body":
                continue
            result = validate_placement(node_id, catalog, nodes)
            assert result.success and result.passed, node_id

    @pytest.mark.unit
    def test_invalid_placement(self, catalog, nodes):
        """A div sitting in a ul fails re-validation."""
        nodes["d"] = nodes["d"].model_copy(update={"parent_id": "list"})
        nodes["list"] = nodes["list"].model_copy(update={"child_ids": ("item-1", "d", "item-2")})
        nodes["body"] = nodes["body"].model_copy(update={"child_ids": ("a", "b", "c")})
        result = validate_placement("d", catalog, nodes)
        assert result.success
        assert not result.passed

    @pytest.mark.unit
    def test_unknown_tag_fails(self, catalog, nodes):
        """A node whose tag has no definition cannot be validated."""
        nodes["d"] = nodes["d"].model_copy(update={"tag": "marquee"})
        result = validate_placement("d", catalog, nodes)
        assert not result.success
        assert "marquee" in result.error


class TestValidateSubtreePlacement:
    """Tests for re-validating a node together with its descendants."""

    @pytest.mark.unit
    def test_root_subtree(self, catalog, nodes):
        """The whole sample tree validates from the root down."""
        result = validate_subtree_placement("body", catalog, nodes)
        assert result.success
        assert result.passed

    @pytest.mark.unit
    def test_descendant_violation(self, catalog, nodes):
        """A tag change that breaks a child's rules is caught."""
        nodes["b"] = nodes["b"].model_copy(update={"tag": "button"})
        assert validate_placement("b", catalog, nodes).passed

        result = validate_subtree_placement("b", catalog, nodes)
        assert result.success
        assert not result.passed

    @pytest.mark.unit
    def test_missing_node(self, catalog, nodes):
        """Unknown ids cannot be validated."""
        assert not validate_subtree_placement("ghost", catalog, nodes).success
