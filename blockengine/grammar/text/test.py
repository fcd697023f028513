"""Tests for grammar text helpers."""

import pytest

from .lib import (
    all_subsets,
    cross_product,
    join_with_separators,
    permutations,
    split_top_level,
    split_with_separators,
    unique,
)


class TestSplitTopLevel:
    """Tests for grouping-aware splitting."""

    @pytest.mark.unit
    def test_respects_parentheses(self):
        """Separators inside function arguments do not split."""
        assert split_top_level("minmax(10px, 1fr) auto", " ") == ["minmax(10px, 1fr)", "auto"]

    @pytest.mark.unit
    def test_respects_angle_ranges(self):
        """Ranges inside tokens keep the token whole."""
        assert split_top_level("<number [0,∞]> / <number>", " ") == [
            "<number [0,∞]>",
            "/",
            "<number>",
        ]

    @pytest.mark.unit
    def test_respects_brackets_and_quotes(self):
        """Groups and quoted strings stay intact."""
        assert split_top_level('a|[b|c]|"d|e"', "|") == ["a", "[b|c]", '"d|e"']

    @pytest.mark.unit
    def test_multiple_separators(self):
        """Any listed separator splits."""
        assert split_top_level("1px 2px/3px,4px", [" ", "/", ","]) == ["1px", "2px", "3px", "4px"]

    @pytest.mark.unit
    def test_empty_input(self):
        """Empty and blank strings produce no segments."""
        assert split_top_level("", " ") == []
        assert split_top_level("   ", " ") == []


class TestSeparators:
    """Tests for separator-preserving split and join."""

    @pytest.mark.unit
    def test_split_records_separators(self):
        """Slash and comma absorb the whitespace around them."""
        parts, seps = split_with_separators("1px 2px / 3px, 4px")
        assert parts == ["1px", "2px", "3px", "4px"]
        assert seps == [" ", "/", ","]

    @pytest.mark.unit
    def test_split_keeps_functions_whole(self):
        """Commas inside functions are not separators."""
        parts, seps = split_with_separators("rgba(0, 0, 0, 0.5) 1px")
        assert parts == ["rgba(0, 0, 0, 0.5)", "1px"]
        assert seps == [" "]

    @pytest.mark.unit
    def test_join(self):
        """Join restores conventional spacing."""
        assert join_with_separators(["16", "9"], ["/"]) == "16 / 9"
        assert join_with_separators(["a", "b", "c"], [",", " "]) == "a, b c"
        assert join_with_separators(["a", "b"], []) == "a b"


class TestCombinatorics:
    """Tests for cross product, subsets and permutations."""

    @pytest.mark.unit
    def test_cross_product(self):
        """One pick from each group, in group order."""
        assert cross_product([["a", "b"], ["1", "2"]]) == [
            ["a", "1"],
            ["a", "2"],
            ["b", "1"],
            ["b", "2"],
        ]
        assert cross_product([]) == [[]]

    @pytest.mark.unit
    def test_all_subsets(self):
        """The power set starts with the empty subset."""
        subsets = all_subsets(["a", "b"])
        assert subsets == [[], ["a"], ["b"], ["a", "b"]]

    @pytest.mark.unit
    def test_permutations_and_unique(self):
        """Permutations cover every ordering; unique keeps first occurrence."""
        assert permutations(["a", "b"]) == [["a", "b"], ["b", "a"]]
        assert unique(["b", "a", "b"]) == ["b", "a"]
