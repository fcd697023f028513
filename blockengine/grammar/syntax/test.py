"""Unit tests for value grammar parsing."""

import pytest

from blockengine.config import EnvVar

from .lib import (
    analyze_syntax,
    extract_separators,
    filter_tokens,
    find_variation,
    get_syntax_normalized,
    get_syntax_parsed,
    get_syntax_separators,
    get_syntax_set,
    matches_variation,
    normalize_syntax,
    parse_syntax,
    tokens_match,
)


class TestNormalizeSyntax:
    """Tests for combinator spacing."""

    @pytest.mark.unit
    def test_combinator_spacing(self):
        """Double bars are spaced, single bars and ampersands are not."""
        assert normalize_syntax("a  |b||  c &&  d ?") == "a|b || c&&d?"

    @pytest.mark.unit
    def test_multiplier_attached(self):
        """Braced multipliers attach to the preceding component."""
        assert normalize_syntax("<length> {1,4}") == "<length>{1,4}"

    @pytest.mark.unit
    def test_ranges_untouched(self):
        """Ranges inside data type tokens keep their spacing."""
        assert normalize_syntax("<length [0,∞]>") == "<length [0,∞]>"


class TestParseSyntax:
    """Tests for variation generation."""

    @pytest.mark.unit
    def test_alternatives(self):
        """A single bar yields each alternative."""
        assert parse_syntax("auto | none | <length>") == ["auto", "none", "<length>"]

    @pytest.mark.unit
    def test_bounded_multiplier(self):
        """Braced multipliers repeat between bounds."""
        assert parse_syntax("auto | <length>{1,2}") == [
            "auto",
            "<length>",
            "<length> <length>",
        ]

    @pytest.mark.unit
    def test_exact_multiplier(self):
        """A single braced count repeats exactly."""
        assert parse_syntax("a{2}") == ["a a"]

    @pytest.mark.unit
    def test_open_multipliers_use_depth(self):
        """Open multipliers are capped by the configured depth."""
        assert parse_syntax("a+", max_depth=2) == ["a", "a a"]
        assert parse_syntax("a*", max_depth=2) == ["", "a", "a a"]
        assert parse_syntax("a{1,}", max_depth=3) == ["a", "a a", "a a a"]

    @pytest.mark.unit
    def test_depth_from_environment(self, monkeypatch):
        """Depth defaults to the environment setting."""
        monkeypatch.setenv(EnvVar.MULTIPLIER_DEPTH.value.name, "3")
        assert parse_syntax("a+") == ["a", "a a", "a a a"]

    @pytest.mark.unit
    def test_comma_multiplier(self):
        """The hash multiplier produces comma lists."""
        assert parse_syntax("<length>#", max_depth=2) == ["<length>", "<length>, <length>"]

    @pytest.mark.unit
    def test_optional(self):
        """An optional component may be absent."""
        assert parse_syntax("a b?") == ["a", "a b"]

    @pytest.mark.unit
    def test_group(self):
        """Brackets group without making the group optional."""
        assert parse_syntax("[a | b] c") == ["a c", "b c"]

    @pytest.mark.unit
    def test_optional_group(self):
        """A group followed by ? is optional as a whole."""
        assert parse_syntax("<number> [/ <number>]?") == ["<number>", "<number> / <number>"]

    @pytest.mark.unit
    def test_double_bar(self):
        """Double bars accept one or more parts in any order."""
        assert parse_syntax("a || b") == ["a", "b", "a b", "b a"]

    @pytest.mark.unit
    def test_double_ampersand(self):
        """Double ampersands require all parts in any order."""
        assert parse_syntax("a && b") == ["a b", "b a"]

    @pytest.mark.unit
    def test_comma_sequence(self):
        """Top-level commas join with a comma."""
        assert parse_syntax("a, [b | c]") == ["a, b", "a, c"]

    @pytest.mark.unit
    def test_bar_binds_loosest(self):
        """Single bars bind looser than double bars."""
        assert parse_syntax("a | b || c") == ["a", "b", "c", "b c", "c b"]

    @pytest.mark.unit
    def test_empty(self):
        """An empty grammar has one empty variation."""
        assert parse_syntax("") == [""]


class TestFilterTokens:
    """Tests for undefined type filtering."""

    @pytest.mark.unit
    def test_undefined_dropped(self, catalog):
        """Variations with undeclared data types are dropped."""
        assert filter_tokens(["<length>", "<mystery>", "auto"], catalog.tokens) == [
            "<length>",
            "auto",
        ]


class TestSyntaxViews:
    """Tests for normalized, slot and separator views."""

    @pytest.mark.unit
    def test_normalized(self):
        """Ranges are stripped and separators collapse to spaces."""
        assert get_syntax_normalized(["<number [0,∞]> / <number [0,∞]>"]) == [
            "<number> <number>"
        ]

    @pytest.mark.unit
    def test_slots(self):
        """Slots collect unique tokens per position."""
        slots = get_syntax_set(["auto", "<length> <length>", "<percentage> auto"])
        assert slots == [["auto", "<length>", "<percentage>"], ["<length>", "auto"]]

    @pytest.mark.unit
    def test_separators(self):
        """Separators are recorded per variation."""
        assert get_syntax_separators(["a / b", "a b", "a"]) == [["/"], [" "], []]

    @pytest.mark.unit
    def test_extract_separators(self):
        """Raw value separators are extracted."""
        assert extract_separators("16 / 9") == ["/"]
        assert extract_separators("a, b c") == [",", " "]

    @pytest.mark.unit
    def test_analyze_aligned(self, catalog):
        """All views of an analyzed grammar align by variation."""
        info = analyze_syntax("auto || <ratio>", catalog)
        assert len(info.parsed) == len(info.normalized) == len(info.separators)
        assert "auto" in info.normalized
        assert "<number> <number>" in info.normalized
        assert "auto <number> <number>" in info.normalized

    @pytest.mark.unit
    def test_analyze_cached(self, catalog):
        """Repeated analysis returns the cached object."""
        first = analyze_syntax("<length>{1,4}", catalog)
        assert analyze_syntax("<length>{1,4}", catalog) is first

    @pytest.mark.unit
    def test_parsed_expands_catalog_tokens(self, catalog):
        """Parsed variations use expanded catalog tokens."""
        parsed = get_syntax_parsed("<length-percentage> | auto", catalog)
        assert parsed == ["<length>", "<percentage>", "auto"]


class TestVariationMatching:
    """Tests for matching value tokens against variations."""

    @pytest.mark.unit
    def test_tokens_match(self):
        """Integers satisfy numbers; unfilled slots match anything."""
        assert tokens_match("<integer>", "<number>")
        assert not tokens_match("<number>", "<integer>")
        assert tokens_match(None, "<length>")

    @pytest.mark.unit
    def test_matches_variation(self):
        """Full matches need equal length; prefix matches do not."""
        assert matches_variation(["<length>"], "<length> <length>", prefix=True)
        assert not matches_variation(["<length>"], "<length> <length>")
        assert not matches_variation(["<length>", "auto"], "<length>", prefix=True)

    @pytest.mark.unit
    def test_find_variation_prefers_exact(self):
        """Exact string matches win over compatible ones."""
        normalized = ["<number> <number>", "<integer> <integer>"]
        assert find_variation(["<integer>", "<integer>"], normalized) == 1
        assert find_variation(["<integer>"], normalized) == -1
        assert find_variation(["<integer>"], normalized, prefix=True) == 0
