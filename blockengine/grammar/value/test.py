"""Unit tests for raw value classification."""

import math

import pytest

from ..token import TokenType
from .lib import (
    extract_dimension_number,
    extract_dimension_range,
    extract_dimension_unit,
    get_dimension_type,
    get_value_token,
    get_value_tokens,
    get_value_type,
    is_value_color,
    is_value_dimension,
    is_value_link,
)


class TestValueType:
    """Tests for value classification order."""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "value,expected",
        [
            ("auto", TokenType.KEYWORD),
            ("10px", TokenType.DIMENSION),
            ("50%", TokenType.DIMENSION),
            ("-1.5em", TokenType.DIMENSION),
            ("3", TokenType.INTEGER),
            ("-3", TokenType.INTEGER),
            ("1.5", TokenType.NUMBER),
            (".5", TokenType.NUMBER),
            ("#fff", TokenType.COLOR),
            ("rgba(0, 0, 0, 0.5)", TokenType.COLOR),
            ("fit-content(10px)", TokenType.FUNCTION),
            ('"https://example.com/a.png"', TokenType.LINK),
            ("/images/a.png", TokenType.LINK),
        ],
    )
    def test_classification(self, catalog, value, expected):
        """Each value lands in the expected category."""
        assert get_value_type(value, catalog.units) == expected

    @pytest.mark.unit
    def test_unknown_unit_not_dimension(self, catalog):
        """A number with an unregistered unit is not a dimension."""
        assert not is_value_dimension("10zz", catalog.units)
        assert get_value_type("10zz", catalog.units) is None

    @pytest.mark.unit
    def test_unclassifiable(self, catalog):
        """Garbage and empty strings have no type."""
        assert get_value_type("", catalog.units) is None
        assert get_value_type("%%", catalog.units) is None

    @pytest.mark.unit
    def test_color_predicates(self):
        """Hex lengths and color functions are recognized."""
        assert is_value_color("#abcd")
        assert is_value_color("#aabbccdd")
        assert not is_value_color("#abcde")
        assert is_value_color("hsl(0 0% 0%)")
        assert not is_value_color("translate(1px)")

    @pytest.mark.unit
    def test_link_predicate(self):
        """Quoted and bare links are recognized."""
        assert is_value_link("http://x.io")
        assert not is_value_link("x.io")


class TestDimensions:
    """Tests for dimension helpers."""

    @pytest.mark.unit
    def test_number_and_unit(self):
        """Number and unit parts are extracted."""
        assert extract_dimension_number("12.5rem") == 12.5
        assert extract_dimension_unit("12.5rem") == "rem"
        assert extract_dimension_unit("12") is None
        assert extract_dimension_number("abc") is None

    @pytest.mark.unit
    def test_range_defaults(self):
        """Missing bounds default to infinities."""
        assert extract_dimension_range(None) == (-math.inf, math.inf)
        assert extract_dimension_range({"min": 0}) == (0.0, math.inf)
        assert extract_dimension_range({"min": 1, "max": 4}) == (1.0, 4.0)

    @pytest.mark.unit
    def test_dimension_type(self, catalog):
        """Units map to their dimension category."""
        assert get_dimension_type("10px", catalog.units) == "length"
        assert get_dimension_type("90deg", catalog.units) == "angle"
        assert get_dimension_type("1fr", catalog.units) == "flex"
        assert get_dimension_type("10", catalog.units) is None


class TestValueTokens:
    """Tests for value to token mapping."""

    @pytest.mark.unit
    def test_tokens(self, catalog):
        """Values map to the tokens they satisfy."""
        assert get_value_token("10px", catalog.units) == "<length>"
        assert get_value_token("25%", catalog.units) == "<percentage>"
        assert get_value_token("2", catalog.units) == "<integer>"
        assert get_value_token("0.5", catalog.units) == "<number>"
        assert get_value_token("red", catalog.units) == "red"
        assert get_value_token("#000", catalog.units) == "<color>"
        assert get_value_token("repeat(2, 1fr)", catalog.units) == "repeat()"

    @pytest.mark.unit
    def test_tokens_drop_unclassifiable(self, catalog):
        """Unclassifiable values are dropped from token lists."""
        assert get_value_tokens(["10px", "%%", "auto"], catalog.units) == [
            "<length>",
            "auto",
        ]
