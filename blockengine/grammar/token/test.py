"""Unit tests for grammar token helpers."""

import math

import pytest

from blockengine.catalog import Catalog, TokenDefinition

from .lib import (
    TokenType,
    expand_tokens,
    get_token_base,
    get_token_canonical,
    get_token_param,
    get_token_type,
    get_token_value,
    get_token_values,
)


class TestTokenCanonical:
    """Tests for canonical token forms."""

    @pytest.mark.unit
    def test_data_type_range_stripped(self):
        """Ranges are removed from data type tokens."""
        assert get_token_canonical("<length [0,∞]>") == "<length>"
        assert get_token_canonical("<number>") == "<number>"

    @pytest.mark.unit
    def test_function_arguments_stripped(self):
        """Function tokens keep only their name."""
        assert get_token_canonical("fit-content(<length-percentage>)") == "fit-content()"

    @pytest.mark.unit
    def test_keyword_unchanged(self):
        """Keywords are their own canonical form."""
        assert get_token_canonical("auto") == "auto"
        assert get_token_canonical("min-content") == "min-content"

    @pytest.mark.unit
    def test_unrecognized_returns_none(self):
        """Malformed tokens have no canonical form."""
        assert get_token_canonical("<broken") is None
        assert get_token_canonical("#fff") is None

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "token", ["<length [0,10]>", "repeat(<integer>, <length>)", "auto", "<flex>"]
    )
    def test_idempotent(self, token):
        """Canonicalizing twice equals canonicalizing once."""
        once = get_token_canonical(token)
        assert get_token_canonical(once) == once


class TestTokenInspection:
    """Tests for base, param and type."""

    @pytest.mark.unit
    def test_base(self):
        """Base strips brackets and parentheses."""
        assert get_token_base("<length [0,1]>") == "length"
        assert get_token_base("fit-content(<length>)") == "fit-content"
        assert get_token_base("auto") == "auto"

    @pytest.mark.unit
    def test_param_range(self):
        """Range parameters parse bounds including infinity."""
        param = get_token_param("<length [0,∞]>")
        assert param.type == "range"
        assert param.range == "[0,∞]"
        assert param.min == 0
        assert param.max == math.inf

    @pytest.mark.unit
    def test_param_negative_infinity(self):
        """A negative infinity lower bound parses."""
        param = get_token_param("<number [-∞,5]>")
        assert param.min == -math.inf
        assert param.max == 5

    @pytest.mark.unit
    def test_param_function(self):
        """Function tokens expose their argument grammar."""
        param = get_token_param("fit-content(<length>)")
        assert param.type == "function"
        assert param.syntax == "<length>"

    @pytest.mark.unit
    def test_param_absent(self):
        """Plain tokens carry no parameters."""
        assert get_token_param("<length>") is None
        assert get_token_param("auto") is None

    @pytest.mark.unit
    def test_types(self):
        """Each token category is detected."""
        assert get_token_type("auto") == TokenType.KEYWORD
        assert get_token_type("<length [0,∞]>") == TokenType.DIMENSION
        assert get_token_type("<percentage>") == TokenType.DIMENSION
        assert get_token_type("<number>") == TokenType.NUMBER
        assert get_token_type("<integer>") == TokenType.INTEGER
        assert get_token_type("<color>") == TokenType.COLOR
        assert get_token_type("<link>") == TokenType.LINK
        assert get_token_type("repeat(<integer>)") == TokenType.FUNCTION

    @pytest.mark.unit
    def test_composite_type_unknown(self):
        """Composite data types have no type of their own."""
        assert get_token_type("<ratio>") is None
        assert get_token_type("/") is None


class TestTokenValues:
    """Tests for token default values."""

    @pytest.mark.unit
    def test_catalog_default(self, catalog):
        """Catalog defaults are used when declared."""
        assert get_token_value("<length [0,∞]>", catalog.tokens) == "0px"
        assert get_token_value("<color>", catalog.tokens) == "#000000"

    @pytest.mark.unit
    def test_falls_back_to_canonical(self, catalog):
        """Tokens without defaults return their canonical form."""
        assert get_token_value("auto", catalog.tokens) == "auto"
        assert get_token_value("<unknown-thing>", catalog.tokens) == "<unknown-thing>"

    @pytest.mark.unit
    def test_values_skip_unrecognized(self, catalog):
        """Unrecognized tokens are dropped from value lists."""
        values = get_token_values(["auto", "<broken", "<number>"], catalog.tokens)
        assert values == ["auto", "0"]


class TestExpandTokens:
    """Tests for recursive token expansion."""

    @pytest.mark.unit
    def test_primitive_unchanged(self, catalog):
        """Self-referencing primitives expand to themselves."""
        assert expand_tokens("<length>", catalog.tokens) == "<length>"

    @pytest.mark.unit
    def test_composite_grouped(self, catalog):
        """Multi-part expansions are wrapped in a group."""
        expanded = expand_tokens("<length-percentage>", catalog.tokens)
        assert expanded == "[<length> | <percentage>]"

    @pytest.mark.unit
    def test_outer_range_replaces_inner(self):
        """An outer range is pushed onto every inner data type token."""
        catalog = Catalog.build(
            tokens=[TokenDefinition("<size>", "<length [5,10]> | <percentage>")]
        )
        expanded = expand_tokens("<size [0,∞]>", catalog.tokens)
        assert expanded == "[<length [0,∞]> | <percentage [0,∞]>]"

    @pytest.mark.unit
    def test_unknown_left_in_place(self, catalog):
        """Tokens missing from the catalog are not expanded."""
        assert expand_tokens("auto | <mystery>", catalog.tokens) == "auto | <mystery>"

    @pytest.mark.unit
    def test_cycle_terminates(self):
        """Mutually recursive tokens stop expanding."""
        catalog = Catalog.build(
            tokens=[
                TokenDefinition("<a>", "x | <b>"),
                TokenDefinition("<b>", "y | <a>"),
            ]
        )
        assert expand_tokens("<a>", catalog.tokens) == "[x | [y | <a>]]"

    @pytest.mark.unit
    def test_nested_expansion(self, catalog):
        """Tokens referencing other tokens expand fully."""
        expanded = expand_tokens("<ratio>", catalog.tokens)
        assert "<number [0,∞]>" in expanded
        assert "<ratio>" not in expanded
