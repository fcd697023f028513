"""Unit tests for slot option tables and slot joining."""

import math

import pytest

from blockengine.catalog import Catalog

from ..syntax import analyze_syntax
from ..token import TokenType
from .lib import (
    create_option_table,
    create_slot_options,
    is_slot_option_valid,
    join_slot_values,
)


class TestIsSlotOptionValid:
    """Tests for slot candidate validation."""

    @pytest.mark.unit
    def test_current_token_always_valid(self):
        """A candidate equal to the current slot token is accepted."""
        assert is_slot_option_valid("<length>", 0, ["auto"], ["<length>"])

    @pytest.mark.unit
    def test_substitution_must_prefix_variation(self):
        """The substituted tokens must prefix some variation."""
        normalized = ["auto", "<length>", "<length> <length>"]
        assert is_slot_option_valid("auto", 0, normalized, [])
        assert is_slot_option_valid("<length>", 1, normalized, ["<length>"])
        assert not is_slot_option_valid("auto", 1, normalized, ["<length>"])

    @pytest.mark.unit
    def test_integer_satisfies_number(self):
        """Integer values satisfy number grammar tokens."""
        assert is_slot_option_valid("<number>", 1, ["<number> <number>"], ["<integer>"])

    @pytest.mark.unit
    def test_unrecognized_token(self):
        """Tokens without a canonical form are never valid."""
        assert not is_slot_option_valid("#fff", 0, ["<color>"], [])

    @pytest.mark.unit
    def test_unfilled_earlier_slots_match_anything(self):
        """Later slots are offered even when earlier ones are empty."""
        assert is_slot_option_valid("<length>", 1, ["<length> <length>"], [])


class TestCreateSlotOptions:
    """Tests for per-token option creation."""

    @pytest.mark.unit
    def test_keyword(self, catalog):
        """Keywords offer themselves."""
        [option] = create_slot_options("auto", catalog)
        assert option.name == option.value == "auto"
        assert option.category == "keyword"

    @pytest.mark.unit
    def test_dimension_per_unit(self, catalog):
        """Dimension tokens offer one option per unit of their type."""
        options = create_slot_options("<length [0,∞]>", catalog)
        assert [option.unit for option in options] == [
            unit.key for unit in catalog.units_of("length")
        ]
        assert options[0].value == "0px"
        assert options[0].min == 0
        assert options[0].max == math.inf

    @pytest.mark.unit
    def test_dimension_starts_at_positive_minimum(self, catalog):
        """A positive lower bound is used as the starting value."""
        options = create_slot_options("<length [4,10]>", catalog)
        assert options[0].value == "4px"

    @pytest.mark.unit
    def test_number_and_integer(self, catalog):
        """Numbers and integers offer a zero value with their bounds."""
        [number] = create_slot_options("<number [0,1]>", catalog)
        [integer] = create_slot_options("<integer>", catalog)
        assert (number.value, number.max) == ("0.0", 1)
        assert (integer.value, integer.min) == ("0", None)

    @pytest.mark.unit
    def test_color(self, catalog):
        """Colors offer the catalog default."""
        [option] = create_slot_options("<color>", catalog)
        assert option.type == TokenType.COLOR
        assert option.value == "#000000"

    @pytest.mark.unit
    def test_function_requires_default(self, catalog):
        """Functions without a declared default are skipped."""
        [option] = create_slot_options("fit-content(<length>)", catalog)
        assert option.name == "fit-content()"
        assert option.value == "fit-content(0px)"
        assert create_slot_options("minmax(<length>, <length>)", catalog) == []

    @pytest.mark.unit
    def test_unknown_excluded(self, catalog):
        """Composite and unrecognized tokens produce no options."""
        assert create_slot_options("<ratio>", catalog) == []
        assert create_slot_options("<broken", catalog) == []


class TestCreateOptionTable:
    """Tests for the slot option table."""

    @pytest.mark.unit
    def test_empty_syntax(self, catalog):
        """An empty grammar has no slots."""
        assert create_option_table([], [], ["10px"], catalog) == []

    @pytest.mark.unit
    def test_slots_filtered_by_context(self, catalog):
        """Options depend on the values held by other slots."""
        info = analyze_syntax("auto | <length>{1,2}", catalog)
        table = create_option_table(info.normalized, info.slots, ["10px"], catalog)
        assert len(table) == 2
        assert [option.name for option in table[0]][:2] == ["auto", "px"]
        assert all(option.type == TokenType.DIMENSION for option in table[1])

    @pytest.mark.unit
    def test_empty_values_still_offer_options(self, catalog):
        """Slots have options before any value is set."""
        info = analyze_syntax("<length> <color>", catalog)
        table = create_option_table(info.normalized, info.slots, [], catalog)
        assert table[0] and table[1]
        assert table[1][0].type == TokenType.COLOR

    @pytest.mark.unit
    def test_current_value_always_present(self, catalog):
        """The current slot value is offered even if no option produces it."""
        info = analyze_syntax("<length> | auto", catalog)
        table = create_option_table(info.normalized, info.slots, ["red"], catalog)
        assert table[0][0].value == "red"
        assert table[0][0].type == TokenType.KEYWORD

    @pytest.mark.unit
    def test_current_value_covered_by_unit_option(self, catalog):
        """A dimension value is represented by its unit option."""
        info = analyze_syntax("<length>", catalog)
        table = create_option_table(info.normalized, info.slots, ["12px"], catalog)
        assert all(option.value != "12px" for option in table[0])

    @pytest.mark.unit
    def test_canonical_duplicates_collapsed(self):
        """Tokens sharing a canonical form produce options once."""
        catalog = Catalog.build()
        table = create_option_table(["<length>"], [["<length [0,∞]>", "<length>"]], [], catalog)
        units = [option.unit for option in table[0]]
        assert len(units) == len(set(units))


class TestJoinSlotValues:
    """Tests for joining slot values."""

    @pytest.mark.unit
    def test_exact_match_uses_separators(self, catalog):
        """An exact match joins with the variation's separators."""
        info = analyze_syntax("auto || <ratio>", catalog)
        result = join_slot_values(["16", "9"], info.normalized, info.separators, catalog)
        assert result.valid
        assert result.value == "16 / 9"

    @pytest.mark.unit
    def test_prefix_match_fills_defaults(self, catalog):
        """A prefix match pads missing slots with token defaults."""
        info = analyze_syntax("<length> <color>", catalog)
        result = join_slot_values(["10px"], info.normalized, info.separators, catalog)
        assert result.value == "10px #000000"

    @pytest.mark.unit
    def test_empty_is_valid(self, catalog):
        """Clearing every slot yields the empty value."""
        info = analyze_syntax("<length>", catalog)
        assert join_slot_values([""], info.normalized, info.separators, catalog).value == ""

    @pytest.mark.unit
    def test_no_match_fails(self, catalog):
        """Values no variation accepts are rejected."""
        info = analyze_syntax("<length>", catalog)
        result = join_slot_values(["red"], info.normalized, info.separators, catalog)
        assert not result.valid
        assert "red" in result.message
