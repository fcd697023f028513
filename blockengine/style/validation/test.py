"""Unit tests for style key and value validation."""

import pytest

from .lib import validate_style, validate_style_key, validate_style_value


class TestValidateStyleKey:
    """Tests for key validation."""

    @pytest.mark.unit
    def test_known_key(self, catalog):
        """Registered keys resolve to their definition."""
        result = validate_style_key("margin", catalog)
        assert result.valid
        assert result.value.is_shorthand

    @pytest.mark.unit
    @pytest.mark.parametrize("key", ["", "   ", "colour"])
    def test_rejected_keys(self, catalog, key):
        """Empty and unknown keys fail with a message."""
        result = validate_style_key(key, catalog)
        assert not result.valid
        assert result.message


class TestValidateStyleValue:
    """Tests for value validation against grammars."""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "key,value",
        [
            ("color", "#ff0000"),
            ("color", "rgb(0, 0, 0)"),
            ("display", "flex"),
            ("margin", "10px"),
            ("margin", "10px auto"),
            ("margin", "1px 2px 3px 4px"),
            ("margin", "50%"),
            ("opacity", "0.5"),
            ("opacity", "1"),
            ("z-index", "3"),
            ("aspect-ratio", "16 / 9"),
            ("aspect-ratio", "auto"),
            ("width", "fit-content(10px)"),
        ],
    )
    def test_valid(self, catalog, key, value):
        """Values matching a grammar variation pass unchanged."""
        result = validate_style_value(value, catalog.styles.lookup(key), catalog)
        assert result.valid, result.message
        assert result.value == value

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "key,value",
        [
            ("display", "table"),
            ("margin", "1px 2px 3px 4px 5px"),
            ("margin", "#fff"),
            ("z-index", "1.5"),
            ("width", "10qq"),
        ],
    )
    def test_invalid(self, catalog, key, value):
        """Values no variation accepts fail with a message."""
        result = validate_style_value(value, catalog.styles.lookup(key), catalog)
        assert not result.valid
        assert key in result.message

    @pytest.mark.unit
    def test_empty_clears(self, catalog):
        """The empty string is always valid."""
        result = validate_style_value("  ", catalog.styles.lookup("color"), catalog)
        assert result.valid
        assert result.value == ""

    @pytest.mark.unit
    def test_value_is_stripped(self, catalog):
        """Surrounding whitespace is removed."""
        result = validate_style_value(" 4px ", catalog.styles.lookup("margin"), catalog)
        assert result.value == "4px"


class TestValidateStyle:
    """Tests for combined key and value validation."""

    @pytest.mark.unit
    def test_unknown_key_short_circuits(self, catalog):
        """A bad key fails before the value is looked at."""
        result = validate_style("colour", "#fff", catalog)
        assert not result.valid
        assert "colour" in result.message

    @pytest.mark.unit
    def test_combined(self, catalog):
        """A good key and value pass together."""
        assert validate_style("gap", "4px 8px", catalog).valid
