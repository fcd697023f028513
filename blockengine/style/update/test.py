"""Unit tests for style tree updates."""

import pytest

from ..lib import StyleContext
from .lib import get_style_targets, reset_style, set_style_at, update_style

DEFAULTS = StyleContext("all", "all", "all")
MOBILE = StyleContext("mobile", "all", "all")


class TestSetStyleAt:
    """Tests for the copy-on-write primitive."""

    @pytest.mark.unit
    def test_creates_path(self):
        """Missing intermediate levels are created."""
        assert set_style_at({}, MOBILE, "color", "red") == {
            "mobile": {"all": {"all": {"color": "red"}}}
        }

    @pytest.mark.unit
    def test_input_untouched(self):
        """The input tree is never mutated."""
        styles = {"all": {"all": {"all": {"color": "red"}}}}
        updated = set_style_at(styles, DEFAULTS, "color", "blue")
        assert styles["all"]["all"]["all"]["color"] == "red"
        assert updated["all"]["all"]["all"]["color"] == "blue"

    @pytest.mark.unit
    def test_siblings_shared(self):
        """Branches off the written path are reused."""
        styles = {"all": {"all": {"all": {}}}, "mobile": {"all": {"all": {"color": "red"}}}}
        updated = set_style_at(styles, DEFAULTS, "color", "blue")
        assert updated["mobile"] is styles["mobile"]


class TestUpdateStyle:
    """Tests for catalog-aware updates."""

    @pytest.mark.unit
    def test_plain_key(self, catalog):
        """A plain key is written as-is."""
        result = update_style({}, "color", "red", DEFAULTS, catalog)
        assert result.success
        assert result.data == {"all": {"all": {"all": {"color": "red"}}}}

    @pytest.mark.unit
    def test_shorthand_writes_longhands(self, catalog):
        """A shorthand fans out to every longhand and is not stored."""
        result = update_style({}, "margin", "4px", MOBILE, catalog)
        stored = result.data["mobile"]["all"]["all"]
        assert "margin" not in stored
        assert stored == {
            "margin-top": "4px",
            "margin-right": "4px",
            "margin-bottom": "4px",
            "margin-left": "4px",
        }

    @pytest.mark.unit
    def test_unknown_key(self, catalog):
        """Unregistered keys are rejected."""
        result = update_style({}, "colour", "red", DEFAULTS, catalog)
        assert not result.success
        assert "colour" in result.error

    @pytest.mark.unit
    def test_targets(self, catalog):
        """Targets are the longhands for shorthands only."""
        assert get_style_targets("gap", catalog) == ["row-gap", "column-gap"]
        assert get_style_targets("color", catalog) == ["color"]


class TestResetStyle:
    """Tests for clearing values."""

    @pytest.mark.unit
    def test_reset_writes_empty(self, catalog):
        """Reset stores the empty string rather than deleting."""
        styles = {"all": {"all": {"all": {"color": "red"}}}}
        result = reset_style(styles, "color", DEFAULTS, catalog)
        assert result.data["all"]["all"]["all"]["color"] == ""

    @pytest.mark.unit
    def test_reset_shorthand(self, catalog):
        """Resetting a shorthand clears every longhand."""
        styles = update_style({}, "gap", "8px", DEFAULTS, catalog).data
        result = reset_style(styles, "gap", DEFAULTS, catalog)
        assert result.data["all"]["all"]["all"] == {"row-gap": "", "column-gap": ""}
