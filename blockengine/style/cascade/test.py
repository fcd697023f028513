"""Unit tests for cascading style resolution."""

import pytest

from ..lib import StyleContext
from .lib import (
    collect_style_keys,
    get_cascade_paths,
    get_style_at,
    resolve_all_styles,
    resolve_style,
    resolve_style_value,
)

DEFAULTS = StyleContext("all", "all", "all")

STYLES = {
    "all": {
        "all": {
            "all": {"color": "red", "margin-top": "10px", "margin-right": "10px"},
            "hover": {"color": "green"},
        },
    },
    "mobile": {
        "all": {"all": {"color": "blue", "display": ""}},
        "portrait": {"all": {"display": "flex"}},
    },
}


class TestCascadePaths:
    """Tests for cascade path ordering."""

    @pytest.mark.unit
    def test_default_context_single_path(self):
        """The default context collapses to one path."""
        assert get_cascade_paths(DEFAULTS, DEFAULTS) == [("all", "all", "all")]

    @pytest.mark.unit
    def test_full_context_has_eight_paths(self):
        """A fully specific context yields eight distinct paths."""
        paths = get_cascade_paths(StyleContext("mobile", "portrait", "hover"), DEFAULTS)
        assert len(paths) == 8
        assert len(set(paths)) == 8

    @pytest.mark.unit
    def test_exact_path_first(self):
        """The requested context is tried first."""
        context = StyleContext("mobile", "portrait", "all")
        paths = get_cascade_paths(context, DEFAULTS)
        assert paths[0] == ("mobile", "portrait", "all")
        assert paths[-1] == ("all", "all", "all")

    @pytest.mark.unit
    def test_pseudo_paths_before_default_pseudo(self):
        """Every path with the requested pseudo precedes the fallbacks."""
        paths = get_cascade_paths(StyleContext("mobile", "portrait", "hover"), DEFAULTS)
        assert all(path[2] == "hover" for path in paths[:4])
        assert all(path[2] == "all" for path in paths[4:])


class TestResolveValue:
    """Tests for single-property resolution."""

    @pytest.mark.unit
    def test_exact_value(self):
        """A value stored at the exact context wins."""
        context = StyleContext("mobile", "all", "all")
        assert resolve_style_value(STYLES, "color", context, DEFAULTS) == "blue"

    @pytest.mark.unit
    def test_device_fallback(self):
        """Unknown devices fall back to the default device."""
        context = StyleContext("tablet", "all", "all")
        assert resolve_style_value(STYLES, "color", context, DEFAULTS) == "red"

    @pytest.mark.unit
    def test_pseudo_beats_device(self):
        """A default-device hover value beats a mobile non-hover value."""
        context = StyleContext("mobile", "all", "hover")
        assert resolve_style_value(STYLES, "color", context, DEFAULTS) == "green"

    @pytest.mark.unit
    def test_empty_string_is_unset(self):
        """An empty stored value does not stop the cascade."""
        context = StyleContext("mobile", "portrait", "all")
        assert resolve_style_value(STYLES, "display", context, DEFAULTS) == "flex"
        context = StyleContext("mobile", "all", "all")
        assert resolve_style_value(STYLES, "display", context, DEFAULTS) == ""

    @pytest.mark.unit
    def test_missing_key(self):
        """A key stored nowhere resolves to empty."""
        assert resolve_style_value(STYLES, "opacity", DEFAULTS, DEFAULTS) == ""

    @pytest.mark.unit
    def test_default_context_from_environment(self, monkeypatch, nodes):
        """Defaults come from configuration when not passed."""
        monkeypatch.delenv("BLOCKENGINE_DEFAULT_DEVICE", raising=False)
        context = StyleContext("mobile", "all", "hover")
        assert resolve_style_value(nodes["a"].styles, "color", context) == "blue"

    @pytest.mark.unit
    def test_get_style_at(self):
        """Raw lookup distinguishes absent from empty."""
        assert get_style_at(STYLES, ("mobile", "all", "all"), "display") == ""
        assert get_style_at(STYLES, ("desktop", "all", "all"), "display") is None


class TestShorthand:
    """Tests for shorthand resolution through longhands."""

    @pytest.mark.unit
    def test_all_equal(self, catalog):
        """Equal longhands resolve the shorthand to that value."""
        styles = {"all": {"all": {"all": {
            side: "4px" for side in catalog.styles.lookup("margin").longhand
        }}}}
        assert resolve_style(styles, "margin", DEFAULTS, catalog, DEFAULTS) == "4px"

    @pytest.mark.unit
    def test_all_empty(self, catalog):
        """Unset longhands resolve the shorthand to empty."""
        assert resolve_style({}, "margin", DEFAULTS, catalog, DEFAULTS) == ""

    @pytest.mark.unit
    def test_mixed_returns_first(self, catalog):
        """Mixed longhands report the first longhand's value."""
        styles = {"all": {"all": {"all": {"margin-top": "", "margin-right": "8px"}}}}
        assert resolve_style(styles, "margin", DEFAULTS, catalog, DEFAULTS) == ""
        assert resolve_style(STYLES, "margin", DEFAULTS, catalog, DEFAULTS) == "10px"

    @pytest.mark.unit
    def test_longhand_direct(self, catalog):
        """Longhands and plain properties resolve directly."""
        assert resolve_style(STYLES, "margin-top", DEFAULTS, catalog, DEFAULTS) == "10px"


class TestResolveAll:
    """Tests for bulk resolution."""

    @pytest.mark.unit
    def test_stored_keys(self):
        """Without a catalog only stored keys are resolved."""
        resolved = resolve_all_styles(STYLES, StyleContext("mobile", "all", "all"), defaults=DEFAULTS)
        assert resolved == {
            "color": "blue",
            "margin-top": "10px",
            "margin-right": "10px",
            "display": "",
        }

    @pytest.mark.unit
    def test_catalog_keys(self, catalog):
        """With a catalog every registered key is resolved."""
        resolved = resolve_all_styles(STYLES, DEFAULTS, catalog, defaults=DEFAULTS)
        assert set(resolved) == set(catalog.styles.keys())
        assert resolved["color"] == "red"
        assert resolved["opacity"] == ""

    @pytest.mark.unit
    def test_explicit_keys(self, catalog):
        """Explicit keys restrict the result."""
        resolved = resolve_all_styles(STYLES, DEFAULTS, catalog, keys=["color"], defaults=DEFAULTS)
        assert resolved == {"color": "red"}

    @pytest.mark.unit
    def test_collect_keys(self):
        """Stored keys are collected in first-seen order."""
        assert collect_style_keys(STYLES) == ["color", "margin-top", "margin-right", "display"]
