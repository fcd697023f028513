"""Unit tests for the style context."""

import pytest

from .lib import StyleContext, get_default_style_context


class TestStyleContext:
    """Tests for StyleContext construction."""

    @pytest.mark.unit
    def test_as_path(self):
        """Path order is device, orientation, pseudo."""
        assert StyleContext("mobile", "portrait", "hover").as_path() == (
            "mobile",
            "portrait",
            "hover",
        )

    @pytest.mark.unit
    def test_defaults_from_environment(self, monkeypatch):
        """Defaults follow the environment."""
        monkeypatch.setenv("BLOCKENGINE_DEFAULT_DEVICE", "desktop")
        monkeypatch.delenv("BLOCKENGINE_DEFAULT_ORIENTATION", raising=False)
        monkeypatch.delenv("BLOCKENGINE_DEFAULT_PSEUDO", raising=False)
        assert get_default_style_context() == StyleContext("desktop", "all", "all")

    @pytest.mark.unit
    def test_frozen(self):
        """Contexts are immutable and hashable."""
        context = StyleContext("all", "all", "all")
        with pytest.raises(AttributeError):
            context.device = "mobile"
        assert {context: 1}[StyleContext("all", "all", "all")] == 1

    @pytest.mark.unit
    def test_round_trip_through_shorthand(self, catalog):
        """Writing a shorthand then reading it returns the written value."""
        from . import resolve_style, update_style

        context = StyleContext("mobile", "all", "all")
        defaults = StyleContext("all", "all", "all")
        styles = update_style({}, "margin", "12px", context, catalog).data
        assert resolve_style(styles, "margin", context, catalog, defaults) == "12px"
