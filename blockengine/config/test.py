"""Tests for configuration management."""

import logging

import pytest

from .lib import (
    EnvConfig,
    EnvVar,
    _convert_value,
    get_environment,
    get_environment_info,
    get_log_level,
    get_root_id,
    get_style_defaults,
    list_environment_variables,
)

# =============================================================================
# Tests for get_environment (main interface)
# =============================================================================


class TestGetEnvironment:
    """Tests for the unified get_environment interface."""

    @pytest.mark.unit
    def test_returns_default_when_not_set(self, monkeypatch):
        """Returns default value when env var is not set."""
        monkeypatch.delenv("BLOCKENGINE_PURGE_DELAY_MS", raising=False)
        result = get_environment(EnvVar.PURGE_DELAY_MS)
        assert result == 100

    @pytest.mark.unit
    def test_override_takes_priority(self, monkeypatch):
        """Override parameter takes highest priority."""
        monkeypatch.setenv("BLOCKENGINE_ROOT_ID", "html")
        result = get_environment(EnvVar.ROOT_ID, override="page")
        assert result == "page"

    @pytest.mark.unit
    def test_env_var_overrides_default(self, monkeypatch):
        """Environment variable overrides default value."""
        monkeypatch.setenv("BLOCKENGINE_MULTIPLIER_DEPTH", "4")
        result = get_environment(EnvVar.MULTIPLIER_DEPTH)
        assert result == 4
        assert isinstance(result, int)

    @pytest.mark.unit
    def test_invalid_int_returns_default(self, monkeypatch):
        """Invalid integer value returns default."""
        monkeypatch.setenv("BLOCKENGINE_PURGE_DELAY_MS", "soon")
        result = get_environment(EnvVar.PURGE_DELAY_MS)
        assert result == 100


class TestConvertValue:
    """Tests for raw string conversion."""

    @pytest.mark.unit
    def test_none_returns_default(self):
        """Missing values resolve to the default."""
        assert _convert_value(None, str, "all") == "all"

    @pytest.mark.unit
    def test_unparsable_value_warns(self, caplog):
        """Falling back on a bad value is logged."""
        with caplog.at_level(logging.WARNING, logger="blockengine.config.lib"):
            assert _convert_value(" 7 ", int, 2) == 7
            assert _convert_value("seven", int, 2) == 2
        assert "seven" in caplog.text


class TestGetEnvironmentInfo:
    """Tests for environment variable metadata."""

    @pytest.mark.unit
    def test_returns_env_config(self):
        """Returns EnvConfig dataclass."""
        info = get_environment_info(EnvVar.ROOT_ID)
        assert isinstance(info, EnvConfig)
        assert info.name == "BLOCKENGINE_ROOT_ID"
        assert info.default == "body"
        assert info.var_type is str
        assert info.category == "tree"

    @pytest.mark.unit
    def test_description_present(self):
        """Description field is populated."""
        info = get_environment_info(EnvVar.DEFAULT_PSEUDO)
        assert "Pseudo" in info.description


class TestListEnvironmentVariables:
    """Tests for listing environment variables."""

    @pytest.mark.unit
    def test_returns_all_variables(self):
        """Returns all EnvVar members when no category."""
        result = list_environment_variables()
        assert len(result) == len(EnvVar)

    @pytest.mark.unit
    def test_style_category(self):
        """Style category holds the three cascade defaults."""
        style_vars = list_environment_variables("style")
        assert set(style_vars) == {
            EnvVar.DEFAULT_DEVICE,
            EnvVar.DEFAULT_ORIENTATION,
            EnvVar.DEFAULT_PSEUDO,
        }


# =============================================================================
# Tests for convenience functions
# =============================================================================


class TestConvenience:
    """Tests for the convenience accessors."""

    @pytest.mark.unit
    def test_style_defaults(self, monkeypatch):
        """Defaults resolve to 'all' unless overridden in the environment."""
        monkeypatch.delenv("BLOCKENGINE_DEFAULT_DEVICE", raising=False)
        monkeypatch.delenv("BLOCKENGINE_DEFAULT_ORIENTATION", raising=False)
        monkeypatch.setenv("BLOCKENGINE_DEFAULT_PSEUDO", "base")
        assert get_style_defaults() == ("all", "all", "base")

    @pytest.mark.unit
    def test_root_id(self, monkeypatch):
        """Root id honours override before environment."""
        monkeypatch.setenv("BLOCKENGINE_ROOT_ID", "html")
        assert get_root_id() == "html"
        assert get_root_id(override="page") == "page"

    @pytest.mark.unit
    def test_log_level(self, monkeypatch):
        """Level names map to numeric levels, unknown names to INFO."""
        monkeypatch.setenv("BLOCKENGINE_LOG_LEVEL", "debug")
        assert get_log_level() == logging.DEBUG
        assert get_log_level(override="verbose") == logging.INFO
