"""Tests for core logging module."""

import logging
from io import StringIO

import pytest

from .lib import LOGGER_NAME, get_logger, setup_logging


@pytest.fixture
def restore_level():
    package_logger = logging.getLogger(LOGGER_NAME)
    previous = package_logger.level
    yield
    package_logger.setLevel(previous)


class TestLogging:
    """Test core logging API."""

    @pytest.mark.unit
    def test_get_logger(self) -> None:
        """Verify logger instance creation."""
        logger = get_logger("test")
        assert logger.name == "test"
        assert isinstance(logger, logging.Logger)

    @pytest.mark.unit
    def test_get_logger_default_name(self) -> None:
        """Verify default logger name."""
        assert get_logger().name == LOGGER_NAME == "blockengine"

    @pytest.mark.unit
    def test_module_loggers_are_children(self) -> None:
        """Module loggers inherit the package logger level."""
        package = get_logger()
        child = get_logger("blockengine.tree.operations.lib")
        assert child.parent.name.startswith(package.name)

    @pytest.mark.unit
    def test_numeric_level(self, restore_level) -> None:
        """Numeric levels are applied as-is."""
        assert setup_logging(level=logging.DEBUG, stream=StringIO()) == logging.DEBUG
        assert get_logger().level == logging.DEBUG

    @pytest.mark.unit
    def test_level_name(self, restore_level) -> None:
        """Level names resolve case-insensitively, unknown names to INFO."""
        assert setup_logging(level="warning", stream=StringIO()) == logging.WARNING
        assert setup_logging(level="not-a-level", stream=StringIO()) == logging.INFO

    @pytest.mark.unit
    def test_level_from_environment(self, monkeypatch, restore_level) -> None:
        """Without an explicit level the environment decides."""
        monkeypatch.setenv("BLOCKENGINE_LOG_LEVEL", "ERROR")
        assert setup_logging(stream=StringIO()) == logging.ERROR
