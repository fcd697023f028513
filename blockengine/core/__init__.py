"""Core utilities shared by every blockengine subsystem."""

from .log import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
