"""Logging micro API for blockengine.

Example:
    >>> from blockengine.core.log import get_logger, setup_logging
    >>>
    >>> setup_logging("DEBUG")
    >>> get_logger().debug("engine ready")
"""

from .lib import LOGGER_NAME, get_logger, setup_logging

__all__ = ["LOGGER_NAME", "get_logger", "setup_logging"]
