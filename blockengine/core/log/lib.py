"""Core logging implementation for blockengine.

The engine never configures handlers on import. Hosts call `setup_logging`
once; every module logs through a logger named after itself, below the
"blockengine" package logger.
"""

import logging
import sys

from blockengine.config import get_log_level

__all__ = ["LOGGER_NAME", "get_logger", "setup_logging"]

LOGGER_NAME = "blockengine"


def setup_logging(level: int | str | None = None, stream=sys.stderr) -> int:
    """Configure basic logging and the package logger level.

    Args:
        level: Numeric level or level name. None reads BLOCKENGINE_LOG_LEVEL;
            unknown names fall back to INFO.
        stream: Output stream.

    Returns:
        The numeric level applied to the package logger.
    """
    if not isinstance(level, int):
        level = get_log_level(override=level)

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=stream,
    )
    logging.getLogger(LOGGER_NAME).setLevel(level)
    return level


def get_logger(name: str | None = None) -> logging.Logger:
    """Get a logger instance.

    Args:
        name: Name of the logger. Defaults to the package logger.

    Returns:
        Logger instance.
    """
    return logging.getLogger(name or LOGGER_NAME)
