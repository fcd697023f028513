"""Centralized configuration management for blockengine.

Provides unified access to all configuration via the `get_environment()` function.

Example:
    >>> from blockengine.config import EnvVar, get_environment
    >>>
    >>> root_id = get_environment(EnvVar.ROOT_ID)  # Returns str: "body"
    >>> delay = get_environment(EnvVar.PURGE_DELAY_MS)  # Returns int: 100
    >>>
    >>> # List available variables by category
    >>> for var in list_environment_variables("style"):
    ...     info = get_environment_info(var)
    ...     print(f"{info.name}: {info.description}")

Environment Variable Categories:
    logging: Log output configuration
    style: Default device, orientation and pseudo keys for the cascade
    tree: Root id and advisory purge delay
    grammar: Multiplier expansion depth
"""

from .lib import (
    # Core types
    EnvConfig,
    EnvVar,
    # Main interface
    get_environment,
    get_environment_info,
    get_log_level,
    get_root_id,
    get_style_defaults,
    # Introspection
    list_environment_variables,
)

__all__ = [
    # Core types
    "EnvConfig",
    "EnvVar",
    # Main interface
    "get_environment",
    "get_environment_info",
    # Convenience functions
    "get_style_defaults",
    "get_root_id",
    "get_log_level",
    # Introspection
    "list_environment_variables",
]
