"""Environment-driven settings for blockengine.

Every setting the engine reads is declared once as an `EnvVar` member that
carries its variable name, default, type and category. Values are looked up
on each call, so tests and hosts can change the environment at runtime.

Lookup order: explicit override, then the process environment, then the
declared default.

Example:
    >>> from blockengine.config import EnvVar, get_environment
    >>>
    >>> get_environment(EnvVar.ROOT_ID)
    'body'
    >>> get_environment(EnvVar.MULTIPLIER_DEPTH, override=3)
    3
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from enum import Enum
from typing import Any, overload

logger = logging.getLogger(__name__)

# =============================================================================
# Environment Variable Configuration
# =============================================================================


@dataclass(frozen=True)
class EnvConfig:
    """Declaration of one setting.

    Attributes:
        name: Variable name in the process environment.
        default: Value used when the variable is unset or unparsable.
        var_type: Either str or int.
        description: One-line summary for listings.
        category: Group used by `list_environment_variables`.
    """

    name: str
    default: Any
    var_type: type
    description: str = ""
    category: str = "general"


class EnvVar(Enum):
    """Every setting blockengine reads, each backed by an EnvConfig.

    Categories:
        - logging: Log output configuration
        - style: Default style context dimensions
        - tree: Node tree identity and deletion lifecycle
        - grammar: Value grammar expansion limits
    """

    # -------------------------------------------------------------------------
    # Logging
    # -------------------------------------------------------------------------
    LOG_LEVEL = EnvConfig(
        name="BLOCKENGINE_LOG_LEVEL",
        default="INFO",
        var_type=str,
        description="Log level name passed to setup_logging",
        category="logging",
    )

    # -------------------------------------------------------------------------
    # Style Context Defaults
    # -------------------------------------------------------------------------
    DEFAULT_DEVICE = EnvConfig(
        name="BLOCKENGINE_DEFAULT_DEVICE",
        default="all",
        var_type=str,
        description="Device key used as the cascade fallback",
        category="style",
    )
    DEFAULT_ORIENTATION = EnvConfig(
        name="BLOCKENGINE_DEFAULT_ORIENTATION",
        default="all",
        var_type=str,
        description="Orientation key used as the cascade fallback",
        category="style",
    )
    DEFAULT_PSEUDO = EnvConfig(
        name="BLOCKENGINE_DEFAULT_PSEUDO",
        default="all",
        var_type=str,
        description="Pseudo-state key used as the cascade fallback",
        category="style",
    )

    # -------------------------------------------------------------------------
    # Tree
    # -------------------------------------------------------------------------
    ROOT_ID = EnvConfig(
        name="BLOCKENGINE_ROOT_ID",
        default="body",
        var_type=str,
        description="Id of the root node; never deletable",
        category="tree",
    )
    PURGE_DELAY_MS = EnvConfig(
        name="BLOCKENGINE_PURGE_DELAY_MS",
        default=100,
        var_type=int,
        description="Advisory delay hosts wait between detach and purge",
        category="tree",
    )

    # -------------------------------------------------------------------------
    # Grammar
    # -------------------------------------------------------------------------
    MULTIPLIER_DEPTH = EnvConfig(
        name="BLOCKENGINE_MULTIPLIER_DEPTH",
        default=2,
        var_type=int,
        description="Maximum repetitions generated for + and * multipliers",
        category="grammar",
    )


# =============================================================================
# Type Conversion Helpers
# =============================================================================


def _convert_value(value: str | None, var_type: type, default: Any) -> Any:
    """Turn a raw environment string into `var_type`.

    Unset variables and values that do not parse yield `default`.
    """
    if value is None or var_type is str:
        return default if value is None else value

    if var_type is int:
        try:
            return int(value.strip())
        except ValueError:
            logger.warning(f"Expected an integer, got {value!r}; using {default!r}")
            return default

    return value


# =============================================================================
# Main Interface
# =============================================================================


@overload
def get_environment(env_var: EnvVar, override: int) -> int: ...
@overload
def get_environment(env_var: EnvVar, override: str) -> str: ...
@overload
def get_environment(env_var: EnvVar, override: None = None) -> Any: ...


def get_environment(env_var: EnvVar, override: Any = None) -> Any:
    """Read one setting.

    Args:
        env_var: Setting to read.
        override: Value returned as-is when not None.

    Returns:
        The override, the converted environment value, or the default.

    Example:
        >>> get_environment(EnvVar.ROOT_ID, override="html")
        'html'
    """
    if override is not None:
        return override

    config: EnvConfig = env_var.value
    return _convert_value(os.environ.get(config.name), config.var_type, config.default)


def get_environment_info(env_var: EnvVar) -> EnvConfig:
    return env_var.value


# =============================================================================
# Convenience Functions
# =============================================================================


def get_style_defaults() -> tuple[str, str, str]:
    """Get the default (device, orientation, pseudo) keys for the cascade."""
    return (
        get_environment(EnvVar.DEFAULT_DEVICE),
        get_environment(EnvVar.DEFAULT_ORIENTATION),
        get_environment(EnvVar.DEFAULT_PSEUDO),
    )


def get_root_id(override: str | None = None) -> str:
    """Get the id of the tree root node."""
    return get_environment(EnvVar.ROOT_ID, override=override)


def get_log_level(override: str | None = None) -> int:
    """Get the configured log level as a numeric logging level.

    Unknown level names fall back to INFO.
    """
    name = str(get_environment(EnvVar.LOG_LEVEL, override=override)).upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO


def list_environment_variables(category: str | None = None) -> list[EnvVar]:
    """Declared settings in declaration order, restricted to `category` if given."""
    return [var for var in EnvVar if category is None or var.value.category == category]


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
