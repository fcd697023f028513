"""Classification of raw style values into grammar tokens.

Raw values are what users type ("10px", "auto", "#fff"); grammar tokens are
what syntax variations contain ("<length>", "auto", "<color>"). Converting
values to tokens lets a value be matched against a style's grammar.
"""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Iterable, Mapping

from blockengine.catalog import CatalogProvider, UnitDefinition, UnitType

from ..token import TokenType, get_token_canonical

logger = logging.getLogger(__name__)

_KEYWORD = re.compile(r"^[a-zA-Z-]+$")
_FUNCTION = re.compile(r"^([a-zA-Z0-9-]+)\((.*)\)$")
_INTEGER = re.compile(r"^-?\d+$")
_NUMBER = re.compile(r"^-?\d*\.?\d+$")
_DIMENSION = re.compile(r"^([+-]?\d*\.?\d+(?:[eE][+-]?\d+)?)([a-zA-Z%]*)$")
_HEX_COLOR = re.compile(r"^#(?:[0-9a-fA-F]{3,4}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")
_LINK = re.compile(r'^"?(?:https?://|/)[^\s"]+"?$')

COLOR_FUNCTIONS: frozenset[str] = frozenset(
    {"rgb", "rgba", "hsl", "hsla", "hwb", "lab", "lch", "oklab", "oklch", "color"}
)


# =============================================================================
# Predicates
# =============================================================================


def is_value_keyword(value: str) -> bool:
    return bool(_KEYWORD.match(value))


def is_value_function(value: str) -> bool:
    return bool(_FUNCTION.match(value))


def is_value_integer(value: str) -> bool:
    return bool(_INTEGER.match(value))


def is_value_number(value: str) -> bool:
    return bool(_NUMBER.match(value))


def is_value_link(value: str) -> bool:
    return bool(_LINK.match(value))


def is_value_color(value: str) -> bool:
    """Hex colors and color functions. Named colors classify as keywords."""
    if _HEX_COLOR.match(value):
        return True
    match = _FUNCTION.match(value)
    return bool(match) and match.group(1).lower() in COLOR_FUNCTIONS


def is_value_dimension(value: str, units: CatalogProvider[UnitDefinition]) -> bool:
    """A number immediately followed by a registered unit, e.g. "10px" or "50%"."""
    match = _DIMENSION.match(value)
    if not match or not match.group(2):
        return False
    return units.lookup(match.group(2)) is not None


def get_value_type(
    value: str, units: CatalogProvider[UnitDefinition]
) -> TokenType | None:
    """Classify a raw value.

    Checks run link, dimension, keyword, color, function, integer, number so
    that "10px" is a dimension and "rgb(0,0,0)" a color rather than a
    generic function.

    Returns:
        TokenType, or None when the value matches no category.
    """
    value = value.strip()
    if not value:
        return None
    if is_value_link(value):
        return TokenType.LINK
    if is_value_dimension(value, units):
        return TokenType.DIMENSION
    if is_value_keyword(value):
        return TokenType.KEYWORD
    if is_value_color(value):
        return TokenType.COLOR
    if is_value_function(value):
        return TokenType.FUNCTION
    if is_value_integer(value):
        return TokenType.INTEGER
    if is_value_number(value):
        return TokenType.NUMBER
    return None


# =============================================================================
# Dimensions
# =============================================================================


def extract_dimension_number(value: str) -> float | None:
    match = _DIMENSION.match(value.strip())
    return float(match.group(1)) if match else None


def extract_dimension_unit(value: str) -> str | None:
    match = _DIMENSION.match(value.strip())
    return match.group(2) if match and match.group(2) else None


def extract_dimension_range(options: Mapping[str, float | None] | None) -> tuple[float, float]:
    """Bounds from an option-like mapping, defaulting to (-inf, inf)."""
    options = options or {}
    low = options.get("min")
    high = options.get("max")
    return (
        -math.inf if low is None else float(low),
        math.inf if high is None else float(high),
    )


def get_dimension_type(value: str, units: CatalogProvider[UnitDefinition]) -> str | None:
    """Dimension category of a value's unit, e.g. "length" for "10px"."""
    unit = extract_dimension_unit(value)
    if unit is None:
        return None
    definition = units.lookup(unit)
    if definition is None:
        return None
    return UnitType(definition.type).value


# =============================================================================
# Tokens
# =============================================================================


def get_value_token(value: str, units: CatalogProvider[UnitDefinition]) -> str | None:
    """Map a raw value to the grammar token it satisfies.

    Example:
        >>> get_value_token("10px", catalog.units)
        '<length>'
        >>> get_value_token("3", catalog.units)
        '<integer>'
        >>> get_value_token("fit-content(10px)", catalog.units)
        'fit-content()'
    """
    value = value.strip()
    value_type = get_value_type(value, units)

    if value_type is None:
        logger.debug(f"Unclassifiable value: {value!r}")
        return None
    if value_type == TokenType.KEYWORD:
        return value
    if value_type == TokenType.DIMENSION:
        dimension = get_dimension_type(value, units)
        return f"<{dimension}>" if dimension else None
    if value_type == TokenType.FUNCTION:
        return get_token_canonical(value)
    return f"<{value_type.value}>"


def get_value_tokens(
    values: Iterable[str], units: CatalogProvider[UnitDefinition]
) -> list[str]:
    """Tokens for several values, dropping unclassifiable ones."""
    tokens = (get_value_token(value, units) for value in values)
    return [token for token in tokens if token is not None]


__all__ = [
    "COLOR_FUNCTIONS",
    "is_value_keyword",
    "is_value_function",
    "is_value_integer",
    "is_value_number",
    "is_value_link",
    "is_value_color",
    "is_value_dimension",
    "get_value_type",
    "extract_dimension_number",
    "extract_dimension_unit",
    "extract_dimension_range",
    "get_dimension_type",
    "get_value_token",
    "get_value_tokens",
]
