"""Validation of style keys and raw style values against their grammar."""

from __future__ import annotations

import logging

from blockengine.catalog import Catalog, StyleDefinition
from blockengine.grammar.syntax import analyze_syntax, find_variation
from blockengine.grammar.text import VALUE_SEPARATORS, split_top_level
from blockengine.grammar.value import get_value_token
from blockengine.result import ValidateResult

logger = logging.getLogger(__name__)


def validate_style_key(key: str, catalog: Catalog) -> ValidateResult[StyleDefinition]:
    """Resolve a style key to its definition."""
    if not key or not key.strip():
        return ValidateResult.fail("Style key is empty")
    definition = catalog.styles.lookup(key)
    if definition is None:
        return ValidateResult.fail(f"Unknown style key: '{key}'")
    return ValidateResult.ok(definition)


def validate_style_value(
    value: str,
    definition: StyleDefinition,
    catalog: Catalog,
) -> ValidateResult[str]:
    """Check a raw value against a property's grammar.

    The value is split into top-level components on spaces, slashes and
    commas (function arguments stay intact). Each component is converted to
    its token form and the token sequence must match one normalized
    variation of the grammar. The empty string always passes and means
    "clear this property".

    Args:
        value: Raw value as typed by the user.
        definition: Style definition carrying the grammar.
        catalog: Catalog used for token expansion and unit lookup.

    Returns:
        ValidateResult carrying the stripped value.

    Example:
        >>> validate_style_value("16 / 9", catalog.styles.lookup("aspect-ratio"), catalog).valid
        True
    """
    value = value.strip()
    if not value:
        return ValidateResult.ok("")

    parts = split_top_level(value, VALUE_SEPARATORS)
    tokens = [get_value_token(part, catalog.units) for part in parts]
    unknown = [part for part, token in zip(parts, tokens) if token is None]
    if unknown:
        return ValidateResult.fail(f"Unrecognized value {unknown[0]!r} for '{definition.key}'")

    info = analyze_syntax(definition.syntax, catalog)
    if find_variation(tokens, info.normalized) == -1:
        logger.debug(f"'{definition.key}' rejected tokens {tokens}")
        return ValidateResult.fail(f"Invalid value {value!r} for '{definition.key}'")

    return ValidateResult.ok(value)


def validate_style(key: str, value: str, catalog: Catalog) -> ValidateResult[str]:
    """Validate a key and its value together."""
    key_result = validate_style_key(key, catalog)
    if not key_result.valid:
        return ValidateResult.fail(key_result.message)
    return validate_style_value(value, key_result.value, catalog)


__all__ = [
    "validate_style_key",
    "validate_style_value",
    "validate_style",
]
