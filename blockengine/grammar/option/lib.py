"""Slot option tables and slot value joining for slot-based value editors.

A value such as "10px auto" is edited as slots ["10px", "auto"]. For each
slot the table lists the options that keep the whole value a valid prefix
of some grammar variation, given what the other slots already hold.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass

from blockengine.catalog import Catalog
from blockengine.result import ValidateResult

from ..syntax import find_variation, matches_variation, tokens_match
from ..text import join_with_separators
from ..token import (
    TokenType,
    get_token_base,
    get_token_canonical,
    get_token_param,
    get_token_type,
    get_token_value,
    get_token_values,
)
from ..value import get_value_token, get_value_type

logger = logging.getLogger(__name__)

_CATEGORIES = {
    TokenType.KEYWORD: "keyword",
    TokenType.DIMENSION: "dimension",
    TokenType.FUNCTION: "function",
}


@dataclass(frozen=True)
class StyleOption:
    """One selectable entry in a slot.

    Attributes:
        name: Display name ("auto", "px", "number", "fit-content()").
        value: Raw value written into the slot when chosen.
        type: Token category of the option.
        category: "keyword", "dimension", "function" or "other".
        token: Canonical grammar token the option satisfies.
        syntax: Argument grammar of function options.
        unit: Unit key for dimension options.
        min: Lower bound from the token range.
        max: Upper bound from the token range.
    """

    name: str
    value: str
    type: TokenType
    category: str
    token: str
    syntax: str | None = None
    unit: str | None = None
    min: float | None = None
    max: float | None = None


def _category(token_type: TokenType) -> str:
    return _CATEGORIES.get(token_type, "other")


def _format_number(number: float) -> str:
    return f"{number:g}"


# =============================================================================
# Slot Matching
# =============================================================================


def is_slot_option_valid(
    token: str,
    slot_index: int,
    syntax_normalized: Sequence[str],
    current_tokens: Sequence[str | None],
) -> bool:
    """Whether `token` may fill `slot_index` given the other slots.

    The candidate replaces the current token at `slot_index`; slots before
    it that are unknown or empty match anything. The result must be a
    prefix of at least one normalized variation.

    Example:
        >>> is_slot_option_valid("auto", 0, ["auto <length>"], ["<length>", "<length>"])
        True
    """
    canonical = get_token_canonical(token)
    if canonical is None:
        return False

    if slot_index < len(current_tokens) and current_tokens[slot_index] == canonical:
        return True

    test_tokens = list(current_tokens[:slot_index])
    test_tokens.extend([None] * (slot_index - len(test_tokens)))
    test_tokens.append(canonical)
    test_tokens.extend(current_tokens[slot_index + 1 :])

    return any(
        matches_variation(test_tokens, variation, prefix=True)
        for variation in syntax_normalized
    )


# =============================================================================
# Options
# =============================================================================


def create_slot_options(token: str, catalog: Catalog) -> list[StyleOption]:
    """Options a single grammar token offers.

    Dimension tokens offer one option per registered unit of their type;
    function tokens are offered only when the catalog declares a default
    value for them.
    """
    canonical = get_token_canonical(token)
    token_type = get_token_type(token)
    if canonical is None or token_type is None:
        return []

    param = get_token_param(token)
    low = param.min if param is not None and param.type == "range" else None
    high = param.max if param is not None and param.type == "range" else None

    if token_type == TokenType.KEYWORD:
        return [StyleOption(canonical, canonical, token_type, "keyword", canonical)]

    if token_type == TokenType.NUMBER:
        return [StyleOption("number", "0.0", token_type, "other", canonical, min=low, max=high)]

    if token_type == TokenType.INTEGER:
        return [StyleOption("integer", "0", token_type, "other", canonical, min=low, max=high)]

    if token_type == TokenType.DIMENSION:
        start = low if low is not None and math.isfinite(low) and low > 0 else 0
        return [
            StyleOption(
                name=unit.key,
                value=f"{_format_number(start)}{unit.key}",
                type=token_type,
                category="dimension",
                token=canonical,
                unit=unit.key,
                min=low,
                max=high,
            )
            for unit in catalog.units_of(get_token_base(token))
        ]

    if token_type == TokenType.FUNCTION:
        default = catalog.function_defaults.get(get_token_base(token))
        if default is None:
            logger.debug(f"No default value for function token {canonical!r}")
            return []
        return [
            StyleOption(canonical, default, token_type, "function", canonical, syntax=param.syntax)
        ]

    value = get_token_value(token, catalog.tokens)
    return [StyleOption(token_type.value, value, token_type, "other", canonical)]


def _current_option(value: str, catalog: Catalog) -> StyleOption:
    value_type = get_value_type(value, catalog.units) or TokenType.KEYWORD
    token = get_value_token(value, catalog.units) or value
    return StyleOption(value, value, value_type, _category(value_type), token)


def create_option_table(
    syntax_normalized: Sequence[str],
    syntax_set: Sequence[Sequence[str]],
    values: Sequence[str],
    catalog: Catalog,
) -> list[list[StyleOption]]:
    """Build the per-slot option lists for a value editor.

    Args:
        syntax_normalized: Normalized variations of the style grammar.
        syntax_set: Candidate raw tokens per slot.
        values: Current raw slot values, possibly empty.
        catalog: Catalog used for units, token defaults and functions.

    Returns:
        One list of options per slot. A slot's current value is always
        present even when no grammar option produces it.

    Example:
        >>> info = analyze_syntax("auto | <length>{1,2}", catalog)
        >>> table = create_option_table(info.normalized, info.slots, ["10px"], catalog)
        >>> [option.name for option in table[0]][:3]
        ['auto', 'px', 'em']
    """
    if not syntax_normalized or not syntax_set:
        return []

    current_tokens = [get_value_token(value, catalog.units) if value else None for value in values]
    table: list[list[StyleOption]] = []

    for slot_index, slot in enumerate(syntax_set):
        options: list[StyleOption] = []
        seen: set[str] = set()
        for token in slot:
            canonical = get_token_canonical(token)
            if canonical is None or canonical in seen:
                continue
            if not is_slot_option_valid(token, slot_index, syntax_normalized, current_tokens):
                continue
            seen.add(canonical)
            options.extend(create_slot_options(token, catalog))

        current = values[slot_index] if slot_index < len(values) else ""
        current_token = current_tokens[slot_index] if current else None
        if current and not any(
            option.value == current
            or (current_token is not None and tokens_match(current_token, option.token))
            for option in options
        ):
            options.insert(0, _current_option(current, catalog))

        table.append(options)

    return table


# =============================================================================
# Joining
# =============================================================================


def _merge_defaults(values: Sequence[str], defaults: Sequence[str]) -> list[str]:
    """Overlay `values` onto `defaults` position by position."""
    merged = list(values)
    merged.extend(defaults[len(values) :])
    return merged


def join_slot_values(
    values: Sequence[str],
    syntax_normalized: Sequence[str],
    syntax_separators: Sequence[Sequence[str]],
    catalog: Catalog,
) -> ValidateResult[str]:
    """Join edited slot values into one raw value string.

    An exact variation match joins with that variation's separators. A
    prefix match first fills the remaining slots with token defaults.

    Args:
        values: Slot values after an edit.
        syntax_normalized: Normalized variations of the style grammar.
        syntax_separators: Separators per variation, aligned with
            `syntax_normalized`.
        catalog: Catalog used for classification and token defaults.

    Returns:
        ValidateResult carrying the joined value, or failing when no
        variation accepts the values.

    Example:
        >>> join_slot_values(["16", "9"], info.normalized, info.separators, catalog).value
        '16 / 9'
    """
    slots = [value.strip() for value in values if value.strip()]
    if not slots:
        return ValidateResult.ok("")

    tokens = [get_value_token(value, catalog.units) for value in slots]
    if any(token is None for token in tokens):
        return ValidateResult.fail(f"Unrecognized slot value in {slots}")

    index = find_variation(tokens, syntax_normalized)

    if index == -1:
        index = find_variation(tokens, syntax_normalized, prefix=True)
        if index == -1:
            return ValidateResult.fail(f"No syntax variation accepts {slots}")
        defaults = get_token_values(syntax_normalized[index].split(" "), catalog.tokens)
        slots = _merge_defaults(slots, defaults)

    separators = syntax_separators[index] if index < len(syntax_separators) else []
    return ValidateResult.ok(join_with_separators(slots, separators))


__all__ = [
    "StyleOption",
    "is_slot_option_valid",
    "create_slot_options",
    "create_option_table",
    "join_slot_values",
]
