"""Grammar token helpers: canonical form, base name, parameters, type and expansion.

A grammar token is one of:
- a data type reference such as `<length>` or `<length [0,10]>`
- a function shape such as `fit-content(<length>)`
- a literal keyword such as `auto`
"""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from blockengine.catalog import CatalogProvider, TokenDefinition, UnitType
from blockengine.grammar.text import split_top_level

logger = logging.getLogger(__name__)

_DATA_TYPE = re.compile(r"^<([^>\s]+)(?:\s+(\[[^\]]+\]))?>$")
_FUNCTION = re.compile(r"^([a-zA-Z0-9-]+)\((.*)\)$")
_LITERAL = re.compile(r"^(?:[a-zA-Z0-9_-]+|[/,])$")
_RANGE = re.compile(r"^\[\s*([^,\]]*)\s*,\s*([^,\]]*)\s*\]$")
_TOKEN_REF = re.compile(r"<[^<>]+>")

# Combinators that, when present at the top level of an expansion, force the
# expansion to be grouped before substitution.
_COMBINATORS = ("||", "&&", "|", " ", ",", "/")

DIMENSION_TYPES: frozenset[str] = frozenset(unit_type.value for unit_type in UnitType)


class TokenType(str, Enum):
    """Categories shared by grammar tokens and classified raw values."""

    KEYWORD = "keyword"
    DIMENSION = "dimension"
    INTEGER = "integer"
    NUMBER = "number"
    COLOR = "color"
    FUNCTION = "function"
    LINK = "link"


_SCALAR_TYPES: dict[str, TokenType] = {
    "number": TokenType.NUMBER,
    "integer": TokenType.INTEGER,
    "color": TokenType.COLOR,
    "link": TokenType.LINK,
}


@dataclass(frozen=True)
class TokenParam:
    """Parameters carried by a token.

    Attributes:
        type: "range" for `<x [min,max]>`, "function" for `name(args)`.
        range: Raw range text, e.g. "[0,10]".
        min: Lower bound (may be -inf).
        max: Upper bound (may be inf).
        syntax: Argument grammar of a function token.
    """

    type: str
    range: str | None = None
    min: float | None = None
    max: float | None = None
    syntax: str | None = None


# =============================================================================
# Inspection
# =============================================================================


def get_token_canonical(token: str) -> str | None:
    """Strip qualifiers from a token so tokens of one type compare equal.

    Idempotent: canonical(canonical(t)) == canonical(t).

    Example:
        >>> get_token_canonical("<length [0,10]>")
        '<length>'
        >>> get_token_canonical("fit-content(<length>)")
        'fit-content()'
        >>> get_token_canonical("auto")
        'auto'
    """
    token = token.strip()
    match = _DATA_TYPE.match(token)
    if match:
        return f"<{match.group(1)}>"

    match = _FUNCTION.match(token)
    if match:
        return f"{match.group(1)}()"

    if _LITERAL.match(token):
        return token

    logger.debug(f"Unrecognized token format: {token!r}")
    return None


def get_token_base(token: str) -> str | None:
    """Token name without brackets or parentheses, e.g. "length" or "fit-content"."""
    canonical = get_token_canonical(token)
    if canonical is None:
        return None
    return canonical.replace("<", "").replace(">", "").replace("()", "")


def _parse_bound(text: str, default: float) -> float:
    text = text.strip()
    if not text:
        return default
    if text in ("∞", "+∞", "inf", "+inf"):
        return math.inf
    if text in ("-∞", "-inf"):
        return -math.inf
    try:
        return float(text)
    except ValueError:
        return default


def get_token_param(token: str) -> TokenParam | None:
    """Extract the range of a data type token or the arguments of a function.

    Example:
        >>> get_token_param("<length [0,∞]>")
        TokenParam(type='range', range='[0,∞]', min=0.0, max=inf, syntax=None)
    """
    token = token.strip()
    match = _DATA_TYPE.match(token)
    if match:
        range_text = match.group(2)
        if not range_text:
            return None
        bounds = _RANGE.match(range_text)
        if not bounds:
            return TokenParam(type="range", range=range_text)
        return TokenParam(
            type="range",
            range=range_text,
            min=_parse_bound(bounds.group(1), -math.inf),
            max=_parse_bound(bounds.group(2), math.inf),
        )

    match = _FUNCTION.match(token)
    if match:
        return TokenParam(type="function", syntax=match.group(2))

    return None


def get_token_type(token: str) -> TokenType | None:
    """Classify a grammar token.

    Composite data types (e.g. `<ratio>`) have no type of their own and
    return None; they must be expanded first.
    """
    canonical = get_token_canonical(token)
    if canonical is None:
        return None

    if canonical.startswith("<"):
        base = canonical[1:-1]
        if base in DIMENSION_TYPES:
            return TokenType.DIMENSION
        return _SCALAR_TYPES.get(base)

    if canonical.endswith("()"):
        return TokenType.FUNCTION

    if canonical in ("/", ","):
        return None

    return TokenType.KEYWORD


def get_token_value(token: str, tokens: CatalogProvider[TokenDefinition]) -> str | None:
    """Default raw value for a token: the catalog default, else its canonical form."""
    canonical = get_token_canonical(token)
    if canonical is None:
        return None
    definition = tokens.lookup(canonical)
    if definition is not None and definition.default is not None:
        return definition.default
    return canonical


def get_token_values(
    token_list: Iterable[str], tokens: CatalogProvider[TokenDefinition]
) -> list[str]:
    """Default values for several tokens, skipping unrecognized ones."""
    values = (get_token_value(token, tokens) for token in token_list)
    return [value for value in values if value is not None]


# =============================================================================
# Expansion
# =============================================================================


def _with_range(token: str, range_text: str) -> str:
    """Attach `range_text` to a data type token, replacing any existing range."""
    match = _DATA_TYPE.match(token)
    if not match:
        return token
    return f"<{match.group(1)} {range_text}>"


def _needs_group(syntax: str) -> bool:
    return len(split_top_level(syntax, list(_COMBINATORS))) > 1


def expand_tokens(
    syntax: str,
    tokens: CatalogProvider[TokenDefinition],
    _seen: set[str] | None = None,
) -> str:
    """Recursively replace `<token>` references with their catalog grammar.

    Unknown tokens are left in place. A token already being expanded is left
    unexpanded when met again, which also stops self-referencing primitives
    such as `<length>` -> `<length>`. A range on the outer token is pushed
    onto every data type token of its expansion. Multi-part expansions are
    wrapped in a `[ ]` group so operator precedence is preserved.

    Args:
        syntax: Grammar string, e.g. "auto | <length-percentage [0,∞]>".
        tokens: Token catalog.

    Returns:
        Expanded grammar string.

    Example:
        >>> expand_tokens("<length-percentage [0,∞]>", catalog.tokens)
        '[<length [0,∞]> | <percentage [0,∞]>]'
    """
    seen = set() if _seen is None else _seen

    def replace(match: re.Match[str]) -> str:
        token = match.group(0)
        canonical = get_token_canonical(token)
        if canonical is None or canonical in seen:
            return token

        definition = tokens.lookup(canonical)
        if definition is None:
            return token

        seen.add(canonical)
        try:
            expanded = expand_tokens(definition.syntax, tokens, seen).strip()
        finally:
            seen.discard(canonical)

        param = get_token_param(token)
        if param is not None and param.range:
            expanded = _TOKEN_REF.sub(
                lambda inner: _with_range(inner.group(0), param.range), expanded
            )

        if _needs_group(expanded):
            expanded = f"[{expanded}]"
        return expanded

    return _TOKEN_REF.sub(replace, syntax)


__all__ = [
    "DIMENSION_TYPES",
    "TokenType",
    "TokenParam",
    "get_token_canonical",
    "get_token_base",
    "get_token_param",
    "get_token_type",
    "get_token_value",
    "get_token_values",
    "expand_tokens",
]
