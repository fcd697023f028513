"""Value grammar parsing into concrete syntax variations.

A grammar such as "<length>{1,2} | auto" is parsed into every sequence of
tokens it accepts: ["auto", "<length>", "<length> <length>"]. Three views
are derived from the variations:

- normalized: each variation with canonical tokens, for matching
- slots: the candidate raw tokens at each position, for option tables
- separators: the separators between the parts of each variation

Combinators follow CSS value definition syntax, from loosest to tightest:
`|` (exactly one), `||` (one or more, any order), `&&` (all, any order),
`,` (comma list), juxtaposition (all, in order). `[ ]` groups, and the
suffixes `?`, `*`, `+`, `#` and `{m,n}` repeat the preceding component.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass
from functools import lru_cache

from blockengine.catalog import Catalog, CatalogProvider, TokenDefinition
from blockengine.config import EnvVar, get_environment

from ..text import (
    all_subsets,
    cross_product,
    permutations,
    split_top_level,
    split_with_separators,
    unique,
)
from ..token import expand_tokens, get_token_canonical

logger = logging.getLogger(__name__)

_MULTIPLIER = re.compile(r"^(.+?)(\?|\*|\+|#|\{(\d+)(?:(,)(\d*))?\})$")
_DATA_TYPE_REF = re.compile(r"<([^<>\s]+)(?:\s+\[[^\]]*\])?>")
_BAR_PLACEHOLDER = "\x00"

# Data types accepted in variations even when the catalog does not declare them.
PRIMITIVE_TYPES: frozenset[str] = frozenset(
    {"length", "angle", "percentage", "number", "integer", "flex"}
)


@dataclass(frozen=True)
class SyntaxInfo:
    """All views of one style grammar, index-aligned by variation."""

    parsed: tuple[str, ...]
    normalized: tuple[str, ...]
    slots: tuple[tuple[str, ...], ...]
    separators: tuple[tuple[str, ...], ...]


# =============================================================================
# Normalization
# =============================================================================


def normalize_syntax(syntax: str) -> str:
    """Canonical spacing around combinators.

    `||` gets single spaces, `&&` and `|` get none, multipliers attach to
    the preceding component and whitespace runs collapse to one space.

    Example:
        >>> normalize_syntax("a  |b||  c &&  d ?")
        'a|b || c&&d?'
    """
    text = syntax.replace("||", _BAR_PLACEHOLDER)
    text = re.sub(r"\s*\|\s*", "|", text)
    text = re.sub(r"\s*&&\s*", "&&", text)
    text = re.sub(rf"\s*{_BAR_PLACEHOLDER}\s*", " || ", text)
    text = re.sub(r"\s+([?*+#])", r"\1", text)
    text = re.sub(r"\s+(\{\d+(?:,\d*)?\})", r"\1", text)
    text = re.sub(r"\[\s+", "[", text)
    text = re.sub(r"\s+\]", "]", text)
    text = re.sub(r"\s+", " ", text)
    return text.strip()


# =============================================================================
# Parsing
# =============================================================================


def _split_single_bar(text: str) -> list[str]:
    masked = text.replace("||", _BAR_PLACEHOLDER * 2)
    parts = split_top_level(masked, ["|"])
    return [part.replace(_BAR_PLACEHOLDER * 2, "||") for part in parts]


def _join_sequence(parts: tuple[str, ...], separator: str = " ") -> str:
    return separator.join(part for part in parts if part)


def _is_group(text: str) -> bool:
    """True when `text` is one bracket group spanning the whole string."""
    if not (text.startswith("[") and text.endswith("]")):
        return False
    depth = 0
    for index, char in enumerate(text):
        if char == "[":
            depth += 1
        elif char == "]":
            depth -= 1
            if depth == 0 and index != len(text) - 1:
                return False
    return depth == 0


def _sort_by_length(variations: list[str]) -> list[str]:
    return sorted(unique(variations), key=len)


def _parse_multiplier(match: re.Match[str], max_depth: int) -> list[str] | None:
    base, suffix = match.group(1), match.group(2)
    if base.endswith(" ") or base.endswith("|") or base.endswith("&"):
        return None

    if suffix == "?":
        counts = range(0, 2)
    elif suffix == "*":
        counts = range(0, max_depth + 1)
    elif suffix in ("+", "#"):
        counts = range(1, max_depth + 1)
    else:
        low = int(match.group(3))
        if match.group(4) is None:
            high = low
        elif match.group(5):
            high = int(match.group(5))
        else:
            high = low + max_depth - 1
        counts = range(low, high + 1)

    variants = _parse(base, max_depth)
    separator = ", " if suffix == "#" else " "
    results: list[str] = []
    for count in counts:
        if count == 0:
            results.append("")
            continue
        for combo in cross_product([variants] * count):
            results.append(_join_sequence(combo, separator))
    return unique(results)


def _parse(syntax: str, max_depth: int) -> list[str]:
    text = syntax.strip()
    if not text:
        return [""]

    alternatives = _split_single_bar(text)
    if len(alternatives) > 1:
        return unique(
            variation for part in alternatives for variation in _parse(part, max_depth)
        )

    any_order = split_top_level(text, ["||"])
    if len(any_order) > 1:
        results: list[str] = []
        for subset in all_subsets(any_order)[1:]:
            for ordering in permutations(subset):
                parsed = [_parse(part, max_depth) for part in ordering]
                results.extend(_join_sequence(combo) for combo in cross_product(parsed))
        return _sort_by_length(results)

    all_any_order = split_top_level(text, ["&&"])
    if len(all_any_order) > 1:
        results = []
        for ordering in permutations(all_any_order):
            parsed = [_parse(part, max_depth) for part in ordering]
            results.extend(_join_sequence(combo) for combo in cross_product(parsed))
        return _sort_by_length(results)

    comma_list = split_top_level(text, [","])
    if len(comma_list) > 1:
        parsed = [_parse(part, max_depth) for part in comma_list]
        return unique(_join_sequence(combo, ", ") for combo in cross_product(parsed))

    sequence = split_top_level(text, [" "])
    if len(sequence) > 1:
        parsed = [_parse(part, max_depth) for part in sequence]
        return unique(_join_sequence(combo) for combo in cross_product(parsed))

    if _is_group(text):
        return _parse(text[1:-1], max_depth)

    match = _MULTIPLIER.match(text)
    if match:
        repeated = _parse_multiplier(match, max_depth)
        if repeated is not None:
            return repeated

    return [text]


def parse_syntax(syntax: str, max_depth: int | None = None) -> list[str]:
    """Parse a grammar into every token sequence it accepts.

    Args:
        syntax: Grammar string, already expanded.
        max_depth: Upper repeat count for open multipliers (`+`, `*`, `#`,
            `{m,}`). Defaults to BLOCKENGINE_MULTIPLIER_DEPTH.

    Returns:
        Unique variations.

    Example:
        >>> parse_syntax("auto | <length>{1,2}")
        ['auto', '<length>', '<length> <length>']
    """
    if max_depth is None:
        max_depth = get_environment(EnvVar.MULTIPLIER_DEPTH)
    return _parse(normalize_syntax(syntax), max(1, max_depth))


def filter_tokens(
    variations: list[str], tokens: CatalogProvider[TokenDefinition]
) -> list[str]:
    """Drop variations referencing data types the catalog does not know."""
    kept: list[str] = []
    for variation in variations:
        names = _DATA_TYPE_REF.findall(variation)
        if all(
            name in PRIMITIVE_TYPES or tokens.lookup(f"<{name}>") is not None
            for name in names
        ):
            kept.append(variation)
        else:
            logger.debug(f"Dropping variation with undefined type: {variation!r}")
    return kept


# =============================================================================
# Views
# =============================================================================


def get_syntax_normalized(parsed: list[str] | tuple[str, ...]) -> list[str]:
    """Variations with every part replaced by its canonical token.

    Example:
        >>> get_syntax_normalized(["<number [0,∞]> / <number [0,∞]>"])
        ['<number> <number>']
    """
    normalized: list[str] = []
    for variation in parsed:
        parts, _ = split_with_separators(variation)
        canonical = (get_token_canonical(part) or part for part in parts)
        normalized.append(" ".join(canonical))
    return normalized


def get_syntax_set(parsed: list[str] | tuple[str, ...]) -> list[list[str]]:
    """Unique raw tokens per slot, in first-seen order."""
    slots: list[list[str]] = []
    for variation in parsed:
        parts, _ = split_with_separators(variation)
        for index, part in enumerate(parts):
            if index == len(slots):
                slots.append([])
            if part not in slots[index]:
                slots[index].append(part)
    return slots


def get_syntax_separators(parsed: list[str] | tuple[str, ...]) -> list[list[str]]:
    """Separators between parts, per variation."""
    return [split_with_separators(variation)[1] for variation in parsed]


def extract_separators(value: str) -> list[str]:
    """Separators between the parts of a raw value, e.g. "16 / 9" -> ["/"]."""
    return split_with_separators(value)[1]


# =============================================================================
# Matching
# =============================================================================


def tokens_match(value_token: str | None, syntax_token: str) -> bool:
    """Compare a value token with a grammar token.

    None (an unfilled slot) matches anything and `<integer>` satisfies
    `<number>`.
    """
    if value_token is None or value_token == syntax_token:
        return True
    return value_token == "<integer>" and syntax_token == "<number>"


def matches_variation(
    tokens: Sequence[str | None], variation: str, prefix: bool = False
) -> bool:
    """Whether `tokens` match a normalized variation, or only its start."""
    variation_tokens = variation.split(" ") if variation else []
    if len(tokens) > len(variation_tokens):
        return False
    if not prefix and len(tokens) != len(variation_tokens):
        return False
    return all(tokens_match(value, token) for value, token in zip(tokens, variation_tokens))


def find_variation(
    tokens: Sequence[str], normalized: Sequence[str], prefix: bool = False
) -> int:
    """Index of the first variation accepting `tokens`, or -1.

    An exact string match wins over a compatible match.
    """
    joined = " ".join(tokens)
    if not prefix and joined in normalized:
        return list(normalized).index(joined)
    return next(
        (
            index
            for index, variation in enumerate(normalized)
            if matches_variation(tokens, variation, prefix)
        ),
        -1,
    )


@lru_cache(maxsize=512)
def _analyze(syntax: str, catalog: Catalog, max_depth: int) -> SyntaxInfo:
    expanded = expand_tokens(syntax, catalog.tokens)
    parsed = tuple(filter_tokens(parse_syntax(expanded, max_depth), catalog.tokens))
    logger.debug(f"Parsed {syntax!r} into {len(parsed)} variations")
    return SyntaxInfo(
        parsed=parsed,
        normalized=tuple(get_syntax_normalized(parsed)),
        slots=tuple(tuple(slot) for slot in get_syntax_set(parsed)),
        separators=tuple(tuple(seps) for seps in get_syntax_separators(parsed)),
    )


def analyze_syntax(
    syntax: str, catalog: Catalog, max_depth: int | None = None
) -> SyntaxInfo:
    """Expand, parse and derive every view of a style grammar.

    Results are cached per (syntax, catalog, depth); catalogs are immutable
    and compare by identity, so a rebuilt catalog never sees stale entries.
    """
    if max_depth is None:
        max_depth = get_environment(EnvVar.MULTIPLIER_DEPTH)
    return _analyze(syntax, catalog, max(1, max_depth))


def get_syntax_parsed(
    syntax: str, catalog: Catalog, max_depth: int | None = None
) -> list[str]:
    """Expanded, parsed and filtered variations of a grammar."""
    return list(analyze_syntax(syntax, catalog, max_depth).parsed)


__all__ = [
    "PRIMITIVE_TYPES",
    "SyntaxInfo",
    "normalize_syntax",
    "parse_syntax",
    "filter_tokens",
    "get_syntax_parsed",
    "get_syntax_normalized",
    "get_syntax_set",
    "get_syntax_separators",
    "extract_separators",
    "analyze_syntax",
    "tokens_match",
    "matches_variation",
    "find_variation",
]
