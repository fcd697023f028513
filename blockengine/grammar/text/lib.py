"""Text and combinatorics helpers used by the grammar engine.

All splitting is top-level aware: separators inside (), [], {}, <> or double
quotes never split.
"""

from __future__ import annotations

import itertools
from collections.abc import Iterable, Sequence
from typing import TypeVar

T = TypeVar("T")

_OPENERS = {"(": ")", "[": "]", "{": "}", "<": ">"}
_CLOSERS = {close: open_ for open_, close in _OPENERS.items()}

# Separators between value components; whitespace runs are folded to " ".
VALUE_SEPARATORS: tuple[str, ...] = (" ", "/", ",")
_JOINERS = {"/": " / ", ",": ", "}


def split_top_level(text: str, separators: str | Sequence[str]) -> list[str]:
    """Split `text` on separators that appear outside any grouping.

    Empty segments are dropped and each segment is stripped.

    Args:
        text: Input string.
        separators: A separator or list of separators. Longer separators
            should be listed first when one is a prefix of another.

    Returns:
        Non-empty, stripped segments.

    Example:
        >>> split_top_level("a || b <x [0,1]>", "||")
        ['a', 'b <x [0,1]>']
        >>> split_top_level("minmax(1px, 2px) 3px", " ")
        ['minmax(1px, 2px)', '3px']
    """
    seps = [separators] if isinstance(separators, str) else list(separators)
    parts: list[str] = []
    depth = {opener: 0 for opener in _OPENERS}
    in_quotes = False
    buffer: list[str] = []
    i = 0

    while i < len(text):
        char = text[i]
        if in_quotes:
            if char == '"':
                in_quotes = False
        elif char == '"':
            in_quotes = True
        elif char in _OPENERS:
            depth[char] += 1
        elif char in _CLOSERS:
            depth[_CLOSERS[char]] -= 1

        at_top = not in_quotes and all(level == 0 for level in depth.values())
        matched = next(
            (sep for sep in seps if sep and at_top and text.startswith(sep, i)), None
        )
        if matched:
            segment = "".join(buffer).strip()
            if segment:
                parts.append(segment)
            buffer = []
            i += len(matched)
            continue

        buffer.append(char)
        i += 1

    segment = "".join(buffer).strip()
    if segment:
        parts.append(segment)
    return parts


def split_with_separators(text: str) -> tuple[list[str], list[str]]:
    """Split a value into top-level components and the separators between them.

    Whitespace around "/" or "," is absorbed by that separator; a bare run of
    whitespace is reported as " ".

    Example:
        >>> split_with_separators("1px 2px / 3px")
        (['1px', '2px', '3px'], [' ', '/'])
    """
    parts: list[str] = []
    separators: list[str] = []
    depth = {opener: 0 for opener in _OPENERS}
    in_quotes = False
    buffer: list[str] = []
    pending: str | None = None

    def flush() -> None:
        nonlocal pending
        segment = "".join(buffer).strip()
        buffer.clear()
        if not segment:
            return
        if parts:
            separators.append(pending or " ")
        parts.append(segment)
        pending = None

    for char in text:
        if in_quotes:
            if char == '"':
                in_quotes = False
        elif char == '"':
            in_quotes = True
        elif char in _OPENERS:
            depth[char] += 1
        elif char in _CLOSERS:
            depth[_CLOSERS[char]] -= 1

        at_top = not in_quotes and all(level == 0 for level in depth.values())
        if at_top and char in ("/", ","):
            flush()
            pending = char
            continue
        if at_top and char.isspace():
            flush()
            continue
        buffer.append(char)

    flush()
    return parts, separators


def join_with_separators(values: Sequence[str], separators: Sequence[str]) -> str:
    """Join values using the separator recorded between each pair.

    Missing separators default to a single space.

    Example:
        >>> join_with_separators(["16", "9"], ["/"])
        '16 / 9'
    """
    pieces: list[str] = []
    for index, value in enumerate(values):
        if index > 0:
            sep = separators[index - 1] if index - 1 < len(separators) else " "
            pieces.append(" " if sep.isspace() else _JOINERS.get(sep, f" {sep} "))
        pieces.append(value)
    return "".join(pieces).strip()


# =============================================================================
# Combinatorics
# =============================================================================


def cross_product(groups: Sequence[Sequence[T]]) -> list[list[T]]:
    """Every way to pick one item from each group, in order.

    Example:
        >>> cross_product([[1, 2], ["a"]])
        [[1, 'a'], [2, 'a']]
    """
    return [list(combo) for combo in itertools.product(*groups)]


def all_subsets(items: Sequence[T]) -> list[list[T]]:
    """The power set of `items`, smallest subsets first, order preserved."""
    return [
        list(subset)
        for size in range(len(items) + 1)
        for subset in itertools.combinations(items, size)
    ]


def permutations(items: Sequence[T]) -> list[list[T]]:
    return [list(perm) for perm in itertools.permutations(items)]


def unique(items: Iterable[T]) -> list[T]:
    """Drop duplicates while keeping first-seen order."""
    return list(dict.fromkeys(items))


__all__ = [
    "VALUE_SEPARATORS",
    "split_top_level",
    "split_with_separators",
    "join_with_separators",
    "cross_product",
    "all_subsets",
    "permutations",
    "unique",
]
