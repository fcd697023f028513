"""Top-level aware string splitting and small combinatorics helpers."""

from .lib import (
    VALUE_SEPARATORS,
    all_subsets,
    cross_product,
    join_with_separators,
    permutations,
    split_top_level,
    split_with_separators,
    unique,
)

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
