"""Hierarchy rule engine: allowed children, forbidden ancestors, unique
limits and ordered child groups.

Example:
    >>> from blockengine.hierarchy import passes_all_rules
    >>>
    >>> result = passes_all_rules(div, ul, ul_def, div_def, nodes, 0)
    >>> result.success, result.passed
    (True, False)
"""

from .lib import (
    has_exceeded_unique_limit,
    has_forbidden_ancestor,
    has_violated_ordered_children,
    is_child_allowed,
    passes_all_rules,
    validate_placement,
    validate_subtree_placement,
)

__all__ = [
    # Predicates
    "is_child_allowed",
    "has_forbidden_ancestor",
    "has_exceeded_unique_limit",
    "has_violated_ordered_children",
    # Composition
    "passes_all_rules",
    "validate_placement",
    "validate_subtree_placement",
]
