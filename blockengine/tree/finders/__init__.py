"""Lookups over a node snapshot returning FindResult.

Example:
    >>> from blockengine.tree.finders import find_move_before_index
    >>>
    >>> result = find_move_before_index("d", "b", nodes)
    >>> result.data
    Placement(parent_id='body', index=1)
"""

from .lib import (
    Placement,
    find_ancestors,
    find_child_index,
    find_descendants,
    find_first_child,
    find_last_child,
    find_last_descendant,
    find_move_after_index,
    find_move_before_index,
    find_move_into_index,
    find_next_node,
    find_next_parent_sibling,
    find_next_sibling,
    find_previous_node,
    find_previous_sibling,
)

__all__ = [
    # Children and siblings
    "find_child_index",
    "find_first_child",
    "find_last_child",
    "find_next_sibling",
    "find_previous_sibling",
    "find_next_parent_sibling",
    # Ancestors and descendants
    "find_ancestors",
    "find_descendants",
    "find_last_descendant",
    # Document order
    "find_next_node",
    "find_previous_node",
    # Move positions
    "Placement",
    "find_move_into_index",
    "find_move_before_index",
    "find_move_after_index",
]
