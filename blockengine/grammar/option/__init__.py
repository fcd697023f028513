"""Slot option tables and slot joining for value editors.

Example:
    >>> from blockengine.grammar.option import create_option_table, join_slot_values
    >>> from blockengine.grammar.syntax import analyze_syntax
    >>>
    >>> info = analyze_syntax("auto || <ratio>", catalog)
    >>> join_slot_values(["16", "9"], info.normalized, info.separators, catalog).value
    '16 / 9'
"""

from .lib import (
    StyleOption,
    create_option_table,
    create_slot_options,
    is_slot_option_valid,
    join_slot_values,
)

__all__ = [
    "StyleOption",
    "is_slot_option_valid",
    "create_slot_options",
    "create_option_table",
    "join_slot_values",
]
