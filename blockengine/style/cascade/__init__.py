"""Cascading style resolution.

Example:
    >>> from blockengine.style import StyleContext
    >>> from blockengine.style.cascade import resolve_style
    >>>
    >>> resolve_style(node.styles, "color", StyleContext("mobile", "all", "hover"), catalog)
    'blue'
"""

from .lib import (
    StylePath,
    collect_style_keys,
    get_cascade_paths,
    get_style_at,
    resolve_all_styles,
    resolve_style,
    resolve_style_value,
)

__all__ = [
    # Types
    "StylePath",
    # Lookup
    "get_style_at",
    "get_cascade_paths",
    "collect_style_keys",
    # Resolution
    "resolve_style_value",
    "resolve_style",
    "resolve_all_styles",
]
