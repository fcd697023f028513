"""Style engine: context coordinates, cascade, updates and validation.

Example:
    >>> from blockengine.style import StyleContext, resolve_style, update_style
    >>>
    >>> context = StyleContext("mobile", "all", "all")
    >>> styles = update_style(node.styles, "margin", "4px", context, catalog).data
    >>> resolve_style(styles, "margin", context, catalog)
    '4px'
"""

from .cascade import (
    get_cascade_paths,
    resolve_all_styles,
    resolve_style,
    resolve_style_value,
)
from .lib import StyleContext, get_default_style_context
from .update import reset_style, set_style_at, update_style
from .validation import validate_style, validate_style_key, validate_style_value

__all__ = [
    # Context
    "StyleContext",
    "get_default_style_context",
    # Cascade
    "get_cascade_paths",
    "resolve_style_value",
    "resolve_style",
    "resolve_all_styles",
    # Update
    "set_style_at",
    "update_style",
    "reset_style",
    # Validation
    "validate_style_key",
    "validate_style_value",
    "validate_style",
]
