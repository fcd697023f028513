"""Copy-on-write style tree updates.

Example:
    >>> from blockengine.style.update import update_style
    >>>
    >>> result = update_style(node.styles, "margin", "4px", context, catalog)
    >>> sorted(result.data["all"]["all"]["all"])
    ['margin-bottom', 'margin-left', 'margin-right', 'margin-top']
"""

from .lib import get_style_targets, reset_style, set_style_at, update_style

__all__ = [
    "set_style_at",
    "get_style_targets",
    "update_style",
    "reset_style",
]
