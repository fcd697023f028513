"""Style key and value validation.

Example:
    >>> from blockengine.style.validation import validate_style
    >>>
    >>> validate_style("margin", "10px auto", catalog).valid
    True
    >>> validate_style("margin", "red", catalog).message
    "Invalid value 'red' for 'margin'"
"""

from .lib import validate_style, validate_style_key, validate_style_value

__all__ = [
    "validate_style_key",
    "validate_style_value",
    "validate_style",
]
