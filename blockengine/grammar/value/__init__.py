"""Raw value classification.

Example:
    >>> from blockengine.grammar.value import get_value_tokens
    >>>
    >>> get_value_tokens(["10px", "auto", "#fff"], catalog.units)
    ['<length>', 'auto', '<color>']
"""

from .lib import (
    COLOR_FUNCTIONS,
    extract_dimension_number,
    extract_dimension_range,
    extract_dimension_unit,
    get_dimension_type,
    get_value_token,
    get_value_tokens,
    get_value_type,
    is_value_color,
    is_value_dimension,
    is_value_function,
    is_value_integer,
    is_value_keyword,
    is_value_link,
    is_value_number,
)

__all__ = [
    # Classification
    "get_value_type",
    "is_value_keyword",
    "is_value_function",
    "is_value_integer",
    "is_value_number",
    "is_value_link",
    "is_value_color",
    "is_value_dimension",
    "COLOR_FUNCTIONS",
    # Dimensions
    "extract_dimension_number",
    "extract_dimension_unit",
    "extract_dimension_range",
    "get_dimension_type",
    # Tokens
    "get_value_token",
    "get_value_tokens",
]
