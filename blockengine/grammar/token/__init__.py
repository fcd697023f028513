"""Grammar token inspection and catalog-driven expansion.

Example:
    >>> from blockengine.grammar.token import get_token_canonical, expand_tokens
    >>>
    >>> get_token_canonical("<length [0,∞]>")
    '<length>'
    >>> expand_tokens("<length-percentage>", catalog.tokens)
    '[<length> | <percentage>]'
"""

from .lib import (
    DIMENSION_TYPES,
    TokenParam,
    TokenType,
    expand_tokens,
    get_token_base,
    get_token_canonical,
    get_token_param,
    get_token_type,
    get_token_value,
    get_token_values,
)

__all__ = [
    # Types
    "TokenType",
    "TokenParam",
    "DIMENSION_TYPES",
    # Inspection
    "get_token_canonical",
    "get_token_base",
    "get_token_param",
    "get_token_type",
    # Defaults
    "get_token_value",
    "get_token_values",
    # Expansion
    "expand_tokens",
]
