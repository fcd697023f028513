"""Value grammar parsing and the derived per-variation views.

Example:
    >>> from blockengine.grammar.syntax import analyze_syntax
    >>>
    >>> info = analyze_syntax("auto | <length>{1,2}", catalog)
    >>> info.normalized
    ('auto', '<length>', '<length> <length>')
    >>> info.slots
    (('auto', '<length>'), ('<length>',))
"""

from .lib import (
    PRIMITIVE_TYPES,
    SyntaxInfo,
    analyze_syntax,
    extract_separators,
    filter_tokens,
    find_variation,
    get_syntax_normalized,
    get_syntax_parsed,
    get_syntax_separators,
    get_syntax_set,
    matches_variation,
    normalize_syntax,
    parse_syntax,
    tokens_match,
)

__all__ = [
    # Parsing
    "normalize_syntax",
    "parse_syntax",
    "filter_tokens",
    "PRIMITIVE_TYPES",
    # Views
    "SyntaxInfo",
    "analyze_syntax",
    "get_syntax_parsed",
    "get_syntax_normalized",
    "get_syntax_set",
    "get_syntax_separators",
    "extract_separators",
    # Matching
    "tokens_match",
    "matches_variation",
    "find_variation",
]
