"""Cascading resolution of style values across device, orientation and pseudo.

Lookup for one property walks up to eight (device, orientation, pseudo)
paths, from the exact context towards the defaults, and returns the first
non-empty value. "" means unset.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from blockengine.catalog import Catalog, StyleTree
from blockengine.grammar.text import unique

from ..lib import StyleContext, get_default_style_context

logger = logging.getLogger(__name__)

StylePath = tuple[str, str, str]


def get_style_at(styles: StyleTree, path: StylePath, key: str) -> str | None:
    """Raw stored value at one exact path, or None when absent."""
    device, orientation, pseudo = path
    return styles.get(device, {}).get(orientation, {}).get(pseudo, {}).get(key)


def get_cascade_paths(context: StyleContext, defaults: StyleContext) -> list[StylePath]:
    """Lookup paths in cascade order.

    When the requested pseudo differs from the default pseudo, every path
    with the requested pseudo comes before any default-pseudo path, so
    pseudo-specific styling beats device and orientation fallback.

    Example:
        >>> get_cascade_paths(StyleContext("mobile", "all", "hover"), defaults)[:2]
        [('mobile', 'all', 'hover'), ('all', 'all', 'hover')]
    """
    d, o, p = context.as_path()
    dd, do, dp = defaults.as_path()
    paths = unique(
        [
            (d, o, p),
            (d, o, dp),
            (d, do, p),
            (d, do, dp),
            (dd, o, p),
            (dd, o, dp),
            (dd, do, p),
            (dd, do, dp),
        ]
    )
    if p == dp:
        return paths
    return [path for path in paths if path[2] == p] + [path for path in paths if path[2] != p]


def resolve_style_value(
    styles: StyleTree,
    key: str,
    context: StyleContext,
    defaults: StyleContext | None = None,
) -> str:
    """Effective value of one stored property; "" when nothing is set."""
    defaults = defaults or get_default_style_context()
    for path in get_cascade_paths(context, defaults):
        value = get_style_at(styles, path, key)
        if value:
            return value
    return ""


def resolve_style(
    styles: StyleTree,
    key: str,
    context: StyleContext,
    catalog: Catalog,
    defaults: StyleContext | None = None,
) -> str:
    """Effective value of a property, reading shorthands through their longhands.

    A shorthand resolves each longhand independently. Equal non-empty
    values return that value and all-empty returns "". When the longhands
    disagree the first longhand's value is returned; there is no separate
    marker for a mixed shorthand.

    Example:
        >>> resolve_style(styles, "margin", StyleContext("all", "all", "all"), catalog)
        '10px'
    """
    definition = catalog.styles.lookup(key)
    if definition is None or not definition.is_shorthand:
        return resolve_style_value(styles, key, context, defaults)

    values = [
        resolve_style_value(styles, longhand, context, defaults)
        for longhand in definition.longhand
    ]
    if len(set(values)) > 1:
        logger.debug(f"Shorthand '{key}' has mixed longhand values {values}")
    return values[0] if values else ""


def collect_style_keys(styles: StyleTree) -> list[str]:
    """Every property key stored anywhere in the tree, first-seen order."""
    return unique(
        key
        for orientations in styles.values()
        for pseudos in orientations.values()
        for properties in pseudos.values()
        for key in properties
    )


def resolve_all_styles(
    styles: StyleTree,
    context: StyleContext,
    catalog: Catalog | None = None,
    keys: Iterable[str] | None = None,
    defaults: StyleContext | None = None,
) -> dict[str, str]:
    """Resolve many properties at one context.

    Args:
        styles: Node style tree.
        context: Context to resolve at.
        catalog: When given, shorthands resolve through their longhands and
            every registered key is resolved unless `keys` is passed.
        keys: Explicit keys to resolve.
        defaults: Default context; from configuration when None.

    Returns:
        Mapping of key to effective value ("" when unset).
    """
    if keys is None:
        keys = catalog.styles.keys() if catalog is not None else collect_style_keys(styles)

    if catalog is None:
        return {key: resolve_style_value(styles, key, context, defaults) for key in keys}
    return {key: resolve_style(styles, key, context, catalog, defaults) for key in keys}


__all__ = [
    "StylePath",
    "get_style_at",
    "get_cascade_paths",
    "resolve_style_value",
    "resolve_style",
    "collect_style_keys",
    "resolve_all_styles",
]
