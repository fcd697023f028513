"""Copy-on-write edits to style trees."""

from __future__ import annotations

import logging

from blockengine.catalog import Catalog, StyleTree
from blockengine.result import OperateResult

from ..lib import StyleContext

logger = logging.getLogger(__name__)


def set_style_at(styles: StyleTree, context: StyleContext, key: str, value: str) -> StyleTree:
    """Return a new tree with `key` set at `context`.

    Only the dictionaries along the written path are copied; sibling
    branches are shared with the input, which is never mutated.
    """
    device, orientation, pseudo = context.as_path()
    orientations = dict(styles.get(device, {}))
    pseudos = dict(orientations.get(orientation, {}))
    properties = dict(pseudos.get(pseudo, {}))

    properties[key] = value
    pseudos[pseudo] = properties
    orientations[orientation] = pseudos
    return {**styles, device: orientations}


def get_style_targets(key: str, catalog: Catalog) -> list[str]:
    """Keys actually written for `key`: its longhands for a shorthand, else itself."""
    definition = catalog.styles.lookup(key)
    if definition is not None and definition.is_shorthand:
        return list(definition.longhand)
    return [key]


def update_style(
    styles: StyleTree,
    key: str,
    value: str,
    context: StyleContext,
    catalog: Catalog,
) -> OperateResult[StyleTree]:
    """Write a value, expanding shorthands into their longhands.

    The shorthand key itself is never stored; every longhand receives the
    same value.

    Args:
        styles: Current style tree.
        key: Style key, shorthand or not.
        value: Value to store; "" clears the slot.
        context: Context to write at.
        catalog: Catalog with style definitions.

    Returns:
        OperateResult with the new tree.
    """
    if key not in catalog.styles:
        return OperateResult.fail(f"Unknown style key: '{key}'")

    updated = styles
    for target in get_style_targets(key, catalog):
        updated = set_style_at(updated, context, target, value)

    logger.debug(f"Set '{key}' = '{value}' at {context.as_path()}")
    return OperateResult.ok(updated)


def reset_style(
    styles: StyleTree,
    key: str,
    context: StyleContext,
    catalog: Catalog,
) -> OperateResult[StyleTree]:
    """Clear a value at one context so the cascade falls through."""
    return update_style(styles, key, "", context, catalog)


__all__ = [
    "set_style_at",
    "get_style_targets",
    "update_style",
    "reset_style",
]
