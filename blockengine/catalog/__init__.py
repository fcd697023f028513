"""Read-only definition catalogs passed explicitly into every engine call.

Example:
    >>> from blockengine.catalog import Catalog, ElementDefinition, StyleDefinition
    >>>
    >>> catalog = Catalog.build(
    ...     elements=[ElementDefinition("ul", ordered_children=(frozenset({"li"}),))],
    ...     styles=[StyleDefinition("margin", "<length>", longhand=("margin-top",))],
    ... )
    >>> catalog.styles.lookup("margin").is_shorthand
    True
"""

from .lib import (
    DEFAULT_UNITS,
    PRIMITIVE_TOKENS,
    Catalog,
    CatalogProvider,
    ElementDefinition,
    NodeDefinition,
    Registry,
    StyleDefinition,
    StyleTree,
    TokenDefinition,
    UnitDefinition,
    UnitType,
)

__all__ = [
    # Definitions
    "ElementDefinition",
    "StyleDefinition",
    "TokenDefinition",
    "UnitDefinition",
    "UnitType",
    "NodeDefinition",
    "StyleTree",
    # Lookup
    "CatalogProvider",
    "Registry",
    "Catalog",
    # Built-in tables
    "DEFAULT_UNITS",
    "PRIMITIVE_TOKENS",
]
