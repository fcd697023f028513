"""Read-only catalogs of element, style, token, unit and node definitions.

Catalogs are built once by the host at start-up and passed explicitly into
every engine call. Nothing in the engine mutates them afterwards.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Generic, Protocol, TypeVar

from blockengine.result import PickResult

T = TypeVar("T")
T_co = TypeVar("T_co", covariant=True)

# device -> orientation -> pseudo -> property -> raw value
StyleTree = dict[str, dict[str, dict[str, dict[str, str]]]]

_TOKEN_KEY = re.compile(r"^<[^<>\s]+>$")


class UnitType(str, Enum):
    """Dimension category a unit belongs to."""

    LENGTH = "length"
    PERCENTAGE = "percentage"
    ANGLE = "angle"
    FLEX = "flex"
    TIME = "time"
    RESOLUTION = "resolution"


# =============================================================================
# Definitions
# =============================================================================


@dataclass(frozen=True)
class ElementDefinition:
    """Structural rules an element tag imposes on the tree.

    Attributes:
        tag: Element tag (e.g. "ul").
        allowed_children: Tags permitted as direct children. None = unrestricted.
        forbidden_ancestors: Tags that may not appear above this element.
        unique_children: Per-tag limit on direct children of this element.
        ordered_children: Sequence of tag groups children must respect in order.
    """

    tag: str
    allowed_children: frozenset[str] | None = None
    forbidden_ancestors: frozenset[str] | None = None
    unique_children: Mapping[str, int] | None = None
    ordered_children: tuple[frozenset[str], ...] | None = None

    def __post_init__(self) -> None:
        if self.unique_children:
            for tag, limit in self.unique_children.items():
                if limit < 0:
                    raise ValueError(
                        f"Element '{self.tag}' declares negative limit {limit} for '{tag}'"
                    )


@dataclass(frozen=True)
class StyleDefinition:
    """A style property and its value grammar.

    A definition with `longhand` is a shorthand: its own key is never stored,
    only its constituents.
    """

    key: str
    syntax: str
    longhand: tuple[str, ...] | None = None
    description: str = ""

    @property
    def is_shorthand(self) -> bool:
        return bool(self.longhand)


@dataclass(frozen=True)
class TokenDefinition:
    """A named grammar token such as `<length-percentage>`."""

    key: str
    syntax: str
    default: str | None = None

    def __post_init__(self) -> None:
        if not _TOKEN_KEY.match(self.key):
            raise ValueError(f"Token key must look like '<name>', got '{self.key}'")


@dataclass(frozen=True)
class UnitDefinition:
    """A CSS unit and the dimension category it measures."""

    key: str
    type: UnitType


@dataclass(frozen=True)
class NodeDefinition:
    """Blueprint used when creating node instances.

    Attributes:
        key: Definition key recorded on created nodes.
        default_tag: Tag used when the caller does not choose one.
        tags: Tags this definition may render as. Empty = unrestricted.
        default_styles: Style tree merged under caller styles.
        default_attributes: Attributes merged under caller attributes.
    """

    key: str
    default_tag: str
    tags: frozenset[str] = field(default_factory=frozenset)
    default_styles: StyleTree = field(default_factory=dict)
    default_attributes: dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.tags and self.default_tag not in self.tags:
            raise ValueError(
                f"Node '{self.key}' default tag '{self.default_tag}' is not in its tags"
            )

    def permits_tag(self, tag: str) -> bool:
        return not self.tags or tag in self.tags


# =============================================================================
# Registry
# =============================================================================


class CatalogProvider(Protocol[T_co]):
    """Lookup interface every catalog exposes to the engines."""

    def lookup(self, key: str) -> T_co | None:
        """Return the definition for `key`, or None when absent."""
        ...


class Registry(Generic[T]):
    """Immutable keyed collection of definitions."""

    def __init__(self, kind: str, entries: Mapping[str, T] | None = None):
        self.kind = kind
        self._entries: Mapping[str, T] = MappingProxyType(dict(entries or {}))

    @classmethod
    def from_definitions(
        cls,
        kind: str,
        definitions: Iterable[T],
        key: Callable[[T], str],
    ) -> Registry[T]:
        """Build a registry, rejecting duplicate keys."""
        entries: dict[str, T] = {}
        for definition in definitions:
            definition_key = key(definition)
            if definition_key in entries:
                raise ValueError(f"Duplicate {kind} definition '{definition_key}'")
            entries[definition_key] = definition
        return cls(kind, entries)

    def lookup(self, key: str) -> T | None:
        return self._entries.get(key)

    def require(self, key: str) -> PickResult[T]:
        """Pick a definition, failing when the key is not registered."""
        definition = self._entries.get(key)
        if definition is None:
            return PickResult.fail(f"{self.kind.capitalize()} definition not found: '{key}'")
        return PickResult.ok(definition)

    def keys(self) -> list[str]:
        return list(self._entries)

    def values(self) -> list[T]:
        return list(self._entries.values())

    def as_mapping(self) -> Mapping[str, T]:
        return self._entries

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"Registry(kind={self.kind!r}, size={len(self)})"


# =============================================================================
# Built-in Tables
# =============================================================================

DEFAULT_UNITS: tuple[UnitDefinition, ...] = (
    *(
        UnitDefinition(key, UnitType.LENGTH)
        for key in (
            "px", "em", "rem", "vh", "vw", "vmin", "vmax", "ch", "ex",
            "cm", "mm", "in", "pt", "pc", "svh", "svw", "dvh", "dvw",
        )
    ),
    UnitDefinition("%", UnitType.PERCENTAGE),
    *(UnitDefinition(key, UnitType.ANGLE) for key in ("deg", "rad", "grad", "turn")),
    UnitDefinition("fr", UnitType.FLEX),
    *(UnitDefinition(key, UnitType.TIME) for key in ("s", "ms")),
    *(UnitDefinition(key, UnitType.RESOLUTION) for key in ("dpi", "dpcm", "dppx")),
)

# Tokens every grammar may reference without declaring them.
PRIMITIVE_TOKENS: tuple[TokenDefinition, ...] = (
    TokenDefinition("<length>", "<length>", default="0px"),
    TokenDefinition("<percentage>", "<percentage>", default="0%"),
    TokenDefinition("<angle>", "<angle>", default="0deg"),
    TokenDefinition("<flex>", "<flex>", default="1fr"),
    TokenDefinition("<time>", "<time>", default="0s"),
    TokenDefinition("<number>", "<number>", default="0"),
    TokenDefinition("<integer>", "<integer>", default="0"),
    TokenDefinition("<color>", "<color>", default="#000000"),
    TokenDefinition("<link>", "<link>", default='"https://example.com"'),
)


# =============================================================================
# Catalog Context
# =============================================================================


@dataclass(frozen=True, eq=False)
class Catalog:
    """Read-only bundle of every catalog an engine call may consult.

    Example:
        >>> catalog = Catalog.build(
        ...     elements=[ElementDefinition("ul", allowed_children=frozenset({"li"}))],
        ...     styles=[StyleDefinition("color", "<color>")],
        ... )
        >>> catalog.elements.lookup("ul").allowed_children
        frozenset({'li'})
    """

    elements: Registry[ElementDefinition]
    styles: Registry[StyleDefinition]
    tokens: Registry[TokenDefinition]
    units: Registry[UnitDefinition]
    nodes: Registry[NodeDefinition]
    function_defaults: Mapping[str, str] = field(
        default_factory=lambda: MappingProxyType({})
    )

    @classmethod
    def build(
        cls,
        *,
        elements: Iterable[ElementDefinition] = (),
        styles: Iterable[StyleDefinition] = (),
        tokens: Iterable[TokenDefinition] = (),
        units: Iterable[UnitDefinition] | None = None,
        nodes: Iterable[NodeDefinition] = (),
        function_defaults: Mapping[str, str] | None = None,
        include_primitives: bool = True,
    ) -> Catalog:
        """Assemble a catalog from plain definition iterables.

        Args:
            elements: Element definitions keyed by tag.
            styles: Style definitions keyed by property.
            tokens: Token definitions; override primitives with the same key.
            units: Unit table. Defaults to DEFAULT_UNITS.
            nodes: Node blueprints keyed by definition key.
            function_defaults: Default raw value per function name, e.g.
                {"fit-content": "fit-content(0px)"}.
            include_primitives: Seed the token table with PRIMITIVE_TOKENS.

        Returns:
            Immutable Catalog.
        """
        token_list = list(tokens)
        declared = {token.key for token in token_list}
        if include_primitives:
            token_list = [
                token for token in PRIMITIVE_TOKENS if token.key not in declared
            ] + token_list

        return cls(
            elements=Registry.from_definitions("element", elements, lambda d: d.tag),
            styles=Registry.from_definitions("style", styles, lambda d: d.key),
            tokens=Registry.from_definitions("token", token_list, lambda d: d.key),
            units=Registry.from_definitions(
                "unit", DEFAULT_UNITS if units is None else units, lambda d: d.key
            ),
            nodes=Registry.from_definitions("node", nodes, lambda d: d.key),
            function_defaults=MappingProxyType(dict(function_defaults or {})),
        )

    def units_of(self, unit_type: UnitType | str) -> list[UnitDefinition]:
        """All registered units measuring the given dimension category."""
        value = unit_type.value if isinstance(unit_type, UnitType) else unit_type
        return [unit for unit in self.units.values() if unit.type == value]


__all__ = [
    "StyleTree",
    "UnitType",
    "ElementDefinition",
    "StyleDefinition",
    "TokenDefinition",
    "UnitDefinition",
    "NodeDefinition",
    "CatalogProvider",
    "Registry",
    "DEFAULT_UNITS",
    "PRIMITIVE_TOKENS",
    "Catalog",
]
