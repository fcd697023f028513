"""Root pytest configuration and fixtures.

This module provides:
- Environment setup (loads .env)
- A shared catalog covering elements, styles, tokens and node definitions
- A sample node tree snapshot and store
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from dotenv import load_dotenv

if TYPE_CHECKING:
    from blockengine.catalog import Catalog
    from blockengine.tree import InMemoryTree, Node

# Load environment variables from .env file
load_dotenv()


# =============================================================================
# Configuration Constants
# =============================================================================

ROOT_ID = "body"

SAMPLE_STYLES = {
    "all": {"all": {"all": {"color": "red"}}},
    "mobile": {"all": {"all": {"color": "blue"}}},
}


# =============================================================================
# Catalog Fixtures
# =============================================================================


@pytest.fixture(scope="session")
def catalog() -> Catalog:
    """Catalog shared by every engine test.

    Returns:
        Catalog with list, table, link and form rules, box-model styles with
        a margin shorthand, composite tokens and node blueprints.
    """
    from blockengine.catalog import (
        Catalog,
        ElementDefinition,
        NodeDefinition,
        StyleDefinition,
        TokenDefinition,
    )

    interactive = frozenset({"a", "button"})
    elements = [
        ElementDefinition("body"),
        ElementDefinition("div"),
        ElementDefinition("ul", ordered_children=(frozenset({"li"}),)),
        ElementDefinition("ol", allowed_children=frozenset({"li"})),
        ElementDefinition("li"),
        ElementDefinition("p", allowed_children=frozenset({"span", "a"})),
        ElementDefinition("span"),
        ElementDefinition("a", forbidden_ancestors=interactive),
        ElementDefinition("button", forbidden_ancestors=interactive),
        ElementDefinition("form", forbidden_ancestors=frozenset({"form"})),
        ElementDefinition("label"),
        ElementDefinition("input", allowed_children=frozenset()),
        ElementDefinition(
            "table",
            allowed_children=frozenset({"caption", "thead", "tbody", "tr"}),
            unique_children={"caption": 1, "thead": 1},
            ordered_children=(
                frozenset({"caption"}),
                frozenset({"thead"}),
                frozenset({"tbody", "tr"}),
            ),
        ),
        ElementDefinition("caption"),
        ElementDefinition("thead"),
        ElementDefinition("tbody"),
        ElementDefinition("tr"),
    ]

    sides = ("margin-top", "margin-right", "margin-bottom", "margin-left")
    styles = [
        StyleDefinition("color", "<color>"),
        StyleDefinition("display", "block | inline | flex | grid | none"),
        StyleDefinition("margin", "[<length-percentage> | auto]{1,4}", longhand=sides),
        *(StyleDefinition(side, "<length-percentage> | auto") for side in sides),
        StyleDefinition(
            "gap", "<length-percentage [0,∞]>{1,2}", longhand=("row-gap", "column-gap")
        ),
        StyleDefinition("row-gap", "<length-percentage [0,∞]>"),
        StyleDefinition("column-gap", "<length-percentage [0,∞]>"),
        StyleDefinition(
            "width",
            "auto | <length-percentage [0,∞]> | min-content | max-content"
            " | fit-content(<length-percentage [0,∞]>)",
        ),
        StyleDefinition("aspect-ratio", "auto || <ratio>"),
        StyleDefinition("z-index", "auto | <integer>"),
        StyleDefinition("opacity", "<number [0,1]>"),
    ]

    tokens = [
        TokenDefinition("<length-percentage>", "<length> | <percentage>", default="0px"),
        TokenDefinition("<ratio>", "<number [0,∞]> [/ <number [0,∞]>]?", default="1"),
    ]

    block = {"all": {"all": {"all": {"display": "block"}}}}
    nodes = [
        NodeDefinition("body", "body", frozenset({"body"})),
        NodeDefinition("container", "div", frozenset({"div"}), default_styles=block),
        NodeDefinition("text", "p", frozenset({"p", "span"})),
        NodeDefinition("list", "ul", frozenset({"ul", "ol"})),
        NodeDefinition("list-item", "li", frozenset({"li"})),
        NodeDefinition("link", "a", frozenset({"a"}), default_attributes={"href": "#"}),
        NodeDefinition("button", "button", frozenset({"button"})),
        NodeDefinition("form", "form", frozenset({"form"})),
        NodeDefinition("table", "table", frozenset({"table"})),
        NodeDefinition("caption", "caption", frozenset({"caption"})),
        NodeDefinition("row", "tr", frozenset({"tr"})),
    ]

    return Catalog.build(
        elements=elements,
        styles=styles,
        tokens=tokens,
        nodes=nodes,
        function_defaults={"fit-content": "fit-content(0px)"},
    )


# =============================================================================
# Tree Fixtures
# =============================================================================


def _build_nodes() -> dict[str, Node]:
    from blockengine.tree import Node

    layout = {
        # id: (tag, definition, parent, children)
        "body": ("body", "body", None, ("a", "b", "c", "d")),
        "a": ("div", "container", "body", ("list",)),
        "list": ("ul", "list", "a", ("item-1", "item-2")),
        "item-1": ("li", "list-item", "list", ()),
        "item-2": ("li", "list-item", "list", ()),
        "b": ("div", "container", "body", ("link",)),
        "link": ("a", "link", "b", ()),
        "c": ("div", "container", "body", ("table",)),
        "table": ("table", "table", "c", ("caption", "row")),
        "caption": ("caption", "caption", "table", ()),
        "row": ("tr", "row", "table", ()),
        "d": ("div", "container", "body", ()),
    }
    return {
        node_id: Node(
            id=node_id,
            tag=tag,
            definition_key=definition,
            parent_id=parent,
            child_ids=children,
            styles=SAMPLE_STYLES if node_id == "a" else {},
        )
        for node_id, (tag, definition, parent, children) in layout.items()
    }


@pytest.fixture
def nodes() -> dict[str, Node]:
    """Sample snapshot.

    Returns:
        body -> [a, b, c, d]; a -> list -> [item-1, item-2];
        b -> link; c -> table -> [caption, row]. Node "a" carries
        color red at the default context and blue on mobile.
    """
    return _build_nodes()


@pytest.fixture
def tree(nodes: dict[str, Node]) -> InMemoryTree:
    """In-memory store seeded with the sample snapshot."""
    from blockengine.tree import InMemoryTree

    return InMemoryTree(nodes.values())
