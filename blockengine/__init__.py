"""blockengine: hierarchy and style engine for a visual page builder."""

from blockengine.catalog import (
    Catalog,
    ElementDefinition,
    NodeDefinition,
    StyleDefinition,
    TokenDefinition,
)
from blockengine.commands import BlockManager, ClipboardPort, CommandContext, MoveMode
from blockengine.result import (
    CheckResult,
    FindResult,
    OperateResult,
    PickResult,
    ResultPipeline,
    ValidateResult,
)
from blockengine.style import StyleContext, resolve_style
from blockengine.tree import InMemoryTree, Node, NodePatch, TreeProvider

__all__ = [
    # Catalog
    "Catalog",
    "ElementDefinition",
    "StyleDefinition",
    "TokenDefinition",
    "NodeDefinition",
    # Tree
    "Node",
    "NodePatch",
    "TreeProvider",
    "InMemoryTree",
    # Style
    "StyleContext",
    "resolve_style",
    # Commands
    "BlockManager",
    "CommandContext",
    "ClipboardPort",
    "MoveMode",
    # Results
    "ValidateResult",
    "CheckResult",
    "FindResult",
    "PickResult",
    "OperateResult",
    "ResultPipeline",
]
