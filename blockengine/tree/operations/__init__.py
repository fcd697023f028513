"""Copy-on-write tree mutations returning patches.

Example:
    >>> from blockengine.tree.operations import create_node, add_node
    >>>
    >>> node = create_node(catalog.nodes.lookup("container"), "body").value
    >>> patch = add_node(node, "body", None, nodes).data
"""

from .lib import (
    Deletion,
    IdFactory,
    TreeChange,
    add_node,
    add_nodes,
    attach_node,
    clone_subtree,
    create_node,
    delete_subtree,
    detach_node,
    duplicate_subtree,
    merge_styles,
    move_node,
    new_node_id,
    overwrite_node,
    purge_subtree,
)

__all__ = [
    # Types
    "TreeChange",
    "Deletion",
    "IdFactory",
    # Creation
    "new_node_id",
    "merge_styles",
    "create_node",
    # Linking
    "attach_node",
    "detach_node",
    "add_node",
    "add_nodes",
    # Cloning
    "clone_subtree",
    "duplicate_subtree",
    # Moving and replacing
    "move_node",
    "overwrite_node",
    # Deletion
    "delete_subtree",
    "purge_subtree",
]
