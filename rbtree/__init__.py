"""
rbtree/
-------
Red-black tree engine.  Public API:

    from rbtree import RedBlackTree, NodeView, Color
    from rbtree import insert, search, traverse, delete

The module-level functions take a tree handle (or None for the empty
tree) and never modify it; mutating calls return the next version.
"""

from typing import Any, Optional

from rbtree.errors    import TreeError, RotationError, InvariantViolation
from rbtree.node      import Color, NodeView
from rbtree.tree      import RedBlackTree, FixupStep
from rbtree.traversal import (
    TraversalInfo,
    UnknownTraversalError,
    get_traversal,
    list_traversals,
    traverse,
    traversal_search,
)


def insert(tree: Optional[RedBlackTree], key: Any) -> RedBlackTree:
    if tree is None:
        tree = RedBlackTree()
    return tree.insert(key)


def search(tree: Optional[RedBlackTree], key: Any) -> Optional[NodeView]:
    if tree is None:
        return None
    return tree.search(key)


def delete(tree: Optional[RedBlackTree], key: Any) -> RedBlackTree:
    if tree is None:
        return RedBlackTree()
    return tree.delete(key)


__all__ = [
    "Color",
    "NodeView",
    "RedBlackTree",
    "FixupStep",
    "TraversalInfo",
    "TreeError",
    "RotationError",
    "InvariantViolation",
    "UnknownTraversalError",
    "insert",
    "search",
    "delete",
    "traverse",
    "traversal_search",
    "get_traversal",
    "list_traversals",
]
