"""
traversal.py — Tree Traversals & Registry
==========================================
Four read-only generators over a RedBlackTree, plus the registry the
service uses to look them up by key.

    from rbtree.traversal import traverse, TRAVERSALS

Every generator yields NodeView objects and starts from scratch on each
call, so a traversal can be re-run at will.  None of them touch colors
or links.

REGISTRY keys:
    "bfs"   – level order
    "pre"   – node, left, right   ("dfs" is accepted as an alias)
    "in"    – left, node, right   (ascending keys)
    "post"  – left, right, node
"""

from collections import deque
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Generator, List, Optional, Tuple

from rbtree.node import NodeView
from rbtree.tree import RedBlackTree


class UnknownTraversalError(ValueError):
    pass


# ---------------------------------------------------------------------------
# Generators
# ---------------------------------------------------------------------------
def bfs(tree: Optional[RedBlackTree]) -> Generator[NodeView, None, None]:
    root = tree.root if tree is not None else None
    if root is None:
        return
    queue = deque([root])
    while queue:
        node = queue.popleft()
        yield node
        if node.left is not None:
            queue.append(node.left)
        if node.right is not None:
            queue.append(node.right)


def preorder(tree: Optional[RedBlackTree]) -> Generator[NodeView, None, None]:
    stack = [tree.root] if tree is not None and tree.root is not None else []
    while stack:
        node = stack.pop()
        yield node
        # right first so left is visited first
        if node.right is not None:
            stack.append(node.right)
        if node.left is not None:
            stack.append(node.left)


def inorder(tree: Optional[RedBlackTree]) -> Generator[NodeView, None, None]:
    stack: List[NodeView] = []
    cur = tree.root if tree is not None else None
    while stack or cur is not None:
        while cur is not None:
            stack.append(cur)
            cur = cur.left
        cur = stack.pop()
        yield cur
        cur = cur.right


def postorder(tree: Optional[RedBlackTree]) -> Generator[NodeView, None, None]:
    if tree is None or tree.root is None:
        return
    stack: List[Tuple[NodeView, bool]] = [(tree.root, False)]
    while stack:
        node, expanded = stack.pop()
        if expanded:
            yield node
            continue
        stack.append((node, True))
        if node.right is not None:
            stack.append((node.right, False))
        if node.left is not None:
            stack.append((node.left, False))


# ---------------------------------------------------------------------------
# TraversalInfo — metadata card for each order
# ---------------------------------------------------------------------------
@dataclass
class TraversalInfo:
    key:          str                      # registry key, e.g. "bfs"
    label:        str                      # human label, e.g. "Breadth-First"
    fn:           Callable                 # the generator function
    aliases:      List[str] = field(default_factory=list)
    description:  str       = ""


TRAVERSALS: Dict[str, TraversalInfo] = {

    "bfs": TraversalInfo(
        key="bfs", label="Breadth-First", fn=bfs,
        description="Level by level, left to right, using a FIFO queue.",
    ),

    "pre": TraversalInfo(
        key="pre", label="Pre-Order", fn=preorder, aliases=["dfs"],
        description="Node, then left subtree, then right subtree.",
    ),

    "in": TraversalInfo(
        key="in", label="In-Order", fn=inorder,
        description="Left subtree, node, right subtree. Keys come out sorted.",
    ),

    "post": TraversalInfo(
        key="post", label="Post-Order", fn=postorder,
        description="Left subtree, right subtree, then the node.",
    ),
}

_ALIASES: Dict[str, str] = {
    alias: info.key for info in TRAVERSALS.values() for alias in info.aliases
}


# ---------------------------------------------------------------------------
# Lookup helpers
# ---------------------------------------------------------------------------
def get_traversal(order: str) -> Optional[TraversalInfo]:
    """Return TraversalInfo by key or alias (case-insensitive), or None."""
    order = order.lower()
    return TRAVERSALS.get(_ALIASES.get(order, order))


def list_traversals() -> List[TraversalInfo]:
    return list(TRAVERSALS.values())


def traverse(tree: Optional[RedBlackTree], order: str) -> List[NodeView]:
    info = get_traversal(order)
    if info is None:
        raise UnknownTraversalError(f"Unknown traversal order: {order}")
    return list(info.fn(tree))


def traversal_search(
    tree: Optional[RedBlackTree],
    key: Any,
    order: str = "bfs",
) -> Tuple[List[NodeView], Optional[NodeView]]:
    """
    Walk the tree in *order* until the node holding *key* is reached.

    Returns (path, found).  On a hit the path ends at the found node;
    on a miss it is the full traversal and found is None.
    """
    path = traverse(tree, order)
    target = tree.search(key) if tree is not None else None
    if target is None:
        return path, None
    return path[: path.index(target) + 1], target
