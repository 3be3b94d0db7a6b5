"""
stats.py — Tree Analytics
==========================
Computes the numbers the renderer's stats panel shows for a whole
tree (TreeStats) or for one selected node (NodeStats).

Usage:
    stats = compute_stats(tree)          # the analytics card
    card  = node_stats(tree, node_id)    # None if the id is not in the tree

Black height follows the CLRS convention: count the BLACK nodes on a
path from the node down to a null leaf, excluding the node itself and
including the null leaf.
"""

from dataclasses import dataclass, asdict
from typing import Optional, Any, Dict

from rbtree import RedBlackTree, NodeView


# ---------------------------------------------------------------------------
# Metrics dataclasses — what the stats panel renders
# ---------------------------------------------------------------------------
@dataclass
class TreeStats:
    size:          int  = 0
    height:        int  = 0          # nodes on the longest root-to-leaf path
    black_height:  int  = 0          # of the root
    red_count:     int  = 0
    black_count:   int  = 0
    min_key:       Any  = None
    max_key:       Any  = None
    is_valid:      bool = True

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class NodeStats:
    id:            str  = ""
    key:           Any  = None
    color:         str  = ""
    depth:         int  = 0          # edges from the root
    black_height:  int  = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# ---------------------------------------------------------------------------
# Measurements
# ---------------------------------------------------------------------------
def black_height(node: Optional[NodeView]) -> int:
    """Black nodes from *node* down its left spine, null leaf included, node excluded."""
    if node is None:
        return 0
    count = 1                      # the null leaf
    cur = node.left
    while cur is not None:
        if cur.is_black:
            count += 1
        cur = cur.left
    return count


def height(tree: Optional[RedBlackTree]) -> int:
    def walk(node: Optional[NodeView]) -> int:
        if node is None:
            return 0
        return 1 + max(walk(node.left), walk(node.right))
    return walk(tree.root) if tree is not None else 0


def depth(tree: Optional[RedBlackTree], node_id: str) -> int:
    """Edges from the root to the node with *node_id*, or -1 if absent."""
    if tree is None or tree.root is None:
        return -1
    level = [tree.root]
    d = 0
    while level:
        nxt = []
        for node in level:
            if node.id == node_id:
                return d
            if node.left is not None:
                nxt.append(node.left)
            if node.right is not None:
                nxt.append(node.right)
        level = nxt
        d += 1
    return -1


# ---------------------------------------------------------------------------
# Cards
# ---------------------------------------------------------------------------
def compute_stats(tree: Optional[RedBlackTree]) -> TreeStats:
    if tree is None or tree.root is None:
        return TreeStats()

    red = black = 0
    stack = [tree.root]
    while stack:
        node = stack.pop()
        if node.is_red:
            red += 1
        else:
            black += 1
        if node.left is not None:
            stack.append(node.left)
        if node.right is not None:
            stack.append(node.right)

    return TreeStats(
        size=len(tree),
        height=height(tree),
        black_height=black_height(tree.root),
        red_count=red,
        black_count=black,
        min_key=tree.min_key(),
        max_key=tree.max_key(),
        is_valid=tree.is_valid(),
    )


def node_stats(tree: Optional[RedBlackTree], node_id: str) -> Optional[NodeStats]:
    node = tree.find_by_id(node_id) if tree is not None else None
    if node is None:
        return None
    return NodeStats(
        id=node.id,
        key=node.key,
        color=node.color.value,
        depth=depth(tree, node_id),
        black_height=black_height(node),
    )
