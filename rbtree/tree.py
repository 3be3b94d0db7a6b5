"""
tree.py — Red-Black Tree Engine
================================
Single source of truth for tree structure.  Renderers and the service
both talk to this object.

Responsibilities:
  1. Rotation primitive                      (_rotate_left / _rotate_right)
  2. Insertion + fixup                       (insert, from_keys)
  3. Search                                  (search, descent_path, contains)
  4. Deletion by rebuild                     (delete)
  5. Invariant checking                      (validate)
  6. Snapshots for renderers                 (to_dict, structure)

Design decisions:
  - A RedBlackTree handle is never mutated once it has been handed out.
    insert / delete build a private copy (node ids preserved), mutate
    the copy, and return it.  Two versions therefore never share nodes,
    so holding on to an old version for undo is always safe.
  - Fixup is a single loop parameterised by the side the parent hangs
    on; the mirrored halves share one code path.
  - Deletion collects the in-order keys minus the target and reinserts
    them into a fresh tree.  The result is valid but is not the shape
    canonical RB-delete would produce.
"""

import logging
from collections import deque
from typing import Any, Iterable, Iterator, List, NamedTuple, Optional, Tuple

from rbtree.errors import InvariantViolation, RotationError
from rbtree.node import Color, NodeView, RBNode, is_red

logger = logging.getLogger(__name__)

_OPPOSITE = {"left": "right", "right": "left"}


# ---------------------------------------------------------------------------
# Fixup trace
# ---------------------------------------------------------------------------
class FixupStep(NamedTuple):
    """
    One fixup case that fired during an insertion.

        case : "recolor"  – uncle red, push the violation two levels up
               "triangle" – uncle black, inner grandchild, straighten
               "line"     – uncle black, outer grandchild, rotate grandparent
        side : which child of the grandparent the parent is ("left"/"right")
        key  : key of the node the case was applied to
    """
    case: str
    side: str
    key:  Any


# ---------------------------------------------------------------------------
# RedBlackTree
# ---------------------------------------------------------------------------
class RedBlackTree:
    """
    Read-only properties:
        root        : NodeView of the root, or None when empty.
        size        : number of keys.
        fixup_trace : FixupSteps recorded by the insertion that produced
                      this version (empty for every other version).
    """

    __slots__ = ("_root", "_size", "_fixup_trace")

    def __init__(self):
        self._root: Optional[RBNode]        = None
        self._size: int                     = 0
        self._fixup_trace: Tuple[FixupStep, ...] = ()

    @classmethod
    def from_keys(cls, keys: Iterable[Any]) -> "RedBlackTree":
        """Insert keys in iteration order into one working tree.  Duplicates are skipped."""
        tree = cls()
        for key in keys:
            tree._insert(key)
        tree._fixup_trace = ()
        return tree

    # ==================================================================
    # READ-ONLY ACCESS
    # ==================================================================
    @property
    def root(self) -> Optional[NodeView]:
        return NodeView.wrap(self._root)

    @property
    def size(self) -> int:
        return self._size

    @property
    def fixup_trace(self) -> Tuple[FixupStep, ...]:
        return self._fixup_trace

    def __len__(self) -> int:
        return self._size

    def __iter__(self) -> Iterator[Any]:
        """Keys in ascending order."""
        stack: List[RBNode] = []
        cur = self._root
        while stack or cur is not None:
            while cur is not None:
                stack.append(cur)
                cur = cur.left
            cur = stack.pop()
            yield cur.key
            cur = cur.right

    def __contains__(self, key: Any) -> bool:
        return self._find(key) is not None

    def keys(self) -> List[Any]:
        return list(self)

    def min_key(self) -> Any:
        if self._root is None:
            raise ValueError("Tree is empty")
        node = self._root
        while node.left is not None:
            node = node.left
        return node.key

    def max_key(self) -> Any:
        if self._root is None:
            raise ValueError("Tree is empty")
        node = self._root
        while node.right is not None:
            node = node.right
        return node.key

    # ==================================================================
    # SEARCH
    # ==================================================================
    def _find(self, key: Any) -> Optional[RBNode]:
        cur = self._root
        while cur is not None:
            if key < cur.key:
                cur = cur.left
            elif key > cur.key:
                cur = cur.right
            else:
                return cur
        return None

    def search(self, key: Any) -> Optional[NodeView]:
        return NodeView.wrap(self._find(key))

    def descent_path(self, key: Any) -> List[NodeView]:
        """Nodes compared against while descending towards *key*, match included."""
        path: List[NodeView] = []
        cur = self._root
        while cur is not None:
            path.append(NodeView(cur))
            if key < cur.key:
                cur = cur.left
            elif key > cur.key:
                cur = cur.right
            else:
                break
        return path

    def find_by_id(self, node_id: str) -> Optional[NodeView]:
        for node in self._level_order():
            if node.id == node_id:
                return NodeView(node)
        return None

    # ==================================================================
    # VERSIONED MUTATIONS
    # ==================================================================
    def insert(self, key: Any) -> "RedBlackTree":
        """Return a new version holding *key*.  A duplicate returns self."""
        if self._find(key) is not None:
            logger.debug("insert %r: duplicate, tree unchanged", key)
            return self
        twin = self.copy()
        twin._fixup_trace = twin._insert(key)
        return twin

    def delete(self, key: Any) -> "RedBlackTree":
        """Return a version without *key*, rebuilt from the remaining keys.  A miss returns self."""
        if self._find(key) is None:
            logger.debug("delete %r: not found, tree unchanged", key)
            return self
        remaining = [k for k in self if k != key]
        logger.debug("delete %r: rebuilding from %d keys", key, len(remaining))
        return RedBlackTree.from_keys(remaining)

    def copy(self) -> "RedBlackTree":
        twin = RedBlackTree()
        twin._root = _clone(self._root, None)
        twin._size = self._size
        return twin

    # ==================================================================
    # INSERTION (in place, only ever called on a private copy)
    # ==================================================================
    def _insert(self, key: Any) -> Tuple[FixupStep, ...]:
        parent: Optional[RBNode] = None
        cur = self._root
        while cur is not None:
            parent = cur
            if key < cur.key:
                cur = cur.left
            elif key > cur.key:
                cur = cur.right
            else:
                return ()

        if parent is None:
            # a lone root is always valid
            self._root = RBNode(key, Color.BLACK)
            self._size = 1
            return ()

        z = RBNode(key, Color.RED, parent=parent)
        if key < parent.key:
            parent.left = z
        else:
            parent.right = z
        self._size += 1
        return self._insert_fixup(z)

    def _insert_fixup(self, z: RBNode) -> Tuple[FixupStep, ...]:
        trace: List[FixupStep] = []

        while z.parent is not None and z.parent.is_red:
            p = z.parent
            g = p.parent                      # a red parent is never the root
            side  = "left" if p is g.left else "right"
            outer = _OPPOSITE[side]
            uncle = getattr(g, outer)

            if is_red(uncle):
                p.color     = Color.BLACK
                uncle.color = Color.BLACK
                g.color     = Color.RED
                trace.append(FixupStep("recolor", side, z.key))
                logger.debug("fixup recolor at %r (%s side)", z.key, side)
                z = g
                continue

            if z is getattr(p, outer):
                trace.append(FixupStep("triangle", side, z.key))
                logger.debug("fixup triangle at %r (%s side)", z.key, side)
                z = p
                self._rotate(z, side)
                p = z.parent

            trace.append(FixupStep("line", side, z.key))
            logger.debug("fixup line at %r (%s side)", z.key, side)
            p.color = Color.BLACK
            g.color = Color.RED
            self._rotate(g, outer)

        # recolor can redden the root
        self._root.color = Color.BLACK
        return tuple(trace)

    # ==================================================================
    # ROTATIONS
    # ==================================================================
    def _rotate_left(self, x: RBNode) -> RBNode:
        return self._rotate(x, "left")

    def _rotate_right(self, y: RBNode) -> RBNode:
        return self._rotate(y, "right")

    def _rotate(self, x: RBNode, direction: str) -> RBNode:
        """
        Rotate about *x* in *direction*.  The child on the opposite side
        rises into x's place; its inner subtree moves across to x.
        Returns the (possibly new) root.
        """
        rising = _OPPOSITE[direction]
        y = getattr(x, rising)
        if y is None:
            raise RotationError(
                f"rotate {direction} about {x.key!r}: node has no {rising} child"
            )

        inner = getattr(y, direction)
        setattr(x, rising, inner)
        if inner is not None:
            inner.parent = x

        y.parent = x.parent
        if x.parent is None:
            self._root = y
        elif x is x.parent.left:
            x.parent.left = y
        else:
            x.parent.right = y

        setattr(y, direction, x)
        x.parent = y
        logger.debug("rotate %s about %r", direction, x.key)
        return self._root

    # ==================================================================
    # VALIDATION
    # ==================================================================
    def validate(self) -> int:
        """
        Check BST order, root color, red-red edges, black heights,
        parent links and the cached size.  Returns the root's black
        height; raises InvariantViolation on the first failure.
        """
        if self._root is None:
            if self._size != 0:
                raise InvariantViolation(f"empty tree reports size {self._size}")
            return 0
        if self._root.parent is not None:
            raise InvariantViolation("root has a parent")
        if self._root.color is not Color.BLACK:
            raise InvariantViolation("root is not black")

        count = 0

        def check(node: Optional[RBNode], low: Any, high: Any) -> int:
            nonlocal count
            if node is None:
                return 1
            count += 1
            if low is not None and not node.key > low:
                raise InvariantViolation(f"BST order violated at {node.key!r}")
            if high is not None and not node.key < high:
                raise InvariantViolation(f"BST order violated at {node.key!r}")
            for child in (node.left, node.right):
                if child is None:
                    continue
                if child.parent is not node:
                    raise InvariantViolation(f"stale parent link below {node.key!r}")
                if node.is_red and child.is_red:
                    raise InvariantViolation(f"red node {node.key!r} has a red child")
            left_bh  = check(node.left, low, node.key)
            right_bh = check(node.right, node.key, high)
            if left_bh != right_bh:
                raise InvariantViolation(f"black-height mismatch at {node.key!r}")
            return left_bh + (0 if node.is_red else 1)

        bh = check(self._root, None, None)
        if count != self._size:
            raise InvariantViolation(f"size is {self._size} but tree holds {count} nodes")
        # black height excludes the node itself
        return bh - 1

    def is_valid(self) -> bool:
        try:
            self.validate()
        except InvariantViolation:
            return False
        return True

    # ==================================================================
    # SNAPSHOTS
    # ==================================================================
    def _level_order(self) -> Iterator[RBNode]:
        if self._root is None:
            return
        queue = deque([self._root])
        while queue:
            node = queue.popleft()
            yield node
            if node.left is not None:
                queue.append(node.left)
            if node.right is not None:
                queue.append(node.right)

    def to_dict(self) -> dict:
        """Renderer snapshot: root id plus every node in level order."""
        return {
            "root":  self._root.id if self._root else None,
            "nodes": [NodeView(n).to_dict() for n in self._level_order()],
        }

    def structure(self) -> Optional[tuple]:
        """Nested (key, color, left, right) tuples with ids left out, for shape comparisons."""
        def shape(node: Optional[RBNode]) -> Optional[tuple]:
            if node is None:
                return None
            return (node.key, node.color.value, shape(node.left), shape(node.right))
        return shape(self._root)

    def __repr__(self) -> str:
        return f"RedBlackTree(size={self._size}, keys={self.keys()!r})"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def _clone(node: Optional[RBNode], parent: Optional[RBNode]) -> Optional[RBNode]:
    if node is None:
        return None
    twin = RBNode(node.key, node.color, parent=parent, node_id=node.id)
    twin.left  = _clone(node.left, twin)
    twin.right = _clone(node.right, twin)
    return twin
