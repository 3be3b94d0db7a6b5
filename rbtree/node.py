"""
node.py — Red-Black Node Model
===============================
Two classes:

    RBNode    – the engine's internal record (key, color, links).
    NodeView  – the read-only accessor handed to renderers.

RBNode is only ever mutated by the tree engine (rotation + fixup).
Everything outside the engine receives NodeView objects, which expose
{id, key, color, left, right} and nothing else: no parent pointer,
no setters.
"""

from enum import Enum
from typing import Optional, Dict, Any
import uuid


# ---------------------------------------------------------------------------
# Color
# ---------------------------------------------------------------------------
class Color(Enum):
    RED   = "RED"
    BLACK = "BLACK"


def new_node_id() -> str:
    return "n-" + uuid.uuid4().hex[:8]


# ---------------------------------------------------------------------------
# RBNode
# ---------------------------------------------------------------------------
class RBNode:
    """
    Attributes:
        id      : Stable identity, kept when a tree is copied so renderers
                  can follow a node from one version to the next.
        key     : Ordered key.  Never reassigned after creation.
        color   : Color.RED or Color.BLACK.
        left    : Left child or None.
        right   : Right child or None.
        parent  : Back reference used only while walking up during fixup.
    """

    __slots__ = ("id", "key", "color", "left", "right", "parent")

    def __init__(
        self,
        key: Any,
        color: Color = Color.RED,
        parent: Optional["RBNode"] = None,
        node_id: Optional[str] = None,
    ):
        self.id: str                     = node_id or new_node_id()
        self.key: Any                    = key
        self.color: Color                = color
        self.left: Optional["RBNode"]    = None
        self.right: Optional["RBNode"]   = None
        self.parent: Optional["RBNode"]  = parent

    @property
    def is_red(self) -> bool:
        return self.color is Color.RED

    def __repr__(self) -> str:
        return f"RBNode(id={self.id}, key={self.key!r}, color={self.color.value})"


def is_red(node: Optional[RBNode]) -> bool:
    """Absent children count as BLACK."""
    return node is not None and node.color is Color.RED


# ---------------------------------------------------------------------------
# NodeView — what leaves the engine
# ---------------------------------------------------------------------------
class NodeView:
    __slots__ = ("_node",)

    def __init__(self, node: RBNode):
        self._node = node

    @classmethod
    def wrap(cls, node: Optional[RBNode]) -> Optional["NodeView"]:
        return cls(node) if node is not None else None

    @property
    def id(self) -> str:
        return self._node.id

    @property
    def key(self) -> Any:
        return self._node.key

    @property
    def color(self) -> Color:
        return self._node.color

    @property
    def left(self) -> Optional["NodeView"]:
        return NodeView.wrap(self._node.left)

    @property
    def right(self) -> Optional["NodeView"]:
        return NodeView.wrap(self._node.right)

    @property
    def is_red(self) -> bool:
        return self._node.color is Color.RED

    @property
    def is_black(self) -> bool:
        return self._node.color is Color.BLACK

    def to_dict(self) -> Dict[str, Any]:
        n = self._node
        return {
            "id":    n.id,
            "key":   n.key,
            "color": n.color.value,
            "left":  n.left.id if n.left else None,
            "right": n.right.id if n.right else None,
        }

    def __eq__(self, other) -> bool:
        return isinstance(other, NodeView) and self._node is other._node

    def __hash__(self) -> int:
        return hash(self._node.id)

    def __repr__(self) -> str:
        return f"NodeView(id={self.id}, key={self.key!r}, color={self.color.value})"
