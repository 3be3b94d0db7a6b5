"""
history.py — Version History
=============================
Holds successive RedBlackTree versions so a renderer can undo / redo.

Each push records a complete, independent version: trees are never
mutated after creation, so nothing here has to copy anything.

Navigation:
    push(tree)  →  becomes current, redo tail discarded
    undo()      →  step back one version
    redo()      →  step forward one version
    goto(i)     →  jump to any buffered version
    reset()     →  back to a single empty tree

Thread safety:
  This class is NOT thread-safe.  The service serialises access to each
  history behind its own lock.
"""

import logging
from typing import Callable, List, Optional

from rbtree import RedBlackTree

logger = logging.getLogger(__name__)

DEFAULT_MAX_VERSIONS = 100


class TreeHistory:
    """
    Attributes:
        versions    : Buffered tree versions, oldest first.
        index       : Position of the current version in `versions`.
        max_versions: Oldest versions are dropped beyond this count.
        on_change   : Optional callback(tree) fired whenever the current
                      version changes.
    """

    def __init__(
        self,
        max_versions: int = DEFAULT_MAX_VERSIONS,
        on_change: Optional[Callable[[RedBlackTree], None]] = None,
    ):
        if max_versions < 1:
            raise ValueError("max_versions must be at least 1")
        self.max_versions: int              = max_versions
        self.on_change: Optional[Callable[[RedBlackTree], None]] = on_change
        self.versions:  List[RedBlackTree]  = [RedBlackTree()]
        self.index:     int                 = 0

    # ------------------------------------------------------------------
    # Recording
    # ------------------------------------------------------------------
    def push(self, tree: RedBlackTree) -> bool:
        """Make *tree* current.  Returns False (and records nothing) if it already is."""
        if tree is self.current:
            return False
        del self.versions[self.index + 1:]
        self.versions.append(tree)
        overflow = len(self.versions) - self.max_versions
        if overflow > 0:
            del self.versions[:overflow]
            logger.debug("history trimmed %d old version(s)", overflow)
        self._goto(len(self.versions) - 1)
        return True

    def reset(self) -> None:
        self.versions = [RedBlackTree()]
        self._goto(0)

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------
    def undo(self) -> bool:
        """Step back one version.  Returns False if already at the oldest."""
        if self.index <= 0:
            return False
        self._goto(self.index - 1)
        return True

    def redo(self) -> bool:
        """Step forward one version.  Returns False if already at the newest."""
        if self.index >= len(self.versions) - 1:
            return False
        self._goto(self.index + 1)
        return True

    def goto(self, idx: int) -> bool:
        if 0 <= idx < len(self.versions):
            self._goto(idx)
            return True
        return False

    # ------------------------------------------------------------------
    # Read-only accessors
    # ------------------------------------------------------------------
    @property
    def current(self) -> RedBlackTree:
        return self.versions[self.index]

    @property
    def can_undo(self) -> bool:
        return self.index > 0

    @property
    def can_redo(self) -> bool:
        return self.index < len(self.versions) - 1

    def __len__(self) -> int:
        return len(self.versions)

    def to_dict(self) -> dict:
        return {
            "index":    self.index,
            "versions": len(self.versions),
            "can_undo": self.can_undo,
            "can_redo": self.can_redo,
        }

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _goto(self, idx: int) -> None:
        self.index = idx
        if self.on_change is not None:
            self.on_change(self.versions[idx])
