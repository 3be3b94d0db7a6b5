"""
errors.py — Engine Exceptions
==============================
Only programmer errors live here.  Duplicate inserts and search / delete
misses are ordinary results, not exceptions.
"""


class TreeError(RuntimeError):
    """Base class for structural failures inside the engine."""


class RotationError(TreeError):
    """Rotation requested about a node that lacks the required child."""


class InvariantViolation(TreeError):
    """A red-black or BST invariant does not hold."""
