"""
engine/
-------
Version history & analytics layer.

    from engine import TreeHistory, compute_stats, node_stats
"""

from engine.history import TreeHistory, DEFAULT_MAX_VERSIONS
from engine.stats   import (
    TreeStats,
    NodeStats,
    compute_stats,
    node_stats,
    black_height,
    height,
    depth,
)

__all__ = [
    "TreeHistory",
    "DEFAULT_MAX_VERSIONS",
    "TreeStats",
    "NodeStats",
    "compute_stats",
    "node_stats",
    "black_height",
    "height",
    "depth",
]
