"""Directory-tree housekeeping: filter files and report, delete or archive them."""

from __future__ import annotations

from .config import WalkConfig
from .errors import ActionError, TraversalError, ValidationError, WalkCleanupError
from .walker import TreeWalker, WalkStats, run

__all__ = [
    "ActionError",
    "TraversalError",
    "TreeWalker",
    "ValidationError",
    "WalkCleanupError",
    "WalkConfig",
    "WalkStats",
    "run",
]
