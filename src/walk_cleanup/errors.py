"""Error types raised by the walk-cleanup engine."""

from __future__ import annotations

from pathlib import Path


class WalkCleanupError(Exception):
    """Base error for the project."""

    def __init__(self, message: str, path: Path | None = None) -> None:
        super().__init__(message)
        self.path = path


class ValidationError(WalkCleanupError):
    """Configuration rejected before any traversal happened."""


class TraversalError(WalkCleanupError):
    """A directory entry could not be read during the walk."""


class ActionError(WalkCleanupError):
    """The selected action failed on a matched file."""
