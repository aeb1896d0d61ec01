"""Tree traversal driver: filter every file and dispatch the run's action."""

from __future__ import annotations

import contextlib
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, TextIO

from .actions import ArchiveAction, DeleteAction, action_from_config, audit_logger, build_handler
from .errors import TraversalError, ValidationError
from .filters import FileCandidate, FilterCriteria

if TYPE_CHECKING:
    from collections.abc import Iterator

    from .config import WalkConfig

logger = logging.getLogger(__name__)


@dataclass
class WalkStats:
    """Counters for one run."""

    visited: int = 0
    matched: int = 0
    listed: int = 0
    deleted: int = 0
    archived: int = 0


def _lstat_candidate(path: Path) -> FileCandidate:
    try:
        return FileCandidate.from_stat(path, path.lstat())
    except OSError as e:
        raise TraversalError(f"Cannot stat {path}: {e}", path) from e


def iter_candidates(root: Path) -> Iterator[FileCandidate]:
    """Yield every entry under ``root``, depth-first, siblings sorted by name.

    The root itself is yielded first, whether it is a file or a directory.
    Symlinks are not followed. Entries are stat'ed when reached, so the
    metadata is a snapshot taken at visit time.

    Raises:
        TraversalError: If an entry cannot be stat'ed or a directory listed.

    """
    stack = [root]
    while stack:
        candidate = _lstat_candidate(stack.pop())
        yield candidate

        if not candidate.is_dir:
            continue
        try:
            children = sorted(candidate.path.iterdir(), key=lambda p: p.name, reverse=True)
        except OSError as e:
            raise TraversalError(f"Cannot read directory {candidate.path}: {e}", candidate.path) from e
        stack.extend(children)


class TreeWalker:
    """Walks one tree, applying a single action to every matched regular file."""

    def __init__(
        self,
        root: str | Path,
        out: TextIO,
        config: WalkConfig,
        audit_log: TextIO | None = None,
    ) -> None:
        """Initialize the walker.

        Args:
            root: Directory (or single file) to walk.
            out: Result sink for listed and archived paths.
            config: Filter and action settings.
            audit_log: Sink for deletion records. Required in delete mode.

        Raises:
            ValidationError: If the root or the configuration is invalid, or
                delete mode has no audit sink.

        """
        if not os.fspath(root).strip():
            raise ValidationError("Root path must not be empty")
        config.validate()

        self.root = Path(root)
        self.out = out
        self.config = config
        self.audit_log = audit_log
        self.criteria = FilterCriteria.from_config(config)
        self.mode = action_from_config(config)

        if isinstance(self.mode, DeleteAction) and audit_log is None:
            raise ValidationError("Delete mode requires an audit log sink")

    def _audit_context(self) -> contextlib.AbstractContextManager[logging.Logger | None]:
        if isinstance(self.mode, DeleteAction) and self.audit_log is not None:
            return audit_logger(self.audit_log)
        return contextlib.nullcontext()

    def walk(self) -> WalkStats:
        """Run the traversal to completion.

        Side effects of files handled before a failure are kept.

        Returns:
            Counters for the run.

        Raises:
            TraversalError: If the tree cannot be read.
            ActionError: If the action fails on a matched file.

        """
        stats = WalkStats()
        logger.debug("Walking %s with action %s", self.root, self.mode.name)

        with self._audit_context() as audit:
            handler = build_handler(self.mode, self.out, audit)

            for candidate in iter_candidates(self.root):
                if candidate.is_dir:
                    continue
                stats.visited += 1

                if not candidate.is_regular:
                    logger.debug("Skipping non-regular file: %s", candidate.path)
                    continue
                if self.criteria.excludes(candidate):
                    logger.debug("Filtered out: %s", candidate.path)
                    continue

                stats.matched += 1
                handler.apply(candidate.path)

                if isinstance(self.mode, ArchiveAction):
                    stats.archived += 1
                elif isinstance(self.mode, DeleteAction):
                    stats.deleted += 1
                else:
                    stats.listed += 1

        logger.info(
            "Walk of %s finished: visited=%d, matched=%d, listed=%d, deleted=%d, archived=%d",
            self.root,
            stats.visited,
            stats.matched,
            stats.listed,
            stats.deleted,
            stats.archived,
        )
        return stats


def run(root: str | Path, out: TextIO, config: WalkConfig, audit_log: TextIO | None = None) -> None:
    """Walk ``root`` and apply the configured action to every matched file.

    Args:
        root: Directory (or single file) to walk.
        out: Result sink.
        config: Filter and action settings.
        audit_log: Deletion audit sink, required in delete mode.

    Raises:
        ValidationError: Before traversal, for an empty root, bad config or a
            delete run without an audit sink.
        TraversalError: If the tree cannot be read.
        ActionError: If an action fails.

    """
    TreeWalker(root, out, config, audit_log).walk()
