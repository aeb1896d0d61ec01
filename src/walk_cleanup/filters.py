"""Filter predicates applied to every file found during a walk."""

from __future__ import annotations

import os
import stat
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .config import WalkConfig


@dataclass(frozen=True)
class FileCandidate:
    """Metadata snapshot of one directory entry, taken when it is visited."""

    path: Path
    size: int
    mtime: float  # POSIX seconds, as reported by stat
    is_dir: bool = False
    is_regular: bool = True

    @property
    def extension(self) -> str:
        """Extension including the leading dot, or "" when there is none."""
        return self.path.suffix

    @classmethod
    def from_stat(cls, path: Path, st: os.stat_result) -> FileCandidate:
        """Build a candidate from an ``lstat`` result."""
        return cls(
            path=path,
            size=st.st_size,
            mtime=st.st_mtime,
            is_dir=stat.S_ISDIR(st.st_mode),
            is_regular=stat.S_ISREG(st.st_mode),
        )


class FilterCriteria:
    """Decides whether a candidate is excluded from the configured action.

    Every predicate must pass for a file to match. An empty extension,
    a zero size and a far-past date each disable their predicate.
    """

    def __init__(self, extension: str = "", min_size: int = 0, threshold: datetime | None = None) -> None:
        self.extension = extension
        self.min_size = min_size
        self.threshold = threshold
        # Timestamp form: stat mtimes can lie outside the datetime range
        self._threshold_ts = threshold.timestamp() if threshold is not None else None

    @classmethod
    def from_config(cls, config: WalkConfig) -> FilterCriteria:
        return cls(
            extension=config.extension,
            min_size=config.min_size,
            threshold=config.threshold,
        )

    def excludes(self, candidate: FileCandidate) -> bool:
        """Return True if any active predicate rejects the candidate."""
        if candidate.is_dir or not candidate.is_regular:
            return True
        if self.extension and candidate.extension != self.extension:
            return True
        if self.min_size > 0 and candidate.size < self.min_size:
            return True
        # Only files modified at or after the threshold are acted on
        return self._threshold_ts is not None and candidate.mtime < self._threshold_ts

    def matches(self, candidate: FileCandidate) -> bool:
        return not self.excludes(candidate)
