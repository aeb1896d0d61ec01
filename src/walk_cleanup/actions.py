"""Action modes and the handlers that apply them to matched files.

A run has exactly one action mode, derived once from the configuration:

* ``ReportAction``  - write the matched path to the result sink.
* ``DeleteAction``  - remove the file and record it in the audit log.
* ``ArchiveAction`` - gzip a copy into the archive directory, keep the
  original, and write the original path to the result sink.
"""

from __future__ import annotations

import contextlib
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, ClassVar, Protocol, TextIO

from .archiver import compress_file
from .errors import ActionError, ValidationError

if TYPE_CHECKING:
    from collections.abc import Iterator

    from .config import WalkConfig

AUDIT_FORMAT = "DELETED FILE: %(asctime)s %(message)s"
AUDIT_DATEFMT = "%Y/%m/%d %H:%M:%S"

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReportAction:
    name: ClassVar[str] = "list"


@dataclass(frozen=True)
class DeleteAction:
    name: ClassVar[str] = "delete"


@dataclass(frozen=True)
class ArchiveAction:
    directory: Path
    name: ClassVar[str] = "archive"


ActionMode = ReportAction | DeleteAction | ArchiveAction


def action_from_config(config: WalkConfig) -> ActionMode:
    """Derive the single action mode for a run.

    Archive wins over delete, and delete wins over list. Conflicting
    requests are logged and resolved by that precedence.
    """
    requested = [
        name
        for name, enabled in (
            ("archive", config.archive_dir is not None),
            ("delete", config.delete),
            ("list", config.list_files),
        )
        if enabled
    ]
    if len(requested) > 1:
        logger.warning("Multiple actions requested (%s); using %s", ", ".join(requested), requested[0])

    if config.archive_dir is not None:
        return ArchiveAction(config.archive_dir)
    if config.delete:
        return DeleteAction()
    return ReportAction()


class ActionHandler(Protocol):
    """Applies the run's action to one matched file."""

    def apply(self, path: Path) -> None:
        """Act on ``path``.

        Raises:
            ActionError: If the action or its sink write fails.

        """
        ...


def _write_line(out: TextIO, path: Path) -> None:
    try:
        out.write(f"{path}\n")
    except (OSError, ValueError) as e:
        raise ActionError(f"Cannot write result for {path}: {e}", path) from e


class ListHandler:
    """Writes each matched path to the result sink."""

    def __init__(self, out: TextIO) -> None:
        self.out = out

    def apply(self, path: Path) -> None:
        _write_line(self.out, path)


class DeleteHandler:
    """Deletes matched files, one audit record per successful deletion."""

    def __init__(self, audit: logging.Logger) -> None:
        self.audit = audit

    def apply(self, path: Path) -> None:
        try:
            path.unlink()
        except OSError as e:
            raise ActionError(f"Cannot delete {path}: {e}", path) from e

        logger.info("Deleted %s", path)
        try:
            self.audit.info("%s", path)
        except (OSError, ValueError) as e:
            raise ActionError(f"Cannot write audit record for {path}: {e}", path) from e


class ArchiveHandler:
    """Compresses a copy of each matched file; originals are kept."""

    def __init__(self, mode: ArchiveAction, out: TextIO) -> None:
        self.archive_dir = mode.directory
        self.out = out

    def apply(self, path: Path) -> None:
        try:
            target = compress_file(path, self.archive_dir)
        except OSError as e:
            raise ActionError(f"Cannot archive {path}: {e}", path) from e

        logger.info("Archived %s -> %s", path, target)
        _write_line(self.out, path)


def build_handler(mode: ActionMode, out: TextIO, audit: logging.Logger | None = None) -> ActionHandler:
    """Create the handler for ``mode`` wired to its sinks.

    Raises:
        ValidationError: If delete mode has no audit logger.

    """
    if isinstance(mode, ArchiveAction):
        return ArchiveHandler(mode, out)
    if isinstance(mode, DeleteAction):
        if audit is None:
            raise ValidationError("Delete mode requires an audit log sink")
        return DeleteHandler(audit)
    return ListHandler(out)


class _AuditHandler(logging.StreamHandler):
    """Stream handler that lets write failures propagate to the caller."""

    def handleError(self, record: logging.LogRecord) -> None:
        exc = sys.exc_info()[1]
        if exc is not None:
            raise exc


@contextlib.contextmanager
def audit_logger(sink: TextIO) -> Iterator[logging.Logger]:
    """Yield a private logger that writes one audit line per record to ``sink``.

    The logger is not registered with the logging manager, so concurrent
    runs never share handlers and application logs never reach the sink.
    """
    audit = logging.Logger("walk-cleanup.audit", logging.INFO)
    audit.propagate = False
    handler = _AuditHandler(sink)
    handler.setFormatter(logging.Formatter(AUDIT_FORMAT, datefmt=AUDIT_DATEFMT))
    audit.addHandler(handler)
    try:
        yield audit
    finally:
        audit.removeHandler(handler)
        handler.flush()
