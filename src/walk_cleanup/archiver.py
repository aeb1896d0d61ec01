"""Gzip compression of single files into an archive directory."""

from __future__ import annotations

import gzip
import logging
import shutil
from pathlib import Path

ARCHIVE_SUFFIX = ".gz"

logger = logging.getLogger(__name__)


def archive_path_for(source: Path, archive_dir: Path) -> Path:
    """Destination for ``source`` inside ``archive_dir``.

    Only the base name is kept, so same-named files from different
    directories overwrite each other.
    """
    return archive_dir / f"{source.name}{ARCHIVE_SUFFIX}"


def compress_file(source: Path, archive_dir: Path) -> Path:
    """Write a gzip-compressed copy of ``source`` into ``archive_dir``.

    The source file is only read, never moved or modified. Both handles
    are closed on every exit path.

    Args:
        source: File to compress.
        archive_dir: Existing, writable directory that receives the copy.

    Returns:
        Path of the compressed file.

    Raises:
        OSError: If the source cannot be read or the destination written.

    """
    target = archive_path_for(source, archive_dir)

    with (
        source.open("rb") as src,
        target.open("wb") as raw,
        gzip.GzipFile(filename=source.name, mode="wb", fileobj=raw) as gz,
    ):
        shutil.copyfileobj(src, gz)

    logger.debug("Compressed %s -> %s", source, target)
    return target
