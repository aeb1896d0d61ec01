"""Tests for gzip archiving of single files."""

from __future__ import annotations

import gzip
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest

from walk_cleanup.archiver import ARCHIVE_SUFFIX, archive_path_for, compress_file


class TestArchivePath:
    """Tests for destination naming."""

    def test_uses_base_name_only(self, tmp_path: Path) -> None:
        target = archive_path_for(Path("/srv/app/logs/app.log"), tmp_path)
        assert target == tmp_path / "app.log.gz"

    def test_same_name_from_different_directories_collides(self, tmp_path: Path) -> None:
        """Test that no deduplication is attempted."""
        first = archive_path_for(Path("/a/x.log"), tmp_path)
        second = archive_path_for(Path("/b/x.log"), tmp_path)
        assert first == second


class TestCompressFile:
    """Tests for compress_file."""

    def test_writes_gzip_copy(self, tmp_path: Path, archive_dir: Path) -> None:
        source = tmp_path / "app.log"
        source.write_bytes(b"line one\nline two\n" * 50)

        target = compress_file(source, archive_dir)

        assert target == archive_dir / f"app.log{ARCHIVE_SUFFIX}"
        with gzip.open(target, "rb") as f:
            assert f.read() == source.read_bytes()

    def test_source_left_unchanged(self, tmp_path: Path, archive_dir: Path) -> None:
        """Test that archiving copies rather than moves."""
        source = tmp_path / "app.log"
        source.write_text("keep me")
        before = source.stat()

        compress_file(source, archive_dir)

        assert source.read_text() == "keep me"
        assert source.stat().st_mtime_ns == before.st_mtime_ns

    def test_header_records_original_name(self, tmp_path: Path, archive_dir: Path) -> None:
        source = tmp_path / "app.log"
        source.write_text("data")

        target = compress_file(source, archive_dir)

        # FNAME field follows the 10-byte header when the FNAME flag is set
        raw = target.read_bytes()
        assert raw[3] & 0x08
        assert raw[10:].startswith(b"app.log\x00")

    def test_missing_archive_dir_raises(self, tmp_path: Path) -> None:
        source = tmp_path / "app.log"
        source.write_text("data")

        with pytest.raises(FileNotFoundError):
            compress_file(source, tmp_path / "missing")

        assert source.exists()

    def test_missing_source_creates_nothing(self, tmp_path: Path, archive_dir: Path) -> None:
        with pytest.raises(FileNotFoundError):
            compress_file(tmp_path / "gone.log", archive_dir)

        assert list(archive_dir.iterdir()) == []

    def test_handles_closed_on_compression_failure(self, tmp_path: Path, archive_dir: Path) -> None:
        """Test that a failure mid-copy still releases both files."""
        source = tmp_path / "app.log"
        source.write_text("data")
        opened = []
        real_open = Path.open

        def tracking_open(self: Path, *args: Any, **kwargs: Any) -> Any:
            handle = real_open(self, *args, **kwargs)
            opened.append(handle)
            return handle

        with (
            patch.object(Path, "open", tracking_open),
            patch("walk_cleanup.archiver.shutil.copyfileobj", side_effect=OSError("disk full")),
            pytest.raises(OSError, match="disk full"),
        ):
            compress_file(source, archive_dir)

        assert len(opened) == 2
        assert all(handle.closed for handle in opened)
