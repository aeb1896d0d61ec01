"""Shared fixtures for walk-cleanup tests."""

from __future__ import annotations

from pathlib import Path

import pytest


def make_files(directory: Path, counts: dict[str, int], content: bytes = b"dummy") -> list[Path]:
    """Create ``counts[ext]`` files named ``file<N><ext>`` in ``directory``."""
    created: list[Path] = []
    for ext, count in counts.items():
        for i in range(count):
            path = directory / f"file{i}{ext}"
            path.write_bytes(content)
            created.append(path)
    return created


@pytest.fixture
def testdata(tmp_path: Path) -> Path:
    """Tree with ``dir.log`` (15 bytes) and ``dir2/script.sh``."""
    root = tmp_path / "testdata"
    (root / "dir2").mkdir(parents=True)
    (root / "dir.log").write_bytes(b"x" * 15)
    (root / "dir2" / "script.sh").write_text("#!/bin/sh\necho hi\n")
    return root


@pytest.fixture
def archive_dir(tmp_path: Path) -> Path:
    """Empty archive destination outside the walked tree."""
    path = tmp_path / "archive"
    path.mkdir()
    return path
