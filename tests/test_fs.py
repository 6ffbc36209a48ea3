from __future__ import annotations

from pathlib import Path

import pytest

from memov.errors import FileSystemError
from memov.repository import fs


def test_write_file_creates_parents(tmp_path: Path) -> None:
    path = tmp_path / "a" / "b" / "file.md"

    assert fs.write_file(path, "x\n", truncate=False) is True
    assert fs.write_file(path, "y\n", truncate=False) is False
    assert path.read_text(encoding="utf-8") == "x\n"


def test_remove_empty_dirs_keeps_root_and_populated_dirs(tmp_path: Path) -> None:
    (tmp_path / "empty" / "nested" / "deeper").mkdir(parents=True)
    (tmp_path / "full").mkdir()
    (tmp_path / "full" / "keep.md").write_text("x", encoding="utf-8")

    removed = fs.remove_empty_dirs(tmp_path)

    assert removed == 3
    assert tmp_path.is_dir()
    assert not (tmp_path / "empty").exists()
    assert (tmp_path / "full" / "keep.md").is_file()


def test_read_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileSystemError):
        fs.read_bytes(tmp_path / "missing.md")
