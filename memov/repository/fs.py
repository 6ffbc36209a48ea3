"""Filesystem primitives shared by the repositories."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from ..errors import FileSystemError

logger = logging.getLogger(__name__)

# Upper bound on empty-directory sweeps.
EMPTY_DIR_PASSES = 10


def exists(path: Path) -> bool:
    try:
        return path.exists()
    except OSError:
        return False


def ensure_dir(path: Path) -> None:
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as err:
        raise FileSystemError(f"failed to create directory {path}") from err


def read_bytes(path: Path) -> bytes:
    try:
        return path.read_bytes()
    except OSError as err:
        raise FileSystemError(f"failed to read {path}") from err


def write_file(path: Path, content: str, truncate: bool) -> bool:
    """Write ``content`` to ``path``.

    An existing file is left alone unless ``truncate`` is set. Returns True if
    the file was written.
    """
    if not truncate and exists(path):
        return False
    ensure_dir(path.parent)
    try:
        with open(path, "w", encoding="utf-8", newline="\n") as f:
            f.write(content)
    except OSError as err:
        raise FileSystemError(f"failed to write {path}") from err
    return True


def remove(path: Path) -> None:
    try:
        path.unlink()
    except OSError as err:
        raise FileSystemError(f"failed to remove {path}") from err


def rename(source: Path, target: Path) -> None:
    ensure_dir(target.parent)
    try:
        os.replace(source, target)
    except OSError as err:
        raise FileSystemError(f"failed to move {source} to {target}") from err


def remove_empty_dirs(root: Path) -> int:
    """Remove empty directories beneath ``root`` (never ``root`` itself).

    Sweeps repeatedly until a pass removes nothing. Returns the number removed.
    """
    if not root.is_dir():
        return 0

    total = 0
    for _ in range(EMPTY_DIR_PASSES):
        removed = 0
        for dirpath, _dirnames, _filenames in os.walk(root, topdown=False):
            path = Path(dirpath)
            if path == root:
                continue
            try:
                if any(path.iterdir()):
                    continue
                path.rmdir()
            except OSError as err:
                raise FileSystemError(f"failed to remove empty directory {path}") from err
            logger.info("Removed empty directory %s", path)
            removed += 1
        total += removed
        if removed == 0:
            break
    return total
