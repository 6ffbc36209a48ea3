"""Move deleted files to the user's trash instead of unlinking them."""

from __future__ import annotations

import logging
import os
import shutil
import sys
from datetime import datetime
from pathlib import Path

from .errors import FileSystemError

logger = logging.getLogger(__name__)

TRASH_DIR_ENV = "TEST_TRASH_DIR"


def trash_dir() -> Path:
    """The platform trash location, or ``$TEST_TRASH_DIR`` when set."""
    override = os.environ.get(TRASH_DIR_ENV)
    if override:
        return Path(override)
    home = Path.home()
    if sys.platform.startswith("linux"):
        return home / ".local" / "share" / "Trash" / "files"
    if sys.platform in ("darwin", "win32"):
        return home / ".Trash"
    raise FileSystemError(f"unsupported operating system: {sys.platform}")


def move_to_trash(path: Path, now: datetime | None = None) -> Path:
    """Move ``path`` into the trash and return where it landed.

    A name already taken in the trash gets a ``_YYYYMMDD_HHMMSS`` suffix.
    """
    path = Path(path)
    if not path.exists():
        raise FileSystemError(f"file does not exist: {path}")

    target_dir = trash_dir()
    try:
        target_dir.mkdir(parents=True, exist_ok=True)
    except OSError as err:
        raise FileSystemError(f"failed to create trash directory {target_dir}") from err

    target = target_dir / path.name
    if target.exists():
        stamp = (now or datetime.now()).strftime("%Y%m%d_%H%M%S")
        target = target_dir / f"{path.stem}_{stamp}{path.suffix}"

    try:
        shutil.move(str(path), str(target))
    except OSError as err:
        raise FileSystemError(f"failed to move {path} to trash") from err
    logger.info("Moved to trash: %s -> %s", path, target)
    return target
