"""Launch an external editor on a file."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from .errors import ServiceError

logger = logging.getLogger(__name__)


class SubprocessEditor:
    """Opens files with a VS Code compatible command line."""

    def __init__(self, command: str = "code"):
        self.command = command

    def open(self, base_dir: Path, path: Path) -> None:
        args = [self.command, "--folder-uri", str(base_dir), "--goto", str(path)]
        logger.debug("Running %s", " ".join(args))
        try:
            subprocess.run(args, check=True)
        except FileNotFoundError as err:
            raise ServiceError(f"editor not found: {self.command}") from err
        except subprocess.CalledProcessError as err:
            raise ServiceError(f"error opening editor on {path}") from err
