"""Weekly report storage."""

from __future__ import annotations

import logging
from pathlib import Path

from ..models import WeeklyFile, content_string
from . import fs

logger = logging.getLogger(__name__)


class WeeklyRepository:
    def __init__(self, root: Path):
        self.root = Path(root)

    def path_of(self, weekly: WeeklyFile) -> Path:
        return self.root / weekly.filename

    def save(self, weekly: WeeklyFile, truncate: bool = True) -> Path:
        path = self.path_of(weekly)
        if fs.write_file(path, content_string(weekly), truncate):
            logger.info("File saved: %s", path)
        return path
