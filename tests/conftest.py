"""Pytest configuration and fixtures."""

from datetime import datetime
from pathlib import Path

import pytest

from memov.config import Config
from memov.repository import Repositories


class RecordingEditor:
    """Editor double that records what it was asked to open."""

    def __init__(self) -> None:
        self.opened: list[tuple[Path, Path]] = []

    def open(self, base_dir: Path, path: Path) -> None:
        self.opened.append((Path(base_dir), Path(path)))


@pytest.fixture(autouse=True)
def trash_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Route deletions into a temporary trash directory."""
    path = tmp_path / "trash"
    monkeypatch.setenv("TEST_TRASH_DIR", str(path))
    return path


@pytest.fixture
def config(tmp_path: Path) -> Config:
    cfg = Config(base_dir=tmp_path / "dailymemo", path=tmp_path / "config.toml")
    cfg.ensure_dirs()
    return cfg


@pytest.fixture
def now() -> datetime:
    return datetime(2025, 10, 1, 12, 34, 56, 789)


@pytest.fixture
def clock(now: datetime):
    return lambda: now


@pytest.fixture
def repos(config: Config, clock) -> Repositories:
    return Repositories.from_config(config, now=clock)


@pytest.fixture
def editor() -> RecordingEditor:
    return RecordingEditor()
