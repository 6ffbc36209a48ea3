"""User configuration stored as TOML."""

from __future__ import annotations

import json
import logging
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .errors import ConfigError, FileSystemError
from .repository import fs

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "config.toml"
DEFAULT_BASE_FOLDERNAME = "dailymemo"
DEFAULT_TODOS_FOLDERNAME = "todos"
DEFAULT_MEMOS_FOLDERNAME = "memos"
DEFAULT_TODOS_DAYSTOSEEK = 10


def config_dir() -> Path:
    return Path.home() / ".config" / "memov"


def default_config_path() -> Path:
    return config_dir() / CONFIG_FILENAME


@dataclass
class Config:
    base_dir: Path
    todos_foldername: str = DEFAULT_TODOS_FOLDERNAME
    memos_foldername: str = DEFAULT_MEMOS_FOLDERNAME
    todos_daystoseek: int = DEFAULT_TODOS_DAYSTOSEEK
    path: Path | None = None

    @classmethod
    def default(cls, path: Path | None = None) -> "Config":
        return cls(base_dir=config_dir() / DEFAULT_BASE_FOLDERNAME, path=path)

    @property
    def todos_dir(self) -> Path:
        return self.base_dir / self.todos_foldername

    @property
    def memos_dir(self) -> Path:
        return self.base_dir / self.memos_foldername

    def to_toml(self) -> str:
        return (
            f"base_dir = {_toml_string(str(self.base_dir))}\n"
            f"todos_foldername = {_toml_string(self.todos_foldername)}\n"
            f"memos_foldername = {_toml_string(self.memos_foldername)}\n"
            f"todos_daystoseek = {self.todos_daystoseek}\n"
        )

    def ensure_dirs(self) -> None:
        for path in (self.base_dir, self.todos_dir, self.memos_dir):
            fs.ensure_dir(path)


def _toml_string(value: str) -> str:
    # A JSON string literal without ASCII escaping is a valid TOML basic string.
    return json.dumps(value, ensure_ascii=False)


def _string(data: dict[str, Any], key: str, default: str) -> str:
    value = data.get(key, default)
    if not isinstance(value, str):
        raise ConfigError(f"{key} must be a string")
    value = value.strip()
    if not value:
        return default
    return value


def load_config(path: Path | None = None) -> Config:
    """Load configuration, writing the defaults on first use.

    Missing keys take their defaults and unknown keys are ignored.
    """
    path = Path(path) if path else default_config_path()
    config = Config.default(path=path)

    if not path.exists():
        try:
            fs.write_file(path, config.to_toml(), truncate=False)
            config.ensure_dirs()
        except FileSystemError as err:
            raise ConfigError(f"failed to create config file {path}") from err
        logger.info("Created config file %s", path)
        return config

    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as err:
        raise ConfigError(f"failed to read config file {path}") from err
    except tomllib.TOMLDecodeError as err:
        raise ConfigError(f"failed to decode config file {path}") from err

    base_dir = _string(data, "base_dir", str(config.base_dir))
    days = data.get("todos_daystoseek", DEFAULT_TODOS_DAYSTOSEEK)
    if isinstance(days, bool) or not isinstance(days, int):
        raise ConfigError("todos_daystoseek must be an integer")
    if days < 0:
        raise ConfigError("todos_daystoseek must not be negative")

    return Config(
        base_dir=Path(base_dir).expanduser(),
        todos_foldername=_string(data, "todos_foldername", DEFAULT_TODOS_FOLDERNAME),
        memos_foldername=_string(data, "memos_foldername", DEFAULT_MEMOS_FOLDERNAME),
        todos_daystoseek=days,
        path=path,
    )
