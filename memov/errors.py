"""Error types shared across memov.

Every error carries a kind (what layer gave up), a message, and the file and
line of the call site that raised it. Causes are chained with ``raise ... from``.
"""

from __future__ import annotations

import sys
from enum import Enum


class ErrorKind(str, Enum):
    CONFIG = "config"
    FILESYSTEM = "filesystem"
    VALIDATION = "validation"
    REPOSITORY = "repository"
    SERVICE = "service"
    UI = "ui"


class MemovError(Exception):
    """Base class for all errors raised by memov."""

    kind: ErrorKind = ErrorKind.SERVICE

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
        self.file, self.line = _call_site()

    @property
    def cause(self) -> BaseException | None:
        return self.__cause__

    def __str__(self) -> str:
        if self.__cause__ is not None:
            return f"{self.kind.value}: {self.message} (caused by: {self.__cause__})"
        return f"{self.kind.value}: {self.message}"


class ConfigError(MemovError):
    kind = ErrorKind.CONFIG


class FileSystemError(MemovError):
    kind = ErrorKind.FILESYSTEM


class ValidationError(MemovError):
    kind = ErrorKind.VALIDATION


class NotFoundError(ValidationError):
    """A requested file or section does not exist."""


class ParseError(ValidationError):
    """Source text could not be decoded or parsed."""


class RepositoryError(MemovError):
    kind = ErrorKind.REPOSITORY


class ServiceError(MemovError):
    kind = ErrorKind.SERVICE


class UIError(MemovError):
    kind = ErrorKind.UI


def _call_site() -> tuple[str, int]:
    frame = sys._getframe(1)
    while frame is not None and frame.f_code.co_filename == __file__:
        frame = frame.f_back
    if frame is None:
        return "", 0
    return frame.f_code.co_filename, frame.f_lineno
