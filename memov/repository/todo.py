"""Daily todo files and the template they start from."""

from __future__ import annotations

import datetime
import logging
from pathlib import Path

from ..errors import MemovError, NotFoundError, RepositoryError
from ..markdown import sections_at_level
from ..models import (
    TEMPLATE_FILENAME,
    TodoFile,
    content_string,
    is_todo_filename,
    new_template,
    new_todo,
    parse_todo_filename,
)
from . import fs

logger = logging.getLogger(__name__)


class TodoRepository:
    def __init__(self, root: Path):
        self.root = Path(root)

    def path_of(self, todo: TodoFile) -> Path:
        return self.root / todo.filename

    def read(self, path: Path) -> TodoFile:
        todo = new_todo(parse_todo_filename(path.name))
        todo.sections = sections_at_level(fs.read_bytes(path), 2)
        return todo

    def list(self) -> list[TodoFile]:
        """Every daily todo file beneath the root, oldest first."""
        if not self.root.is_dir():
            return []

        todos = []
        for path in sorted(self.root.rglob("*")):
            if not path.is_file() or not is_todo_filename(path.name):
                continue
            try:
                todos.append(self.read(path))
            except MemovError as err:
                raise RepositoryError(f"error reading todo file {path}") from err
        todos.sort(key=lambda todo: todo.date)
        return todos

    def save(self, todo: TodoFile, truncate: bool = False) -> Path:
        path = self.path_of(todo)
        if fs.write_file(path, content_string(todo), truncate):
            logger.info("File saved: %s", path)
        return path

    def find_by_date(self, date: datetime.date) -> TodoFile:
        path = self.path_of(new_todo(date))
        if not path.is_file():
            raise NotFoundError(f"todo file does not exist: {path}")
        return self.read(path)

    def template(self, date: datetime.date) -> TodoFile:
        """The template's sections re-parented onto ``date``.

        The template file is created from the default one on first use.
        """
        path = self.root / TEMPLATE_FILENAME
        if not path.exists():
            self.save(new_template())
            logger.info("Template file created: %s", path)

        todo = new_todo(date)
        todo.sections = sections_at_level(fs.read_bytes(path), 2)
        return todo
