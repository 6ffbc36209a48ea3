"""Daily todo generation and the weekly todo diff report."""

from __future__ import annotations

import datetime
import difflib
import logging
from pathlib import Path
from typing import Callable

from ..config import Config
from ..errors import FileSystemError, NotFoundError, RepositoryError, ServiceError, ValidationError
from ..markdown import HeadingBlock, builder
from ..models import INHERITABLE_SECTIONS, TodoFile, WeeklyFile, new_weekly, override_section_matched
from ..repository import Repositories

logger = logging.getLogger(__name__)


def week_label(date: datetime.date) -> str:
    year, week, _ = date.isocalendar()
    return f"{year} | Week {week}"


def section_body(todo: TodoFile, heading_text: str) -> str:
    section = todo.section(heading_text)
    return section.content_text if section else ""


def todo_diff(prev: TodoFile, curr: TodoFile) -> str:
    """Unified diff of the ``todos`` sections, as a single hunk."""
    before = section_body(prev, "todos").splitlines(keepends=True)
    after = section_body(curr, "todos").splitlines(keepends=True)
    lines = difflib.unified_diff(
        before,
        after,
        fromfile=prev.filename,
        tofile=curr.filename,
        n=max(len(before), len(after)),
    )
    return "".join(line if line.endswith("\n") else line + "\n" for line in lines).strip("\n")


def build_todo_weekly(todos: list[TodoFile]) -> WeeklyFile:
    """One level-3 section per todo file (after the first), grouped by ISO week."""
    weekly = new_weekly()
    prev_week = None
    for prev, curr in zip(todos, todos[1:]):
        week = curr.date.isocalendar()[:2]
        if week != prev_week:
            weekly.sections.append(HeadingBlock(heading_text=week_label(curr.date), level=2))
            prev_week = week

        diff = todo_diff(prev, curr)
        weekly.sections.append(
            HeadingBlock(
                heading_text=builder.link(curr.filename, curr.filename),
                level=3,
                content_text=builder.code_block(diff, "diff"),
            )
        )
    return weekly


class TodoService:
    def __init__(
        self,
        config: Config,
        repos: Repositories,
        editor,
        now: Callable[[], datetime.datetime] = datetime.datetime.now,
    ):
        self.config = config
        self.repos = repos
        self.editor = editor
        self.now = now

    def find_previous(self, today: datetime.date, days_to_seek: int) -> TodoFile | None:
        """The most recent todo file within ``days_to_seek`` days before ``today``."""
        for offset in range(1, days_to_seek + 1):
            try:
                return self.repos.todo.find_by_date(today - datetime.timedelta(days=offset))
            except NotFoundError:
                continue
        return None

    def inherit_todos(self, today: datetime.date, days_to_seek: int, strict: bool = False) -> TodoFile:
        """Today's todo file from the template, with open todos carried forward.

        With ``strict`` a missing predecessor is a ValidationError instead of
        leaving the template untouched.
        """
        try:
            todo = self.repos.todo.template(today)
        except (RepositoryError, FileSystemError) as err:
            raise ServiceError("failed to load todos template") from err

        previous = self.find_previous(today, days_to_seek)
        if previous is None:
            if strict:
                raise ValidationError(f"previous todos were not found in previous {days_to_seek} days")
            return todo

        for section in previous.sections:
            if section.heading_text not in INHERITABLE_SECTIONS:
                continue
            try:
                override_section_matched(todo, section)
            except NotFoundError:
                logger.debug("Template has no %s section; not inherited", section.heading_text)
        return todo

    def generate_todo_file(self, truncate: bool = False) -> Path:
        today = self.now().date()
        todo = self.inherit_todos(today, self.config.todos_daystoseek)
        path = self.repos.todo.save(todo, truncate)
        self.editor.open(self.config.base_dir, path)
        return path

    def build_weekly_report(self) -> Path:
        logger.info("Building weekly report...")
        try:
            todos = self.repos.todo.list()
        except RepositoryError as err:
            raise ServiceError("error fetching todo entries") from err

        weekly = build_todo_weekly(todos)
        try:
            path = self.repos.todo_weekly.save(weekly, truncate=True)
        except FileSystemError as err:
            raise ServiceError("error saving weekly report") from err
        self.editor.open(self.config.base_dir, path)
        return path
