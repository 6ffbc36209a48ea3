"""Memo workflows: creation, lookup by path, weekly report, index and tidy."""

from __future__ import annotations

import datetime
import logging
from pathlib import Path, PurePath
from typing import Callable

from ..config import Config
from ..errors import FileSystemError, NotFoundError, RepositoryError, ServiceError, ValidationError
from ..markdown import HeadingBlock, builder
from ..models import (
    INDEX_FILENAME,
    MemoFile,
    WeeklyFile,
    format_day,
    is_memo_filename,
    memo_title,
    new_memo,
    new_weekly,
)
from ..repository import Repositories, fs
from ..search import SearchResult, search
from .todo import week_label

logger = logging.getLogger(__name__)


def memo_link_path(memo: MemoFile) -> str:
    return PurePath(memo.location, memo.filename).as_posix()


def build_memo_weekly(memos: list[MemoFile]) -> WeeklyFile:
    """Memos grouped by ISO week and day, each listed with its sections."""
    weekly = new_weekly()
    prev_week = None
    order = 0
    for memo in memos:
        week = memo.date.isocalendar()[:2]
        if week != prev_week:
            weekly.sections.append(HeadingBlock(heading_text=week_label(memo.date), level=2))
            prev_week = week

        day = format_day(memo.date)
        current = weekly.last_section()
        if current is not None and current.level == 3 and current.heading_text == day:
            order += 1
        else:
            order = 1
            current = HeadingBlock(heading_text=day, level=3)
            weekly.sections.append(current)

        path = memo_link_path(memo)
        text = builder.ordered(order, builder.link(memo.title, path, memo.title), 1, 1)
        for inner, section in enumerate(memo.sections, start=1):
            link = builder.link(section.heading_text, path, section.heading_text)
            text += builder.ordered(inner, link, 2, order)
        current.content_text += text
    return weekly


def index_tree(root: Path, path: Path | None = None, level: int = 0) -> str:
    """Markdown tree of the memos directory.

    Top-level directories become level-2 headings; deeper directories and
    memo files become nested bullets.
    """
    path = path or root
    out = []
    for entry in sorted(path.iterdir(), key=lambda p: p.name):
        if entry.name.startswith("."):
            continue
        if entry.is_dir():
            if path == root:
                out.append("\n" + builder.heading(2, entry.name) + "\n")
            else:
                out.append(builder.bullet(entry.name, level))
            out.append(index_tree(root, entry, level + 1))
        elif is_memo_filename(entry.name):
            rel = entry.relative_to(root).as_posix()
            out.append(builder.bullet(builder.link(memo_title(entry.name), rel), level))
    return "".join(out)


class MemoService:
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

    @property
    def memos_dir(self) -> Path:
        return self.config.memos_dir

    def _open(self, path: Path) -> None:
        self.editor.open(self.config.base_dir, path)

    # -------------------------------------------------------------------------
    # Paths
    # -------------------------------------------------------------------------

    def resolve_path(self, path: str | Path) -> Path:
        """Resolve a user-supplied path against the memos directory.

        Absolute paths are used as-is. A relative path that already points
        inside the memos directory from the working directory is kept;
        anything else is taken relative to the memos directory.
        """
        path = Path(path)
        if path.is_absolute():
            return path
        absolute = path.resolve()
        memos_dir = self.memos_dir.resolve()
        if absolute.is_relative_to(memos_dir) and absolute != memos_dir:
            return absolute
        return self.memos_dir / path

    def memo_at(self, path: str | Path) -> MemoFile:
        """Load the memo stored at ``path``."""
        full = self.resolve_path(path)
        if memo_title(full.name) == full.name:
            raise ValidationError(f"invalid memo file path: {full}")
        if not full.is_file():
            raise NotFoundError(f"memo not found: {full}")

        memo = self.repos.memo.read(full)
        if self.repos.memo.path_of(memo).resolve() != full.resolve():
            raise ValidationError(f"memo is not filed under its category, run tidy first: {full}")
        return memo

    # -------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------

    def generate_memo_file(self, title: str, categories: list[str] | None = None) -> Path:
        memo = new_memo(self.now().replace(microsecond=0), (title or "").strip(), categories)
        path = self.repos.memo.save(memo, truncate=False)
        self._open(path)
        return path

    def list(self) -> list[MemoFile]:
        return self.repos.memo.list()

    def search(self, query: str) -> list[SearchResult]:
        return search(self.repos.memo.list(), query)

    def rename(self, path: str | Path, new_title: str) -> MemoFile:
        return self.repos.memo.rename(self.memo_at(path), new_title)

    def open(self, path: str | Path) -> Path:
        full = self.resolve_path(path)
        self._open(full)
        return full

    def move(self, path: str | Path, categories: list[str]) -> MemoFile:
        return self.repos.memo.move(self.memo_at(path), categories)

    def delete(self, path: str | Path) -> Path:
        return self.repos.memo.delete(self.memo_at(path))

    def duplicate(self, path: str | Path) -> MemoFile:
        return self.repos.memo.duplicate(self.memo_at(path))

    def categories(self) -> list[list[str]]:
        return self.repos.memo.categories()

    def tidy(self) -> list[tuple[Path, Path]]:
        try:
            return self.repos.memo.tidy()
        except (RepositoryError, FileSystemError) as err:
            raise ServiceError("error tidying memos") from err

    def build_weekly_report(self) -> Path:
        logger.info("Building weekly report...")
        try:
            self.tidy()
        except ServiceError as err:
            logger.warning("Error tidying memos: %s", err)

        try:
            memos = self.repos.memo.list()
        except RepositoryError as err:
            raise ServiceError("error fetching memo entries") from err

        weekly = build_memo_weekly(memos)
        try:
            path = self.repos.memo_weekly.save(weekly, truncate=True)
        except FileSystemError as err:
            raise ServiceError("error saving weekly report") from err
        self._open(path)
        return path

    def generate_index(self) -> Path:
        self.tidy()
        fs.ensure_dir(self.memos_dir)
        path = self.memos_dir / INDEX_FILENAME
        try:
            fs.write_file(path, index_tree(self.memos_dir), truncate=True)
        except FileSystemError as err:
            raise ServiceError("error writing to index file") from err
        logger.info("Memo index generated: %s", path)
        self._open(path)
        return path
