"""File entities: todo files, memos and weekly reports."""

from __future__ import annotations

import datetime
import os
import re
from dataclasses import dataclass, field
from enum import Enum

from .errors import ParseError, ValidationError, NotFoundError
from .markdown import HeadingBlock, render_document

FILE_SEPARATOR = "_"
FILE_FILLER = "-"
FILE_EXTENSION = ".md"

TODO_FILENAME_PATTERN = re.compile(r"^(\d{8})[A-Z][a-z]{2}_todos\.md$")
MEMO_FILENAME_PATTERN = re.compile(r"^(\d{8})[A-Z][a-z]{2}(\d{6})_memo_(.+)\.md$")
MEMO_TITLE_PATTERN = re.compile(r"^\d{8}\S{3}\d{6}_memo_(.*)\.md$")
WEEKLY_FILENAME = "weekly_report.md"
TEMPLATE_FILENAME = "todos_template.md"
INDEX_FILENAME = "index.md"

# Sections carried forward from one day's todo file to the next.
INHERITABLE_SECTIONS = ("todos", "wanttodos")

# English abbreviations regardless of locale, so filenames never depend on LC_TIME.
WEEKDAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


class FileType(str, Enum):
    TODOS = "todos"
    MEMO = "memo"
    WEEKLY = "weekly"
    TEMPLATE = "template"


def format_day(value: datetime.date) -> str:
    """Render a date as ``20060102Mon``."""
    return f"{value:%Y%m%d}{WEEKDAYS[value.weekday()]}"


def format_timestamp(value: datetime.datetime) -> str:
    """Render a timestamp as ``20060102Mon150405``."""
    return f"{format_day(value)}{value:%H%M%S}"


def slugify(title: str) -> str:
    return title.replace(" ", FILE_FILLER)


@dataclass
class TodoFile:
    date: datetime.date
    sections: list[HeadingBlock] = field(default_factory=list)
    file_type: FileType = FileType.TODOS

    @property
    def title(self) -> str:
        if self.file_type == FileType.TEMPLATE:
            return "todos_template"
        return format_day(self.date)

    @property
    def filename(self) -> str:
        if self.file_type == FileType.TEMPLATE:
            return TEMPLATE_FILENAME
        return f"{format_day(self.date)}{FILE_SEPARATOR}{FileType.TODOS.value}{FILE_EXTENSION}"

    def section(self, heading_text: str) -> HeadingBlock | None:
        for block in self.sections:
            if block.heading_text == heading_text:
                return block
        return None


@dataclass
class MemoFile:
    date: datetime.datetime
    title: str
    category_tree: list[str] = field(default_factory=list)
    top_level_body: HeadingBlock | None = None
    sections: list[HeadingBlock] = field(default_factory=list)
    file_type: FileType = field(default=FileType.MEMO, init=False)

    def __post_init__(self):
        if self.top_level_body is None:
            self.top_level_body = HeadingBlock(heading_text=self.title, level=1)
        self.top_level_body.heading_text = self.title

    def set_title(self, title: str) -> None:
        """Change the title, keeping the level-1 heading in step."""
        self.title = title
        self.top_level_body.heading_text = title

    @property
    def filename(self) -> str:
        return (
            f"{format_timestamp(self.date)}{FILE_SEPARATOR}{FileType.MEMO.value}"
            f"{FILE_SEPARATOR}{slugify(self.title)}{FILE_EXTENSION}"
        )

    @property
    def location(self) -> str:
        """Directory relative to the memos root; empty for the root itself."""
        if not self.category_tree:
            return ""
        return os.path.join(*self.category_tree)

    @property
    def relative_path(self) -> str:
        return os.path.join(self.location, self.filename)


@dataclass
class WeeklyFile:
    sections: list[HeadingBlock] = field(default_factory=list)
    file_type: FileType = field(default=FileType.WEEKLY, init=False)

    title = "weekly_report"
    filename = WEEKLY_FILENAME

    def last_section(self) -> HeadingBlock | None:
        return self.sections[-1] if self.sections else None


# -----------------------------------------------------------------------------
# Factories
# -----------------------------------------------------------------------------


def new_todo(date: datetime.date | None) -> TodoFile:
    if not date:
        raise ValidationError("invalid date")
    if isinstance(date, datetime.datetime):
        date = date.date()
    return TodoFile(date=date)


def new_template() -> TodoFile:
    return TodoFile(
        date=datetime.date.today(),
        sections=[HeadingBlock(heading_text=name, level=2) for name in INHERITABLE_SECTIONS],
        file_type=FileType.TEMPLATE,
    )


def check_title(title: str) -> None:
    """A title becomes part of a filename, so it must be a single path component."""
    if not title or not title.strip():
        raise ValidationError("title must not be empty")
    if "/" in title or os.sep in title:
        raise ValidationError(f"title must not contain a path separator: {title}")


def check_categories(category_tree: list[str]) -> None:
    """Each category becomes one directory level beneath the memos root."""
    for category in category_tree:
        if not category or not category.strip():
            raise ValidationError("category must not be empty")
        if category in (os.curdir, os.pardir):
            raise ValidationError(f"category must not be {category!r}")
        if "/" in category or os.sep in category or os.path.isabs(category):
            raise ValidationError(f"category must not contain a path separator: {category}")
        if '"' in category:
            raise ValidationError(f'category must not contain \'"\': {category}')


def new_memo(date: datetime.datetime | None, title: str, categories: list[str] | None = None) -> MemoFile:
    if not date:
        raise ValidationError("invalid date")
    check_title(title)
    category_tree = list(categories or [])
    check_categories(category_tree)
    return MemoFile(date=date, title=title, category_tree=category_tree)


def new_weekly() -> WeeklyFile:
    return WeeklyFile()


# -----------------------------------------------------------------------------
# Filenames
# -----------------------------------------------------------------------------


def parse_todo_filename(filename: str) -> datetime.date:
    m = TODO_FILENAME_PATTERN.match(filename)
    if not m:
        raise ParseError(f"not a todo filename: {filename}")
    try:
        return datetime.datetime.strptime(m.group(1), "%Y%m%d").date()
    except ValueError as err:
        raise ParseError(f"invalid date in filename: {filename}") from err


def parse_memo_filename(filename: str) -> tuple[datetime.datetime, str]:
    """Return the (timestamp, slugified title) encoded in a memo filename."""
    m = MEMO_FILENAME_PATTERN.match(filename)
    if not m:
        raise ParseError(f"not a memo filename: {filename}")
    try:
        date = datetime.datetime.strptime(m.group(1) + m.group(2), "%Y%m%d%H%M%S")
    except ValueError as err:
        raise ParseError(f"invalid timestamp in filename: {filename}") from err
    return date, m.group(3)


def is_todo_filename(filename: str) -> bool:
    return TODO_FILENAME_PATTERN.match(filename) is not None


def is_memo_filename(filename: str) -> bool:
    return MEMO_FILENAME_PATTERN.match(filename) is not None


def memo_title(filename: str) -> str:
    """Display title for a memo filename; the filename itself if it does not match."""
    m = MEMO_TITLE_PATTERN.match(filename)
    return m.group(1) if m else filename


# -----------------------------------------------------------------------------
# Serialisation
# -----------------------------------------------------------------------------


def frontmatter_string(category_tree: list[str]) -> str:
    check_categories(category_tree)
    categories = ", ".join(f'"{category}"' for category in category_tree)
    return f"---\ncategory: [{categories}]\n---\n\n"


def category_tree_from_metadata(metadata: dict) -> list[str]:
    """Read ``category`` as a scalar or a list of scalars; other values are ignored."""
    value = metadata.get("category")
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [str(item) for item in value if item is not None and not isinstance(item, (list, dict))]
    if isinstance(value, dict):
        return []
    return [str(value)]


def content_string(entity: TodoFile | MemoFile | WeeklyFile) -> str:
    """The full on-disk text of an entity."""
    if isinstance(entity, MemoFile):
        body = render_document(entity.title, entity.top_level_body.content_text, entity.sections)
        return frontmatter_string(entity.category_tree) + body
    body = render_document(entity.title, "", entity.sections)
    if isinstance(entity, WeeklyFile):
        return body + "\n"
    return body


def override_section_matched(entity: TodoFile | MemoFile | WeeklyFile, section: HeadingBlock) -> None:
    """Replace the first section with the same level and heading text."""
    for idx, existing in enumerate(entity.sections):
        if existing.level == section.level and existing.heading_text == section.heading_text:
            entity.sections[idx] = section
            return
    raise NotFoundError(f"section not found: {section.heading_text}")
