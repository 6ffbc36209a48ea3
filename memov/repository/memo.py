"""Memo storage: one markdown file per memo, filed under its category directories."""

from __future__ import annotations

import logging
import os
from dataclasses import replace
from datetime import datetime
from pathlib import Path
from typing import Callable

from .. import trash
from ..errors import MemovError, NotFoundError, RepositoryError, ValidationError
from ..markdown import HeadingBlock, metadata, parse_document
from ..models import (
    INDEX_FILENAME,
    WEEKLY_FILENAME,
    MemoFile,
    category_tree_from_metadata,
    check_categories,
    check_title,
    content_string,
    is_memo_filename,
    new_memo,
    parse_memo_filename,
    slugify,
)
from . import fs

logger = logging.getLogger(__name__)

# Generated files that live among the memos but are never memos themselves.
TIDY_SKIP = frozenset({INDEX_FILENAME, WEEKLY_FILENAME})


def parse_memo(filename: str, source: str | bytes) -> MemoFile:
    """Build a MemoFile from its filename and file contents.

    The level-1 heading is used as the title when it matches the filename;
    otherwise the filename's title part wins so the two never disagree.
    """
    date, slug = parse_memo_filename(filename)
    doc = parse_document(source)

    title = slug
    body = ""
    if doc.top_level_body is not None:
        body = doc.top_level_body.content_text
        if slugify(doc.title) == slug:
            title = doc.title

    return MemoFile(
        date=date,
        title=title,
        category_tree=category_tree_from_metadata(doc.metadata),
        top_level_body=HeadingBlock(heading_text=title, level=1, content_text=body),
        sections=doc.sections,
    )


class CategoryCollector:
    """Gathers category paths from the directory tree and from memo frontmatter."""

    def __init__(self, root: Path):
        self.root = root
        self.seen: set[str] = set()
        self.categories: list[list[str]] = []

    def add(self, tree: list[str]) -> None:
        for depth in range(1, len(tree) + 1):
            prefix = tree[:depth]
            key = os.sep.join(prefix)
            if key not in self.seen:
                self.seen.add(key)
                self.categories.append(prefix)

    def collect_directories(self) -> None:
        if not self.root.is_dir():
            return
        for dirpath, dirnames, _filenames in os.walk(self.root):
            dirnames.sort()
            rel = Path(dirpath).relative_to(self.root)
            if rel.parts:
                self.add(list(rel.parts))

    def collect_memos(self, memos: list[MemoFile]) -> None:
        for memo in memos:
            self.add(memo.category_tree)

    def sorted(self) -> list[list[str]]:
        # List comparison is component-wise with shorter prefixes first,
        # which places every parent right before its descendants.
        return sorted(self.categories)


class MemoRepository:
    def __init__(self, root: Path, now: Callable[[], datetime] = datetime.now):
        self.root = Path(root)
        self.now = now

    def path_of(self, memo: MemoFile) -> Path:
        return self.root / memo.location / memo.filename

    def read(self, path: Path) -> MemoFile:
        return parse_memo(path.name, fs.read_bytes(path))

    def list(self) -> list[MemoFile]:
        """Every memo beneath the root, oldest first."""
        if not self.root.is_dir():
            return []

        memos = []
        for dirpath, dirnames, filenames in os.walk(self.root):
            dirnames.sort()
            for name in sorted(filenames):
                if not is_memo_filename(name):
                    continue
                path = Path(dirpath) / name
                try:
                    memos.append(self.read(path))
                except MemovError as err:
                    raise RepositoryError(f"error reading memo {path}") from err
        memos.sort(key=lambda memo: memo.date)
        return memos

    def load(self, memo: MemoFile) -> MemoFile:
        path = self.path_of(memo)
        if not path.is_file():
            raise NotFoundError(f"memo does not exist: {path}")
        return self.read(path)

    def metadata(self, memo: MemoFile) -> dict:
        path = self.path_of(memo)
        if not path.is_file():
            raise NotFoundError(f"memo does not exist: {path}")
        return metadata(fs.read_bytes(path))

    def save(self, memo: MemoFile, truncate: bool = False) -> Path:
        path = self.path_of(memo)
        if fs.write_file(path, content_string(memo), truncate):
            logger.info("File saved: %s", path)
        return path

    def move(self, memo: MemoFile, categories: list[str]) -> MemoFile:
        """Refile a memo under new categories and drop directories left empty."""
        check_categories(list(categories))
        current = self.path_of(memo)
        moved = self.load(memo)
        moved.category_tree = list(categories)
        target = self.path_of(moved)

        try:
            self.save(moved, truncate=True)
        except MemovError as err:
            raise RepositoryError(f"failed to save file: {target}") from err
        if current != target:
            fs.remove(current)
            logger.info("Moved file %s -> %s", current, target)
        fs.remove_empty_dirs(self.root)
        return moved

    def rename(self, memo: MemoFile, new_title: str) -> MemoFile:
        check_title(new_title)
        current = self.path_of(memo)
        renamed = self.load(memo)
        renamed.set_title(new_title)
        target = self.path_of(renamed)

        try:
            self.save(renamed, truncate=True)
        except MemovError as err:
            raise RepositoryError("failed to save renamed file") from err
        if current != target:
            fs.remove(current)
            logger.info("Renamed file %s -> %s", current, target)
        return renamed

    def duplicate(self, memo: MemoFile) -> MemoFile:
        original = self.load(memo)
        copy = new_memo(
            self.now().replace(microsecond=0),
            original.title + " copied",
            list(original.category_tree),
        )
        copy.top_level_body.content_text = original.top_level_body.content_text
        copy.sections = [replace(section) for section in original.sections]

        try:
            path = self.save(copy, truncate=True)
        except MemovError as err:
            raise RepositoryError("failed to save duplicate") from err
        logger.info("Duplicated memo %s -> %s", self.path_of(original), path)
        return copy

    def delete(self, memo: MemoFile) -> Path:
        """Send a memo to the trash. Returns its location in the trash."""
        path = self.path_of(memo)
        if not path.is_file():
            raise NotFoundError(f"memo does not exist: {path}")
        trashed = trash.move_to_trash(path)
        fs.remove_empty_dirs(self.root)
        return trashed

    def categories(self) -> list[list[str]]:
        collector = CategoryCollector(self.root)
        collector.collect_directories()
        collector.collect_memos(self.list())
        return collector.sorted()

    def tidy(self) -> list[tuple[Path, Path]]:
        """Move every memo to the directory its frontmatter names.

        Files that cannot be parsed, or whose categories are not plain
        directory names, are skipped. Returns the (source, target)
        pairs that were moved.
        """
        if not self.root.is_dir():
            return []

        candidates = []
        for dirpath, dirnames, filenames in os.walk(self.root):
            dirnames.sort()
            for name in sorted(filenames):
                if name in TIDY_SKIP or not is_memo_filename(name):
                    continue
                candidates.append(Path(dirpath) / name)

        moves = []
        for source in candidates:
            try:
                memo = self.read(source)
            except MemovError as err:
                logger.info("Skipping %s: %s", source, err)
                continue
            try:
                check_categories(memo.category_tree)
            except ValidationError as err:
                logger.info("Skipping %s: %s", source, err)
                continue
            target = self.root / memo.location / source.name
            if target == source:
                continue
            if target.exists():
                logger.info("Skipping %s: %s already exists", source, target)
                continue
            logger.info("Moving file %s -> %s", source, target)
            fs.rename(source, target)
            moves.append((source, target))

        fs.remove_empty_dirs(self.root)
        return moves
