"""`memov memo` commands."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Callable

from rich.cells import cell_len
from rich.console import Console

from ..config import Config
from ..models import MemoFile
from ..repository import Repositories
from ..search import Match, MatchDomain
from ..services import MemoService


def _service(config: Config, editor=None, now: Callable[[], datetime] = datetime.now) -> MemoService:
    return MemoService(config, Repositories.from_config(config, now=now), editor, now=now)


def _display_path(config: Config, memo: MemoFile, full_path: bool) -> str:
    if full_path:
        return str(config.memos_dir / memo.relative_path)
    return memo.relative_path


def pad(text: str, width: int) -> str:
    """Pad to ``width`` terminal cells, counting wide characters as two."""
    return text + " " * max(width - cell_len(text), 0)


def format_match(match: Match) -> str:
    content = match.content.replace("\t", " ")
    if match.domain == MatchDomain.CONTENT and match.heading:
        heading = match.heading.replace("\t", " ")
        return f"{heading} > {content}"
    return content


def run_memo_new(
    config: Config,
    editor,
    title: str,
    *,
    categories: list[str] | None = None,
    now: Callable[[], datetime] = datetime.now,
) -> int:
    console = Console(stderr=True)
    path = _service(config, editor, now).generate_memo_file(title, categories)
    console.print(f"Memo file: {path}", style="dim")
    return 0


def run_memo_list(config: Config, *, full_path: bool = False) -> int:
    memos = _service(config).list()
    rows = [(memo.title, _display_path(config, memo, full_path)) for memo in memos]
    width = max((cell_len(title) for title, _ in rows), default=0)
    for title, path in rows:
        print(f"{pad(title, width)}\t{path}")
    return 0


def run_memo_search(config: Config, query: str, *, full_path: bool = False, context: bool = False) -> int:
    console = Console(stderr=True)
    results = _service(config).search(query)
    if not results:
        console.print("No memos matched.", style="yellow")
        return 0

    width = max(cell_len(result.memo.title) for result in results)
    for result in results:
        title = pad(result.memo.title, width)
        path = _display_path(config, result.memo, full_path)
        if not context:
            print(f"{title}\t{path}")
            continue
        for match in result.matches:
            print(f"{title}\t{path}\t{match.domain.label}\t{format_match(match)}")
    return 0


def run_memo_rename(config: Config, path: str, new_title: str) -> int:
    console = Console(stderr=True)
    memo = _service(config).rename(path, new_title)
    console.print(f"Renamed to {memo.relative_path}", style="green")
    return 0


def run_memo_open(config: Config, editor, path: str) -> int:
    _service(config, editor).open(path)
    return 0


def run_memo_move(config: Config, path: str, categories: list[str]) -> int:
    console = Console(stderr=True)
    memo = _service(config).move(path, categories)
    console.print(f"Moved to {memo.relative_path}", style="green")
    return 0


def run_memo_delete(config: Config, path: str) -> int:
    console = Console(stderr=True)
    trashed = _service(config).delete(path)
    console.print(f"Moved to trash: {trashed}", style="green")
    return 0


def run_memo_duplicate(config: Config, path: str, *, now: Callable[[], datetime] = datetime.now) -> int:
    console = Console(stderr=True)
    memo = _service(config, now=now).duplicate(path)
    console.print(f"Duplicated as {memo.relative_path}", style="green")
    return 0


def run_memo_categories(config: Config) -> int:
    for tree in _service(config).categories():
        print("/".join(tree))
    return 0


def run_memo_weekly(config: Config, editor) -> int:
    console = Console(stderr=True)
    path = _service(config, editor).build_weekly_report()
    console.print(f"Weekly report: {path}", style="dim")
    return 0


def run_memo_index(config: Config, editor) -> int:
    console = Console(stderr=True)
    path = _service(config, editor).generate_index()
    console.print(f"Index: {path}", style="dim")
    return 0


def run_memo_tidy(config: Config) -> int:
    console = Console(stderr=True)
    moves = _service(config).tidy()
    for source, target in moves:
        console.print(f"{_relative(config, source)} -> {_relative(config, target)}")
    console.print(f"Tidied {len(moves)} memo(s).", style="green")
    return 0


def _relative(config: Config, path: Path) -> str:
    try:
        return str(path.relative_to(config.memos_dir))
    except ValueError:
        return str(path)
