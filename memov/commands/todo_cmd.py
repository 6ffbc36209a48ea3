"""`memov todo` commands."""

from __future__ import annotations

from datetime import datetime
from typing import Callable

from rich.console import Console

from ..config import Config
from ..repository import Repositories
from ..services import TodoService


def _service(config: Config, editor, now: Callable[[], datetime]) -> TodoService:
    return TodoService(config, Repositories.from_config(config, now=now), editor, now=now)


def run_todo_new(config: Config, editor, *, truncate: bool = False, now: Callable[[], datetime] = datetime.now) -> int:
    """Generate today's todo file, carrying forward open todos, and open it."""
    console = Console(stderr=True)
    path = _service(config, editor, now).generate_todo_file(truncate)
    console.print(f"Todo file: {path}", style="dim")
    return 0


def run_todo_weekly(config: Config, editor, *, now: Callable[[], datetime] = datetime.now) -> int:
    console = Console(stderr=True)
    path = _service(config, editor, now).build_weekly_report()
    console.print(f"Weekly report: {path}", style="dim")
    return 0
