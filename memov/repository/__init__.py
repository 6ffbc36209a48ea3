"""Repositories: the only code that touches the memo and todo trees."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Callable

from .memo import CategoryCollector, MemoRepository, parse_memo
from .todo import TodoRepository
from .weekly import WeeklyRepository

if TYPE_CHECKING:
    from ..config import Config


@dataclass
class Repositories:
    todo: TodoRepository
    memo: MemoRepository
    todo_weekly: WeeklyRepository
    memo_weekly: WeeklyRepository

    @classmethod
    def from_config(cls, config: "Config", now: Callable[[], datetime] = datetime.now) -> "Repositories":
        return cls(
            todo=TodoRepository(config.todos_dir),
            memo=MemoRepository(config.memos_dir, now=now),
            todo_weekly=WeeklyRepository(config.todos_dir),
            memo_weekly=WeeklyRepository(config.memos_dir),
        )


__all__ = [
    "CategoryCollector",
    "MemoRepository",
    "Repositories",
    "TodoRepository",
    "WeeklyRepository",
    "parse_memo",
]
