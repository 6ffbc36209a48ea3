"""Workflows composed over the repositories."""

from .memo import MemoService, build_memo_weekly, index_tree
from .todo import TodoService, build_todo_weekly, todo_diff

__all__ = [
    "MemoService",
    "TodoService",
    "build_memo_weekly",
    "build_todo_weekly",
    "index_tree",
    "todo_diff",
]
