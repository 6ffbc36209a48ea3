from __future__ import annotations

import datetime
from pathlib import Path

import pytest

from memov.errors import ValidationError
from memov.markdown import HeadingBlock
from memov.models import new_todo
from memov.services import TodoService, build_todo_weekly, todo_diff


def _write_todo(root: Path, name: str, sections: dict[str, str]) -> Path:
    lines = [f"# {name[:11]}", ""]
    for heading, body in sections.items():
        lines.extend([f"## {heading}", "", body, ""])
    path = root / name
    path.write_text("\n".join(lines), encoding="utf-8")
    return path


def _todo(date: datetime.date, todos: str):
    todo = new_todo(date)
    todo.sections = [HeadingBlock(heading_text="todos", level=2, content_text=todos)]
    return todo


def _service(config, repos, editor, when: datetime.datetime) -> TodoService:
    return TodoService(config, repos, editor, now=lambda: when)


def test_inherit_todos_from_recent_file(config, repos, editor) -> None:
    _write_todo(config.todos_dir, "20230101Sun_todos.md", {"todos": "- A", "wanttodos": "- B"})
    service = _service(config, repos, editor, datetime.datetime(2023, 1, 3, 9))

    todo = service.inherit_todos(datetime.date(2023, 1, 3), 3)

    assert todo.filename == "20230103Tue_todos.md"
    assert todo.section("todos").content_text == "- A\n"
    assert todo.section("wanttodos").content_text == "- B\n"


def test_inherit_ignores_files_beyond_seek_window(config, repos, editor) -> None:
    _write_todo(config.todos_dir, "20230101Sun_todos.md", {"todos": "- A"})
    service = _service(config, repos, editor, datetime.datetime(2023, 1, 10, 9))

    todo = service.inherit_todos(datetime.date(2023, 1, 10), 3)

    assert todo.section("todos").content_text == ""
    with pytest.raises(ValidationError):
        service.inherit_todos(datetime.date(2023, 1, 10), 3, strict=True)


def test_inherit_only_copies_inheritable_sections(config, repos, editor) -> None:
    _write_todo(config.todos_dir, "20230102Mon_todos.md", {"todos": "- A", "notes": "scratch"})
    service = _service(config, repos, editor, datetime.datetime(2023, 1, 3, 9))

    todo = service.inherit_todos(datetime.date(2023, 1, 3), 3)

    assert [s.heading_text for s in todo.sections] == ["todos", "wanttodos"]
    assert todo.section("todos").content_text == "- A\n"


def test_generate_todo_file_writes_and_opens(config, repos, editor) -> None:
    _write_todo(config.todos_dir, "20230102Mon_todos.md", {"todos": "- A"})
    service = _service(config, repos, editor, datetime.datetime(2023, 1, 3, 9))

    path = service.generate_todo_file()

    assert path == config.todos_dir / "20230103Tue_todos.md"
    assert path.read_text(encoding="utf-8") == "# 20230103Tue\n\n## todos\n\n- A\n\n## wanttodos\n"
    assert editor.opened == [(config.base_dir, path)]


def test_generate_todo_file_keeps_existing_unless_truncated(config, repos, editor) -> None:
    service = _service(config, repos, editor, datetime.datetime(2023, 1, 3, 9))
    path = config.todos_dir / "20230103Tue_todos.md"
    path.write_text("mine\n", encoding="utf-8")

    service.generate_todo_file()
    assert path.read_text(encoding="utf-8") == "mine\n"

    service.generate_todo_file(truncate=True)
    assert path.read_text(encoding="utf-8").startswith("# 20230103Tue\n")


def test_todo_diff() -> None:
    prev = _todo(datetime.date(2023, 1, 1), "- A\n")
    curr = _todo(datetime.date(2023, 1, 2), "- A\n- B\n")

    assert todo_diff(prev, curr) == "\n".join(
        [
            "--- 20230101Sun_todos.md",
            "+++ 20230102Mon_todos.md",
            "@@ -1 +1,2 @@",
            " - A",
            "+- B",
        ]
    )
    assert todo_diff(curr, curr) == ""


def test_weekly_report_covers_every_consecutive_pair() -> None:
    todos = [
        _todo(datetime.date(2023, 1, 1), "- A\n"),
        _todo(datetime.date(2023, 1, 2), "- A\n- B\n"),
        _todo(datetime.date(2023, 1, 3), "- A\n- B\n"),
        _todo(datetime.date(2023, 1, 9), "- B\n"),
    ]

    weekly = build_todo_weekly(todos)

    headings = [(s.level, s.heading_text) for s in weekly.sections]
    assert headings == [
        (2, "2023 | Week 1"),
        (3, "[20230102Mon_todos.md](20230102Mon_todos.md)"),
        (3, "[20230103Tue_todos.md](20230103Tue_todos.md)"),
        (2, "2023 | Week 2"),
        (3, "[20230109Mon_todos.md](20230109Mon_todos.md)"),
    ]
    assert weekly.sections[1].content_text.startswith("```diff\n--- 20230101Sun_todos.md\n")
    assert weekly.sections[2].content_text == ""


def test_build_weekly_report_saves_and_opens(config, repos, editor) -> None:
    _write_todo(config.todos_dir, "20230101Sun_todos.md", {"todos": "- A"})
    _write_todo(config.todos_dir, "20230102Mon_todos.md", {"todos": "- A\n- B"})
    service = _service(config, repos, editor, datetime.datetime(2023, 1, 3, 9))

    path = service.build_weekly_report()

    text = path.read_text(encoding="utf-8")
    assert path == config.todos_dir / "weekly_report.md"
    assert text.startswith("# weekly_report\n\n## 2023 | Week 1\n\n### [20230102Mon_todos.md](20230102Mon_todos.md)\n")
    assert "+- B\n```\n" in text
    assert text.endswith("\n\n")
    assert editor.opened == [(config.base_dir, path)]
