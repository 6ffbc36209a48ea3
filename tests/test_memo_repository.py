from __future__ import annotations

from datetime import datetime
from pathlib import Path

import pytest

from memov.errors import NotFoundError, RepositoryError, ValidationError
from memov.markdown import HeadingBlock
from memov.models import new_memo
from memov.repository import MemoRepository, parse_memo


def _write_memo(path: Path, *, categories: list[str], title: str, body: str = "") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    cats = ", ".join(f'"{c}"' for c in categories)
    lines = ["---", f"category: [{cats}]", "---", "", f"# {title}", ""]
    if body:
        lines.extend([body, ""])
    path.write_text("\n".join(lines), encoding="utf-8")
    return path


def _memo(title: str = "my memo", categories: list[str] | None = None, **kwargs):
    date = kwargs.pop("date", datetime(2025, 10, 1, 12, 34, 56))
    memo = new_memo(date, title, categories)
    memo.sections = [HeadingBlock(heading_text="notes", level=2, content_text="hello\n")]
    return memo


def test_save_and_load_round_trip(tmp_path: Path) -> None:
    repo = MemoRepository(tmp_path / "memos")
    memo = _memo(categories=["work"])

    path = repo.save(memo)
    loaded = repo.load(memo)

    assert path == tmp_path / "memos" / "work" / "20251001Wed123456_memo_my-memo.md"
    assert loaded.title == "my memo"
    assert loaded.category_tree == ["work"]
    assert loaded.sections == memo.sections
    assert repo.metadata(memo) == {"category": ["work"]}


def test_save_without_truncate_keeps_existing_file(tmp_path: Path) -> None:
    repo = MemoRepository(tmp_path / "memos")
    memo = _memo()
    path = repo.save(memo)
    path.write_text("edited by hand\n", encoding="utf-8")

    repo.save(memo, truncate=False)

    assert path.read_text(encoding="utf-8") == "edited by hand\n"


def test_load_missing_memo(tmp_path: Path) -> None:
    repo = MemoRepository(tmp_path / "memos")

    with pytest.raises(NotFoundError):
        repo.load(_memo())


def test_title_falls_back_to_filename_when_heading_disagrees() -> None:
    source = '---\ncategory: []\n---\n\n# Something Else\n\nbody\n'

    memo = parse_memo("20251001Wed123456_memo_real-title.md", source)

    assert memo.title == "real-title"
    assert memo.top_level_body.content_text == "body"


def test_list_is_sorted_and_ignores_other_files(tmp_path: Path) -> None:
    root = tmp_path / "memos"
    _write_memo(root / "b" / "20250102Thu000000_memo_second.md", categories=["b"], title="second")
    _write_memo(root / "a" / "20250101Wed000000_memo_first.md", categories=["a"], title="first")
    (root / "index.md").write_text("# index\n", encoding="utf-8")

    memos = MemoRepository(root).list()

    assert [m.title for m in memos] == ["first", "second"]


def test_list_reports_unparseable_memo(tmp_path: Path) -> None:
    root = tmp_path / "memos"
    root.mkdir()
    (root / "20250101Wed000000_memo_bad.md").write_bytes(b"\xff\xfe")

    with pytest.raises(RepositoryError):
        MemoRepository(root).list()


def test_tidy_moves_memo_to_its_category(tmp_path: Path) -> None:
    root = tmp_path / "memos"
    source = _write_memo(root / "foo" / "20250612Thu111111_memo_x.md", categories=["bar"], title="x")
    repo = MemoRepository(root)

    moves = repo.tidy()

    target = root / "bar" / "20250612Thu111111_memo_x.md"
    assert moves == [(source, target)]
    assert target.is_file()
    assert not (root / "foo").exists()


def test_tidy_is_idempotent(tmp_path: Path) -> None:
    root = tmp_path / "memos"
    _write_memo(root / "20250612Thu111111_memo_x.md", categories=["a", "b"], title="x")
    repo = MemoRepository(root)

    repo.tidy()
    snapshot = sorted(p.relative_to(root) for p in root.rglob("*"))

    assert repo.tidy() == []
    assert sorted(p.relative_to(root) for p in root.rglob("*")) == snapshot


def test_tidy_skips_unparseable_files(tmp_path: Path) -> None:
    root = tmp_path / "memos"
    bad = root / "misc" / "20250612Thu111111_memo_bad.md"
    bad.parent.mkdir(parents=True)
    bad.write_bytes(b"\xff\xfe")

    assert MemoRepository(root).tidy() == []
    assert bad.is_file()


def test_tidy_leaves_memos_with_path_like_categories(tmp_path: Path) -> None:
    root = tmp_path / "memos"
    outside = tmp_path / "outside"
    absolute = _write_memo(root / "20250612Thu111111_memo_abs.md", categories=[str(outside)], title="abs")
    parent = _write_memo(root / "20250612Thu111112_memo_up.md", categories=[".."], title="up")
    nested = _write_memo(root / "20250612Thu111113_memo_nested.md", categories=["a/b"], title="nested")

    assert MemoRepository(root).tidy() == []
    assert absolute.is_file()
    assert parent.is_file()
    assert nested.is_file()
    assert not outside.exists()
    assert sorted(p.name for p in tmp_path.iterdir()) == ["memos"]


def test_categories_include_directories_and_frontmatter(tmp_path: Path) -> None:
    root = tmp_path / "memos"
    (root / "a" / "b").mkdir(parents=True)
    repo = MemoRepository(root)
    repo.save(_memo(categories=["c", "d"]))

    assert repo.categories() == [["a"], ["a", "b"], ["c"], ["c", "d"]]


def test_move_is_reversible(tmp_path: Path) -> None:
    root = tmp_path / "memos"
    repo = MemoRepository(root)
    memo = _memo(categories=["a"])
    original = repo.save(memo)
    original_bytes = original.read_bytes()

    moved = repo.move(memo, ["b", "c"])

    assert repo.path_of(moved) == root / "b" / "c" / memo.filename
    assert not (root / "a").exists()

    restored = repo.move(moved, ["a"])

    assert repo.path_of(restored) == original
    assert original.read_bytes() == original_bytes
    assert not (root / "b").exists()


def test_rename_rewrites_filename_and_heading(tmp_path: Path) -> None:
    repo = MemoRepository(tmp_path / "memos")
    memo = _memo()
    old_path = repo.save(memo)

    renamed = repo.rename(memo, "new title")

    new_path = repo.path_of(renamed)
    assert new_path.name == "20251001Wed123456_memo_new-title.md"
    assert not old_path.exists()
    assert "# new title\n" in new_path.read_text(encoding="utf-8")


def test_rename_rejects_bad_titles(tmp_path: Path) -> None:
    repo = MemoRepository(tmp_path / "memos")
    memo = _memo()
    repo.save(memo)

    with pytest.raises(ValidationError):
        repo.rename(memo, "  ")
    with pytest.raises(ValidationError):
        repo.rename(memo, "a/b")


def test_duplicate_copies_body_under_new_timestamp(tmp_path: Path) -> None:
    repo = MemoRepository(tmp_path / "memos", now=lambda: datetime(2025, 10, 2, 9, 0, 0, 123))
    memo = _memo(title="orig", categories=["work"])
    memo.top_level_body.content_text = "intro"
    repo.save(memo)

    copy = repo.duplicate(memo)

    assert copy.date == datetime(2025, 10, 2, 9, 0, 0)
    assert copy.title == "orig copied"
    assert copy.category_tree == ["work"]
    assert repo.path_of(memo).is_file()
    loaded = repo.load(copy)
    assert loaded.sections == memo.sections
    assert loaded.top_level_body.content_text == "intro"


def test_delete_moves_memo_to_trash(tmp_path: Path, trash_dir: Path) -> None:
    root = tmp_path / "memos"
    repo = MemoRepository(root)
    memo = _memo(categories=["old"])
    repo.save(memo)

    trashed = repo.delete(memo)

    assert trashed == trash_dir / memo.filename
    assert trashed.is_file()
    assert not (root / "old").exists()
    with pytest.raises(NotFoundError):
        repo.delete(memo)


@pytest.mark.parametrize("categories", [[".."], ["a", ".."], ["/etc"], ["a/b"], [""], ["."]])
def test_move_rejects_categories_outside_the_root(tmp_path: Path, categories: list[str]) -> None:
    root = tmp_path / "memos"
    repo = MemoRepository(root)
    memo = _memo(categories=["a"])
    path = repo.save(memo)

    with pytest.raises(ValidationError):
        repo.move(memo, categories)

    assert path.is_file()
    assert sorted(p.relative_to(tmp_path) for p in tmp_path.rglob("*")) == [
        Path("memos"),
        Path("memos/a"),
        Path("memos/a") / memo.filename,
    ]
