from __future__ import annotations

from datetime import datetime

from memov.markdown import HeadingBlock
from memov.models import new_memo
from memov.search import (
    MatchDomain,
    contains_japanese,
    expand_query,
    find_matches,
    search,
    skk_dictionary,
    to_hiragana,
    to_katakana,
    variations,
)
from memov.search.romaji import parse_skk_dictionary


def _memo(title: str, *, date: datetime = datetime(2025, 10, 1, 12, 0, 0), categories=None, body="", sections=None):
    memo = new_memo(date, title, categories)
    memo.top_level_body.content_text = body
    memo.sections = [
        HeadingBlock(heading_text=heading, level=2, content_text=content)
        for heading, content in (sections or {}).items()
    ]
    return memo


def test_romaji_conversion() -> None:
    assert to_hiragana("memo") == "めも"
    assert to_hiragana("Kaigi") == "かいぎ"
    assert to_hiragana("kitte") == "きって"
    assert to_hiragana("123") == ""
    assert to_katakana("めも") == "メモ"


def test_contains_japanese() -> None:
    assert contains_japanese("メモ")
    assert contains_japanese("会議 notes")
    assert not contains_japanese("memo")


def test_variations_expand_romaji_into_kana_and_kanji() -> None:
    result = variations("memo")

    assert result[:3] == ["memo", "めも", "メモ"]
    assert set(skk_dictionary()["めも"]) <= set(result)
    assert len(result) == len(set(result))


def test_bundled_dictionary_covers_general_vocabulary() -> None:
    dictionary = skk_dictionary()

    assert len(dictionary) > 30000
    assert dictionary["せいひつ"][0] == "静謐"
    assert "記者" in dictionary["きしゃ"]
    assert dictionary["めも"] == ["メモ"]
    assert "静謐" in variations("seihitsu")


def test_romaji_query_matches_kanji_body() -> None:
    memo = _memo("notes", sections={"log": "静謐な朝\n"})

    results = search([memo], "seihitsu")

    assert [r.memo.title for r in results] == ["notes"]


def test_variations_leave_japanese_untouched() -> None:
    assert variations("会議") == ["会議"]
    assert variations("123", {}) == ["123"]


def test_variations_use_given_dictionary() -> None:
    assert variations("kaigi", {"かいぎ": ["会議"]}) == ["kaigi", "かいぎ", "カイギ", "会議"]


def test_parse_skk_dictionary() -> None:
    text = "\n".join(
        [
            ";; okuri-nasi entries.",
            "かいぎ /会議;meeting/会義/",
            "not an entry line",
            "",
        ]
    )

    assert parse_skk_dictionary(text) == {"かいぎ": ["会議", "会義"]}


def test_romaji_query_matches_katakana_title() -> None:
    memo = _memo("メモの書き方")

    results = search([memo], "memo")

    assert len(results) == 1
    assert results[0].matches[0].domain == MatchDomain.TITLE
    assert results[0].matches[0].content == "メモの書き方"


def test_matches_in_every_domain() -> None:
    memo = _memo(
        "alpha title",
        categories=["alpha", "x"],
        body="first\nalpha in body",
        sections={"alpha heading": "one\nalpha two\n"},
    )

    matches = find_matches(memo, "ALPHA")

    assert [m.domain for m in matches] == [
        MatchDomain.TITLE,
        MatchDomain.CATEGORY,
        MatchDomain.HEADING,
        MatchDomain.CONTENT,
        MatchDomain.CONTENT,
    ]
    category, top, section = matches[1], matches[3], matches[4]
    assert category.content == "alpha/x"
    assert (top.heading_order, top.line, top.prev_line, top.heading) == (-1, 2, "first", "alpha title")
    assert (section.heading_order, section.line, section.heading) == (0, 2, "alpha heading")


def test_all_words_must_match_one_line() -> None:
    memo = _memo("notes", body="alpha beta\nalpha\ngamma")

    assert search([memo], "alpha beta")[0].matches[0].content == "alpha beta"
    assert search([memo], "alpha gamma") == []


def test_adding_words_never_adds_results() -> None:
    memos = [
        _memo("one", body="alpha beta"),
        _memo("two", body="alpha"),
        _memo("three", body="beta"),
    ]

    broad = {r.memo.title for r in search(memos, "alpha")}
    narrow = {r.memo.title for r in search(memos, "alpha beta")}

    assert narrow <= broad
    assert narrow == {"one"}


def test_results_are_newest_first() -> None:
    memos = [
        _memo("old note", date=datetime(2025, 1, 1, 9, 0, 0)),
        _memo("new note", date=datetime(2025, 3, 1, 9, 0, 0)),
        _memo("mid note", date=datetime(2025, 2, 1, 9, 0, 0)),
    ]

    results = search(memos, "note")

    assert [r.memo.title for r in results] == ["new note", "mid note", "old note"]


def test_matches_are_sorted_and_deduplicated() -> None:
    memo = _memo("memo", body="memo line", sections={"later": "memo again\n"})

    matches = search([memo], "memo")[0].matches

    keys = [m.sort_key() for m in matches]
    assert keys == sorted(keys)
    assert len({(m.domain, m.heading_order, m.line) for m in matches}) == len(matches)


def test_empty_query_has_no_results() -> None:
    assert search([_memo("anything")], "   ") == []
    assert expand_query("") == []
