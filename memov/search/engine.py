"""Linear-scan memo search over titles, categories, headings and body lines."""

from __future__ import annotations

import string
from dataclasses import dataclass, field
from enum import IntEnum

from ..models import MemoFile
from .romaji import variations

_ASCII_LOWER = str.maketrans(string.ascii_uppercase, string.ascii_lowercase)


class MatchDomain(IntEnum):
    TITLE = 0
    CATEGORY = 1
    HEADING = 2
    CONTENT = 3

    @property
    def label(self) -> str:
        return f"[{self.name.title()}]"


@dataclass(frozen=True)
class Match:
    domain: MatchDomain
    content: str
    heading_order: int = 0
    line: int = 0
    prev_line: str = ""
    next_line: str = ""
    heading: str = ""

    def sort_key(self) -> tuple:
        return (self.domain, self.heading_order, self.line, self.content)


@dataclass
class SearchResult:
    memo: MemoFile
    matches: list[Match] = field(default_factory=list)


def ascii_lower(text: str) -> str:
    """Lowercase ASCII letters only; other characters compare as-is."""
    return text.translate(_ASCII_LOWER)


def expand_query(query: str, dictionary: dict[str, list[str]] | None = None) -> list[list[str]]:
    """Split a query on whitespace and expand each word into its variations."""
    return [variations(word, dictionary) for word in query.split()]


def _line_matches(lines: list[str], needle: str, heading_order: int, heading: str) -> list[Match]:
    found = []
    for idx, line in enumerate(lines):
        if needle not in ascii_lower(line):
            continue
        found.append(
            Match(
                domain=MatchDomain.CONTENT,
                content=line,
                heading_order=heading_order,
                line=idx + 1,
                prev_line=lines[idx - 1] if idx > 0 else "",
                next_line=lines[idx + 1] if idx + 1 < len(lines) else "",
                heading=heading,
            )
        )
    return found


def find_matches(memo: MemoFile, needle: str) -> list[Match]:
    """Every place in ``memo`` where ``needle`` occurs, across all domains."""
    needle = ascii_lower(needle)
    if not needle:
        return []

    found: list[Match] = []
    if needle in ascii_lower(memo.title):
        found.append(Match(domain=MatchDomain.TITLE, content=memo.title))

    if any(needle in ascii_lower(category) for category in memo.category_tree):
        found.append(Match(domain=MatchDomain.CATEGORY, content="/".join(memo.category_tree)))

    for order, section in enumerate(memo.sections):
        if needle in ascii_lower(section.heading_text):
            found.append(
                Match(
                    domain=MatchDomain.HEADING,
                    content=section.heading_text,
                    heading_order=order,
                    heading=section.heading_text,
                )
            )

    found.extend(_line_matches(memo.top_level_body.content_text.split("\n"), needle, -1, memo.title))
    for order, section in enumerate(memo.sections):
        found.extend(_line_matches(section.content_text.split("\n"), needle, order, section.heading_text))
    return found


def contains_all_words(text: str, words: list[list[str]]) -> bool:
    """True if ``text`` contains at least one variation of every word."""
    haystack = ascii_lower(text)
    return all(any(ascii_lower(v) in haystack for v in word if v) for word in words)


def search_memo(memo: MemoFile, words: list[list[str]]) -> SearchResult | None:
    """Match one memo against expanded query words; None if it is not a result.

    A memo is a result only if some single match line holds every word.
    """
    if not words:
        return None

    seen: dict[tuple, Match] = {}
    for word in words:
        for variation in word:
            for match in find_matches(memo, variation):
                seen.setdefault((match.domain, match.heading_order, match.line), match)

    valid = [match for match in seen.values() if contains_all_words(match.content, words)]
    if not valid:
        return None
    valid.sort(key=Match.sort_key)
    return SearchResult(memo=memo, matches=valid)


def search(
    memos: list[MemoFile],
    query: str,
    dictionary: dict[str, list[str]] | None = None,
) -> list[SearchResult]:
    """Search memos, newest first; ties are broken by relative path."""
    words = expand_query(query, dictionary)
    results = []
    for memo in memos:
        result = search_memo(memo, words)
        if result is not None:
            results.append(result)

    results.sort(key=lambda r: r.memo.relative_path)
    results.sort(key=lambda r: r.memo.date, reverse=True)
    return results
