"""Memo search with romaji query expansion."""

from .engine import Match, MatchDomain, SearchResult, expand_query, find_matches, search, search_memo
from .romaji import contains_japanese, skk_dictionary, to_hiragana, to_katakana, variations

__all__ = [
    "Match",
    "MatchDomain",
    "SearchResult",
    "contains_japanese",
    "expand_query",
    "find_matches",
    "search",
    "search_memo",
    "skk_dictionary",
    "to_hiragana",
    "to_katakana",
    "variations",
]
