"""Helpers that emit markdown snippets for generated reports."""

from __future__ import annotations

TAB_SIZE = 2

_STRIPPED_FROM_ANCHORS = "#." + (
    "　！＠＃＄％＾＆＊（）＋｜〜＝￥｀「」｛｝；’：”、。・＜＞？【】『』《》〔〕［］‹›«»〘〙〚〛"
)
_ANCHOR_TABLE = str.maketrans({ch: None for ch in _STRIPPED_FROM_ANCHORS} | {" ": "-"})


def text_to_anchor(text: str) -> str:
    """Turn heading text into the anchor editors generate for it."""
    return text.translate(_ANCHOR_TABLE)


def heading(level: int, text: str) -> str:
    if level < 1 or level > 6:
        return ""
    return "#" * level + f" {text}\n"


def bullet(item: str, level: int = 1) -> str:
    level = max(level, 1)
    return " " * (TAB_SIZE * (level - 1)) + f"- {item}\n"


def ordered(order: int, item: str, level: int = 1, parent_order: int = 1) -> str:
    """An ordered-list line; nested levels indent past the parent's number."""
    order = max(order, 1)
    parent_order = max(parent_order, 1)
    indent = (TAB_SIZE + len(str(parent_order))) * (level - 1)
    return " " * indent + f"{order}. {item}\n"


def link(text: str, url: str, anchor: str = "") -> str:
    if not text or not url:
        return ""
    if not anchor:
        return f"[{text}]({url})"
    return f"[{text}]({url}#{text_to_anchor(anchor)})"


def code_block(code: str, language: str = "") -> str:
    if not code:
        return ""
    return f"```{language}\n{code}\n```\n"
