"""Markdown parsing and rendering."""

from .document import (
    Document,
    HeadingBlock,
    metadata,
    parse_document,
    render,
    render_document,
    sections_at_level,
    top_level_body,
)

__all__ = [
    "Document",
    "HeadingBlock",
    "metadata",
    "parse_document",
    "render",
    "render_document",
    "sections_at_level",
    "top_level_body",
]
