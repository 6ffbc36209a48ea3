"""Document-level view over markdown files: frontmatter, title, and heading blocks."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

import frontmatter
import yaml

from ..errors import ParseError
from . import blocks as md

BLANK_RUN_PATTERN = re.compile(r"\n{4,}")


@dataclass
class HeadingBlock:
    """A heading paired with the body that follows it."""

    heading_text: str
    level: int
    content_text: str = ""
    line_number: int = field(default=0, compare=False)


@dataclass
class Document:
    """Parsed form of a file the system writes."""

    metadata: dict = field(default_factory=dict)
    title: str = ""
    top_level_body: HeadingBlock | None = None
    sections: list[HeadingBlock] = field(default_factory=list)


def _decode(source: str | bytes) -> str:
    if isinstance(source, bytes):
        try:
            return source.decode("utf-8")
        except UnicodeDecodeError as err:
            raise ParseError("source is not valid UTF-8") from err
    return source


def split_frontmatter(source: str | bytes) -> tuple[dict, str, int]:
    """Split source into (metadata, body, first body line).

    Unterminated frontmatter is not an error: the text is returned whole as body.
    """
    text = _decode(source)
    try:
        metadata, body = frontmatter.parse(text)
    except yaml.YAMLError as err:
        raise ParseError("invalid frontmatter") from err

    offset = text.find(body) if body else 0
    first_line = text.count("\n", 0, max(offset, 0)) + 1
    return dict(metadata), body, first_line


def normalise_content(text: str) -> str:
    """Trim surrounding blank lines and cap runs of blank lines at two."""
    text = BLANK_RUN_PATTERN.sub("\n\n\n", text.strip("\n"))
    return text + "\n" if text else ""


def metadata(source: str | bytes) -> dict:
    """Frontmatter key/value map; empty if absent."""
    return split_frontmatter(source)[0]


def top_level_body(source: str | bytes) -> HeadingBlock | None:
    """The level-1 title and the content that follows it up to the next heading.

    Returns None when the document does not begin with a level-1 heading.
    """
    _, body, first_line = split_frontmatter(source)
    parsed = md.parse(body, first_line)
    if not parsed or not isinstance(parsed[0], md.Heading) or parsed[0].level != 1:
        return None

    title = parsed[0]
    content: list[md.Block] = []
    for block in parsed[1:]:
        if isinstance(block, md.Heading):
            break
        content.append(block)
    return HeadingBlock(
        heading_text=title.text,
        level=1,
        content_text=md.render(content).strip("\n"),
        line_number=title.line,
    )


def sections_at_level(source: str | bytes, level: int) -> list[HeadingBlock]:
    """Every heading at ``level`` with its content up to the next heading at or above it.

    Deeper headings stay inside their parent's content.
    """
    _, body, first_line = split_frontmatter(source)
    return _sections(md.parse(body, first_line), level)


def _sections(parsed: list[md.Block], level: int) -> list[HeadingBlock]:
    sections: list[HeadingBlock] = []
    current: HeadingBlock | None = None
    content: list[md.Block] = []

    def close():
        if current is not None:
            current.content_text = normalise_content(md.render(content))
            sections.append(current)

    for block in parsed:
        if isinstance(block, md.Heading) and block.level <= level:
            close()
            content = []
            current = None
            if block.level == level:
                current = HeadingBlock(heading_text=block.text, level=level, line_number=block.line)
            continue
        if current is not None:
            content.append(block)
    close()
    return sections


def parse_document(source: str | bytes, level: int = 2) -> Document:
    """Parse a whole file into frontmatter, title, top-level body and sections."""
    meta, body, first_line = split_frontmatter(source)
    parsed = md.parse(body, first_line)

    doc = Document(metadata=meta)
    top = top_level_body(body)
    if top is not None:
        top.line_number += first_line - 1
        doc.title = top.heading_text
        doc.top_level_body = top
    doc.sections = _sections(parsed, level)
    return doc


def render_document(title: str, top_level: str = "", sections: list[HeadingBlock] | None = None) -> str:
    """Render the canonical form of a document body (no frontmatter).

    The title is followed by one blank line before the top-level body, sections
    are separated by one blank line, and the text ends with a single newline.
    """
    out = [f"# {title}\n"]
    top_level = top_level.strip("\n")
    if top_level:
        out.append(f"\n{top_level}\n")
    for section in sections or []:
        out.append("\n" + "#" * section.level + f" {section.heading_text}\n")
        content = section.content_text.strip("\n")
        if content:
            out.append(f"\n{content}\n")
    return "".join(out)


def render(document: Document) -> str:
    """Render a Document without its frontmatter."""
    top = document.top_level_body.content_text if document.top_level_body else ""
    return render_document(document.title, top, document.sections)
