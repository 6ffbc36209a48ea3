"""Block-level markdown parser and canonical renderer.

Only the subset memov reads and writes is understood: ATX headings,
paragraphs, fenced and indented code, blockquotes, bullet and ordered lists
(with task checkboxes), thematic breaks, pipe tables and raw HTML blocks.
Inline markup (emphasis, code spans, links, autolinks) is kept verbatim inside
the text of the block that holds it.

``render(parse(text))`` is the canonical form of ``text``; rendering a parsed
canonical form again yields the same bytes.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

HEADING_PATTERN = re.compile(r"^ {0,3}(#{1,6})(?:[ \t]+(.*?))?(?:[ \t]+#+)?[ \t]*$")
FENCE_OPEN_PATTERN = re.compile(r"^( {0,3})(`{3,}|~{3,})[ \t]*([^`]*?)[ \t]*$")
FENCE_CLOSE_PATTERN = re.compile(r"^ {0,3}(`{3,}|~{3,})[ \t]*$")
THEMATIC_BREAK_PATTERN = re.compile(r"^ {0,3}([-*_])(?:[ \t]*\1){2,}[ \t]*$")
LIST_ITEM_PATTERN = re.compile(r"^( {0,3})([-*+]|\d{1,9}[.)])(?:([ \t]+)(.*))?$")
TASK_PATTERN = re.compile(r"^\[([ xX])\](?:[ \t]+|$)")
BLOCKQUOTE_PATTERN = re.compile(r"^ {0,3}> ?(.*)$")
TABLE_DELIMITER_PATTERN = re.compile(r"^ {0,3}\|?[ \t]*:?-+:?[ \t]*(?:\|[ \t]*:?-+:?[ \t]*)*\|?[ \t]*$")
TABLE_CELL_SPLIT = re.compile(r"(?<!\\)\|")
HTML_OPEN_PATTERN = re.compile(r"^ {0,3}<(!--|\?|![A-Za-z]|/?([A-Za-z][A-Za-z0-9-]*)(?=[\s/>]|$))")
HTML_COMPLETE_TAG_PATTERN = re.compile(r"^ {0,3}</?[A-Za-z][A-Za-z0-9-]*(?:\s[^>]*)?/?>[ \t]*$")

# Tags that may interrupt a paragraph (CommonMark HTML block type 6).
HTML_BLOCK_TAGS = frozenset(
    """address article aside base basefont blockquote body caption center col colgroup dd details
    dialog dir div dl dt fieldset figcaption figure footer form frame frameset h1 h2 h3 h4 h5 h6
    head header hr html iframe legend li link main menu menuitem nav noframes ol optgroup option
    p param pre script section source style summary table tbody td textarea tfoot th thead title
    tr track ul""".split()
)
HTML_RAW_TAGS = frozenset({"pre", "script", "style", "textarea"})

ALIGN_MARKERS = {None: "---", "left": ":---", "center": ":---:", "right": "---:"}


@dataclass
class Block:
    """A top-level block. ``blank_before`` records a blank line separating it from the previous one."""

    blank_before: bool = field(default=False, kw_only=True)
    line: int = field(default=0, kw_only=True, compare=False)


@dataclass
class Heading(Block):
    level: int
    text: str


@dataclass
class Paragraph(Block):
    lines: list[str]


@dataclass
class FencedCode(Block):
    fence: str
    info: str
    lines: list[str]


@dataclass
class IndentedCode(Block):
    lines: list[str]


@dataclass
class Blockquote(Block):
    lines: list[str]


@dataclass
class ThematicBreak(Block):
    pass


@dataclass
class Table(Block):
    header: list[str]
    alignments: list[str | None]
    rows: list[list[str]]


@dataclass
class HtmlBlock(Block):
    lines: list[str]


@dataclass
class ListItem:
    children: list[Block]
    checked: bool | None = None
    blank_before: bool = False


@dataclass
class ListBlock(Block):
    marker: str  # "-", "*", "+" for bullets; "." or ")" for ordered lists
    ordered: bool
    start: int
    items: list[ListItem]


# -----------------------------------------------------------------------------
# Line helpers
# -----------------------------------------------------------------------------


def _is_blank(line: str) -> bool:
    return not line.strip()


def _indent_width(line: str) -> int:
    width = 0
    for ch in line:
        if ch == " ":
            width += 1
        elif ch == "\t":
            width += 4 - (width % 4)
        else:
            break
    return width


def _dedent(line: str, width: int) -> str:
    """Remove up to ``width`` columns of leading whitespace."""
    removed = 0
    idx = 0
    while idx < len(line) and removed < width:
        ch = line[idx]
        if ch == " ":
            removed += 1
        elif ch == "\t":
            removed += 4 - (removed % 4)
        else:
            break
        idx += 1
    return line[idx:]


def _list_kind(marker: str) -> str:
    return marker if marker in "-*+" else marker[-1]


def _split_table_row(line: str) -> list[str]:
    text = line.strip()
    if text.startswith("|"):
        text = text[1:]
    if text.endswith("|") and not text.endswith("\\|"):
        text = text[:-1]
    return [cell.strip() for cell in TABLE_CELL_SPLIT.split(text)]


def _alignment(cell: str) -> str | None:
    cell = cell.strip()
    if cell.startswith(":") and cell.endswith(":"):
        return "center"
    if cell.startswith(":"):
        return "left"
    if cell.endswith(":"):
        return "right"
    return None


def _is_table_start(line: str, next_line: str | None) -> bool:
    if next_line is None or not TABLE_CELL_SPLIT.search(line):
        return False
    if "|" not in next_line or not TABLE_DELIMITER_PATTERN.match(next_line):
        return False
    return len(_split_table_row(line)) == len(_split_table_row(next_line))


def _html_kind(line: str, interrupting: bool) -> str | None:
    """Classify the start of an HTML block, or return None."""
    m = HTML_OPEN_PATTERN.match(line)
    if not m:
        return None
    opener = m.group(1)
    if opener == "!--":
        return "comment"
    if opener == "?":
        return "instruction"
    if opener.startswith("!"):
        return "declaration"
    tag = (m.group(2) or "").lower()
    if tag in HTML_RAW_TAGS and not opener.startswith("/"):
        return "raw"
    if tag in HTML_BLOCK_TAGS:
        return "block"
    if not interrupting and HTML_COMPLETE_TAG_PATTERN.match(line):
        return "block"
    return None


def _starts_block(line: str, next_line: str | None = None) -> bool:
    """True when ``line`` begins a block that interrupts a paragraph."""
    if HEADING_PATTERN.match(line) or FENCE_OPEN_PATTERN.match(line):
        return True
    if THEMATIC_BREAK_PATTERN.match(line) or BLOCKQUOTE_PATTERN.match(line):
        return True
    if _html_kind(line, interrupting=True):
        return True
    m = LIST_ITEM_PATTERN.match(line)
    if m and m.group(4):
        marker = m.group(2)
        if marker in "-*+" or int(marker[:-1]) == 1:
            return True
    return _is_table_start(line, next_line)


def _open_fence(lines: list[str]) -> str | None:
    """Return the fence still open at the end of ``lines``, if any."""
    fence = None
    for line in lines:
        if fence is None:
            m = FENCE_OPEN_PATTERN.match(line)
            if m:
                fence = m.group(2)
        else:
            m = FENCE_CLOSE_PATTERN.match(line)
            if m and m.group(1)[0] == fence[0] and len(m.group(1)) >= len(fence):
                fence = None
    return fence


# -----------------------------------------------------------------------------
# Parser
# -----------------------------------------------------------------------------


class _BlockParser:
    def __init__(self, lines: list[str], first_line: int = 1):
        self.lines = lines
        self.first_line = first_line
        self.pos = 0

    def _peek(self, offset: int = 1) -> str | None:
        idx = self.pos + offset
        return self.lines[idx] if idx < len(self.lines) else None

    def parse(self) -> list[Block]:
        blocks: list[Block] = []
        blank = False
        while self.pos < len(self.lines):
            line = self.lines[self.pos]
            if _is_blank(line):
                blank = True
                self.pos += 1
                continue

            start = self.pos
            block = self._parse_block(line)
            block.line = self.first_line + start
            block.blank_before = bool(blocks) and (
                blank or isinstance(block, Heading) or isinstance(blocks[-1], Heading)
            )
            blocks.append(block)
            blank = False
        return blocks

    def _parse_block(self, line: str) -> Block:
        m = FENCE_OPEN_PATTERN.match(line)
        if m:
            return self._parse_fenced_code(m)

        m = HEADING_PATTERN.match(line)
        if m:
            self.pos += 1
            return Heading(level=len(m.group(1)), text=(m.group(2) or "").strip())

        if THEMATIC_BREAK_PATTERN.match(line):
            self.pos += 1
            return ThematicBreak()

        if BLOCKQUOTE_PATTERN.match(line):
            return self._parse_blockquote()

        if _is_table_start(line, self._peek()):
            return self._parse_table()

        kind = _html_kind(line, interrupting=False)
        if kind:
            return self._parse_html(kind)

        if LIST_ITEM_PATTERN.match(line):
            return self._parse_list()

        if _indent_width(line) >= 4:
            return self._parse_indented_code()

        return self._parse_paragraph()

    def _parse_fenced_code(self, m: re.Match) -> FencedCode:
        indent = len(m.group(1))
        fence = m.group(2)
        info = m.group(3)
        self.pos += 1
        body: list[str] = []
        while self.pos < len(self.lines):
            line = self.lines[self.pos]
            self.pos += 1
            close = FENCE_CLOSE_PATTERN.match(line)
            if close and close.group(1)[0] == fence[0] and len(close.group(1)) >= len(fence):
                break
            body.append(_dedent(line, indent))
        return FencedCode(fence=fence, info=info, lines=body)

    def _parse_blockquote(self) -> Blockquote:
        body: list[str] = []
        while self.pos < len(self.lines):
            m = BLOCKQUOTE_PATTERN.match(self.lines[self.pos])
            if not m:
                break
            body.append(m.group(1).rstrip())
            self.pos += 1
        return Blockquote(lines=body)

    def _parse_table(self) -> Table:
        header = _split_table_row(self.lines[self.pos])
        alignments = [_alignment(cell) for cell in _split_table_row(self.lines[self.pos + 1])]
        self.pos += 2
        rows: list[list[str]] = []
        while self.pos < len(self.lines):
            line = self.lines[self.pos]
            if _is_blank(line) or _starts_block(line, self._peek()):
                break
            cells = _split_table_row(line)
            cells = (cells + [""] * len(header))[: len(header)]
            rows.append(cells)
            self.pos += 1
        return Table(header=header, alignments=alignments, rows=rows)

    def _parse_html(self, kind: str) -> HtmlBlock:
        terminators = {"comment": "-->", "instruction": "?>", "declaration": ">"}
        body: list[str] = []
        while self.pos < len(self.lines):
            line = self.lines[self.pos]
            if kind in terminators or kind == "raw":
                body.append(line)
                self.pos += 1
                if kind == "raw" and re.search(r"</(pre|script|style|textarea)>", line, re.IGNORECASE):
                    break
                if kind in terminators and terminators[kind] in line:
                    break
                continue
            if _is_blank(line):
                break
            body.append(line)
            self.pos += 1
        return HtmlBlock(lines=body)

    def _parse_indented_code(self) -> IndentedCode:
        body: list[str] = []
        while self.pos < len(self.lines):
            line = self.lines[self.pos]
            if _is_blank(line):
                body.append("")
            elif _indent_width(line) >= 4:
                body.append(_dedent(line, 4))
            else:
                break
            self.pos += 1
        while body and body[-1] == "":
            body.pop()
            self.pos -= 1
        return IndentedCode(lines=body)

    def _parse_paragraph(self) -> Paragraph:
        body = [self.lines[self.pos].lstrip()]
        self.pos += 1
        while self.pos < len(self.lines):
            line = self.lines[self.pos]
            if _is_blank(line) or _starts_block(line, self._peek()):
                break
            body.append(line.lstrip())
            self.pos += 1
        return Paragraph(lines=body)

    def _parse_list(self) -> ListBlock:
        first = LIST_ITEM_PATTERN.match(self.lines[self.pos])
        marker = first.group(2)
        kind = _list_kind(marker)
        ordered = kind not in "-*+"
        start = int(marker[:-1]) if ordered else 1

        items: list[ListItem] = []
        blank_before = False
        while self.pos < len(self.lines):
            line = self.lines[self.pos]
            m = LIST_ITEM_PATTERN.match(line)
            if not m or _list_kind(m.group(2)) != kind or THEMATIC_BREAK_PATTERN.match(line):
                break
            items.append(self._parse_list_item(m, blank_before))

            ahead = self.pos
            while ahead < len(self.lines) and _is_blank(self.lines[ahead]):
                ahead += 1
            if ahead == self.pos:
                blank_before = False
                continue
            nxt = LIST_ITEM_PATTERN.match(self.lines[ahead]) if ahead < len(self.lines) else None
            if nxt and _list_kind(nxt.group(2)) == kind and not THEMATIC_BREAK_PATTERN.match(self.lines[ahead]):
                self.pos = ahead
                blank_before = True
                continue
            break

        return ListBlock(marker=kind, ordered=ordered, start=start, items=items)

    def _parse_list_item(self, m: re.Match, blank_before: bool) -> ListItem:
        indent, marker = len(m.group(1)), m.group(2)
        spaces, rest = m.group(3) or "", m.group(4) or ""
        if not rest:
            offset, first = indent + len(marker) + 1, ""
        elif len(spaces) > 4:
            offset, first = indent + len(marker) + 1, " " * (len(spaces) - 1) + rest
        else:
            offset, first = indent + len(marker) + len(spaces), rest

        item_start = self.pos
        body = [first]
        self.pos += 1
        while self.pos < len(self.lines):
            line = self.lines[self.pos]
            if _is_blank(line):
                ahead = self.pos
                while ahead < len(self.lines) and _is_blank(self.lines[ahead]):
                    ahead += 1
                if ahead < len(self.lines) and _indent_width(self.lines[ahead]) >= offset:
                    body.extend("" for _ in range(ahead - self.pos))
                    self.pos = ahead
                    continue
                break
            if _indent_width(line) >= offset:
                body.append(_dedent(line, offset))
                self.pos += 1
                continue
            lazy = (
                body[-1].strip()
                and _open_fence(body) is None
                and not _starts_block(line, self._peek())
                and not LIST_ITEM_PATTERN.match(line)
            )
            if lazy:
                body.append(line.lstrip())
                self.pos += 1
                continue
            break

        while body and body[-1] == "":
            body.pop()
        children = _BlockParser(body, self.first_line + item_start).parse()

        checked = None
        if children and isinstance(children[0], Paragraph):
            para = children[0]
            task = TASK_PATTERN.match(para.lines[0])
            if task:
                checked = task.group(1) != " "
                para.lines[0] = para.lines[0][task.end():]
                if para.lines == [""]:
                    children.pop(0)
                    if children:
                        children[0].blank_before = False
        return ListItem(children=children, checked=checked, blank_before=blank_before)


def parse(text: str, first_line: int = 1) -> list[Block]:
    """Parse markdown text into a flat list of top-level blocks."""
    return _BlockParser(text.split("\n"), first_line).parse()


# -----------------------------------------------------------------------------
# Renderer
# -----------------------------------------------------------------------------


def render(blocks: list[Block]) -> str:
    """Render blocks in canonical form, without a trailing newline."""
    out: list[str] = []
    for idx, block in enumerate(blocks):
        text = _render_block(block)
        if idx == 0:
            out.append(text)
            continue
        blank = block.blank_before or isinstance(block, Heading) or isinstance(blocks[idx - 1], Heading)
        out.append(("\n\n" if blank else "\n") + text)
    return "".join(out)


def _render_block(block: Block) -> str:
    if isinstance(block, Heading):
        return "#" * block.level + (" " + block.text if block.text else "")
    if isinstance(block, Paragraph):
        return "\n".join(block.lines)
    if isinstance(block, FencedCode):
        body = "".join(line + "\n" for line in block.lines)
        return f"{block.fence}{block.info}\n{body}{block.fence}"
    if isinstance(block, IndentedCode):
        return "\n".join("    " + line if line else "" for line in block.lines)
    if isinstance(block, Blockquote):
        return "\n".join("> " + line if line else ">" for line in block.lines)
    if isinstance(block, ThematicBreak):
        return "---"
    if isinstance(block, Table):
        return _render_table(block)
    if isinstance(block, HtmlBlock):
        return "\n".join(block.lines)
    if isinstance(block, ListBlock):
        return _render_list(block)
    raise TypeError(f"unsupported block: {type(block).__name__}")


def _render_table(table: Table) -> str:
    rows = [
        "| " + " | ".join(table.header) + " |",
        "| " + " | ".join(ALIGN_MARKERS[a] for a in table.alignments) + " |",
    ]
    rows.extend("| " + " | ".join(row) + " |" for row in table.rows)
    return "\n".join(rows)


def _render_list(block: ListBlock) -> str:
    out: list[str] = []
    for idx, item in enumerate(block.items):
        if block.ordered:
            prefix = f"{block.start + idx}{block.marker} "
        else:
            prefix = f"{block.marker} "
        text = _render_list_item(item, prefix)
        if idx == 0:
            out.append(text)
        else:
            out.append(("\n\n" if item.blank_before else "\n") + text)
    return "".join(out)


def _render_list_item(item: ListItem, prefix: str) -> str:
    body = render(item.children)
    if item.checked is not None:
        box = "[x]" if item.checked else "[ ]"
        body = f"{box} {body}" if body else box
    lines = body.split("\n")
    first = prefix + lines[0] if lines[0] else prefix.rstrip()
    pad = " " * len(prefix)
    rest = [pad + line if line else "" for line in lines[1:]]
    return "\n".join([first, *rest])
