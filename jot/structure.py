"""Markdown structure reader.

Turns a document's raw bytes into an ordered list of ATX headings with exact
byte spans. Offsets always come from a per-line byte table built over the
original bytes, so they stay valid for splicing no matter how the text
decodes. markdown-it-py is only consulted to decide which heading-looking
lines really are headings (not inside fenced code, HTML blocks, or YAML
front matter).
"""

import re
from bisect import bisect_right
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml
from markdown_it import MarkdownIt


ATX_HEADING = re.compile(rb"^(#{1,6})[ \t]+(.*?)[ \t]*\r?$")
ATX_HEADING_EMPTY = re.compile(rb"^(#{1,6})[ \t]*\r?$")
CLOSING_SEQUENCE = re.compile(r"(?:^|[ \t]+)#+$")
FRONT_MATTER_FENCES = (b"---", b"...")

_md = MarkdownIt("commonmark")


@dataclass(frozen=True)
class HeadingNode:
    level: int
    text: str
    start_offset: int   # first byte of the heading line
    end_offset: int     # just past the heading line (and its newline)
    line_number: int    # 1-based


@dataclass(frozen=True)
class Document:
    """Parsed view over a document's bytes."""
    content: bytes
    headings: tuple = ()
    subtree_ends: tuple = ()  # aligned with headings
    line_starts: tuple = (0,)
    heading_starts: tuple = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(
            self, "heading_starts", tuple(h.start_offset for h in self.headings)
        )

    def index(self, node: HeadingNode) -> int:
        i = bisect_right(self.heading_starts, node.start_offset) - 1
        if i < 0 or self.headings[i] != node:
            raise ValueError(f"heading \"{node.text}\" is not part of this document")
        return i

    def subtree_end(self, node: HeadingNode) -> int:
        """Offset of the next heading at the same or a shallower level, or EOF."""
        return self.subtree_ends[self.index(node)]

    def line_of(self, offset: int) -> int:
        """1-based line number containing the byte offset."""
        return bisect_right(self.line_starts, offset)

    def first_heading_offset(self) -> Optional[int]:
        return self.headings[0].start_offset if self.headings else None


def count_lines(content: bytes) -> int:
    return content.count(b"\n") + 1


def line_start_offset(content: bytes, line: int) -> int:
    """Byte offset of the start of a 1-based line number."""
    if line < 1:
        raise ValueError(f"line numbers start at 1, got {line}")
    offset = 0
    for _ in range(line - 1):
        nl = content.find(b"\n", offset)
        if nl == -1:
            raise ValueError(f"line {line} is past the end of the document")
        offset = nl + 1
    return offset


def _front_matter_lines(lines: list[bytes]) -> int:
    """Number of leading lines taken by a YAML front-matter block.

    A `---` line followed later by `---` or `...` only counts when the lines
    between are empty or load as a YAML mapping. Otherwise the first `---` is
    a thematic break and the headings after it are real.
    """
    if not lines or lines[0].rstrip(b"\r") != b"---":
        return 0
    for i in range(1, len(lines)):
        if lines[i].rstrip(b"\r") in FRONT_MATTER_FENCES:
            break
    else:
        return 0

    raw = b"\n".join(lines[1:i]).decode("utf-8", errors="replace").replace("\r", "")
    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError:
        return 0
    if not isinstance(data, dict) and raw.strip():
        return 0
    return i + 1


def _commonmark_heading_lines(lines: list[bytes], skip: int) -> set[int]:
    """0-based line indexes where a CommonMark parser opens an ATX heading."""
    text_lines = [""] * skip + [
        line.decode("utf-8", errors="replace") for line in lines[skip:]
    ]
    # Lone carriage returns would add lines to the tokenizer's line map.
    text = "\n".join(text_lines).replace("\r", " ")
    found = set()
    for token in _md.parse(text):
        if token.type == "heading_open" and token.markup.startswith("#") and token.map:
            found.add(token.map[0])
    return found


def _heading_text(raw: bytes) -> str:
    text = raw.decode("utf-8", errors="replace").strip()
    return CLOSING_SEQUENCE.sub("", text).strip()


def parse_document(content: bytes) -> Document:
    """Parse raw Markdown bytes into a Document.

    Args:
        content: The file's bytes, unmodified.

    Returns:
        Document with headings in document order, their subtree end offsets,
        and the line-start table.
    """
    lines = content.split(b"\n")

    line_starts = []
    offset = 0
    for line in lines:
        line_starts.append(offset)
        offset += len(line) + 1

    skip = _front_matter_lines(lines)
    candidates = []
    for i in range(skip, len(lines)):
        line = lines[i]
        if not line.startswith(b"#"):
            continue
        m = ATX_HEADING.match(line) or ATX_HEADING_EMPTY.match(line)
        if m:
            candidates.append((i, m))

    headings = []
    if candidates:
        confirmed = _commonmark_heading_lines(lines, skip)
        for i, m in candidates:
            if i not in confirmed:
                continue
            start = line_starts[i]
            end = min(start + len(lines[i]) + 1, len(content))
            text = _heading_text(m.group(2)) if m.re is ATX_HEADING else ""
            headings.append(HeadingNode(
                level=len(m.group(1)),
                text=text,
                start_offset=start,
                end_offset=end,
                line_number=i + 1,
            ))

    # Each heading's subtree ends at the next heading of the same or
    # shallower level; walk once with a stack of open headings.
    ends = [len(content)] * len(headings)
    open_stack: list[int] = []
    for idx, node in enumerate(headings):
        while open_stack and headings[open_stack[-1]].level >= node.level:
            ends[open_stack.pop()] = node.start_offset
        open_stack.append(idx)

    return Document(
        content=content,
        headings=tuple(headings),
        subtree_ends=tuple(ends),
        line_starts=tuple(line_starts),
    )


def read_document(path: Path) -> Document:
    """Read and parse a Markdown file. FileNotFoundError passes through."""
    return parse_document(Path(path).read_bytes())
