"""Insertion planning and byte splicing.

Given a destination document and selector, decide where new content goes,
what level its top heading gets, and which headings must be created first.
"""

from dataclasses import dataclass, field
from typing import Optional

from jot.navigator import PathResolution, resolve_path
from jot.selector import Selector
from jot.structure import Document, HeadingNode


@dataclass
class DestinationTarget:
    file: str
    insert_offset: int
    target_level: Optional[int]          # level of the inserted top heading; None keeps levels
    create_segments: list[str] = field(default_factory=list)
    create_level: Optional[int] = None   # level of the first created heading
    prepend: bool = False
    parent_offset: Optional[int] = None  # start of the heading the content lands under


def children_start(document: Document, node: HeadingNode) -> int:
    """Offset of a heading's first child heading, or its subtree end."""
    end = document.subtree_end(node)
    i = document.index(node) + 1
    if i < len(document.headings) and document.headings[i].start_offset < end:
        return document.headings[i].start_offset
    return end


def _insert_offset(document: Document, node: Optional[HeadingNode], prepend: bool) -> int:
    if node is not None:
        return children_start(document, node) if prepend else document.subtree_end(node)
    if prepend:
        first = document.first_heading_offset()
        if first is not None:
            return first
    return len(document.content)


def plan_insertion(
    document: Document,
    selector: Selector,
    prepend: bool = False,
    resolution: Optional[PathResolution] = None,
) -> DestinationTarget:
    """Plan where content refiled to `selector` goes.

    Args:
        document: The destination document, unmodified.
        selector: Destination selector.
        prepend: Insert before existing children instead of after them.
        resolution: Pre-computed navigation result for `selector`.

    Returns:
        DestinationTarget. For a whole-file selector target_level is None.
    """
    if selector.is_whole_file:
        return DestinationTarget(
            file=selector.file,
            insert_offset=_insert_offset(document, None, prepend),
            target_level=None,
            prepend=prepend,
        )

    resolution = resolution or resolve_path(document, selector)
    node = resolution.node
    offset = _insert_offset(document, node, prepend)
    parent = node.start_offset if node else None

    if resolution.path_exists:
        return DestinationTarget(
            file=selector.file,
            insert_offset=offset,
            target_level=node.level + 1,
            prepend=prepend,
            parent_offset=parent,
        )

    missing = resolution.missing_segments
    return DestinationTarget(
        file=selector.file,
        insert_offset=offset,
        target_level=resolution.target_level + len(missing),
        create_segments=list(missing),
        create_level=resolution.target_level,
        prepend=prepend,
        parent_offset=parent,
    )


def line_ending(content: bytes) -> bytes:
    """The newline a document uses, taken from its first line break."""
    nl = content.find(b"\n")
    if nl > 0 and content[nl - 1:nl] == b"\r":
        return b"\r\n"
    return b"\n"


def splice(content: bytes, offset: int, block: bytes, newline: Optional[bytes] = None) -> bytes:
    """Insert `block` at `offset`, keeping one blank line at each seam.

    Seams use `newline`, by default the line ending of `content` (or of
    `block` when `content` is empty).
    """
    newline = newline or line_ending(content or block)
    before, after = content[:offset], content[offset:]
    block = block.rstrip(b"\r\n") + newline
    if before:
        if not before.endswith(b"\n"):
            before += newline
        if not before.endswith((b"\n\n", b"\n\r\n")):
            before += newline
    if after and not after.startswith((b"\n", b"\r\n")):
        block += newline
    return before + block + after


def remove_range(content: bytes, start: int, end: int) -> bytes:
    return content[:start] + content[end:]


def shift_for_removal(offset: int, start: int, length: int) -> int:
    """Move an offset past a removed range back by the removed length."""
    if offset > start:
        return offset - length
    return offset
