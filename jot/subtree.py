"""Subtree extraction and offset lookup.

A subtree is a heading plus everything up to the next heading at the same or
a shallower level (or end of file).
"""

from dataclasses import dataclass

from jot.errors import OffsetOutOfRange
from jot.structure import Document, HeadingNode


@dataclass(frozen=True)
class Subtree:
    heading: HeadingNode
    level: int
    content: bytes
    start_offset: int
    end_offset: int


def extract_subtree(document: Document, node: HeadingNode) -> Subtree:
    """Copy a heading's subtree bytes verbatim."""
    end = document.subtree_end(node)
    return Subtree(
        heading=node,
        level=node.level,
        content=document.content[node.start_offset:end],
        start_offset=node.start_offset,
        end_offset=end,
    )


def heading_path(document: Document, node: HeadingNode) -> list[HeadingNode]:
    """Ancestor chain from the outermost heading down to `node` (inclusive)."""
    chain = [node]
    level = node.level
    for other in reversed(document.headings[:document.index(node)]):
        if other.level < level:
            chain.append(other)
            level = other.level
            if level == 1:
                break
    chain.reverse()
    return chain


def locate_subtree(document: Document, offset: int) -> Subtree:
    """Find the innermost subtree enclosing a byte offset.

    An offset equal to the file length belongs to the last subtree.

    Raises:
        OffsetOutOfRange: offset is negative, past the end of the file,
            or before the first heading.
    """
    length = len(document.content)
    if offset < 0 or offset > length:
        raise OffsetOutOfRange(offset, length)

    found = None
    for node, end in zip(document.headings, document.subtree_ends):
        if node.start_offset > offset:
            break
        if offset < end or end == length:
            found = node

    if found is None:
        raise OffsetOutOfRange(offset, length, "no heading precedes it")
    return extract_subtree(document, found)
