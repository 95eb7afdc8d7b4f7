"""Heading matching: case-insensitive substring search over heading nodes."""

from dataclasses import dataclass
from typing import Optional

from jot.structure import HeadingNode


@dataclass(frozen=True)
class HeadingMatch:
    node: HeadingNode
    line_number: int


def heading_contains(node: HeadingNode, segment: str) -> bool:
    return segment.casefold() in node.text.casefold()


def find_matches(
    nodes,
    segment: str,
    expected_level: Optional[int],
    after_offset: int = 0,
    before_offset: Optional[int] = None,
) -> list[HeadingMatch]:
    """Find headings whose text contains `segment`.

    Args:
        nodes: Heading nodes in document order.
        segment: Substring to look for (case-insensitive).
        expected_level: Required heading level, or None for any level.
        after_offset: Only headings starting at or after this byte offset.
        before_offset: Only headings starting before this byte offset.

    Returns:
        Matches in document order.
    """
    matches = []
    for node in nodes:
        if node.start_offset < after_offset:
            continue
        if before_offset is not None and node.start_offset >= before_offset:
            break
        if expected_level is not None and node.level != expected_level:
            continue
        if heading_contains(node, segment):
            matches.append(HeadingMatch(node=node, line_number=node.line_number))
    return matches
