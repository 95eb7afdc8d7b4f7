"""Heading level rewriting and missing-hierarchy generation."""

from typing import Optional

from jot.errors import LevelOverflow
from jot.structure import parse_document
from jot.subtree import Subtree


MIN_LEVEL = 1
MAX_LEVEL = 6


def transform_levels(subtree: Subtree, target_level: Optional[int]) -> bytes:
    """Shift every heading in a subtree so its top heading lands on target_level.

    Only the `#` runs of heading lines change; all other bytes are copied.
    Heading lines are found by re-reading the subtree's own bytes, so `#`
    lines inside fenced code are left alone.

    Args:
        subtree: The extracted subtree.
        target_level: New level for the top heading; None keeps levels.

    Returns:
        The rewritten bytes.

    Raises:
        LevelOverflow: some heading would land outside levels 1-6.
    """
    if target_level is None or target_level == subtree.level:
        return subtree.content

    delta = target_level - subtree.level
    nodes = parse_document(subtree.content).headings
    for node in nodes:
        new_level = node.level + delta
        if not MIN_LEVEL <= new_level <= MAX_LEVEL:
            raise LevelOverflow(node.text, new_level)

    parts = []
    pos = 0
    for node in nodes:
        parts.append(subtree.content[pos:node.start_offset])
        parts.append(b"#" * (node.level + delta))
        pos = node.start_offset + node.level
    parts.append(subtree.content[pos:])
    return b"".join(parts)


def build_hierarchy(segments: list[str], start_level: int, newline: bytes = b"\n") -> bytes:
    """Heading lines for segments that do not exist yet, one level apart.

    Each heading is followed by a blank line, using `newline` as the line
    ending.
    """
    lines = []
    for i, segment in enumerate(segments):
        level = start_level + i
        if not MIN_LEVEL <= level <= MAX_LEVEL:
            raise LevelOverflow(segment, level)
        lines.append(f"{'#' * level} {segment}".encode("utf-8") + newline * 2)
    return b"".join(lines)
