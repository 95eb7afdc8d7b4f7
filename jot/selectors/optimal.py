"""Shortest full-text selectors for every heading in a document.

For each heading, candidates are tried from shortest to longest:
1. the heading text alone (single-segment selectors match at any level)
2. ever longer suffixes of its ancestor chain, as long as the levels in the
   suffix are consecutive, with skip levels covering the levels above it.
Each candidate is checked by actually navigating it; the first one that lands
on the heading wins.
"""

from dataclasses import dataclass, field
from typing import Optional

from jot.navigator import PathResolution, navigate
from jot.selector import Selector
from jot.structure import Document, HeadingNode
from jot.subtree import heading_path


@dataclass
class SelectorEntry:
    heading: str
    level: int
    line_number: int
    selector: str
    segments: list[str] = field(default_factory=list)
    skip_levels: int = 0
    optimal: bool = True
    unselectable: bool = False


def valid_segment(segment: str) -> bool:
    return bool(segment) and "/" not in segment and segment == segment.strip()


def resolves_to(document: Document, selector: Selector, node: HeadingNode) -> bool:
    result = navigate(document, selector)
    return (
        isinstance(result, PathResolution)
        and result.path_exists
        and result.node == node
    )


def candidate_paths(document: Document, node: HeadingNode):
    """Yield (heading chain, skip_levels) candidates, shortest first."""
    yield [node], 0
    chain = heading_path(document, node)
    for k in range(2, len(chain) + 1):
        tail = chain[-k:]
        if tail[1].level != tail[0].level + 1:
            break
        yield tail, tail[0].level - 1


def full_path_selector(document: Document, node: HeadingNode, file: str) -> Selector:
    chain = heading_path(document, node)
    return Selector(
        file=file,
        segments=[n.text.lower() for n in chain],
        skip_levels=chain[0].level - 1,
    )


def find_optimal(document: Document, node: HeadingNode, file: str) -> Optional[Selector]:
    """Shortest full-text selector that resolves to `node`, or None."""
    for path, skip in candidate_paths(document, node):
        segments = [n.text.lower() for n in path]
        if not all(valid_segment(s) for s in segments):
            continue
        selector = Selector(file=file, segments=segments, skip_levels=skip)
        if resolves_to(document, selector, node):
            return selector
    return None


def make_entry(node: HeadingNode, selector: Selector, optimal: bool = True,
               unselectable: bool = False) -> SelectorEntry:
    return SelectorEntry(
        heading=node.text,
        level=node.level,
        line_number=node.line_number,
        selector=selector.render(),
        segments=list(selector.segments),
        skip_levels=selector.skip_levels,
        optimal=optimal,
        unselectable=unselectable,
    )


def generate(document: Document, file: str) -> list[SelectorEntry]:
    """One entry per heading, in document order.

    Args:
        document: Parsed document.
        file: File part to put in each selector.

    Returns:
        list of SelectorEntry; headings no selector can reach are flagged
        unselectable and carry their full heading path.
    """
    entries = []
    for node in document.headings:
        selector = find_optimal(document, node, file)
        if selector is None:
            entries.append(make_entry(
                node, full_path_selector(document, node, file),
                optimal=False, unselectable=True,
            ))
        else:
            entries.append(make_entry(node, selector))
    return entries
