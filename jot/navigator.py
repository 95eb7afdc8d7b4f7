"""Path navigation: resolve a selector's segments against a document.

Navigation has two outcomes. A PathResolution records how far the path got
(possibly not all the way, which destinations use to auto-create the rest).
An Ambiguity means some segment matched more than one heading at its level;
there is no first-match fallback.
"""

from dataclasses import dataclass, field
from typing import Optional, Union

from jot.errors import AmbiguousSelector, MalformedSelector, SubtreeNotFound
from jot.matcher import HeadingMatch, find_matches
from jot.selector import Selector
from jot.structure import Document, HeadingNode


@dataclass
class PathResolution:
    selector: Selector
    found_segments: list[str] = field(default_factory=list)
    missing_segments: list[str] = field(default_factory=list)
    matched_nodes: list[HeadingNode] = field(default_factory=list)
    anchor_offset: int = 0   # end of the last matched heading line
    target_level: int = 1    # level for the next heading below the match

    @property
    def path_exists(self) -> bool:
        return not self.missing_segments

    @property
    def node(self) -> Optional[HeadingNode]:
        return self.matched_nodes[-1] if self.matched_nodes else None


@dataclass
class Ambiguity:
    selector: Selector
    segment: str
    segment_index: int
    expected_level: Optional[int]
    candidates: list[HeadingMatch]


NavigationResult = Union[PathResolution, Ambiguity]


def expected_level(selector: Selector, index: int) -> Optional[int]:
    """Level segment `index` must match; None (any level) for one-segment selectors."""
    if len(selector.segments) == 1:
        return None
    return selector.skip_levels + index + 1


def navigate(document: Document, selector: Selector) -> NavigationResult:
    """Walk the selector's segments down the heading tree.

    Segment 0 is searched over the whole document; each later segment only
    among the descendants of the heading the previous segment matched.
    """
    found: list[str] = []
    nodes: list[HeadingNode] = []
    after, before = 0, None

    for i, segment in enumerate(selector.segments):
        level = expected_level(selector, i)
        matches = find_matches(document.headings, segment, level, after, before)
        if not matches:
            break
        if len(matches) > 1:
            return Ambiguity(
                selector=selector,
                segment=segment,
                segment_index=i,
                expected_level=level,
                candidates=matches,
            )
        node = matches[0].node
        found.append(segment)
        nodes.append(node)
        after, before = node.end_offset, document.subtree_end(node)

    last = nodes[-1] if nodes else None
    return PathResolution(
        selector=selector,
        found_segments=found,
        missing_segments=list(selector.segments[len(found):]),
        matched_nodes=nodes,
        anchor_offset=last.end_offset if last else 0,
        target_level=last.level + 1 if last else selector.skip_levels + 1,
    )


def resolve_path(document: Document, selector: Selector) -> PathResolution:
    """Navigate, raising AmbiguousSelector instead of returning an Ambiguity."""
    result = navigate(document, selector)
    if isinstance(result, Ambiguity):
        parent = None
        if result.segment_index > 0:
            parent = selector.segments[result.segment_index - 1]
        raise AmbiguousSelector(selector.file, result.segment, result.candidates, parent=parent)
    return result


def resolve_source(document: Document, selector: Selector) -> HeadingNode:
    """Resolve a selector that must name exactly one existing heading.

    Raises:
        MalformedSelector: the selector names a whole file.
        AmbiguousSelector: a segment matched several headings.
        SubtreeNotFound: the path stopped before its last segment.
    """
    if selector.is_whole_file:
        raise MalformedSelector(selector.render(), "a source selector must name a heading")
    resolution = resolve_path(document, selector)
    if not resolution.path_exists:
        raise SubtreeNotFound(
            selector.file, resolution.found_segments, resolution.missing_segments
        )
    return resolution.node
