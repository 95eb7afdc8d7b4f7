"""Tests for jot/matcher.py and jot/navigator.py"""

import pytest

from jot.errors import AmbiguousSelector, MalformedSelector, SubtreeNotFound
from jot.matcher import find_matches, heading_contains
from jot.navigator import Ambiguity, PathResolution, navigate, resolve_path, resolve_source
from jot.selector import parse_selector
from jot.structure import parse_document


WORK = (
    b"# Work\n"
    b"## Projects\n"
    b"### Alpha\n"
    b"### Beta\n"
    b"## Areas\n"
    b"### Alpha Ops\n"
    b"# Personal\n"
    b"## Projects\n"
)


@pytest.fixture
def doc():
    return parse_document(WORK)


class TestMatcher:
    def test_contains_case_insensitive(self, doc):
        node = doc.headings[1]
        assert heading_contains(node, "PROJ")
        assert heading_contains(node, "jects")
        assert not heading_contains(node, "areas")

    def test_any_level(self, doc):
        matches = find_matches(doc.headings, "alpha", None)
        assert [m.node.text for m in matches] == ["Alpha", "Alpha Ops"]
        assert [m.line_number for m in matches] == [3, 6]

    def test_level_filter(self, doc):
        matches = find_matches(doc.headings, "projects", 2)
        assert [m.line_number for m in matches] == [2, 8]
        assert find_matches(doc.headings, "projects", 1) == []

    def test_offset_window(self, doc):
        personal = doc.headings[6]
        matches = find_matches(doc.headings, "projects", 2, after_offset=personal.end_offset)
        assert [m.line_number for m in matches] == [8]
        work = doc.headings[0]
        matches = find_matches(doc.headings, "projects", 2, work.end_offset, doc.subtree_end(work))
        assert [m.line_number for m in matches] == [2]


class TestNavigate:
    def test_full_path(self, doc):
        result = navigate(doc, parse_selector("w.md#work/projects/alpha"))
        assert isinstance(result, PathResolution)
        assert result.path_exists
        assert result.node.text == "Alpha"
        assert result.node.line_number == 3
        assert result.target_level == 4
        assert result.anchor_offset == result.node.end_offset

    def test_single_segment_any_level(self, doc):
        result = navigate(doc, parse_selector("w.md#beta"))
        assert result.path_exists
        assert result.node.level == 3

    def test_single_segment_ambiguity(self, doc):
        result = navigate(doc, parse_selector("w.md#projects"))
        assert isinstance(result, Ambiguity)
        assert result.segment == "projects"
        assert [c.line_number for c in result.candidates] == [2, 8]

    def test_ambiguity_among_nested_levels(self, doc):
        result = navigate(doc, parse_selector("w.md#alpha"))
        assert isinstance(result, Ambiguity)
        assert len(result.candidates) == 2

    def test_nesting_disambiguates(self, doc):
        result = navigate(doc, parse_selector("w.md#personal/projects"))
        assert result.path_exists
        assert result.node.line_number == 8

    def test_skip_levels(self, doc):
        result = navigate(doc, parse_selector("w.md#/areas/ops"))
        assert result.path_exists
        assert result.node.text == "Alpha Ops"

    def test_only_descendants_match(self, doc):
        # "Beta" exists, but not under Areas
        result = navigate(doc, parse_selector("w.md#work/areas/beta"))
        assert isinstance(result, PathResolution)
        assert result.found_segments == ["work", "areas"]
        assert result.missing_segments == ["beta"]

    def test_partial_path(self, doc):
        selector = parse_selector("w.md#work/projects/gamma/tasks")
        result = navigate(doc, selector)
        assert not result.path_exists
        assert result.found_segments == ["work", "projects"]
        assert result.missing_segments == ["gamma", "tasks"]
        assert result.target_level == 3
        assert result.anchor_offset == doc.headings[1].end_offset
        assert len(result.found_segments) + len(result.missing_segments) == len(selector.segments)

    def test_nothing_matched(self, doc):
        result = navigate(doc, parse_selector("w.md#nothing"))
        assert result.found_segments == []
        assert result.missing_segments == ["nothing"]
        assert result.target_level == 1
        assert result.anchor_offset == 0
        assert result.node is None

    def test_nothing_matched_with_skip(self, doc):
        result = navigate(doc, parse_selector("w.md#//nothing/else"))
        assert result.target_level == 3

    def test_whole_file(self, doc):
        result = navigate(doc, parse_selector("w.md"))
        assert result.path_exists
        assert result.node is None


class TestResolve:
    def test_resolve_path_raises_on_ambiguity(self, doc):
        with pytest.raises(AmbiguousSelector) as exc:
            resolve_path(doc, parse_selector("w.md#projects"))
        message = str(exc.value)
        assert "\"Projects\" at line 2" in message
        assert "\"Projects\" at line 8" in message
        assert "Nest one more segment" in message

    def test_resolve_source(self, doc):
        node = resolve_source(doc, parse_selector("w.md#work/areas"))
        assert node.text == "Areas"

    def test_resolve_source_not_found(self, doc):
        with pytest.raises(SubtreeNotFound) as exc:
            resolve_source(doc, parse_selector("w.md#work/projects/gamma"))
        assert exc.value.found_segments == ["work", "projects"]
        assert exc.value.missing_segments == ["gamma"]
        assert "work/projects" in str(exc.value)

    def test_resolve_source_rejects_whole_file(self, doc):
        with pytest.raises(MalformedSelector):
            resolve_source(doc, parse_selector("w.md"))
