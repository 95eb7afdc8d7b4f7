"""Tests for jot/subtree.py — extraction and offset lookup."""

import pytest

from jot.errors import OffsetOutOfRange
from jot.structure import parse_document
from jot.subtree import extract_subtree, heading_path, locate_subtree


CONTENT = (
    b"Preamble text\n"
    b"\n"
    b"# Work\n"
    b"\n"
    b"## Projects\n"
    b"\n"
    b"Notes.\n"
    b"\n"
    b"### Alpha\n"
    b"\n"
    b"alpha body\n"
    b"\n"
    b"## Areas\n"
    b"\n"
    b"areas body\n"
)


@pytest.fixture
def doc():
    return parse_document(CONTENT)


def _node(doc, text):
    return next(h for h in doc.headings if h.text == text)


class TestExtract:
    def test_subtree_bytes(self, doc):
        sub = extract_subtree(doc, _node(doc, "Projects"))
        assert sub.content.startswith(b"## Projects\n")
        assert sub.content.endswith(b"alpha body\n\n")
        assert sub.level == 2
        assert sub.heading.text == "Projects"

    def test_lossless(self, doc):
        for node in doc.headings:
            sub = extract_subtree(doc, node)
            assert CONTENT[:sub.start_offset] + sub.content + CONTENT[sub.end_offset:] == CONTENT

    def test_last_subtree_runs_to_eof(self, doc):
        sub = extract_subtree(doc, _node(doc, "Areas"))
        assert sub.end_offset == len(CONTENT)


class TestLocate:
    def test_deepest_enclosing(self, doc):
        sub = locate_subtree(doc, CONTENT.index(b"alpha body"))
        assert sub.heading.text == "Alpha"

    def test_body_of_parent(self, doc):
        sub = locate_subtree(doc, CONTENT.index(b"Notes."))
        assert sub.heading.text == "Projects"

    def test_heading_start(self, doc):
        sub = locate_subtree(doc, CONTENT.index(b"# Work"))
        assert sub.heading.text == "Work"

    def test_end_of_file_belongs_to_last_subtree(self, doc):
        sub = locate_subtree(doc, len(CONTENT))
        assert sub.heading.text == "Areas"

    @pytest.mark.parametrize("offset", [-1, 0, 5, len(CONTENT) + 1])
    def test_out_of_range(self, doc, offset):
        with pytest.raises(OffsetOutOfRange):
            locate_subtree(doc, offset)


def test_heading_path(doc):
    chain = heading_path(doc, _node(doc, "Alpha"))
    assert [n.text for n in chain] == ["Work", "Projects", "Alpha"]


def test_heading_path_with_level_gap():
    doc = parse_document(b"# A\n### C\n## B\n")
    assert [n.text for n in heading_path(doc, doc.headings[1])] == ["A", "C"]
    assert [n.text for n in heading_path(doc, doc.headings[2])] == ["A", "B"]
