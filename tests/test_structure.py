"""Tests for jot/structure.py — heading detection and byte offsets."""

from jot.structure import (
    count_lines,
    line_start_offset,
    parse_document,
    read_document,
)


SAMPLE = (
    b"# Title\n"
    b"\n"
    b"Intro\n"
    b"\n"
    b"## Section ##\n"
    b"text\n"
    b"```\n"
    b"# not a heading\n"
    b"```\n"
    b"### Deep\n"
)


class TestParseDocument:
    def test_headings_in_order(self):
        doc = parse_document(SAMPLE)
        assert [(h.level, h.text) for h in doc.headings] == [
            (1, "Title"),
            (2, "Section"),
            (3, "Deep"),
        ]

    def test_offsets_and_lines(self):
        doc = parse_document(SAMPLE)
        title, section, deep = doc.headings
        assert title.start_offset == 0
        assert title.end_offset == len(b"# Title\n")
        assert title.line_number == 1
        assert section.start_offset == SAMPLE.index(b"## Section")
        assert section.end_offset == SAMPLE.index(b"text\n")
        assert section.line_number == 5
        assert deep.start_offset == SAMPLE.index(b"### Deep")
        assert deep.end_offset == len(SAMPLE)
        assert deep.line_number == 10

    def test_fenced_code_is_not_a_heading(self):
        doc = parse_document(SAMPLE)
        assert "not a heading" not in [h.text for h in doc.headings]

    def test_subtree_ends(self):
        doc = parse_document(b"# A\n## B\nb\n## C\n# D\n")
        a, b, c, d = doc.headings
        assert doc.subtree_end(a) == d.start_offset
        assert doc.subtree_end(b) == c.start_offset
        assert doc.subtree_end(c) == d.start_offset
        assert doc.subtree_end(d) == len(doc.content)

    def test_setext_headings_ignored(self):
        doc = parse_document(b"Title\n=====\n\nSub\n---\n\n# Real\n")
        assert [h.text for h in doc.headings] == ["Real"]

    def test_hashtag_is_not_a_heading(self):
        doc = parse_document(b"# A\n#hashtag line\n")
        assert [h.text for h in doc.headings] == ["A"]

    def test_html_block_content_ignored(self):
        doc = parse_document(b"<div>\n# inside\n</div>\n\n# Outside\n")
        assert [h.text for h in doc.headings] == ["Outside"]

    def test_front_matter_skipped(self):
        content = b"---\ntitle: x\n# comment: y\n---\n# Real\n"
        doc = parse_document(content)
        assert [h.text for h in doc.headings] == ["Real"]
        assert doc.headings[0].line_number == 5
        assert doc.headings[0].start_offset == content.index(b"# Real")

    def test_thematic_break_is_not_front_matter(self):
        doc = parse_document(b"---\n# Intro\ntext\n---\n# Next\n")
        assert [h.text for h in doc.headings] == ["Intro", "Next"]
        assert doc.headings[0].line_number == 2

    def test_heading_between_rules_is_kept(self):
        doc = parse_document(b"---\n# Intro\n---\n# Next\n")
        assert [h.text for h in doc.headings] == ["Intro", "Next"]

    def test_empty_front_matter_skipped(self):
        doc = parse_document(b"---\n---\n# Real\n")
        assert [h.text for h in doc.headings] == ["Real"]

    def test_closing_sequence_and_inner_hash(self):
        doc = parse_document(b"## Closing ###\n# C#\n")
        assert [h.text for h in doc.headings] == ["Closing", "C#"]

    def test_empty_heading(self):
        doc = parse_document(b"# Main\n\n##\n\ntext\n")
        assert [(h.level, h.text) for h in doc.headings] == [(1, "Main"), (2, "")]

    def test_seven_hashes_not_a_heading(self):
        doc = parse_document(b"####### too deep\n")
        assert doc.headings == ()

    def test_crlf(self):
        doc = parse_document(b"# A\r\nbody\r\n## B\r\n")
        assert [h.text for h in doc.headings] == ["A", "B"]
        assert doc.headings[0].end_offset == 5
        assert doc.headings[1].start_offset == len(b"# A\r\nbody\r\n")

    def test_no_trailing_newline(self):
        doc = parse_document(b"# Only")
        assert doc.headings[0].end_offset == 6

    def test_empty_document(self):
        doc = parse_document(b"")
        assert doc.headings == ()
        assert doc.first_heading_offset() is None

    def test_reparse_is_idempotent(self):
        assert parse_document(SAMPLE) == parse_document(SAMPLE)

    def test_utf8_offsets_are_bytes(self):
        content = "# Café\n## Über\n".encode("utf-8")
        doc = parse_document(content)
        assert doc.headings[0].text == "Café"
        assert doc.headings[1].start_offset == len("# Café\n".encode("utf-8"))


def test_line_of():
    doc = parse_document(SAMPLE)
    assert doc.line_of(0) == 1
    assert doc.line_of(SAMPLE.index(b"### Deep")) == 10


def test_line_helpers():
    assert count_lines(b"a\nb\n") == 3
    assert line_start_offset(b"a\nbb\nccc", 3) == 5
    assert line_start_offset(b"a\nbb\nccc", 1) == 0


def test_read_document(tmp_path):
    path = tmp_path / "notes.md"
    path.write_bytes(SAMPLE)
    assert read_document(path) == parse_document(SAMPLE)
