"""Top-level notes of a file and the ways to pick several at once.

A note is one top-level entry of a capture file such as inbox.md:

    # Inbox
    ## 2025-06-06 10:30 Call dentist     <- note 1
    ## 2025-06-06 11:00 Buy milk         <- note 2

Selections return notes in the order they were asked for, without repeats.
"""

import re

from jot.errors import NoteSelectionError
from jot.structure import Document, HeadingNode


def list_notes(document: Document) -> list[HeadingNode]:
    """Headings at the file's note level.

    The note level is the shallowest heading level, unless a single heading
    sits at that level (a file title like "# Inbox"), in which case it is the
    next level present.
    """
    levels = sorted({h.level for h in document.headings})
    if not levels:
        return []
    level = levels[0]
    if len(levels) > 1 and sum(1 for h in document.headings if h.level == level) == 1:
        level = levels[1]
    return [h for h in document.headings if h.level == level]


def note_body(document: Document, note: HeadingNode) -> str:
    """Text under a note's heading line, nested headings included."""
    end = document.subtree_end(note)
    return document.content[note.end_offset:end].decode("utf-8", errors="replace")


def _unique(notes: list[HeadingNode]) -> list[HeadingNode]:
    seen = set()
    result = []
    for note in notes:
        if note.start_offset not in seen:
            seen.add(note.start_offset)
            result.append(note)
    return result


def parse_index_spec(spec: str) -> list[int]:
    """Parse "1,3,5" or "1-3,5" into 1-based indices."""
    if not spec.strip():
        raise NoteSelectionError(spec, "empty index list")

    indices = []
    for part in spec.split(","):
        part = part.strip()
        if "-" in part:
            bounds = part.split("-")
            if len(bounds) != 2:
                raise NoteSelectionError(spec, f"invalid range format: {part}")
            start, end = (b.strip() for b in bounds)
            if not start.isdigit():
                raise NoteSelectionError(spec, f"invalid start index: {start}")
            if not end.isdigit():
                raise NoteSelectionError(spec, f"invalid end index: {end}")
            if int(start) > int(end):
                raise NoteSelectionError(
                    spec, f"start index {start} is greater than end index {end}"
                )
            indices.extend(range(int(start), int(end) + 1))
        elif part.isdigit():
            indices.append(int(part))
        else:
            raise NoteSelectionError(spec, f"invalid index: {part}")
    return indices


def select_by_index(notes: list[HeadingNode], spec: str) -> list[HeadingNode]:
    selected = []
    for index in parse_index_spec(spec):
        if not 1 <= index <= len(notes):
            raise NoteSelectionError(
                spec, f"index {index} is out of range (1-{len(notes)})"
            )
        selected.append(notes[index - 1])
    return _unique(selected)


def select_by_pattern(
    document: Document, notes: list[HeadingNode], pattern: str
) -> list[HeadingNode]:
    """Notes whose title or body matches the regular expression `pattern`."""
    try:
        regex = re.compile(pattern)
    except re.error as e:
        raise NoteSelectionError(pattern, f"invalid regular expression: {e}") from e

    selected = [
        note for note in notes
        if regex.search(note.text) or regex.search(note_body(document, note))
    ]
    if not selected:
        raise NoteSelectionError(pattern, "no notes found matching pattern")
    return selected


def select_exact(notes: list[HeadingNode], text: str) -> list[HeadingNode]:
    """Notes whose title contains `text` verbatim, e.g. a capture timestamp."""
    if not text:
        raise NoteSelectionError(text, "empty title text")
    selected = [note for note in notes if text in note.text]
    if not selected:
        raise NoteSelectionError(text, "no notes found with that title text")
    return selected
