"""Selector parsing.

A selector names a file and, optionally, a heading path inside it:

    work.md                       whole file
    work.md#projects/alpha        "alpha" under "projects"
    work.md#//tasks               skip two levels, "tasks" is a level-3 heading

Segments are case-insensitive substrings of heading text.
"""

import re
from dataclasses import dataclass, field
from typing import Optional

from jot.errors import MalformedSelector


LINE_SELECTOR = re.compile(r"^(?P<file>[^#]+?):(?P<line>\d+)$")


@dataclass
class Selector:
    file: str
    segments: list[str] = field(default_factory=list)
    skip_levels: int = 0

    @property
    def is_whole_file(self) -> bool:
        return not self.segments

    @property
    def path(self) -> str:
        return "/" * self.skip_levels + "/".join(self.segments)

    def render(self) -> str:
        """Selector text that parses back to an equal Selector."""
        if self.is_whole_file:
            return self.file
        return f"{self.file}#{self.path}"


def parse_selector(text: str) -> Selector:
    """Parse selector text.

    Args:
        text: e.g. "inbox.md#meeting/attendees" or "notes.md".

    Returns:
        Selector with file, segments (outer whitespace stripped, case kept)
        and skip_levels (number of leading slashes).

    Raises:
        MalformedSelector: empty selector, no file and no path, skip slashes
            without a segment, or an empty segment.
    """
    if text is None or not text.strip():
        raise MalformedSelector(text or "", "selector is empty")

    if "#" not in text:
        return Selector(file=text.strip())

    file_part, path_part = text.split("#", 1)
    file = file_part.strip()
    path = path_part.strip()

    if not file and not path:
        raise MalformedSelector(text, "selector names neither a file nor a heading")

    skip = 0
    while path.startswith("/"):
        skip += 1
        path = path[1:]

    if not path:
        if skip:
            raise MalformedSelector(text, "leading '/' must be followed by a heading segment")
        return Selector(file=file)

    segments = []
    for raw in path.split("/"):
        segment = raw.strip()
        if not segment:
            raise MalformedSelector(text, "heading path contains an empty segment")
        segments.append(segment)

    return Selector(file=file, segments=segments, skip_levels=skip)


def parse_line_selector(text: str) -> Optional[tuple[str, int]]:
    """Split "notes.md:42" into ("notes.md", 42); None for any other form."""
    m = LINE_SELECTOR.match(text.strip())
    if not m:
        return None
    return m.group("file").strip(), int(m.group("line"))
