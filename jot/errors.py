"""Error taxonomy for selector resolution and refiling.

Every error here is terminal: it comes from the document's content or the
user's selector, so callers report it and stop. Filesystem problems are not
wrapped; the builtin FileNotFoundError / PermissionError already carry the
offending path.
"""

from typing import Optional


class JotError(Exception):
    """Base class for all engine errors."""


class MalformedSelector(JotError, ValueError):
    """The selector text does not follow the selector grammar."""

    def __init__(self, selector: str, reason: str):
        self.selector = selector
        self.reason = reason
        super().__init__(f"invalid selector \"{selector}\": {reason}")


class SubtreeNotFound(JotError, LookupError):
    """A selector that must fully resolve stopped part-way."""

    def __init__(self, file: str, found_segments: list[str], missing_segments: list[str]):
        self.file = file
        self.found_segments = list(found_segments)
        self.missing_segments = list(missing_segments)
        wanted = "/".join(self.found_segments + self.missing_segments)
        if self.found_segments:
            detail = (
                f"matched \"{'/'.join(self.found_segments)}\" but found no heading "
                f"for \"{'/'.join(self.missing_segments)}\" below it"
            )
        else:
            detail = f"no heading matches \"{self.missing_segments[0]}\""
        super().__init__(f"no subtree \"{wanted}\" in {file}: {detail}")


class AmbiguousSelector(JotError, LookupError):
    """More than one heading matched a segment at the expected level."""

    def __init__(self, file: str, segment: str, candidates: list, parent: Optional[str] = None):
        self.file = file
        self.segment = segment
        self.candidates = list(candidates)
        self.parent = parent
        lines = [f"multiple headings match \"{segment}\" in {file}:"]
        for match in self.candidates:
            lines.append(f"  - \"{match.node.text}\" at line {match.line_number}")
        example = f"{parent}/{segment}" if parent else f"<parent>/{segment}"
        lines.append(
            f"Nest one more segment (e.g. \"{example}\") or use a longer "
            f"substring of the heading you want."
        )
        super().__init__("\n".join(lines))


class LevelOverflow(JotError, ValueError):
    """A heading would end up outside the Markdown levels 1-6."""

    def __init__(self, heading: str, level: int):
        self.heading = heading
        self.level = level
        super().__init__(
            f"heading \"{heading}\" would move to level {level}; "
            f"Markdown headings must stay within levels 1-6"
        )


class OffsetOutOfRange(JotError, IndexError):
    """A byte offset does not fall inside any subtree of the document."""

    def __init__(self, offset: int, length: int, reason: str = ""):
        self.offset = offset
        self.length = length
        message = f"byte offset {offset} is not inside any subtree (file is {length} bytes)"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class CircularRefile(JotError, ValueError):
    """The destination lies inside the subtree being moved."""

    def __init__(self, heading: str, destination: str):
        self.heading = heading
        self.destination = destination
        super().__init__(
            f"cannot refile \"{heading}\" into \"{destination}\": "
            f"the destination is inside the subtree being moved"
        )


class NoteSelectionError(JotError, ValueError):
    """A bulk selection (index list, pattern, title text) picked no usable notes."""

    def __init__(self, spec: str, reason: str):
        self.spec = spec
        self.reason = reason
        super().__init__(f"cannot select notes with \"{spec}\": {reason}")
