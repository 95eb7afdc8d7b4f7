"""Compressed selectors: the fewest characters that still land on a heading.

Works from the same candidate paths as the optimal generator, then shortens
each segment in turn (deepest first) to the shortest abbreviation that keeps
the selector resolving to the same heading. Abbreviations are tried in this
order of sources, shortest first overall:

- single letters for common section names ("python" → "p")
- 1-4 character prefixes
- word initials ("getting started" → "gs")
- consonant compression ("config" → "cnfg")

Every candidate is verified with the navigator, so a short selector is never
ambiguous.
"""

from typing import Optional

from jot.selector import Selector
from jot.selectors.optimal import (
    SelectorEntry,
    candidate_paths,
    find_optimal,
    full_path_selector,
    make_entry,
    resolves_to,
    valid_segment,
)
from jot.structure import Document, HeadingNode


COMMON_WORDS = {
    "go": "g",
    "javascript": "j",
    "python": "p",
    "docker": "d",
    "kubernetes": "k",
    "tools": "t",
    "views": "v",
    "models": "m",
    "functions": "f",
    "classes": "c",
    "variables": "v",
    "routing": "r",
    "templates": "t",
    "plugins": "p",
    "jobs": "j",
    "services": "s",
    "arrays": "a",
    "loops": "l",
}

VOWELS = "aeiou"


def consonants(text: str) -> str:
    return "".join(c for c in text.lower() if "a" <= c <= "z" and c not in VOWELS)


def abbreviations(text: str) -> list[str]:
    """Abbreviation candidates for a heading text, shortest first."""
    lower = text.lower()
    found = []
    if lower in COMMON_WORDS:
        found.append(COMMON_WORDS[lower])
    for n in range(1, 5):
        if n < len(lower):
            found.append(lower[:n])
    words = lower.split()
    if len(words) > 1:
        initials = "".join(w[0] for w in words)
        if 2 <= len(initials) <= 4:
            found.append(initials)
    compressed = consonants(lower)
    if 2 <= len(compressed) <= 6:
        found.append(compressed)

    unique = []
    for candidate in found:
        if valid_segment(candidate) and candidate not in unique:
            unique.append(candidate)
    # sorted() is stable, so equal lengths keep source order
    return sorted(unique, key=len)


def _starting_segment(text: str) -> str:
    """Heading text usable as a segment; the longest slash-free piece otherwise."""
    lower = text.lower()
    if valid_segment(lower):
        return lower
    return max((p.strip() for p in lower.split("/")), key=len)


def compress(document: Document, node: HeadingNode, path: list[HeadingNode],
             skip: int, file: str) -> Optional[tuple[Selector, bool]]:
    """Shorten each segment of one candidate path, deepest first.

    Returns:
        (selector, shortened) or None when the path does not reach `node`.
    """
    segments = [_starting_segment(n.text) for n in path]
    if not all(segments):
        return None
    if not resolves_to(document, Selector(file, list(segments), skip), node):
        return None

    shortened = False
    for i in reversed(range(len(path))):
        for option in abbreviations(path[i].text):
            if len(option) >= len(segments[i]):
                break
            trial = list(segments)
            trial[i] = option
            if resolves_to(document, Selector(file, trial, skip), node):
                segments = trial
                shortened = True
                break
    return Selector(file=file, segments=segments, skip_levels=skip), shortened


def generate(document: Document, file: str) -> list[SelectorEntry]:
    """One compressed-selector entry per heading, in document order.

    Entries whose selector could not be shortened below the full heading text
    fall back to the optimal selector and are marked optimal=False.
    """
    entries = []
    for node in document.headings:
        best = None
        for path, skip in candidate_paths(document, node):
            result = compress(document, node, path, skip, file)
            if result is not None and (best is None or len(result[0].path) < len(best[0].path)):
                best = result

        if best is None:
            entries.append(make_entry(
                node, full_path_selector(document, node, file),
                optimal=False, unselectable=True,
            ))
        elif not best[1]:
            fallback = find_optimal(document, node, file) or best[0]
            entries.append(make_entry(node, fallback, optimal=False))
        else:
            entries.append(make_entry(node, best[0]))
    return entries
