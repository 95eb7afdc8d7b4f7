"""Selector generators registry.

Maps a selector mode to the module that generates selectors in that mode.
"""

from typing import Optional

from jot.selectors import optimal, short
from jot.selectors.optimal import SelectorEntry
from jot.structure import Document

# mode → generator module
SELECTOR_MODES = {
    "optimal": optimal,
    "short": short,
}


def get_generator(mode: str):
    """Get the generator module for a selector mode."""
    if mode not in SELECTOR_MODES:
        raise ValueError(f"unknown selector mode \"{mode}\" (choose from {', '.join(SELECTOR_MODES)})")
    return SELECTOR_MODES[mode]


def generate_selectors(document: Document, file: str, mode: Optional[str] = None) -> list[SelectorEntry]:
    """Generate one selector entry per heading using the given mode."""
    return get_generator(mode or "optimal").generate(document, file)
