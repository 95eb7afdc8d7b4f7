"""Peek CLI — show a subtree, a file, or its table of contents.

Usage:
    python -m jot.peek "work.md#projects/alpha"
    python -m jot.peek "work.md#projects" --info
    python -m jot.peek work.md --toc
    python -m jot.peek work.md --toc --short
    python -m jot.peek "work.md:42"            (subtree containing line 42)

Every table-of-contents entry carries a selector that resolves back to
exactly that heading.
"""

import argparse
import json
import sys
from dataclasses import asdict
from typing import Optional

from jot.config import Config, load_config
from jot.errors import JotError, MalformedSelector
from jot.navigator import resolve_source
from jot.selector import parse_line_selector, parse_selector
from jot.selectors import SelectorEntry, generate_selectors
from jot.selectors.optimal import find_optimal, full_path_selector
from jot.structure import line_start_offset, parse_document, read_document
from jot.subtree import Subtree, extract_subtree, locate_subtree


def peek(selector: str, config: Optional[Config] = None) -> Subtree:
    """Extract the subtree a selector names, without modifying anything."""
    config = config or Config()
    parsed = parse_selector(selector)
    if not parsed.file:
        raise MalformedSelector(selector, "a selector must name a file")
    document = read_document(config.resolve(parsed.file))
    node = resolve_source(document, parsed)
    return extract_subtree(document, node)


def read_file(file: str, config: Optional[Config] = None) -> bytes:
    config = config or Config()
    return config.resolve(file).read_bytes()


def nested_heading_count(subtree: Subtree) -> int:
    """Headings inside a subtree below its top heading."""
    return sum(1 for n in parse_document(subtree.content).headings if n.level > subtree.level)


def subtree_info(subtree: Subtree, file: str) -> dict:
    return {
        "file": file,
        "heading": subtree.heading.text,
        "level": subtree.level,
        "line_number": subtree.heading.line_number,
        "content_length": len(subtree.content),
        "start_offset": subtree.start_offset,
        "end_offset": subtree.end_offset,
        "nested_headings": nested_heading_count(subtree),
    }


def selector_for_line(file: str, line: int, config: Optional[Config] = None) -> str:
    """Selector for the subtree containing a 1-based line, or the bare file.

    Lines before the first heading select the whole file.
    """
    config = config or Config()
    document = read_document(config.resolve(file))
    try:
        offset = line_start_offset(document.content, line)
    except ValueError as e:
        raise MalformedSelector(f"{file}:{line}", str(e)) from e
    first = document.first_heading_offset()
    if first is None or offset < first:
        return file
    node = locate_subtree(document, offset).heading
    selector = find_optimal(document, node, file) or full_path_selector(document, node, file)
    return selector.render()


def list_selectors(file: str, short: bool = False,
                   config: Optional[Config] = None) -> list[SelectorEntry]:
    """One selector entry per heading in `file`.

    Args:
        file: File name relative to the workspace root (or absolute).
        short: Generate compressed selectors instead of full-text ones.
        config: Workspace config (default: current directory).

    Returns:
        list of SelectorEntry in document order.
    """
    config = config or Config()
    document = read_document(config.resolve(file))
    return generate_selectors(document, file, "short" if short else "optimal")


def table_of_contents(selector: str, short: bool = False,
                      config: Optional[Config] = None) -> list[SelectorEntry]:
    """Selector entries for a whole file, or only the headings inside a subtree.

    Selectors are always generated against the whole file, so each one
    still resolves when used on its own.
    """
    config = config or Config()
    parsed = parse_selector(selector)
    entries = list_selectors(parsed.file, short=short, config=config)
    if parsed.is_whole_file:
        return entries

    document = read_document(config.resolve(parsed.file))
    subtree = extract_subtree(document, resolve_source(document, parsed))
    first_line = subtree.heading.line_number
    last_line = document.line_of(max(subtree.end_offset - 1, subtree.start_offset))
    return [e for e in entries if first_line <= e.line_number <= last_line]


def format_toc(title: str, entries: list[SelectorEntry]) -> str:
    header = f"Table of Contents: {title}"
    lines = [header, "=" * len(header), ""]
    for entry in entries:
        indent = "  " * (entry.level - 1)
        marker = " (ambiguous)" if entry.unselectable else ""
        lines.append(f"{indent}{'#' * entry.level} {entry.heading}{marker}")
        lines.append(f"{indent}  → {entry.selector}")
    if any(e.unselectable for e in entries):
        lines.append("")
        lines.append("Headings marked (ambiguous) share text with a sibling and cannot be selected.")
    return "\n".join(lines)


def format_info(info: dict) -> str:
    lines = [
        "Subtree Information:",
        f"  File: {info['file']}",
        f"  Heading: \"{info['heading']}\"",
        f"  Level: {info['level']}",
        f"  Content length: {info['content_length']} bytes",
        f"  Byte range: {info['start_offset']}-{info['end_offset']}",
    ]
    if info["nested_headings"]:
        lines.append(f"  Nested headings: {info['nested_headings']}")
    return "\n".join(lines)


def main():
    parser = argparse.ArgumentParser(
        description="jot peek — show a markdown subtree or a file's table of contents",
    )
    parser.add_argument("selector", type=str, help="Selector (e.g. work.md#projects), or file.md:LINE")
    parser.add_argument("--raw", action="store_true", help="Print content only, no header")
    parser.add_argument("--info", action="store_true", help="Show subtree metadata")
    parser.add_argument("--toc", action="store_true", help="Show table of contents with selectors")
    parser.add_argument("--short", action="store_true", help="Use compressed selectors in the TOC")
    parser.add_argument("--root", type=str, default=".", help="Workspace root (default: current directory)")
    parser.add_argument("--json", action="store_true", dest="json_output", help="Output as JSON")

    args = parser.parse_args()
    config = load_config(args.root)
    selector = args.selector

    try:
        line_selector = parse_line_selector(selector)
        if line_selector is not None:
            selector = selector_for_line(line_selector[0], line_selector[1], config=config)

        if args.toc:
            entries = table_of_contents(selector, short=args.short or config.toc.short, config=config)
            if args.json_output:
                print(json.dumps([asdict(e) for e in entries], indent=2))
            elif not entries:
                print(f"No headings found in {selector}")
            else:
                print(format_toc(selector, entries))
            return

        parsed = parse_selector(selector)
        if parsed.is_whole_file:
            content = read_file(parsed.file, config=config)
            if args.json_output:
                print(json.dumps({"file": parsed.file, "content": content.decode("utf-8", errors="replace")}, indent=2))
            else:
                sys.stdout.write(content.decode("utf-8", errors="replace"))
            return

        subtree = peek(selector, config=config)
    except (JotError, OSError) as e:
        print(f"Error: {e}")
        sys.exit(1)

    text = subtree.content.decode("utf-8", errors="replace")
    info = subtree_info(subtree, parsed.file)
    if args.json_output:
        info["selector"] = selector
        info["content"] = text
        print(json.dumps(info, indent=2))
    elif args.info:
        print(format_info(info))
    elif args.raw:
        sys.stdout.write(text)
    else:
        print(f"--- {selector} ---")
        sys.stdout.write(text)
        if not text.endswith("\n"):
            print()


if __name__ == "__main__":
    main()
