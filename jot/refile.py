"""Refile CLI — move a Markdown subtree under another heading.

Usage:
    python -m jot.refile inbox.md#meeting work.md#projects
    python -m jot.refile inbox.md#meeting work.md#projects/alpha --prepend
    python -m jot.refile inbox.md work.md#projects --offset 120
    python -m jot.refile inbox.md#meeting --archive
    python -m jot.refile inbox.md work.md#projects --index 1-3,5
    python -m jot.refile inbox.md work.md#meetings --pattern "meeting|call"

Pipeline per refile:
    parse selectors → resolve source → extract subtree → plan destination
    → shift heading levels → build missing headings → pre-hook
    → write destination → write source → post-hook

Missing destination headings are created; a missing destination file is
created. When source and destination are the same file the subtree is
removed first and the insertion point adjusted.
"""

import argparse
import json
import sys
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Callable, Optional

from jot.config import Config, load_config
from jot.errors import CircularRefile, JotError, MalformedSelector, NoteSelectionError
from jot.hooks import HookContext, PostHook, PreHook, run_post_hook, run_pre_hook
from jot.levels import build_hierarchy, transform_levels
from jot.navigator import resolve_source
from jot.notes import list_notes, select_by_index, select_by_pattern, select_exact
from jot.planner import (
    DestinationTarget,
    line_ending,
    plan_insertion,
    remove_range,
    shift_for_removal,
    splice,
)
from jot.selector import Selector, parse_selector
from jot.structure import Document, HeadingNode, parse_document, read_document
from jot.subtree import Subtree, extract_subtree, heading_path, locate_subtree


ARCHIVE_NOTE = "Archived notes."


@dataclass
class RefileSummary:
    source_file: str
    source_selector: str
    dest_file: str
    dest_selector: str
    heading: str = ""
    source_level: int = 0
    target_level: int = 0
    created_segments: list[str] = field(default_factory=list)
    insert_offset: int = 0
    bytes_moved: int = 0
    same_file: bool = False
    aborted: bool = False


def _read_or_empty(path: Path) -> Document:
    """Parse a destination file; a file that does not exist yet reads as empty."""
    if not path.exists():
        return parse_document(b"")
    return read_document(path)


def _write(path: Path, content: bytes):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content)


def _dest_selector(dest_text: str, source_file: str) -> Selector:
    dest = parse_selector(dest_text)
    if not dest.file:
        # "#heading" means a heading in the source file
        dest.file = source_file
    return dest


def _check_circular(subtree: Subtree, target: DestinationTarget, dest: Selector):
    inside = subtree.start_offset < target.insert_offset < subtree.end_offset
    if target.parent_offset is not None:
        inside = inside or subtree.start_offset <= target.parent_offset < subtree.end_offset
    if inside:
        raise CircularRefile(subtree.heading.text, dest.render())


def _move_subtree(
    config: Config,
    source_file: str,
    source_label: str,
    source_doc: Document,
    subtree: Subtree,
    dest: Selector,
    prepend: bool,
    operation: str,
    pre_hook: Optional[PreHook],
    post_hook: Optional[PostHook],
    verbose: bool,
    dest_doc: Optional[Document] = None,
) -> RefileSummary:
    """Move one subtree. `dest_doc` stands in for a destination file that
    does not exist yet; it is only written if the move goes ahead."""
    source_path = config.resolve(source_file)
    dest_path = config.resolve(dest.file)
    same_file = source_path.resolve() == dest_path.resolve()

    if same_file:
        dest_doc = source_doc
    elif dest_doc is None:
        dest_doc = _read_or_empty(dest_path)
    target = plan_insertion(dest_doc, dest, prepend=prepend)

    if same_file:
        _check_circular(subtree, target, dest)

    if verbose:
        print(f"  Moving \"{subtree.heading.text}\" ({len(subtree.content)} bytes)")
        if target.create_segments:
            print(f"    Creating: {'/'.join(target.create_segments)}")

    newline = line_ending(dest_doc.content or subtree.content)
    moved = transform_levels(subtree, target.target_level)
    block = b""
    if target.create_segments:
        block = build_hierarchy(target.create_segments, target.create_level, newline)
    block += moved

    summary = RefileSummary(
        source_file=source_file,
        source_selector=source_label,
        dest_file=dest.file,
        dest_selector=dest.render(),
        heading=subtree.heading.text,
        source_level=subtree.level,
        target_level=target.target_level or subtree.level,
        created_segments=list(target.create_segments),
        insert_offset=target.insert_offset,
        bytes_moved=len(subtree.content),
        same_file=same_file,
    )

    context = HookContext(
        operation=operation,
        source_file=source_file,
        dest_path=dest.render(),
        content=block.decode("utf-8", errors="replace"),
    )
    if not run_pre_hook(pre_hook, context):
        if verbose:
            print("    Aborted by pre-hook, nothing written")
        summary.aborted = True
        return summary

    remaining = remove_range(source_doc.content, subtree.start_offset, subtree.end_offset)
    if same_file:
        offset = shift_for_removal(
            target.insert_offset, subtree.start_offset, len(subtree.content)
        )
        _write(dest_path, splice(remaining, offset, block, newline))
    else:
        _write(dest_path, splice(dest_doc.content, target.insert_offset, block, newline))
        _write(source_path, remaining)

    if verbose:
        print(f"    → {dest.render()} (level {summary.source_level} → {summary.target_level})")

    run_post_hook(post_hook, context, summary)
    return summary


def resolve_destination(
    selector: str,
    prepend: bool = False,
    config: Optional[Config] = None,
) -> DestinationTarget:
    """Work out where content refiled to `selector` would be inserted.

    Args:
        selector: Destination selector, e.g. "work.md#projects/alpha".
        prepend: Plan a prepend instead of an append.
        config: Workspace config (default: current directory).

    Returns:
        DestinationTarget. Nothing is written.
    """
    config = config or Config()
    dest = parse_selector(selector)
    if not dest.file:
        raise MalformedSelector(selector, "a destination selector must name a file")
    document = _read_or_empty(config.resolve(dest.file))
    return plan_insertion(document, dest, prepend=prepend)


def refile(
    source_selector: str,
    dest_selector: str,
    prepend: bool = False,
    config: Optional[Config] = None,
    pre_hook: Optional[PreHook] = None,
    post_hook: Optional[PostHook] = None,
    verbose: bool = False,
) -> RefileSummary:
    """Move the subtree named by `source_selector` under `dest_selector`.

    Args:
        source_selector: Must resolve to exactly one heading.
        dest_selector: Destination; missing headings are created. An empty
            file part ("#projects") means the source file.
        prepend: Insert before the destination's existing children.
        config: Workspace config (default: current directory).
        pre_hook: Called before writing; returning False aborts.
        post_hook: Called with the summary after writing.
        verbose: Print progress.

    Returns:
        RefileSummary (aborted=True when the pre-hook vetoed).
    """
    config = config or Config()
    source = parse_selector(source_selector)
    if not source.file:
        raise MalformedSelector(source_selector, "a source selector must name a file")

    source_doc = read_document(config.resolve(source.file))
    node = resolve_source(source_doc, source)
    subtree = extract_subtree(source_doc, node)
    dest = _dest_selector(dest_selector, source.file)

    return _move_subtree(
        config, source.file, source.render(), source_doc, subtree, dest,
        prepend, "refile", pre_hook, post_hook, verbose,
    )


def refile_by_offset(
    file: str,
    byte_offset: int,
    dest_selector: str,
    prepend: bool = False,
    config: Optional[Config] = None,
    pre_hook: Optional[PreHook] = None,
    post_hook: Optional[PostHook] = None,
    verbose: bool = False,
) -> RefileSummary:
    """Refile the innermost subtree containing `byte_offset` in `file`.

    Editors use this with the cursor position, so no selector is needed.
    """
    config = config or Config()
    source_doc = read_document(config.resolve(file))
    subtree = locate_subtree(source_doc, byte_offset)
    path = "/".join(n.text for n in heading_path(source_doc, subtree.heading))
    dest = _dest_selector(dest_selector, file)

    return _move_subtree(
        config, file, f"{file}#{path}", source_doc, subtree, dest,
        prepend, "refile", pre_hook, post_hook, verbose,
    )


def insert_text(
    dest_selector: str,
    text: str,
    prepend: bool = False,
    config: Optional[Config] = None,
) -> DestinationTarget:
    """Insert free text under a destination, creating missing headings.

    Heading levels inside `text` are not touched.
    """
    config = config or Config()
    dest = parse_selector(dest_selector)
    if not dest.file:
        dest.file = config.inbox_file
    path = config.resolve(dest.file)
    document = _read_or_empty(path)
    target = plan_insertion(document, dest, prepend=prepend)

    newline = line_ending(document.content)
    block = b""
    if target.create_segments:
        block = build_hierarchy(target.create_segments, target.create_level, newline)
    block += text.encode("utf-8")
    _write(path, splice(document.content, target.insert_offset, block, newline))
    return target


def archive_header(location: Selector) -> bytes:
    """Starting content of a new archive file: its top section and a note."""
    header = ""
    if location.segments:
        level = location.skip_levels + 1
        header = f"{'#' * level} {location.segments[0]}\n\n"
    return f"{header}{ARCHIVE_NOTE}\n".encode("utf-8")


def archive(
    source_selector: str,
    config: Optional[Config] = None,
    pre_hook: Optional[PreHook] = None,
    post_hook: Optional[PostHook] = None,
    verbose: bool = False,
) -> RefileSummary:
    """Refile a subtree to the configured archive location.

    A missing archive file is started from `archive_header` in memory and
    only written together with the moved subtree.
    """
    config = config or Config()
    source = parse_selector(source_selector)
    if not source.file:
        raise MalformedSelector(source_selector, "a source selector must name a file")

    source_doc = read_document(config.resolve(source.file))
    node = resolve_source(source_doc, source)
    subtree = extract_subtree(source_doc, node)

    dest = parse_selector(config.archive_location)
    dest_doc = None
    if not config.resolve(dest.file).exists():
        dest_doc = parse_document(archive_header(dest))

    return _move_subtree(
        config, source.file, source.render(), source_doc, subtree, dest,
        False, "archive", pre_hook, post_hook, verbose, dest_doc=dest_doc,
    )


@dataclass
class BulkRefileSummary:
    source_file: str
    dest_file: str
    dest_selector: str
    headings: list[str] = field(default_factory=list)
    target_level: int = 0
    created_segments: list[str] = field(default_factory=list)
    insert_offset: int = 0
    bytes_moved: int = 0
    same_file: bool = False
    aborted: bool = False


NoteSelector = Callable[[Document, list[HeadingNode]], list[HeadingNode]]


def refile_many(
    file: str,
    select: NoteSelector,
    dest_selector: str,
    prepend: bool = False,
    config: Optional[Config] = None,
    pre_hook: Optional[PreHook] = None,
    post_hook: Optional[PostHook] = None,
    verbose: bool = False,
) -> BulkRefileSummary:
    """Move several top-level notes of `file` under one destination.

    Every note is resolved against a single parse of `file` and the
    destination is planned once, so earlier moves cannot shift later ones.
    The notes land together, in the order `select` returned them.

    Args:
        file: Source file; empty means the configured inbox.
        select: Picks notes from `list_notes(document)`, e.g.
            `lambda doc, notes: select_by_index(notes, "1-3")`.
        dest_selector: Destination; missing headings are created. An empty
            file part means the source file.
        prepend: Insert before the destination's existing children.
        config: Workspace config (default: current directory).
        pre_hook: Called once before writing; returning False aborts.
        post_hook: Called once with the summary after writing.
        verbose: Print progress.

    Returns:
        BulkRefileSummary (aborted=True when the pre-hook vetoed).
    """
    config = config or Config()
    file = file or config.inbox_file
    source_path = config.resolve(file)
    source_doc = read_document(source_path)

    chosen = select(source_doc, list_notes(source_doc))
    if not chosen:
        raise NoteSelectionError(file, "no notes selected")
    subtrees = [extract_subtree(source_doc, note) for note in chosen]

    dest = _dest_selector(dest_selector, file)
    dest_path = config.resolve(dest.file)
    same_file = source_path.resolve() == dest_path.resolve()
    dest_doc = source_doc if same_file else _read_or_empty(dest_path)
    target = plan_insertion(dest_doc, dest, prepend=prepend)

    if same_file:
        for subtree in subtrees:
            _check_circular(subtree, target, dest)

    if verbose:
        print(f"  Moving {len(subtrees)} notes to {dest.render()}")

    newline = line_ending(dest_doc.content or source_doc.content)
    block = b""
    if target.create_segments:
        block = build_hierarchy(target.create_segments, target.create_level, newline)
    for subtree in subtrees:
        block = splice(block, len(block), transform_levels(subtree, target.target_level), newline)

    summary = BulkRefileSummary(
        source_file=file,
        dest_file=dest.file,
        dest_selector=dest.render(),
        headings=[s.heading.text for s in subtrees],
        target_level=target.target_level or subtrees[0].level,
        created_segments=list(target.create_segments),
        insert_offset=target.insert_offset,
        bytes_moved=sum(len(s.content) for s in subtrees),
        same_file=same_file,
    )

    context = HookContext(
        operation="refile",
        source_file=file,
        dest_path=dest.render(),
        content=block.decode("utf-8", errors="replace"),
    )
    if not run_pre_hook(pre_hook, context):
        if verbose:
            print("    Aborted by pre-hook, nothing written")
        summary.aborted = True
        return summary

    # Last to first, so the offsets of the notes still to remove stay valid.
    remaining = source_doc.content
    offset = target.insert_offset
    for subtree in sorted(subtrees, key=lambda s: s.start_offset, reverse=True):
        remaining = remove_range(remaining, subtree.start_offset, subtree.end_offset)
        offset = shift_for_removal(offset, subtree.start_offset, len(subtree.content))

    if same_file:
        _write(dest_path, splice(remaining, offset, block, newline))
    else:
        _write(dest_path, splice(dest_doc.content, target.insert_offset, block, newline))
        _write(source_path, remaining)

    if verbose:
        print(f"    Moved {len(subtrees)} notes ({summary.bytes_moved} bytes)")

    run_post_hook(post_hook, context, summary)
    return summary


def format_summary(summary: RefileSummary) -> str:
    if summary.aborted:
        return f"Refile of \"{summary.heading}\" aborted, nothing written"
    lines = [
        f"Refiled \"{summary.heading}\" (level {summary.source_level} → {summary.target_level})",
        f"  from {summary.source_selector}",
        f"  to   {summary.dest_selector}",
    ]
    if summary.created_segments:
        lines.append(f"  created: {'/'.join(summary.created_segments)}")
    return "\n".join(lines)


def format_bulk_summary(summary: BulkRefileSummary) -> str:
    if summary.aborted:
        return f"Refile of {len(summary.headings)} notes aborted, nothing written"
    lines = [f"Refiled {len(summary.headings)} notes from {summary.source_file}"]
    lines.extend(f"  - {heading}" for heading in summary.headings)
    lines.append(f"  to {summary.dest_selector} (level {summary.target_level})")
    if summary.created_segments:
        lines.append(f"  created: {'/'.join(summary.created_segments)}")
    return "\n".join(lines)


def _note_selector(args) -> Optional[NoteSelector]:
    if args.all:
        return lambda document, notes: notes
    if args.index:
        return lambda document, notes: select_by_index(notes, args.index)
    if args.pattern:
        return lambda document, notes: select_by_pattern(document, notes, args.pattern)
    if args.exact:
        return lambda document, notes: select_exact(notes, args.exact)
    return None


def main():
    parser = argparse.ArgumentParser(
        description="jot refile — move a markdown subtree under another heading",
    )
    parser.add_argument(
        "source",
        type=str,
        help="Source selector (e.g. inbox.md#meeting), or a file with --offset or a note selection",
    )
    parser.add_argument(
        "dest",
        type=str,
        nargs="?",
        help="Destination selector (e.g. work.md#projects/alpha)",
    )
    parser.add_argument(
        "--prepend",
        action="store_true",
        help="Insert before the destination's existing children",
    )
    parser.add_argument(
        "--offset",
        type=int,
        default=None,
        help="Refile the subtree containing this byte offset of SOURCE",
    )
    parser.add_argument(
        "--archive",
        action="store_true",
        help="Refile SOURCE to the configured archive location",
    )
    notes = parser.add_mutually_exclusive_group()
    notes.add_argument("--all", action="store_true", help="Refile every top-level note of SOURCE")
    notes.add_argument(
        "--index",
        type=str,
        default=None,
        help="Refile notes by 1-based position (e.g. 1,3,5 or 1-3)",
    )
    notes.add_argument(
        "--pattern",
        type=str,
        default=None,
        help="Refile notes whose title or body matches this regular expression",
    )
    notes.add_argument(
        "--exact",
        type=str,
        default=None,
        help="Refile notes whose title contains this text (e.g. a timestamp)",
    )
    parser.add_argument(
        "--root",
        type=str,
        default=".",
        help="Workspace root (default: current directory)",
    )
    parser.add_argument("--json", action="store_true", dest="json_output", help="Output as JSON")
    parser.add_argument("--quiet", action="store_true", help="Suppress output")

    args = parser.parse_args()

    select = _note_selector(args)
    if select is not None and (args.archive or args.offset is not None):
        parser.error("note selection cannot be combined with --archive or --offset")
    if not args.archive and not args.dest:
        parser.error("a destination selector is required unless --archive is given")

    config = load_config(args.root)
    prepend = args.prepend or config.refile.prepend

    try:
        if select is not None:
            summary = refile_many(parse_selector(args.source).file, select, args.dest,
                                  prepend=prepend, config=config)
        elif args.archive:
            summary = archive(args.source, config=config)
        elif args.offset is not None:
            summary = refile_by_offset(args.source, args.offset, args.dest,
                                       prepend=prepend, config=config)
        else:
            summary = refile(args.source, args.dest, prepend=prepend, config=config)
    except (JotError, OSError) as e:
        print(f"Error: {e}")
        sys.exit(1)

    if args.json_output:
        print(json.dumps(asdict(summary), indent=2))
    elif not args.quiet:
        if isinstance(summary, BulkRefileSummary):
            print(format_bulk_summary(summary))
        else:
            print(format_summary(summary))

    sys.exit(1 if summary.aborted else 0)


if __name__ == "__main__":
    main()
