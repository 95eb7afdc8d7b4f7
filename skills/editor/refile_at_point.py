#!/usr/bin/env python3
"""jot Refile at Point — refile the subtree under an editor's cursor.

Usage:
    python refile_at_point.py inbox.md 342 "work.md#projects"
    python refile_at_point.py inbox.md 342 "work.md#projects/alpha" --prepend
    python refile_at_point.py inbox.md 342 --where

Editors pass the cursor's byte offset; the innermost subtree containing it
is moved. Output is always JSON so editor plugins can parse it.
"""

import argparse
import json
import sys
from dataclasses import asdict
from pathlib import Path

_project_root = Path(__file__).resolve().parent.parent.parent
sys.path.insert(0, str(_project_root))

from jot.config import load_config
from jot.errors import JotError
from jot.refile import refile_by_offset
from jot.selectors.optimal import find_optimal, full_path_selector
from jot.structure import read_document
from jot.subtree import locate_subtree


def refile_at_point(
    file: str,
    offset: int,
    dest: str,
    prepend: bool = False,
    root: str = ".",
) -> dict:
    """Refile the subtree at `offset` and describe the result.

    Args:
        file: Markdown file the cursor is in.
        offset: Cursor byte offset.
        dest: Destination selector.
        prepend: Insert before the destination's existing children.
        root: Workspace root.

    Returns:
        dict with: ok, and either the refile summary fields or error.
    """
    config = load_config(root)
    try:
        summary = refile_by_offset(file, offset, dest, prepend=prepend, config=config)
    except (JotError, OSError) as e:
        return {"ok": False, "error": str(e), "error_type": type(e).__name__}
    return {"ok": not summary.aborted, **asdict(summary)}


def subtree_at_point(file: str, offset: int, root: str = ".") -> dict:
    """Describe the subtree at `offset` without moving it."""
    config = load_config(root)
    try:
        document = read_document(config.resolve(file))
        subtree = locate_subtree(document, offset)
    except (JotError, OSError) as e:
        return {"ok": False, "error": str(e), "error_type": type(e).__name__}

    node = subtree.heading
    selector = find_optimal(document, node, file) or full_path_selector(document, node, file)
    return {
        "ok": True,
        "heading": node.text,
        "level": subtree.level,
        "selector": selector.render(),
        "start_offset": subtree.start_offset,
        "end_offset": subtree.end_offset,
    }


def main():
    parser = argparse.ArgumentParser(
        description="Refile the markdown subtree at a cursor position",
    )
    parser.add_argument("file", type=str, help="Markdown file containing the cursor")
    parser.add_argument("offset", type=int, help="Cursor byte offset")
    parser.add_argument("dest", type=str, nargs="?", help="Destination selector")
    parser.add_argument("--prepend", action="store_true", help="Insert before existing children")
    parser.add_argument("--where", action="store_true", help="Only report the subtree at the cursor")
    parser.add_argument("--root", type=str, default=".", help="Workspace root")

    args = parser.parse_args()

    if args.where:
        result = subtree_at_point(args.file, args.offset, root=args.root)
    elif not args.dest:
        result = {"ok": False, "error": "a destination selector is required", "error_type": "UsageError"}
    else:
        result = refile_at_point(args.file, args.offset, args.dest,
                                 prepend=args.prepend, root=args.root)

    print(json.dumps(result, indent=2))
    if not result["ok"]:
        sys.exit(1)


if __name__ == "__main__":
    main()
