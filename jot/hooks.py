"""Pre/post operation callbacks.

Callers that want to veto or observe a refile pass plain callables; how
those callables are discovered or run as external programs is up to them.
A pre-hook returning False aborts the operation before anything is written.
"""

from dataclasses import dataclass
from typing import Callable, Optional


@dataclass
class HookContext:
    operation: str       # "refile", "archive" or "capture"
    source_file: str
    dest_path: str       # destination selector as given
    content: str         # text about to be inserted


PreHook = Callable[[HookContext], bool]
PostHook = Callable[[HookContext, object], None]


def run_pre_hook(hook: Optional[PreHook], context: HookContext) -> bool:
    """True when the operation may proceed."""
    if hook is None:
        return True
    return bool(hook(context))


def run_post_hook(hook: Optional[PostHook], context: HookContext, summary) -> None:
    if hook is not None:
        hook(context, summary)
