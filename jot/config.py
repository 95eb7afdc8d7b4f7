"""jot configuration management.

Handles loading, validating, and creating .jot/config.json which stores:
- Workspace root (where note files are resolved from)
- Inbox file and archive location
- Refile and table-of-contents defaults
"""

import json
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Optional


CONFIG_DIR = ".jot"
DEFAULT_CONFIG_PATH = Path(CONFIG_DIR) / "config.json"

# Default workspace root is the current directory
DEFAULT_ROOT = "."

DEFAULT_INBOX_FILE = "inbox.md"
DEFAULT_ARCHIVE_LOCATION = "archive/archive.md#Archive"


@dataclass
class RefileSettings:
    prepend: bool = False  # True to insert under the heading, before existing children


@dataclass
class TocSettings:
    short: bool = False  # True to list compressed selectors by default


@dataclass
class Config:
    root: str = DEFAULT_ROOT
    inbox_file: str = DEFAULT_INBOX_FILE
    archive_location: str = DEFAULT_ARCHIVE_LOCATION
    refile: RefileSettings = field(default_factory=RefileSettings)
    toc: TocSettings = field(default_factory=TocSettings)
    version: str = "1.0"

    @property
    def workspace_root(self) -> Path:
        return Path(self.root).resolve()

    @property
    def inbox_path(self) -> Path:
        return self.resolve(self.inbox_file)

    @property
    def config_path(self) -> Path:
        return self.workspace_root / DEFAULT_CONFIG_PATH

    def resolve(self, name: str) -> Path:
        """Resolve a selector's file part against the workspace root."""
        path = Path(name).expanduser()
        if path.is_absolute():
            return path
        return self.workspace_root / path

    def to_dict(self) -> dict:
        return asdict(self)

    def save(self, path: Optional[Path] = None):
        path = path or self.config_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(self.to_dict(), indent=2) + "\n")

    @classmethod
    def from_dict(cls, data: dict) -> "Config":
        return cls(
            root=data.get("root", DEFAULT_ROOT),
            inbox_file=data.get("inbox_file") or DEFAULT_INBOX_FILE,
            archive_location=data.get("archive_location") or DEFAULT_ARCHIVE_LOCATION,
            refile=RefileSettings(**data.get("refile", {})),
            toc=TocSettings(**data.get("toc", {})),
            version=data.get("version", "1.0"),
        )

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "Config":
        path = path or DEFAULT_CONFIG_PATH
        if not path.exists():
            return cls()
        data = json.loads(path.read_text())
        return cls.from_dict(data)


def load_config(root: str = ".") -> Config:
    """Load the workspace config, keeping `root` as the resolution base."""
    config = Config.load(Path(root) / DEFAULT_CONFIG_PATH)
    config.root = root
    return config


def init_config(root: str = ".") -> Config:
    """Load existing config or create a fresh one under <root>/.jot/."""
    config_path = Path(root) / DEFAULT_CONFIG_PATH
    if config_path.exists():
        config = Config.load(config_path)
        config.root = root
    else:
        config = Config(root=root)
        config.save()
    return config
