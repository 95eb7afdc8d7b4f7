"""Tests for jot/config.py"""

import json
from pathlib import Path

from jot.config import Config, RefileSettings, TocSettings, init_config, load_config


def test_default_config():
    c = Config()
    assert c.root == "."
    assert c.version == "1.0"
    assert c.inbox_file == "inbox.md"
    assert c.archive_location == "archive/archive.md#Archive"
    assert c.refile.prepend is False
    assert c.toc.short is False


def test_config_paths():
    c = Config()
    assert c.inbox_path == c.workspace_root / "inbox.md"
    assert c.config_path == c.workspace_root / ".jot" / "config.json"


def test_resolve(tmp_path):
    c = Config(root=str(tmp_path))
    assert c.resolve("notes/work.md") == tmp_path.resolve() / "notes" / "work.md"
    absolute = tmp_path / "elsewhere.md"
    assert c.resolve(str(absolute)) == absolute


def test_config_roundtrip():
    c = Config(root="/tmp/notes", inbox_file="todo.md")
    c.refile.prepend = True
    c2 = Config.from_dict(c.to_dict())
    assert c2.root == "/tmp/notes"
    assert c2.inbox_file == "todo.md"
    assert c2.refile == RefileSettings(prepend=True)
    assert c2.toc == TocSettings()


def test_empty_archive_location_falls_back():
    c = Config.from_dict({"archive_location": ""})
    assert c.archive_location == "archive/archive.md#Archive"


def test_config_save_load(tmp_path):
    path = tmp_path / "config.json"
    c = Config(root=str(tmp_path), archive_location="old.md#Done")
    c.save(path)

    data = json.loads(path.read_text())
    assert data["version"] == "1.0"

    c2 = Config.load(path)
    assert c2.archive_location == "old.md#Done"


def test_load_missing_returns_defaults(tmp_path):
    assert Config.load(tmp_path / "nope.json") == Config()


def test_init_config(tmp_path):
    c = init_config(str(tmp_path))
    assert (tmp_path / ".jot" / "config.json").exists()
    assert c.root == str(tmp_path)


def test_init_config_keeps_existing(tmp_path):
    Config(root=str(tmp_path), inbox_file="todo.md").save()
    c = init_config(str(tmp_path))
    assert c.inbox_file == "todo.md"


def test_load_config_uses_given_root(tmp_path):
    Config(root="somewhere/else", toc=TocSettings(short=True)).save(
        Path(tmp_path) / ".jot" / "config.json"
    )
    c = load_config(str(tmp_path))
    assert c.root == str(tmp_path)
    assert c.toc.short is True
