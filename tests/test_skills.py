"""Tests for skills/editor/ — the editor integration layer."""

import json
import sys

import pytest

from skills.editor.refile_at_point import main, refile_at_point, subtree_at_point


INBOX = "# Inbox\n\n## Call dentist\n\nTuesday\n\n## Buy milk\n"


@pytest.fixture
def root(tmp_path):
    (tmp_path / "inbox.md").write_text(INBOX, encoding="utf-8")
    (tmp_path / "todo.md").write_text("# Errands\n", encoding="utf-8")
    return str(tmp_path)


def test_subtree_at_point(root):
    result = subtree_at_point("inbox.md", INBOX.index("Tuesday"), root=root)
    assert result["ok"]
    assert result["heading"] == "Call dentist"
    assert result["selector"] == "inbox.md#call dentist"
    assert result["level"] == 2


def test_subtree_at_point_out_of_range(root):
    result = subtree_at_point("inbox.md", 10_000, root=root)
    assert not result["ok"]
    assert result["error_type"] == "OffsetOutOfRange"


def test_refile_at_point(root, tmp_path):
    result = refile_at_point("inbox.md", INBOX.index("milk"), "todo.md#errands", root=root)
    assert result["ok"]
    assert result["heading"] == "Buy milk"
    assert (tmp_path / "todo.md").read_text() == "# Errands\n\n## Buy milk\n"
    assert (tmp_path / "inbox.md").read_text() == "# Inbox\n\n## Call dentist\n\nTuesday\n\n"


def test_refile_at_point_error(root):
    result = refile_at_point("missing.md", 0, "todo.md#errands", root=root)
    assert not result["ok"]
    assert result["error_type"] == "FileNotFoundError"


def test_main_json(root, monkeypatch, capsys):
    monkeypatch.setattr(sys, "argv", [
        "refile_at_point.py", "inbox.md", str(INBOX.index("Tuesday")), "todo.md#errands",
        "--prepend", "--root", root,
    ])
    main()
    data = json.loads(capsys.readouterr().out)
    assert data["ok"]
    assert data["dest_selector"] == "todo.md#errands"


def test_main_requires_destination(root, monkeypatch, capsys):
    monkeypatch.setattr(sys, "argv", ["refile_at_point.py", "inbox.md", "3", "--root", root])
    with pytest.raises(SystemExit) as exc:
        main()
    assert exc.value.code == 1
    assert json.loads(capsys.readouterr().out)["ok"] is False
