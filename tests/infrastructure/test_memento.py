from __future__ import annotations

from pathlib import Path

import pytest

from graphview.infrastructure.state.memento import FileMemento
from graphview.infrastructure.state.storage import MEMENTO_FILE_NAME, StorageScope


def test_read_missing_returns_default(tmp_path: Path) -> None:
    memento = FileMemento(tmp_path / "state.json")

    assert memento.get("SCRIPT_LAST_DOWNLOADED_URL") is None
    assert memento.get("SCRIPT_LAST_DOWNLOADED_URL", "fallback") == "fallback"


def test_update_persists_across_instances(tmp_path: Path) -> None:
    target = tmp_path / "nested" / "state.json"
    FileMemento(target).update("CSS_LAST_DOWNLOADED_URL", "https://assets.example/graph.css")

    reopened = FileMemento(target)
    assert reopened.get("CSS_LAST_DOWNLOADED_URL") == "https://assets.example/graph.css"
    assert reopened.keys() == ("CSS_LAST_DOWNLOADED_URL",)
    assert not Path(f"{target}.tmp").exists()


def test_update_with_none_removes_key(tmp_path: Path) -> None:
    memento = FileMemento(tmp_path / "state.json")
    memento.update("key", "value")

    memento.update("key", None)

    assert memento.get("key") is None


def test_invalid_file_contents_raise(tmp_path: Path) -> None:
    target = tmp_path / "state.json"
    target.write_text("[1, 2]", encoding="utf-8")

    with pytest.raises(ValueError, match="string mapping"):
        FileMemento(target).get("key")

    target.write_text("{oops", encoding="utf-8")
    with pytest.raises(ValueError, match="not valid JSON"):
        FileMemento(target).get("key")


def test_empty_key_is_rejected(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="non-empty"):
        FileMemento(tmp_path / "state.json").update("", "value")


def test_storage_scope_places_memento_under_root(tmp_path: Path) -> None:
    scope = StorageScope.at(tmp_path)

    assert scope.state.path == tmp_path / MEMENTO_FILE_NAME
    assert scope.path_for("visualization", "graph.js") == tmp_path / "visualization" / "graph.js"
