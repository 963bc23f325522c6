from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from graphview.config.visualization import (
    CSS_MEMENTO_KEY,
    DEFAULT_SCRIPT_URL,
    SCRIPT_MEMENTO_KEY,
    VisualizationSettings,
)
from graphview.runtime.settings import Settings


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.chdir(tmp_path)
    for name in (
        "GRAPHVIEW_STORAGE_DIR",
        "GRAPHVIEW_SCRIPT_URL",
        "GRAPHVIEW_CSS_URL",
        "GRAPHVIEW_LOG_LEVEL",
        "GRAPHVIEW_LOG_FILE",
        "GRAPHVIEW_LOG_TO_CONSOLE",
        "GRAPHVIEW_DOWNLOAD_TIMEOUT_SECONDS",
        "GRAPHVIEW_DOWNLOAD_ATTEMPTS",
    ):
        monkeypatch.delenv(name, raising=False)


def test_defaults() -> None:
    settings = Settings()

    assert settings.visualization.script_url == DEFAULT_SCRIPT_URL
    assert settings.visualization.storage_dir == Path("~/.graphview")
    assert settings.diagnostics.log_level == "info"
    assert settings.diagnostics.log_file is None
    assert settings.diagnostics.log_to_console is True
    assert [asset.name for asset in settings.visualization.assets] == ["graph.js", "graph.css"]
    assert [asset.memento_key for asset in settings.visualization.assets] == [
        SCRIPT_MEMENTO_KEY,
        CSS_MEMENTO_KEY,
    ]


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("GRAPHVIEW_STORAGE_DIR", str(tmp_path / "storage"))
    monkeypatch.setenv("GRAPHVIEW_SCRIPT_URL", "https://mirror.example/sfn.js")
    monkeypatch.setenv("GRAPHVIEW_LOG_LEVEL", "verbose")
    monkeypatch.setenv("GRAPHVIEW_LOG_TO_CONSOLE", "false")
    monkeypatch.setenv("GRAPHVIEW_DOWNLOAD_ATTEMPTS", "5")

    settings = Settings.load()

    assert settings.visualization.storage_dir == tmp_path / "storage"
    assert settings.visualization.assets[0].source_url == "https://mirror.example/sfn.js"
    assert settings.visualization.retry_policy.attempts == 5
    assert settings.diagnostics.log_level == "verbose"
    assert settings.diagnostics.log_to_console is False


def test_invalid_values_are_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GRAPHVIEW_DOWNLOAD_TIMEOUT_SECONDS", "0")
    with pytest.raises(ValidationError):
        VisualizationSettings()

    monkeypatch.delenv("GRAPHVIEW_DOWNLOAD_TIMEOUT_SECONDS")
    monkeypatch.setenv("GRAPHVIEW_LOG_LEVEL", "trace")
    with pytest.raises(ValidationError):
        Settings()
