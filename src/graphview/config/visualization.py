"""Settings for the graph asset cache and its storage scope."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from graphview.infrastructure.cache.graph_assets import DEFAULT_ASSET_DIR_NAME, CachedAsset
from graphview.infrastructure.http.retry import RetryPolicy

DEFAULT_SCRIPT_URL = "https://d3p8cpu0nuk1gf.cloudfront.net/sfn-0.1.8.js"
DEFAULT_CSS_URL = "https://d3p8cpu0nuk1gf.cloudfront.net/graph-0.1.8.css"

SCRIPT_ASSET_NAME = "graph.js"
CSS_ASSET_NAME = "graph.css"
SCRIPT_MEMENTO_KEY = "SCRIPT_LAST_DOWNLOADED_URL"
CSS_MEMENTO_KEY = "CSS_LAST_DOWNLOADED_URL"


class VisualizationSettings(BaseSettings):
    """Where the shared graph assets come from and where they are kept."""

    model_config = SettingsConfigDict(
        env_prefix="",
        extra="ignore",
        case_sensitive=False,
        frozen=True,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    storage_dir: Path = Field(default=Path("~/.graphview"), alias="GRAPHVIEW_STORAGE_DIR")
    asset_dir_name: str = Field(default=DEFAULT_ASSET_DIR_NAME, alias="GRAPHVIEW_ASSET_DIR_NAME")
    script_url: str = Field(default=DEFAULT_SCRIPT_URL, alias="GRAPHVIEW_SCRIPT_URL")
    css_url: str = Field(default=DEFAULT_CSS_URL, alias="GRAPHVIEW_CSS_URL")
    download_timeout_seconds: float = Field(
        default=30.0,
        alias="GRAPHVIEW_DOWNLOAD_TIMEOUT_SECONDS",
        gt=0.0,
    )
    download_attempts: int = Field(default=3, alias="GRAPHVIEW_DOWNLOAD_ATTEMPTS", ge=1)
    download_initial_backoff_ms: int = Field(
        default=250, alias="GRAPHVIEW_DOWNLOAD_INITIAL_BACKOFF_MS", ge=0
    )
    download_max_backoff_ms: int = Field(
        default=4000, alias="GRAPHVIEW_DOWNLOAD_MAX_BACKOFF_MS", ge=0
    )

    @property
    def assets(self) -> tuple[CachedAsset, ...]:
        return (
            CachedAsset(SCRIPT_ASSET_NAME, self.script_url, SCRIPT_MEMENTO_KEY),
            CachedAsset(CSS_ASSET_NAME, self.css_url, CSS_MEMENTO_KEY),
        )

    @property
    def retry_policy(self) -> RetryPolicy:
        return RetryPolicy(
            attempts=self.download_attempts,
            initial_ms=self.download_initial_backoff_ms,
            max_ms=self.download_max_backoff_ms,
            jitter=0.2,
        )


__all__ = ["VisualizationSettings"]
