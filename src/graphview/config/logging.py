"""Diagnostics logger configuration."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from graphview.application.ports.diagnostics import LogLevel


class LoggingSettings(BaseSettings):
    """Minimum severity and sinks for the diagnostics logger."""

    model_config = SettingsConfigDict(
        env_prefix="",
        extra="ignore",
        case_sensitive=False,
        frozen=True,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    log_level: LogLevel = Field(default="info", alias="GRAPHVIEW_LOG_LEVEL")
    log_file: Path | None = Field(default=None, alias="GRAPHVIEW_LOG_FILE")
    log_to_console: bool = Field(default=True, alias="GRAPHVIEW_LOG_TO_CONSOLE")


__all__ = ["LoggingSettings"]
