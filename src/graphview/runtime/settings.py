"""Configuration helpers for runtime wiring."""

from __future__ import annotations

import logging

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from graphview.config.logging import LoggingSettings
from graphview.config.visualization import VisualizationSettings


class Settings(BaseSettings):
    """Runtime configuration resolved from the environment."""

    model_config = SettingsConfigDict(
        env_prefix="",
        extra="ignore",
        case_sensitive=False,
        frozen=True,
    )

    service_name: str = Field(default="graphview", alias="GRAPHVIEW_SERVICE_NAME")

    # --- Component settings ---
    visualization: VisualizationSettings = Field(default_factory=VisualizationSettings)
    diagnostics: LoggingSettings = Field(default_factory=LoggingSettings)

    # --- Loader ---
    @classmethod
    def load(cls) -> Settings:
        instance = cls()
        logger = logging.getLogger("graphview.settings")
        logger.info("graphview settings loaded: %r", instance)
        return instance


__all__ = ["Settings"]
