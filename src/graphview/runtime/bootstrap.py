"""Runtime wiring for the visualization registry."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import httpx

from graphview.application.ports.notifier import Notifier
from graphview.application.ports.render_surface import RenderSurfaceProvider
from graphview.application.visualization_manager import VisualizationManager
from graphview.config.logging import LoggingSettings
from graphview.infrastructure.cache.graph_assets import GraphAssetCache
from graphview.infrastructure.state.storage import StorageScope
from graphview.observability.toolkit_logger import OutputChannel, ToolkitLogger
from graphview.observability.tracing import configure_tracing
from graphview.runtime.settings import Settings

logger = logging.getLogger("graphview.runtime")


@dataclass(slots=True)
class VisualizationRuntime:
    """Aggregated components owned by one host process."""

    settings: Settings
    logger: ToolkitLogger
    storage: StorageScope
    cache: GraphAssetCache
    manager: VisualizationManager
    _closed: bool = field(default=False, repr=False)

    async def aclose(self) -> None:
        """Tear down manager, cache client and logger in that order."""
        if self._closed:
            return
        self._closed = True
        self.manager.close()
        await self.cache.aclose()
        self.logger.dispose()


def build_runtime(
    settings: Settings | None = None,
    *,
    surfaces: RenderSurfaceProvider,
    notifier: Notifier | None = None,
    output_channel: OutputChannel | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
    logger_name: str = "graphview",
) -> VisualizationRuntime:
    """Construct the runtime shared by host commands."""
    resolved = settings or Settings.load()
    configure_tracing(service_name=resolved.service_name)

    diagnostics = build_logger(resolved.diagnostics, output_channel=output_channel, name=logger_name)
    visualization = resolved.visualization
    storage = StorageScope.at(visualization.storage_dir)
    cache = GraphAssetCache(
        visualization.assets,
        dir_name=visualization.asset_dir_name,
        timeout=visualization.download_timeout_seconds,
        transport=transport,
        retry_policy=visualization.retry_policy,
    )
    manager = VisualizationManager(
        cache=cache,
        storage=storage,
        surfaces=surfaces,
        logger=diagnostics,
        notifier=notifier,
    )
    diagnostics.verbose(
        "visualization runtime ready",
        storage_dir=str(storage.root),
        assets=[asset.name for asset in cache.assets],
    )
    return VisualizationRuntime(
        settings=resolved,
        logger=diagnostics,
        storage=storage,
        cache=cache,
        manager=manager,
    )


def build_logger(
    settings: LoggingSettings,
    *,
    output_channel: OutputChannel | None = None,
    name: str = "graphview",
) -> ToolkitLogger:
    """Create the diagnostics logger with the sinks requested in ``settings``."""
    diagnostics = ToolkitLogger(settings.log_level, name=name)
    if settings.log_file is not None:
        diagnostics.log_to_file(settings.log_file)
    if settings.log_to_console:
        diagnostics.log_to_console()
    if output_channel is not None:
        diagnostics.log_to_output_channel(output_channel)
    logger.debug(
        "built diagnostics logger",
        extra={"data": {"level": settings.log_level, "sinks": diagnostics.sink_count}},
    )
    return diagnostics


__all__ = ["VisualizationRuntime", "build_logger", "build_runtime"]
