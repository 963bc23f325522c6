"""Port describing the shared graph asset cache."""

from __future__ import annotations

from typing import Protocol

from graphview.infrastructure.state.storage import StorageScope


class AssetCachePort(Protocol):
    """Materializes the shared rendering assets into persistent storage."""

    async def ensure_fresh(self, storage: StorageScope) -> None:
        """Make sure every asset is present; raise ``CacheRefreshError`` otherwise."""

    @property
    def is_fresh(self) -> bool:
        """Whether assets were already materialized during this process."""


__all__ = ["AssetCachePort"]
