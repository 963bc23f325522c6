"""Shared on-disk cache for the state machine graph rendering assets."""

from __future__ import annotations

import asyncio
import logging
import os
import time
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import unquote, urlsplit

import httpx
from opentelemetry import trace

from graphview.errors import CacheRefreshError
from graphview.infrastructure.http.retry import NO_RETRY, RetryPolicy, backoff_ms
from graphview.infrastructure.state.storage import StorageScope

_LOGGER = logging.getLogger("graphview.cache")

DEFAULT_ASSET_DIR_NAME = "visualization"


@dataclass(frozen=True, slots=True)
class CachedAsset:
    """One named file materialized into the storage scope."""

    name: str
    source_url: str
    memento_key: str

    def __post_init__(self) -> None:
        if not self.name or "/" in self.name or self.name in {".", ".."}:
            raise ValueError(f"asset name {self.name!r} must be a plain file name")
        if not self.source_url:
            raise ValueError(f"asset {self.name} requires a source url")
        if not self.memento_key:
            raise ValueError(f"asset {self.name} requires a memento key")


class GraphAssetCache:
    """Materializes the graph script and stylesheet once per process.

    A refresh validates each asset against the source URL recorded in the
    storage memento; files that are present and were fetched from the same
    URL are left alone. A failed refresh keeps the cache stale so that the
    next caller tries again.
    """

    def __init__(
        self,
        assets: Sequence[CachedAsset],
        *,
        dir_name: str = DEFAULT_ASSET_DIR_NAME,
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        retry_policy: RetryPolicy | None = None,
    ) -> None:
        if not assets:
            raise ValueError("at least one asset must be configured")
        names = [asset.name for asset in assets]
        if len(set(names)) != len(names):
            raise ValueError(f"asset names must be unique: {names}")
        self._assets = tuple(assets)
        self._dir_name = dir_name
        self._owns_client = client is None
        self._client: httpx.AsyncClient = client or httpx.AsyncClient(
            timeout=timeout,
            follow_redirects=True,
            transport=transport,
        )
        self._retry_policy = retry_policy or NO_RETRY
        self._lock = asyncio.Lock()
        self._fresh = False
        self._refresh_count = 0

    @property
    def assets(self) -> tuple[CachedAsset, ...]:
        return self._assets

    @property
    def is_fresh(self) -> bool:
        return self._fresh

    @property
    def refresh_count(self) -> int:
        """Number of materialization passes started by this cache."""
        return self._refresh_count

    def asset_path(self, storage: StorageScope, name: str) -> Path:
        for asset in self._assets:
            if asset.name == name:
                return storage.path_for(self._dir_name, asset.name)
        raise KeyError(name)

    async def ensure_fresh(self, storage: StorageScope) -> None:
        """Materialize every asset into ``storage`` unless already done."""

        if self._fresh:
            return
        async with self._lock:
            if self._fresh:
                return
            self._refresh_count += 1
            start = time.perf_counter()
            tracer = trace.get_tracer("graphview.cache")
            with tracer.start_as_current_span(
                "graphview.cache.refresh",
                attributes={"graphview.cache.asset_count": len(self._assets)},
            ) as span:
                updated: list[str] = []
                try:
                    for asset in self._assets:
                        if await self._refresh_asset(storage, asset):
                            updated.append(asset.name)
                except CacheRefreshError as exc:
                    span.set_attributes({"graphview.cache.error": exc.asset or "unknown"})
                    raise
                self._fresh = True
            _LOGGER.debug(
                "graphview.cache.refresh.complete",
                extra={
                    "data": {
                        "root": str(storage.root),
                        "updated": tuple(updated),
                        "elapsed_ms": round((time.perf_counter() - start) * 1000, 2),
                    }
                },
            )

    def reset(self) -> None:
        """Forget freshness so the next ``ensure_fresh`` validates again."""
        self._fresh = False

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    # ------------------------------------------------------------------
    # helpers

    async def _refresh_asset(self, storage: StorageScope, asset: CachedAsset) -> bool:
        target = storage.path_for(self._dir_name, asset.name)
        try:
            last_url = storage.state.get(asset.memento_key)
        except (OSError, ValueError) as exc:
            raise CacheRefreshError(
                f"could not read cache state for {asset.name}: {exc}", asset=asset.name
            ) from exc
        if last_url == asset.source_url and target.is_file():
            return False

        try:
            payload = await self._fetch(asset)
            _write_atomic(target, payload)
            storage.state.update(asset.memento_key, asset.source_url)
        except (httpx.HTTPError, OSError, ValueError) as exc:
            raise CacheRefreshError(
                f"failed to refresh graph asset {asset.name}: {exc}", asset=asset.name
            ) from exc
        _LOGGER.info(
            "graphview.cache.asset.updated",
            extra={
                "data": {
                    "asset": asset.name,
                    "source_url": asset.source_url,
                    "previous_url": last_url,
                    "size_bytes": len(payload),
                }
            },
        )
        return True

    async def _fetch(self, asset: CachedAsset) -> bytes:
        parts = urlsplit(asset.source_url)
        scheme = parts.scheme.lower()
        if scheme == "file":
            return Path(unquote(parts.path)).read_bytes()
        if scheme not in {"http", "https"}:
            raise CacheRefreshError(
                f"unsupported source scheme {parts.scheme!r} for {asset.name}", asset=asset.name
            )
        return await self._download(asset)

    async def _download(self, asset: CachedAsset) -> bytes:
        policy = self._retry_policy
        for attempt in range(policy.attempts):
            last_attempt = attempt + 1 >= policy.attempts
            try:
                response = await self._client.get(asset.source_url)
            except httpx.TransportError:
                if last_attempt:
                    raise
                await self._sleep(attempt, asset, reason="transport_error")
                continue
            if response.status_code == httpx.codes.OK:
                return response.content
            if response.status_code >= 500 and not last_attempt:
                await self._sleep(attempt, asset, reason=f"status_{response.status_code}")
                continue
            raise CacheRefreshError(
                f"download of {asset.name} returned {response.status_code}", asset=asset.name
            )
        raise AssertionError("unreachable")  # pragma: no cover

    async def _sleep(self, attempt: int, asset: CachedAsset, *, reason: str) -> None:
        delay_ms = backoff_ms(attempt, self._retry_policy)
        _LOGGER.warning(
            "graphview.cache.download.retry",
            extra={
                "data": {
                    "asset": asset.name,
                    "attempt": attempt + 1,
                    "reason": reason,
                    "wait_ms": delay_ms,
                }
            },
        )
        await asyncio.sleep(delay_ms / 1000)


def _write_atomic(path: Path, payload: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = Path(f"{path}.tmp")
    tmp_path.write_bytes(payload)
    os.replace(tmp_path, path)


__all__ = ["DEFAULT_ASSET_DIR_NAME", "CachedAsset", "GraphAssetCache"]
