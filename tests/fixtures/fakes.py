from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from graphview.domain.subscription import Subscription
from graphview.errors import CacheRefreshError
from graphview.infrastructure.state.storage import StorageScope


@dataclass
class FakeDocument:
    """Resource context for an open document."""

    uri: str
    text: str = '{"StartAt": "Hello", "States": {"Hello": {"Type": "Pass", "End": true}}}'


class FakeSurface:
    """In-memory render surface that records reveal/close calls."""

    def __init__(self, handle: str) -> None:
        self._handle = handle
        self.reveal_count = 0
        self.close_count = 0
        self.closed = False
        self._listeners: list[Callable[[], None]] = []

    @property
    def handle(self) -> str:
        return self._handle

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def reveal(self) -> None:
        self.reveal_count += 1

    def on_did_close(self, callback: Callable[[], None]) -> Subscription:
        self._listeners.append(callback)
        return Subscription(lambda: self._listeners.remove(callback))

    def close(self) -> None:
        self.close_count += 1
        if self.closed:
            return
        self.closed = True
        for listener in list(self._listeners):
            listener()

    def user_close(self) -> None:
        """Simulate the user closing the panel."""
        self.close()


class FakeSurfaceProvider:
    """Render surface provider that hands out numbered panels."""

    def __init__(self, *, error: Exception | None = None) -> None:
        self.error = error
        self.opened: list[FakeSurface] = []
        self.contexts: list[Any] = []

    def open(self, context: Any) -> FakeSurface:
        self.contexts.append(context)
        if self.error is not None:
            raise self.error
        surface = FakeSurface(f"panel-{len(self.opened) + 1}")
        self.opened.append(surface)
        return surface


class FakeAssetCache:
    """Asset cache double with controllable suspension and failures."""

    def __init__(self, *, failures: int = 0, gate: asyncio.Event | None = None) -> None:
        self.failures = failures
        self.gate = gate
        self.calls = 0
        self.materializations = 0
        self._fresh = False

    @property
    def is_fresh(self) -> bool:
        return self._fresh

    async def ensure_fresh(self, storage: StorageScope) -> None:
        self.calls += 1
        if self.gate is not None:
            await self.gate.wait()
        if self.failures > 0:
            self.failures -= 1
            raise CacheRefreshError("download of graph.js returned 503", asset="graph.js")
        if not self._fresh:
            self.materializations += 1
            self._fresh = True


class RecordingNotifier:
    def __init__(self) -> None:
        self.messages: list[str] = []

    def show_error(self, message: str) -> None:
        self.messages.append(message)


class RecordingLogger:
    """Diagnostics logger that keeps every call for assertions."""

    def __init__(self) -> None:
        self.records: list[tuple[str, str | BaseException, dict[str, Any]]] = []

    def _record(self, level: str, message: str | BaseException, meta: dict[str, Any]) -> None:
        self.records.append((level, message, meta))

    def debug(self, message: str | BaseException, **meta: Any) -> None:
        self._record("debug", message, meta)

    def verbose(self, message: str | BaseException, **meta: Any) -> None:
        self._record("verbose", message, meta)

    def info(self, message: str | BaseException, **meta: Any) -> None:
        self._record("info", message, meta)

    def warn(self, message: str | BaseException, **meta: Any) -> None:
        self._record("warn", message, meta)

    def error(self, message: str | BaseException, **meta: Any) -> None:
        self._record("error", message, meta)

    def levels(self, level: str) -> list[str | BaseException]:
        return [message for record_level, message, _ in self.records if record_level == level]


class RecordingChannel:
    def __init__(self) -> None:
        self.lines: list[str] = []

    def append_line(self, value: str) -> None:
        self.lines.append(value)


__all__ = [
    "FakeAssetCache",
    "FakeDocument",
    "FakeSurface",
    "FakeSurfaceProvider",
    "RecordingChannel",
    "RecordingLogger",
    "RecordingNotifier",
]
