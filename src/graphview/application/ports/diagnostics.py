"""Port for the leveled diagnostics logger injected into the manager."""

from __future__ import annotations

from typing import Any, Literal, Protocol

LogLevel = Literal["debug", "verbose", "info", "warn", "error"]


class DiagnosticsLogger(Protocol):
    """Leveled logger accepting a message or an exception plus metadata."""

    def debug(self, message: str | BaseException, **meta: Any) -> None: ...

    def verbose(self, message: str | BaseException, **meta: Any) -> None: ...

    def info(self, message: str | BaseException, **meta: Any) -> None: ...

    def warn(self, message: str | BaseException, **meta: Any) -> None: ...

    def error(self, message: str | BaseException, **meta: Any) -> None: ...


__all__ = ["DiagnosticsLogger", "LogLevel"]
