"""Leveled diagnostics logger with pluggable sinks and an explicit shutdown."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any, Protocol, TextIO

from graphview.application.ports.diagnostics import LogLevel
from graphview.errors import DisposedUseError
from graphview.observability.logging import VERBOSE, ExtrasFormatter, OtelContextLogFilter

_LEVELS: dict[str, int] = {
    "debug": logging.DEBUG,
    "verbose": VERBOSE,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}


def level_value(level: LogLevel) -> int:
    try:
        return _LEVELS[level]
    except KeyError:
        raise ValueError(f"unknown log level {level!r}; expected one of {sorted(_LEVELS)}") from None


class OutputChannel(Protocol):
    """Host output panel that accepts whole lines."""

    def append_line(self, value: str) -> None: ...


class OutputChannelHandler(logging.Handler):
    """Forward formatted records to an :class:`OutputChannel`."""

    def __init__(self, channel: OutputChannel) -> None:
        super().__init__()
        self._channel = channel

    def emit(self, record: logging.LogRecord) -> None:
        try:
            self._channel.append_line(self.format(record))
        except Exception:
            self.handleError(record)


class ToolkitLogger:
    """Owns one named logger and the sinks attached to it.

    Records from child loggers (``<name>.cache`` and so on) reach the same
    sinks. After :meth:`dispose` every write raises ``DisposedUseError``.

    The stdlib logger behind a name is process-global, so at most one live
    instance may own a given name; the name is free again after ``dispose``.
    """

    _owned_names: set[str] = set()

    def __init__(self, log_level: LogLevel = "info", *, name: str = "graphview") -> None:
        level = level_value(log_level)
        if name in ToolkitLogger._owned_names:
            raise ValueError(f"logger {name!r} is already owned by a live ToolkitLogger")
        ToolkitLogger._owned_names.add(name)
        self._level: LogLevel = log_level
        self._logger = logging.getLogger(name)
        self._logger.propagate = False
        self._logger.setLevel(level)
        self._handlers: list[logging.Handler] = []
        self._disposed = False

    @property
    def name(self) -> str:
        return self._logger.name

    @property
    def level(self) -> LogLevel:
        return self._level

    @property
    def disposed(self) -> bool:
        return self._disposed

    @property
    def sink_count(self) -> int:
        return len(self._handlers)

    def set_log_level(self, log_level: LogLevel) -> None:
        new_value = level_value(log_level)
        # explicit levels so both lines are emitted regardless of the threshold
        self._write(self._level, f"Setting log level to: {log_level}", {})
        self._logger.setLevel(new_value)
        self._level = log_level
        self._write(log_level, f"Log level is now: {log_level}", {})

    # ------------------------------------------------------------------
    # sinks

    def log_to_file(self, path: Path | str) -> None:
        target = Path(path).expanduser()
        self._require_live()
        target.parent.mkdir(parents=True, exist_ok=True)
        self._add_handler(logging.FileHandler(target, encoding="utf-8"))

    def log_to_console(self, stream: TextIO | None = None) -> None:
        self._add_handler(logging.StreamHandler(stream or sys.stdout))

    def log_to_output_channel(self, channel: OutputChannel) -> None:
        self._add_handler(OutputChannelHandler(channel))

    # ------------------------------------------------------------------
    # leveled writes

    def debug(self, message: str | BaseException, **meta: Any) -> None:
        self._write("debug", message, meta)

    def verbose(self, message: str | BaseException, **meta: Any) -> None:
        self._write("verbose", message, meta)

    def info(self, message: str | BaseException, **meta: Any) -> None:
        self._write("info", message, meta)

    def warn(self, message: str | BaseException, **meta: Any) -> None:
        self._write("warn", message, meta)

    def error(self, message: str | BaseException, **meta: Any) -> None:
        self._write("error", message, meta)

    def dispose(self) -> None:
        """Flush and release every sink; later calls are no-ops."""
        if self._disposed:
            return
        self._disposed = True
        ToolkitLogger._owned_names.discard(self._logger.name)
        handlers, self._handlers = self._handlers, []
        for handler in handlers:
            self._logger.removeHandler(handler)
            handler.flush()
            handler.close()

    # ------------------------------------------------------------------
    # helpers

    def _add_handler(self, handler: logging.Handler) -> None:
        self._require_live()
        handler.setFormatter(ExtrasFormatter())
        handler.addFilter(OtelContextLogFilter())
        self._logger.addHandler(handler)
        self._handlers.append(handler)

    def _write(self, level: LogLevel, message: str | BaseException, meta: dict[str, Any]) -> None:
        self._require_live()
        extra = {"data": meta} if meta else None
        if isinstance(message, BaseException):
            self._logger.log(
                level_value(level),
                "%s: %s",
                type(message).__name__,
                message,
                exc_info=(type(message), message, message.__traceback__),
                extra=extra,
            )
        else:
            self._logger.log(level_value(level), message, extra=extra)

    def _require_live(self) -> None:
        if self._disposed:
            raise DisposedUseError("Cannot write to disposed logger")


__all__ = ["OutputChannel", "OutputChannelHandler", "ToolkitLogger", "level_value"]
