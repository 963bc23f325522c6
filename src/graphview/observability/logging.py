"""Shared logging helpers (formatter, trace-context filter, JSON sanitizer)."""

from __future__ import annotations

import json
import logging
import types
from collections.abc import Mapping
from dataclasses import asdict, is_dataclass
from typing import Any, Final

from opentelemetry import trace

VERBOSE: Final[int] = 15
logging.addLevelName(VERBOSE, "VERBOSE")

LINE_FORMAT: Final[str] = "%(asctime)s [%(levelname)s]: %(message)s"
DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"


def _compact_json(value: Any, *, limit: int = 512) -> str:
    encoded = json.dumps(value, sort_keys=True, separators=(",", ":"))
    if len(encoded) <= limit:
        return encoded
    return encoded[:limit] + "... (truncated)"


class ExtrasFormatter(logging.Formatter):
    """Append structured `data` payloads when present."""

    def __init__(self, fmt: str = LINE_FORMAT, datefmt: str = DATE_FORMAT) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt)

    def format(self, record: logging.LogRecord) -> str:
        formatted = super().format(record)
        record_data = record.__dict__.get("data")
        if record_data:
            return f"{formatted} | data={_compact_json(_sanitize_for_json(record_data))}"
        return formatted


class OtelContextLogFilter(logging.Filter):
    """Inject the active OpenTelemetry trace and span ids into `data`."""

    def filter(self, record: logging.LogRecord) -> bool:  # pragma: no cover - thin wrapper
        span_context = trace.get_current_span().get_span_context()
        if not span_context.is_valid:
            return True
        record_dict = record.__dict__
        data = record_dict.get("data")
        if data is None:
            merged: dict[str, Any] = {}
        elif isinstance(data, Mapping):
            merged = dict(data)
        else:
            merged = {"data": data}
        merged.setdefault("trace_id", f"{span_context.trace_id:032x}")
        merged.setdefault("span_id", f"{span_context.span_id:016x}")
        record_dict["data"] = merged
        return True


def _sanitize_for_json(value: Any, depth: int = 10, max_items: int = 200) -> Any:
    """Return a JSON-serializable copy; fallback to string for unknowns."""

    if depth <= 0:
        return "<depth_exceeded>"

    if value is None or isinstance(value, (str, int, float, bool)):
        return value

    if isinstance(value, (bytes, bytearray)):
        return f"<bytes len={len(value)}>"

    if isinstance(value, (types.BuiltinFunctionType, types.FunctionType, types.MethodType)):
        return f"<callable {value.__name__}>"
    if callable(value):
        return f"<callable {value.__class__.__name__}>"

    if is_dataclass(value) and not isinstance(value, type):
        return _sanitize_for_json(asdict(value), depth - 1, max_items)

    if isinstance(value, Mapping):
        result: dict[str, Any] = {}
        for idx, (k, v) in enumerate(value.items()):
            if idx >= max_items:
                result["<truncated>"] = f"...{len(value) - idx} more"
                break
            result[str(k)] = _sanitize_for_json(v, depth - 1, max_items)
        return result

    if isinstance(value, (list, tuple, set)):
        out = []
        iterable = list(value)
        for idx, item in enumerate(iterable):
            if idx >= max_items:
                out.append(f"... {len(iterable) - idx} more")
                break
            out.append(_sanitize_for_json(item, depth - 1, max_items))
        return out

    return str(value)


__all__ = [
    "DATE_FORMAT",
    "LINE_FORMAT",
    "VERBOSE",
    "ExtrasFormatter",
    "OtelContextLogFilter",
]
