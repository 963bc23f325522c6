"""Filesystem-backed key/value state kept inside the storage scope."""

from __future__ import annotations

import json
import os
from pathlib import Path


class FileMemento:
    """Persist small string values across process restarts."""

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    # ------------------------------------------------------------------
    # public API

    def get(self, key: str, default: str | None = None) -> str | None:
        """Return the stored value for ``key`` or ``default``."""

        return self._read().get(key, default)

    def update(self, key: str, value: str | None) -> None:
        """Store ``value`` under ``key``; ``None`` removes the key."""

        if not key:
            raise ValueError("memento key must be non-empty")
        values = self._read()
        if value is None:
            values.pop(key, None)
        else:
            values[key] = value
        self._write(values)

    def keys(self) -> tuple[str, ...]:
        return tuple(self._read())

    # ------------------------------------------------------------------
    # helpers

    def _read(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        text = self._path.read_text(encoding="utf-8").strip()
        if not text:
            return {}
        try:
            payload = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ValueError(f"memento file {self._path} is not valid JSON") from exc
        if not isinstance(payload, dict) or not all(
            isinstance(value, str) for value in payload.values()
        ):
            raise ValueError(f"memento file {self._path} must contain a string mapping")
        return payload

    def _write(self, values: dict[str, str]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = Path(f"{self._path}.tmp")
        tmp_path.write_text(json.dumps(values, sort_keys=True, indent=2), encoding="utf-8")
        os.replace(tmp_path, self._path)


__all__ = ["FileMemento"]
