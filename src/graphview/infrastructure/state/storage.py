"""Persistent storage scope handed to the asset cache."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Final

from graphview.infrastructure.state.memento import FileMemento

MEMENTO_FILE_NAME: Final[str] = "global-state.json"


@dataclass(frozen=True, slots=True)
class StorageScope:
    """Directory for cached files plus a durable key/value memento."""

    root: Path
    state: FileMemento

    @classmethod
    def at(cls, root: Path) -> StorageScope:
        """Build a scope rooted at ``root`` with the default memento file."""
        resolved = root.expanduser()
        return cls(root=resolved, state=FileMemento(resolved / MEMENTO_FILE_NAME))

    def path_for(self, *parts: str) -> Path:
        return self.root.joinpath(*parts)


__all__ = ["MEMENTO_FILE_NAME", "StorageScope"]
