"""Port describing the document a visualization is requested for."""

from __future__ import annotations

from typing import Protocol


class ResourceContext(Protocol):
    """Host-side view of an open document."""

    @property
    def uri(self) -> str:
        """Canonical URI (or absolute path) of the document."""

    @property
    def text(self) -> str:
        """Current document contents, handed to the render surface."""


__all__ = ["ResourceContext"]
