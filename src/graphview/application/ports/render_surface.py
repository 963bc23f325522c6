"""Port describing the presentation layer that displays a graph."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Protocol

from graphview.application.ports.resource import ResourceContext
from graphview.domain.subscription import Subscription

SurfaceHandle = Any


class RenderSurface(Protocol):
    """A presentable panel bound to one document."""

    @property
    def handle(self) -> SurfaceHandle:
        """Opaque handle returned to activation callers."""

    def reveal(self) -> None:
        """Bring the surface back in front of the user."""

    def on_did_close(self, callback: Callable[[], None]) -> Subscription:
        """Invoke ``callback`` when the surface is closed by any actor."""

    def close(self) -> None:
        """Close the surface; closing twice is a no-op."""


class RenderSurfaceProvider(Protocol):
    """Factory creating render surfaces for documents."""

    def open(self, context: ResourceContext) -> RenderSurface:
        """Create and show a surface for ``context``."""


__all__ = ["RenderSurface", "RenderSurfaceProvider", "SurfaceHandle"]
