"""Lifecycle of a single live visualization."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

from graphview.domain.identity import ResourceIdentity
from graphview.domain.subscription import Subscription
from graphview.errors import DisposedUseError

if TYPE_CHECKING:
    from graphview.application.ports.render_surface import RenderSurface, SurfaceHandle

DisposeListener = Callable[["VisualizationSession"], None]


class VisualizationSession:
    """One render surface bound to one document identity.

    A session moves from live to disposed exactly once. Disposal may be
    triggered by the surface closing or by the document closing; both paths
    end in :meth:`dispose`, and listeners are notified a single time.
    """

    def __init__(self, identity: ResourceIdentity, surface: RenderSurface) -> None:
        self._identity = identity
        self._surface = surface
        self._disposed = False
        self._listeners: list[DisposeListener] = []
        self._surface_subscription = surface.on_did_close(self.dispose)

    @property
    def identity(self) -> ResourceIdentity:
        return self._identity

    @property
    def disposed(self) -> bool:
        return self._disposed

    @property
    def handle(self) -> SurfaceHandle:
        return self.get_handle()

    def get_handle(self) -> SurfaceHandle:
        """Return the live presentation handle."""
        self._require_live("get_handle")
        return self._surface.handle

    def bring_to_front(self) -> None:
        """Ask the surface to regain focus."""
        self._require_live("bring_to_front")
        self._surface.reveal()

    def on_dispose(self, listener: DisposeListener) -> Subscription:
        """Register ``listener`` to run once when the session is disposed."""
        self._require_live("on_dispose")
        self._listeners.append(listener)
        return Subscription(lambda: self._remove_listener(listener))

    def dispose(self) -> None:
        """Tear the session down; repeated calls are no-ops."""
        if self._disposed:
            return
        self._disposed = True
        self._surface_subscription.dispose()
        try:
            self._surface.close()
        finally:
            self._notify_disposed()

    def _notify_disposed(self) -> None:
        listeners, self._listeners = self._listeners, []
        first_error: Exception | None = None
        for listener in listeners:
            try:
                listener(self)
            except Exception as exc:
                if first_error is None:
                    first_error = exc
        if first_error is not None:
            raise first_error

    def _remove_listener(self, listener: DisposeListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _require_live(self, operation: str) -> None:
        if self._disposed:
            raise DisposedUseError(
                f"cannot call {operation} on disposed visualization for {self._identity}"
            )

    def __repr__(self) -> str:
        state = "disposed" if self._disposed else "live"
        return f"VisualizationSession(identity={self._identity.key!r}, state={state})"


__all__ = ["DisposeListener", "VisualizationSession"]
