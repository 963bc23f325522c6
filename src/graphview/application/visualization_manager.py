"""Create-or-reuse protocol for state machine graph visualizations."""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from types import MappingProxyType
from typing import Final

from opentelemetry import trace

from graphview.application.ports.asset_cache import AssetCachePort
from graphview.application.ports.diagnostics import DiagnosticsLogger
from graphview.application.ports.notifier import Notifier
from graphview.application.ports.render_surface import RenderSurfaceProvider, SurfaceHandle
from graphview.application.ports.resource import ResourceContext
from graphview.domain.identity import ResourceIdentity, resolve_identity
from graphview.domain.session import VisualizationSession
from graphview.domain.subscription import Subscription
from graphview.errors import (
    ActivationError,
    CacheRefreshError,
    DisposedUseError,
    SessionCreationError,
)
from graphview.infrastructure.state.storage import StorageScope

RENDER_ERROR_MESSAGE: Final[str] = (
    "There was an error rendering State Machine Graph, check logs for details."
)


class VisualizationManager:
    """Keeps at most one live visualization per document.

    Reuse is decided synchronously from the registry. Creation refreshes the
    shared asset cache first (the only suspension point) and registers the
    session only once it exists, so a failure leaves nothing behind. Callers
    that arrive while a creation for the same document is in flight wait for
    it instead of starting a second one.
    """

    def __init__(
        self,
        *,
        cache: AssetCachePort,
        storage: StorageScope,
        surfaces: RenderSurfaceProvider,
        logger: DiagnosticsLogger,
        notifier: Notifier | None = None,
    ) -> None:
        self._cache = cache
        self._storage = storage
        self._surfaces = surfaces
        self._logger = logger
        self._notifier = notifier
        self._sessions: dict[ResourceIdentity, VisualizationSession] = {}
        self._subscriptions: dict[ResourceIdentity, Subscription] = {}
        self._pending: dict[ResourceIdentity, asyncio.Future[VisualizationSession]] = {}
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def managed_sessions(self) -> Mapping[ResourceIdentity, VisualizationSession]:
        """Read-only snapshot of the registry."""
        return MappingProxyType(dict(self._sessions))

    def get(self, identity: ResourceIdentity) -> VisualizationSession | None:
        return self._sessions.get(identity)

    def is_pending(self, identity: ResourceIdentity) -> bool:
        return identity in self._pending

    async def activate(self, context: ResourceContext | None) -> SurfaceHandle:
        """Show the visualization for ``context``, creating it when absent."""

        self._require_open()
        try:
            identity = resolve_identity(context)
        except ActivationError as exc:
            self._report_failure(None, exc)
            raise

        tracer = trace.get_tracer("graphview.manager")
        with tracer.start_as_current_span(
            "graphview.activate",
            attributes={"graphview.identity": identity.key},
        ) as span:
            while True:
                self._require_open()
                existing = self._sessions.get(identity)
                if existing is not None:
                    span.set_attribute("graphview.reused", True)
                    self._logger.verbose("reusing existing visualization", identity=identity.key)
                    existing.bring_to_front()
                    return existing.get_handle()

                pending = self._pending.get(identity)
                if pending is None:
                    span.set_attribute("graphview.reused", False)
                    session = await self._create(identity, context)
                    return session.get_handle()

                self._logger.debug("waiting for in-flight visualization", identity=identity.key)
                try:
                    await asyncio.shield(pending)
                except asyncio.CancelledError:
                    task = asyncio.current_task()
                    if not pending.cancelled() or (task is not None and task.cancelling()):
                        raise
                # re-check the registry: the session may already be gone again

    def notify_resource_closed(self, target: ResourceContext | ResourceIdentity) -> bool:
        """Dispose the visualization of a document that the host closed."""

        identity = target if isinstance(target, ResourceIdentity) else resolve_identity(target)
        session = self._sessions.get(identity)
        if session is None:
            return False
        self._logger.debug("document closed; disposing visualization", identity=identity.key)
        session.dispose()
        return True

    def close(self) -> None:
        """Release disposal subscriptions, then dispose the remaining sessions."""

        if self._closed:
            return
        self._closed = True
        subscriptions = list(self._subscriptions.values())
        self._subscriptions.clear()
        for subscription in subscriptions:
            subscription.dispose()
        sessions = list(self._sessions.values())
        self._sessions.clear()
        first_error: Exception | None = None
        for session in sessions:
            try:
                session.dispose()
            except Exception as exc:
                self._logger.error(exc, identity=session.identity.key)
                if first_error is None:
                    first_error = exc
        self._logger.info("visualization manager closed", disposed_sessions=len(sessions))
        if first_error is not None:
            raise first_error

    # ------------------------------------------------------------------
    # helpers

    async def _create(
        self, identity: ResourceIdentity, context: ResourceContext | None
    ) -> VisualizationSession:
        future: asyncio.Future[VisualizationSession] = asyncio.get_running_loop().create_future()
        self._pending[identity] = future
        try:
            session = await self._build_session(identity, context)
        except Exception as exc:
            future.set_exception(exc)
            # waiters re-raise on their own await; mark retrieved for the no-waiter case
            future.exception()
            if isinstance(exc, ActivationError):
                self._report_failure(identity, exc)
            raise
        except BaseException:
            # cancellation and interpreter exits: waiters retry with their own creation
            future.cancel()
            raise
        finally:
            self._pending.pop(identity, None)
        future.set_result(session)
        return session

    async def _build_session(
        self, identity: ResourceIdentity, context: ResourceContext | None
    ) -> VisualizationSession:
        self._logger.debug("refreshing graph asset cache", identity=identity.key)
        try:
            await self._cache.ensure_fresh(self._storage)
        except CacheRefreshError:
            raise
        except Exception as exc:
            raise CacheRefreshError(f"asset cache refresh failed: {exc}") from exc
        self._require_open()

        try:
            surface = self._surfaces.open(context)
        except Exception as exc:
            raise SessionCreationError(
                f"render surface failed to open for {identity}: {exc}"
            ) from exc
        try:
            session = VisualizationSession(identity, surface)
        except Exception as exc:
            surface.close()
            raise SessionCreationError(
                f"could not attach to render surface for {identity}: {exc}"
            ) from exc
        if session.disposed:
            raise SessionCreationError(f"render surface for {identity} closed during creation")

        self._sessions[identity] = session
        self._subscriptions[identity] = session.on_dispose(self._forget)
        self._logger.info("created visualization", identity=identity.key)
        return session

    def _forget(self, session: VisualizationSession) -> None:
        identity = session.identity
        if self._sessions.get(identity) is not session:
            return
        del self._sessions[identity]
        self._subscriptions.pop(identity, None)
        self._logger.debug("visualization disposed", identity=identity.key)

    def _report_failure(self, identity: ResourceIdentity | None, exc: ActivationError) -> None:
        meta = {"identity": identity.key} if identity is not None else {}
        self._logger.debug("unable to set up visualization surface", **meta)
        self._logger.error(exc, **meta)
        if self._notifier is not None:
            self._notifier.show_error(RENDER_ERROR_MESSAGE)

    def _require_open(self) -> None:
        if self._closed:
            raise DisposedUseError("visualization manager is closed")


__all__ = ["RENDER_ERROR_MESSAGE", "VisualizationManager"]
