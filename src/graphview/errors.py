"""Exceptions raised by the visualization session registry."""

from __future__ import annotations


class GraphviewError(Exception):
    """Base class for graphview failures."""


class ActivationError(GraphviewError):
    """Raised when a visualization could not be activated for a document."""


class IdentityResolutionError(ActivationError):
    """Raised when a resource context cannot be reduced to a canonical identity."""


class CacheRefreshError(ActivationError):
    """Raised when the shared graph assets could not be materialized."""

    def __init__(self, message: str, *, asset: str | None = None) -> None:
        super().__init__(message)
        self.asset = asset


class SessionCreationError(ActivationError):
    """Raised when the render surface failed to open after a successful refresh."""


class DisposedUseError(GraphviewError, RuntimeError):
    """Raised when a disposed session, manager or logger is used again."""


__all__ = [
    "ActivationError",
    "CacheRefreshError",
    "DisposedUseError",
    "GraphviewError",
    "IdentityResolutionError",
    "SessionCreationError",
]
