"""Releasable listener registrations."""

from __future__ import annotations

from collections.abc import Callable


class Subscription:
    """Handle returned when a listener is registered; ``dispose`` detaches it."""

    def __init__(self, release: Callable[[], None] | None = None) -> None:
        self._release = release

    @property
    def disposed(self) -> bool:
        return self._release is None

    def dispose(self) -> None:
        release, self._release = self._release, None
        if release is not None:
            release()


__all__ = ["Subscription"]
