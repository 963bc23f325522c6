"""Port for user-facing notifications raised by the host."""

from __future__ import annotations

from typing import Protocol


class Notifier(Protocol):
    """Surfaces short messages to the user."""

    def show_error(self, message: str) -> None:
        """Display ``message`` as an error notification."""


__all__ = ["Notifier"]
