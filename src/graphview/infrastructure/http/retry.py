"""Retry helpers for asset downloads."""

from __future__ import annotations

import math
import random
from dataclasses import dataclass


@dataclass(frozen=True)
class RetryPolicy:
    attempts: int
    initial_ms: int
    max_ms: int
    jitter: float  # fraction of backoff to add/subtract

    def __post_init__(self) -> None:
        if self.attempts < 1:
            raise ValueError("attempts must be at least 1")


NO_RETRY = RetryPolicy(attempts=1, initial_ms=0, max_ms=0, jitter=0.0)


def backoff_ms(attempt: int, policy: RetryPolicy) -> int:
    """Exponential backoff with jitter (attempt is zero-based)."""
    expo = policy.initial_ms * math.pow(2, attempt)
    capped = min(expo, policy.max_ms)
    jitter_span = capped * policy.jitter
    return int(max(0, capped + random.uniform(-jitter_span, jitter_span)))  # noqa: S311 - non-crypto backoff jitter


__all__ = ["NO_RETRY", "RetryPolicy", "backoff_ms"]
