"""Process-wide sliding-window admission gate."""

from __future__ import annotations

import time
from collections import deque
from typing import Callable, Deque

from gemini_web_search.config import RateLimitSettings


class RateLimiter:
    """Admit at most ``max_requests`` calls within any trailing window.

    Rejected calls are not recorded, so a burst of rejections does not extend
    the lockout.
    """

    def __init__(
        self,
        *,
        max_requests: int = 30,
        window_seconds: float = 60,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._events: Deque[float] = deque()

    @classmethod
    def from_settings(
        cls, settings: RateLimitSettings, clock: Callable[[], float] = time.monotonic
    ) -> "RateLimiter":
        return cls(
            max_requests=settings.max_requests,
            window_seconds=settings.window_seconds,
            clock=clock,
        )

    def check(self) -> bool:
        now = self._clock()
        bucket = self._events

        while bucket and now - bucket[0] >= self.window_seconds:
            bucket.popleft()

        if len(bucket) >= self.max_requests:
            return False

        bucket.append(now)
        return True

    def pending(self) -> int:
        """Number of admitted calls still inside the window."""

        now = self._clock()
        return sum(1 for ts in self._events if now - ts < self.window_seconds)

    def reset(self) -> None:
        self._events.clear()


__all__ = ["RateLimiter"]
