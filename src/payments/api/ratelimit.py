"""Per-client fixed-window rate limiting.

Each limiter counts requests per key (client IP) inside fixed windows of
``window_seconds``. Counters live in process memory; there is no
coordination between processes.
"""

import math
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

import structlog

logger = structlog.get_logger(__name__)


@dataclass
class _Window:
    started_at: float
    count: int


@dataclass(frozen=True)
class RateLimitDecision:
    allowed: bool
    remaining: int
    retry_after: int


class FixedWindowRateLimiter:
    def __init__(
        self,
        max_requests: int,
        window_seconds: float,
        name: str = "default",
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_requests <= 0 or window_seconds <= 0:
            raise ValueError("max_requests and window_seconds must be positive")
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.name = name
        self._clock = clock
        self._windows: dict[str, _Window] = {}
        self._lock = threading.Lock()

    def hit(self, key: str) -> RateLimitDecision:
        """Count one request for ``key`` and say whether it may proceed."""
        now = self._clock()
        with self._lock:
            window = self._windows.get(key)
            if window is None or now - window.started_at >= self.window_seconds:
                window = _Window(started_at=now, count=0)
                self._windows[key] = window
                self._evict_expired(now)

            window.count += 1
            retry_after = max(1, math.ceil(window.started_at + self.window_seconds - now))
            if window.count > self.max_requests:
                logger.warning("rate_limit_exceeded", limiter=self.name, client=key, count=window.count)
                return RateLimitDecision(allowed=False, remaining=0, retry_after=retry_after)
            return RateLimitDecision(
                allowed=True,
                remaining=self.max_requests - window.count,
                retry_after=retry_after,
            )

    def reset(self) -> None:
        with self._lock:
            self._windows.clear()

    def _evict_expired(self, now: float) -> None:
        expired = [key for key, w in self._windows.items() if now - w.started_at >= self.window_seconds]
        for key in expired:
            del self._windows[key]


class RateLimitExceeded(Exception):
    def __init__(self, limiter: str, retry_after: int, message: str) -> None:
        super().__init__(message)
        self.limiter = limiter
        self.retry_after = retry_after
        self.message = message
