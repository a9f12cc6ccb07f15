"""In-memory sliding-window rate limiter, keyed by client."""

from __future__ import annotations

import threading
import time
from collections import defaultdict, deque
from collections.abc import Callable

# Number of tracked keys above which expired ones are dropped
SWEEP_THRESHOLD = 10_000


class RateLimiter:
    """Allow at most ``max_requests`` per ``window_seconds`` per key.

    State lives in process memory; each worker process limits independently.
    """

    def __init__(
        self,
        max_requests: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ):
        if max_requests < 1 or window_seconds <= 0:
            raise ValueError("max_requests must be >= 1 and window_seconds > 0")
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._hits: dict[str, deque[float]] = defaultdict(deque)
        self._lock = threading.Lock()

    def hit(self, key: str) -> float:
        """Record a request. Returns 0 if allowed, else seconds until the next slot frees."""
        now = self._clock()
        with self._lock:
            hits = self._hits[key]
            cutoff = now - self.window_seconds
            while hits and hits[0] <= cutoff:
                hits.popleft()
            if len(hits) >= self.max_requests:
                return hits[0] + self.window_seconds - now
            hits.append(now)
            if len(self._hits) > SWEEP_THRESHOLD:
                self._sweep(cutoff)
            return 0.0

    def _sweep(self, cutoff: float) -> None:
        """Drop keys whose newest hit is outside the window. Caller holds the lock."""
        stale = [key for key, hits in self._hits.items() if not hits or hits[-1] <= cutoff]
        for key in stale:
            del self._hits[key]

    def reset(self) -> None:
        with self._lock:
            self._hits.clear()
