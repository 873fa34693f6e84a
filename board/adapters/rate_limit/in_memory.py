"""In-memory sliding-window rate limiter.

Notes:
- Per-process only: running multiple workers multiplies the effective limit.
- Thread-safe: one lock guards the whole key map, including key insertion.
- State is lost on restart.
"""

from __future__ import annotations

import threading
import time
from collections import deque
from typing import Callable

from board.adapters.rate_limit.base import AbstractRateLimiter


class InMemorySlidingWindowRateLimiter(AbstractRateLimiter):
    """Rate limiter counting admitted events in a trailing time window.

    Each key keeps the timestamps of its admitted events in chronological
    order. On every call, timestamps at or before ``now - window_seconds`` are
    discarded, and the call is admitted only if fewer than ``limit`` remain.
    A rejected call records nothing, so retrying while over the limit never
    extends the lockout.

    Keys whose history has fully expired are removed by ``sweep()``. When
    ``sweep_interval_seconds`` is set, ``allow`` triggers a sweep at most once
    per interval.

    Important:
        This limiter is per-process only. If the API runs with multiple workers
        (e.g., multiple Uvicorn/Gunicorn workers), each worker will enforce its
        own independent limits.
    """

    def __init__(
        self,
        *,
        limit: int,
        window_seconds: float,
        clock: Callable[[], float] | None = None,
        sweep_interval_seconds: float | None = None,
    ) -> None:
        """Initialize the in-memory rate limiter.

        Args:
            limit: Maximum number of admitted events per window.
            window_seconds: Length of the trailing window in seconds.
            clock: Time source returning seconds; defaults to ``time.monotonic``
                so wall-clock adjustments cannot shrink or stretch the window.
            sweep_interval_seconds: Minimum spacing between automatic sweeps;
                None disables automatic sweeping.

        Raises:
            ValueError: If limit, window_seconds or sweep_interval_seconds are invalid.
        """
        if limit < 1:
            raise ValueError("limit must be >= 1")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be > 0")
        if sweep_interval_seconds is not None and sweep_interval_seconds <= 0:
            raise ValueError("sweep_interval_seconds must be > 0")

        self._limit = limit
        self._window_seconds = window_seconds
        self._clock = clock or time.monotonic
        self._sweep_interval_seconds = sweep_interval_seconds
        self._lock = threading.Lock()
        self._events_by_key: dict[str, deque[float]] = {}
        self._last_sweep = self._clock()

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def window_seconds(self) -> float:
        return self._window_seconds

    def allow(self, key: str) -> bool:
        with self._lock:
            now = self._clock()
            cutoff = now - self._window_seconds

            if self._sweep_due(now):
                self._sweep_locked(cutoff)
                self._last_sweep = now

            events = self._events_by_key.get(key)
            if events is None:
                events = deque()
                self._events_by_key[key] = events

            # Retain strictly-after-cutoff; an event exactly one window old is expired.
            while events and events[0] <= cutoff:
                events.popleft()

            if len(events) >= self._limit:
                return False

            events.append(now)
            return True

    def sweep(self) -> int:
        with self._lock:
            now = self._clock()
            removed = self._sweep_locked(now - self._window_seconds)
            self._last_sweep = now
            return removed

    def tracked_keys(self) -> int:
        """Return how many keys currently hold state."""
        with self._lock:
            return len(self._events_by_key)

    def _sweep_due(self, now: float) -> bool:
        if self._sweep_interval_seconds is None:
            return False
        return now - self._last_sweep >= self._sweep_interval_seconds

    def _sweep_locked(self, cutoff: float) -> int:
        """Drop keys whose newest event is expired. Caller holds the lock."""
        stale = [
            key
            for key, events in self._events_by_key.items()
            if not events or events[-1] <= cutoff
        ]
        for key in stale:
            del self._events_by_key[key]
        return len(stale)
