from __future__ import annotations

import time
from abc import ABC, abstractmethod
from collections import deque
from dataclasses import dataclass
from threading import Lock
from typing import Callable, Deque, Dict, Optional

from travel_api.core.config import RATE_LIMIT_MAX_REQUESTS, RATE_LIMIT_WINDOW_SECONDS


@dataclass(frozen=True)
class RateLimitDecision:
    allowed: bool
    limit: int
    remaining: int
    retry_after_seconds: int


class RateLimiterService(ABC):
    @abstractmethod
    def check(self, *, client_key: str) -> RateLimitDecision:
        """Decide whether one more request from ``client_key`` may proceed."""


class InMemoryRateLimiterService(RateLimiterService):
    """Sliding-window limiter keyed by client address.

    Each client keeps the timestamps of its accepted requests inside the
    current window. Clients with no request left in the window are
    forgotten, so memory is bounded by the clients active in one window.
    Process-local; each worker keeps its own window.
    """

    def __init__(
        self,
        *,
        limit: int = RATE_LIMIT_MAX_REQUESTS,
        window_seconds: int = RATE_LIMIT_WINDOW_SECONDS,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        if limit < 1 or window_seconds < 1:
            raise ValueError("limit and window_seconds must be positive")
        self.limit = limit
        self.window_seconds = window_seconds
        self._clock = clock or time.monotonic
        self._hits: Dict[str, Deque[float]] = {}
        self._next_sweep = 0.0
        self._lock = Lock()

    @property
    def tracked_clients(self) -> int:
        with self._lock:
            return len(self._hits)

    def check(self, *, client_key: str) -> RateLimitDecision:
        now = self._clock()
        cutoff = now - self.window_seconds

        with self._lock:
            if now >= self._next_sweep:
                self._sweep(cutoff)
                self._next_sweep = now + self.window_seconds

            hits = self._hits.get(client_key)
            if hits is not None:
                while hits and hits[0] <= cutoff:
                    hits.popleft()

            if hits and len(hits) >= self.limit:
                return RateLimitDecision(
                    allowed=False,
                    limit=self.limit,
                    remaining=0,
                    retry_after_seconds=max(1, int(hits[0] - cutoff)),
                )

            if hits is None:
                hits = self._hits[client_key] = deque()
            hits.append(now)
            return RateLimitDecision(
                allowed=True,
                limit=self.limit,
                remaining=self.limit - len(hits),
                retry_after_seconds=0,
            )

    def _sweep(self, cutoff: float) -> None:
        # newest hit at or before the cutoff means the whole bucket expired
        expired = [key for key, hits in self._hits.items() if not hits or hits[-1] <= cutoff]
        for key in expired:
            del self._hits[key]
