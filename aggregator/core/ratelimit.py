"""Per-client fixed-window request counting for inbound gateway requests.

Each client key gets ``limit`` requests per window of ``window_seconds``.
The window starts on the first request seen for the key and is replaced
wholesale (count back to zero) once the current time passes its reset time.
A request that finds the quota used up is denied without touching the count.

The limiter lives on ``app.state`` and is never awaited inside, so on a
single event loop no lock is needed. Entries are only dropped by
``sweep()``, which runs when the mapping reaches ``max_keys``.
"""
from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from fastapi import Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

RATE_LIMIT_MESSAGE = "Too many requests, please wait before retrying."


@dataclass
class RateLimitEntry:
    count: int
    reset_time: float


@dataclass(frozen=True)
class RateLimitDecision:
    allowed: bool
    remaining: int
    reset_time: float

    def retry_after(self, now: float) -> int:
        return max(0, math.ceil(self.reset_time - now))


class FixedWindowRateLimiter:
    def __init__(
        self,
        limit: int = 5,
        window_seconds: float = 60.0,
        *,
        max_keys: Optional[int] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        if limit < 1:
            raise ValueError("limit must be at least 1")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be positive")
        self.limit = limit
        self.window_seconds = window_seconds
        self.max_keys = max_keys
        self.clock = clock
        self._entries: Dict[str, RateLimitEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, key: str) -> Optional[RateLimitEntry]:
        return self._entries.get(key)

    def check(self, key: str) -> RateLimitDecision:
        now = self.clock()
        entry = self._entries.get(key)
        if entry is None or now > entry.reset_time:
            if entry is None and self.max_keys is not None and len(self._entries) >= self.max_keys:
                self.sweep(now)
            entry = RateLimitEntry(count=0, reset_time=now + self.window_seconds)
            self._entries[key] = entry

        if entry.count >= self.limit:
            return RateLimitDecision(allowed=False, remaining=0, reset_time=entry.reset_time)

        entry.count += 1
        return RateLimitDecision(allowed=True, remaining=self.limit - entry.count, reset_time=entry.reset_time)

    def sweep(self, now: Optional[float] = None) -> int:
        """Drop entries whose window has already expired."""
        now = self.clock() if now is None else now
        expired = [key for key, entry in self._entries.items() if now > entry.reset_time]
        for key in expired:
            del self._entries[key]
        return len(expired)

    def reset(self) -> None:
        self._entries.clear()


def client_key(request: Request) -> str:
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


class RateLimitExceeded(Exception):
    def __init__(self, decision: RateLimitDecision, retry_after: int):
        self.decision = decision
        self.retry_after = retry_after
        super().__init__(RATE_LIMIT_MESSAGE)


async def enforce_rate_limit(request: Request) -> None:
    """FastAPI dependency guarding a route with the app's limiter."""
    limiter: FixedWindowRateLimiter = request.app.state.rate_limiter
    key = client_key(request)
    decision = limiter.check(key)
    if not decision.allowed:
        retry_after = decision.retry_after(limiter.clock())
        logger.info("rate limit hit for %s on %s (retry in %ss)", key, request.url.path, retry_after)
        raise RateLimitExceeded(decision, retry_after)


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    return JSONResponse(
        status_code=429,
        content={"error": RATE_LIMIT_MESSAGE},
        headers={"Retry-After": str(exc.retry_after)},
    )
