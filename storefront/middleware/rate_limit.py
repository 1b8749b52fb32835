"""
Storefront API — Rate Limiting
================================

What:  Per-IP fixed window rate limiter and the route guard that applies it.
Why:   Protects the resource endpoints from abuse (10 requests / 3 minutes
       per client by default).
How:   Tracks one window (start, count) per client key in memory.
Who:   The limiter is created once per application in create_app()
       (app.state.rate_limiter); `enforce_rate_limit` is attached to routes
       as the first guard of their dependency chain.

Algorithm: Fixed Window Counter
    On each check for a client key:
    1. No window yet, or now >= start + window → start a new window
       with count = 1 and allow
    2. Otherwise count += 1
    3. count > limit → deny; retry_after = start + window - now
    4. Else allow

    Exactly `limit` requests fit in a window; request limit+1 is denied.
    Denied requests still count.

    Known limitation: windows are fixed, not sliding, so a client can send
    `limit` requests at the end of one window and `limit` more at the
    start of the next.

Thread Safety:
    The check-and-increment holds a lock and never awaits, so it is atomic
    both between coroutines on the event loop and between threadpool workers.
    NOT shared between processes (multiple uvicorn workers each count alone).
"""

import logging
import math
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict

from starlette.requests import Request

from storefront.exceptions import RateLimitExceededError

logger = logging.getLogger(__name__)


@dataclass
class RateWindow:
    start: float
    count: int


@dataclass(frozen=True)
class RateLimitDecision:
    allowed: bool
    count: int
    retry_after: float = 0.0


class FixedWindowRateLimiter:
    """
    In-memory fixed window counter.

    Args:
        max_requests:   Requests permitted within one window
        window_seconds: Window length in seconds
        clock:          Monotonic time source (injectable for tests)
    """

    # Expired windows are swept every SWEEP_INTERVAL checks
    SWEEP_INTERVAL = 1000

    def __init__(
        self,
        max_requests: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ):
        if max_requests < 1:
            raise ValueError("max_requests must be at least 1")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be positive")
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._windows: Dict[str, RateWindow] = {}
        self._lock = threading.Lock()
        self._checks = 0

    def check(self, client_key: str) -> RateLimitDecision:
        """Count one request for `client_key` and decide whether it may proceed."""
        with self._lock:
            now = self._clock()
            self._checks += 1
            if self._checks % self.SWEEP_INTERVAL == 0:
                self._sweep(now)

            window = self._windows.get(client_key)
            if window is None or now >= window.start + self.window_seconds:
                self._windows[client_key] = RateWindow(start=now, count=1)
                return RateLimitDecision(allowed=True, count=1)

            window.count += 1
            if window.count > self.max_requests:
                retry_after = window.start + self.window_seconds - now
                return RateLimitDecision(
                    allowed=False,
                    count=window.count,
                    retry_after=retry_after,
                )
            return RateLimitDecision(allowed=True, count=window.count)

    def reset(self) -> None:
        with self._lock:
            self._windows.clear()

    def __len__(self) -> int:
        return len(self._windows)

    def _sweep(self, now: float) -> None:
        expired = [
            key for key, window in self._windows.items()
            if now >= window.start + self.window_seconds
        ]
        for key in expired:
            del self._windows[key]
        if expired:
            logger.debug("Cleaned up %d expired rate limit windows", len(expired))


def client_key(request: Request) -> str:
    """
    Rate limit key: the client IP.

    Behind a proxy this is the proxy's address unless uvicorn is started
    with --proxy-headers.
    """
    return request.client.host if request.client else "unknown"


async def enforce_rate_limit(request: Request) -> None:
    """
    Route guard: count the request against the app's limiter and short
    circuit with 429 when the client's window is exhausted.

    Raises:
        RateLimitExceededError: window exhausted (→ 429 + Retry-After)
    """
    limiter: FixedWindowRateLimiter = request.app.state.rate_limiter
    key = client_key(request)
    decision = limiter.check(key)
    if not decision.allowed:
        retry_after = max(1, math.ceil(decision.retry_after))
        logger.warning(
            "Rate limit exceeded for %s: %d requests in %ss window",
            key,
            decision.count,
            limiter.window_seconds,
        )
        raise RateLimitExceededError(
            retry_after=retry_after,
            context={"limit": limiter.max_requests, "window_seconds": limiter.window_seconds},
        )
