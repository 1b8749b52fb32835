"""
Storefront API — Rate Limiter Unit Tests
==========================================

What:  Tests for FixedWindowRateLimiter and the enforce_rate_limit guard.
How:   Drives the limiter with a FakeClock, so no test sleeps.

What we test:
    ✅ Exactly max_requests fit in one window; the next is denied
    ✅ retry_after is the time left in the current window
    ✅ A new window starts once the old one has fully elapsed
    ✅ Clients are counted independently
    ✅ Expired windows are swept
    ✅ Concurrent checks from many threads admit exactly max_requests
    ✅ The guard raises RateLimitExceededError with a Retry-After header
"""

import threading
from concurrent.futures import ThreadPoolExecutor
from types import SimpleNamespace

import pytest

from storefront.exceptions import RateLimitExceededError
from storefront.middleware.rate_limit import FixedWindowRateLimiter, enforce_rate_limit


class TestFixedWindow:
    """Counting within and across windows."""

    def test_allows_exactly_max_requests(self, clock):
        limiter = FixedWindowRateLimiter(max_requests=10, window_seconds=180, clock=clock)

        decisions = [limiter.check("10.0.0.1") for _ in range(10)]

        assert all(d.allowed for d in decisions)
        assert [d.count for d in decisions] == list(range(1, 11))

    def test_denies_request_after_max(self, clock):
        limiter = FixedWindowRateLimiter(max_requests=10, window_seconds=180, clock=clock)
        for _ in range(10):
            limiter.check("10.0.0.1")

        decision = limiter.check("10.0.0.1")

        assert decision.allowed is False
        assert decision.count == 11

    def test_denied_requests_still_count(self, clock):
        limiter = FixedWindowRateLimiter(max_requests=2, window_seconds=60, clock=clock)
        for _ in range(5):
            limiter.check("a")

        assert limiter.check("a").count == 6

    def test_retry_after_is_time_left_in_window(self, clock):
        limiter = FixedWindowRateLimiter(max_requests=1, window_seconds=180, clock=clock)
        limiter.check("a")
        clock.advance(30)

        decision = limiter.check("a")

        assert decision.allowed is False
        assert decision.retry_after == pytest.approx(150)

    def test_window_resets_after_elapsing(self, clock):
        limiter = FixedWindowRateLimiter(max_requests=2, window_seconds=180, clock=clock)
        limiter.check("a")
        limiter.check("a")
        assert limiter.check("a").allowed is False

        clock.advance(180)
        decision = limiter.check("a")

        assert decision.allowed is True
        assert decision.count == 1

    def test_window_still_active_just_before_boundary(self, clock):
        limiter = FixedWindowRateLimiter(max_requests=1, window_seconds=180, clock=clock)
        limiter.check("a")
        clock.advance(179.9)

        assert limiter.check("a").allowed is False

    def test_clients_are_independent(self, clock):
        limiter = FixedWindowRateLimiter(max_requests=1, window_seconds=60, clock=clock)
        limiter.check("a")

        assert limiter.check("a").allowed is False
        assert limiter.check("b").allowed is True

    def test_reset_clears_all_windows(self, clock):
        limiter = FixedWindowRateLimiter(max_requests=1, window_seconds=60, clock=clock)
        limiter.check("a")
        limiter.reset()

        assert len(limiter) == 0
        assert limiter.check("a").allowed is True


class TestSweep:
    """Expired windows do not accumulate."""

    def test_expired_windows_are_swept(self, clock):
        limiter = FixedWindowRateLimiter(max_requests=5, window_seconds=60, clock=clock)
        limiter.SWEEP_INTERVAL = 3
        limiter.check("a")
        limiter.check("b")
        assert len(limiter) == 2

        clock.advance(61)
        limiter.check("c")  # third check triggers the sweep

        assert len(limiter) == 1


class TestConcurrency:

    def test_threads_never_exceed_limit(self, clock):
        limiter = FixedWindowRateLimiter(max_requests=10, window_seconds=180, clock=clock)
        barrier = threading.Barrier(8)

        def hammer():
            barrier.wait()
            return [limiter.check("10.0.0.1") for _ in range(50)]

        with ThreadPoolExecutor(max_workers=8) as pool:
            futures = [pool.submit(hammer) for _ in range(8)]
            decisions = [d for f in futures for d in f.result()]

        assert len(decisions) == 400
        assert sum(d.allowed for d in decisions) == 10
        assert sorted(d.count for d in decisions) == list(range(1, 401))


class TestConstruction:

    @pytest.mark.parametrize("max_requests,window", [(0, 60), (-1, 60), (5, 0), (5, -1)])
    def test_rejects_invalid_limits(self, max_requests, window):
        with pytest.raises(ValueError):
            FixedWindowRateLimiter(max_requests=max_requests, window_seconds=window)


class TestEnforceRateLimit:
    """The route guard built on top of the limiter."""

    @staticmethod
    def _request(limiter, host="10.0.0.1"):
        app = SimpleNamespace(state=SimpleNamespace(rate_limiter=limiter))
        return SimpleNamespace(app=app, client=SimpleNamespace(host=host))

    @pytest.mark.asyncio
    async def test_allows_within_limit(self, clock):
        limiter = FixedWindowRateLimiter(max_requests=2, window_seconds=60, clock=clock)
        request = self._request(limiter)

        assert await enforce_rate_limit(request) is None
        assert await enforce_rate_limit(request) is None

    @pytest.mark.asyncio
    async def test_raises_with_retry_after_when_exhausted(self, clock):
        limiter = FixedWindowRateLimiter(max_requests=1, window_seconds=180, clock=clock)
        request = self._request(limiter)
        await enforce_rate_limit(request)
        clock.advance(0.5)

        with pytest.raises(RateLimitExceededError) as exc_info:
            await enforce_rate_limit(request)

        exc = exc_info.value
        assert exc.status_code == 429
        assert exc.retry_after == 180  # 179.5 rounded up
        assert exc.headers["Retry-After"] == "180"
        assert exc.context["limit"] == 1

    @pytest.mark.asyncio
    async def test_missing_client_shares_one_key(self, clock):
        limiter = FixedWindowRateLimiter(max_requests=1, window_seconds=60, clock=clock)
        request = self._request(limiter)
        request.client = None

        await enforce_rate_limit(request)
        with pytest.raises(RateLimitExceededError):
            await enforce_rate_limit(request)
