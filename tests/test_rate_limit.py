"""
Vigia - Rate Limiter Tests
==========================

Tests for the token bucket and per-client tracking.
"""

from vigia.api.middleware.rate_limit import RateLimiter, RateLimitMiddleware, TokenBucket


class FakeMonotonic:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


class TestTokenBucket:
    """Tests for TokenBucket."""

    def test_burst_then_block(self):
        bucket = TokenBucket(capacity=3, refill_rate=1.0)

        assert all(bucket.consume(10.0) for _ in range(3))
        assert bucket.consume(10.0) is False
        assert bucket.retry_after > 0

    def test_refills_over_time(self):
        bucket = TokenBucket(capacity=1, refill_rate=0.5)

        assert bucket.consume(10.0) is True
        assert bucket.consume(11.0) is False
        assert bucket.consume(13.0) is True


class TestRateLimiter:
    """Tests for RateLimiter.check."""

    def test_separate_buckets_per_ip(self):
        limiter = RateLimiter(limit=1, window=60, clock=FakeMonotonic())

        assert limiter.check("1.1.1.1")[0] is True
        assert limiter.check("1.1.1.1")[0] is False
        assert limiter.check("2.2.2.2")[0] is True

    def test_routes_share_one_bucket(self):
        limiter = RateLimiter(limit=2, window=60, clock=FakeMonotonic())

        assert limiter.check("1.1.1.1")[0] is True
        assert limiter.check("1.1.1.1")[0] is True
        assert limiter.check("1.1.1.1")[0] is False

    def test_retry_after_reported(self):
        limiter = RateLimiter(limit=1, window=60, clock=FakeMonotonic())

        limiter.check("ip")
        allowed, retry_after, remaining = limiter.check("ip")

        assert allowed is False
        assert retry_after > 0
        assert remaining == 0

    def test_window_recovers(self):
        clock = FakeMonotonic()
        limiter = RateLimiter(limit=2, window=60, clock=clock)

        limiter.check("ip")
        limiter.check("ip")
        assert limiter.check("ip")[0] is False

        clock.now += 60
        assert limiter.check("ip")[0] is True


class TestPathNormalisation:
    """Numeric ids collapse in log lines."""

    def test_numeric_segments_collapse(self):
        middleware = RateLimitMiddleware(app=None, rate_limiter=RateLimiter())

        assert middleware._normalize_path("/api/members/123/logs") == "/api/members/{id}/logs"
        assert middleware._normalize_path("/api/history/2024-02/") == "/api/history/2024-02"
