"""
Vigia - Rate Limiting Middleware
================================

Per-client token bucket limiting for the /api routes. One bucket per IP
covers every limited route.
"""

import time
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional, Tuple

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from vigia.core.logger import logger
from vigia.api.errors import ErrorCode, error_response


# Paths that are never limited
EXEMPT_PATHS = ("/health", "/api/health")

# Buckets idle for this long are dropped
STALE_AFTER = 600  # seconds
CLEANUP_INTERVAL = 300  # seconds


# =============================================================================
# Token Bucket
# =============================================================================

@dataclass
class TokenBucket:
    """
    Bucket of `capacity` tokens refilled continuously at `refill_rate`
    tokens per second. A full window's worth of requests can burst.
    """

    capacity: int
    refill_rate: float
    tokens: float = field(default=0.0)
    last_update: float = field(default=0.0)

    def __post_init__(self) -> None:
        self.tokens = float(self.capacity)

    def consume(self, now: float) -> bool:
        """Take one token if available."""
        if self.last_update:
            elapsed = max(0.0, now - self.last_update)
            self.tokens = min(self.capacity, self.tokens + elapsed * self.refill_rate)
        self.last_update = now

        if self.tokens >= 1:
            self.tokens -= 1
            return True
        return False

    @property
    def retry_after(self) -> float:
        """Seconds until the next token."""
        if self.tokens >= 1:
            return 0.0
        return (1 - self.tokens) / self.refill_rate


# =============================================================================
# Rate Limiter
# =============================================================================

class RateLimiter:
    """
    Tracks one bucket per client IP, shared by every limited route.

    Args:
        limit: Requests allowed per window.
        window: Window length in seconds.
        clock: Monotonic time source.
    """

    def __init__(
        self,
        limit: int = 200,
        window: int = 60,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.limit = limit
        self.window = window
        self._clock = clock
        self._buckets: Dict[str, TokenBucket] = {}
        self._last_cleanup = clock()

    def _cleanup_stale_buckets(self, now: float) -> None:
        if now - self._last_cleanup < CLEANUP_INTERVAL:
            return
        self._last_cleanup = now

        stale = [k for k, b in self._buckets.items() if now - b.last_update > STALE_AFTER]
        for key in stale:
            del self._buckets[key]

        if stale:
            logger.debug("Rate Limit Cleanup", [
                ("Removed", str(len(stale))),
                ("Remaining", str(len(self._buckets))),
            ])

    def check(self, client_ip: str) -> Tuple[bool, Optional[float], int]:
        """
        Check if a request should be allowed.

        Returns:
            Tuple of (allowed, retry_after, remaining)
        """
        now = self._clock()
        self._cleanup_stale_buckets(now)

        key = f"ip:{client_ip}"
        bucket = self._buckets.get(key)
        if bucket is None:
            bucket = TokenBucket(capacity=self.limit, refill_rate=self.limit / self.window)
            self._buckets[key] = bucket

        allowed = bucket.consume(now)
        return allowed, None if allowed else bucket.retry_after, int(bucket.tokens)


# =============================================================================
# Middleware
# =============================================================================

class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    Limits /api requests per client across all routes.

    Adds X-RateLimit-Limit / X-RateLimit-Remaining to limited routes and
    Retry-After to 429 responses. Static files are not limited.
    """

    def __init__(self, app, rate_limiter: RateLimiter):
        super().__init__(app)
        self._limiter = rate_limiter

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        path = request.url.path
        if path in EXEMPT_PATHS or not path.startswith("/api"):
            return await call_next(request)

        client_ip = self._get_client_ip(request)
        normalized = self._normalize_path(path)
        allowed, retry_after, remaining = self._limiter.check(client_ip)

        if not allowed:
            logger.debug("Rate Limit Exceeded", [
                ("IP", client_ip),
                ("Path", normalized),
                ("Retry After", f"{retry_after:.1f}s"),
            ])
            return error_response(
                ErrorCode.RATE_LIMIT_EXCEEDED,
                headers={
                    "Retry-After": str(max(1, int(retry_after or 1))),
                    "X-RateLimit-Limit": str(self._limiter.limit),
                    "X-RateLimit-Remaining": "0",
                },
            )

        response = await call_next(request)
        response.headers["X-RateLimit-Limit"] = str(self._limiter.limit)
        response.headers["X-RateLimit-Remaining"] = str(remaining)
        return response

    def _get_client_ip(self, request: Request) -> str:
        """Client IP, honouring proxy headers."""
        forwarded = request.headers.get("X-Forwarded-For")
        if forwarded:
            return forwarded.split(",")[0].strip()

        real_ip = request.headers.get("X-Real-IP")
        if real_ip:
            return real_ip

        if request.client:
            return request.client.host
        return "unknown"

    def _normalize_path(self, path: str) -> str:
        """Collapse numeric member ids for log lines."""
        parts = [p for p in path.rstrip("/").split("/") if p]
        return "/" + "/".join("{id}" if p.isdigit() else p for p in parts)


__all__ = ["RateLimitMiddleware", "RateLimiter", "TokenBucket"]
