"""
Vigia - API Middleware
======================

Middleware components for the FastAPI application.
"""

from .rate_limit import RateLimitMiddleware, RateLimiter
from .logging import LoggingMiddleware

__all__ = [
    "RateLimitMiddleware",
    "RateLimiter",
    "LoggingMiddleware",
]
