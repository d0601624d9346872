"""
Vigia - Request Logging Middleware
==================================

One log line per request with method, path, status and duration.
"""

import time
import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from vigia.core.logger import logger


REQUEST_ID_HEADER = "X-Request-ID"

# Requests slower than this are logged as warnings
SLOW_REQUEST_MS = 1000


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    Tags every request with a short id (request.state.request_id and the
    X-Request-ID response header) and logs its outcome.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:8]
        request.state.request_id = request_id
        start = time.perf_counter()

        response = await call_next(request)

        elapsed_ms = (time.perf_counter() - start) * 1000
        response.headers[REQUEST_ID_HEADER] = request_id

        details = [
            ("ID", request_id),
            ("Status", str(response.status_code)),
            ("Duration", f"{elapsed_ms:.1f}ms"),
        ]
        message = f"{request.method} {request.url.path}"
        if response.status_code >= 500 or elapsed_ms > SLOW_REQUEST_MS:
            logger.warning(message, details)
        else:
            logger.debug(message, details)

        return response


__all__ = ["LoggingMiddleware", "REQUEST_ID_HEADER"]
