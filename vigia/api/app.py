"""
Vigia - FastAPI Application
===========================

FastAPI application factory and configuration.
"""

import sqlite3
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from vigia import __version__
from vigia.core.config import Config, get_config
from vigia.core.logger import logger
from vigia.api.config import API_KEY_HEADER, APIConfig, AuthMode, get_api_config
from vigia.api.errors import APIError, ErrorCode, error_response, validation_response
from vigia.api.middleware.logging import LoggingMiddleware
from vigia.api.middleware.rate_limit import RateLimiter, RateLimitMiddleware
from vigia.api.models.base import ErrorResponse
from vigia.api.routers import (
    facts_router,
    health_router,
    history_router,
    members_router,
)
from vigia.services.moderation import ModerationService
from vigia.services.reports import ReportError, ReportService
from vigia.utils.validators import ValidationError


# =============================================================================
# OpenAPI Documentation
# =============================================================================

API_DESCRIPTION = """
## Vigia Moderation API

Members, message logs, warnings, timed mutes, bans and ticket counts,
with the next disciplinary action derived from each member's history.

### Escalation Ladder

`warn -> mute 2h -> mute 4h -> mute 6h -> warn`

While a timed mute is running, `/api/policy/next` answers `activeMute`.

### Authentication

Mutating endpoints follow the configured policy (`VIGIA_AUTH_MODE`):

- `disabled` (default): no key required
- `api_key`: send `X-API-Key: <SITE_API_KEY>`

Read endpoints are always open.

### Error Responses

```json
{
    "success": false,
    "error_code": "VALIDATION_MISSING_FIELD",
    "message": "member_id required",
    "details": {"field": "member_id"}
}
```
"""

OPENAPI_TAGS = [
    {"name": "Health", "description": "Liveness and database status"},
    {"name": "Members", "description": "Member sync and member views"},
    {"name": "Facts", "description": "Logs, punishments and ticket batches"},
    {"name": "History", "description": "Escalation policy, monthly slices, exports and purges"},
]


# =============================================================================
# Lifespan
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log startup and shutdown."""
    api_config: APIConfig = app.state.api_config
    logger.tree("API Starting", [
        ("Version", __version__),
        ("Auth Mode", api_config.auth_mode.value),
        ("Rate Limit", f"{api_config.rate_limit_requests}/{api_config.rate_limit_window}s"),
    ], emoji="🚀")

    yield

    logger.tree("API Stopping", [], emoji="🛑")


# =============================================================================
# Exception Handlers
# =============================================================================

def _register_exception_handlers(app: FastAPI, api_config: APIConfig) -> None:

    @app.exception_handler(APIError)
    async def api_error_handler(request: Request, exc: APIError):
        return JSONResponse(status_code=exc.status_code, content=exc.detail, headers=exc.headers)

    @app.exception_handler(StarletteHTTPException)
    async def not_found_handler(request: Request, exc: StarletteHTTPException):
        """Unknown routes and missing export files get the error envelope."""
        if exc.status_code == 404:
            return error_response(ErrorCode.NOT_FOUND, details={"path": request.url.path})
        return await http_exception_handler(request, exc)

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        logger.debug("Validation Failed", [
            ("Path", request.url.path),
            ("Field", exc.field),
            ("Reason", exc.message),
        ])
        return validation_response(exc)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        """Malformed JSON or wrong types; reported like any other validation failure."""
        errors = exc.errors()
        field = None
        message = None
        if errors:
            loc = [
                str(part) for part in errors[0].get("loc", ())
                if part not in ("body", "query", "path", "header")
            ]
            field = ".".join(loc) or None
            message = errors[0].get("msg")
        return error_response(
            ErrorCode.VALIDATION_FAILED,
            message=f"{field}: {message}" if field and message else message,
            details={"field": field},
        )

    @app.exception_handler(ReportError)
    async def report_error_handler(request: Request, exc: ReportError):
        return error_response(
            ErrorCode.REPORT_GENERATION_FAILED,
            details={"month": exc.month},
        )

    @app.exception_handler(sqlite3.Error)
    async def database_error_handler(request: Request, exc: sqlite3.Error):
        logger.error("Database Error", [
            ("Path", str(request.url.path)[:50]),
            ("Method", request.method),
            ("Error Type", type(exc).__name__),
            ("Error", str(exc)[:100]),
        ])
        return error_response(ErrorCode.SERVER_DATABASE_ERROR)

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Handle uncaught exceptions with consistent error format."""
        logger.error("Unhandled API Error", [
            ("Path", str(request.url.path)[:50]),
            ("Method", request.method),
            ("Error Type", type(exc).__name__),
            ("Error", str(exc)[:100]),
        ])
        return error_response(
            ErrorCode.SERVER_ERROR,
            details={"path": str(request.url.path)} if api_config.debug else None,
        )


# =============================================================================
# Application Factory
# =============================================================================

def create_app(
    moderation: Optional[ModerationService] = None,
    reports: Optional[ReportService] = None,
    config: Optional[Config] = None,
    api_config: Optional[APIConfig] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        moderation: Service bound to this app. Defaults to the process-wide
            singleton, opened on first request.
        reports: Report service. Defaults to the process-wide singleton.
        config: Filesystem configuration (exports and frontend directories).
        api_config: HTTP configuration (CORS, rate limit, auth policy).

    Returns:
        Configured FastAPI application
    """
    config = config or get_config()
    api_config = api_config or get_api_config()

    app = FastAPI(
        title="Vigia API",
        description=API_DESCRIPTION,
        version=__version__,
        docs_url="/api/docs" if api_config.debug else None,
        redoc_url="/api/redoc" if api_config.debug else None,
        openapi_url="/api/openapi.json" if api_config.debug else None,
        openapi_tags=OPENAPI_TAGS,
        responses={
            400: {"model": ErrorResponse},
            401: {"model": ErrorResponse},
            429: {"model": ErrorResponse},
            500: {"model": ErrorResponse},
        },
        lifespan=lifespan,
    )

    app.state.api_config = api_config
    app.state.moderation = moderation
    app.state.reports = reports

    # ==========================================================================
    # Middleware (order matters - last added = first executed)
    # ==========================================================================

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(api_config.cors_origins),
        allow_methods=list(api_config.cors_allow_methods),
        allow_headers=list(api_config.cors_allow_headers) + [API_KEY_HEADER],
    )

    app.add_middleware(
        RateLimitMiddleware,
        rate_limiter=RateLimiter(
            limit=api_config.rate_limit_requests,
            window=api_config.rate_limit_window,
        ),
    )

    app.add_middleware(LoggingMiddleware)

    _register_exception_handlers(app, api_config)

    # ==========================================================================
    # Routers
    # ==========================================================================

    app.include_router(health_router)
    app.include_router(members_router, prefix="/api")
    app.include_router(facts_router, prefix="/api")
    app.include_router(history_router, prefix="/api")

    # ==========================================================================
    # Static Files
    # ==========================================================================

    exports_dir = reports.exports_dir if reports is not None else config.exports_dir
    app.mount("/exports", StaticFiles(directory=str(exports_dir), check_dir=False), name="exports")

    # Mounted last so it never shadows an API route
    if config.frontend_dir.is_dir():
        app.mount("/", StaticFiles(directory=str(config.frontend_dir), html=True), name="frontend")

    if api_config.auth_mode is AuthMode.DISABLED:
        logger.warning("API Authentication Disabled", [
            ("Mode", api_config.auth_mode.value),
            ("Scope", "All mutating endpoints are open"),
        ])

    return app


# =============================================================================
# Module-level app for uvicorn
# =============================================================================

# This allows running with: uvicorn vigia.api.app:app
app = create_app()


__all__ = ["create_app", "app"]
