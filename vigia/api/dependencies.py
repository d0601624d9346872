"""
Vigia - API Dependencies
========================

FastAPI dependency injection: services and the API key policy.
"""

import hmac
from typing import Optional

from fastapi import Request

from vigia.api.config import API_KEY_HEADER, APIConfig, AuthMode
from vigia.api.errors import APIError, ErrorCode
from vigia.services.moderation import ModerationService, get_moderation_service
from vigia.services.reports import ReportService, get_report_service


# =============================================================================
# Service References
# =============================================================================

def get_moderation(request: Request) -> ModerationService:
    """
    Moderation service for the current app.

    create_app() may bind one on app.state; otherwise the process-wide
    singleton is opened on first use.
    """
    service: Optional[ModerationService] = request.app.state.moderation
    return service if service is not None else get_moderation_service()


def get_reports(request: Request) -> ReportService:
    """Report service for the current app."""
    service: Optional[ReportService] = request.app.state.reports
    return service if service is not None else get_report_service()


# =============================================================================
# Authentication Dependencies
# =============================================================================

async def require_api_key(request: Request) -> None:
    """
    Enforce the configured auth policy on a mutating endpoint.

    AuthMode.DISABLED accepts every request. AuthMode.API_KEY requires
    the X-API-Key header to equal the configured key.
    """
    config: APIConfig = request.app.state.api_config
    if config.auth_mode is AuthMode.DISABLED:
        return

    provided = request.headers.get(API_KEY_HEADER)
    if not provided:
        raise APIError(ErrorCode.AUTH_MISSING_KEY)
    if not hmac.compare_digest(provided.encode(), config.api_key.encode()):
        raise APIError(ErrorCode.AUTH_INVALID_KEY)


__all__ = [
    "get_moderation",
    "get_reports",
    "require_api_key",
]
