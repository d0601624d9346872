"""
Vigia - Base API Models
=======================

Common response wrappers.
"""

from datetime import datetime, timezone
from typing import Any, Generic, Optional, TypeVar

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


# =============================================================================
# Generic Type Variables
# =============================================================================

T = TypeVar("T")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def camel_field(name: str, camel: str, default: Any = None, **kwargs: Any) -> Any:
    """
    Request field accepting both snake_case and the camelCase key sent
    by existing bot clients (e.g. member_id / memberId).
    """
    return Field(default, validation_alias=AliasChoices(name, camel), **kwargs)


# =============================================================================
# Base Models
# =============================================================================

class RequestModel(BaseModel):
    """
    Base for request bodies.

    Fields are optional at this layer; required fields are enforced by
    the service so every missing field is reported the same way.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class APIResponse(BaseModel, Generic[T]):
    """Standard API response wrapper."""

    success: bool = True
    message: Optional[str] = None
    data: Optional[T] = None
    timestamp: datetime = Field(default_factory=_utcnow)


class ErrorResponse(BaseModel):
    """Error response model."""

    success: bool = False
    error_code: str
    message: str
    details: Optional[dict[str, Any]] = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "healthy"
    service: str = "vigia"
    version: str
    run_id: Optional[str] = None
    database: bool
    timestamp: datetime = Field(default_factory=_utcnow)


class SystemHealth(BaseModel):
    """Process and database metrics."""

    status: str = "healthy"
    uptime_seconds: int = 0
    memory_mb: float = 0
    cpu_percent: float = 0
    db_connected: bool = True
    db_size_mb: Optional[float] = None


__all__ = [
    "APIResponse",
    "ErrorResponse",
    "HealthResponse",
    "SystemHealth",
    "RequestModel",
    "camel_field",
]
