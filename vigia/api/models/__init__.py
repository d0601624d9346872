"""
Vigia - API Models
==================

Pydantic request and response models.
"""

from .base import APIResponse, ErrorResponse, HealthResponse, RequestModel, SystemHealth
from .records import (
    LogCreateRequest,
    PunishRequest,
    TicketBatchRequest,
    LogOut,
    PunishmentOut,
    TicketBatchOut,
    CreatedResult,
)
from .members import (
    MemberSyncRequest,
    MemberSyncBatchRequest,
    MemberIdRequest,
    MemberSummary,
    MemberDetail,
    SyncBatchResult,
)
from .history import (
    PeriodSliceOut,
    ExportRequest,
    ReportFiles,
    ClearResult,
    NextActionOut,
)

__all__ = [
    "APIResponse",
    "ErrorResponse",
    "HealthResponse",
    "RequestModel",
    "SystemHealth",
    "LogCreateRequest",
    "PunishRequest",
    "TicketBatchRequest",
    "LogOut",
    "PunishmentOut",
    "TicketBatchOut",
    "CreatedResult",
    "MemberSyncRequest",
    "MemberSyncBatchRequest",
    "MemberIdRequest",
    "MemberSummary",
    "MemberDetail",
    "SyncBatchResult",
    "PeriodSliceOut",
    "ExportRequest",
    "ReportFiles",
    "ClearResult",
    "NextActionOut",
]
