"""
Vigia - History Router
======================

Escalation decisions, monthly slices, monthly exports and purges.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from vigia.api.dependencies import get_moderation, get_reports, require_api_key
from vigia.api.models.base import APIResponse
from vigia.api.models.history import (
    ClearResult,
    ExportRequest,
    NextActionOut,
    PeriodSliceOut,
    ReportFiles,
)
from vigia.api.models.members import MemberIdRequest
from vigia.services.moderation import ModerationService
from vigia.services.reports import ReportService


router = APIRouter(tags=["History"])


# =============================================================================
# Policy
# =============================================================================

@router.get(
    "/policy/next",
    response_model=APIResponse[NextActionOut],
    response_model_exclude_none=True,
)
async def next_action(
    member_id: Optional[str] = Query(None, description="Member to evaluate"),
    member_id_camel: Optional[str] = Query(None, alias="memberId", include_in_schema=False),
    service: ModerationService = Depends(get_moderation),
) -> APIResponse[NextActionOut]:
    """
    Next step on the ladder for a member.

    warn -> mute 2h -> mute 4h -> mute 6h -> warn. While a timed mute is
    running the answer is activeMute with its end.
    """
    return APIResponse(data=service.next_action(member_id or member_id_camel).to_dict())


# =============================================================================
# Monthly History
# =============================================================================

@router.get("/history/{month}", response_model=APIResponse[PeriodSliceOut])
async def period_slice(
    month: str,
    service: ModerationService = Depends(get_moderation),
) -> APIResponse[PeriodSliceOut]:
    """All facts inside the UTC calendar month (YYYY-MM)."""
    return APIResponse(data=service.period_slice(month).to_dict())


@router.post(
    "/export/monthly",
    response_model=APIResponse[ReportFiles],
    dependencies=[Depends(require_api_key)],
)
async def export_monthly(
    body: Optional[ExportRequest] = None,
    reports: ReportService = Depends(get_reports),
) -> APIResponse[ReportFiles]:
    """Render the month's spreadsheet and PDF; returns their download paths."""
    handles = reports.build_monthly_report(body.month if body else None)
    return APIResponse(data=handles.to_dict())


# =============================================================================
# Purges
# =============================================================================

@router.post(
    "/clear/member",
    response_model=APIResponse[ClearResult],
    dependencies=[Depends(require_api_key)],
)
async def clear_member(
    body: MemberIdRequest,
    service: ModerationService = Depends(get_moderation),
) -> APIResponse[ClearResult]:
    """Delete a member's logs and punishments. The member row stays."""
    return APIResponse(data=service.clear_member(body.member_id))


@router.post(
    "/clear/all",
    response_model=APIResponse[ClearResult],
    dependencies=[Depends(require_api_key)],
)
async def clear_all(
    service: ModerationService = Depends(get_moderation),
) -> APIResponse[ClearResult]:
    """Delete every log, punishment and ticket batch."""
    return APIResponse(data=service.clear_all())
