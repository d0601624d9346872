"""
Vigia - Members Router
======================

Member sync and member views.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from vigia.api.dependencies import get_moderation, require_api_key
from vigia.api.models.base import APIResponse
from vigia.api.models.members import (
    MemberDetail,
    MemberIdRequest,
    MemberSummary,
    MemberSyncBatchRequest,
    MemberSyncRequest,
    SyncBatchResult,
)
from vigia.api.models.records import LogOut, PunishmentOut
from vigia.services.moderation import ModerationService


router = APIRouter(prefix="/members", tags=["Members"])


# =============================================================================
# Sync
# =============================================================================

@router.post("/sync", response_model=APIResponse[None], dependencies=[Depends(require_api_key)])
async def sync_member(
    body: MemberSyncRequest,
    service: ModerationService = Depends(get_moderation),
) -> APIResponse[None]:
    """Upsert one member."""
    service.sync_member(body.member_id, body.display_name, body.joined_at, body.guild_id)
    return APIResponse(message="Member synced")


@router.post(
    "/sync/batch",
    response_model=APIResponse[SyncBatchResult],
    dependencies=[Depends(require_api_key)],
)
async def sync_members_batch(
    body: MemberSyncBatchRequest,
    service: ModerationService = Depends(get_moderation),
) -> APIResponse[SyncBatchResult]:
    """Upsert every member in the batch, or none of them."""
    members = None
    if body.members is not None:
        members = [entry.model_dump() for entry in body.members]
    result = service.sync_members_batch(body.guild_id, members)
    return APIResponse(data=SyncBatchResult(**result))


@router.post("/remove", response_model=APIResponse[None], dependencies=[Depends(require_api_key)])
async def remove_member(
    body: MemberIdRequest,
    service: ModerationService = Depends(get_moderation),
) -> APIResponse[None]:
    """Delete the member row. Logs and punishments are kept."""
    service.remove_member(body.member_id)
    return APIResponse(message="Member removed")


# =============================================================================
# Views
# =============================================================================

@router.get("", response_model=APIResponse[List[MemberSummary]])
async def list_members(
    guild: Optional[str] = Query(None, description="Guild scope; unscoped members are always included"),
    service: ModerationService = Depends(get_moderation),
) -> APIResponse[List[MemberSummary]]:
    """Every member with punishment counts, ticket total and latest state."""
    return APIResponse(data=service.list_members(guild))


@router.get("/{member_id}", response_model=APIResponse[MemberDetail])
async def member_detail(
    member_id: str,
    service: ModerationService = Depends(get_moderation),
) -> APIResponse[MemberDetail]:
    """Member row, rollup, punishments by kind and log history. Unknown ids return empty data."""
    return APIResponse(data=service.member_detail(member_id))


@router.get("/{member_id}/logs", response_model=APIResponse[List[LogOut]])
async def member_logs(
    member_id: str,
    service: ModerationService = Depends(get_moderation),
) -> APIResponse[List[LogOut]]:
    return APIResponse(data=service.member_logs(member_id))


@router.get("/{member_id}/punishments", response_model=APIResponse[List[PunishmentOut]])
async def member_punishments(
    member_id: str,
    service: ModerationService = Depends(get_moderation),
) -> APIResponse[List[PunishmentOut]]:
    return APIResponse(data=service.member_punishments(member_id))
