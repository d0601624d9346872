"""
Vigia - Facts Router
====================

Append-only writes: message logs, punishments and ticket batches.
"""

from fastapi import APIRouter, Depends, Path

from vigia.api.dependencies import get_moderation, require_api_key
from vigia.api.models.base import APIResponse
from vigia.api.models.records import (
    CreatedResult,
    LogCreateRequest,
    PunishRequest,
    TicketBatchRequest,
)
from vigia.services.moderation import ModerationService


router = APIRouter(tags=["Facts"], dependencies=[Depends(require_api_key)])


@router.post("/logs", response_model=APIResponse[CreatedResult])
async def append_log(
    body: LogCreateRequest,
    service: ModerationService = Depends(get_moderation),
) -> APIResponse[CreatedResult]:
    """Append a message log. Missing timestamp defaults to now."""
    log_id = service.append_log(
        body.member_id,
        body.display_name,
        body.guild_id,
        body.channel_id,
        body.channel_name,
        body.message,
        body.timestamp,
    )
    return APIResponse(data=CreatedResult(id=log_id))


@router.post("/punish/{kind}", response_model=APIResponse[CreatedResult])
async def record_punishment(
    body: PunishRequest,
    kind: str = Path(description="warn, mute or ban"),
    service: ModerationService = Depends(get_moderation),
) -> APIResponse[CreatedResult]:
    """
    Record a punishment.

    For mutes, end_at time-boxes the mute and duration_hours places it
    on the escalation ladder.
    """
    punishment_id = service.record_punishment(
        kind,
        body.member_id,
        body.display_name,
        body.reason,
        body.channel_id,
        body.channel_name,
        body.timestamp,
        body.duration_hours,
        body.end_at,
    )
    return APIResponse(data=CreatedResult(id=punishment_id))


@router.post("/tickets", response_model=APIResponse[CreatedResult])
async def record_ticket_batch(
    body: TicketBatchRequest,
    service: ModerationService = Depends(get_moderation),
) -> APIResponse[CreatedResult]:
    """Record a batch of tickets closed by an agent."""
    batch_id = service.record_ticket_batch(body.agent_id, body.display_name, body.count)
    return APIResponse(data=CreatedResult(id=batch_id))
