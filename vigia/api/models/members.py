"""
Vigia - Member API Models
=========================

Member sync requests and member view responses.
"""

from typing import List, Optional, Union

from pydantic import BaseModel, Field

from vigia.api.models.base import RequestModel, camel_field
from vigia.api.models.records import LogOut, PunishmentOut


Identifier = Union[str, int]


# =============================================================================
# Requests
# =============================================================================

class MemberSyncRequest(RequestModel):
    """Upsert one member."""

    member_id: Optional[Identifier] = camel_field("member_id", "memberId")
    display_name: Optional[str] = camel_field("display_name", "memberName")
    joined_at: Optional[str] = camel_field("joined_at", "joinedAt")
    guild_id: Optional[Identifier] = camel_field("guild_id", "guildId")


class MemberBatchEntry(RequestModel):
    member_id: Optional[Identifier] = camel_field("member_id", "memberId")
    display_name: Optional[str] = camel_field("display_name", "memberName")
    joined_at: Optional[str] = camel_field("joined_at", "joinedAt")


class MemberSyncBatchRequest(RequestModel):
    """Atomic batch upsert; guild_id applies to every entry."""

    guild_id: Optional[Identifier] = camel_field("guild_id", "guildId")
    members: Optional[List[MemberBatchEntry]] = None


class MemberIdRequest(RequestModel):
    """Body carrying only a member id (remove, clear)."""

    member_id: Optional[Identifier] = camel_field("member_id", "memberId")


# =============================================================================
# Responses
# =============================================================================

class MemberOut(BaseModel):
    id: str
    guild_id: Optional[str] = None
    name: Optional[str] = ""
    joined_at: Optional[str] = None


class RollupOut(BaseModel):
    """Per-member counts and latest state."""

    warn_count: int = 0
    mute_count: int = 0
    ban_count: int = 0
    ticket_total: int = 0
    last_punishment: Optional[PunishmentOut] = None
    active_mute: Optional[PunishmentOut] = None


class MemberSummary(RollupOut):
    """Row of the member list."""

    member_id: str
    display_name: str
    guild_id: Optional[str] = None
    joined_at: Optional[str] = None
    tickets: int = Field(0, description="Same value as ticket_total")


class PunishmentsByKind(BaseModel):
    warns: List[PunishmentOut] = Field(default_factory=list)
    mutes: List[PunishmentOut] = Field(default_factory=list)
    bans: List[PunishmentOut] = Field(default_factory=list)


class MemberDetail(BaseModel):
    """Member row, rollup, punishments split by kind and full log history."""

    member: MemberOut
    rollup: RollupOut
    punishments_by_kind: PunishmentsByKind
    logs: List[LogOut] = Field(default_factory=list)


class SyncBatchResult(BaseModel):
    upserted: int


__all__ = [
    "MemberSyncRequest",
    "MemberBatchEntry",
    "MemberSyncBatchRequest",
    "MemberIdRequest",
    "MemberOut",
    "RollupOut",
    "MemberSummary",
    "PunishmentsByKind",
    "MemberDetail",
    "SyncBatchResult",
]
