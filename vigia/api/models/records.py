"""
Vigia - Fact API Models
=======================

Request bodies that append facts and the shapes facts are returned in.
"""

from typing import Optional, Union

from pydantic import BaseModel

from vigia.api.models.base import RequestModel, camel_field


Identifier = Union[str, int]
Hours = Union[int, float]


# =============================================================================
# Requests
# =============================================================================

class LogCreateRequest(RequestModel):
    """Append one message log. member_id and message are required."""

    member_id: Optional[Identifier] = camel_field("member_id", "memberId")
    display_name: Optional[str] = camel_field("display_name", "memberName")
    guild_id: Optional[Identifier] = camel_field("guild_id", "guildId")
    channel_id: Optional[Identifier] = camel_field("channel_id", "channelId")
    channel_name: Optional[str] = camel_field("channel_name", "channelName")
    message: Optional[str] = None
    timestamp: Optional[str] = None


class PunishRequest(RequestModel):
    """Record a warn, mute or ban. The kind comes from the path."""

    member_id: Optional[Identifier] = camel_field("member_id", "memberId")
    display_name: Optional[str] = camel_field("display_name", "memberName")
    reason: Optional[str] = None
    channel_id: Optional[Identifier] = camel_field("channel_id", "channelId")
    channel_name: Optional[str] = camel_field("channel_name", "channelName")
    timestamp: Optional[str] = None
    duration_hours: Optional[Hours] = camel_field("duration_hours", "durationHours")
    end_at: Optional[str] = camel_field("end_at", "endAt")


class TicketBatchRequest(RequestModel):
    """Tickets closed by an agent. Missing or invalid count becomes 1."""

    agent_id: Optional[Identifier] = camel_field("agent_id", "agentId")
    display_name: Optional[str] = camel_field("display_name", "agentName")
    count: Optional[Union[int, str]] = 1


# =============================================================================
# Responses
# =============================================================================

class LogOut(BaseModel):
    id: int
    member_id: str
    member_name: Optional[str] = ""
    guild_id: Optional[str] = None
    channel_id: Optional[str] = ""
    channel_name: Optional[str] = ""
    message: str
    timestamp: str


class PunishmentOut(BaseModel):
    id: int
    member_id: str
    member_name: Optional[str] = ""
    kind: str
    reason: Optional[str] = ""
    channel_id: Optional[str] = ""
    channel_name: Optional[str] = ""
    timestamp: str
    duration_hours: Optional[Hours] = None
    end_at: Optional[str] = None


class TicketBatchOut(BaseModel):
    id: int
    agent_id: str
    agent_name: Optional[str] = ""
    count: int
    timestamp: str


class CreatedResult(BaseModel):
    """Row id of an appended fact."""

    id: int


__all__ = [
    "LogCreateRequest",
    "PunishRequest",
    "TicketBatchRequest",
    "LogOut",
    "PunishmentOut",
    "TicketBatchOut",
    "CreatedResult",
]
