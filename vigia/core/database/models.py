"""
Vigia - Database Type Definitions
=================================

TypedDict definitions for records returned from the store.
"""

from typing import Optional, TypedDict, Union


class MemberRecord(TypedDict, total=False):
    """Member row. The only upserted entity."""
    id: str
    guild_id: Optional[str]
    name: str
    joined_at: Optional[str]


class LogRecord(TypedDict, total=False):
    """Immutable message log fact."""
    id: int
    member_id: str
    member_name: str
    guild_id: Optional[str]
    channel_id: str
    channel_name: str
    message: str
    timestamp: str


class PunishmentRecord(TypedDict, total=False):
    """Immutable punishment fact (warn, mute or ban)."""
    id: int
    member_id: str
    member_name: str
    kind: str
    reason: str
    channel_id: str
    channel_name: str
    timestamp: str
    duration_hours: Optional[Union[int, float]]
    end_at: Optional[str]


class TicketBatchRecord(TypedDict, total=False):
    """Batch of tickets closed by one agent."""
    id: int
    agent_id: str
    agent_name: str
    count: int
    timestamp: str


__all__ = [
    "MemberRecord",
    "LogRecord",
    "PunishmentRecord",
    "TicketBatchRecord",
]
