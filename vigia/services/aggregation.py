"""
Vigia - Aggregation
===================

Cross-cutting read views computed on demand from the record store.

Nothing here is cached or materialised: every rollup is rebuilt from the
fact tables at query time, and active mutes are evaluated against the
caller's `now`, so results drift naturally as mutes expire.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, TYPE_CHECKING

from vigia.core.constants import PunishmentKind
from vigia.core.database.models import PunishmentRecord
from vigia.services.escalation import find_active_mute
from vigia.utils.timestamps import format_timestamp, month_window

if TYPE_CHECKING:
    from vigia.core.database.manager import DatabaseManager


# =============================================================================
# Rollup
# =============================================================================

@dataclass
class MemberRollup:
    """Per-member counts and latest state."""
    warn_count: int = 0
    mute_count: int = 0
    ban_count: int = 0
    ticket_total: int = 0
    last_punishment: Optional[PunishmentRecord] = None
    active_mute: Optional[PunishmentRecord] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "warn_count": self.warn_count,
            "mute_count": self.mute_count,
            "ban_count": self.ban_count,
            "ticket_total": self.ticket_total,
            "last_punishment": self.last_punishment,
            "active_mute": self.active_mute,
        }


@dataclass
class PeriodSlice:
    """All facts inside one half-open calendar-month window."""
    month: str
    start: str
    end: str
    logs: List[Dict[str, Any]] = field(default_factory=list)
    punishments: List[Dict[str, Any]] = field(default_factory=list)
    ticket_batches: List[Dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "month": self.month,
            "start": self.start,
            "end": self.end,
            "logs": self.logs,
            "punishments": self.punishments,
            "ticket_batches": self.ticket_batches,
        }


def build_rollup(db: "DatabaseManager", member_id: str, now: datetime) -> MemberRollup:
    """
    Rollup for a single member.

    Args:
        db: Record store.
        member_id: Member to summarise. Unknown ids yield zeros.
        now: Instant used to evaluate the active mute.
    """
    history = db.get_member_punishments(member_id)
    kinds = [p["kind"] for p in history]

    return MemberRollup(
        warn_count=kinds.count(PunishmentKind.WARN.value),
        mute_count=kinds.count(PunishmentKind.MUTE.value),
        ban_count=kinds.count(PunishmentKind.BAN.value),
        ticket_total=db.get_ticket_total(member_id),
        last_punishment=history[0] if history else None,
        active_mute=find_active_mute(history, now),
    )


# =============================================================================
# Member Views
# =============================================================================

def list_members(
    db: "DatabaseManager",
    now: datetime,
    guild_id: Optional[str] = None,
) -> List[Dict[str, Any]]:
    """
    Every member joined with its rollup.

    A guild filter keeps members of that guild plus unscoped members.
    Aggregates are fetched once for the whole store and joined in memory.
    """
    members = db.get_members(guild_id)
    counts = db.get_punishment_counts()
    last = db.get_last_punishments()
    tickets = db.get_ticket_totals()
    timed_mutes = db.get_timed_mutes()

    result = []
    for member in members:
        member_id = member["id"]
        kind_counts = counts.get(member_id, {})
        rollup = MemberRollup(
            warn_count=kind_counts.get(PunishmentKind.WARN.value, 0),
            mute_count=kind_counts.get(PunishmentKind.MUTE.value, 0),
            ban_count=kind_counts.get(PunishmentKind.BAN.value, 0),
            ticket_total=tickets.get(member_id, 0),
            last_punishment=last.get(member_id),
            active_mute=find_active_mute(timed_mutes.get(member_id, []), now),
        )
        entry = {
            "member_id": member_id,
            "display_name": member["name"] or member_id,
            "guild_id": member["guild_id"],
            "joined_at": member["joined_at"],
        }
        entry.update(rollup.to_dict())
        entry["tickets"] = rollup.ticket_total
        result.append(entry)

    return result


def member_detail(db: "DatabaseManager", member_id: str, now: datetime) -> Dict[str, Any]:
    """
    Full view of one member.

    Unknown members are not an error: the member block is a placeholder
    and every collection is empty.
    """
    member = db.get_member(member_id) or {
        "id": member_id,
        "guild_id": None,
        "name": "",
        "joined_at": None,
    }

    return {
        "member": member,
        "rollup": build_rollup(db, member_id, now).to_dict(),
        "punishments_by_kind": {
            "warns": db.get_member_punishments_by_kind(member_id, PunishmentKind.WARN.value),
            "mutes": db.get_member_punishments_by_kind(member_id, PunishmentKind.MUTE.value),
            "bans": db.get_member_punishments_by_kind(member_id, PunishmentKind.BAN.value),
        },
        "logs": db.get_member_logs(member_id),
    }


# =============================================================================
# Period Slice
# =============================================================================

def period_slice(db: "DatabaseManager", month: str) -> PeriodSlice:
    """
    Logs, punishments and ticket batches with start <= timestamp < end,
    where [start, end) is the UTC calendar month. A fact stamped exactly
    at the first instant of the next month is excluded.

    Args:
        db: Record store.
        month: Validated "YYYY-MM" string.
    """
    start, end = month_window(month)
    start_str, end_str = format_timestamp(start), format_timestamp(end)

    return PeriodSlice(
        month=month,
        start=start_str,
        end=end_str,
        logs=db.get_logs_between(start_str, end_str),
        punishments=db.get_punishments_between(start_str, end_str),
        ticket_batches=db.get_ticket_batches_between(start_str, end_str),
    )


__all__ = [
    "MemberRollup",
    "PeriodSlice",
    "build_rollup",
    "list_members",
    "member_detail",
    "period_slice",
]
