"""
Vigia - Moderation Service
==========================

Boundary contract for every write and query.

Each operation validates its input synchronously, before the store is
touched, so a rejected call leaves no partial side effects. Writes are
appended to the record store; reads delegate to the escalation and
aggregation engines with the service clock as `now`.

Usage:
    from vigia.services import get_moderation_service

    service = get_moderation_service()
    service.record_punishment("warn", "123", display_name="alice")
    service.next_action("123").to_dict()  # {"action": "mute", "hours": 2}
"""

from datetime import datetime
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from vigia.core.constants import PunishmentKind
from vigia.core.database import DatabaseManager, get_db
from vigia.core.logger import logger
from vigia.services import aggregation
from vigia.services.escalation import NextAction, compute_next_action
from vigia.utils.timestamps import format_timestamp, utc_now
from vigia.utils.validators import ValidationError, Validators


Clock = Callable[[], datetime]


class ModerationService:
    """
    Facade over the record store and the policy/aggregation engines.

    Args:
        db: Record store.
        clock: Source of "now". Injected so expiry is deterministic in tests.
    """

    def __init__(self, db: DatabaseManager, clock: Clock = utc_now) -> None:
        self.db = db
        self.clock = clock

    def _now_str(self) -> str:
        return format_timestamp(self.clock())

    # =========================================================================
    # Members
    # =========================================================================

    def sync_member(
        self,
        member_id: Any,
        display_name: Any = None,
        joined_at: Any = None,
        guild_id: Any = None,
    ) -> None:
        """Upsert one member. Missing joined_at defaults to now."""
        member_id = Validators.require_text(member_id, "member_id")
        name = Validators.optional_text(display_name)
        joined = Validators.optional_timestamp(joined_at, "joined_at") or self._now_str()
        scope = Validators.optional_scope(guild_id)

        self.db.upsert_member(member_id, name, joined, scope)

    def sync_members_batch(
        self,
        guild_id: Any,
        members: Sequence[Mapping[str, Any]],
    ) -> Dict[str, int]:
        """
        Upsert a batch of members, all or nothing.

        Every entry is validated before the transaction opens.

        Returns:
            {"upserted": number of members}
        """
        if members is None or not isinstance(members, (list, tuple)):
            raise ValidationError("members", "members must be a list", ValidationError.INVALID_VALUE)

        scope = Validators.optional_scope(guild_id)
        now = self._now_str()
        rows = []
        for index, entry in enumerate(members):
            if not isinstance(entry, Mapping):
                raise ValidationError(
                    f"members[{index}]", "member entry must be an object", ValidationError.INVALID_VALUE
                )
            rows.append({
                "member_id": Validators.require_text(entry.get("member_id"), f"members[{index}].member_id"),
                "name": Validators.optional_text(entry.get("display_name")),
                "joined_at": Validators.optional_timestamp(
                    entry.get("joined_at"), f"members[{index}].joined_at"
                ) or now,
            })

        return {"upserted": self.db.upsert_members_batch(scope, rows)}

    def remove_member(self, member_id: Any) -> bool:
        """Delete the member row. Its facts are kept for audit."""
        member_id = Validators.require_text(member_id, "member_id")
        removed = self.db.delete_member(member_id)

        logger.info("Member Removed", [
            ("Member ID", member_id),
            ("Existed", "Yes" if removed else "No"),
        ])

        return removed

    # =========================================================================
    # Facts
    # =========================================================================

    def append_log(
        self,
        member_id: Any,
        display_name: Any = None,
        guild_id: Any = None,
        channel_id: Any = None,
        channel_name: Any = None,
        message: Any = None,
        timestamp: Any = None,
    ) -> int:
        """Append a message log. member_id and message are required."""
        member_id = Validators.require_text(member_id, "member_id")
        message = Validators.require_text(message, "message")
        stamp = Validators.optional_timestamp(timestamp, "timestamp") or self._now_str()

        return self.db.add_log(
            member_id,
            Validators.optional_text(display_name),
            Validators.optional_scope(guild_id),
            Validators.optional_text(channel_id),
            Validators.optional_text(channel_name),
            message,
            stamp,
        )

    def record_punishment(
        self,
        kind: Any,
        member_id: Any,
        display_name: Any = None,
        reason: Any = None,
        channel_id: Any = None,
        channel_name: Any = None,
        timestamp: Any = None,
        duration_hours: Any = None,
        end_at: Any = None,
    ) -> int:
        """
        Append a warn, mute or ban.

        duration_hours and end_at are kept for mutes only. A mute without
        end_at is open-ended and counts as already completed by the
        escalation policy.

        Returns:
            Row ID of the new punishment.
        """
        kind = Validators.validate_kind(kind)
        member_id = Validators.require_text(member_id, "member_id")
        stamp = Validators.optional_timestamp(timestamp, "timestamp") or self._now_str()

        hours = None
        expiry = None
        if kind == PunishmentKind.MUTE.value:
            hours = Validators.optional_hours(duration_hours)
            expiry = Validators.optional_timestamp(end_at, "end_at")

        name = Validators.optional_text(display_name)
        punishment_id = self.db.add_punishment(
            member_id,
            name,
            kind,
            Validators.optional_text(reason),
            Validators.optional_text(channel_id),
            Validators.optional_text(channel_name),
            stamp,
            hours,
            expiry,
        )

        logger.tree("Punishment Recorded", [
            ("ID", str(punishment_id)),
            ("Kind", kind),
            ("Member", f"{name} ({member_id})" if name else member_id),
            ("Duration", f"{hours}h" if hours is not None else "-"),
            ("Ends", expiry or "-"),
        ], emoji="⚖️")

        return punishment_id

    def record_ticket_batch(self, agent_id: Any, display_name: Any = None, count: Any = 1) -> int:
        """Record tickets closed by an agent. Count below 1 is stored as 1."""
        agent_id = Validators.require_text(agent_id, "agent_id")
        return self.db.add_ticket_batch(
            agent_id,
            Validators.optional_text(display_name),
            Validators.coerce_count(count),
            self._now_str(),
        )

    # =========================================================================
    # Purges
    # =========================================================================

    def clear_member(self, member_id: Any) -> Dict[str, int]:
        """Delete a member's logs and punishments. The member row stays."""
        member_id = Validators.require_text(member_id, "member_id")
        return self.db.clear_member_history(member_id)

    def clear_all(self) -> Dict[str, int]:
        return self.db.clear_all_history()

    # =========================================================================
    # Queries
    # =========================================================================

    def next_action(self, member_id: Any, now: Optional[datetime] = None) -> NextAction:
        """Escalation decision for a member. Unknown members get WARN."""
        member_id = Validators.require_text(member_id, "member_id")
        return compute_next_action(
            self.db.get_member_punishments(member_id),
            now or self.clock(),
        )

    def list_members(self, guild_id: Any = None) -> List[Dict[str, Any]]:
        return aggregation.list_members(
            self.db, self.clock(), Validators.optional_scope(guild_id)
        )

    def member_detail(self, member_id: Any) -> Dict[str, Any]:
        member_id = Validators.require_text(member_id, "member_id")
        return aggregation.member_detail(self.db, member_id, self.clock())

    def member_logs(self, member_id: Any) -> List[Dict[str, Any]]:
        member_id = Validators.require_text(member_id, "member_id")
        return self.db.get_member_logs(member_id)

    def member_punishments(self, member_id: Any) -> List[Dict[str, Any]]:
        member_id = Validators.require_text(member_id, "member_id")
        return self.db.get_member_punishments(member_id)

    def period_slice(self, month: Any) -> aggregation.PeriodSlice:
        """Facts inside the UTC calendar month "YYYY-MM"."""
        return aggregation.period_slice(self.db, Validators.validate_month(month))


# =============================================================================
# Global Instance
# =============================================================================

_moderation_service: Optional[ModerationService] = None


def get_moderation_service() -> ModerationService:
    """Get the moderation service singleton, bound to the global database."""
    global _moderation_service
    if _moderation_service is None:
        _moderation_service = ModerationService(get_db())
    return _moderation_service


__all__ = ["Clock", "ModerationService", "get_moderation_service"]
