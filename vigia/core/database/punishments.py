"""
Vigia - Database Punishment Operations Module
=============================================

Append-only warn / mute / ban facts and per-member aggregates over them.
"""

from typing import Dict, List, Optional, Union, TYPE_CHECKING

from vigia.core.database.models import PunishmentRecord

if TYPE_CHECKING:
    from vigia.core.database.manager import DatabaseManager


_PUNISHMENT_COLUMNS = (
    "id, member_id, member_name, kind, reason, channel_id, channel_name, "
    "timestamp, duration_hours, end_at"
)


class PunishmentsMixin:
    """Mixin for punishment fact operations."""

    # =========================================================================
    # Writes
    # =========================================================================

    def add_punishment(
        self: "DatabaseManager",
        member_id: str,
        member_name: str,
        kind: str,
        reason: str,
        channel_id: str,
        channel_name: str,
        timestamp: str,
        duration_hours: Optional[Union[int, float]] = None,
        end_at: Optional[str] = None,
    ) -> int:
        """
        Append a punishment fact.

        Rows are never updated afterwards; mute expiry is derived from
        end_at at query time.

        Returns:
            Row ID of the new punishment.
        """
        cursor = self.execute(
            """INSERT INTO punishments
               (member_id, member_name, kind, reason, channel_id, channel_name,
                timestamp, duration_hours, end_at)
               VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)""",
            (member_id, member_name, kind, reason, channel_id, channel_name,
             timestamp, duration_hours, end_at)
        )
        return cursor.lastrowid

    # =========================================================================
    # Per-Member Reads
    # =========================================================================

    def get_member_punishments(self: "DatabaseManager", member_id: str) -> List[PunishmentRecord]:
        """All punishments of a member, most recent (highest id) first."""
        rows = self.fetchall(
            f"SELECT {_PUNISHMENT_COLUMNS} FROM punishments WHERE member_id = ? ORDER BY id DESC",
            (member_id,)
        )
        return [dict(row) for row in rows]

    def get_member_punishments_by_kind(
        self: "DatabaseManager",
        member_id: str,
        kind: str,
    ) -> List[PunishmentRecord]:
        rows = self.fetchall(
            f"""SELECT {_PUNISHMENT_COLUMNS} FROM punishments
                WHERE member_id = ? AND kind = ? ORDER BY id DESC""",
            (member_id, kind)
        )
        return [dict(row) for row in rows]

    # =========================================================================
    # Store-Wide Aggregates
    # =========================================================================

    def get_punishment_counts(self: "DatabaseManager") -> Dict[str, Dict[str, int]]:
        """
        Punishment counts grouped by member and kind.

        Returns:
            {member_id: {"warn": n, "mute": n, "ban": n}}, kinds with no
            rows are absent from the inner dict.
        """
        rows = self.fetchall(
            "SELECT member_id, kind, COUNT(*) AS c FROM punishments GROUP BY member_id, kind"
        )
        counts: Dict[str, Dict[str, int]] = {}
        for row in rows:
            counts.setdefault(row["member_id"], {})[row["kind"]] = row["c"]
        return counts

    def get_last_punishments(self: "DatabaseManager") -> Dict[str, PunishmentRecord]:
        """Most recent punishment (highest id) of every member that has one."""
        rows = self.fetchall(
            f"""SELECT {_PUNISHMENT_COLUMNS} FROM punishments
                WHERE id IN (SELECT MAX(id) FROM punishments GROUP BY member_id)"""
        )
        return {row["member_id"]: dict(row) for row in rows}

    def get_timed_mutes(self: "DatabaseManager") -> Dict[str, List[PunishmentRecord]]:
        """
        Every time-boxed mute grouped by member, most recent first.

        Used to evaluate active mutes for the member list in one query.
        """
        rows = self.fetchall(
            f"""SELECT {_PUNISHMENT_COLUMNS} FROM punishments
                WHERE kind = 'mute' AND end_at IS NOT NULL
                ORDER BY id DESC"""
        )
        grouped: Dict[str, List[PunishmentRecord]] = {}
        for row in rows:
            grouped.setdefault(row["member_id"], []).append(dict(row))
        return grouped

    def get_punishments_between(self: "DatabaseManager", start: str, end: str) -> List[PunishmentRecord]:
        """Punishments with start <= timestamp < end, in insertion order."""
        rows = self.fetchall(
            f"""SELECT {_PUNISHMENT_COLUMNS} FROM punishments
                WHERE timestamp >= ? AND timestamp < ? ORDER BY id""",
            (start, end)
        )
        return [dict(row) for row in rows]


__all__ = ["PunishmentsMixin"]
