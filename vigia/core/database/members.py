"""
Vigia - Database Member Operations Module
=========================================

Member upsert, removal and lookup.
"""

from typing import Any, Dict, List, Optional, Sequence, TYPE_CHECKING

from vigia.core.logger import logger
from vigia.core.database.models import MemberRecord

if TYPE_CHECKING:
    from vigia.core.database.manager import DatabaseManager


_UPSERT_MEMBER = """
    INSERT INTO members (id, guild_id, name, joined_at) VALUES (?, ?, ?, ?)
    ON CONFLICT(id) DO UPDATE SET
        name = excluded.name,
        guild_id = excluded.guild_id,
        joined_at = excluded.joined_at
"""


class MembersMixin:
    """Mixin for member-related database operations."""

    def upsert_member(
        self: "DatabaseManager",
        member_id: str,
        name: str,
        joined_at: str,
        guild_id: Optional[str] = None,
    ) -> None:
        """
        Insert a member or overwrite its name, scope and join time.

        Args:
            member_id: Stable member identifier.
            name: Display name snapshot.
            joined_at: Normalised join timestamp.
            guild_id: Guild scope, None for unscoped.
        """
        self.execute(_UPSERT_MEMBER, (member_id, guild_id, name, joined_at))

    def upsert_members_batch(
        self: "DatabaseManager",
        guild_id: Optional[str],
        rows: Sequence[Dict[str, Any]],
    ) -> int:
        """
        Upsert a batch of members atomically.

        DESIGN: Every row goes through one BEGIN IMMEDIATE transaction.
        Any failure rolls back the whole batch, so either every member
        is upserted or none is.

        Args:
            guild_id: Guild scope applied to every row.
            rows: Dicts with member_id, name and joined_at.

        Returns:
            Number of rows upserted.
        """
        with self.transaction() as tx:
            for row in rows:
                tx.execute(
                    _UPSERT_MEMBER,
                    (row["member_id"], guild_id, row["name"], row["joined_at"]),
                )

        logger.tree("Member Batch Synced", [
            ("Guild", guild_id or "global"),
            ("Upserted", str(len(rows))),
        ], emoji="👥")

        return len(rows)

    def delete_member(self: "DatabaseManager", member_id: str) -> bool:
        """
        Delete the member row only. Logs, punishments and tickets survive.

        Returns:
            True if a row was deleted.
        """
        cursor = self.execute("DELETE FROM members WHERE id = ?", (member_id,))
        return cursor.rowcount > 0

    def get_member(self: "DatabaseManager", member_id: str) -> Optional[MemberRecord]:
        row = self.fetchone(
            "SELECT id, guild_id, name, joined_at FROM members WHERE id = ?",
            (member_id,)
        )
        return dict(row) if row else None

    def get_members(self: "DatabaseManager", guild_id: Optional[str] = None) -> List[MemberRecord]:
        """
        Get members, optionally limited to a guild scope.

        A scoped query also includes unscoped (guild_id NULL) members.
        """
        if guild_id:
            rows = self.fetchall(
                """SELECT id, guild_id, name, joined_at FROM members
                   WHERE guild_id IS NULL OR guild_id = ?
                   ORDER BY rowid""",
                (guild_id,)
            )
        else:
            rows = self.fetchall(
                "SELECT id, guild_id, name, joined_at FROM members ORDER BY rowid"
            )
        return [dict(row) for row in rows]


__all__ = ["MembersMixin"]
