"""
Vigia - Database Log Operations Module
======================================

Append-only message log facts.
"""

from typing import List, Optional, TYPE_CHECKING

from vigia.core.database.models import LogRecord

if TYPE_CHECKING:
    from vigia.core.database.manager import DatabaseManager


_LOG_COLUMNS = "id, member_id, member_name, guild_id, channel_id, channel_name, message, timestamp"


class LogsMixin:
    """Mixin for message log operations."""

    def add_log(
        self: "DatabaseManager",
        member_id: str,
        member_name: str,
        guild_id: Optional[str],
        channel_id: str,
        channel_name: str,
        message: str,
        timestamp: str,
    ) -> int:
        """
        Append a log entry.

        Returns:
            Row ID of the new entry.
        """
        cursor = self.execute(
            """INSERT INTO logs
               (member_id, member_name, guild_id, channel_id, channel_name, message, timestamp)
               VALUES (?, ?, ?, ?, ?, ?, ?)""",
            (member_id, member_name, guild_id, channel_id, channel_name, message, timestamp)
        )
        return cursor.lastrowid

    def get_member_logs(self: "DatabaseManager", member_id: str) -> List[LogRecord]:
        """All logs for a member, newest (highest id) first."""
        rows = self.fetchall(
            f"SELECT {_LOG_COLUMNS} FROM logs WHERE member_id = ? ORDER BY id DESC",
            (member_id,)
        )
        return [dict(row) for row in rows]

    def get_logs_between(self: "DatabaseManager", start: str, end: str) -> List[LogRecord]:
        """Logs with start <= timestamp < end, in insertion order."""
        rows = self.fetchall(
            f"SELECT {_LOG_COLUMNS} FROM logs WHERE timestamp >= ? AND timestamp < ? ORDER BY id",
            (start, end)
        )
        return [dict(row) for row in rows]


__all__ = ["LogsMixin"]
