"""
Vigia - Database Schema Module
==============================

Table definitions.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from vigia.core.database.manager import DatabaseManager


class SchemaMixin:
    """Mixin for database schema initialization."""

    def _init_tables(self: "DatabaseManager") -> None:
        """
        Initialize all database tables.

        DESIGN: Tables are created if not exist, allowing safe restarts.
        Fact tables use AUTOINCREMENT ids; the id is the canonical order
        of facts, independent of their timestamps.
        """
        with self._db_lock:
            conn = self._ensure_connection()
            cursor = conn.cursor()

            # -----------------------------------------------------------------
            # Members
            # DESIGN: Upserted on sync; deleting a member leaves its facts
            # -----------------------------------------------------------------
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS members (
                    id TEXT PRIMARY KEY NOT NULL,
                    guild_id TEXT,
                    name TEXT,
                    joined_at TEXT
                )
            """)
            cursor.execute(
                "CREATE INDEX IF NOT EXISTS idx_members_guild ON members(guild_id)"
            )

            # -----------------------------------------------------------------
            # Logs
            # -----------------------------------------------------------------
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS logs (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    member_id TEXT NOT NULL,
                    member_name TEXT,
                    guild_id TEXT,
                    channel_id TEXT,
                    channel_name TEXT,
                    message TEXT NOT NULL,
                    timestamp TEXT NOT NULL
                )
            """)
            cursor.execute(
                "CREATE INDEX IF NOT EXISTS idx_logs_member ON logs(member_id)"
            )
            cursor.execute(
                "CREATE INDEX IF NOT EXISTS idx_logs_timestamp ON logs(timestamp)"
            )

            # -----------------------------------------------------------------
            # Punishments
            # DESIGN: end_at is the absolute expiry of a timed mute; expiry
            # is derived at query time, never written back
            # -----------------------------------------------------------------
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS punishments (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    member_id TEXT NOT NULL,
                    member_name TEXT,
                    kind TEXT NOT NULL CHECK (kind IN ('warn', 'mute', 'ban')),
                    reason TEXT,
                    channel_id TEXT,
                    channel_name TEXT,
                    timestamp TEXT NOT NULL,
                    duration_hours INTEGER,
                    end_at TEXT
                )
            """)
            cursor.execute(
                "CREATE INDEX IF NOT EXISTS idx_punishments_member ON punishments(member_id, id DESC)"
            )
            cursor.execute(
                "CREATE INDEX IF NOT EXISTS idx_punishments_timestamp ON punishments(timestamp)"
            )

            # -----------------------------------------------------------------
            # Ticket Batches
            # -----------------------------------------------------------------
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS ticket_batches (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    agent_id TEXT NOT NULL,
                    agent_name TEXT,
                    count INTEGER NOT NULL CHECK (count >= 1),
                    timestamp TEXT NOT NULL
                )
            """)
            cursor.execute(
                "CREATE INDEX IF NOT EXISTS idx_ticket_batches_agent ON ticket_batches(agent_id)"
            )
            cursor.execute(
                "CREATE INDEX IF NOT EXISTS idx_ticket_batches_timestamp ON ticket_batches(timestamp)"
            )

            conn.commit()


__all__ = ["SchemaMixin"]
