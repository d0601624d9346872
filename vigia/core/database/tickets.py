"""
Vigia - Database Ticket Operations Module
=========================================

Ticket batches closed by support agents. Totals are sums over batches.
"""

from typing import Dict, List, TYPE_CHECKING

from vigia.core.logger import logger
from vigia.core.database.models import TicketBatchRecord

if TYPE_CHECKING:
    from vigia.core.database.manager import DatabaseManager


class TicketsMixin:
    """Mixin for ticket batch operations."""

    def add_ticket_batch(
        self: "DatabaseManager",
        agent_id: str,
        agent_name: str,
        count: int,
        timestamp: str,
    ) -> int:
        """
        Record a batch of closed tickets.

        Args:
            agent_id: Agent (member) who closed the tickets.
            agent_name: Display name snapshot.
            count: Number of tickets in the batch, at least 1.
            timestamp: Normalised insertion time.

        Returns:
            Row ID of the new batch.
        """
        cursor = self.execute(
            """INSERT INTO ticket_batches (agent_id, agent_name, count, timestamp)
               VALUES (?, ?, ?, ?)""",
            (agent_id, agent_name, count, timestamp)
        )

        logger.debug("Ticket Batch Recorded", [
            ("Agent", agent_name or agent_id),
            ("Count", str(count)),
        ])

        return cursor.lastrowid

    def get_ticket_total(self: "DatabaseManager", agent_id: str) -> int:
        row = self.fetchone(
            "SELECT COALESCE(SUM(count), 0) AS total FROM ticket_batches WHERE agent_id = ?",
            (agent_id,)
        )
        return row["total"] if row else 0

    def get_ticket_totals(self: "DatabaseManager") -> Dict[str, int]:
        """Ticket totals for every agent that has at least one batch."""
        rows = self.fetchall(
            "SELECT agent_id, SUM(count) AS total FROM ticket_batches GROUP BY agent_id"
        )
        return {row["agent_id"]: row["total"] for row in rows}

    def get_ticket_batches_between(self: "DatabaseManager", start: str, end: str) -> List[TicketBatchRecord]:
        """Ticket batches with start <= timestamp < end, in insertion order."""
        rows = self.fetchall(
            """SELECT id, agent_id, agent_name, count, timestamp FROM ticket_batches
               WHERE timestamp >= ? AND timestamp < ? ORDER BY id""",
            (start, end)
        )
        return [dict(row) for row in rows]


__all__ = ["TicketsMixin"]
