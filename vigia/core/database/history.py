"""
Vigia - History Purge Operations Mixin
======================================

Bulk deletion of facts, per member or store-wide.
"""

from typing import Dict, TYPE_CHECKING

from vigia.core.logger import logger

if TYPE_CHECKING:
    from .manager import DatabaseManager


class HistoryMixin:
    """Mixin for purging logs, punishments and ticket batches."""

    def clear_member_history(self: "DatabaseManager", member_id: str) -> Dict[str, int]:
        """
        Delete every log and punishment of one member.

        The member row and ticket batches are left in place.

        Returns:
            {"logs": deleted, "punishments": deleted}
        """
        with self.transaction() as tx:
            logs = tx.execute("DELETE FROM logs WHERE member_id = ?", (member_id,)).rowcount
            punishments = tx.execute(
                "DELETE FROM punishments WHERE member_id = ?", (member_id,)
            ).rowcount

        logger.tree("Member History Cleared", [
            ("Member ID", member_id),
            ("Logs", str(logs)),
            ("Punishments", str(punishments)),
        ], emoji="🧹")

        return {"logs": logs, "punishments": punishments}

    def clear_all_history(self: "DatabaseManager") -> Dict[str, int]:
        """
        Delete every log, punishment and ticket batch. Members survive.

        Returns:
            {"logs": deleted, "punishments": deleted, "tickets": deleted}
        """
        with self.transaction() as tx:
            logs = tx.execute("DELETE FROM logs").rowcount
            punishments = tx.execute("DELETE FROM punishments").rowcount
            tickets = tx.execute("DELETE FROM ticket_batches").rowcount

        logger.tree("All History Cleared", [
            ("Logs", str(logs)),
            ("Punishments", str(punishments)),
            ("Ticket Batches", str(tickets)),
        ], emoji="🧹")

        return {"logs": logs, "punishments": punishments, "tickets": tickets}


__all__ = ["HistoryMixin"]
