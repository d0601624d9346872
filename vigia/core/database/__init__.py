"""
Vigia - Database Module
=======================

SQLite record store: one manager class composed of per-table mixins.
"""

from vigia.core.database.manager import DatabaseManager, get_db
from vigia.core.database.models import (
    MemberRecord,
    LogRecord,
    PunishmentRecord,
    TicketBatchRecord,
)

__all__ = [
    "DatabaseManager",
    "get_db",
    "MemberRecord",
    "LogRecord",
    "PunishmentRecord",
    "TicketBatchRecord",
]
