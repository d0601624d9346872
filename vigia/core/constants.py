"""
Vigia - Constants
=================

Fixed values shared across the record store, the escalation ladder
and the HTTP boundary.
"""

from enum import Enum


# =============================================================================
# Punishment Kinds
# =============================================================================

class PunishmentKind(str, Enum):
    """Kinds of punishment facts. Stored verbatim in punishments.kind."""

    WARN = "warn"
    MUTE = "mute"
    BAN = "ban"


PUNISHMENT_KINDS = tuple(kind.value for kind in PunishmentKind)


# =============================================================================
# Escalation Ladder
# =============================================================================

# warn -> mute 2h -> mute 4h -> mute 6h -> reset to warn
MUTE_LADDER_HOURS = (2, 4, 6)
FIRST_MUTE_HOURS = MUTE_LADDER_HOURS[0]


# =============================================================================
# Database
# =============================================================================

DB_CONNECTION_TIMEOUT = 30.0  # seconds
SQLITE_BUSY_TIMEOUT = 5000  # milliseconds


# =============================================================================
# Formats
# =============================================================================

MONTH_PATTERN = r"\d{4}-\d{2}"  # matched with fullmatch
TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S"  # milliseconds and "Z" appended


# =============================================================================
# Reports
# =============================================================================

REPORT_TOP_PUNISHMENTS = 10


__all__ = [
    "PunishmentKind",
    "PUNISHMENT_KINDS",
    "MUTE_LADDER_HOURS",
    "FIRST_MUTE_HOURS",
    "DB_CONNECTION_TIMEOUT",
    "SQLITE_BUSY_TIMEOUT",
    "MONTH_PATTERN",
    "TIMESTAMP_FORMAT",
    "REPORT_TOP_PUNISHMENTS",
]
