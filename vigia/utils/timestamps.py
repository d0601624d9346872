"""
Vigia - Timestamp Utils
=======================

UTC timestamp normalisation for stored facts.

Every timestamp written to the store goes through format_timestamp(),
which yields a fixed-width UTC string such as "2024-02-01T00:00:00.000Z".
Because the width and zone never vary, lexical order of the stored
strings equals chronological order, so window queries compare strings
directly in SQL.
"""

from datetime import datetime, timezone
from typing import Optional, Tuple, Union

from vigia.core.constants import TIMESTAMP_FORMAT


TimestampInput = Union[str, datetime, None]


def utc_now() -> datetime:
    """Current instant as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def parse_timestamp(value: TimestampInput) -> Optional[datetime]:
    """
    Parse an ISO-8601 string or datetime into an aware UTC datetime.

    Naive values are taken as UTC. A trailing "Z" is accepted.

    Returns:
        Aware UTC datetime, or None for None/empty input.

    Raises:
        ValueError: If the value is not a recognisable timestamp.
    """
    if value is None or value == "":
        return None

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        text = value.strip()
        if text[-1:] in ("Z", "z"):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)
    else:
        raise ValueError(f"Unsupported timestamp value: {value!r}")

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def format_timestamp(value: datetime) -> str:
    """Format a datetime as the canonical stored string (UTC, milliseconds, Z)."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return f"{value.strftime(TIMESTAMP_FORMAT)}.{value.microsecond // 1000:03d}Z"


def normalize_timestamp(value: TimestampInput) -> Optional[str]:
    """Parse then re-format; None stays None."""
    parsed = parse_timestamp(value)
    return format_timestamp(parsed) if parsed is not None else None


def month_window(month: str) -> Tuple[datetime, datetime]:
    """
    Half-open UTC window [start, end) covering a "YYYY-MM" calendar month.

    Raises:
        ValueError: If the month is not a real calendar month.
    """
    year, mon = int(month[:4]), int(month[5:7])
    start = datetime(year, mon, 1, tzinfo=timezone.utc)
    if mon == 12:
        end = datetime(year + 1, 1, 1, tzinfo=timezone.utc)
    else:
        end = datetime(year, mon + 1, 1, tzinfo=timezone.utc)
    return start, end


def current_month(now: Optional[datetime] = None) -> str:
    """The "YYYY-MM" month containing now (UTC)."""
    now = now or utc_now()
    return now.astimezone(timezone.utc).strftime("%Y-%m")


__all__ = [
    "utc_now",
    "parse_timestamp",
    "format_timestamp",
    "normalize_timestamp",
    "month_window",
    "current_month",
]
