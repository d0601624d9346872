"""
Vigia - Monthly Spreadsheet
===========================

Writes a period slice as an .xlsx workbook with one sheet per fact table.
"""

from pathlib import Path
from typing import Any, Dict, List

from openpyxl import Workbook
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE
from openpyxl.styles import Font

from vigia.services.aggregation import PeriodSlice


# =============================================================================
# Sheet Layout
# =============================================================================

LOG_HEADERS = ["ID", "MemberID", "MemberName", "GuildID", "Channel", "Message", "Timestamp"]
PUNISHMENT_HEADERS = [
    "ID", "MemberID", "MemberName", "Type", "Reason", "Channel",
    "DurationHours", "EndAt", "Timestamp",
]
TICKET_HEADERS = ["ID", "AgentID", "AgentName", "Count", "Timestamp"]


def _channel_label(row: Dict[str, Any]) -> str:
    """'#name', falling back to the channel id, or '' when neither is known."""
    label = row.get("channel_name") or row.get("channel_id")
    return f"#{label}" if label else ""


def _add_sheet(workbook: Workbook, title: str, headers: List[str], rows: List[List[Any]]) -> None:
    sheet = workbook.create_sheet(title)
    sheet.append(headers)
    for cell in sheet[1]:
        cell.font = Font(bold=True)
    for row in rows:
        # Control characters in chat messages are rejected by the xlsx format
        sheet.append([
            ILLEGAL_CHARACTERS_RE.sub("", v) if isinstance(v, str) else v
            for v in row
        ])
    sheet.freeze_panes = "A2"


def write_spreadsheet(period: PeriodSlice, path: Path) -> None:
    """
    Write the Logs, Punishments and Tickets sheets to path.

    Args:
        period: Facts of one month.
        path: Destination file. Overwritten if present.
    """
    workbook = Workbook()
    workbook.remove(workbook.active)

    _add_sheet(workbook, "Logs", LOG_HEADERS, [
        [r["id"], r["member_id"], r["member_name"], r["guild_id"],
         _channel_label(r), r["message"], r["timestamp"]]
        for r in period.logs
    ])
    _add_sheet(workbook, "Punishments", PUNISHMENT_HEADERS, [
        [r["id"], r["member_id"], r["member_name"], r["kind"], r["reason"],
         _channel_label(r), r["duration_hours"], r["end_at"], r["timestamp"]]
        for r in period.punishments
    ])
    _add_sheet(workbook, "Tickets", TICKET_HEADERS, [
        [r["id"], r["agent_id"], r["agent_name"], r["count"], r["timestamp"]]
        for r in period.ticket_batches
    ])

    workbook.save(str(path))


__all__ = ["write_spreadsheet"]
