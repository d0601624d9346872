"""
Vigia - History API Models
==========================

Period slices, monthly report files, purge results and policy decisions.
"""

from typing import List, Optional, Union

from pydantic import BaseModel, Field

from vigia.api.models.base import RequestModel
from vigia.api.models.records import LogOut, PunishmentOut, TicketBatchOut


class PeriodSliceOut(BaseModel):
    """Facts with start <= timestamp < end."""

    month: str
    start: str
    end: str
    logs: List[LogOut] = Field(default_factory=list)
    punishments: List[PunishmentOut] = Field(default_factory=list)
    ticket_batches: List[TicketBatchOut] = Field(default_factory=list)


class ExportRequest(RequestModel):
    """Month to export; current UTC month when omitted."""

    month: Optional[str] = None


class ReportFiles(BaseModel):
    """Download paths of a monthly report."""

    month: str
    xlsx: str
    pdf: str


class ClearResult(BaseModel):
    """Rows deleted by a purge. tickets is set only by a full purge."""

    logs: int
    punishments: int
    tickets: Optional[int] = None


class NextActionOut(BaseModel):
    """
    Next step on the escalation ladder.

    hours is set for "mute"; until is set for "activeMute".
    """

    action: str
    hours: Optional[Union[int, float]] = None
    until: Optional[str] = None


__all__ = [
    "PeriodSliceOut",
    "ExportRequest",
    "ReportFiles",
    "ClearResult",
    "NextActionOut",
]
