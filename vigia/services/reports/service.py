"""
Vigia - Report Service
======================

Builds the monthly export pair (spreadsheet + PDF) from a period slice.

Both files are rendered to a temporary name and renamed into place, so
a failed render never leaves a half-written export. Reports only read
facts; a failure here cannot touch the record store.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, Optional

from vigia.core.config import get_config
from vigia.core.logger import logger
from vigia.services.aggregation import PeriodSlice
from vigia.services.moderation import ModerationService, get_moderation_service
from vigia.services.reports.document import write_document
from vigia.services.reports.spreadsheet import write_spreadsheet
from vigia.utils.timestamps import current_month
from vigia.utils.validators import Validators


class ReportError(Exception):
    """Raised when a report file cannot be rendered or written."""

    def __init__(self, month: str, message: str):
        super().__init__(message)
        self.month = month
        self.message = message


@dataclass(frozen=True)
class ReportHandles:
    """Where the rendered files of one month live."""
    month: str
    spreadsheet: Path
    document: Path

    def to_dict(self, url_prefix: str = "/exports") -> Dict[str, str]:
        return {
            "month": self.month,
            "xlsx": f"{url_prefix}/{self.spreadsheet.name}",
            "pdf": f"{url_prefix}/{self.document.name}",
        }


def _write_atomic(path: Path, render: Callable[[Path], None]) -> None:
    """Render to path.tmp, then rename over path."""
    tmp_path = path.with_name(path.name + ".tmp")
    try:
        render(tmp_path)
        os.replace(tmp_path, path)
    finally:
        if tmp_path.exists():
            tmp_path.unlink()


class ReportService:
    """
    Monthly report builder.

    Args:
        moderation: Source of period slices.
        exports_dir: Directory the files are written to.
    """

    def __init__(self, moderation: ModerationService, exports_dir: Path) -> None:
        self.moderation = moderation
        self.exports_dir = Path(exports_dir)

    def build_monthly_report(self, month: Optional[str] = None) -> ReportHandles:
        """
        Render "<month>.xlsx" and "<month>.pdf" into the exports directory.

        Args:
            month: "YYYY-MM". Defaults to the current UTC month.

        Raises:
            ValidationError: If month is malformed. Nothing is written.
            ReportError: If either file cannot be rendered.
        """
        if month is None or month == "":
            month = current_month(self.moderation.clock())
        month = Validators.validate_month(month)

        period: PeriodSlice = self.moderation.period_slice(month)
        spreadsheet = self.exports_dir / f"{month}.xlsx"
        document = self.exports_dir / f"{month}.pdf"

        try:
            self.exports_dir.mkdir(parents=True, exist_ok=True)
            _write_atomic(spreadsheet, lambda p: write_spreadsheet(period, p))
            _write_atomic(document, lambda p: write_document(period, p))
        except (OSError, ValueError) as e:
            logger.error("Monthly Report Failed", [
                ("Month", month),
                ("Error Type", type(e).__name__),
                ("Error", str(e)[:100]),
            ])
            raise ReportError(month, f"Failed to build report for {month}: {e}") from e

        logger.tree("Monthly Report Built", [
            ("Month", month),
            ("Logs", str(len(period.logs))),
            ("Punishments", str(len(period.punishments))),
            ("Ticket Batches", str(len(period.ticket_batches))),
            ("Directory", str(self.exports_dir)),
        ], emoji="📊")

        return ReportHandles(month=month, spreadsheet=spreadsheet, document=document)


# =============================================================================
# Global Instance
# =============================================================================

_report_service: Optional[ReportService] = None


def get_report_service() -> ReportService:
    """Get the report service singleton."""
    global _report_service
    if _report_service is None:
        _report_service = ReportService(get_moderation_service(), get_config().exports_dir)
    return _report_service


__all__ = ["ReportError", "ReportHandles", "ReportService", "get_report_service"]
