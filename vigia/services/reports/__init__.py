"""
Vigia - Reports Package
=======================

Monthly exports built from aggregation period slices.
"""

from vigia.services.reports.service import (
    ReportError,
    ReportHandles,
    ReportService,
    get_report_service,
)

__all__ = ["ReportError", "ReportHandles", "ReportService", "get_report_service"]
