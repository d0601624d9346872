"""
Vigia - Services Package
========================

Escalation policy, aggregation views, the moderation facade and reports.
"""

from vigia.services.escalation import ActionType, NextAction, compute_next_action
from vigia.services.aggregation import MemberRollup, PeriodSlice
from vigia.services.moderation import ModerationService, get_moderation_service
from vigia.services.reports import ReportError, ReportService, get_report_service

__all__ = [
    "ActionType",
    "NextAction",
    "compute_next_action",
    "MemberRollup",
    "PeriodSlice",
    "ModerationService",
    "get_moderation_service",
    "ReportError",
    "ReportService",
    "get_report_service",
]
