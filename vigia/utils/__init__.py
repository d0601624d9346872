"""
Vigia - Utils Package
=====================

Stateless helpers used across the codebase.

Available Utilities:
    timestamps: UTC normalisation, parsing and month windows
    validators: Synchronous field validation with named failures
"""

from .timestamps import (
    utc_now,
    parse_timestamp,
    format_timestamp,
    normalize_timestamp,
    month_window,
    current_month,
)
from .validators import ValidationError, Validators


__all__ = [
    "utc_now",
    "parse_timestamp",
    "format_timestamp",
    "normalize_timestamp",
    "month_window",
    "current_month",
    "ValidationError",
    "Validators",
]
