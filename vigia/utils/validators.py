"""
Vigia - Input Validators
========================

Synchronous validation for every inbound write and query.

Validation runs before any store access, so a rejected request never
leaves partial side effects. Each failure names the violated field.
"""

import re
from typing import Any, Optional

from vigia.core.constants import MONTH_PATTERN, PUNISHMENT_KINDS
from vigia.utils.timestamps import TimestampInput, normalize_timestamp


class ValidationError(Exception):
    """
    Raised when an input field is missing or malformed.

    Attributes:
        field: Name of the violated field.
        code: One of "missing_field", "invalid_format", "invalid_value".
    """

    MISSING_FIELD = "missing_field"
    INVALID_FORMAT = "invalid_format"
    INVALID_VALUE = "invalid_value"

    def __init__(self, field: str, message: str, code: str = MISSING_FIELD):
        super().__init__(message)
        self.field = field
        self.message = message
        self.code = code


_MONTH_RE = re.compile(MONTH_PATTERN)


class Validators:
    """Input validation utilities"""

    @staticmethod
    def require_text(value: Any, field: str) -> str:
        """
        Require a non-empty string (whitespace-only counts as empty).

        Numbers are accepted and converted, since member and agent ids
        arrive as JSON numbers from some clients.
        """
        if isinstance(value, bool):
            raise ValidationError(field, f"{field} must be a string", ValidationError.INVALID_VALUE)
        if isinstance(value, (int, float)):
            value = str(value)
        if value is None or not isinstance(value, str) or not value.strip():
            raise ValidationError(field, f"{field} required")
        return value.strip()

    @staticmethod
    def optional_text(value: Any, default: str = "") -> str:
        """Coerce an optional text field, empty string when missing."""
        if value is None:
            return default
        return str(value)

    @staticmethod
    def optional_scope(value: Any) -> Optional[str]:
        """Guild scope: None or empty means unscoped."""
        if value is None:
            return None
        text = str(value).strip()
        return text or None

    @staticmethod
    def validate_kind(value: Any) -> str:
        """Punishment kind must be one of warn, mute, ban."""
        if value is None or value == "":
            raise ValidationError("kind", "kind required")
        kind = str(value).lower()
        if kind not in PUNISHMENT_KINDS:
            raise ValidationError(
                "kind",
                f"kind must be one of {', '.join(PUNISHMENT_KINDS)}",
                ValidationError.INVALID_VALUE,
            )
        return kind

    @staticmethod
    def validate_month(value: Any) -> str:
        """Month must be "YYYY-MM" with a real month number."""
        if value is None or value == "":
            raise ValidationError("month", "month required")
        if not isinstance(value, str) or not _MONTH_RE.fullmatch(value):
            raise ValidationError("month", "month format YYYY-MM", ValidationError.INVALID_FORMAT)
        if not 1 <= int(value[5:7]) <= 12:
            raise ValidationError("month", "month format YYYY-MM", ValidationError.INVALID_FORMAT)
        return value

    @staticmethod
    def optional_timestamp(value: TimestampInput, field: str) -> Optional[str]:
        """Normalise an optional timestamp field to the stored format."""
        try:
            return normalize_timestamp(value)
        except ValueError:
            raise ValidationError(
                field,
                f"{field} must be an ISO-8601 timestamp",
                ValidationError.INVALID_FORMAT,
            )

    @staticmethod
    def optional_hours(value: Any, field: str = "duration_hours") -> Optional[float]:
        """
        Mute duration in hours. Any non-negative number is accepted;
        values off the 2/4/6 ladder are stored as given.
        """
        if value is None or value == "":
            return None
        if isinstance(value, bool):
            raise ValidationError(field, f"{field} must be a number", ValidationError.INVALID_VALUE)
        try:
            hours = float(value)
        except (TypeError, ValueError):
            raise ValidationError(field, f"{field} must be a number", ValidationError.INVALID_VALUE)
        if hours < 0:
            raise ValidationError(field, f"{field} cannot be negative", ValidationError.INVALID_VALUE)
        return int(hours) if hours.is_integer() else hours

    @staticmethod
    def coerce_count(value: Any) -> int:
        """Ticket batch count: anything non-numeric or below 1 becomes 1."""
        try:
            count = int(value if value is not None else 1)
        except (TypeError, ValueError):
            return 1
        return max(1, count)


__all__ = ["ValidationError", "Validators"]
