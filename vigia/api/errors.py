"""
Vigia - API Error System
========================

Error codes and the error envelope shared by every endpoint.
"""

from enum import Enum
from typing import Any, Dict, Optional

from fastapi import HTTPException
from fastapi.responses import JSONResponse
from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_401_UNAUTHORIZED,
    HTTP_404_NOT_FOUND,
    HTTP_429_TOO_MANY_REQUESTS,
    HTTP_500_INTERNAL_SERVER_ERROR,
)

from vigia.utils.validators import ValidationError


# =============================================================================
# Error Codes
# =============================================================================

class ErrorCode(str, Enum):
    """
    Error codes for the API.

    Format: CATEGORY_SPECIFIC_ERROR

    Categories:
    - AUTH: API key policy errors
    - VALIDATION: Input validation errors
    - REPORT: Export rendering errors
    - RATE_LIMIT: Rate limiting errors
    - SERVER: Server-side errors
    """

    # Authentication errors (401)
    AUTH_MISSING_KEY = "AUTH_MISSING_KEY"
    AUTH_INVALID_KEY = "AUTH_INVALID_KEY"

    # Validation errors (400)
    VALIDATION_FAILED = "VALIDATION_FAILED"
    VALIDATION_MISSING_FIELD = "VALIDATION_MISSING_FIELD"
    VALIDATION_INVALID_FORMAT = "VALIDATION_INVALID_FORMAT"
    VALIDATION_INVALID_TYPE = "VALIDATION_INVALID_TYPE"

    # Routing (404)
    NOT_FOUND = "NOT_FOUND"

    # Report errors (500)
    REPORT_GENERATION_FAILED = "REPORT_GENERATION_FAILED"

    # Rate limit errors (429)
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"

    # Server errors (500)
    SERVER_ERROR = "SERVER_ERROR"
    SERVER_DATABASE_ERROR = "SERVER_DATABASE_ERROR"


# =============================================================================
# Error Messages
# =============================================================================

ERROR_MESSAGES: Dict[ErrorCode, str] = {
    ErrorCode.AUTH_MISSING_KEY: "API key is required",
    ErrorCode.AUTH_INVALID_KEY: "Invalid API key",

    ErrorCode.VALIDATION_FAILED: "Request validation failed",
    ErrorCode.VALIDATION_MISSING_FIELD: "Required field is missing",
    ErrorCode.VALIDATION_INVALID_FORMAT: "Invalid data format",
    ErrorCode.VALIDATION_INVALID_TYPE: "Invalid value",

    ErrorCode.NOT_FOUND: "Resource not found",

    ErrorCode.REPORT_GENERATION_FAILED: "Failed to generate report",

    ErrorCode.RATE_LIMIT_EXCEEDED: "Too many requests, please slow down",

    ErrorCode.SERVER_ERROR: "An internal server error occurred",
    ErrorCode.SERVER_DATABASE_ERROR: "A database error occurred",
}


# =============================================================================
# Default Status Codes
# =============================================================================

ERROR_STATUS_CODES: Dict[ErrorCode, int] = {
    ErrorCode.AUTH_MISSING_KEY: HTTP_401_UNAUTHORIZED,
    ErrorCode.AUTH_INVALID_KEY: HTTP_401_UNAUTHORIZED,

    ErrorCode.VALIDATION_FAILED: HTTP_400_BAD_REQUEST,
    ErrorCode.VALIDATION_MISSING_FIELD: HTTP_400_BAD_REQUEST,
    ErrorCode.VALIDATION_INVALID_FORMAT: HTTP_400_BAD_REQUEST,
    ErrorCode.VALIDATION_INVALID_TYPE: HTTP_400_BAD_REQUEST,

    ErrorCode.NOT_FOUND: HTTP_404_NOT_FOUND,

    ErrorCode.REPORT_GENERATION_FAILED: HTTP_500_INTERNAL_SERVER_ERROR,

    ErrorCode.RATE_LIMIT_EXCEEDED: HTTP_429_TOO_MANY_REQUESTS,

    ErrorCode.SERVER_ERROR: HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorCode.SERVER_DATABASE_ERROR: HTTP_500_INTERNAL_SERVER_ERROR,
}

# ValidationError.code -> API error code
_VALIDATION_CODES: Dict[str, ErrorCode] = {
    ValidationError.MISSING_FIELD: ErrorCode.VALIDATION_MISSING_FIELD,
    ValidationError.INVALID_FORMAT: ErrorCode.VALIDATION_INVALID_FORMAT,
    ValidationError.INVALID_VALUE: ErrorCode.VALIDATION_INVALID_TYPE,
}


# =============================================================================
# API Error Exception
# =============================================================================

class APIError(HTTPException):
    """
    API exception carrying an error code.

    Usage:
        raise APIError(ErrorCode.AUTH_MISSING_KEY)
        raise APIError(ErrorCode.VALIDATION_MISSING_FIELD, details={"field": "member_id"})
    """

    def __init__(
        self,
        code: ErrorCode,
        status_code: Optional[int] = None,
        message: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        self.error_code = code
        self.error_message = message or ERROR_MESSAGES.get(code, "An error occurred")
        self.error_details = details

        if status_code is None:
            status_code = ERROR_STATUS_CODES.get(code, HTTP_400_BAD_REQUEST)

        super().__init__(
            status_code=status_code,
            detail={
                "success": False,
                "error_code": code.value,
                "message": self.error_message,
                "details": details,
            },
            headers=headers,
        )


# =============================================================================
# Helper Functions
# =============================================================================

def error_response(
    code: ErrorCode,
    status_code: Optional[int] = None,
    message: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    """
    Create a JSON error response without raising an exception.

    Used by exception handlers and middleware.
    """
    if status_code is None:
        status_code = ERROR_STATUS_CODES.get(code, HTTP_400_BAD_REQUEST)

    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "error_code": code.value,
            "message": message or ERROR_MESSAGES.get(code, "An error occurred"),
            "details": details,
        },
        headers=headers,
    )


def validation_response(error: ValidationError) -> JSONResponse:
    """Envelope for a service-level ValidationError, naming the field."""
    return error_response(
        _VALIDATION_CODES.get(error.code, ErrorCode.VALIDATION_FAILED),
        message=error.message,
        details={"field": error.field},
    )


__all__ = [
    "ErrorCode",
    "ERROR_MESSAGES",
    "ERROR_STATUS_CODES",
    "APIError",
    "error_response",
    "validation_response",
]
