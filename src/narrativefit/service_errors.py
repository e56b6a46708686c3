"""Error codes returned by the workshop service and the exception that carries them."""

from __future__ import annotations

from enum import Enum
from typing import Any, Final, Mapping

from fastapi import status

from .models.session import ErrorResponse


class ErrorCode(str, Enum):
    INTERNAL = "INTERNAL"
    VALIDATION = "VALIDATION"
    NOT_FOUND = "NOT_FOUND"
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    VERSION_NOT_FOUND = "VERSION_NOT_FOUND"
    ISSUE_NOT_FOUND = "ISSUE_NOT_FOUND"


# code -> (HTTP status, default message)
ERROR_TABLE: Final[Mapping[ErrorCode, tuple[int, str]]] = {
    ErrorCode.INTERNAL: (status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error."),
    ErrorCode.VALIDATION: (status.HTTP_400_BAD_REQUEST, "Request validation failed."),
    ErrorCode.NOT_FOUND: (status.HTTP_404_NOT_FOUND, "Resource not found."),
    ErrorCode.SESSION_NOT_FOUND: (status.HTTP_404_NOT_FOUND, "Workshop session not found."),
    ErrorCode.VERSION_NOT_FOUND: (status.HTTP_404_NOT_FOUND, "Draft version not found."),
    ErrorCode.ISSUE_NOT_FOUND: (
        status.HTTP_404_NOT_FOUND,
        "Issue not present in the current analysis.",
    ),
}


class ServiceError(Exception):
    """Raised by routers; rendered as an ``ErrorResponse`` with the table's status."""

    def __init__(
        self,
        code: ErrorCode | str,
        *,
        message: str | None = None,
        details: Mapping[str, Any] | None = None,
        status_code: int | None = None,
    ) -> None:
        self.code = ErrorCode(code)
        default_status, default_message = ERROR_TABLE[self.code]
        self.status_code = status_code or default_status
        self.message = message or default_message
        self.details = dict(details or {})
        super().__init__(self.message)

    def to_payload(self, trace_id: str) -> ErrorResponse:
        return ErrorResponse(
            code=self.code.value,
            message=self.message,
            details=self.details,
            trace_id=trace_id,
        )


__all__ = ["ERROR_TABLE", "ErrorCode", "ServiceError"]
