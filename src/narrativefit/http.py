"""Trace propagation and error rendering for the workshop HTTP surface."""

from __future__ import annotations

import logging
from contextvars import ContextVar
from typing import Any, Final, Mapping, NoReturn
from uuid import UUID, uuid4

from fastapi import status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .models.session import ErrorResponse
from .service_errors import ErrorCode, ServiceError

LOGGER = logging.getLogger(__name__)

TRACE_ID_HEADER: Final[str] = "x-trace-id"
TRACE_CONTEXT: ContextVar[str] = ContextVar("narrativefit_trace_id", default="")

ERROR_RESPONSE_DOCS: Final[dict[int | str, dict[str, Any]]] = {
    status_code: {"model": ErrorResponse}
    for status_code in (
        status.HTTP_400_BAD_REQUEST,
        status.HTTP_404_NOT_FOUND,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
}


def resolve_trace_id(candidate: str | None) -> str:
    """Keep a caller-supplied UUID, otherwise mint a fresh one."""

    if candidate:
        try:
            UUID(candidate)
        except ValueError:
            LOGGER.debug("Discarding malformed trace id %r", candidate)
        else:
            return candidate
    return str(uuid4())


def current_trace_id() -> str:
    trace_id = TRACE_CONTEXT.get()
    if not trace_id:
        trace_id = str(uuid4())
        TRACE_CONTEXT.set(trace_id)
    return trace_id


def to_service_error(exc: Exception) -> ServiceError:
    """Map any exception reaching the HTTP boundary onto a ``ServiceError``."""

    if isinstance(exc, ServiceError):
        return exc
    if isinstance(exc, RequestValidationError):
        return ServiceError(ErrorCode.VALIDATION, details={"errors": _jsonable(list(exc.errors()))})
    if isinstance(exc, StarletteHTTPException):
        if exc.status_code == status.HTTP_404_NOT_FOUND:
            code = ErrorCode.NOT_FOUND
        elif exc.status_code < status.HTTP_500_INTERNAL_SERVER_ERROR:
            code = ErrorCode.VALIDATION
        else:
            code = ErrorCode.INTERNAL
        return ServiceError(code, message=str(exc.detail), status_code=exc.status_code)
    return ServiceError(ErrorCode.INTERNAL)


def error_response(error: ServiceError, trace_id: str) -> JSONResponse:
    return JSONResponse(
        status_code=error.status_code,
        content=error.to_payload(trace_id).model_dump(),
        headers={TRACE_ID_HEADER: trace_id},
    )


def raise_service_error(
    code: ErrorCode | str,
    *,
    details: Mapping[str, Any],
    message: str | None = None,
) -> NoReturn:
    """Raise the ``ServiceError`` for ``code`` with JSON-safe details."""

    LOGGER.debug("Raising %s with %s", code, details)
    raise ServiceError(code, message=message, details=_jsonable(dict(details)))


def _jsonable(value: Any) -> Any:
    if isinstance(value, Exception):
        return str(value)
    if isinstance(value, dict):
        return {key: _jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(item) for item in value]
    return value


__all__ = [
    "ERROR_RESPONSE_DOCS",
    "TRACE_CONTEXT",
    "TRACE_ID_HEADER",
    "current_trace_id",
    "error_response",
    "raise_service_error",
    "resolve_trace_id",
    "to_service_error",
]
