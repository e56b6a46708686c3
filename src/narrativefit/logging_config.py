"""Logging setup for the rubric service: plain text by default, JSON on request.

Every record passes through ``TraceIdFilter`` so log lines emitted while a
request is in flight carry its ``x-trace-id``. Session code attaches
``session_id`` or ``storage_key`` through ``extra=`` and the JSON formatter
lifts those onto the top level of the payload.
"""

from __future__ import annotations

import json
import logging
import logging.config
from datetime import datetime, timezone
from typing import Any, Final

from .http import TRACE_CONTEXT

PLAIN_FORMAT: Final[str] = "%(asctime)s %(levelname)-7s [%(trace_id)s] %(name)s: %(message)s"
CONTEXT_FIELDS: Final[tuple[str, ...]] = ("session_id", "storage_key")


class TraceIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        if not getattr(record, "trace_id", None):
            record.trace_id = TRACE_CONTEXT.get() or "-"
        return True


class JsonFormatter(logging.Formatter):
    """One JSON object per line, keyed for log shippers."""

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "trace_id": getattr(record, "trace_id", "-"),
            "message": record.getMessage(),
        }
        for field in CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                payload[field] = value
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def build_logging_config(*, json_logs: bool = False, level: str = "INFO") -> dict[str, Any]:
    """Return a ``dictConfig`` mapping for the service loggers."""

    formatter: dict[str, Any] = (
        {"()": "narrativefit.logging_config.JsonFormatter"} if json_logs else {"format": PLAIN_FORMAT}
    )
    console = {
        "class": "logging.StreamHandler",
        "formatter": "default",
        "filters": ["trace"],
        "stream": "ext://sys.stderr",
    }
    levels = {"narrativefit": level, "apscheduler": "WARNING", "uvicorn.error": "INFO", "uvicorn.access": "INFO"}
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {"trace": {"()": "narrativefit.logging_config.TraceIdFilter"}},
        "formatters": {"default": formatter},
        "handlers": {"console": console},
        "loggers": {
            name: {"handlers": ["console"], "level": logger_level, "propagate": False}
            for name, logger_level in levels.items()
        },
        "root": {"handlers": ["console"], "level": "WARNING"},
    }


def configure_logging(*, json_logs: bool = False, level: str = "INFO") -> None:
    logging.config.dictConfig(build_logging_config(json_logs=json_logs, level=level))


__all__ = ["CONTEXT_FIELDS", "JsonFormatter", "PLAIN_FORMAT", "TraceIdFilter", "build_logging_config", "configure_logging"]
