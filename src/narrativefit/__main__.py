"""Command-line launcher for the rubric workshop service.

Engine options given on the command line are exported as ``NARRATIVEFIT_*``
variables before Uvicorn starts, so the app factory (and any reload worker)
picks them up through ``EngineSettings`` like any other environment setting.
"""

from __future__ import annotations

import argparse
import logging
import os
from pathlib import Path
from typing import Final, Mapping, Sequence

import uvicorn

from .config import get_settings, reset_settings_cache
from .logging_config import configure_logging

LOGGER = logging.getLogger(__name__)

DEFAULT_HOST: Final[str] = "127.0.0.1"
DEFAULT_PORT: Final[int] = 8750
ENV_PREFIX: Final[str] = "NARRATIVEFIT_"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="narrativefit",
        description="Serve the Narrative Fit rubric workshop over HTTP.",
    )
    server = parser.add_argument_group("server")
    server.add_argument("--host", default=DEFAULT_HOST, help="Interface to bind (default: %(default)s).")
    server.add_argument("--port", type=int, default=DEFAULT_PORT, help="TCP port (default: %(default)s).")
    server.add_argument("--reload", action="store_true", help="Restart on code changes; development only.")

    engine = parser.add_argument_group("engine")
    engine.add_argument("--debounce-ms", type=int, help="Quiet period before a draft is re-analysed.")
    engine.add_argument("--storage-dir", type=Path, help="Directory for saved drafts.")
    engine.add_argument("--rubric-override", type=Path, help="YAML rubric override file.")
    engine.add_argument("--max-sessions", type=int, help="Live session cap before eviction.")
    engine.add_argument("--log-level", help="Level for narrativefit loggers.")
    engine.add_argument("--json-logs", action="store_true", default=None, help="Emit JSON log lines.")
    return parser


def engine_overrides(args: argparse.Namespace) -> dict[str, str]:
    """Collect the engine flags that were set as ``NARRATIVEFIT_*`` variables."""

    candidates: Mapping[str, object] = {
        "DEBOUNCE_MS": args.debounce_ms,
        "STORAGE_DIR": args.storage_dir,
        "RUBRIC_OVERRIDE_PATH": args.rubric_override,
        "MAX_SESSIONS": args.max_sessions,
        "LOG_LEVEL": args.log_level,
        "LOG_JSON": args.json_logs,
    }
    return {f"{ENV_PREFIX}{name}": str(value) for name, value in candidates.items() if value is not None}


def main(argv: Sequence[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not 0 < args.port < 65536:
        parser.error("--port must be between 1 and 65535")
    if args.debounce_ms is not None and args.debounce_ms < 0:
        parser.error("--debounce-ms cannot be negative")

    os.environ.update(engine_overrides(args))
    reset_settings_cache()
    settings = get_settings()
    configure_logging(json_logs=settings.log_json, level=settings.log_level)

    LOGGER.info(
        "Serving rubric workshop on http://%s:%s (debounce=%sms, storage=%s)",
        args.host,
        args.port,
        settings.debounce_ms,
        settings.storage_dir or "memory",
    )
    uvicorn.run(
        "narrativefit.app:create_app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        factory=True,
        log_config=None,
    )


if __name__ == "__main__":
    main()
