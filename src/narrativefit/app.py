"""FastAPI application factory for the rubric workshop service."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from contextlib import asynccontextmanager
from contextvars import ContextVar
from datetime import timezone
from typing import AsyncIterator, Final

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from fastapi import FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from starlette.datastructures import MutableHeaders
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from .catalog import load_catalog
from .config import EngineSettings, get_settings
from .http import (
    ERROR_RESPONSE_DOCS,
    TRACE_CONTEXT,
    TRACE_ID_HEADER,
    current_trace_id,
    error_response,
    resolve_trace_id,
    to_service_error,
)
from .metrics import record_request
from .persistence import DraftSaver, DraftStore, FileDraftStore, MemoryDraftStore
from .registry import SessionRegistry
from .routers import health_router, sessions_router
from .service_errors import ErrorCode, ServiceError

LOGGER = logging.getLogger(__name__)

SERVICE_VERSION: Final[str] = "0.1.0"


class TraceMiddleware:
    """Tags each request with a trace id and counts it once the response status is known."""

    def __init__(self, app: ASGIApp, *, trace_context: ContextVar[str]) -> None:
        self.app = app
        self._trace_context = trace_context

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request = Request(scope, receive)
        trace_id = resolve_trace_id(request.headers.get(TRACE_ID_HEADER))
        token = self._trace_context.set(trace_id)
        scope.setdefault("state", {})
        scope["state"]["trace_id"] = trace_id  # type: ignore[index]
        observed_status = status.HTTP_500_INTERNAL_SERVER_ERROR

        async def send_with_trace(message: Message) -> None:
            nonlocal observed_status
            if message["type"] == "http.response.start":
                MutableHeaders(scope=message).setdefault(TRACE_ID_HEADER, trace_id)
                observed_status = message["status"]
            await send(message)

        try:
            await self.app(scope, receive, send_with_trace)
        except Exception as exc:
            error = to_service_error(exc)
            if error.code is ErrorCode.INTERNAL:
                LOGGER.exception("Unhandled error on %s %s", request.method, request.url.path)
            observed_status = error.status_code
            await error_response(error, trace_id)(scope, receive, send)
        finally:
            self._trace_context.reset(token)
            record_request(request.method, observed_status)


async def handle_error(_: Request, exc: Exception) -> Response:
    return error_response(to_service_error(exc), current_trace_id())


def build_draft_store(settings: EngineSettings) -> DraftStore:
    """Use the file store when a storage directory is configured."""

    if settings.storage_dir is not None:
        return FileDraftStore(settings.storage_dir)
    return MemoryDraftStore()


@asynccontextmanager
async def lifespan(application: FastAPI) -> AsyncIterator[None]:
    """Run the debounce scheduler and the save worker for the app's lifetime."""

    scheduler = AsyncIOScheduler(timezone=timezone.utc)
    executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="narrativefit-save")
    application.state.scheduler = scheduler
    application.state.saver = DraftSaver(application.state.draft_store, executor=executor)
    scheduler.start()
    LOGGER.info("Rubric service started (debounce=%sms)", application.state.settings.debounce_ms)
    try:
        yield
    finally:
        application.state.registry.close_all()
        scheduler.shutdown(wait=False)
        executor.shutdown(wait=True)
        application.state.scheduler = None
        application.state.saver = DraftSaver(application.state.draft_store)
        LOGGER.info("Rubric service stopped")


def create_app(settings: EngineSettings | None = None) -> FastAPI:
    """Construct the FastAPI application."""

    service_settings = settings or get_settings()

    application = FastAPI(
        title="Narrative Fit Rubric Service",
        version=SERVICE_VERSION,
        responses=dict(ERROR_RESPONSE_DOCS),
        lifespan=lifespan,
    )
    application.state.settings = service_settings
    application.state.service_version = SERVICE_VERSION
    application.state.catalog = load_catalog(service_settings.rubric_override_path)
    application.state.registry = SessionRegistry(max_sessions=service_settings.max_sessions)
    application.state.scheduler = None
    application.state.draft_store = build_draft_store(service_settings)
    application.state.saver = DraftSaver(application.state.draft_store)

    for exc_class in (StarletteHTTPException, RequestValidationError, ServiceError):
        application.add_exception_handler(exc_class, handle_error)
    application.add_middleware(TraceMiddleware, trace_context=TRACE_CONTEXT)

    application.include_router(health_router)
    application.include_router(sessions_router)

    @application.get("/", include_in_schema=False)
    async def service_index(request: Request) -> dict[str, str]:
        """Return a lightweight service manifest for manual checks."""

        version = getattr(request.app.state, "service_version", SERVICE_VERSION)
        return {
            "service": "narrativefit",
            "version": version,
            "api_base": "/api/v1",
        }

    return application


__all__ = ["SERVICE_VERSION", "TraceMiddleware", "build_draft_store", "create_app", "handle_error", "lifespan"]
