"""Dependency injection helpers for FastAPI routers."""

from __future__ import annotations

import logging
from typing import cast

from apscheduler.schedulers.base import BaseScheduler
from fastapi import Request

from ..catalog import RubricCatalog
from ..config import EngineSettings
from ..debounce import Debouncer, ManualDebouncer, SchedulerDebouncer
from ..persistence import DraftSaver, DraftStore
from ..registry import SessionRegistry

LOGGER = logging.getLogger(__name__)

__all__ = [
    "DebouncerFactory",
    "get_catalog",
    "get_debouncer_factory",
    "get_draft_store",
    "get_registry",
    "get_saver",
    "get_settings",
]


class DebouncerFactory:
    """Builds one debouncer per new session."""

    def __init__(self, scheduler: BaseScheduler | None, delay_ms: int) -> None:
        self._scheduler = scheduler
        self._delay_ms = delay_ms

    def __call__(self) -> Debouncer:
        if self._scheduler is None:
            LOGGER.warning("No running scheduler; session re-analysis is manual")
            return ManualDebouncer(self._delay_ms)
        return SchedulerDebouncer(self._scheduler, delay_ms=self._delay_ms)


def get_settings(request: Request) -> EngineSettings:
    """Return the settings configured for the application."""

    return cast(EngineSettings, request.app.state.settings)


def get_registry(request: Request) -> SessionRegistry:
    return cast(SessionRegistry, request.app.state.registry)


def get_catalog(request: Request) -> RubricCatalog:
    return cast(RubricCatalog, request.app.state.catalog)


def get_draft_store(request: Request) -> DraftStore:
    return cast(DraftStore, request.app.state.draft_store)


def get_saver(request: Request) -> DraftSaver:
    return cast(DraftSaver, request.app.state.saver)


def get_debouncer_factory(request: Request) -> DebouncerFactory:
    """Return the debouncer factory for the running application.

    Outside the application lifespan there is no scheduler, so sessions fall
    back to manual debouncing and only analyse on ``/analyze``.
    """

    scheduler = getattr(request.app.state, "scheduler", None)
    return DebouncerFactory(scheduler, get_settings(request).debounce_ms)
