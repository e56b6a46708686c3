"""Cancellable single-slot timers used to coalesce re-analysis requests."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Protocol
from uuid import uuid4

from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.base import BaseScheduler

LOGGER = logging.getLogger(__name__)

DEFAULT_DELAY_MS = 500

Callback = Callable[[], None]


class Debouncer(Protocol):
    """At most one pending callback; scheduling again replaces it."""

    @property
    def pending(self) -> bool: ...

    def schedule(self, callback: Callback) -> None: ...

    def cancel(self) -> None: ...

    def flush(self) -> bool: ...


class ManualDebouncer:
    """Debouncer that only fires when ``flush`` is called.

    Used for synchronous callers and in tests, where time should not pass on
    its own.
    """

    def __init__(self, delay_ms: int = DEFAULT_DELAY_MS) -> None:
        self.delay_ms = delay_ms
        self._callback: Callback | None = None
        self.scheduled_count = 0

    @property
    def pending(self) -> bool:
        return self._callback is not None

    def schedule(self, callback: Callback) -> None:
        self._callback = callback
        self.scheduled_count += 1

    def cancel(self) -> None:
        self._callback = None

    def flush(self) -> bool:
        callback, self._callback = self._callback, None
        if callback is None:
            return False
        callback()
        return True


class SchedulerDebouncer:
    """Debouncer backed by a one-shot APScheduler ``date`` job.

    The job reuses a fixed id with ``replace_existing`` so a new schedule
    always displaces the outstanding one. With an ``AsyncIOScheduler`` the job
    is a coroutine and runs on the event loop rather than in a worker thread.
    """

    def __init__(
        self,
        scheduler: BaseScheduler,
        *,
        delay_ms: int = DEFAULT_DELAY_MS,
        job_id: str | None = None,
    ) -> None:
        if delay_ms < 0:
            msg = "delay_ms must be non-negative"
            raise ValueError(msg)
        self._scheduler = scheduler
        self.delay_ms = delay_ms
        self.job_id = job_id or f"debounce-{uuid4().hex}"
        self._callback: Callback | None = None

    @property
    def pending(self) -> bool:
        return self._callback is not None

    def schedule(self, callback: Callback) -> None:
        self._callback = callback
        run_date = datetime.now(timezone.utc) + timedelta(milliseconds=self.delay_ms)
        self._scheduler.add_job(
            self._fire,
            "date",
            run_date=run_date,
            id=self.job_id,
            replace_existing=True,
            misfire_grace_time=None,
        )

    def cancel(self) -> None:
        self._callback = None
        self._remove_job()

    def flush(self) -> bool:
        callback, self._callback = self._callback, None
        if callback is None:
            return False
        self._remove_job()
        self._run(callback)
        return True

    def _remove_job(self) -> None:
        try:
            self._scheduler.remove_job(self.job_id)
        except JobLookupError:
            pass

    async def _fire(self) -> None:
        callback, self._callback = self._callback, None
        if callback is not None:
            self._run(callback)

    def _run(self, callback: Callback) -> None:
        try:
            callback()
        except Exception:
            LOGGER.exception("Debounced callback %s failed", self.job_id)


__all__ = ["DEFAULT_DELAY_MS", "Debouncer", "ManualDebouncer", "SchedulerDebouncer"]
