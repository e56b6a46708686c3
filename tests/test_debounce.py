"""Tests for the manual and APScheduler-backed debouncers."""

from __future__ import annotations

import asyncio
import logging

import pytest
from apscheduler.schedulers.asyncio import AsyncIOScheduler

from narrativefit.debounce import ManualDebouncer, SchedulerDebouncer


def test_manual_debouncer_keeps_only_latest_callback() -> None:
    calls: list[str] = []
    debouncer = ManualDebouncer()

    debouncer.schedule(lambda: calls.append("first"))
    debouncer.schedule(lambda: calls.append("second"))

    assert debouncer.pending is True
    assert debouncer.flush() is True
    assert calls == ["second"]
    assert debouncer.pending is False
    assert debouncer.flush() is False


def test_manual_debouncer_cancel_drops_pending_callback() -> None:
    calls: list[str] = []
    debouncer = ManualDebouncer()
    debouncer.schedule(lambda: calls.append("never"))

    debouncer.cancel()

    assert debouncer.flush() is False
    assert calls == []


def test_scheduler_debouncer_rejects_negative_delay() -> None:
    with pytest.raises(ValueError):
        SchedulerDebouncer(AsyncIOScheduler(), delay_ms=-1)


def test_scheduler_debouncer_coalesces_rapid_schedules() -> None:
    calls: list[str] = []

    async def scenario() -> None:
        scheduler = AsyncIOScheduler(timezone="UTC")
        scheduler.start()
        try:
            debouncer = SchedulerDebouncer(scheduler, delay_ms=50, job_id="draft")
            for label in ("a", "b", "c"):
                debouncer.schedule(lambda label=label: calls.append(label))
                await asyncio.sleep(0.01)
            assert len(scheduler.get_jobs()) == 1
            await asyncio.sleep(0.3)
            assert debouncer.pending is False
        finally:
            scheduler.shutdown(wait=False)

    asyncio.run(scenario())

    assert calls == ["c"]


def test_scheduler_debouncer_cancel_and_flush() -> None:
    calls: list[str] = []

    async def scenario() -> None:
        scheduler = AsyncIOScheduler(timezone="UTC")
        scheduler.start()
        try:
            debouncer = SchedulerDebouncer(scheduler, delay_ms=10_000, job_id="draft")

            debouncer.schedule(lambda: calls.append("cancelled"))
            debouncer.cancel()
            assert scheduler.get_job("draft") is None

            debouncer.schedule(lambda: calls.append("flushed"))
            assert debouncer.flush() is True
            assert scheduler.get_job("draft") is None
            assert debouncer.flush() is False
        finally:
            scheduler.shutdown(wait=False)

    asyncio.run(scenario())

    assert calls == ["flushed"]


def test_scheduler_debouncer_flush_logs_failing_callback(caplog: pytest.LogCaptureFixture) -> None:
    def explode() -> None:
        raise RuntimeError("analysis listener broke")

    async def scenario() -> None:
        scheduler = AsyncIOScheduler(timezone="UTC")
        scheduler.start()
        try:
            debouncer = SchedulerDebouncer(scheduler, delay_ms=10_000, job_id="draft")
            debouncer.schedule(explode)
            assert debouncer.flush() is True
            assert debouncer.pending is False
        finally:
            scheduler.shutdown(wait=False)

    with caplog.at_level(logging.ERROR, logger="narrativefit.debounce"):
        asyncio.run(scenario())

    assert "Debounced callback draft failed" in caplog.text
