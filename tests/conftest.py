"""Pytest configuration for the rubric engine test suite."""

from __future__ import annotations

from collections.abc import Iterator
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from narrativefit import metrics
from narrativefit.app import create_app
from narrativefit.catalog import default_catalog
from narrativefit.config import EngineSettings, reset_settings_cache
from narrativefit.debounce import ManualDebouncer
from narrativefit.models.context import RecognitionContext
from narrativefit.persistence import DraftSaver, MemoryDraftStore
from narrativefit.session import WorkshopSession

SCENARIO_DRAFT = "I led platform design. 118 students received weekly support."

SATISFYING_DRAFT = (
    "I founded the Robotics Outreach Lab, ranked in the top 5% of 1,200 applicants for the "
    "State STEM Award. I built a tutoring program which led to 118 students passing algebra. "
    "This taught me that mentoring is a mission as much as a skill."
)


class StepClock:
    """Deterministic clock advancing a fixed step on every call."""

    def __init__(self, start: datetime | None = None, step_seconds: float = 30.0) -> None:
        self._current = start or datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
        self._step = timedelta(seconds=step_seconds)

    def __call__(self) -> datetime:
        value = self._current
        self._current += self._step
        return value


@pytest.fixture(autouse=True)
def _clear_settings_cache(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Iterator[None]:
    for key in (
        "NARRATIVEFIT_DEBOUNCE_MS",
        "NARRATIVEFIT_STORAGE_DIR",
        "NARRATIVEFIT_RUBRIC_OVERRIDE_PATH",
        "NARRATIVEFIT_LOG_JSON",
        "NARRATIVEFIT_LOG_LEVEL",
        "NARRATIVEFIT_MAX_SESSIONS",
    ):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    reset_settings_cache()
    yield
    reset_settings_cache()


@pytest.fixture()
def stem_context() -> RecognitionContext:
    return RecognitionContext(name="State STEM Award", theme_support=["STEM"])


@pytest.fixture()
def selective_context() -> RecognitionContext:
    return RecognitionContext.model_validate(
        {
            "name": "State STEM Award",
            "selectivity": {
                "accepted": 40,
                "applicants": 1200,
                "acceptanceRate": 0.0333,
                "description": "statewide competition",
            },
            "themeSupport": ["STEM + Community"],
        }
    )


@pytest.fixture()
def debouncer() -> ManualDebouncer:
    return ManualDebouncer()


@pytest.fixture()
def store() -> MemoryDraftStore:
    return MemoryDraftStore()


@pytest.fixture()
def session(
    stem_context: RecognitionContext,
    debouncer: ManualDebouncer,
    store: MemoryDraftStore,
) -> WorkshopSession:
    return WorkshopSession(
        SCENARIO_DRAFT,
        stem_context,
        catalog=default_catalog(),
        debouncer=debouncer,
        saver=DraftSaver(store),
        storage_key="draft-1",
        clock=StepClock(),
    )


@pytest.fixture()
def service_settings(tmp_path: Path) -> EngineSettings:
    return EngineSettings(debounce_ms=60_000, max_sessions=4, storage_dir=tmp_path / "drafts")


@pytest.fixture()
def scenario_draft() -> str:
    return SCENARIO_DRAFT


@pytest.fixture()
def satisfying_draft() -> str:
    return SATISFYING_DRAFT


@pytest.fixture()
def step_clock() -> StepClock:
    return StepClock()


@pytest.fixture()
def test_client(service_settings: EngineSettings) -> Iterator[TestClient]:
    """Run the service app inside its lifespan so the debounce scheduler is live."""

    metrics.reset()
    with TestClient(create_app(service_settings)) as client:
        yield client
