"""Tests for engine settings loading."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from narrativefit.config import EngineSettings, get_settings, reset_settings_cache


def test_defaults() -> None:
    settings = EngineSettings()

    assert settings.debounce_ms == 500
    assert settings.storage_dir is None
    assert settings.rubric_override_path is None
    assert settings.log_json is False
    assert settings.log_level == "INFO"
    assert settings.max_sessions == 256


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("NARRATIVEFIT_DEBOUNCE_MS", "250")
    monkeypatch.setenv("NARRATIVEFIT_STORAGE_DIR", str(tmp_path / "drafts"))
    monkeypatch.setenv("NARRATIVEFIT_LOG_LEVEL", "debug")

    settings = EngineSettings()

    assert settings.debounce_ms == 250
    assert settings.storage_dir == tmp_path / "drafts"
    assert settings.log_level == "DEBUG"


def test_dotenv_file_is_read(tmp_path: Path) -> None:
    (tmp_path / ".env").write_text("NARRATIVEFIT_MAX_SESSIONS=12\n", encoding="utf-8")

    assert EngineSettings().max_sessions == 12


@pytest.mark.parametrize(
    "overrides",
    [{"debounce_ms": -1}, {"max_sessions": 0}, {"log_level": "chatty"}],
)
def test_invalid_values_are_rejected(overrides: dict[str, object]) -> None:
    with pytest.raises(ValidationError):
        EngineSettings(**overrides)


def test_get_settings_is_cached_until_reset(monkeypatch: pytest.MonkeyPatch) -> None:
    first = get_settings()
    monkeypatch.setenv("NARRATIVEFIT_DEBOUNCE_MS", "900")

    assert get_settings() is first
    assert first.debounce_ms == 500

    reset_settings_cache()
    assert get_settings().debounce_ms == 900
