"""Engine and service configuration loaded from the environment."""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import ClassVar, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


class EngineSettings(BaseSettings):
    """Runtime configuration for the rubric engine and its HTTP service."""

    model_config: ClassVar[SettingsConfigDict] = SettingsConfigDict(
        env_prefix="NARRATIVEFIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    debounce_ms: int = Field(
        default=500,
        ge=0,
        description="Quiet period in milliseconds before a draft change is re-analysed.",
    )
    storage_dir: Optional[Path] = Field(
        default=None,
        description="Directory for saved drafts; drafts are kept in memory when unset.",
    )
    rubric_override_path: Optional[Path] = Field(
        default=None,
        description="YAML file overriding dimension names, weights or rule lists.",
    )
    log_json: bool = Field(default=False, description="Emit structured JSON logs.")
    log_level: str = Field(default="INFO", description="Level for narrativefit loggers.")
    max_sessions: int = Field(
        default=256,
        ge=1,
        description="Maximum live sessions held in memory before the oldest is evicted.",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalise_log_level(cls, value: object) -> object:
        if isinstance(value, str):
            candidate = value.strip().upper()
            if candidate not in _LOG_LEVELS:
                msg = f"Unsupported log level: {value!r}"
                raise ValueError(msg)
            return candidate
        return value

    @field_validator("rubric_override_path")
    @classmethod
    def _warn_missing_override(cls, value: Optional[Path]) -> Optional[Path]:
        if value is not None and not value.exists():
            logger.warning("Rubric override %s does not exist; bundled rubric will be used", value)
        return value


@lru_cache(maxsize=1)
def get_settings() -> EngineSettings:
    """Return cached settings built from the environment."""

    return EngineSettings()


def reset_settings_cache() -> None:
    """Clear cached settings; tests call this after patching the environment."""

    get_settings.cache_clear()


__all__ = ["EngineSettings", "get_settings", "reset_settings_cache"]
