"""Pydantic models for workshop snapshots and session endpoint payloads."""

from __future__ import annotations

import re
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .context import RecognitionContext
from .draft import DraftVersion
from .rubric import RubricDimension, SuggestionType

_STORAGE_KEY_PATTERN = re.compile(r"^[A-Za-z0-9._:-]{1,128}$")


class WorkshopState(BaseModel):
    """Everything the presentation layer needs to render a workshop session."""

    model_config = ConfigDict(extra="forbid")

    draft: str
    word_count: int = Field(ge=0)
    current_version_id: str
    version_info: str
    can_undo: bool
    can_redo: bool
    dimensions: list[RubricDimension]
    overall_score: float = Field(ge=0.0, le=10.0)
    fixed_count: int = Field(ge=0)
    total_count: int = Field(ge=0)
    is_complete: bool
    analysis_pending: bool


class SessionCreateRequest(BaseModel):
    """Request body for ``POST /api/v1/sessions``."""

    model_config = ConfigDict(extra="forbid")

    initial_draft: str = Field(max_length=20_000)
    context: RecognitionContext = Field(default_factory=RecognitionContext)
    storage_key: str | None = None

    @field_validator("storage_key")
    @classmethod
    def _validate_storage_key(cls, value: str | None) -> str | None:
        if value is None:
            return None
        candidate = value.strip()
        if not _STORAGE_KEY_PATTERN.fullmatch(candidate):
            msg = "storage_key must be 1-128 characters using letters, digits, '.', '_', ':' or '-'."
            raise ValueError(msg)
        return candidate


class SessionResponse(BaseModel):
    """Session identifier paired with its current state."""

    model_config = ConfigDict(extra="forbid")

    session_id: str
    state: WorkshopState


class EditRequest(BaseModel):
    """Request body for ``POST /sessions/{id}/edit``."""

    model_config = ConfigDict(extra="forbid")

    text: str = Field(max_length=20_000)


class ApplySuggestionRequest(BaseModel):
    """Apply either a suggestion by index or an explicit text/type pair."""

    model_config = ConfigDict(extra="forbid")

    suggestion_index: int | None = Field(default=None, ge=0)
    text: str | None = Field(default=None, max_length=5_000)
    type: SuggestionType | None = None

    @model_validator(mode="after")
    def _validate_choice(self) -> "ApplySuggestionRequest":
        if self.suggestion_index is not None and (self.text is not None or self.type is not None):
            msg = "Provide either suggestion_index or text/type, not both."
            raise ValueError(msg)
        if (self.text is None) != (self.type is None):
            msg = "text and type must be supplied together."
            raise ValueError(msg)
        return self


class VersionListResponse(BaseModel):
    """Full version history with the cursor position."""

    model_config = ConfigDict(extra="forbid")

    current_index: int = Field(ge=0)
    versions: list[DraftVersion]


class ErrorResponse(BaseModel):
    """JSON body returned for every failed request, echoing the trace id."""

    model_config = ConfigDict(extra="forbid")

    code: str = Field(min_length=1)
    message: str = Field(min_length=1)
    details: dict[str, Any] = Field(default_factory=dict)
    trace_id: str = Field(min_length=1)


__all__ = [
    "ApplySuggestionRequest",
    "EditRequest",
    "ErrorResponse",
    "SessionCreateRequest",
    "SessionResponse",
    "VersionListResponse",
    "WorkshopState",
]
