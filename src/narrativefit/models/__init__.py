"""Pydantic models shared by the rubric engine and the HTTP surface."""

from __future__ import annotations

from .context import RecognitionContext, Selectivity
from .draft import DimensionDelta, DraftVersion, TextChanges, TextSegment, VersionComparison
from .rubric import (
    DimensionStatus,
    EditSuggestion,
    IssueStatus,
    RubricDimension,
    SuggestionType,
    WritingIssue,
)
from .session import (
    ApplySuggestionRequest,
    EditRequest,
    ErrorResponse,
    SessionCreateRequest,
    SessionResponse,
    VersionListResponse,
    WorkshopState,
)

__all__ = [
    "ApplySuggestionRequest",
    "DimensionDelta",
    "DimensionStatus",
    "DraftVersion",
    "EditRequest",
    "EditSuggestion",
    "ErrorResponse",
    "IssueStatus",
    "RecognitionContext",
    "RubricDimension",
    "Selectivity",
    "SessionCreateRequest",
    "SessionResponse",
    "SuggestionType",
    "TextChanges",
    "TextSegment",
    "VersionComparison",
    "VersionListResponse",
    "WorkshopState",
    "WritingIssue",
]
