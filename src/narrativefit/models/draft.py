"""Pydantic models for draft snapshots and comparisons between them."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

_VERSION_ID_PATTERN = r"^v\d+$"


class DraftVersion(BaseModel):
    """Immutable snapshot of the draft text in the undo/redo history."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    id: str = Field(pattern=_VERSION_ID_PATTERN)
    text: str
    timestamp: datetime
    applied_issue_id: str | None = None


class TextSegment(BaseModel):
    """A contiguous region that differs between two versions."""

    model_config = ConfigDict(extra="forbid")

    kind: Literal["added", "removed", "changed"]
    range: tuple[int, int]
    text: str = ""


class TextChanges(BaseModel):
    """Character-level summary of the change between two versions."""

    model_config = ConfigDict(extra="forbid")

    added: int = Field(ge=0)
    removed: int = Field(ge=0)
    net_change: int
    segments: list[TextSegment] = Field(default_factory=list)
    anchors: dict[Literal["left", "right"], int] = Field(default_factory=dict)


class DimensionDelta(BaseModel):
    """Change in detected issue count for one dimension."""

    model_config = ConfigDict(extra="forbid")

    dimension_id: str
    issues_before: int = Field(ge=0)
    issues_after: int = Field(ge=0)
    direction: Literal["up", "down", "same"]


class VersionComparison(BaseModel):
    """Comparison between two versions of the same session."""

    model_config = ConfigDict(extra="forbid")

    from_id: str
    to_id: str
    elapsed_seconds: float
    text_changes: TextChanges
    dimensions: list[DimensionDelta] = Field(default_factory=list)


__all__ = [
    "DimensionDelta",
    "DraftVersion",
    "TextChanges",
    "TextSegment",
    "VersionComparison",
]
