"""Pydantic models describing rubric dimensions, issues and suggested edits."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator


class SuggestionType(str, Enum):
    """How a suggestion is spliced into the draft."""

    REPLACE = "replace"
    INSERT_BEFORE = "insert_before"
    INSERT_AFTER = "insert_after"


class IssueStatus(str, Enum):
    """Lifecycle of a detected issue as driven by user actions."""

    NOT_FIXED = "not_fixed"
    IN_PROGRESS = "in_progress"
    FIXED = "fixed"


class DimensionStatus(str, Enum):
    """Score band of a rubric dimension."""

    CRITICAL = "critical"
    NEEDS_WORK = "needs_work"
    GOOD = "good"
    EXCELLENT = "excellent"


class EditSuggestion(BaseModel):
    """One candidate rewrite for an issue."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    text: str
    rationale: str
    type: SuggestionType = SuggestionType.REPLACE


class WritingIssue(BaseModel):
    """A structural weakness detected in the draft.

    Descriptive fields are recomputed on every detection pass. Only ``status``,
    ``expanded`` and ``current_suggestion_index`` carry over between passes.
    """

    model_config = ConfigDict(extra="forbid")

    id: str = Field(min_length=1)
    dimension_id: str = Field(min_length=1)
    title: str
    analysis: str
    impact: str
    excerpt: str = ""
    suggestions: list[EditSuggestion] = Field(min_length=1)
    current_suggestion_index: int = Field(default=0, ge=0)
    status: IssueStatus = IssueStatus.NOT_FIXED
    expanded: bool = False

    @property
    def current_suggestion(self) -> EditSuggestion:
        """Return the suggestion under the browsing cursor."""

        return self.suggestions[self.current_suggestion_index % len(self.suggestions)]


class RubricDimension(BaseModel):
    """A weighted scoring category holding the issues detected for it."""

    model_config = ConfigDict(extra="forbid")

    id: str = Field(min_length=1)
    name: str
    weight: float = Field(gt=0.0, le=1.0)
    issues: list[WritingIssue] = Field(default_factory=list)

    @field_validator("issues")
    @classmethod
    def _validate_issue_ownership(cls, issues: list[WritingIssue]) -> list[WritingIssue]:
        seen: set[str] = set()
        for issue in issues:
            if issue.id in seen:
                msg = f"Duplicate issue id within dimension: {issue.id}"
                raise ValueError(msg)
            seen.add(issue.id)
        return issues

    @computed_field  # type: ignore[prop-decorator]
    @property
    def max_score(self) -> float:
        return 10.0

    @computed_field  # type: ignore[prop-decorator]
    @property
    def score(self) -> float:
        from ..scoring import dimension_score

        return dimension_score(self.issues)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def status(self) -> DimensionStatus:
        from ..scoring import dimension_status

        return dimension_status(self.score)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def overview(self) -> str:
        from ..scoring import dimension_overview

        return dimension_overview(self.name, self.score)


__all__ = [
    "DimensionStatus",
    "EditSuggestion",
    "IssueStatus",
    "RubricDimension",
    "SuggestionType",
    "WritingIssue",
]
