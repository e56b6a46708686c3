"""Rubric scoring derived purely from issue resolution state."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING, Final, Iterable, Sequence

from .models.rubric import DimensionStatus, IssueStatus

if TYPE_CHECKING:  # pragma: no cover - import for typing only
    from .models.rubric import RubricDimension, WritingIssue

MAX_SCORE: Final[float] = 10.0
STATUS_BANDS: Final[tuple[tuple[float, DimensionStatus], ...]] = (
    (8.0, DimensionStatus.EXCELLENT),
    (6.0, DimensionStatus.GOOD),
    (4.0, DimensionStatus.NEEDS_WORK),
)


def round_score(value: float) -> float:
    """Round to one decimal place, halves rounding away from zero."""

    return float(Decimal(str(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def dimension_score(issues: Sequence["WritingIssue"]) -> float:
    """Return the share of fixed issues scaled to 0-10.

    A dimension with no detected issues always scores a perfect 10.
    """

    if not issues:
        return MAX_SCORE
    fixed = sum(1 for issue in issues if issue.status == IssueStatus.FIXED)
    return round_score(fixed / len(issues) * MAX_SCORE)


def dimension_status(score: float) -> DimensionStatus:
    """Map a score onto its band; each band includes its lower bound."""

    for threshold, status in STATUS_BANDS:
        if score >= threshold:
            return status
    return DimensionStatus.CRITICAL


def overall_score(dimensions: Iterable["RubricDimension"]) -> float:
    """Return the weighted mean of the dimension scores."""

    weighted_sum = 0.0
    total_weight = 0.0
    for dimension in dimensions:
        weighted_sum += dimension.score * dimension.weight
        total_weight += dimension.weight
    if total_weight <= 0:
        return 0.0
    return round_score(weighted_sum / total_weight)


def dimension_overview(name: str, score: float) -> str:
    """Return a one-line summary of a dimension for its current score."""

    label = name or "This dimension"
    if score >= 8.0:
        return f"{label} is strong in your draft. Minor polish opportunities may exist."
    if score >= 6.5:
        return f"{label} is good but has room for improvement to reach elite status."
    if score >= 4.0:
        return f"{label} needs strengthening. Focus on the issues below for meaningful improvement."
    return f"{label} requires significant development. This is a priority area."


__all__ = [
    "MAX_SCORE",
    "dimension_overview",
    "dimension_score",
    "dimension_status",
    "overall_score",
    "round_score",
]
