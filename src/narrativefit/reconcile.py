"""Merge freshly detected dimensions with the UI state of the previous pass."""

from __future__ import annotations

from typing import Collection, Sequence

from .models.rubric import IssueStatus, RubricDimension, WritingIssue


def _merge_issue(fresh: WritingIssue, previous: WritingIssue | None) -> WritingIssue:
    if previous is None:
        return fresh
    index = previous.current_suggestion_index
    if index >= len(fresh.suggestions):
        index = len(fresh.suggestions) - 1
    return fresh.model_copy(
        update={
            "expanded": previous.expanded,
            "current_suggestion_index": max(0, index),
            "status": previous.status,
        }
    )


def reconcile(
    previous: Sequence[RubricDimension],
    fresh: Sequence[RubricDimension],
    *,
    fixed_ids: Collection[str] = (),
) -> list[RubricDimension]:
    """Return ``fresh`` carrying over ``expanded``, cursor and status by issue id.

    Issues that no longer fire are dropped. Issues listed in ``fixed_ids`` are
    forced to ``fixed`` and collapsed whether or not they carried over.
    """

    previous_by_dimension: dict[str, dict[str, WritingIssue]] = {
        dimension.id: {issue.id: issue for issue in dimension.issues} for dimension in previous
    }

    merged: list[RubricDimension] = []
    for dimension in fresh:
        previous_issues = previous_by_dimension.get(dimension.id, {})
        issues: list[WritingIssue] = []
        for issue in dimension.issues:
            candidate = _merge_issue(issue, previous_issues.get(issue.id))
            if candidate.id in fixed_ids:
                candidate = candidate.model_copy(
                    update={"status": IssueStatus.FIXED, "expanded": False}
                )
            issues.append(candidate)
        merged.append(dimension.model_copy(update={"issues": issues}))
    return merged


__all__ = ["reconcile"]
