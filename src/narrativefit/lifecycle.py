"""Pure state transitions for a single issue's UI state."""

from __future__ import annotations

from typing import Final, Literal

from .models.rubric import IssueStatus, WritingIssue

IssueEvent = Literal["expand", "collapse", "apply"]

# Events absent from the table leave the status unchanged.
STATUS_TRANSITIONS: Final[dict[tuple[IssueStatus, IssueEvent], IssueStatus]] = {
    (IssueStatus.NOT_FIXED, "expand"): IssueStatus.IN_PROGRESS,
    (IssueStatus.NOT_FIXED, "apply"): IssueStatus.FIXED,
    (IssueStatus.IN_PROGRESS, "apply"): IssueStatus.FIXED,
}


def next_status(status: IssueStatus, event: IssueEvent) -> IssueStatus:
    return STATUS_TRANSITIONS.get((status, event), status)


def on_expand(issue: WritingIssue) -> WritingIssue:
    """Toggle ``expanded``; opening a ``not_fixed`` issue starts work on it."""

    if issue.expanded:
        return issue.model_copy(update={"expanded": False, "status": next_status(issue.status, "collapse")})
    return issue.model_copy(update={"expanded": True, "status": next_status(issue.status, "expand")})


def on_apply(issue: WritingIssue) -> WritingIssue:
    """Mark the issue fixed and collapse it."""

    return issue.model_copy(update={"expanded": False, "status": next_status(issue.status, "apply")})


def on_navigate(issue: WritingIssue, step: int) -> WritingIssue:
    """Move the suggestion cursor by ``step``, wrapping in both directions."""

    count = len(issue.suggestions)
    if count == 0:
        return issue
    index = (issue.current_suggestion_index + step) % count
    return issue.model_copy(update={"current_suggestion_index": index})


__all__ = ["STATUS_TRANSITIONS", "IssueEvent", "next_status", "on_apply", "on_expand", "on_navigate"]
