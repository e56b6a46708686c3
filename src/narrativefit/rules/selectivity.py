"""Selectivity & Context: the draft should cite how competitive the recognition was."""

from __future__ import annotations

import re
from typing import Final, Pattern

from ..models.context import RecognitionContext
from ..models.rubric import EditSuggestion, SuggestionType
from ..text_signals import find_anchor
from .base import IssueFinding, rule, suggestion

_SELECTIVITY_SIGNAL: Final[Pattern[str]] = re.compile(
    r"%|\bpercent\b"
    r"|\btop\s+(?:\d+|ten|five|three|twenty|fifty|hundred)\b"
    r"|\b\d[\d,]*\s+(?:out\s+)?of\s+(?:the\s+)?\d",
    re.IGNORECASE,
)


def _locate_name(text: str, name: str) -> str | None:
    """Return the recognition name as it is spelled in the draft."""

    if not name:
        return None
    match = re.search(re.escape(name), text, re.IGNORECASE)
    return match.group(0) if match else None


@rule("selectivity", "missing_context")
def missing_selectivity_context(text: str, context: RecognitionContext) -> IssueFinding | None:
    selectivity = context.selectivity
    if selectivity is None or _SELECTIVITY_SIGNAL.search(text):
        return None

    name = context.name or "this recognition"
    accepted = selectivity.accepted
    applicants = selectivity.applicants
    rate = f"{selectivity.acceptance_rate * 100:.1f}%"
    located = _locate_name(text, context.name)

    suggestions: list[EditSuggestion] = []
    if located is not None:
        suggestions.append(
            suggestion(
                f"{located} (Top {accepted} of {applicants})",
                "Inline parenthetical is the cleanest way to add context without breaking flow.",
                SuggestionType.REPLACE,
            )
        )
    else:
        suggestions.append(
            suggestion(
                f"{name}: Top {accepted} of {applicants} applicants.",
                "Leading with the selection ratio frames everything that follows.",
                SuggestionType.INSERT_BEFORE,
            )
        )
    suggestions.append(
        suggestion(
            f"Selected as one of {accepted} finalists from {applicants} applicants for the {name}.",
            "Full sentence version emphasizes the selection process and competitive pool.",
            SuggestionType.INSERT_BEFORE,
        )
    )
    closing = f"The {name} carries a {rate} acceptance rate"
    if selectivity.description:
        closing = f"{closing} ({selectivity.description})"
    suggestions.append(
        suggestion(
            f"{closing}.",
            "Percentage format helps officers immediately understand selectivity level.",
            SuggestionType.INSERT_AFTER,
        )
    )

    return IssueFinding(
        title="Missing Selectivity Context",
        analysis=(
            "Without competitive context, admissions officers can't quickly calibrate the "
            "rigor and selectivity of this recognition."
        ),
        impact=(
            "Selectivity metrics (Top X of Y, acceptance rate) instantly establish credibility "
            "and show how competitive this achievement was."
        ),
        excerpt=located if located is not None else find_anchor(text),
        suggestions=suggestions,
    )


__all__ = ["missing_selectivity_context"]
