"""Reflection: the draft should say what the writer learned."""

from __future__ import annotations

from typing import Final

from ..models.context import RecognitionContext
from ..models.rubric import SuggestionType
from ..text_signals import contains_any, find_anchor
from .base import IssueFinding, rule, suggestion

REFLECTIVE_PHRASES: Final[tuple[str, ...]] = (
    "learned",
    "realized",
    "discovered",
    "understand",
    "understood",
    "taught me",
    "showed me",
    "revealed",
    "reflect",
    "reflecting",
    "lesson",
)


@rule("reflection", "missing_reflection")
def missing_reflection(text: str, context: RecognitionContext) -> IssueFinding | None:
    if contains_any(text, REFLECTIVE_PHRASES):
        return None

    return IssueFinding(
        title="Missing Reflection or Learning",
        analysis=(
            "Your draft describes what you did and the results, but doesn't include any "
            "reflection about what you learned or how you grew."
        ),
        impact=(
            "Selective admissions rewards metacognition. A single reflective clause "
            "demonstrates the maturity and self-awareness officers actively look for."
        ),
        excerpt=find_anchor(text, prefer_last=True),
        suggestions=[
            suggestion(
                "This experience taught me that sustainable community impact requires both "
                "technical excellence and deep stakeholder relationships.",
                "Closing reflection connects technical and social dimensions of learning.",
                SuggestionType.INSERT_AFTER,
            ),
            suggestion(
                "It helped me understand that scale and quality aren't opposing forces; "
                "they require intentional systems design.",
                "Metacognitive insight about systems thinking shows intellectual growth.",
                SuggestionType.INSERT_AFTER,
            ),
            suggestion(
                "Through this work, I learned to balance rapid iteration with stakeholder "
                "trust-building, a tension I'll carry into future work.",
                "Forward-looking reflection shows you're applying learning to future endeavors.",
                SuggestionType.INSERT_AFTER,
            ),
        ],
    )


__all__ = ["REFLECTIVE_PHRASES", "missing_reflection"]
