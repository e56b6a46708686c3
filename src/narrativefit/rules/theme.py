"""Thematic fit: the draft should name the narrative theme it supports."""

from __future__ import annotations

import re
from typing import Final

from ..models.context import RecognitionContext
from ..models.rubric import SuggestionType
from ..text_signals import contains_any, find_anchor
from .base import IssueFinding, rule, suggestion

GENERIC_THEME_TERMS: Final[tuple[str, ...]] = ("theme", "mission")
_THEME_SEPARATORS: Final = re.compile(r"\s*(?:\+|&|/|,|\band\b)\s*", re.IGNORECASE)


def theme_terms(context: RecognitionContext) -> list[str]:
    """Return every keyword that counts as naming the theme explicitly."""

    terms: list[str] = []
    for theme in context.theme_support:
        terms.append(theme)
        terms.extend(part for part in _THEME_SEPARATORS.split(theme) if part)
    terms.extend(GENERIC_THEME_TERMS)
    return terms


@rule("theme", "not_explicit")
def theme_not_explicit(text: str, context: RecognitionContext) -> IssueFinding | None:
    if contains_any(text, theme_terms(context)):
        return None

    label = " + ".join(context.theme_support)
    if label:
        lead = (
            f"This recognition directly reinforces my {label} narrative by validating "
            "both technical execution and mission alignment."
        )
        framing = f"As a reflection of my core focus on {label}, this recognition marks a milestone in that mission."
        closing = (
            f"This achievement aligns with my demonstrated commitment to {label}, "
            "the mission that ties my application together."
        )
    else:
        lead = "This recognition directly reinforces the central theme of my application."
        framing = "As a reflection of my core mission, this recognition marks a clear milestone."
        closing = "This achievement ties back to the theme that runs through my whole application."

    return IssueFinding(
        title="Theme Connection Not Explicit",
        analysis=(
            "Your draft doesn't explicitly connect this recognition to your overarching "
            "narrative theme. Officers shouldn't have to infer the connection."
        ),
        impact=(
            "Making your academic spine explicit helps officers quickly understand how this "
            "achievement fits into your broader story and validates your core narrative."
        ),
        excerpt=find_anchor(text),
        suggestions=[
            suggestion(
                lead,
                "Direct statement naming your theme upfront establishes immediate thematic clarity.",
                SuggestionType.INSERT_BEFORE,
            ),
            suggestion(
                framing,
                "Opens with thematic framing before diving into recognition details.",
                SuggestionType.INSERT_BEFORE,
            ),
            suggestion(
                closing,
                "Closing sentence ties the recognition back to your narrative spine.",
                SuggestionType.INSERT_AFTER,
            ),
        ],
    )


__all__ = ["GENERIC_THEME_TERMS", "theme_not_explicit", "theme_terms"]
