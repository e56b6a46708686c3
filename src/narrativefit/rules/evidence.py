"""Evidence: outcomes should be quantified and free of unsupported buzzwords."""

from __future__ import annotations

import re
from typing import Final, Pattern

from ..models.context import RecognitionContext
from ..models.rubric import SuggestionType
from ..text_signals import contains_any, find_anchor, first_match, keyword_pattern
from .base import IssueFinding, rule, suggestion

QUANTITY_WORDS: Final[tuple[str, ...]] = (
    "two",
    "three",
    "four",
    "five",
    "six",
    "seven",
    "eight",
    "nine",
    "ten",
    "twelve",
    "twenty",
    "fifty",
    "dozen",
    "dozens",
    "hundred",
    "hundreds",
    "thousand",
    "thousands",
    "million",
    "percent",
    "doubled",
    "tripled",
)
BUZZWORDS: Final[tuple[str, ...]] = (
    "passionate",
    "world-class",
    "innovative",
    "impactful",
    "transformative",
    "groundbreaking",
    "amazing",
    "incredible",
    "life-changing",
    "cutting-edge",
)
_DIGIT: Final[Pattern[str]] = re.compile(r"\d")
_OUTCOME_ANCHOR: Final[Pattern[str]] = re.compile(
    r"\b(?:served|serving|helped|reached|supported|received|participated|improved|increased|grew|impact\w*)\b",
    re.IGNORECASE,
)


@rule("evidence", "unquantified")
def unquantified_outcome(text: str, context: RecognitionContext) -> IssueFinding | None:
    if _DIGIT.search(text) or contains_any(text, QUANTITY_WORDS):
        return None

    return IssueFinding(
        title="Impact Not Quantified",
        analysis=(
            "Your draft mentions what happened but doesn't quantify the reach or results. "
            "Numbers make outcomes concrete and credible."
        ),
        impact=(
            "Quantified impact (people served, growth, measurable outcomes) provides objective "
            "evidence of your effectiveness."
        ),
        excerpt=find_anchor(text, _OUTCOME_ANCHOR),
        suggestions=[
            suggestion(
                "In total, this work reached [number] people over [number] weeks.",
                "Adds specific numbers for reach and sustained engagement.",
                SuggestionType.INSERT_AFTER,
            ),
            suggestion(
                "Participation grew from [starting number] to [final number] over the year.",
                "Shows growth over time as evidence of quality.",
                SuggestionType.INSERT_AFTER,
            ),
            suggestion(
                "By the end, [number] participants had [specific measurable outcome].",
                "Shows downstream outcomes rather than activity alone.",
                SuggestionType.INSERT_AFTER,
            ),
        ],
    )


@rule("evidence", "buzzwords")
def unsupported_buzzwords(text: str, context: RecognitionContext) -> IssueFinding | None:
    buzzword = first_match(text, BUZZWORDS)
    if buzzword is None:
        return None

    pattern = keyword_pattern([buzzword])
    excerpt = find_anchor(text, pattern)
    concrete = pattern.sub("[concrete detail]", excerpt, count=1) if pattern else excerpt

    return IssueFinding(
        title="Buzzwords Without Evidence",
        analysis=(
            f'The word "{buzzword}" is an adjective without supporting data. Admissions '
            "officers prefer concrete metrics over evaluative language."
        ),
        impact=(
            "Unquantified adjectives slow credibility and signal inexperience with "
            "evidence-based writing. Numbers and specifics build trust faster."
        ),
        excerpt=excerpt,
        suggestions=[
            suggestion(
                concrete,
                "Swaps the adjective for a slot you fill with a specific fact.",
                SuggestionType.REPLACE,
            ),
            suggestion(
                "For example, [a specific number or outcome that shows this].",
                "A follow-up example turns the claim into evidence.",
                SuggestionType.INSERT_AFTER,
            ),
            suggestion(
                "Concretely, I [specific action] for [number] people, resulting in [measurable outcome].",
                "Action verbs plus specifics demonstrate impact without evaluative language.",
                SuggestionType.INSERT_AFTER,
            ),
        ],
    )


__all__ = ["BUZZWORDS", "QUANTITY_WORDS", "unquantified_outcome", "unsupported_buzzwords"]
