"""Causality: actions should be tied to outcomes, and the actions should be the writer's."""

from __future__ import annotations

import re
from typing import Final, Pattern

from ..models.context import RecognitionContext
from ..models.rubric import EditSuggestion, SuggestionType
from ..text_signals import contains_any, find_anchor, find_sentence_pair, strip_terminal
from .base import IssueFinding, rule, suggestion

CAUSAL_CONNECTORS: Final[tuple[str, ...]] = (
    "which led to",
    "led to",
    "leading to",
    "resulted in",
    "resulting in",
    "which enabled",
    "enabled",
    "enabling",
    "which allowed",
    "as a result",
    "because",
    "so that",
    "thereby",
    "drove",
    "driving",
)
AGENCY_VERBS: Final[tuple[str, ...]] = (
    "led",
    "founded",
    "co-founded",
    "built",
    "created",
    "designed",
    "launched",
    "started",
    "organized",
    "coordinated",
    "managed",
    "directed",
    "initiated",
    "developed",
    "established",
    "spearheaded",
    "ran",
    "taught",
    "wrote",
)
_AGENCY_PATTERN: Final[Pattern[str]] = re.compile(
    r"\bI\s+(?:\w+ly\s+)?(?:" + "|".join(re.escape(verb) for verb in AGENCY_VERBS) + r")\b",
    re.IGNORECASE,
)


@rule("causality", "missing_connector")
def missing_causal_connector(text: str, context: RecognitionContext) -> IssueFinding | None:
    if contains_any(text, CAUSAL_CONNECTORS):
        return None

    excerpt, action, outcome = find_sentence_pair(text, _AGENCY_PATTERN)
    suggestions: list[EditSuggestion] = []
    stem = strip_terminal(action)
    if stem and outcome:
        suggestions.append(
            suggestion(
                f"{stem}, which resulted in this outcome: {outcome}",
                'Adds "which resulted in" to explicitly connect your actions to measurable outcomes.',
                SuggestionType.REPLACE,
            )
        )
    elif stem:
        suggestions.append(
            suggestion(
                f"{stem}, which led to a measurable result for the people involved.",
                'Uses "which led to" to extend your action into its consequence.',
                SuggestionType.REPLACE,
            )
        )
    suggestions.append(
        suggestion(
            "As a result of these actions, [describe the specific outcome your work produced].",
            "A closing causal sentence makes the action-to-outcome chain explicit.",
            SuggestionType.INSERT_AFTER,
        )
    )
    suggestions.append(
        suggestion(
            "This work enabled [who benefited] to [what changed], a direct line from my decisions to the result.",
            'Uses "enabled" as a strong causal connector emphasizing your agency.',
            SuggestionType.INSERT_AFTER,
        )
    )

    return IssueFinding(
        title="Missing Cause→Effect Connection",
        analysis=(
            "Your draft lists actions and outcomes separately but doesn't connect them "
            'causally. Officers need to see: "I did X, which led to Y outcome."'
        ),
        impact=(
            "Causal language (resulted in, which led to, enabling) demonstrates evidence-based "
            "thinking and helps officers quickly understand your efficacy and impact."
        ),
        excerpt=excerpt,
        suggestions=suggestions,
    )


@rule("causality", "missing_agency")
def missing_agency(text: str, context: RecognitionContext) -> IssueFinding | None:
    if _AGENCY_PATTERN.search(text):
        return None

    return IssueFinding(
        title="Your Role Is Not Clear",
        analysis=(
            "The draft never says what you personally did. Without a first-person action verb, "
            "officers can't tell your contribution apart from the group's."
        ),
        impact=(
            "Clear agency language (I led, I built, I founded) demonstrates initiative. Passive "
            "or collective phrasing undersells your actual contribution."
        ),
        excerpt=find_anchor(text),
        suggestions=[
            suggestion(
                "I personally led this effort, owning [your specific responsibility] from start to finish.",
                "Leads with an active first-person verb so ownership is unmistakable.",
                SuggestionType.INSERT_BEFORE,
            ),
            suggestion(
                "I founded and directed this project, making the key decisions about [scope].",
                "Founder/director framing establishes clear ownership.",
                SuggestionType.INSERT_BEFORE,
            ),
            suggestion(
                "I coordinated [who] and built [what], so the results above trace back to my decisions.",
                "Names your actions right after the outcomes they produced.",
                SuggestionType.INSERT_AFTER,
            ),
        ],
    )


__all__ = ["AGENCY_VERBS", "CAUSAL_CONNECTORS", "missing_agency", "missing_causal_connector"]
