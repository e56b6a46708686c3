"""Deterministic splicing of a suggestion into the draft text."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .models.rubric import SuggestionType

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class AppliedEdit:
    """Result of applying one suggestion.

    ``fell_back`` is set when a ``replace`` could not find its excerpt and the
    suggestion was appended instead.
    """

    text: str
    applied_as: SuggestionType
    fell_back: bool = False


def strip_excerpt_quotes(excerpt: str) -> str:
    """Remove the display quotes that may wrap an excerpt."""

    candidate = excerpt.strip()
    for left, right in (('"', '"'), ("“", "”"), ("'", "'")):
        if len(candidate) >= 2 and candidate.startswith(left) and candidate.endswith(right):
            return candidate[1:-1].strip()
    return candidate


def _insert_after(text: str, suggestion_text: str) -> str:
    return f"{text} {suggestion_text}"


def apply_suggestion_text(
    text: str,
    excerpt: str,
    suggestion_text: str,
    suggestion_type: SuggestionType | str,
) -> AppliedEdit:
    """Return the draft with ``suggestion_text`` applied according to its type.

    ``replace`` swaps the first verbatim occurrence of the excerpt. When the
    excerpt is empty or no longer present, the suggestion is appended instead.
    """

    kind = SuggestionType(suggestion_type)
    if kind is SuggestionType.INSERT_BEFORE:
        return AppliedEdit(f"{suggestion_text} {text}", kind)
    if kind is SuggestionType.INSERT_AFTER:
        return AppliedEdit(_insert_after(text, suggestion_text), kind)

    target = strip_excerpt_quotes(excerpt)
    if target and target in text:
        return AppliedEdit(text.replace(target, suggestion_text, 1), kind)

    LOGGER.debug("Excerpt %r not found in draft; appending suggestion instead.", target[:80])
    return AppliedEdit(_insert_after(text, suggestion_text), SuggestionType.INSERT_AFTER, fell_back=True)


__all__ = ["AppliedEdit", "apply_suggestion_text", "strip_excerpt_quotes"]
