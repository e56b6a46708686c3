"""Sentence splitting, anchor selection and signal matching for detection rules."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Final, Iterable, Pattern, Sequence

DEFAULT_PREFIX_CHARS: Final[int] = 160

_SENTENCE_PATTERN: Final[Pattern[str]] = re.compile(r"[^.!?]+(?:[.!?]+|$)")
_WORD_PATTERN: Final[Pattern[str]] = re.compile(r"\S+")


@dataclass(frozen=True)
class Sentence:
    """A sentence located in the draft by character offsets."""

    text: str
    start: int
    end: int


def split_sentences(text: str) -> list[Sentence]:
    """Split ``text`` into trimmed sentences that are exact substrings of it."""

    sentences: list[Sentence] = []
    for match in _SENTENCE_PATTERN.finditer(text):
        raw = match.group(0)
        stripped = raw.strip()
        if not stripped:
            continue
        start = match.start() + (len(raw) - len(raw.lstrip()))
        sentences.append(Sentence(stripped, start, start + len(stripped)))
    return sentences


def word_count(text: str) -> int:
    return len(_WORD_PATTERN.findall(text))


def bounded_prefix(text: str, limit: int = DEFAULT_PREFIX_CHARS) -> str:
    """Return at most ``limit`` leading characters, cut back to a word boundary."""

    stripped = text.strip()
    if len(stripped) <= limit:
        return stripped
    cut = stripped[:limit]
    boundary = cut.rfind(" ")
    if boundary > 0:
        cut = cut[:boundary]
    return cut.rstrip()


def find_anchor(
    text: str,
    pattern: Pattern[str] | None = None,
    *,
    prefer_last: bool = False,
    prefix_chars: int = DEFAULT_PREFIX_CHARS,
) -> str:
    """Pick the excerpt an issue refers to.

    The first sentence matching ``pattern`` wins; otherwise the first (or last)
    sentence; otherwise a bounded prefix of the whole text.
    """

    sentences = split_sentences(text)
    if pattern is not None:
        for sentence in sentences:
            if pattern.search(sentence.text):
                return sentence.text
    if sentences:
        return sentences[-1].text if prefer_last else sentences[0].text
    return bounded_prefix(text, prefix_chars)


def find_sentence_pair(
    text: str, pattern: Pattern[str] | None = None
) -> tuple[str, str, str | None]:
    """Return ``(excerpt, anchor, follower)`` for an anchor sentence and its successor.

    ``excerpt`` spans both sentences verbatim so it can be replaced as a unit;
    ``follower`` is ``None`` when the anchor is the last sentence.
    """

    sentences = split_sentences(text)
    if not sentences:
        prefix = bounded_prefix(text)
        return prefix, prefix, None
    index = 0
    if pattern is not None:
        for position, sentence in enumerate(sentences):
            if pattern.search(sentence.text):
                index = position
                break
    first = sentences[index]
    if index + 1 < len(sentences):
        second = sentences[index + 1]
        return text[first.start : second.end], first.text, second.text
    return first.text, first.text, None


def keyword_pattern(terms: Iterable[str]) -> Pattern[str] | None:
    """Compile a case-insensitive whole-word alternation of ``terms``."""

    escaped = [re.escape(term.strip()) for term in terms if term and term.strip()]
    if not escaped:
        return None
    escaped.sort(key=len, reverse=True)
    return re.compile(r"(?<!\w)(?:" + "|".join(escaped) + r")(?!\w)", re.IGNORECASE)


def contains_any(text: str, terms: Sequence[str]) -> bool:
    pattern = keyword_pattern(terms)
    return bool(pattern and pattern.search(text))


def first_match(text: str, terms: Sequence[str]) -> str | None:
    """Return the first term (in ``terms`` order) present in ``text``."""

    for term in terms:
        pattern = keyword_pattern([term])
        if pattern and pattern.search(text):
            return term
    return None


def strip_terminal(sentence: str) -> str:
    """Drop trailing sentence punctuation."""

    return sentence.rstrip().rstrip(".!?").rstrip()


__all__ = [
    "DEFAULT_PREFIX_CHARS",
    "Sentence",
    "bounded_prefix",
    "contains_any",
    "find_anchor",
    "find_sentence_pair",
    "first_match",
    "keyword_pattern",
    "split_sentences",
    "strip_terminal",
    "word_count",
]
