"""Structured text diffs and version-to-version comparisons."""

from __future__ import annotations

import difflib

from .catalog import RubricCatalog
from .detector import detected_issue_counts
from .models.context import RecognitionContext
from .models.draft import DimensionDelta, DraftVersion, TextChanges, TextSegment, VersionComparison


def compute_diff(original: str, revised: str) -> TextChanges:
    """Describe how ``revised`` differs from ``original`` at character level.

    Segment ranges index into ``original``; ``added``/``removed`` count the
    characters inserted and deleted, with replacements counted on both sides.
    """

    original = original or ""
    revised = revised or ""

    matcher = difflib.SequenceMatcher(a=original, b=revised, autojunk=False)
    segments: list[TextSegment] = []
    added = 0
    removed = 0

    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        if tag == "equal":
            continue
        if tag == "replace":
            segments.append(TextSegment(kind="changed", range=(i1, i2), text=revised[j1:j2]))
            added += j2 - j1
            removed += i2 - i1
        elif tag == "delete":
            segments.append(TextSegment(kind="removed", range=(i1, i2)))
            removed += i2 - i1
        elif tag == "insert":
            segments.append(TextSegment(kind="added", range=(i1, i1), text=revised[j1:j2]))
            added += j2 - j1

    return TextChanges(
        added=added,
        removed=removed,
        net_change=len(revised) - len(original),
        segments=segments,
        anchors={
            "left": _matching_prefix_length(original, revised),
            "right": _matching_suffix_length(original, revised),
        },
    )


def _matching_prefix_length(left: str, right: str) -> int:
    count = 0
    for a, b in zip(left, right):
        if a != b:
            break
        count += 1
    return count


def _matching_suffix_length(left: str, right: str) -> int:
    count = 0
    for a, b in zip(reversed(left), reversed(right)):
        if a != b:
            break
        count += 1
    return count


def _direction(before: int, after: int) -> str:
    if after < before:
        return "up"
    if after > before:
        return "down"
    return "same"


def compare_versions(
    source: DraftVersion,
    target: DraftVersion,
    context: RecognitionContext | None = None,
    *,
    catalog: RubricCatalog | None = None,
) -> VersionComparison:
    """Compare two versions: text changes, elapsed time and per-dimension issue deltas.

    Issue counts come from fresh detection on each text, so the comparison
    ignores UI state such as issues marked fixed. Fewer issues reads as "up".
    """

    before = detected_issue_counts(source.text, context, catalog=catalog)
    after = detected_issue_counts(target.text, context, catalog=catalog)
    deltas = [
        DimensionDelta(
            dimension_id=dimension_id,
            issues_before=before.get(dimension_id, 0),
            issues_after=count,
            direction=_direction(before.get(dimension_id, 0), count),
        )
        for dimension_id, count in after.items()
    ]
    return VersionComparison(
        from_id=source.id,
        to_id=target.id,
        elapsed_seconds=(target.timestamp - source.timestamp).total_seconds(),
        text_changes=compute_diff(source.text, target.text),
        dimensions=deltas,
    )


__all__ = ["compare_versions", "compute_diff"]
