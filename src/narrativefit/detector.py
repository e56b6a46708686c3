"""Issue detection: run every catalog rule over a draft and group issues by dimension."""

from __future__ import annotations

import logging

from .catalog import RubricCatalog, default_catalog
from .models.context import RecognitionContext
from .models.rubric import RubricDimension, WritingIssue
from .rules import DEFAULT_REGISTRY, RuleRegistry

LOGGER = logging.getLogger(__name__)


def detect(
    draft_text: str,
    context: RecognitionContext | None = None,
    *,
    catalog: RubricCatalog | None = None,
    registry: RuleRegistry = DEFAULT_REGISTRY,
) -> list[RubricDimension]:
    """Return one ``RubricDimension`` per catalog entry with freshly detected issues.

    Deterministic for a given ``(draft_text, context)``: issue ids are the rule
    ids, and every issue starts collapsed, ``not_fixed``, on its first suggestion.
    """

    text = draft_text or ""
    context = context or RecognitionContext()
    catalog = catalog or default_catalog()

    dimensions: list[RubricDimension] = []
    for spec in catalog.dimensions:
        issues: list[WritingIssue] = []
        for detection_rule in catalog.resolve_rules(spec, registry):
            issue = detection_rule.detect(text, context)
            if issue is not None:
                issues.append(issue)
        dimensions.append(
            RubricDimension(id=spec.id, name=spec.name, weight=spec.weight, issues=issues)
        )

    LOGGER.debug(
        "Detected %d issue(s) across %d dimension(s) for %d characters",
        sum(len(dimension.issues) for dimension in dimensions),
        len(dimensions),
        len(text),
    )
    return dimensions


def detected_issue_counts(
    draft_text: str,
    context: RecognitionContext | None = None,
    *,
    catalog: RubricCatalog | None = None,
) -> dict[str, int]:
    """Return the number of issues each dimension currently flags."""

    return {
        dimension.id: len(dimension.issues)
        for dimension in detect(draft_text, context, catalog=catalog)
    }


__all__ = ["detect", "detected_issue_counts"]
