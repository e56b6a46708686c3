"""Rule objects and the registry the rubric catalog refers to by id."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Iterator, Sequence

from ..models.context import RecognitionContext
from ..models.rubric import EditSuggestion, SuggestionType, WritingIssue

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class IssueFinding:
    """Descriptive payload a rule emits when its signal is missing."""

    title: str
    analysis: str
    impact: str
    excerpt: str
    suggestions: Sequence[EditSuggestion]


RuleFunc = Callable[[str, RecognitionContext], "IssueFinding | None"]


@dataclass(frozen=True)
class DetectionRule:
    """A named heuristic bound to one rubric dimension."""

    dimension_id: str
    name: str
    func: RuleFunc = field(compare=False)

    @property
    def id(self) -> str:
        return f"{self.dimension_id}.{self.name}"

    def detect(self, text: str, context: RecognitionContext) -> WritingIssue | None:
        """Run the heuristic and wrap its finding in a fresh ``WritingIssue``."""

        finding = self.func(text, context)
        if finding is None:
            return None
        suggestions = list(finding.suggestions)
        if not suggestions:
            LOGGER.warning("Rule %s produced a finding without suggestions; skipping.", self.id)
            return None
        return WritingIssue(
            id=self.id,
            dimension_id=self.dimension_id,
            title=finding.title,
            analysis=finding.analysis,
            impact=finding.impact,
            excerpt=finding.excerpt,
            suggestions=suggestions,
        )


class RuleRegistry:
    """Lookup of detection rules keyed by ``<dimension>.<name>``."""

    def __init__(self) -> None:
        self._rules: dict[str, DetectionRule] = {}

    def add(self, rule: DetectionRule) -> DetectionRule:
        if rule.id in self._rules:
            raise ValueError(f"Detection rule already registered: {rule.id}")
        self._rules[rule.id] = rule
        return rule

    def register(self, dimension_id: str, name: str) -> Callable[[RuleFunc], RuleFunc]:
        """Decorator registering a rule function under ``dimension_id.name``."""

        def decorator(func: RuleFunc) -> RuleFunc:
            self.add(DetectionRule(dimension_id=dimension_id, name=name, func=func))
            return func

        return decorator

    def get(self, rule_id: str) -> DetectionRule | None:
        return self._rules.get(rule_id)

    def ids(self) -> list[str]:
        return list(self._rules)

    def __contains__(self, rule_id: object) -> bool:
        return rule_id in self._rules

    def __iter__(self) -> Iterator[DetectionRule]:
        return iter(self._rules.values())

    def __len__(self) -> int:
        return len(self._rules)


DEFAULT_REGISTRY = RuleRegistry()


def rule(dimension_id: str, name: str) -> Callable[[RuleFunc], RuleFunc]:
    """Register a rule on the default registry."""

    return DEFAULT_REGISTRY.register(dimension_id, name)


def suggestion(text: str, rationale: str, kind: SuggestionType) -> EditSuggestion:
    return EditSuggestion(text=text, rationale=rationale, type=kind)


__all__ = [
    "DEFAULT_REGISTRY",
    "DetectionRule",
    "IssueFinding",
    "RuleFunc",
    "RuleRegistry",
    "rule",
    "suggestion",
]
