"""Heuristic detection rules, registered on import under ``<dimension>.<rule>`` ids."""

from __future__ import annotations

from . import causality, evidence, reflection, selectivity, theme  # noqa: F401
from .base import DEFAULT_REGISTRY, DetectionRule, IssueFinding, RuleRegistry, rule

__all__ = ["DEFAULT_REGISTRY", "DetectionRule", "IssueFinding", "RuleRegistry", "rule"]
