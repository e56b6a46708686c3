"""Rubric dimension catalog: bundled definition plus optional YAML overrides."""

from __future__ import annotations

import json
import logging
import math
import re
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any, Mapping

import yaml
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from .rules import DEFAULT_REGISTRY, DetectionRule, RuleRegistry

LOGGER = logging.getLogger(__name__)

_FIXTURE_PACKAGE = "narrativefit.fixtures.rubrics"
_DEFAULT_CATALOG_FILE = "narrative_fit.json"
_DIMENSION_ID_PATTERN = re.compile(r"^[a-z][a-z0-9_]{1,31}$")


class DimensionSpec(BaseModel):
    """Static definition of one scoring dimension."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    id: str
    name: str
    weight: float = Field(gt=0.0, le=1.0)
    rules: tuple[str, ...] = ()

    @field_validator("id")
    @classmethod
    def _validate_id(cls, value: str) -> str:
        candidate = value.strip().lower()
        if not _DIMENSION_ID_PATTERN.fullmatch(candidate):
            msg = "Dimension identifiers must be 2-32 characters of lowercase letters, digits or '_'."
            raise ValueError(msg)
        return candidate

    @field_validator("name")
    @classmethod
    def _validate_name(cls, value: str) -> str:
        candidate = re.sub(r"\s+", " ", value.strip())
        if not candidate:
            msg = "Dimension name must be a non-empty string."
            raise ValueError(msg)
        return candidate

    @field_validator("rules")
    @classmethod
    def _validate_rules(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        duplicates = sorted({rule_id for rule_id in value if value.count(rule_id) > 1})
        if duplicates:
            msg = f"Rules listed more than once: {', '.join(duplicates)}"
            raise ValueError(msg)
        return value


class RubricCatalog(BaseModel):
    """The ordered set of dimensions every detection pass returns."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    catalog_id: str = Field(validation_alias=AliasChoices("id", "catalog_id"))
    label: str
    description: str | None = None
    dimensions: tuple[DimensionSpec, ...] = Field(min_length=1)

    @model_validator(mode="after")
    def _validate_dimensions(self) -> "RubricCatalog":
        seen: set[str] = set()
        for dimension in self.dimensions:
            if dimension.id in seen:
                msg = f"Duplicate dimension id: {dimension.id}"
                raise ValueError(msg)
            seen.add(dimension.id)
        total = sum(dimension.weight for dimension in self.dimensions)
        if not math.isclose(total, 1.0, abs_tol=1e-6):
            msg = f"Dimension weights must sum to 1.0 (got {total:.4f})."
            raise ValueError(msg)
        return self

    def dimension(self, dimension_id: str) -> DimensionSpec | None:
        for dimension in self.dimensions:
            if dimension.id == dimension_id:
                return dimension
        return None

    def resolve_rules(
        self, dimension: DimensionSpec, registry: RuleRegistry = DEFAULT_REGISTRY
    ) -> list[DetectionRule]:
        """Return the registered rules of ``dimension`` in catalog order."""

        resolved: list[DetectionRule] = []
        for rule_id in dimension.rules:
            detection_rule = registry.get(rule_id)
            if detection_rule is None:
                LOGGER.warning("Dimension %s references unknown rule %s", dimension.id, rule_id)
                continue
            resolved.append(detection_rule)
        return resolved

    def validate_rules(self, registry: RuleRegistry = DEFAULT_REGISTRY) -> None:
        """Raise ``ValueError`` when a rule is unknown or bound to another dimension."""

        for dimension in self.dimensions:
            for rule_id in dimension.rules:
                detection_rule = registry.get(rule_id)
                if detection_rule is None:
                    raise ValueError(f"Unknown detection rule: {rule_id}")
                if detection_rule.dimension_id != dimension.id:
                    raise ValueError(
                        f"Rule {rule_id} belongs to dimension {detection_rule.dimension_id}, "
                        f"not {dimension.id}."
                    )


def _load_fixture_catalog() -> dict[str, Any]:
    fixture = resources.files(_FIXTURE_PACKAGE).joinpath(_DEFAULT_CATALOG_FILE)
    with fixture.open("r", encoding="utf-8") as handle:
        return json.load(handle)


def _load_yaml(path: Path) -> Mapping[str, Any] | None:
    try:
        with path.open("r", encoding="utf-8") as handle:
            loaded = yaml.safe_load(handle)
    except (OSError, yaml.YAMLError) as exc:
        LOGGER.warning("Unable to read rubric override %s: %s", path, exc)
        return None
    if isinstance(loaded, Mapping):
        return loaded
    LOGGER.warning("Rubric override %s is not a mapping; ignoring.", path)
    return None


def _merge_override(base: dict[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Apply per-dimension overrides (name, weight, rules) onto the base definition."""

    merged = dict(base)
    if isinstance(override.get("label"), str):
        merged["label"] = override["label"]
    entries = override.get("dimensions")
    if not isinstance(entries, Mapping):
        return merged

    dimensions: list[dict[str, Any]] = []
    for dimension in base.get("dimensions", []):
        updated = dict(dimension)
        patch = entries.get(dimension["id"])
        if isinstance(patch, Mapping):
            for key in ("name", "weight", "rules"):
                if key in patch:
                    updated[key] = patch[key]
        dimensions.append(updated)
    merged["dimensions"] = dimensions
    return merged


def load_catalog(
    override_path: Path | None = None,
    *,
    registry: RuleRegistry = DEFAULT_REGISTRY,
) -> RubricCatalog:
    """Load the bundled catalog, applying ``override_path`` when it is usable.

    An unreadable or invalid override is logged and the bundled catalog is used.
    """

    base = _load_fixture_catalog()
    catalog = RubricCatalog.model_validate(base)
    catalog.validate_rules(registry)

    if override_path is None or not override_path.exists():
        return catalog
    override = _load_yaml(override_path)
    if override is None:
        return catalog
    try:
        candidate = RubricCatalog.model_validate(_merge_override(base, override))
        candidate.validate_rules(registry)
    except (ValidationError, ValueError) as exc:
        LOGGER.warning("Ignoring invalid rubric override %s: %s", override_path, exc)
        return catalog
    LOGGER.debug("Loaded rubric override from %s", override_path)
    return candidate


@lru_cache(maxsize=1)
def default_catalog() -> RubricCatalog:
    """Return the cached bundled catalog."""

    return load_catalog()


__all__ = ["DimensionSpec", "RubricCatalog", "default_catalog", "load_catalog"]
