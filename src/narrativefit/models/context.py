"""Read-only recognition metadata supplied by the surrounding product."""

from __future__ import annotations

import re

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator


class Selectivity(BaseModel):
    """Competitive context for a recognition (e.g. 40 accepted of 1,200)."""

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    accepted: int = Field(ge=0)
    applicants: int = Field(ge=0)
    acceptance_rate: float = Field(
        ge=0.0,
        le=1.0,
        validation_alias=AliasChoices("acceptance_rate", "acceptanceRate"),
    )
    description: str = ""

    @model_validator(mode="after")
    def _validate_pool(self) -> "Selectivity":
        if self.accepted > self.applicants:
            msg = "accepted cannot exceed applicants."
            raise ValueError(msg)
        return self


class RecognitionContext(BaseModel):
    """External facts the draft text cannot contain by itself."""

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    name: str = ""
    selectivity: Selectivity | None = None
    theme_support: tuple[str, ...] = Field(
        default=(),
        validation_alias=AliasChoices("theme_support", "themeSupport"),
    )

    @field_validator("name")
    @classmethod
    def _normalise_name(cls, value: str) -> str:
        return re.sub(r"\s+", " ", value.strip())

    @field_validator("theme_support", mode="before")
    @classmethod
    def _normalise_themes(cls, value: object) -> tuple[str, ...]:
        if value is None:
            return ()
        if isinstance(value, str):
            value = [value]
        if not isinstance(value, (list, tuple, set, frozenset)):
            msg = "theme_support must be a list of strings."
            raise ValueError(msg)
        cleaned: list[str] = []
        seen: set[str] = set()
        for entry in value:
            candidate = re.sub(r"\s+", " ", str(entry).strip())
            key = candidate.casefold()
            if not candidate or key in seen:
                continue
            seen.add(key)
            cleaned.append(candidate)
        return tuple(cleaned)


__all__ = ["RecognitionContext", "Selectivity"]
