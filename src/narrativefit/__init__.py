"""Narrative Fit rubric engine: heuristic draft analysis with an editable improvement workflow."""

from __future__ import annotations

from .applier import AppliedEdit, apply_suggestion_text
from .catalog import RubricCatalog, default_catalog, load_catalog
from .debounce import Debouncer, ManualDebouncer, SchedulerDebouncer
from .detector import detect
from .models import (
    DraftVersion,
    EditSuggestion,
    IssueStatus,
    RecognitionContext,
    RubricDimension,
    Selectivity,
    SuggestionType,
    WorkshopState,
    WritingIssue,
)
from .persistence import DraftSaver, DraftStore, FileDraftStore, MemoryDraftStore
from .reconcile import reconcile
from .scoring import dimension_score, dimension_status, overall_score
from .session import WorkshopSession
from .versions import DraftHistory

__version__ = "0.1.0"

__all__ = [
    "AppliedEdit",
    "Debouncer",
    "DraftHistory",
    "DraftSaver",
    "DraftStore",
    "DraftVersion",
    "EditSuggestion",
    "FileDraftStore",
    "IssueStatus",
    "ManualDebouncer",
    "MemoryDraftStore",
    "RecognitionContext",
    "RubricCatalog",
    "RubricDimension",
    "SchedulerDebouncer",
    "Selectivity",
    "SuggestionType",
    "WorkshopSession",
    "WorkshopState",
    "WritingIssue",
    "apply_suggestion_text",
    "default_catalog",
    "detect",
    "dimension_score",
    "dimension_status",
    "load_catalog",
    "overall_score",
    "reconcile",
]
