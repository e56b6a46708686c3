"""Workshop session: draft history, debounced re-analysis and issue UI state."""

from __future__ import annotations

import logging
from typing import Callable

from .applier import apply_suggestion_text
from .catalog import RubricCatalog, default_catalog
from .debounce import Debouncer, ManualDebouncer
from .detector import detect
from .diff_engine import compare_versions
from .lifecycle import on_apply, on_expand, on_navigate
from .models.context import RecognitionContext
from .models.draft import DraftVersion, VersionComparison
from .models.rubric import IssueStatus, RubricDimension, SuggestionType, WritingIssue
from .models.session import WorkshopState
from .persistence import DraftSaver
from .reconcile import reconcile
from .scoring import overall_score
from .text_signals import word_count
from .versions import Clock, DraftHistory

LOGGER = logging.getLogger(__name__)

COMPLETION_THRESHOLD = 8.0

AnalysisListener = Callable[["WorkshopSession"], None]


class WorkshopSession:
    """Owns one draft's version history and the issues displayed for it.

    Every text change (edit, undo, redo, apply) records or moves a version and
    schedules a single debounced re-analysis. The held dimensions are only
    replaced when that analysis runs, after reconciling the fresh detection
    with the current UI state. Public operations never raise for unknown issue
    ids or exhausted history; they return ``False`` instead.
    """

    def __init__(
        self,
        initial_draft: str,
        context: RecognitionContext | None = None,
        *,
        catalog: RubricCatalog | None = None,
        debouncer: Debouncer | None = None,
        saver: DraftSaver | None = None,
        storage_key: str | None = None,
        clock: Clock | None = None,
        on_analysis: AnalysisListener | None = None,
    ) -> None:
        self.context = context or RecognitionContext()
        self.catalog = catalog or default_catalog()
        self.storage_key = storage_key
        self._debouncer: Debouncer = debouncer or ManualDebouncer()
        self._saver = saver
        self._on_analysis = on_analysis
        self._history = DraftHistory(initial_draft or "", clock=clock)
        # applied issue id -> the issue as it was before the apply
        self._pending_fixed: dict[str, WritingIssue] = {}
        self.analysis_count = 0
        self._dimensions: list[RubricDimension] = []
        self._run_analysis()

    # -- read side -----------------------------------------------------

    @property
    def text(self) -> str:
        return self._history.text

    @property
    def history(self) -> DraftHistory:
        return self._history

    @property
    def versions(self) -> list[DraftVersion]:
        return self._history.versions

    @property
    def dimensions(self) -> list[RubricDimension]:
        return list(self._dimensions)

    @property
    def overall_score(self) -> float:
        return overall_score(self._dimensions)

    @property
    def analysis_pending(self) -> bool:
        return self._debouncer.pending

    def find_issue(self, issue_id: str) -> WritingIssue | None:
        for dimension in self._dimensions:
            for issue in dimension.issues:
                if issue.id == issue_id:
                    return issue
        return None

    def snapshot(self) -> WorkshopState:
        issues = [issue for dimension in self._dimensions for issue in dimension.issues]
        fixed = sum(1 for issue in issues if issue.status == IssueStatus.FIXED)
        overall = self.overall_score
        return WorkshopState(
            draft=self.text,
            word_count=word_count(self.text),
            current_version_id=self._history.current.id,
            version_info=self._history.version_info,
            can_undo=self._history.can_undo,
            can_redo=self._history.can_redo,
            dimensions=self.dimensions,
            overall_score=overall,
            fixed_count=fixed,
            total_count=len(issues),
            is_complete=bool(issues) and fixed == len(issues) and overall >= COMPLETION_THRESHOLD,
            analysis_pending=self.analysis_pending,
        )

    def compare_versions(self, from_id: str, to_id: str) -> VersionComparison | None:
        source = self._history.find(from_id)
        target = self._history.find(to_id)
        if source is None or target is None:
            return None
        return compare_versions(source, target, self.context, catalog=self.catalog)

    # -- text changes --------------------------------------------------

    def edit(self, text: str) -> DraftVersion:
        version = self._history.record(text or "")
        self._text_changed()
        return version

    def undo(self) -> bool:
        if not self._history.undo():
            return False
        self._revert_pending_applies()
        self._text_changed()
        return True

    def redo(self) -> bool:
        if not self._history.redo():
            return False
        self._revert_pending_applies()
        self._text_changed()
        return True

    def apply_suggestion(
        self,
        issue_id: str,
        suggestion_text: str,
        suggestion_type: SuggestionType | str,
    ) -> bool:
        """Splice a suggestion into the draft and mark its issue fixed.

        The issue stays fixed through the next re-analysis even when its rule
        still fires on the new text.
        """

        issue = self.find_issue(issue_id)
        if issue is None:
            LOGGER.debug("Ignoring apply for unknown issue %s", issue_id)
            return False
        try:
            kind = SuggestionType(suggestion_type)
        except ValueError:
            LOGGER.debug(
                "Ignoring apply for %s with unknown suggestion type %r", issue_id, suggestion_type
            )
            return False

        result = apply_suggestion_text(self.text, issue.excerpt, suggestion_text, kind)
        if result.fell_back:
            LOGGER.info("Excerpt for %s not found; suggestion appended", issue_id)
        self._history.record(result.text, applied_issue_id=issue_id)
        self._update_issue(issue_id, on_apply)
        self._pending_fixed.setdefault(issue_id, issue)
        self._text_changed()
        return True

    def apply_current_suggestion(self, issue_id: str, index: int | None = None) -> bool:
        """Apply the suggestion at ``index``, or the one under the cursor."""

        issue = self.find_issue(issue_id)
        if issue is None:
            return False
        if index is None:
            chosen = issue.current_suggestion
        else:
            chosen = issue.suggestions[index % len(issue.suggestions)]
        return self.apply_suggestion(issue_id, chosen.text, chosen.type)

    # -- issue UI state ------------------------------------------------

    def toggle_expand(self, issue_id: str) -> bool:
        return self._update_issue(issue_id, on_expand)

    def next_suggestion(self, issue_id: str) -> bool:
        return self._update_issue(issue_id, lambda issue: on_navigate(issue, 1))

    def previous_suggestion(self, issue_id: str) -> bool:
        return self._update_issue(issue_id, lambda issue: on_navigate(issue, -1))

    # -- analysis ------------------------------------------------------

    def flush(self) -> bool:
        """Run the pending analysis now; ``False`` when nothing was pending."""

        return self._debouncer.flush()

    def analyze_now(self) -> None:
        """Cancel any pending analysis and analyse the current text immediately."""

        self._debouncer.cancel()
        self._run_analysis()

    def close(self) -> None:
        self._debouncer.cancel()

    def _text_changed(self) -> None:
        self._debouncer.schedule(self._run_analysis)
        if self._saver is not None and self.storage_key:
            self._saver.save(self.storage_key, self.text)

    def _run_analysis(self) -> None:
        fresh = detect(self.text, self.context, catalog=self.catalog)
        self._dimensions = reconcile(self._dimensions, fresh, fixed_ids=set(self._pending_fixed))
        self._pending_fixed.clear()
        self.analysis_count += 1
        LOGGER.debug(
            "Analysis pass %d on %s: overall %.1f",
            self.analysis_count,
            self._history.current.id,
            self.overall_score,
        )
        if self._on_analysis is not None:
            self._on_analysis(self)

    def _revert_pending_applies(self) -> None:
        """Undo or redo before re-analysis drops the forced fix of pending applies."""

        for issue_id, original in self._pending_fixed.items():
            self._update_issue(issue_id, lambda _current, original=original: original)
        self._pending_fixed.clear()

    def _update_issue(self, issue_id: str, transform: Callable[[WritingIssue], WritingIssue]) -> bool:
        for position, dimension in enumerate(self._dimensions):
            for index, issue in enumerate(dimension.issues):
                if issue.id != issue_id:
                    continue
                issues = list(dimension.issues)
                issues[index] = transform(issue)
                self._dimensions[position] = dimension.model_copy(update={"issues": issues})
                return True
        LOGGER.debug("No issue %s in the current analysis", issue_id)
        return False


__all__ = ["COMPLETION_THRESHOLD", "WorkshopSession"]
