"""Tests for issue detection across the default rubric catalog."""

from __future__ import annotations

import pytest

from narrativefit.catalog import default_catalog
from narrativefit.detector import detect, detected_issue_counts
from narrativefit.models.context import RecognitionContext
from narrativefit.models.rubric import IssueStatus, SuggestionType

DIMENSION_IDS = ["selectivity", "theme", "causality", "evidence", "reflection"]


def _issue_ids(dimensions) -> set[str]:
    return {issue.id for dimension in dimensions for issue in dimension.issues}


def _by_id(text: str, context: RecognitionContext):
    return {dimension.id: dimension for dimension in detect(text, context)}


def test_detect_is_deterministic(selective_context: RecognitionContext, scenario_draft: str) -> None:
    first = detect(scenario_draft, selective_context)
    second = detect(scenario_draft, selective_context)

    assert [dimension.model_dump() for dimension in first] == [
        dimension.model_dump() for dimension in second
    ]


def test_detect_returns_every_dimension_in_catalog_order(
    stem_context: RecognitionContext, satisfying_draft: str
) -> None:
    dimensions = detect(satisfying_draft, stem_context)

    assert [dimension.id for dimension in dimensions] == DIMENSION_IDS
    assert sum(dimension.weight for dimension in dimensions) == pytest.approx(1.0)


def test_scenario_flags_theme_but_not_evidence(
    stem_context: RecognitionContext, scenario_draft: str
) -> None:
    dimensions = _by_id(scenario_draft, stem_context)

    assert [issue.id for issue in dimensions["theme"].issues] == ["theme.not_explicit"]
    assert dimensions["evidence"].issues == []
    assert dimensions["selectivity"].issues == []
    # "I led" is first-person agency, but nothing ties it to an outcome.
    assert [issue.id for issue in dimensions["causality"].issues] == ["causality.missing_connector"]
    assert [issue.id for issue in dimensions["reflection"].issues] == ["reflection.missing_reflection"]


def test_fresh_issues_start_collapsed_unfixed_on_first_suggestion(
    stem_context: RecognitionContext,
) -> None:
    for dimension in detect("", stem_context):
        for issue in dimension.issues:
            assert issue.status is IssueStatus.NOT_FIXED
            assert issue.expanded is False
            assert issue.current_suggestion_index == 0
            assert issue.dimension_id == dimension.id
            assert issue.id.startswith(f"{dimension.id}.")
            assert 1 <= len(issue.suggestions) <= 3


def test_empty_draft_fires_every_absence_rule(selective_context: RecognitionContext) -> None:
    dimensions = detect("", selective_context)

    assert _issue_ids(dimensions) == {
        "selectivity.missing_context",
        "theme.not_explicit",
        "causality.missing_connector",
        "causality.missing_agency",
        "evidence.unquantified",
        "reflection.missing_reflection",
    }
    for dimension in dimensions:
        assert dimension.score == 0.0


def test_satisfying_draft_scores_perfect(
    selective_context: RecognitionContext, satisfying_draft: str
) -> None:
    dimensions = detect(satisfying_draft, selective_context)

    assert _issue_ids(dimensions) == set()
    assert all(dimension.score == 10.0 for dimension in dimensions)


def test_selectivity_rule_needs_context_metadata(stem_context: RecognitionContext) -> None:
    assert detected_issue_counts("A plain draft.", stem_context)["selectivity"] == 0


def test_selectivity_replace_targets_recognition_name(
    selective_context: RecognitionContext,
) -> None:
    dimensions = _by_id("I won the State STEM Award for my robotics work.", selective_context)

    (issue,) = dimensions["selectivity"].issues
    assert issue.excerpt == "State STEM Award"
    first = issue.suggestions[0]
    assert first.type is SuggestionType.REPLACE
    assert first.text == "State STEM Award (Top 40 of 1200)"
    assert issue.suggestions[-1].text == (
        "The State STEM Award carries a 3.3% acceptance rate (statewide competition)."
    )


@pytest.mark.parametrize(
    "text",
    [
        "Ranked in the top ten nationally.",
        "Only 4% of entrants advanced.",
        "Chosen as 40 of 1,200 applicants.",
        "Finished in the top 25 statewide.",
        "Selected 12 out of 300 teams.",
    ],
)
def test_selectivity_signal_suppresses_issue(
    text: str, selective_context: RecognitionContext
) -> None:
    assert detected_issue_counts(text, selective_context)["selectivity"] == 0


def test_top_without_a_rank_is_not_a_selectivity_signal(selective_context: RecognitionContext) -> None:
    assert detected_issue_counts("I stayed at the top of my class.", selective_context)["selectivity"] == 1


def test_theme_matches_split_theme_parts(selective_context: RecognitionContext) -> None:
    assert detected_issue_counts("My community garden grew.", selective_context)["theme"] == 0
    assert detected_issue_counts("My garden grew.", selective_context)["theme"] == 1


def test_theme_suggestion_names_supported_theme(
    stem_context: RecognitionContext, scenario_draft: str
) -> None:
    (issue,) = _by_id(scenario_draft, stem_context)["theme"].issues

    assert issue.excerpt == "I led platform design."
    assert issue.suggestions[0].type is SuggestionType.INSERT_BEFORE
    assert "my STEM narrative" in issue.suggestions[0].text


def test_missing_connector_replace_spans_action_and_outcome(
    stem_context: RecognitionContext, scenario_draft: str
) -> None:
    (issue,) = _by_id(scenario_draft, stem_context)["causality"].issues

    assert issue.excerpt == scenario_draft
    replace = issue.suggestions[0]
    assert replace.type is SuggestionType.REPLACE
    assert replace.text == (
        "I led platform design, which resulted in this outcome: "
        "118 students received weekly support."
    )


def test_missing_agency_flags_collective_phrasing(stem_context: RecognitionContext) -> None:
    dimensions = _by_id("Our team was given an award because of the app.", stem_context)

    assert [issue.id for issue in dimensions["causality"].issues] == ["causality.missing_agency"]


def test_buzzword_issue_offers_concrete_replacement(stem_context: RecognitionContext) -> None:
    (issue,) = _by_id("I built an innovative app. It reached 300 users.", stem_context)["evidence"].issues

    assert issue.id == "evidence.buzzwords"
    assert issue.excerpt == "I built an innovative app."
    assert issue.suggestions[0].text == "I built an [concrete detail] app."
    assert '"innovative"' in issue.analysis


def test_quantity_words_count_as_evidence(stem_context: RecognitionContext) -> None:
    assert detected_issue_counts("We helped hundreds of families.", stem_context)["evidence"] == 0
    assert detected_issue_counts("We helped many families.", stem_context)["evidence"] == 1


def test_unquantified_anchor_prefers_outcome_sentence(stem_context: RecognitionContext) -> None:
    text = "I started a club. It helped many younger students. We met weekly."
    (issue,) = _by_id(text, stem_context)["evidence"].issues

    assert issue.excerpt == "It helped many younger students."


def test_reflection_anchor_is_last_sentence(
    stem_context: RecognitionContext, scenario_draft: str
) -> None:
    (issue,) = _by_id(scenario_draft, stem_context)["reflection"].issues

    assert issue.excerpt == "118 students received weekly support."
    assert all(item.type is SuggestionType.INSERT_AFTER for item in issue.suggestions)


def test_unpunctuated_draft_anchors_to_whole_text(stem_context: RecognitionContext) -> None:
    text = " ".join(["word"] * 100)
    (issue,) = _by_id(text, stem_context)["theme"].issues

    assert issue.excerpt == text


def test_detect_uses_supplied_catalog(stem_context: RecognitionContext, scenario_draft: str) -> None:
    dimensions = detect(scenario_draft, stem_context, catalog=default_catalog())

    assert [dimension.id for dimension in dimensions] == DIMENSION_IDS
