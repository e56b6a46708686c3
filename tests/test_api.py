"""Tests for the rubric workshop FastAPI service."""

from __future__ import annotations

from pathlib import Path
from typing import Any
from uuid import UUID

from fastapi.testclient import TestClient

from narrativefit.app import create_app
from narrativefit.config import EngineSettings

TRACE_HEADER = "x-trace-id"
API_PREFIX = "/api/v1"
SESSIONS = f"{API_PREFIX}/sessions"
STEM_CONTEXT = {"name": "State STEM Award", "themeSupport": ["STEM"]}


def _assert_trace_header(response: Any) -> str:
    trace_id = response.headers.get(TRACE_HEADER)
    assert trace_id is not None
    UUID(trace_id)
    return trace_id


def _read_error(response: Any) -> dict[str, Any]:
    payload = response.json()
    assert payload["trace_id"] == _assert_trace_header(response)
    return payload


def _create(client: TestClient, draft: str, **extra: Any) -> dict[str, Any]:
    response = client.post(SESSIONS, json={"initial_draft": draft, "context": STEM_CONTEXT, **extra})
    assert response.status_code == 201, response.text
    return response.json()


def _issue(state: dict[str, Any], issue_id: str) -> dict[str, Any] | None:
    for dimension in state["dimensions"]:
        for issue in dimension["issues"]:
            if issue["id"] == issue_id:
                return issue
    return None


def test_service_index_reports_manifest(test_client: TestClient) -> None:
    response = test_client.get("/")

    assert response.status_code == 200
    assert response.json()["api_base"] == API_PREFIX
    _assert_trace_header(response)


def test_health_reports_running_scheduler(test_client: TestClient) -> None:
    response = test_client.get(f"{API_PREFIX}/healthz")

    assert response.status_code == 200
    payload = response.json()
    assert payload["status"] == "ok"
    assert payload["scheduler_running"] is True
    assert payload["sessions"] == 0
    assert payload["max_sessions"] == 4
    assert payload["draft_store"] == "file"


def test_rubric_manifest_lists_dimensions_in_order(test_client: TestClient) -> None:
    payload = test_client.get(f"{API_PREFIX}/rubric").json()

    assert payload["id"] == "narrative_fit"
    ids = [dimension["id"] for dimension in payload["dimensions"]]
    assert ids == ["selectivity", "theme", "causality", "evidence", "reflection"]
    assert abs(sum(dimension["weight"] for dimension in payload["dimensions"]) - 1.0) < 1e-9
    assert "causality.missing_agency" in payload["dimensions"][2]["rules"]


def test_trace_header_is_echoed_when_valid(test_client: TestClient) -> None:
    trace_id = "0f9c8f5e-3f4b-4c3a-9d56-8d7a2a4f6b1e"

    response = test_client.get("/", headers={TRACE_HEADER: trace_id})

    assert response.headers[TRACE_HEADER] == trace_id


def test_create_session_returns_initial_analysis(test_client: TestClient, scenario_draft: str) -> None:
    payload = _create(test_client, scenario_draft)
    state = payload["state"]

    assert payload["session_id"]
    assert state["draft"] == scenario_draft
    assert state["version_info"] == "Version 1 of 1"
    assert [dimension["id"] for dimension in state["dimensions"]] == [
        "selectivity",
        "theme",
        "causality",
        "evidence",
        "reflection",
    ]
    theme = _issue(state, "theme.not_explicit")
    assert theme is not None
    assert theme["status"] == "not_fixed"
    assert theme["suggestions"][0]["type"] == "insert_before"


def test_apply_then_analyze_resolves_theme_issue(test_client: TestClient, scenario_draft: str) -> None:
    created = _create(test_client, scenario_draft)
    session_id = created["session_id"]
    suggestion = _issue(created["state"], "theme.not_explicit")["suggestions"][0]["text"]

    applied = test_client.post(f"{SESSIONS}/{session_id}/issues/theme.not_explicit/apply")
    assert applied.status_code == 200
    state = applied.json()["state"]
    assert state["draft"] == f"{suggestion} {scenario_draft}"
    assert _issue(state, "theme.not_explicit")["status"] == "fixed"
    assert state["analysis_pending"] is True

    analyzed = test_client.post(f"{SESSIONS}/{session_id}/analyze").json()["state"]
    assert analyzed["analysis_pending"] is False
    assert _issue(analyzed, "theme.not_explicit") is None
    theme = next(dimension for dimension in analyzed["dimensions"] if dimension["id"] == "theme")
    assert theme["score"] == 10.0


def test_apply_explicit_text(test_client: TestClient, scenario_draft: str) -> None:
    session_id = _create(test_client, scenario_draft)["session_id"]

    response = test_client.post(
        f"{SESSIONS}/{session_id}/issues/reflection.missing_reflection/apply",
        json={"text": "I learned patience.", "type": "insert_after"},
    )

    assert response.status_code == 200
    assert response.json()["state"]["draft"] == f"{scenario_draft} I learned patience."


def test_issue_navigation_endpoints(test_client: TestClient, scenario_draft: str) -> None:
    session_id = _create(test_client, scenario_draft)["session_id"]
    base = f"{SESSIONS}/{session_id}/issues/causality.missing_connector"

    toggled = test_client.post(f"{base}/toggle").json()["state"]
    issue = _issue(toggled, "causality.missing_connector")
    assert issue["expanded"] is True
    assert issue["status"] == "in_progress"

    test_client.post(f"{base}/next")
    moved = test_client.post(f"{base}/next").json()["state"]
    assert _issue(moved, "causality.missing_connector")["current_suggestion_index"] == 2

    back = test_client.post(f"{base}/previous").json()["state"]
    assert _issue(back, "causality.missing_connector")["current_suggestion_index"] == 1


def test_edit_undo_redo_and_versions(test_client: TestClient, scenario_draft: str) -> None:
    session_id = _create(test_client, scenario_draft)["session_id"]

    edited = test_client.post(f"{SESSIONS}/{session_id}/edit", json={"text": "A new draft."})
    assert edited.json()["state"]["can_undo"] is True

    undone = test_client.post(f"{SESSIONS}/{session_id}/undo").json()["state"]
    assert undone["draft"] == scenario_draft
    assert undone["can_redo"] is True

    redone = test_client.post(f"{SESSIONS}/{session_id}/redo").json()["state"]
    assert redone["draft"] == "A new draft."

    versions = test_client.get(f"{SESSIONS}/{session_id}/versions").json()
    assert versions["current_index"] == 1
    assert [version["id"] for version in versions["versions"]] == ["v0", "v1"]

    comparison = test_client.get(
        f"{SESSIONS}/{session_id}/versions/compare", params={"from_id": "v0", "to_id": "v1"}
    )
    assert comparison.status_code == 200
    body = comparison.json()
    assert body["from_id"] == "v0"
    assert body["text_changes"]["net_change"] == len("A new draft.") - len(scenario_draft)


def test_unknown_session_returns_structured_404(test_client: TestClient) -> None:
    response = test_client.get(f"{SESSIONS}/missing")

    assert response.status_code == 404
    payload = _read_error(response)
    assert payload["code"] == "SESSION_NOT_FOUND"
    assert payload["details"] == {"session_id": "missing"}


def test_unknown_issue_returns_issue_not_found(test_client: TestClient, scenario_draft: str) -> None:
    session_id = _create(test_client, scenario_draft)["session_id"]

    for action in ("toggle", "next", "previous", "apply"):
        response = test_client.post(f"{SESSIONS}/{session_id}/issues/nope.nothing/{action}")
        assert response.status_code == 404
        assert _read_error(response)["code"] == "ISSUE_NOT_FOUND"

    state = test_client.get(f"{SESSIONS}/{session_id}").json()["state"]
    assert state["version_info"] == "Version 1 of 1"


def test_unknown_version_returns_version_not_found(test_client: TestClient, scenario_draft: str) -> None:
    session_id = _create(test_client, scenario_draft)["session_id"]

    response = test_client.get(
        f"{SESSIONS}/{session_id}/versions/compare", params={"from_id": "v0", "to_id": "v7"}
    )

    assert response.status_code == 404
    assert _read_error(response)["code"] == "VERSION_NOT_FOUND"


def test_validation_errors_use_shared_payload(test_client: TestClient, scenario_draft: str) -> None:
    response = test_client.post(SESSIONS, json={"initial_draft": "x", "unexpected": True})

    assert response.status_code == 400
    payload = _read_error(response)
    assert payload["code"] == "VALIDATION"
    assert payload["details"]["errors"]

    session_id = _create(test_client, scenario_draft)["session_id"]
    conflicting = test_client.post(
        f"{SESSIONS}/{session_id}/issues/theme.not_explicit/apply",
        json={"suggestion_index": 0, "text": "x", "type": "replace"},
    )
    assert conflicting.status_code == 400
    assert _read_error(conflicting)["code"] == "VALIDATION"


def test_delete_session(test_client: TestClient, scenario_draft: str) -> None:
    session_id = _create(test_client, scenario_draft)["session_id"]

    assert test_client.delete(f"{SESSIONS}/{session_id}").status_code == 204
    assert test_client.delete(f"{SESSIONS}/{session_id}").status_code == 404


def test_oldest_session_is_evicted(test_client: TestClient, scenario_draft: str) -> None:
    ids = [_create(test_client, scenario_draft)["session_id"] for _ in range(5)]

    assert test_client.get(f"{SESSIONS}/{ids[0]}").status_code == 404
    assert test_client.get(f"{SESSIONS}/{ids[-1]}").status_code == 200
    assert test_client.get(f"{API_PREFIX}/healthz").json()["sessions"] == 4


def test_metrics_count_requests_and_analyses(test_client: TestClient, scenario_draft: str) -> None:
    _create(test_client, scenario_draft)

    response = test_client.get(f"{API_PREFIX}/metrics")

    assert response.status_code == 200
    assert response.headers["content-type"] == "text/plain; version=0.0.4"
    body = response.text
    assert 'narrativefit_requests_total{method="post",status="201"} 1' in body
    assert 'narrativefit_analysis_passes_total{outcome="ok"} 1' in body
    assert 'narrativefit_service_info{version="0.1.0"} 1' in body


def test_saved_draft_is_restored_by_storage_key(
    service_settings: EngineSettings, scenario_draft: str, tmp_path: Path
) -> None:
    with TestClient(create_app(service_settings)) as client:
        session_id = _create(client, scenario_draft, storage_key="essay-1")["session_id"]
        client.post(f"{SESSIONS}/{session_id}/edit", json={"text": "Saved by the service."})

    assert (tmp_path / "drafts" / "essay-1.json").exists()

    with TestClient(create_app(service_settings)) as client:
        restored = _create(client, "Fresh default.", storage_key="essay-1")

    assert restored["state"]["draft"] == "Saved by the service."
