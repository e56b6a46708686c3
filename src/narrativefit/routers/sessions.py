"""Workshop session endpoints: drafts, issues and version history."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Body, Depends, Query, Response, status

from ..catalog import RubricCatalog
from ..http import raise_service_error
from ..metrics import record_analysis
from ..models.draft import VersionComparison
from ..models.session import (
    ApplySuggestionRequest,
    EditRequest,
    SessionCreateRequest,
    SessionResponse,
    VersionListResponse,
)
from ..persistence import DraftSaver, DraftStore, restore_draft
from ..registry import SessionRegistry
from ..session import WorkshopSession
from .dependencies import (
    DebouncerFactory,
    get_catalog,
    get_debouncer_factory,
    get_draft_store,
    get_registry,
    get_saver,
)

LOGGER = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/sessions", tags=["sessions"])


def _require_session(registry: SessionRegistry, session_id: str) -> WorkshopSession:
    session = registry.get(session_id)
    if session is None:
        raise_service_error(code="SESSION_NOT_FOUND", details={"session_id": session_id})
    return session


def _require_issue(session_id: str, issue_id: str, applied: bool) -> None:
    if not applied:
        raise_service_error(
            code="ISSUE_NOT_FOUND",
            details={"session_id": session_id, "issue_id": issue_id},
        )


def _respond(session_id: str, session: WorkshopSession) -> SessionResponse:
    return SessionResponse(session_id=session_id, state=session.snapshot())


def _count_analysis(_: WorkshopSession) -> None:
    record_analysis()


@router.post("", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
async def create_session(
    payload: SessionCreateRequest,
    registry: SessionRegistry = Depends(get_registry),
    catalog: RubricCatalog = Depends(get_catalog),
    store: DraftStore = Depends(get_draft_store),
    saver: DraftSaver = Depends(get_saver),
    debouncer_factory: DebouncerFactory = Depends(get_debouncer_factory),
) -> SessionResponse:
    """Start a session, resuming the saved draft for ``storage_key`` when one exists."""

    initial_draft = restore_draft(store, payload.storage_key, payload.initial_draft)
    session = WorkshopSession(
        initial_draft,
        payload.context,
        catalog=catalog,
        debouncer=debouncer_factory(),
        saver=saver,
        storage_key=payload.storage_key,
        on_analysis=_count_analysis,
    )
    session_id = registry.add(session)
    LOGGER.info(
        "Created workshop session %s (%d chars)",
        session_id,
        len(initial_draft),
        extra={"session_id": session_id},
    )
    return _respond(session_id, session)


@router.get("/{session_id}", response_model=SessionResponse)
async def get_session(
    session_id: str,
    registry: SessionRegistry = Depends(get_registry),
) -> SessionResponse:
    return _respond(session_id, _require_session(registry, session_id))


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_session(
    session_id: str,
    registry: SessionRegistry = Depends(get_registry),
) -> Response:
    if not registry.remove(session_id):
        raise_service_error(code="SESSION_NOT_FOUND", details={"session_id": session_id})
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{session_id}/edit", response_model=SessionResponse)
async def edit_draft(
    session_id: str,
    payload: EditRequest,
    registry: SessionRegistry = Depends(get_registry),
) -> SessionResponse:
    session = _require_session(registry, session_id)
    session.edit(payload.text)
    return _respond(session_id, session)


@router.post("/{session_id}/undo", response_model=SessionResponse)
async def undo(session_id: str, registry: SessionRegistry = Depends(get_registry)) -> SessionResponse:
    session = _require_session(registry, session_id)
    session.undo()
    return _respond(session_id, session)


@router.post("/{session_id}/redo", response_model=SessionResponse)
async def redo(session_id: str, registry: SessionRegistry = Depends(get_registry)) -> SessionResponse:
    session = _require_session(registry, session_id)
    session.redo()
    return _respond(session_id, session)


@router.post("/{session_id}/analyze", response_model=SessionResponse)
async def analyze(session_id: str, registry: SessionRegistry = Depends(get_registry)) -> SessionResponse:
    """Run any pending re-analysis immediately."""

    session = _require_session(registry, session_id)
    session.flush()
    return _respond(session_id, session)


@router.post("/{session_id}/issues/{issue_id}/toggle", response_model=SessionResponse)
async def toggle_issue(
    session_id: str,
    issue_id: str,
    registry: SessionRegistry = Depends(get_registry),
) -> SessionResponse:
    session = _require_session(registry, session_id)
    _require_issue(session_id, issue_id, session.toggle_expand(issue_id))
    return _respond(session_id, session)


@router.post("/{session_id}/issues/{issue_id}/next", response_model=SessionResponse)
async def next_suggestion(
    session_id: str,
    issue_id: str,
    registry: SessionRegistry = Depends(get_registry),
) -> SessionResponse:
    session = _require_session(registry, session_id)
    _require_issue(session_id, issue_id, session.next_suggestion(issue_id))
    return _respond(session_id, session)


@router.post("/{session_id}/issues/{issue_id}/previous", response_model=SessionResponse)
async def previous_suggestion(
    session_id: str,
    issue_id: str,
    registry: SessionRegistry = Depends(get_registry),
) -> SessionResponse:
    session = _require_session(registry, session_id)
    _require_issue(session_id, issue_id, session.previous_suggestion(issue_id))
    return _respond(session_id, session)


@router.post("/{session_id}/issues/{issue_id}/apply", response_model=SessionResponse)
async def apply_suggestion(
    session_id: str,
    issue_id: str,
    payload: ApplySuggestionRequest | None = Body(default=None),
    registry: SessionRegistry = Depends(get_registry),
) -> SessionResponse:
    """Apply the suggestion under the cursor, one chosen by index, or explicit text."""

    session = _require_session(registry, session_id)
    request = payload or ApplySuggestionRequest()
    if request.text is not None and request.type is not None:
        applied = session.apply_suggestion(issue_id, request.text, request.type)
    else:
        applied = session.apply_current_suggestion(issue_id, request.suggestion_index)
    _require_issue(session_id, issue_id, applied)
    return _respond(session_id, session)


@router.get("/{session_id}/versions", response_model=VersionListResponse)
async def list_versions(
    session_id: str,
    registry: SessionRegistry = Depends(get_registry),
) -> VersionListResponse:
    session = _require_session(registry, session_id)
    return VersionListResponse(current_index=session.history.index, versions=session.versions)


@router.get("/{session_id}/versions/compare", response_model=VersionComparison)
async def compare_versions(
    session_id: str,
    from_id: str = Query(..., min_length=1),
    to_id: str = Query(..., min_length=1),
    registry: SessionRegistry = Depends(get_registry),
) -> VersionComparison:
    session = _require_session(registry, session_id)
    comparison = session.compare_versions(from_id, to_id)
    if comparison is None:
        raise_service_error(
            code="VERSION_NOT_FOUND",
            details={"session_id": session_id, "from_id": from_id, "to_id": to_id},
        )
    return comparison


__all__ = ["router"]
