"""Liveness, rubric manifest and Prometheus endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Request, Response

from ..catalog import RubricCatalog
from ..config import EngineSettings
from ..metrics import render
from ..persistence import FileDraftStore
from ..registry import SessionRegistry
from .dependencies import get_catalog, get_registry, get_settings

router = APIRouter(prefix="/api/v1", tags=["health"])

PROMETHEUS_CONTENT_TYPE = "text/plain; version=0.0.4"


def _service_version(request: Request) -> str:
    return getattr(request.app.state, "service_version", "unknown")


@router.get("/healthz")
async def health(
    request: Request,
    registry: SessionRegistry = Depends(get_registry),
    settings: EngineSettings = Depends(get_settings),
) -> dict[str, Any]:
    """Report whether debounced re-analysis can run and where drafts are saved."""

    scheduler = request.app.state.scheduler
    store = request.app.state.draft_store
    return {
        "status": "ok",
        "version": _service_version(request),
        "sessions": len(registry),
        "max_sessions": settings.max_sessions,
        "scheduler_running": scheduler is not None and scheduler.running,
        "debounce_ms": settings.debounce_ms,
        "draft_store": "file" if isinstance(store, FileDraftStore) else "memory",
    }


@router.get("/rubric")
async def rubric_manifest(catalog: RubricCatalog = Depends(get_catalog)) -> dict[str, Any]:
    """List the active dimensions in display order with their weights and rules."""

    return {
        "id": catalog.catalog_id,
        "label": catalog.label,
        "dimensions": [
            {"id": spec.id, "name": spec.name, "weight": spec.weight, "rules": list(spec.rules)}
            for spec in catalog.dimensions
        ],
    }


@router.get("/metrics")
async def metrics_endpoint(request: Request) -> Response:
    # Set the header directly; media_type would append a charset.
    response = Response(content=render(_service_version(request)).encode("utf-8"))
    response.headers["Content-Type"] = PROMETHEUS_CONTENT_TYPE
    return response


__all__ = ["PROMETHEUS_CONTENT_TYPE", "health", "metrics_endpoint", "router", "rubric_manifest"]
