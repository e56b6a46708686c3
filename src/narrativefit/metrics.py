"""Lightweight Prometheus-style counters for the rubric service."""

from __future__ import annotations

from collections import Counter
from threading import Lock
from typing import Iterable

_REQUESTS: Counter[str] = Counter()
_ANALYSES: Counter[str] = Counter()
_LOCK = Lock()


def record_request(method: str, status_code: int) -> None:
    """Track an HTTP request labelled by method and status code."""

    labels = f'method="{method.lower()}",status="{status_code}"'
    with _LOCK:
        _REQUESTS[f"narrativefit_requests_total{{{labels}}}"] += 1


def record_analysis(outcome: str = "ok") -> None:
    """Track one detection and reconciliation pass."""

    with _LOCK:
        _ANALYSES[f'narrativefit_analysis_passes_total{{outcome="{outcome}"}}'] += 1


def _snapshot(counter: Counter[str]) -> Iterable[tuple[str, int]]:
    with _LOCK:
        return sorted(counter.items())


def reset() -> None:
    with _LOCK:
        _REQUESTS.clear()
        _ANALYSES.clear()


def render(service_version: str) -> str:
    """Render metrics using the Prometheus text exposition format."""

    lines = [
        "# HELP narrativefit_requests_total Count of HTTP requests processed by the rubric service",
        "# TYPE narrativefit_requests_total counter",
    ]
    requests = list(_snapshot(_REQUESTS))
    lines.extend(f"{sample} {value}" for sample, value in requests)
    if not requests:
        lines.append('narrativefit_requests_total{method="none",status="0"} 0')

    lines.extend(
        [
            "# HELP narrativefit_analysis_passes_total Count of draft analysis passes",
            "# TYPE narrativefit_analysis_passes_total counter",
        ]
    )
    analyses = list(_snapshot(_ANALYSES))
    lines.extend(f"{sample} {value}" for sample, value in analyses)
    if not analyses:
        lines.append('narrativefit_analysis_passes_total{outcome="ok"} 0')

    lines.extend(
        [
            "# HELP narrativefit_service_info Static service metadata",
            "# TYPE narrativefit_service_info gauge",
            f'narrativefit_service_info{{version="{service_version}"}} 1',
        ]
    )
    return "\n".join(lines) + "\n"


__all__ = ["record_analysis", "record_request", "render", "reset"]
