"""Best-effort draft persistence: a load/save contract plus helpers that never raise."""

from __future__ import annotations

import json
import logging
import os
import re
from concurrent.futures import Executor
from datetime import datetime, timezone
from pathlib import Path
from threading import Lock
from typing import Any, Protocol
from uuid import uuid4

LOGGER = logging.getLogger(__name__)

_KEY_PATTERN = re.compile(r"^[A-Za-z0-9._:-]{1,128}$")
_WRITE_LOCK = Lock()


class DraftStore(Protocol):
    """Keyed text storage. Implementations may raise; callers swallow failures."""

    def load(self, key: str) -> str | None: ...

    def save(self, key: str, text: str) -> None: ...


class MemoryDraftStore:
    """Dictionary-backed store, mainly for tests and single-process use."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._drafts: dict[str, str] = dict(initial or {})

    def load(self, key: str) -> str | None:
        return self._drafts.get(key)

    def save(self, key: str, text: str) -> None:
        self._drafts[key] = text

    def __contains__(self, key: object) -> bool:
        return key in self._drafts


def write_json_atomic(path: Path, payload: dict[str, Any], *, durable: bool = True) -> None:
    """Write JSON next to ``path`` and rename it into place."""

    path.parent.mkdir(parents=True, exist_ok=True)
    temp_path = path.parent / f".{path.name}.{uuid4().hex}.tmp"
    with _WRITE_LOCK:
        try:
            with temp_path.open("w", encoding="utf-8") as handle:
                json.dump(payload, handle, indent=2, ensure_ascii=False)
                handle.flush()
                if durable:
                    os.fsync(handle.fileno())
            temp_path.replace(path)
        finally:
            if temp_path.exists():
                temp_path.unlink()


class FileDraftStore:
    """One JSON document per key under ``base_dir``."""

    def __init__(self, base_dir: Path, *, durable: bool = True) -> None:
        self.base_dir = Path(base_dir)
        self._durable = durable

    def path_for(self, key: str) -> Path:
        if not _KEY_PATTERN.fullmatch(key):
            msg = f"Invalid draft key: {key!r}"
            raise ValueError(msg)
        return self.base_dir / f"{key}.json"

    def load(self, key: str) -> str | None:
        path = self.path_for(key)
        if not path.exists():
            return None
        with path.open("r", encoding="utf-8") as handle:
            payload = json.load(handle)
        text = payload.get("text") if isinstance(payload, dict) else None
        if not isinstance(text, str):
            msg = f"Draft file {path.name} has no text field"
            raise ValueError(msg)
        return text

    def save(self, key: str, text: str) -> None:
        payload = {
            "key": key,
            "text": text,
            "saved_at": datetime.now(timezone.utc).isoformat(),
        }
        write_json_atomic(self.path_for(key), payload, durable=self._durable)


class DraftSaver:
    """Fire-and-forget saves; failures are logged and dropped, never retried."""

    def __init__(self, store: DraftStore, *, executor: Executor | None = None) -> None:
        self.store = store
        self._executor = executor

    def save(self, key: str, text: str) -> None:
        if self._executor is None:
            self._save_quietly(key, text)
            return
        try:
            self._executor.submit(self._save_quietly, key, text)
        except RuntimeError as exc:
            LOGGER.warning("Draft save for %s not submitted: %s", key, exc, extra={"storage_key": key})

    def _save_quietly(self, key: str, text: str) -> None:
        try:
            self.store.save(key, text)
        except Exception as exc:
            LOGGER.warning("Draft save failed for %s: %s", key, exc, extra={"storage_key": key})
        else:
            LOGGER.debug("Saved draft %s (%d chars)", key, len(text))


def restore_draft(store: DraftStore | None, key: str | None, default: str) -> str:
    """Return the saved draft for ``key`` when one exists, else ``default``."""

    if store is None or not key:
        return default
    try:
        saved = store.load(key)
    except Exception as exc:
        LOGGER.warning("Draft restore failed for %s: %s", key, exc, extra={"storage_key": key})
        return default
    if not saved:
        return default
    LOGGER.info("Restored saved draft %s (%d chars)", key, len(saved), extra={"storage_key": key})
    return saved


__all__ = [
    "DraftSaver",
    "DraftStore",
    "FileDraftStore",
    "MemoryDraftStore",
    "restore_draft",
    "write_json_atomic",
]
