"""Linear undo/redo history of draft snapshots."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable

from .models.draft import DraftVersion

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class DraftHistory:
    """Owns the version list and the cursor over it.

    Undo and redo only move the cursor. Recording a new version while the
    cursor is behind the tip discards everything after the cursor first.
    Version ids keep increasing for the lifetime of the history, so an id is
    never reused after truncation.
    """

    def __init__(self, initial_text: str, *, clock: Clock | None = None) -> None:
        self._clock = clock or utc_now
        self._next_serial = 0
        self._versions: list[DraftVersion] = [self._make_version(initial_text, None)]
        self._index = 0

    def _make_version(self, text: str, applied_issue_id: str | None) -> DraftVersion:
        version = DraftVersion(
            id=f"v{self._next_serial}",
            text=text,
            timestamp=self._clock(),
            applied_issue_id=applied_issue_id,
        )
        self._next_serial += 1
        return version

    @property
    def versions(self) -> list[DraftVersion]:
        return list(self._versions)

    @property
    def index(self) -> int:
        return self._index

    @property
    def current(self) -> DraftVersion:
        return self._versions[self._index]

    @property
    def text(self) -> str:
        return self.current.text

    @property
    def can_undo(self) -> bool:
        return self._index > 0

    @property
    def can_redo(self) -> bool:
        return self._index < len(self._versions) - 1

    @property
    def version_info(self) -> str:
        return f"Version {self._index + 1} of {len(self._versions)}"

    def record(self, text: str, *, applied_issue_id: str | None = None) -> DraftVersion:
        """Truncate after the cursor, append ``text`` and move the cursor to it."""

        del self._versions[self._index + 1 :]
        version = self._make_version(text, applied_issue_id)
        self._versions.append(version)
        self._index = len(self._versions) - 1
        return version

    def undo(self) -> bool:
        if not self.can_undo:
            return False
        self._index -= 1
        return True

    def redo(self) -> bool:
        if not self.can_redo:
            return False
        self._index += 1
        return True

    def find(self, version_id: str) -> DraftVersion | None:
        for version in self._versions:
            if version.id == version_id:
                return version
        return None

    def __len__(self) -> int:
        return len(self._versions)


__all__ = ["Clock", "DraftHistory", "utc_now"]
