"""In-memory registry of live workshop sessions."""

from __future__ import annotations

import logging
from collections import OrderedDict
from uuid import uuid4

from .session import WorkshopSession

LOGGER = logging.getLogger(__name__)


class SessionRegistry:
    """Bounded mapping of session id to session; the oldest session is evicted first."""

    def __init__(self, max_sessions: int = 256) -> None:
        if max_sessions < 1:
            msg = "max_sessions must be at least 1"
            raise ValueError(msg)
        self.max_sessions = max_sessions
        self._sessions: OrderedDict[str, WorkshopSession] = OrderedDict()

    def add(self, session: WorkshopSession) -> str:
        session_id = uuid4().hex
        self._sessions[session_id] = session
        while len(self._sessions) > self.max_sessions:
            evicted_id, evicted = self._sessions.popitem(last=False)
            evicted.close()
            LOGGER.info("Evicted workshop session %s", evicted_id, extra={"session_id": evicted_id})
        return session_id

    def get(self, session_id: str) -> WorkshopSession | None:
        return self._sessions.get(session_id)

    def remove(self, session_id: str) -> bool:
        session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        session.close()
        return True

    def close_all(self) -> None:
        for session in self._sessions.values():
            session.close()
        self._sessions.clear()

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions


__all__ = ["SessionRegistry"]
