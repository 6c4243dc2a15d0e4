"""In-process holder for live questionnaire sessions.

Sessions are not persisted: a process restart starts every respondent over,
the same as reloading the survey page. Entries expire after a period without
requests: a long one while the questionnaire is in progress and a short one
once it is complete, long enough for the client to read the redirect.
"""

from __future__ import annotations

import logging
import threading
import time
import uuid
from dataclasses import dataclass
from typing import Callable, Dict

from survey_app.logic.errors import SessionNotFound
from survey_app.logic.questionnaire_session import Complete, QuestionnaireSession

logger = logging.getLogger(__name__)


@dataclass
class _Entry:
    session: QuestionnaireSession
    touched: float


class SessionRegistry:
    def __init__(
        self,
        idle_ttl_seconds: float = 3600,
        completed_ttl_seconds: float = 300,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._idle_ttl = float(idle_ttl_seconds)
        self._completed_ttl = float(completed_ttl_seconds)
        self._clock = clock
        self._sessions: Dict[str, _Entry] = {}
        self._lock = threading.Lock()

    def _expired(self, entry: _Entry, now: float) -> bool:
        ttl = self._completed_ttl if isinstance(entry.session.state, Complete) else self._idle_ttl
        return now - entry.touched >= ttl

    def _prune_locked(self, now: float) -> int:
        stale = [sid for sid, entry in self._sessions.items() if self._expired(entry, now)]
        for sid in stale:
            del self._sessions[sid]
        return len(stale)

    def prune(self) -> int:
        """Drop expired sessions; return how many were removed."""
        with self._lock:
            removed = self._prune_locked(self._clock())
        if removed:
            logger.info("sessions_pruned removed=%s", removed)
        return removed

    def add(self, session: QuestionnaireSession) -> str:
        session_id = str(uuid.uuid4())
        now = self._clock()
        with self._lock:
            removed = self._prune_locked(now)
            self._sessions[session_id] = _Entry(session, now)
        if removed:
            logger.info("sessions_pruned removed=%s", removed)
        return session_id

    def get(self, session_id: str) -> QuestionnaireSession:
        now = self._clock()
        with self._lock:
            entry = self._sessions.get(str(session_id))
            if entry is not None and self._expired(entry, now):
                del self._sessions[str(session_id)]
                entry = None
            if entry is not None:
                entry.touched = now
        if entry is None:
            raise SessionNotFound(f"session {session_id} not found")
        return entry.session

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)


__all__ = ["SessionRegistry"]
