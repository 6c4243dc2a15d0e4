"""Admin authentication collaborator.

`AuthProvider` is the interface the admin surfaces depend on; the default
`ConfiguredAuthProvider` checks a single configured admin credential pair and
keeps TTL-bounded session tokens in process memory.
"""

from __future__ import annotations

import hmac
import logging
import secrets
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Optional, Protocol

from survey_app.logic.errors import AuthError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthSession:
    token: str
    email: str
    expires_at: datetime


class AuthProvider(Protocol):
    def sign_in(self, email: str, password: str) -> AuthSession: ...

    def get_session(self, token: Optional[str]) -> Optional[AuthSession]: ...

    def sign_out(self, token: Optional[str]) -> None: ...


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ConfiguredAuthProvider:
    def __init__(
        self,
        admin_email: str,
        admin_password: str,
        ttl_seconds: int = 8 * 3600,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._email = admin_email.strip().lower()
        self._password = admin_password
        self._ttl = timedelta(seconds=int(ttl_seconds))
        self._clock = clock
        self._sessions: Dict[str, AuthSession] = {}
        self._lock = threading.Lock()

    def sign_in(self, email: str, password: str) -> AuthSession:
        email_ok = hmac.compare_digest((email or "").strip().lower().encode(), self._email.encode())
        password_ok = hmac.compare_digest((password or "").encode(), self._password.encode())
        if not (email_ok and password_ok):
            logger.warning("admin_sign_in_rejected email=%s", email)
            raise AuthError("Error logging in")
        session = AuthSession(
            token=secrets.token_urlsafe(32),
            email=self._email,
            expires_at=self._clock() + self._ttl,
        )
        with self._lock:
            self._prune_expired(self._clock())
            self._sessions[session.token] = session
        logger.info("admin_sign_in email=%s", self._email)
        return session

    def _prune_expired(self, now: datetime) -> None:
        stale = [t for t, s in self._sessions.items() if s.expires_at <= now]
        for token in stale:
            del self._sessions[token]

    def get_session(self, token: Optional[str]) -> Optional[AuthSession]:
        if not token:
            return None
        with self._lock:
            session = self._sessions.get(token)
            if session is not None and session.expires_at <= self._clock():
                del self._sessions[token]
                session = None
        return session

    def sign_out(self, token: Optional[str]) -> None:
        if not token:
            return
        with self._lock:
            self._sessions.pop(token, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)


__all__ = ["AuthSession", "AuthProvider", "ConfiguredAuthProvider"]
