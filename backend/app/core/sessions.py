"""
Server-side session state.

The client holds a signed token carrying only an opaque session id. The
session store maps that id to the authenticated identity and is the source
of truth: logout or expiry removes the entry, which invalidates the token
even though its signature is still good.
"""
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Dict, Optional
import logging
import secrets
import threading
from app.core.config import settings
from app.core.security import create_session_token, decode_session_token, utcnow

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionData:
    """Identity bound to a live session."""
    session_id: str
    user_id: int
    username: str
    created_at: datetime
    expires_at: datetime

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        return (now or utcnow()) >= self.expires_at


class SessionStore:
    """Storage backend for sessions. Subclass for a shared key-value store."""

    def get(self, session_id: str) -> Optional[SessionData]:
        raise NotImplementedError

    def save(self, session: SessionData) -> None:
        raise NotImplementedError

    def delete(self, session_id: str) -> None:
        raise NotImplementedError

    def clear(self) -> None:
        raise NotImplementedError


class InMemorySessionStore(SessionStore):
    """Process-local store for single-instance deployments."""

    def __init__(self):
        self._sessions: Dict[str, SessionData] = {}
        self._lock = threading.Lock()

    def get(self, session_id: str) -> Optional[SessionData]:
        with self._lock:
            return self._sessions.get(session_id)

    def save(self, session: SessionData) -> None:
        with self._lock:
            self._purge_expired()
            self._sessions[session.session_id] = session

    def delete(self, session_id: str) -> None:
        with self._lock:
            self._sessions.pop(session_id, None)

    def clear(self) -> None:
        with self._lock:
            self._sessions.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def _purge_expired(self) -> None:
        # Caller holds the lock
        now = utcnow()
        expired = [sid for sid, s in self._sessions.items() if s.is_expired(now)]
        for sid in expired:
            del self._sessions[sid]


class SessionManager:
    """Creates, resolves and destroys sessions with a fixed TTL from creation."""

    def __init__(self, store: SessionStore, ttl: timedelta):
        self.store = store
        self.ttl = ttl

    def create(self, user_id: int, username: str) -> str:
        """Start a session and return the signed token for the cookie."""
        now = utcnow()
        session = SessionData(
            session_id=secrets.token_urlsafe(32),
            user_id=user_id,
            username=username,
            created_at=now,
            expires_at=now + self.ttl,
        )
        self.store.save(session)
        return create_session_token(session.session_id, session.expires_at)

    def resolve(self, token: Optional[str]) -> Optional[SessionData]:
        """Return the live session for a token, or None when anonymous."""
        if not token:
            return None
        session_id = decode_session_token(token)
        if session_id is None:
            return None
        session = self.store.get(session_id)
        if session is None:
            return None
        if session.is_expired():
            self.store.delete(session_id)
            return None
        return session

    def destroy(self, token: Optional[str]) -> None:
        if not token:
            return
        session_id = decode_session_token(token)
        if session_id is not None:
            self.store.delete(session_id)


session_manager = SessionManager(
    InMemorySessionStore(),
    ttl=timedelta(hours=settings.SESSION_TTL_HOURS),
)


def get_session_manager() -> SessionManager:
    """Dependency returning the process-wide session manager."""
    return session_manager
