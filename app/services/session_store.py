"""
Session store - server-side session state keyed by a cookie value.

The browser only holds a random session ID (cookie); the data lives here.
After login the session carries "user_id" = the Google account ID.

Using in-memory storage, which is fine for a single worker. With several
workers or restarts that must keep logins, back this with Redis instead.
"""

import logging
import secrets
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional


logger = logging.getLogger("calendar_service.services.session_store")


@dataclass
class Session:
    """One server-side session."""
    session_id: str
    data: Dict[str, Any] = field(default_factory=dict)
    expires_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self.data[key] = value


class SessionStore:
    """
    Manages sessions with a sliding TTL.

    - get() always returns a session: the stored one, or a fresh one with
      a new ID when the presented ID is missing, unknown or expired
    - save() persists the session and pushes its expiry forward
    """

    ID_BYTES = 32

    def __init__(self, ttl_minutes: int = 60 * 24):
        self.ttl = timedelta(minutes=ttl_minutes)
        # session_id -> Session
        self._sessions: dict[str, Session] = {}

    def get(self, session_id: Optional[str]) -> Session:
        """
        Load the session for a presented ID.

        Args:
            session_id: Cookie value, may be None

        Returns:
            Existing session, or a new unsaved one
        """
        self.cleanup_expired()

        if session_id and session_id in self._sessions:
            return self._sessions[session_id]

        return Session(session_id=self._generate_id())

    def save(self, session: Session) -> None:
        """Persist the session and extend its lifetime."""
        session.expires_at = datetime.now(timezone.utc) + self.ttl
        self._sessions[session.session_id] = session
        logger.debug(f"Saved session with keys {sorted(session.data)}")

    def delete(self, session_id: str) -> None:
        self._sessions.pop(session_id, None)

    def cleanup_expired(self) -> int:
        """
        Remove all expired sessions.

        Returns:
            Number of sessions removed
        """
        now = datetime.now(timezone.utc)
        expired = [sid for sid, s in self._sessions.items() if now > s.expires_at]
        for sid in expired:
            del self._sessions[sid]
        return len(expired)

    def _generate_id(self) -> str:
        # Retry on collision (practically never happens with 32 random bytes)
        for _ in range(10):
            session_id = secrets.token_urlsafe(self.ID_BYTES)
            if session_id not in self._sessions:
                return session_id
        raise RuntimeError("Failed to generate unique session ID")
