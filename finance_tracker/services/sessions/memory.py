"""In-memory session store, keyed by token. State is lost on restart."""

import secrets
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from finance_tracker.models.user import SessionData
from finance_tracker.services.sessions.interface import SessionStoreInterface


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class InMemorySessionStore(SessionStoreInterface):

    def __init__(self, clock: Callable[[], datetime] = utc_now):
        self._sessions: dict[str, SessionData] = {}
        self._clock = clock

    async def create(self, user_id: str, ttl_seconds: int) -> SessionData:
        now = self._clock()
        session = SessionData(
            token=secrets.token_urlsafe(32),
            user_id=user_id,
            created_at=now,
            expires_at=now + timedelta(seconds=ttl_seconds),
        )
        self._sessions[session.token] = session
        return session

    async def get(self, token: str) -> Optional[SessionData]:
        session = self._sessions.get(token)
        if session is None:
            return None
        if session.is_expired(self._clock()):
            del self._sessions[token]
            return None
        return session

    async def destroy(self, token: str) -> None:
        self._sessions.pop(token, None)
