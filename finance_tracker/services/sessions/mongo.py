"""
MongoDB Session Store

Sessions are documents {_id: token, userId, createdAt, expiresAt} in their
own collection. A TTL index on expiresAt lets MongoDB reap stale sessions;
lookups also check expiry because the reaper only runs periodically.
"""

import secrets
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from pymongo.errors import PyMongoError

from finance_tracker.models.user import SessionData
from finance_tracker.services.sessions.interface import (
    SessionError,
    SessionStoreInterface,
)
from finance_tracker.services.storage.mongo import MongoClient


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class MongoSessionStore(SessionStoreInterface):

    def __init__(
        self,
        client: Optional[MongoClient] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._client = client or MongoClient()
        self._clock = clock

    async def ensure_indexes(self) -> None:
        """Create the TTL index that expires sessions. Idempotent."""
        try:
            await self._client.sessions().create_index(
                "expiresAt",
                expireAfterSeconds=0,
            )
        except PyMongoError as e:
            raise SessionError(f"Failed to create session indexes: {e}")

    async def create(self, user_id: str, ttl_seconds: int) -> SessionData:
        now = self._clock()
        session = SessionData(
            token=secrets.token_urlsafe(32),
            user_id=user_id,
            created_at=now,
            expires_at=now + timedelta(seconds=ttl_seconds),
        )
        try:
            await self._client.sessions().insert_one({
                "_id": session.token,
                "userId": session.user_id,
                "createdAt": session.created_at,
                "expiresAt": session.expires_at,
            })
        except PyMongoError as e:
            raise SessionError(f"Failed to create session: {e}")
        return session

    async def get(self, token: str) -> Optional[SessionData]:
        try:
            document = await self._client.sessions().find_one({"_id": token})
        except PyMongoError as e:
            raise SessionError(f"Failed to read session: {e}")
        if document is None:
            return None

        session = SessionData(
            token=document["_id"],
            user_id=document["userId"],
            created_at=document["createdAt"],
            expires_at=document["expiresAt"],
        )
        if session.is_expired(self._clock()):
            await self.destroy(token)
            return None
        return session

    async def destroy(self, token: str) -> None:
        try:
            await self._client.sessions().delete_one({"_id": token})
        except PyMongoError as e:
            raise SessionError(f"Failed to destroy session: {e}")
