"""
Abstract Session Store Interface

Session state lives behind this interface so request handlers never touch
a process-global map. Backends:
1. In-memory map (tests, single-process development)
2. MongoDB collection with a TTL index (production)

A session only records WHO is logged in (a user id). Everything else is
re-fetched from the credential store when needed.
"""

from abc import ABC, abstractmethod
from typing import Optional

from finance_tracker.models.user import SessionData


class SessionStoreInterface(ABC):
    """Abstract interface for server-side session state."""

    @abstractmethod
    async def create(self, user_id: str, ttl_seconds: int) -> SessionData:
        """
        Start a new session for a user.

        Returns:
            The session, including its freshly generated opaque token
        """
        pass

    @abstractmethod
    async def get(self, token: str) -> Optional[SessionData]:
        """
        Look up a live session.

        Returns:
            The session, or None if the token is unknown or expired
        """
        pass

    @abstractmethod
    async def destroy(self, token: str) -> None:
        """
        End a session. Unknown tokens are ignored.

        Raises:
            SessionError: If the backing store cannot be cleared
        """
        pass


class SessionError(Exception):
    """Session state could not be read or torn down."""
    pass
