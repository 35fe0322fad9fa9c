"""
Session Manager

Binds an authenticated user to the browser through an opaque cookie.

The session store holds only the user id. Anything else about the user
is re-fetched from the credential store on demand, so password hashes
never end up in session state or in logs.
"""

from typing import Optional

from fastapi import Request, Response

from finance_tracker.credentials.store import CredentialStore
from finance_tracker.models.user import SessionData, User
from finance_tracker.services.sessions import SessionStoreInterface


class SessionManager:
    """Cookie-keyed gate in front of every protected endpoint."""

    def __init__(
        self,
        store: SessionStoreInterface,
        credentials: CredentialStore,
        cookie_name: str = "finance_tracker.sid",
        max_age_seconds: int = 24 * 60 * 60,
        cookie_secure: bool = False,
    ):
        self._store = store
        self._credentials = credentials
        self._cookie_name = cookie_name
        self._max_age_seconds = max_age_seconds
        self._cookie_secure = cookie_secure

    @property
    def cookie_name(self) -> str:
        return self._cookie_name

    def _token(self, request: Request) -> Optional[str]:
        return request.cookies.get(self._cookie_name) or None

    async def login(self, response: Response, user: User) -> SessionData:
        """Start a session for `user` and attach its cookie to `response`."""
        session = await self._store.create(user.id, self._max_age_seconds)
        response.set_cookie(
            key=self._cookie_name,
            value=session.token,
            max_age=self._max_age_seconds,
            httponly=True,
            samesite="lax",
            secure=self._cookie_secure,
            path="/",
        )
        return session

    async def get_session(self, request: Request) -> Optional[SessionData]:
        token = self._token(request)
        if token is None:
            return None
        return await self._store.get(token)

    async def is_authenticated(self, request: Request) -> bool:
        return await self.get_session(request) is not None

    async def current_user_id(self, request: Request) -> Optional[str]:
        session = await self.get_session(request)
        return session.user_id if session else None

    async def current_user(self, request: Request) -> Optional[User]:
        """The logged-in user, or None. Always read fresh from the store."""
        user_id = await self.current_user_id(request)
        if user_id is None:
            return None
        return await self._credentials.get_user(user_id)

    async def logout(self, request: Request, response: Response) -> Optional[str]:
        """
        Destroy the request's session and clear its cookie.

        Returns:
            The id of the user who was logged in, if any

        Raises:
            SessionError: If the session store cannot be cleared
        """
        token = self._token(request)
        user_id = None
        if token is not None:
            session = await self._store.get(token)
            user_id = session.user_id if session else None
            await self._store.destroy(token)
        response.delete_cookie(key=self._cookie_name, path="/")
        return user_id
