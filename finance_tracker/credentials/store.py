"""
Credential Store

Registers users and verifies login attempts.

Passwords are hashed with bcrypt (salted, cost factor from settings,
10 by default). Plaintext passwords are never stored or logged.

Email uniqueness is NOT enforced unless `require_unique_email` is set:
existing databases may already hold duplicate accounts, and lookups
resolve them to the earliest registration.
"""

import asyncio
from typing import Optional

import bcrypt
from pydantic import ValidationError as PydanticValidationError

from finance_tracker.models.user import User
from finance_tracker.services.storage import UserStorageInterface
from finance_tracker.validation import ValidationError, validate_credentials


# bcrypt only looks at the first 72 bytes; newer releases refuse longer input
MAX_PASSWORD_BYTES = 72


class AuthError(Exception):
    """Invalid credentials or unauthenticated access to a protected resource."""
    pass


class CredentialStore:
    """
    Owns the users collection.

    Hashing runs in a worker thread so a slow bcrypt round does not
    stall the event loop.
    """

    def __init__(
        self,
        storage: UserStorageInterface,
        rounds: int = 10,
        require_unique_email: bool = False,
    ):
        self._storage = storage
        self._rounds = rounds
        self._require_unique_email = require_unique_email

    async def register(self, email: Optional[str], password: Optional[str]) -> str:
        """
        Create a new user.

        Returns:
            The new user's id

        Raises:
            ValidationError: Missing email/password, password too long,
                or (when enforced) email already registered
            PersistenceError: If the user cannot be saved
        """
        email, password = validate_credentials(email, password)
        password_bytes = password.encode("utf-8")
        if len(password_bytes) > MAX_PASSWORD_BYTES:
            raise ValidationError(
                f"Password must be at most {MAX_PASSWORD_BYTES} bytes",
                field="password",
            )

        if self._require_unique_email and await self._storage.find_user_by_email(email):
            raise ValidationError("Email is already registered", field="email")

        hashed = await asyncio.to_thread(
            bcrypt.hashpw, password_bytes, bcrypt.gensalt(rounds=self._rounds)
        )
        try:
            user = User(email=email, password_hash=hashed.decode("utf-8"))
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid user: {e.errors()[0]['msg']}")

        user = await self._storage.save_user(user)
        return user.id

    async def verify(self, email: Optional[str], password: Optional[str]) -> Optional[User]:
        """
        Check a login attempt.

        Returns:
            The matching user, or None when the email is unknown or the
            password does not match
        """
        if not email or not password:
            return None

        user = await self._storage.find_user_by_email(email.strip())
        if user is None:
            return None

        try:
            matches = await asyncio.to_thread(
                bcrypt.checkpw,
                password.encode("utf-8"),
                user.password_hash.encode("utf-8"),
            )
        except ValueError:
            # Over-long password or a stored hash bcrypt cannot read
            return None

        return user if matches else None

    async def get_user(self, user_id: str) -> Optional[User]:
        """Re-fetch a user by id (used to resolve session identities)."""
        return await self._storage.get_user_by_id(user_id)
