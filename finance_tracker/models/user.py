"""
User and Session Models

A User is created on signup and never changes afterwards.

Sessions reference a user by id only. The password hash stays inside the
credential store and never travels into session state or log lines.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# Longest address RFC 5321 allows
MAX_EMAIL_LENGTH = 320


class User(BaseModel):
    """A registered account."""
    model_config = ConfigDict(str_strip_whitespace=True)

    id: Optional[str] = Field(
        default=None,
        description="Storage-assigned identifier"
    )
    email: str = Field(
        ...,
        min_length=1,
        max_length=MAX_EMAIL_LENGTH,
    )
    password_hash: str = Field(
        ...,
        min_length=1,
        repr=False,
        description="bcrypt hash of the password"
    )


class CredentialsForm(BaseModel):
    """Email and password as posted by the login and signup forms."""
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    email: Optional[str] = None
    password: Optional[str] = None


class SessionData(BaseModel):
    """
    Server-side state behind one session cookie.

    Holds a minimal identity claim (the user id) and nothing else.
    """

    token: str = Field(..., min_length=1)
    user_id: str = Field(..., min_length=1)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
    expires_at: datetime

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        now = now or datetime.now(timezone.utc)
        expires_at = self.expires_at
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)
        return now >= expires_at
