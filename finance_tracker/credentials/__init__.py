"""Credential store package."""

from finance_tracker.credentials.store import AuthError, CredentialStore
from finance_tracker.credentials.sessions import SessionManager

__all__ = ["AuthError", "CredentialStore", "SessionManager"]
