"""Session store package."""

from finance_tracker.services.sessions.interface import (
    SessionError,
    SessionStoreInterface,
)
from finance_tracker.services.sessions.memory import InMemorySessionStore
from finance_tracker.services.sessions.mongo import MongoSessionStore

__all__ = [
    "InMemorySessionStore",
    "MongoSessionStore",
    "SessionError",
    "SessionStoreInterface",
]
