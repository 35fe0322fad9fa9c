"""Services package."""

from finance_tracker.services.sessions import (
    InMemorySessionStore,
    MongoSessionStore,
    SessionError,
    SessionStoreInterface,
)
from finance_tracker.services.storage import (
    InMemoryTransactionStorage,
    InMemoryUserStorage,
    MongoClient,
    MongoTransactionStorage,
    MongoUserStorage,
    PersistenceError,
    StorageConnectionError,
    TransactionStorageInterface,
    UserStorageInterface,
)

__all__ = [
    # Session stores
    "InMemorySessionStore",
    "MongoSessionStore",
    "SessionError",
    "SessionStoreInterface",
    # Storage services
    "InMemoryTransactionStorage",
    "InMemoryUserStorage",
    "MongoClient",
    "MongoTransactionStorage",
    "MongoUserStorage",
    "PersistenceError",
    "StorageConnectionError",
    "TransactionStorageInterface",
    "UserStorageInterface",
]
