"""
Storage Services Package

Provides abstract interfaces and concrete implementations for data storage.
MongoDB is the production backend; the in-memory backend serves tests and
local development.
"""

from finance_tracker.services.storage.interface import (
    PersistenceError,
    StorageConnectionError,
    TransactionStorageInterface,
    UserStorageInterface,
)
from finance_tracker.services.storage.memory import (
    InMemoryTransactionStorage,
    InMemoryUserStorage,
)
from finance_tracker.services.storage.mongo import (
    MongoClient,
    MongoTransactionStorage,
    MongoUserStorage,
)

__all__ = [
    # Interfaces
    "TransactionStorageInterface",
    "UserStorageInterface",
    # Exceptions
    "PersistenceError",
    "StorageConnectionError",
    # In-memory implementation
    "InMemoryTransactionStorage",
    "InMemoryUserStorage",
    # MongoDB implementation
    "MongoClient",
    "MongoTransactionStorage",
    "MongoUserStorage",
]
