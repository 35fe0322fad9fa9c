"""
Abstract Storage Interface

We define an abstract interface for each collection. This allows us to:
1. Run on MongoDB in production
2. Use in-memory storage for tests and local development
3. Keep credential, transaction and aggregation logic decoupled from the
   storage implementation

Aggregations are part of the interface because the document database
evaluates them natively; the in-memory backend reproduces them in Python.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from finance_tracker.models.transaction import (
    CategoryTotal,
    MonthlyTotals,
    Transaction,
    TransactionType,
)
from finance_tracker.models.user import User


class UserStorageInterface(ABC):
    """Abstract interface for user (credential) storage."""

    @abstractmethod
    async def save_user(self, user: User) -> User:
        """
        Persist a new user.

        Returns:
            The user with its storage-assigned id

        Raises:
            PersistenceError: If the write fails
        """
        pass

    @abstractmethod
    async def get_user_by_id(self, user_id: str) -> Optional[User]:
        """Return the user with this id, or None."""
        pass

    @abstractmethod
    async def find_user_by_email(self, email: str) -> Optional[User]:
        """
        Return the first user registered with exactly this email, or None.

        Emails are not unique at the storage level; the earliest
        registration wins.
        """
        pass


class TransactionStorageInterface(ABC):
    """
    Abstract interface for transaction storage operations.

    Transactions are append-only - there is no update or delete.
    """

    @abstractmethod
    async def save_transaction(self, transaction: Transaction) -> Transaction:
        """
        Persist a new transaction.

        Returns:
            The transaction with its storage-assigned id

        Raises:
            PersistenceError: If the write fails
        """
        pass

    @abstractmethod
    async def list_transactions(
        self,
        user_id: str,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None,
        transaction_type: Optional[TransactionType] = None,
    ) -> list[Transaction]:
        """
        List a user's transactions.

        Args:
            user_id: Owner of the transactions
            date_from: Only transactions on or after this instant
            date_to: Only transactions on or before this instant
            transaction_type: Only income or only expenses

        Returns:
            Matching transactions, newest first. Empty if none match.
        """
        pass

    @abstractmethod
    async def sum_by_category(
        self,
        user_id: str,
        date_from: datetime,
        date_before: datetime,
        transaction_type: TransactionType = TransactionType.EXPENSE,
    ) -> list[CategoryTotal]:
        """
        Sum amounts per category for transactions in [date_from, date_before).

        Note the EXCLUSIVE upper bound.
        """
        pass

    @abstractmethod
    async def totals_by_month(self, user_id: str) -> list[MonthlyTotals]:
        """
        Sum income and expenses per calendar month (UTC) over all of a
        user's transactions.

        Returns:
            One row per month with at least one transaction, newest first
        """
        pass


class PersistenceError(Exception):
    """Base exception for storage operations."""
    pass


class StorageConnectionError(PersistenceError):
    """Could not connect to storage backend."""
    pass
