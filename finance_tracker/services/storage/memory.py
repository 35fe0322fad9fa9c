"""
In-Memory Storage Implementation

Keeps users and transactions in process memory. Used by the test suite and
for local development without a MongoDB server (STORAGE_BACKEND=memory).

Aggregations mirror the MongoDB pipelines in plain Python so both backends
answer the same queries the same way. Nothing survives a restart.
"""

from collections import OrderedDict
from datetime import datetime
from typing import Optional
from uuid import uuid4

from finance_tracker.models.transaction import (
    CategoryTotal,
    MonthlyTotals,
    Transaction,
    TransactionType,
)
from finance_tracker.models.user import User
from finance_tracker.services.storage.interface import (
    TransactionStorageInterface,
    UserStorageInterface,
)


def _new_id() -> str:
    return uuid4().hex


class InMemoryUserStorage(UserStorageInterface):
    """Users kept in insertion order, so the first registration wins lookups."""

    def __init__(self):
        self._users: "OrderedDict[str, User]" = OrderedDict()

    async def save_user(self, user: User) -> User:
        saved = user.model_copy(update={"id": _new_id()})
        self._users[saved.id] = saved
        return saved

    async def get_user_by_id(self, user_id: str) -> Optional[User]:
        return self._users.get(user_id)

    async def find_user_by_email(self, email: str) -> Optional[User]:
        for user in self._users.values():
            if user.email == email:
                return user
        return None


class InMemoryTransactionStorage(TransactionStorageInterface):
    """Append-only list of transactions."""

    def __init__(self):
        self._transactions: list[Transaction] = []

    async def save_transaction(self, transaction: Transaction) -> Transaction:
        saved = transaction.model_copy(update={"id": _new_id()})
        self._transactions.append(saved)
        return saved

    async def list_transactions(
        self,
        user_id: str,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None,
        transaction_type: Optional[TransactionType] = None,
    ) -> list[Transaction]:
        matches = []
        for transaction in self._transactions:
            if transaction.user_id != user_id:
                continue
            if date_from and transaction.date < date_from:
                continue
            if date_to and transaction.date > date_to:
                continue
            if transaction_type and transaction.type != transaction_type:
                continue
            matches.append(transaction)

        # Newest first; stable for equal dates
        matches.sort(key=lambda t: t.date, reverse=True)
        return matches

    async def sum_by_category(
        self,
        user_id: str,
        date_from: datetime,
        date_before: datetime,
        transaction_type: TransactionType = TransactionType.EXPENSE,
    ) -> list[CategoryTotal]:
        totals: "OrderedDict[str, float]" = OrderedDict()
        for transaction in self._transactions:
            if transaction.user_id != user_id or transaction.type != transaction_type:
                continue
            if not (date_from <= transaction.date < date_before):
                continue
            totals[transaction.category] = (
                totals.get(transaction.category, 0.0) + float(transaction.amount)
            )

        return [
            CategoryTotal(category=category, amount=amount)
            for category, amount in totals.items()
        ]

    async def totals_by_month(self, user_id: str) -> list[MonthlyTotals]:
        groups: dict[str, MonthlyTotals] = {}
        for transaction in self._transactions:
            if transaction.user_id != user_id:
                continue
            key = transaction.date.strftime("%Y-%m")
            row = groups.setdefault(key, MonthlyTotals(month=key))
            if transaction.type == TransactionType.INCOME:
                row.total_income += transaction.amount
            else:
                row.total_expenses += transaction.amount

        return [groups[key] for key in sorted(groups, reverse=True)]
