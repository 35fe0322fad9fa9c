"""
Transaction Store

Accepts transaction submissions and answers date-range lookups.
Transactions are append-only: there is no edit or delete.
"""

from datetime import date, datetime
from typing import Optional, Union

from finance_tracker.audit import AuditLogger
from finance_tracker.models.transaction import Transaction
from finance_tracker.services.storage import TransactionStorageInterface
from finance_tracker.validation import TransactionValidator


class TransactionStore:

    def __init__(
        self,
        storage: TransactionStorageInterface,
        validator: Optional[TransactionValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._storage = storage
        self._validator = validator or TransactionValidator()
        self._audit_logger = audit_logger

    async def create(
        self,
        user_id: str,
        transaction_type: Optional[str],
        amount: Optional[Union[str, float]],
        category: Optional[str],
        note: Optional[str],
        transaction_date: Optional[Union[str, date, datetime]],
    ) -> str:
        """
        Validate and persist one transaction.

        Returns:
            The new transaction's id

        Raises:
            ValidationError: Malformed type, amount, category or date
            PersistenceError: If the write fails
        """
        transaction = self._validator.validate(
            user_id=user_id,
            transaction_type=transaction_type,
            amount=amount,
            category=category,
            note=note,
            transaction_date=transaction_date,
        )
        saved = await self._storage.save_transaction(transaction)

        if self._audit_logger:
            self._audit_logger.log_transaction_created(
                transaction_id=saved.id,
                user_id=user_id,
                transaction_type=saved.type.value,
                amount=saved.amount,
                category=saved.category,
            )

        return saved.id

    async def find_by_user_and_range(
        self,
        user_id: str,
        start: datetime,
        end: datetime,
    ) -> list[Transaction]:
        """A user's transactions with start <= date <= end, newest first."""
        return await self._storage.list_transactions(
            user_id=user_id,
            date_from=start,
            date_to=end,
        )
