"""Transaction store package."""

from finance_tracker.transactions.store import TransactionStore

__all__ = ["TransactionStore"]
