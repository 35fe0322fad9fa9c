"""
Aggregation Engine

Read-side queries behind the overview and chart pages:
- monthly_summary: income/expense/net totals for one month plus its rows
- category_breakdown: expenses per category for one month
- all_months_summary: income/expense totals for every month with activity

MONTH BOUNDARIES ARE NOT THE SAME FOR EVERY QUERY:
- monthly_summary includes the whole last day of the month
  [first day 00:00, last day 23:59:59.999]
- category_breakdown stops BEFORE the last day
  [first day 00:00, last day 00:00)
so an expense dated on the last calendar day shows up in the overview
but not in the category chart. Tests pin both behaviours.
"""

import calendar
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Optional

from finance_tracker.audit import AuditLogger
from finance_tracker.models.transaction import (
    CategoryTotal,
    MonthlySummary,
    MonthlyTotals,
    TransactionType,
    TransactionView,
)
from finance_tracker.services.storage import TransactionStorageInterface
from finance_tracker.transactions import TransactionStore
from finance_tracker.validation import parse_month


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class MonthWindow:
    """Calendar month in UTC."""

    start: datetime
    last_day: datetime

    @classmethod
    def for_month(cls, year: int, month: int) -> "MonthWindow":
        days = calendar.monthrange(year, month)[1]
        return cls(
            start=datetime(year, month, 1, tzinfo=timezone.utc),
            last_day=datetime(year, month, days, tzinfo=timezone.utc),
        )

    @property
    def end_inclusive(self) -> datetime:
        """Last representable instant of the month (millisecond precision)."""
        return self.last_day.replace(hour=23, minute=59, second=59, microsecond=999000)

    @property
    def label(self) -> str:
        return self.start.strftime("%Y-%m")


class AggregationEngine:
    """
    Computes summaries over one user's transactions.

    The clock is injectable so "current month" defaults are testable.
    """

    def __init__(
        self,
        storage: TransactionStorageInterface,
        transactions: Optional[TransactionStore] = None,
        audit_logger: Optional[AuditLogger] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._storage = storage
        self._transactions = transactions or TransactionStore(storage)
        self._audit_logger = audit_logger
        self._clock = clock

    def month_window(self, month: Optional[str] = None) -> MonthWindow:
        """Window for a YYYY-MM month, defaulting to the current UTC month."""
        year, month_number = parse_month(month, self._clock())
        return MonthWindow.for_month(year, month_number)

    async def monthly_summary(
        self,
        user_id: str,
        month: Optional[str] = None,
    ) -> MonthlySummary:
        """
        Totals for a month, inclusive of its last day.

        net_total is always total_income - total_expenses; all three are
        rendered with exactly two decimals.
        """
        window = self.month_window(month)
        transactions = await self._transactions.find_by_user_and_range(
            user_id, window.start, window.end_inclusive
        )

        total_income = 0.0
        total_expenses = 0.0
        for transaction in transactions:
            if transaction.type == TransactionType.INCOME:
                total_income += transaction.amount
            elif transaction.type == TransactionType.EXPENSE:
                total_expenses += transaction.amount
        net_total = total_income - total_expenses

        self._log_query("monthly_summary", user_id, len(transactions), window.label)

        return MonthlySummary(
            total_income=f"{total_income:.2f}",
            total_expenses=f"{total_expenses:.2f}",
            net_total=f"{net_total:.2f}",
            transactions=[TransactionView.from_transaction(t) for t in transactions],
        )

    async def category_breakdown(
        self,
        user_id: str,
        month: Optional[str] = None,
    ) -> list[CategoryTotal]:
        """Expense sums per category, EXCLUDING the month's last day."""
        window = self.month_window(month)
        totals = await self._storage.sum_by_category(
            user_id=user_id,
            date_from=window.start,
            date_before=window.last_day,
            transaction_type=TransactionType.EXPENSE,
        )

        self._log_query("category_breakdown", user_id, len(totals), window.label)
        return totals

    async def all_months_summary(self, user_id: str) -> list[MonthlyTotals]:
        """Income and expense totals for every month with activity, newest first."""
        totals = await self._storage.totals_by_month(user_id)
        self._log_query("all_months_summary", user_id, len(totals))
        return totals

    def _log_query(
        self,
        query_name: str,
        user_id: str,
        result_count: int,
        month: Optional[str] = None,
    ) -> None:
        if self._audit_logger:
            self._audit_logger.log_query_executed(
                query_name=query_name,
                user_id=user_id,
                result_count=result_count,
                details={"month": month} if month else None,
            )
