"""
Transaction Models for Finance Tracker

These models define the schemas for every transaction flowing through the
system:
1. The raw submission coming from the browser (TransactionForm)
2. The persisted record (Transaction)
3. The JSON views returned by the summary endpoints

Amounts are floats once stored. Rounding to cents happens on the decimal
representation of the submitted value so that "12.345" becomes 12.35
regardless of binary floating point quirks.
"""

from datetime import date, datetime, timezone
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


CENT = Decimal("0.01")


class TransactionType(str, Enum):
    """Direction of a transaction."""
    INCOME = "income"
    EXPENSE = "expense"


def round_amount(value: Union[str, int, float, Decimal]) -> float:
    """
    Parse an amount and round it to 2 fractional digits (half-up).

    Raises ValueError for anything that is not a finite number.
    """
    if isinstance(value, bool):
        raise ValueError("Amount must be a number")
    try:
        parsed = Decimal(str(value).strip())
    except InvalidOperation:
        raise ValueError(f"Amount is not a number: {value!r}")
    if not parsed.is_finite():
        raise ValueError(f"Amount must be finite: {value!r}")
    try:
        return float(parsed.quantize(CENT, rounding=ROUND_HALF_UP))
    except InvalidOperation:
        # More significant digits than the decimal context can hold
        raise ValueError(f"Amount is too large: {value!r}")


def to_utc_midnight(value: Union[date, datetime]) -> datetime:
    """Normalize a date or datetime to midnight UTC of its (UTC) calendar day."""
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        value = value.astimezone(timezone.utc)
        return value.replace(hour=0, minute=0, second=0, microsecond=0)
    return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)


class Transaction(BaseModel):
    """
    A persisted income or expense record owned by one user.

    Transactions are never updated or deleted once written. The owning
    user is referenced by id only; a dangling reference is tolerated.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    id: Optional[str] = Field(
        default=None,
        description="Storage-assigned identifier"
    )
    user_id: str = Field(
        ...,
        min_length=1,
        description="Id of the owning user"
    )
    type: TransactionType
    amount: float = Field(
        ...,
        description="Amount rounded to cents at write time"
    )
    category: str = Field(
        ...,
        min_length=1,
        max_length=100,
    )
    note: Optional[str] = Field(
        default=None,
        max_length=500,
    )
    date: datetime = Field(
        ...,
        description="Calendar date of the transaction, stored as midnight UTC"
    )

    @field_validator('amount', mode='before')
    @classmethod
    def round_to_cents(cls, v):
        return round_amount(v)

    @field_validator('note', mode='before')
    @classmethod
    def blank_note_is_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator('date', mode='before')
    @classmethod
    def normalize_date(cls, v):
        if isinstance(v, (date, datetime)):
            return to_utc_midnight(v)
        return v

    @field_validator('date')
    @classmethod
    def ensure_utc_midnight(cls, v: datetime) -> datetime:
        # Strings parsed by pydantic land here without the before-hook
        return to_utc_midnight(v)


class TransactionForm(BaseModel):
    """
    Raw transaction submission as posted by the add-transaction form.

    Everything is optional here; the transaction validator decides what
    is acceptable and reports a single generic error.
    """
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    type: Optional[str] = None
    amount: Optional[str] = None
    category: Optional[str] = None
    note: Optional[str] = None
    date: Optional[str] = None


# =============================================================================
# RESPONSE VIEWS
# =============================================================================

class TransactionView(BaseModel):
    """A transaction as rendered in the overview table."""

    date: str = Field(..., description="YYYY-MM-DD")
    type: TransactionType
    amount: str = Field(..., description="Amount with exactly 2 decimals")
    category: str
    note: Optional[str] = None

    @classmethod
    def from_transaction(cls, transaction: Transaction) -> "TransactionView":
        return cls(
            date=transaction.date.strftime("%Y-%m-%d"),
            type=transaction.type,
            amount=f"{transaction.amount:.2f}",
            category=transaction.category,
            note=transaction.note,
        )


class MonthlySummary(BaseModel):
    """Totals for one calendar month plus the transactions behind them."""
    model_config = ConfigDict(populate_by_name=True)

    total_income: str = Field(..., alias="totalIncome")
    total_expenses: str = Field(..., alias="totalExpenses")
    net_total: str = Field(..., alias="netTotal")
    transactions: list[TransactionView] = Field(default_factory=list)


class CategoryTotal(BaseModel):
    """Sum of expenses for one category."""

    category: str
    amount: float


class MonthlyTotals(BaseModel):
    """Income and expense sums for one calendar month (YYYY-MM)."""
    model_config = ConfigDict(populate_by_name=True)

    month: str = Field(..., alias="_id")
    total_income: float = Field(default=0.0, alias="totalIncome")
    total_expenses: float = Field(default=0.0, alias="totalExpenses")
