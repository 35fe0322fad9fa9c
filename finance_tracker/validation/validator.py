"""
Input Validation

Everything the browser submits is checked here before it reaches storage:
- Transaction submissions (type, amount, category, note, date)
- Signup/login credentials
- The optional `month` query parameter of the chart endpoint

Validation never silently fixes malformed input. The one normalization
is intentional: amounts are rounded to cents and dates to their UTC
calendar day.
"""

from datetime import date, datetime, timezone
from typing import Optional, Union

from pydantic import ValidationError as PydanticValidationError

from finance_tracker.models.transaction import (
    Transaction,
    TransactionType,
    round_amount,
    to_utc_midnight,
)
from finance_tracker.models.user import MAX_EMAIL_LENGTH


class ValidationError(Exception):
    """Malformed or missing input."""

    def __init__(self, message: str, field: Optional[str] = None):
        self.field = field
        super().__init__(message)


def parse_transaction_date(value: Optional[Union[str, date, datetime]]) -> datetime:
    """
    Parse a submitted transaction date.

    Accepts YYYY-MM-DD or an ISO-8601 datetime. Datetimes with an offset
    are converted to UTC before the calendar day is taken; naive values
    are read as UTC.
    """
    if isinstance(value, (date, datetime)):
        return to_utc_midnight(value)
    if value is None or not str(value).strip():
        raise ValidationError("Date is required", field="date")

    text = str(value).strip()
    # fromisoformat on older interpreters rejects a trailing Z
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        if len(text) == 10:
            return to_utc_midnight(date.fromisoformat(text))
        return to_utc_midnight(datetime.fromisoformat(text))
    except ValueError:
        raise ValidationError(f"Invalid date: {value!r}", field="date")


def parse_month(value: Optional[str], now: datetime) -> tuple[int, int]:
    """
    Parse a YYYY-MM month selector.

    Returns:
        (year, month); the month of `now` (in UTC) when value is empty
    """
    if value is None or not value.strip():
        now = now.astimezone(timezone.utc) if now.tzinfo else now
        return now.year, now.month

    try:
        parsed = datetime.strptime(value.strip(), "%Y-%m")
    except ValueError:
        raise ValidationError(f"Invalid month: {value!r}", field="month")
    return parsed.year, parsed.month


def validate_credentials(
    email: Optional[str],
    password: Optional[str],
) -> tuple[str, str]:
    """
    Check that both email and password were supplied.

    The email is stripped; the password is taken verbatim.
    """
    email = (email or "").strip()
    if not email:
        raise ValidationError("Email is required", field="email")
    if len(email) > MAX_EMAIL_LENGTH:
        raise ValidationError(
            f"Email must be at most {MAX_EMAIL_LENGTH} characters",
            field="email",
        )
    if not password:
        raise ValidationError("Password is required", field="password")
    return email, password


class TransactionValidator:
    """
    Turns a raw submission into a Transaction ready to persist.

    Any problem raises ValidationError naming the offending field. The
    HTTP layer deliberately collapses these into one generic message.
    """

    def validate(
        self,
        user_id: str,
        transaction_type: Optional[str],
        amount: Optional[Union[str, float]],
        category: Optional[str],
        note: Optional[str],
        transaction_date: Optional[Union[str, date, datetime]],
    ) -> Transaction:
        parsed_type = self._validate_type(transaction_type)
        parsed_amount = self._validate_amount(amount)

        if category is None or not str(category).strip():
            raise ValidationError("Category is required", field="category")

        parsed_date = parse_transaction_date(transaction_date)

        try:
            return Transaction(
                user_id=user_id,
                type=parsed_type,
                amount=parsed_amount,
                category=category,
                note=note,
                date=parsed_date,
            )
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid transaction: {e.errors()[0]['msg']}")

    def _validate_type(self, value: Optional[str]) -> TransactionType:
        try:
            return TransactionType((value or "").strip().lower())
        except ValueError:
            raise ValidationError(
                f"Type must be 'income' or 'expense', got {value!r}",
                field="type",
            )

    def _validate_amount(self, value: Optional[Union[str, float]]) -> float:
        if value is None or (isinstance(value, str) and not value.strip()):
            raise ValidationError("Amount is required", field="amount")
        try:
            return round_amount(value)
        except ValueError as e:
            raise ValidationError(str(e), field="amount")
