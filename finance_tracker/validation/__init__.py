"""Input validation package."""

from finance_tracker.validation.validator import (
    TransactionValidator,
    ValidationError,
    parse_month,
    parse_transaction_date,
    validate_credentials,
)

__all__ = [
    "TransactionValidator",
    "ValidationError",
    "parse_month",
    "parse_transaction_date",
    "validate_credentials",
]
