"""
Data Models Package

This package contains all Pydantic models used in Finance Tracker.
All data flowing through the system must conform to these schemas.
"""

from finance_tracker.models.transaction import (
    CategoryTotal,
    MonthlySummary,
    MonthlyTotals,
    Transaction,
    TransactionForm,
    TransactionType,
    TransactionView,
)
from finance_tracker.models.user import (
    CredentialsForm,
    SessionData,
    User,
)
from finance_tracker.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Transaction models
    "CategoryTotal",
    "MonthlySummary",
    "MonthlyTotals",
    "Transaction",
    "TransactionForm",
    "TransactionType",
    "TransactionView",
    # User models
    "CredentialsForm",
    "SessionData",
    "User",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
