"""
Audit Models for Finance Tracker

Every significant action in the system produces one structured log line.
This provides:
1. Traceability of signups, logins and submissions
2. Debugging information when things go wrong

Audit events never carry passwords or password hashes.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Credentials
    USER_REGISTERED = "user_registered"
    REGISTRATION_FAILED = "registration_failed"

    # Sessions
    LOGIN_SUCCEEDED = "login_succeeded"
    LOGIN_FAILED = "login_failed"
    LOGOUT = "logout"
    LOGOUT_FAILED = "logout_failed"
    UNAUTHORIZED_ACCESS = "unauthorized_access"

    # Transactions
    TRANSACTION_CREATED = "transaction_created"
    TRANSACTION_REJECTED = "transaction_rejected"

    # Aggregations
    QUERY_EXECUTED = "query_executed"

    # System events
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """
    A single audit event.

    Every significant action creates one of these.
    """

    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)"
    )
    event_type: AuditEventType
    severity: AuditSeverity = Field(default=AuditSeverity.INFO)

    # What entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'user', 'transaction', 'session')"
    )
    entity_id: Optional[str] = None

    description: str = Field(..., max_length=500)
    details: dict[str, Any] = Field(default_factory=dict)
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """Convert to a dictionary suitable for structured logging."""
        return {
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.user_registered(user_id, email)
        event = AuditEventBuilder.login_failed(email)
    """

    @staticmethod
    def user_registered(user_id: str, email: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.USER_REGISTERED,
            entity_type="user",
            entity_id=user_id,
            description=f"User registered: {email}",
            details={"email": email},
        )

    @staticmethod
    def registration_failed(email: Optional[str], reason: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.REGISTRATION_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="user",
            description="User registration failed",
            details={"email": email},
            error_message=reason,
        )

    @staticmethod
    def login_succeeded(user_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LOGIN_SUCCEEDED,
            entity_type="session",
            entity_id=user_id,
            description="User logged in",
        )

    @staticmethod
    def login_failed(email: Optional[str]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LOGIN_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="session",
            description="Invalid email or password",
            details={"email": email},
        )

    @staticmethod
    def logout(user_id: Optional[str]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LOGOUT,
            entity_type="session",
            entity_id=user_id,
            description="Session destroyed",
        )

    @staticmethod
    def logout_failed(error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LOGOUT_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="session",
            description="Error destroying session",
            error_message=error_message,
        )

    @staticmethod
    def unauthorized_access(path: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.UNAUTHORIZED_ACCESS,
            severity=AuditSeverity.WARNING,
            description=f"Unauthenticated request to {path}",
            details={"path": path},
        )

    @staticmethod
    def transaction_created(
        transaction_id: str,
        user_id: str,
        transaction_type: str,
        amount: float,
        category: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_CREATED,
            entity_type="transaction",
            entity_id=transaction_id,
            description=f"Transaction added: {transaction_type} {amount:.2f} ({category})",
            details={
                "user_id": user_id,
                "type": transaction_type,
                "amount": amount,
                "category": category,
            },
        )

    @staticmethod
    def transaction_rejected(user_id: str, reason: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_REJECTED,
            severity=AuditSeverity.WARNING,
            entity_type="transaction",
            description="Transaction submission rejected",
            details={"user_id": user_id},
            error_message=reason,
        )

    @staticmethod
    def query_executed(
        query_name: str,
        user_id: str,
        result_count: int,
        details: Optional[dict] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.QUERY_EXECUTED,
            severity=AuditSeverity.DEBUG,
            entity_type="query",
            description=f"Query executed: {query_name} returned {result_count} rows",
            details={
                "query": query_name,
                "user_id": user_id,
                "result_count": result_count,
                **(details or {}),
            },
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
        )
