"""
Audit Logger

Every significant action in the system is logged as one structured line.
This provides:
1. Traceability of signups, logins and submissions
2. Debugging capability when a request fails

Events go to the local structured log only; nothing is persisted.
"""

import logging
import sys
from typing import Optional

import structlog

from finance_tracker.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: str = "INFO") -> None:
    """Route stdlib logging (and therefore structlog) to stdout at `level`."""
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level.upper(), logging.INFO),
    )


class AuditLogger:
    """Central audit logging service."""

    def __init__(self, logger_name: str = "finance_tracker.audit"):
        self._logger = structlog.get_logger(logger_name)

    def log(self, event: AuditEvent) -> None:
        """Log an audit event at the level matching its severity."""
        log_dict = event.to_log_dict()

        if event.severity == AuditSeverity.ERROR:
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        elif event.severity == AuditSeverity.DEBUG:
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

    def log_user_registered(self, user_id: str, email: str) -> None:
        self.log(AuditEventBuilder.user_registered(user_id=user_id, email=email))

    def log_registration_failed(self, email: Optional[str], reason: str) -> None:
        self.log(AuditEventBuilder.registration_failed(email=email, reason=reason))

    def log_login_succeeded(self, user_id: str) -> None:
        self.log(AuditEventBuilder.login_succeeded(user_id=user_id))

    def log_login_failed(self, email: Optional[str]) -> None:
        self.log(AuditEventBuilder.login_failed(email=email))

    def log_logout(self, user_id: Optional[str]) -> None:
        self.log(AuditEventBuilder.logout(user_id=user_id))

    def log_logout_failed(self, error_message: str) -> None:
        self.log(AuditEventBuilder.logout_failed(error_message=error_message))

    def log_unauthorized(self, path: str) -> None:
        self.log(AuditEventBuilder.unauthorized_access(path=path))

    def log_transaction_created(
        self,
        transaction_id: str,
        user_id: str,
        transaction_type: str,
        amount: float,
        category: str,
    ) -> None:
        self.log(AuditEventBuilder.transaction_created(
            transaction_id=transaction_id,
            user_id=user_id,
            transaction_type=transaction_type,
            amount=amount,
            category=category,
        ))

    def log_transaction_rejected(self, user_id: str, reason: str) -> None:
        self.log(AuditEventBuilder.transaction_rejected(user_id=user_id, reason=reason))

    def log_query_executed(
        self,
        query_name: str,
        user_id: str,
        result_count: int,
        details: Optional[dict] = None,
    ) -> None:
        self.log(AuditEventBuilder.query_executed(
            query_name=query_name,
            user_id=user_id,
            result_count=result_count,
            details=details,
        ))

    def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
    ) -> None:
        self.log(AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
        ))
