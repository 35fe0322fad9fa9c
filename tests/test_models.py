"""
Tests for Finance Tracker models

Test strategy:
1. Unit tests for the pydantic models (rounding, date normalization, aliases)
2. Audit event construction
"""

import pytest
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

from finance_tracker.models import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
    CategoryTotal,
    MonthlySummary,
    MonthlyTotals,
    SessionData,
    Transaction,
    TransactionForm,
    TransactionType,
    TransactionView,
    User,
)
from finance_tracker.models.transaction import round_amount, to_utc_midnight


class TestAmountRounding:
    """Tests for rounding amounts to cents."""

    @pytest.mark.parametrize("raw,expected", [
        ("12.345", 12.35),
        ("12.344", 12.34),
        ("1.005", 1.01),
        (7, 7.0),
        ("-3.335", -3.34),
        (Decimal("0.125"), 0.13),
    ])
    def test_round_half_up(self, raw, expected):
        assert round_amount(raw) == expected

    @pytest.mark.parametrize("raw", ["abc", "", "NaN", "Infinity", True, "1e30", "9" * 29])
    def test_rejects_non_numbers(self, raw):
        with pytest.raises(ValueError):
            round_amount(raw)


class TestTransactionModels:
    """Tests for Transaction and its views."""

    def test_transaction_rounds_amount_and_strips(self):
        transaction = Transaction(
            user_id="u1",
            type=TransactionType.EXPENSE,
            amount="12.345",
            category="  Food  ",
            date=date(2024, 3, 10),
        )
        assert transaction.amount == 12.35
        assert transaction.category == "Food"
        assert transaction.date == datetime(2024, 3, 10, tzinfo=timezone.utc)

    def test_blank_note_becomes_none(self):
        transaction = Transaction(
            user_id="u1",
            type="income",
            amount=5,
            category="Salary",
            note="   ",
            date=date(2024, 3, 1),
        )
        assert transaction.note is None

    def test_date_normalized_to_utc_midnight(self):
        local = datetime(2024, 3, 31, 23, 30, tzinfo=timezone(timedelta(hours=-5)))
        assert to_utc_midnight(local) == datetime(2024, 4, 1, tzinfo=timezone.utc)

    def test_string_date_normalized(self):
        transaction = Transaction(
            user_id="u1",
            type="expense",
            amount=1,
            category="Misc",
            date="2024-03-10T18:45:00Z",
        )
        assert transaction.date == datetime(2024, 3, 10, tzinfo=timezone.utc)

    def test_empty_category_rejected(self):
        with pytest.raises(ValueError):
            Transaction(
                user_id="u1",
                type="expense",
                amount=1,
                category="",
                date=date(2024, 3, 10),
            )

    def test_transaction_form_coerces_numbers(self):
        form = TransactionForm.model_validate({"amount": 12.5, "unknown": "x"})
        assert form.amount == "12.5"
        assert form.type is None

    def test_transaction_view_formatting(self):
        transaction = Transaction(
            user_id="u1",
            type="expense",
            amount=20,
            category="Food",
            note="lunch",
            date=date(2024, 3, 5),
        )
        view = TransactionView.from_transaction(transaction)
        assert view.date == "2024-03-05"
        assert view.amount == "20.00"
        assert view.note == "lunch"


class TestSummaryModels:
    """Tests for the JSON shapes returned by the summary endpoints."""

    def test_monthly_summary_serializes_camel_case(self):
        summary = MonthlySummary(
            total_income="100.00",
            total_expenses="20.00",
            net_total="80.00",
        )
        dumped = summary.model_dump(by_alias=True)
        assert dumped == {
            "totalIncome": "100.00",
            "totalExpenses": "20.00",
            "netTotal": "80.00",
            "transactions": [],
        }

    def test_monthly_totals_reads_aggregation_rows(self):
        row = {"_id": "2024-03", "totalIncome": 100, "totalExpenses": 20.5}
        totals = MonthlyTotals.model_validate(row)
        assert totals.month == "2024-03"
        assert totals.total_income == 100.0
        assert totals.model_dump(by_alias=True) == {
            "_id": "2024-03",
            "totalIncome": 100.0,
            "totalExpenses": 20.5,
        }

    def test_category_total(self):
        total = CategoryTotal(category="Food", amount=20)
        assert total.amount == 20.0


class TestUserModels:
    """Tests for users and session state."""

    def test_password_hash_not_in_repr(self):
        user = User(id="u1", email="a@x.com", password_hash="$2b$10$secret")
        assert "secret" not in repr(user)

    def test_session_expiry(self):
        now = datetime(2024, 3, 15, tzinfo=timezone.utc)
        session = SessionData(
            token="t",
            user_id="u1",
            created_at=now,
            expires_at=now + timedelta(hours=1),
        )
        assert not session.is_expired(now)
        assert session.is_expired(now + timedelta(hours=1))


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        """Test AuditEvent model creation."""
        event = AuditEvent(
            event_type=AuditEventType.LOGOUT,
            description="User logged out",
        )
        assert event.event_type == AuditEventType.LOGOUT
        assert event.severity == AuditSeverity.INFO

    def test_audit_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        event = AuditEvent(
            event_type=AuditEventType.TRANSACTION_CREATED,
            description="Transaction added",
            details={"category": "Food", "amount": 20.0},
        )
        log_dict = event.to_log_dict()
        assert log_dict["event_type"] == "transaction_created"
        assert log_dict["details"]["category"] == "Food"
        assert "timestamp" in log_dict

    def test_builder_login_failed_is_warning(self):
        event = AuditEventBuilder.login_failed("a@x.com")
        assert event.event_type == AuditEventType.LOGIN_FAILED
        assert event.severity == AuditSeverity.WARNING
        assert event.details["email"] == "a@x.com"

    def test_builder_transaction_created(self):
        event = AuditEventBuilder.transaction_created(
            transaction_id="t1",
            user_id="u1",
            transaction_type="expense",
            amount=20.0,
            category="Food",
        )
        assert event.entity_type == "transaction"
        assert event.entity_id == "t1"
        assert "20.00" in event.description

    def test_builder_query_executed_is_debug(self):
        event = AuditEventBuilder.query_executed(
            "monthly_summary", "u1", 3, {"month": "2024-03"}
        )
        assert event.severity == AuditSeverity.DEBUG
        assert event.details["month"] == "2024-03"
        assert event.details["result_count"] == 3
