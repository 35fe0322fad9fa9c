"""
Shared fixtures.

Everything runs against the in-memory backends with a frozen clock
(2024-03-15 12:00 UTC), so "the current month" is March 2024.
bcrypt runs at its minimum cost factor to keep the suite fast.
"""

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from finance_tracker.audit import AuditLogger
from finance_tracker.credentials import CredentialStore
from finance_tracker.orchestrator import AppComponents
from finance_tracker.queries import AggregationEngine
from finance_tracker.services.sessions import InMemorySessionStore
from finance_tracker.services.storage import (
    InMemoryTransactionStorage,
    InMemoryUserStorage,
)
from finance_tracker.transactions import TransactionStore
from finance_tracker.web import create_app


FIXED_NOW = datetime(2024, 3, 15, 12, 0, tzinfo=timezone.utc)


class FrozenClock:
    """Callable clock that tests can move forward."""

    def __init__(self, now: datetime = FIXED_NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def clock():
    return FrozenClock()


@pytest.fixture
def user_storage():
    return InMemoryUserStorage()


@pytest.fixture
def transaction_storage():
    return InMemoryTransactionStorage()


@pytest.fixture
def credential_store(user_storage):
    return CredentialStore(user_storage, rounds=4)


@pytest.fixture
def transaction_store(transaction_storage):
    return TransactionStore(transaction_storage)


@pytest.fixture
def aggregation_engine(transaction_storage, transaction_store, clock):
    return AggregationEngine(
        storage=transaction_storage,
        transactions=transaction_store,
        clock=clock,
    )


def build_components(
    clock,
    session_store=None,
    transaction_storage=None,
    **kwargs,
) -> AppComponents:
    return AppComponents(
        user_storage=InMemoryUserStorage(),
        transaction_storage=transaction_storage or InMemoryTransactionStorage(),
        session_store=session_store or InMemorySessionStore(clock=clock),
        audit_logger=AuditLogger(),
        password_hash_rounds=4,
        clock=clock,
        **kwargs,
    )


@pytest.fixture
def components(clock):
    return build_components(clock)


@pytest.fixture
def client(components):
    app = create_app(components=components)
    with TestClient(app, follow_redirects=False) as test_client:
        yield test_client


def sign_up_and_log_in(client, email="a@x.com", password="pw"):
    """Register a user and leave the client holding their session cookie."""
    response = client.post("/signup", data={"email": email, "password": password})
    assert response.status_code == 302
    response = client.post("/login", data={"email": email, "password": password})
    assert response.status_code == 302
    return response


@pytest.fixture
def make_components(clock):
    def _make(**kwargs) -> AppComponents:
        return build_components(clock, **kwargs)
    return _make


@pytest.fixture
def log_in():
    return sign_up_and_log_in
