"""
Component Wiring for Finance Tracker

Builds every component from settings and hands them to the web layer:
- storage backends (MongoDB or in-memory)
- session store (MongoDB or in-memory)
- credential store, session manager, transaction store, aggregation engine
- audit logger

Nothing here is global: the web app receives one AppComponents instance
and request handlers reach components through it.
"""

from datetime import datetime
from typing import Callable, Optional

from finance_tracker.audit import AuditLogger
from finance_tracker.config import Settings, get_settings
from finance_tracker.credentials import CredentialStore, SessionManager
from finance_tracker.queries import AggregationEngine
from finance_tracker.queries.aggregation import utc_now
from finance_tracker.services.sessions import (
    InMemorySessionStore,
    MongoSessionStore,
    SessionStoreInterface,
)
from finance_tracker.services.storage import (
    InMemoryTransactionStorage,
    InMemoryUserStorage,
    MongoClient,
    MongoTransactionStorage,
    MongoUserStorage,
    TransactionStorageInterface,
    UserStorageInterface,
)
from finance_tracker.transactions import TransactionStore


class AppComponents:
    """Everything a request handler may need, built once per application."""

    def __init__(
        self,
        user_storage: UserStorageInterface,
        transaction_storage: TransactionStorageInterface,
        session_store: SessionStoreInterface,
        audit_logger: AuditLogger,
        password_hash_rounds: int = 10,
        require_unique_email: bool = False,
        cookie_name: str = "finance_tracker.sid",
        session_max_age_seconds: int = 24 * 60 * 60,
        cookie_secure: bool = False,
        clock: Callable[[], datetime] = utc_now,
        mongo_client: Optional[MongoClient] = None,
    ):
        self.audit_logger = audit_logger
        self.session_store = session_store
        self.mongo_client = mongo_client

        self.credentials = CredentialStore(
            storage=user_storage,
            rounds=password_hash_rounds,
            require_unique_email=require_unique_email,
        )
        self.sessions = SessionManager(
            store=session_store,
            credentials=self.credentials,
            cookie_name=cookie_name,
            max_age_seconds=session_max_age_seconds,
            cookie_secure=cookie_secure,
        )
        self.transactions = TransactionStore(
            storage=transaction_storage,
            audit_logger=audit_logger,
        )
        self.aggregations = AggregationEngine(
            storage=transaction_storage,
            transactions=self.transactions,
            audit_logger=audit_logger,
            clock=clock,
        )

    async def startup(self) -> None:
        """Check backing services are reachable before serving requests."""
        if self.mongo_client is not None:
            await self.mongo_client.connect()
        if isinstance(self.session_store, MongoSessionStore):
            await self.session_store.ensure_indexes()

    async def shutdown(self) -> None:
        if self.mongo_client is not None:
            self.mongo_client.close()


def create_app_components(
    settings: Optional[Settings] = None,
    clock: Callable[[], datetime] = utc_now,
) -> AppComponents:
    """
    Factory function to create all application components.

    Backends are chosen by STORAGE_BACKEND and SESSION_BACKEND. The
    MongoDB client is only created when one of them asks for it.
    """
    settings = settings or get_settings()
    app_settings = settings.app
    session_settings = settings.session

    mongo_client = None
    if app_settings.storage_backend == "mongo" or session_settings.backend == "mongo":
        mongo_client = MongoClient(settings.mongo)

    if app_settings.storage_backend == "mongo":
        user_storage = MongoUserStorage(mongo_client)
        transaction_storage = MongoTransactionStorage(mongo_client)
    else:
        user_storage = InMemoryUserStorage()
        transaction_storage = InMemoryTransactionStorage()

    if session_settings.backend == "mongo":
        session_store = MongoSessionStore(mongo_client, clock=clock)
    else:
        session_store = InMemorySessionStore(clock=clock)

    return AppComponents(
        user_storage=user_storage,
        transaction_storage=transaction_storage,
        session_store=session_store,
        audit_logger=AuditLogger(),
        password_hash_rounds=app_settings.password_hash_rounds,
        require_unique_email=app_settings.require_unique_email,
        cookie_name=session_settings.cookie_name,
        session_max_age_seconds=session_settings.max_age_seconds,
        cookie_secure=session_settings.cookie_secure,
        clock=clock,
        mongo_client=mongo_client,
    )
