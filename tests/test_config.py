"""
Tests for settings and component wiring.
"""

import pytest
from pydantic import ValidationError

from finance_tracker.config import AppSettings, SessionSettings, Settings, get_settings
from finance_tracker.orchestrator import create_app_components
from finance_tracker.services.sessions import InMemorySessionStore, MongoSessionStore
from finance_tracker.services.storage import (
    InMemoryTransactionStorage,
    MongoTransactionStorage,
)


@pytest.fixture(autouse=True)
def clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestSettings:
    """Tests for the pydantic-settings classes."""

    def test_defaults(self, monkeypatch):
        for name in ("PORT", "STORAGE_BACKEND", "PASSWORD_HASH_ROUNDS", "REQUIRE_UNIQUE_EMAIL"):
            monkeypatch.delenv(name, raising=False)
        settings = AppSettings(_env_file=None)
        assert settings.port == 5001
        assert settings.storage_backend == "mongo"
        assert settings.password_hash_rounds == 10
        assert settings.require_unique_email is False

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("STORAGE_BACKEND", " Memory ")
        monkeypatch.setenv("REQUIRE_UNIQUE_EMAIL", "true")
        monkeypatch.setenv("LOG_LEVEL", "debug")
        settings = AppSettings(_env_file=None)
        assert settings.storage_backend == "memory"
        assert settings.require_unique_email is True
        assert settings.log_level == "DEBUG"

    def test_rejects_unknown_backend(self, monkeypatch):
        monkeypatch.setenv("SESSION_BACKEND", "redis")
        with pytest.raises(ValidationError):
            SessionSettings(_env_file=None)

    def test_rejects_weak_hash_rounds(self, monkeypatch):
        monkeypatch.setenv("PASSWORD_HASH_ROUNDS", "2")
        with pytest.raises(ValidationError):
            AppSettings(_env_file=None)


class TestCreateAppComponents:
    """Tests for create_app_components."""

    def test_memory_backends(self, monkeypatch):
        monkeypatch.setenv("STORAGE_BACKEND", "memory")
        monkeypatch.setenv("SESSION_BACKEND", "memory")

        components = create_app_components(Settings())

        assert components.mongo_client is None
        assert isinstance(components.session_store, InMemorySessionStore)
        assert isinstance(components.aggregations._storage, InMemoryTransactionStorage)

    def test_mongo_backends(self, monkeypatch):
        monkeypatch.setenv("STORAGE_BACKEND", "mongo")
        monkeypatch.setenv("SESSION_BACKEND", "mongo")

        components = create_app_components(Settings())

        # The driver connects lazily; nothing touches the network here
        assert components.mongo_client is not None
        assert isinstance(components.session_store, MongoSessionStore)
        assert isinstance(components.aggregations._storage, MongoTransactionStorage)
