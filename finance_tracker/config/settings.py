"""
Configuration Management for Finance Tracker

Uses pydantic-settings for type-safe configuration from environment variables.

All configuration is centralized here so every external dependency
(MongoDB, the session backend, the web server) is visible in one place
and validated at startup.
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class MongoSettings(BaseSettings):
    """MongoDB document store configuration."""

    model_config = SettingsConfigDict(
        env_prefix="MONGO_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    uri: str = Field(
        default="mongodb://localhost:27017",
        description="MongoDB connection string"
    )
    database: str = Field(
        default="FinancialTracker",
        description="Database holding the users and transactions collections"
    )

    # Collection names of the existing FinancialTracker database
    users_collection: str = Field(default="users")
    transactions_collection: str = Field(default="transactions")
    sessions_collection: str = Field(default="sessions")

    server_selection_timeout_ms: int = Field(
        default=5000,
        ge=100,
        description="How long the driver waits for a reachable server"
    )


class SessionSettings(BaseSettings):
    """Session cookie and session store configuration."""

    model_config = SettingsConfigDict(
        env_prefix="SESSION_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    backend: str = Field(
        default="memory",
        description="Where session state lives: 'memory' or 'mongo'"
    )
    cookie_name: str = Field(
        default="finance_tracker.sid",
        min_length=1,
    )
    max_age_seconds: int = Field(
        default=24 * 60 * 60,
        ge=60,
        description="Lifetime of a session and its cookie"
    )
    cookie_secure: bool = Field(
        default=False,
        description="Only send the cookie over HTTPS"
    )

    @field_validator('backend')
    @classmethod
    def validate_backend(cls, v: str) -> str:
        v = v.strip().lower()
        if v not in {"memory", "mongo"}:
            raise ValueError(f"Unsupported session backend: {v}")
        return v


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        description="Minimum level for diagnostic log lines"
    )

    # Web server
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=5001, ge=1, le=65535)

    # Persistence
    storage_backend: str = Field(
        default="mongo",
        description="Where users and transactions live: 'mongo' or 'memory'"
    )

    # Credentials
    password_hash_rounds: int = Field(
        default=10,
        ge=4,
        le=31,
        description="bcrypt cost factor (log2 of the work rounds)"
    )
    require_unique_email: bool = Field(
        default=False,
        description="Reject signups whose email is already registered"
    )

    @field_validator('storage_backend')
    @classmethod
    def validate_storage_backend(cls, v: str) -> str:
        v = v.strip().lower()
        if v not in {"memory", "mongo"}:
            raise ValueError(f"Unsupported storage backend: {v}")
        return v

    @field_validator('log_level')
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.strip().upper()


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Sub-settings are loaded lazily to allow partial configuration

    @property
    def mongo(self) -> MongoSettings:
        return MongoSettings()

    @property
    def session(self) -> SessionSettings:
        return SessionSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, plus "<name>_error"
    entries describing what failed. Useful for startup checks.
    """
    results = {}
    settings = get_settings()

    for name in ("mongo", "session", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
