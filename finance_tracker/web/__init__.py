"""Web (HTTP) surface package."""

from finance_tracker.web.app import create_app

__all__ = ["create_app"]
