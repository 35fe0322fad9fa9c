"""
Server Entry Point for Finance Tracker

Run with:
    python app/main.py
or
    uvicorn app.main:app --port 5001

Configuration comes from environment variables / .env
(see finance_tracker.config.settings).
"""

import sys

import structlog
import uvicorn

from finance_tracker.config import get_settings, validate_all_settings
from finance_tracker.web import create_app


logger = structlog.get_logger("finance_tracker.server")


def check_settings() -> bool:
    """Log every settings group that fails to load."""
    status = validate_all_settings()
    ok = True
    for name in ("mongo", "session", "app"):
        if not status.get(name, False):
            logger.error("settings_invalid", group=name, error=status.get(f"{name}_error"))
            ok = False
    return ok


app = create_app()


def main() -> int:
    if not check_settings():
        return 1

    settings = get_settings().app
    logger.info(
        "server_starting",
        host=settings.host,
        port=settings.port,
        environment=settings.app_environment,
    )
    uvicorn.run(app, host=settings.host, port=settings.port)
    return 0


if __name__ == "__main__":
    sys.exit(main())
