"""
FastAPI Application Factory

Creates the web application around one AppComponents instance.
Errors that escape a route are mapped to status codes here:
- AuthError -> 401 "Unauthorized"
- ValidationError, PersistenceError, SessionError -> 500
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import PlainTextResponse
from fastapi.staticfiles import StaticFiles

from finance_tracker.audit import configure_logging
from finance_tracker.config import Settings, get_settings
from finance_tracker.credentials import AuthError
from finance_tracker.orchestrator import AppComponents, create_app_components
from finance_tracker.services.sessions import SessionError
from finance_tracker.services.storage import PersistenceError
from finance_tracker.validation import ValidationError
from finance_tracker.web.routes import STATIC_DIR, router


def register_exception_handlers(app: FastAPI) -> None:

    async def handle_auth_error(request: Request, exc: AuthError):
        return PlainTextResponse("Unauthorized", status_code=status.HTTP_401_UNAUTHORIZED)

    async def handle_server_error(request: Request, exc: Exception):
        components: AppComponents = request.app.state.components
        components.audit_logger.log_error(
            error_type=type(exc).__name__,
            error_message=str(exc),
            details={"path": request.url.path},
        )
        return PlainTextResponse(
            "Internal Server Error",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    app.add_exception_handler(AuthError, handle_auth_error)
    app.add_exception_handler(ValidationError, handle_server_error)
    app.add_exception_handler(PersistenceError, handle_server_error)
    app.add_exception_handler(SessionError, handle_server_error)


def create_app(
    components: Optional[AppComponents] = None,
    settings: Optional[Settings] = None,
) -> FastAPI:
    """
    Build the web application.

    Args:
        components: Pre-built components (tests pass in-memory ones).
                    Built from settings when omitted.
        settings: Settings to use; the cached settings by default.
    """
    settings = settings or get_settings()
    app_settings = settings.app
    configure_logging(app_settings.log_level)
    components = components or create_app_components(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await components.startup()
        yield
        await components.shutdown()

    app = FastAPI(
        title="Finance Tracker",
        debug=app_settings.debug_mode,
        lifespan=lifespan,
    )
    app.state.components = components

    app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")
    app.include_router(router)
    register_exception_handlers(app)

    return app
