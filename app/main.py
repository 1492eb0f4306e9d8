"""
Main application entry point - FastAPI app instance and configuration.
Run with: uvicorn app.main:app --reload  (or: python scripts/run_server.py)
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse
from sqlalchemy.engine import Engine

from app.core.config import Settings, settings as default_settings
from app.core.logging_config import configure_logging
from app.db.session import build_engine, build_session_factory, init_db
from app.environments.google.auth.client import GoogleAuthClient
from app.routers import events, google_auth
from app.services.errors import ServiceError
from app.services.session_store import SessionStore


logger = logging.getLogger("calendar_service.main")


def create_app(
    settings: Optional[Settings] = None,
    engine: Optional[Engine] = None,
    http_transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Configuration (defaults to environment / .env)
        engine: SQLAlchemy engine (defaults to one built from settings at startup)
        http_transport: httpx transport for Google calls (tests use MockTransport)
    """
    settings = settings or default_settings
    configure_logging(settings.LOG_LEVEL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Build the engine lazily so importing this module never touches the DB
        db_engine = engine or build_engine(settings.database_url)
        init_db(db_engine)
        app.state.engine = db_engine
        app.state.session_factory = build_session_factory(db_engine)
        logger.info(f"{settings.APP_NAME} started")
        try:
            yield
        finally:
            if engine is None:
                db_engine.dispose()

    app = FastAPI(
        title=settings.APP_NAME,
        debug=settings.DEBUG,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.http_transport = http_transport
    app.state.session_store = SessionStore(ttl_minutes=settings.SESSION_TTL_MINUTES)
    app.state.auth_client = GoogleAuthClient(
        client_id=settings.GOOGLE_CLIENT_ID,
        client_secret=settings.GOOGLE_CLIENT_SECRET,
        redirect_uri=settings.REDIRECT_URL,
        timeout=settings.HTTP_TIMEOUT,
        transport=http_transport,
    )

    # ---------------------------------------------------------------------------
    # ERROR HANDLING
    # ---------------------------------------------------------------------------
    # Service failures become plain-text responses with their status code.
    # Details were already logged where the error was raised.
    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError):
        return PlainTextResponse(exc.message, status_code=exc.status_code)

    # ---------------------------------------------------------------------------
    # REGISTER ROUTERS
    # ---------------------------------------------------------------------------
    # google_auth.router: /google-login, /google/redirect
    # events.router: /create-event
    app.include_router(google_auth.router)
    app.include_router(events.router)

    @app.get("/health", tags=["health"])
    def health_check():
        """
        Simple health check endpoint.

        Does NOT check database connectivity.

        Returns:
            {"status": "ok"}
        """
        return {"status": "ok"}

    return app


app = create_app()
