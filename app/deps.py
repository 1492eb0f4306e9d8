"""
Dependencies module - reusable FastAPI dependencies for route handlers.

Everything a handler needs (settings, DB session, Google client, session
store, services) is built here from app.state, so tests can swap any piece
through app.dependency_overrides or by passing their own objects to
create_app().
"""

from typing import Optional

import httpx
from fastapi import Depends, Header, Request
from sqlalchemy.orm import Session

from app.core.config import Settings
from app.db.session import get_db
from app.environments.google.auth.client import GoogleAuthClient
from app.services.event_creator import CalendarEventCreator
from app.services.oauth_flow import OAuthFlowController
from app.services.persistence import PersistenceGateway
from app.services.session_store import SessionStore


def get_settings(request: Request) -> Settings:
    """Settings the app was created with."""
    return request.app.state.settings


def get_http_transport(request: Request) -> Optional[httpx.AsyncBaseTransport]:
    """httpx transport for Google calls; None means the real network."""
    return request.app.state.http_transport


def get_session_store(request: Request) -> SessionStore:
    return request.app.state.session_store


def get_auth_client(request: Request) -> GoogleAuthClient:
    """Google OAuth client built once by create_app()."""
    return request.app.state.auth_client


def get_gateway(db: Session = Depends(get_db)) -> PersistenceGateway:
    return PersistenceGateway(db)


def get_oauth_flow(
    auth_client: GoogleAuthClient = Depends(get_auth_client),
    gateway: PersistenceGateway = Depends(get_gateway),
    session_store: SessionStore = Depends(get_session_store),
    settings: Settings = Depends(get_settings),
) -> OAuthFlowController:
    return OAuthFlowController(
        auth_client=auth_client,
        gateway=gateway,
        session_store=session_store,
        settings=settings,
    )


def get_event_creator(
    auth_client: GoogleAuthClient = Depends(get_auth_client),
    gateway: PersistenceGateway = Depends(get_gateway),
    settings: Settings = Depends(get_settings),
    transport: Optional[httpx.AsyncBaseTransport] = Depends(get_http_transport),
) -> CalendarEventCreator:
    return CalendarEventCreator(
        gateway=gateway,
        auth_client=auth_client,
        settings=settings,
        transport=transport,
    )


def get_user_identifier(x_user_id: Optional[str] = Header(None)) -> Optional[str]:
    """
    Caller identity for /create-event, read from the X-User-Id header.

    The header value is trusted as-is: any client that knows a Google
    account ID can act for that account. The session written at login
    holds the same ID and is the verified alternative (see DESIGN.md).
    Returns None when the header is missing; the event creator turns that
    into a 401.
    """
    return x_user_id
