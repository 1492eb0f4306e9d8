"""
Test configuration and fixtures for pytest.

This module provides shared fixtures used across all tests:
- Test database (SQLite in-memory for speed)
- A fake Google (token, userinfo and calendar endpoints) behind httpx.MockTransport
- Test client (FastAPI TestClient) wired to both
- Sample data factories
"""

import json
from datetime import datetime, timedelta, timezone
from typing import Generator, Optional
from urllib.parse import parse_qs

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.config import Settings
from app.db.base import Base
from app.db.session import get_db
from app.main import create_app
from app.models.event import Event  # noqa: F401
from app.models.user import User


# ---------------------------------------------------------------------------
# TEST DATABASE SETUP
# ---------------------------------------------------------------------------
# Use SQLite in-memory for fast tests (no PostgreSQL dependency)
# StaticPool keeps the same connection across all operations

SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},  # Required for SQLite
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def naive_utc(value: datetime) -> datetime:
    """SQLite returns naive datetimes; compare everything as naive UTC."""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


# ---------------------------------------------------------------------------
# FAKE GOOGLE
# ---------------------------------------------------------------------------

class FakeGoogle:
    """
    Stand-in for Google's OAuth and Calendar endpoints.

    Tests tweak the attributes to script failures, and inspect `requests`
    to see what the service sent.
    """

    TOKEN_URL = "https://oauth2.googleapis.com/token"
    USERINFO_URL = "https://www.googleapis.com/oauth2/v2/userinfo"
    EVENTS_URL = "https://www.googleapis.com/calendar/v3/calendars/primary/events"

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.userinfo: dict = {"id": "abc123", "email": "a@x.com", "verified_email": True}
        self.userinfo_status = 200
        self.userinfo_raw: Optional[bytes] = None
        self.userinfo_network_error = False
        self.token_response: dict = {
            "access_token": "access-1",
            "refresh_token": "refresh-1",
            "expires_in": 3599,
            "token_type": "Bearer",
            "scope": "https://www.googleapis.com/auth/calendar",
        }
        self.refresh_response: dict = {
            "access_token": "access-refreshed",
            "expires_in": 3599,
            "token_type": "Bearer",
        }
        self.token_error_body: Optional[object] = None
        self.calendar_status = 200
        self.event_extra: dict = {}
        self.event_counter = 0

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def requests_to(self, url: str) -> list[httpx.Request]:
        return [r for r in self.requests if str(r.url).split("?")[0] == url]

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        url = str(request.url).split("?")[0]

        if url == self.TOKEN_URL:
            form = {k: v[0] for k, v in parse_qs(request.content.decode()).items()}
            if form.get("grant_type") == "refresh_token":
                return httpx.Response(200, json=self.refresh_response)
            if self.token_error_body is not None:
                return httpx.Response(400, json=self.token_error_body)
            if form.get("code") == "bad-code":
                return httpx.Response(
                    400, json={"error": "invalid_grant", "error_description": "Bad Request"}
                )
            return httpx.Response(200, json=self.token_response)

        if url == self.USERINFO_URL:
            if self.userinfo_network_error:
                raise httpx.ConnectError("connection refused", request=request)
            if self.userinfo_raw is not None:
                return httpx.Response(self.userinfo_status, content=self.userinfo_raw)
            return httpx.Response(self.userinfo_status, json=self.userinfo)

        if url == self.EVENTS_URL:
            if self.calendar_status != 200:
                return httpx.Response(
                    self.calendar_status, json={"error": {"message": "backend error"}}
                )
            body = json.loads(request.content)
            self.event_counter += 1
            event = {
                "kind": "calendar#event",
                "id": f"evt{self.event_counter}",
                "status": "confirmed",
                "htmlLink": f"https://www.google.com/calendar/event?eid=evt{self.event_counter}",
                **body,
                **self.event_extra,
            }
            return httpx.Response(200, json=event)

        return httpx.Response(404, json={"error": "not found"})


# ---------------------------------------------------------------------------
# SETTINGS / GOOGLE FIXTURES
# ---------------------------------------------------------------------------

@pytest.fixture
def test_settings() -> Settings:
    """Settings isolated from the developer's environment and .env file."""
    return Settings(
        _env_file=None,
        DATABASE_URL=SQLALCHEMY_DATABASE_URL,
        GOOGLE_CLIENT_ID="test-client-id",
        GOOGLE_CLIENT_SECRET="test-client-secret",
        REDIRECT_URL="http://testserver/google/redirect",
        LOG_LEVEL="DEBUG",
    )


@pytest.fixture
def fake_google() -> FakeGoogle:
    return FakeGoogle()


# ---------------------------------------------------------------------------
# DATABASE FIXTURES
# ---------------------------------------------------------------------------

@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """
    Create a fresh database for each test function.

    - Creates all tables
    - Yields a session for the test
    - Drops all tables after test (clean slate)
    """
    Base.metadata.create_all(bind=engine)

    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(
    db: Session, test_settings: Settings, fake_google: FakeGoogle
) -> Generator[TestClient, None, None]:
    """
    Create a test client with the test database and the fake Google.

    Overrides the get_db dependency so requests share the test session.
    """
    app = create_app(settings=test_settings, engine=engine, http_transport=fake_google.transport)

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app, follow_redirects=False) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# USER FIXTURES
# ---------------------------------------------------------------------------

@pytest.fixture
def test_user(db: Session) -> User:
    """
    A user who already logged in, with a token valid for another hour.
    """
    user = User(
        google_id="abc123",
        google_email="a@x.com",
        access_token="stored-access",
        refresh_token="stored-refresh",
        token_expiry=datetime.now(timezone.utc) + timedelta(hours=1),
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def expired_user(db: Session) -> User:
    """A user whose stored access token expired an hour ago."""
    user = User(
        google_id="expired1",
        google_email="old@x.com",
        access_token="stale-access",
        refresh_token="stored-refresh",
        token_expiry=datetime.now(timezone.utc) - timedelta(hours=1),
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user
