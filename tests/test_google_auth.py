"""
Tests for the Google login endpoints (/google-login, /google/redirect).
"""

import logging
from datetime import datetime
from unittest.mock import patch
from urllib.parse import parse_qs, urlparse

from fastapi.testclient import TestClient
from sqlalchemy import create_engine, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool

from app.core.config import Settings
from app.main import create_app
from app.models.user import User
from app.services.persistence import PersistenceGateway
from app.services.session_store import SessionStore


CALENDAR_SCOPE = "https://www.googleapis.com/auth/calendar"


def count_users(db) -> int:
    return db.scalar(select(func.count()).select_from(User))


class TestGoogleLogin:
    """Tests for GET /google-login."""

    def test_redirects_to_google_consent(self, client):
        """Redirect carries client ID, redirect URL, scopes, offline access and state."""
        response = client.get("/google-login")

        assert response.status_code == 302
        location = urlparse(response.headers["location"])
        assert f"{location.scheme}://{location.netloc}{location.path}" == (
            "https://accounts.google.com/o/oauth2/auth"
        )

        params = parse_qs(location.query)
        assert params["client_id"] == ["test-client-id"]
        assert params["redirect_uri"] == ["http://testserver/google/redirect"]
        assert params["response_type"] == ["code"]
        assert params["access_type"] == ["offline"]
        assert params["state"] == ["state-token"]

        scopes = params["scope"][0].split(" ")
        assert CALENDAR_SCOPE in scopes
        assert "https://www.googleapis.com/auth/userinfo.email" in scopes
        assert "https://www.googleapis.com/auth/userinfo.profile" in scopes

    def test_does_not_touch_database_or_google(self, client, db, fake_google):
        """Starting a login is side-effect free."""
        client.get("/google-login")

        assert fake_google.requests == []
        assert count_users(db) == 0


class TestGoogleCallbackErrors:
    """Failure paths of GET /google/redirect."""

    def test_missing_code_returns_400(self, client, db, fake_google):
        response = client.get("/google/redirect")

        assert response.status_code == 400
        assert response.text == "No code in query parameters"
        assert fake_google.requests == []
        assert count_users(db) == 0

    def test_empty_code_returns_400(self, client):
        response = client.get("/google/redirect?code=")

        assert response.status_code == 400
        assert response.text == "No code in query parameters"

    def test_rejected_code_returns_500(self, client, db):
        """Google refusing the code stops the flow before any write."""
        response = client.get("/google/redirect?code=bad-code")

        assert response.status_code == 500
        assert response.text == "Failed to exchange token"
        assert count_users(db) == 0

    def test_unreadable_userinfo_returns_500(self, client, db, fake_google):
        fake_google.userinfo_raw = b"<html>not json</html>"

        response = client.get("/google/redirect?code=good")

        assert response.status_code == 500
        assert response.text == "Unable to parse user info"
        assert count_users(db) == 0

    def test_non_object_token_error_returns_500(self, client, db, fake_google):
        fake_google.token_error_body = ["invalid_grant"]

        response = client.get("/google/redirect?code=good")

        assert response.status_code == 500
        assert response.text == "Failed to exchange token"
        assert count_users(db) == 0

    def test_userinfo_error_status_returns_500(self, client, db, fake_google):
        fake_google.userinfo_status = 401
        fake_google.userinfo = {"error": "invalid_token"}

        response = client.get("/google/redirect?code=good")

        assert response.status_code == 500
        assert response.text == "Unable to parse user info"
        assert count_users(db) == 0

    def test_userinfo_without_id_returns_500(self, client, db, fake_google):
        fake_google.userinfo = {"id": "", "email": "a@x.com"}

        response = client.get("/google/redirect?code=good")

        assert response.status_code == 500
        assert response.text == "Unable to parse user info"
        assert count_users(db) == 0

    def test_userinfo_network_failure_returns_500(self, client, db, fake_google):
        fake_google.userinfo_network_error = True

        response = client.get("/google/redirect?code=good")

        assert response.status_code == 500
        assert response.text == "Unable to retrieve user info"
        assert count_users(db) == 0

    def test_database_failure_returns_500(self, client):
        with patch.object(
            PersistenceGateway,
            "find_or_create_user",
            side_effect=SQLAlchemyError("database is locked"),
        ):
            response = client.get("/google/redirect?code=good")

        assert response.status_code == 500
        assert response.text == "Failed to store token in the database"

    def test_session_failure_returns_500(self, client, db):
        with patch.object(SessionStore, "save", side_effect=RuntimeError("store unavailable")):
            response = client.get("/google/redirect?code=good")

        assert response.status_code == 500
        assert response.text == "Failed to save session"


class TestGoogleCallbackSuccess:
    """Happy path of GET /google/redirect."""

    def test_first_login_creates_user(self, client, db, fake_google):
        response = client.get("/google/redirect?code=good")

        assert response.status_code == 302
        assert response.headers["location"] == "https://calendar.google.com"

        user = db.scalars(select(User).where(User.google_id == "abc123")).one()
        assert user.google_email == "a@x.com"
        assert user.access_token == "access-1"
        assert user.refresh_token == "refresh-1"
        assert user.token_expiry.year > 1

        # The userinfo call used the freshly exchanged token
        userinfo_call = fake_google.requests_to(fake_google.USERINFO_URL)[0]
        assert userinfo_call.headers["authorization"] == "Bearer access-1"

    def test_sets_session_cookie(self, client):
        response = client.get("/google/redirect?code=good")

        set_cookie = response.headers["set-cookie"]
        assert set_cookie.startswith("session_id=")
        assert "HttpOnly" in set_cookie
        assert "samesite=lax" in set_cookie.lower()

    def test_session_holds_google_account_id(self, client):
        response = client.get("/google/redirect?code=good")

        session_id = response.cookies["session_id"]
        store = client.app.state.session_store
        assert store.get(session_id).get("user_id") == "abc123"

    def test_returning_session_cookie_is_reused(self, client):
        first = client.get("/google/redirect?code=good")
        session_id = first.cookies["session_id"]

        second = client.get("/google/redirect?code=good")

        assert second.cookies["session_id"] == session_id

    def test_repeat_login_updates_without_duplicating(self, client, db, fake_google):
        """Matching is by Google account ID; tokens and email are overwritten."""
        client.get("/google/redirect?code=good")

        fake_google.token_response = {
            "access_token": "access-2",
            "refresh_token": "refresh-2",
            "expires_in": 3599,
            "token_type": "Bearer",
        }
        fake_google.userinfo = {"id": "abc123", "email": "new@x.com"}
        response = client.get("/google/redirect?code=good")

        assert response.status_code == 302
        assert count_users(db) == 1
        user = db.scalars(select(User)).one()
        db.refresh(user)
        assert user.google_email == "new@x.com"
        assert user.access_token == "access-2"
        assert user.refresh_token == "refresh-2"

    def test_repeat_login_without_refresh_token_keeps_stored_one(self, client, db, fake_google):
        """Google omits the refresh token on repeat consent."""
        client.get("/google/redirect?code=good")

        fake_google.token_response = {
            "access_token": "access-2",
            "expires_in": 3599,
            "token_type": "Bearer",
        }
        client.get("/google/redirect?code=good")

        user = db.scalars(select(User)).one()
        db.refresh(user)
        assert user.access_token == "access-2"
        assert user.refresh_token == "refresh-1"

    def test_token_without_lifetime_stores_zero_expiry(self, client, db, fake_google):
        fake_google.token_response = {"access_token": "forever", "token_type": "Bearer"}

        client.get("/google/redirect?code=good")

        user = db.scalars(select(User)).one()
        assert user.token_expiry.replace(tzinfo=None) == datetime(1, 1, 1)
        assert user.refresh_token == ""

    def test_distinct_accounts_get_distinct_rows(self, client, db, fake_google):
        client.get("/google/redirect?code=good")

        fake_google.userinfo = {"id": "def456", "email": "b@x.com"}
        client.get("/google/redirect?code=good")

        assert count_users(db) == 2


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}


class TestAuthClientLifetime:
    """The OAuth client is built once per application, not per request."""

    def test_routes_use_the_application_client(self, client):
        auth_client = client.app.state.auth_client

        with patch.object(
            auth_client, "get_authorization_url", return_value="https://accounts.example/auth"
        ) as get_url:
            first = client.get("/google-login")
            second = client.get("/google-login")

        assert first.headers["location"] == "https://accounts.example/auth"
        assert second.headers["location"] == "https://accounts.example/auth"
        assert get_url.call_count == 2

    def test_missing_credentials_warn_once(self, caplog):
        settings = Settings(
            _env_file=None,
            DATABASE_URL="sqlite:///:memory:",
            GOOGLE_CLIENT_ID="",
            GOOGLE_CLIENT_SECRET="",
        )

        with caplog.at_level(logging.WARNING, logger="calendar_service"):
            app = create_app(
                settings=settings,
                engine=create_engine(
                    "sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool
                ),
            )
            with TestClient(app, follow_redirects=False) as test_client:
                test_client.get("/google-login")
                test_client.get("/google-login")

        warnings = [r for r in caplog.records if "not configured" in r.getMessage()]
        assert len(warnings) == 1
