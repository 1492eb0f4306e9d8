"""
OAuth flow controller - Google login for the calendar service.

OAuth Flow:
===========
1. GET /google-login     → start_login() builds the Google consent URL
2. User grants calendar + profile access on Google
3. GET /google/redirect  → handle_callback(code, session_id):
   a. exchange the code for tokens
   b. fetch the Google account ID and email
   c. find-or-create the User by Google account ID, overwrite its tokens
   d. store the Google account ID in the server-side session
   e. send the browser to the Google Calendar web UI

Known gap: the state value is fixed and not checked on the callback,
so the callback is not protected against login CSRF (see DESIGN.md).
"""

import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from app.core.config import Settings
from app.environments.base import (
    EnvironmentError,
    EnvironmentProvider,
    ResponseDecodeError,
)
from app.environments.google.auth.schemas import CALENDAR_SCOPES
from app.services.errors import BadRequestError, InternalError
from app.services.persistence import PersistenceGateway
from app.services.session_store import SessionStore


logger = logging.getLogger("calendar_service.services.oauth_flow")


# Session key holding the logged-in Google account ID
SESSION_USER_KEY = "user_id"


@dataclass
class CallbackResult:
    """Where to send the browser, and which session cookie to set."""
    redirect_url: str
    session_id: str
    google_id: str


class OAuthFlowController:
    """
    Runs the authorization code flow and stores the outcome.

    All collaborators are passed in; app.deps wires them per request.
    """

    def __init__(
        self,
        auth_client: EnvironmentProvider,
        gateway: PersistenceGateway,
        session_store: SessionStore,
        settings: Settings,
    ):
        self.auth_client = auth_client
        self.gateway = gateway
        self.session_store = session_store
        self.settings = settings

    def start_login(self) -> str:
        """
        Build the Google authorization URL.

        Requests the calendar scope plus profile scopes, offline access
        (so Google issues a refresh token) and the configured state value.
        """
        auth_url = self.auth_client.get_authorization_url(
            scopes=CALENDAR_SCOPES,
            state=self.settings.OAUTH_STATE,
            access_type="offline",
        )
        logger.info("Redirecting to Google OAuth consent screen")
        return auth_url

    async def handle_callback(self, code: Optional[str], session_id: Optional[str] = None) -> CallbackResult:
        """
        Complete the login after Google redirects back.

        Args:
            code: Authorization code from the query string
            session_id: Session cookie presented by the browser, if any

        Returns:
            CallbackResult with the calendar UI URL and the session ID

        Raises:
            BadRequestError: If code is missing
            InternalError: If any downstream step fails
        """
        if not code:
            logger.warning("No code in query parameters")
            raise BadRequestError("No code in query parameters")

        try:
            tokens = await self.auth_client.exchange_code_for_tokens(code)
        except EnvironmentError as e:
            logger.error(f"Failed to exchange token: {e}")
            raise InternalError("Failed to exchange token")

        try:
            user_info = await self.auth_client.get_user_info(tokens.access_token)
        except ResponseDecodeError as e:
            logger.error(f"Unable to parse user info: {e}")
            raise InternalError("Unable to parse user info")
        except EnvironmentError as e:
            logger.error(f"Unable to retrieve user info: {e}")
            raise InternalError("Unable to retrieve user info")

        if not user_info.provider_user_id:
            logger.error("Google returned a profile without an account ID")
            raise InternalError("Unable to parse user info")

        google_id = user_info.provider_user_id

        try:
            self.gateway.find_or_create_user(
                google_id=google_id,
                google_email=user_info.email or "",
                access_token=tokens.access_token,
                refresh_token=tokens.refresh_token,
                token_expiry=tokens.expires_at,
            )
        except SQLAlchemyError as e:
            logger.error(f"Failed to store token in the database: {e}")
            raise InternalError("Failed to store token in the database")

        try:
            session = self.session_store.get(session_id)
            session.set(SESSION_USER_KEY, google_id)
            self.session_store.save(session)
        except RuntimeError as e:
            logger.error(f"Failed to save session: {e}")
            raise InternalError("Failed to save session")

        logger.info(f"Google login completed for account {google_id}")

        return CallbackResult(
            redirect_url=self.settings.CALENDAR_UI_URL,
            session_id=session.session_id,
            google_id=google_id,
        )
