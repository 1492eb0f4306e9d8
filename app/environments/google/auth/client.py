"""
Google OAuth Client - Handles the OAuth 2.0 authorization code flow.

Key Features:
=============
1. Authorization URL generation with calendar + profile scopes
2. Code-to-token exchange
3. Token refresh (used by the calendar client when a stored token expired)
4. Account profile lookup on the v2 userinfo endpoint

OAuth 2.0 Flow Implementation:
==============================
1. get_authorization_url() → User redirected to Google
2. exchange_code_for_tokens() → Called in callback, gets tokens
3. get_user_info() → Fetch Google account ID and email
4. refresh_access_token() → Renew an expired access token

References:
===========
- OAuth 2.0: https://developers.google.com/identity/protocols/oauth2
- Token endpoint: https://oauth2.googleapis.com/token
- Userinfo: https://www.googleapis.com/oauth2/v2/userinfo
"""

import logging
from typing import List, Optional
from urllib.parse import urlencode

import httpx
from pydantic import ValidationError

from app.environments.base import (
    AuthenticationError,
    EnvironmentProvider,
    OAuthTokens,
    ResponseDecodeError,
    TokenExpiredError,
    UserInfo,
)
from app.environments.google.auth.schemas import (
    PROFILE_SCOPES,
    GoogleTokenResponse,
    GoogleUserInfo,
)


logger = logging.getLogger("calendar_service.environments.google.auth")


class GoogleAuthClient(EnvironmentProvider):
    """
    Google OAuth 2.0 Client implementation.

    Tokens obtained here are stored on the User row and later handed to
    GoogleCalendarClient.

    Example Usage:
        client = GoogleAuthClient(
            client_id="...", client_secret="...",
            redirect_uri="http://localhost:8000/google/redirect",
        )
        auth_url = client.get_authorization_url(scopes=CALENDAR_SCOPES, state="state-token")
        tokens = await client.exchange_code_for_tokens(code="4/0Ab...")
        user_info = await client.get_user_info(tokens.access_token)
    """

    provider_name = "google"

    # Google OAuth endpoints
    AUTHORIZATION_URL = "https://accounts.google.com/o/oauth2/auth"
    TOKEN_URL = "https://oauth2.googleapis.com/token"
    USERINFO_URL = "https://www.googleapis.com/oauth2/v2/userinfo"

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the Google OAuth client.

        Args:
            client_id: Google OAuth Client ID
            client_secret: Google OAuth Client Secret
            redirect_uri: OAuth callback URL registered in the Cloud Console
            timeout: Seconds per HTTP call
            transport: Optional httpx transport (tests pass httpx.MockTransport)
        """
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri
        self.timeout = timeout
        self._transport = transport

        if not self.client_id or not self.client_secret:
            logger.warning(
                "Google OAuth not configured. Set GOOGLE_CLIENT_ID and "
                "GOOGLE_CLIENT_SECRET in environment variables."
            )

    def _http_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=self._transport, timeout=self.timeout)

    # -------------------------------------------------------------------------
    # AUTHORIZATION URL
    # -------------------------------------------------------------------------

    def get_authorization_url(
        self,
        scopes: List[str],
        state: str,
        access_type: str = "offline",
        include_profile: bool = True,
        prompt: Optional[str] = None,
    ) -> str:
        """
        Generate the Google OAuth authorization URL.

        Args:
            scopes: List of OAuth scopes to request (e.g., CALENDAR_SCOPES)
            state: Anti-forgery token echoed back on the callback
            access_type: "offline" for refresh token, "online" for access only
            include_profile: Add profile scopes for user info (default: True)
            prompt: Optional prompt parameter ("consent" forces the consent screen)

        Returns:
            Full authorization URL to redirect the user to
        """
        all_scopes = list(scopes)
        if include_profile:
            for scope in PROFILE_SCOPES:
                if scope not in all_scopes:
                    all_scopes.append(scope)

        params = {
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
            "response_type": "code",
            "scope": " ".join(all_scopes),
            "state": state,
            "access_type": access_type,
        }
        if prompt:
            params["prompt"] = prompt

        auth_url = f"{self.AUTHORIZATION_URL}?{urlencode(params)}"

        logger.info(
            f"Generated Google auth URL with {len(all_scopes)} scopes",
            extra={"scopes": all_scopes},
        )

        return auth_url

    # -------------------------------------------------------------------------
    # TOKEN EXCHANGE
    # -------------------------------------------------------------------------

    async def exchange_code_for_tokens(self, code: str) -> OAuthTokens:
        """
        Exchange authorization code for access and refresh tokens.

        Google returns an access token (~1 hour) and, on first consent with
        access_type=offline, a refresh token.

        Args:
            code: Authorization code from Google callback

        Returns:
            OAuthTokens with access_token, refresh_token, expiration, etc.

        Raises:
            AuthenticationError: If token exchange fails
        """
        token_data = {
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "code": code,
            "grant_type": "authorization_code",
            "redirect_uri": self.redirect_uri,
        }

        logger.info("Exchanging authorization code for tokens")

        token_response = await self._post_token_request(token_data, AuthenticationError)

        logger.info(
            "Successfully obtained Google tokens",
            extra={
                "has_refresh_token": token_response.refresh_token is not None,
                "expires_in": token_response.expires_in,
            },
        )

        return OAuthTokens(
            access_token=token_response.access_token,
            token_type=token_response.token_type,
            refresh_token=token_response.refresh_token,
            expires_at=token_response.get_expires_at(),
            scopes=token_response.get_scopes_list(),
            extra_data={"id_token": token_response.id_token} if token_response.id_token else None,
        )

    # -------------------------------------------------------------------------
    # TOKEN REFRESH
    # -------------------------------------------------------------------------

    async def refresh_access_token(self, refresh_token: str) -> OAuthTokens:
        """
        Use refresh token to get a new access token.

        Args:
            refresh_token: The refresh token from initial authorization

        Returns:
            OAuthTokens with new access_token (refresh_token usually unchanged)

        Raises:
            TokenExpiredError: If refresh token is invalid or revoked
        """
        refresh_data = {
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "refresh_token": refresh_token,
            "grant_type": "refresh_token",
        }

        logger.info("Refreshing access token")

        token_response = await self._post_token_request(refresh_data, TokenExpiredError)

        logger.info(
            "Successfully refreshed access token",
            extra={"expires_in": token_response.expires_in},
        )

        # Google may or may not return a new refresh_token
        return OAuthTokens(
            access_token=token_response.access_token,
            token_type=token_response.token_type,
            refresh_token=token_response.refresh_token or refresh_token,
            expires_at=token_response.get_expires_at(),
            scopes=token_response.get_scopes_list(),
        )

    async def _post_token_request(self, data: dict, error_cls: type) -> GoogleTokenResponse:
        """POST to the token endpoint, raising error_cls on any failure."""
        async with self._http_client() as client:
            try:
                response = await client.post(self.TOKEN_URL, data=data)
            except httpx.RequestError as e:
                logger.error(f"Network error calling token endpoint: {e}")
                raise error_cls(f"Network error: {e}")

        if response.status_code != 200:
            try:
                error_data = response.json() if response.content else {}
            except ValueError:
                error_data = {}
            if not isinstance(error_data, dict):
                error_data = {}
            error_msg = error_data.get("error_description") or error_data.get("error") or response.text
            logger.error(f"Token request failed: {response.status_code} - {error_msg}")
            raise error_cls(f"Token request failed: {error_msg}")

        try:
            return GoogleTokenResponse(**response.json())
        except (ValueError, TypeError, ValidationError) as e:
            logger.error(f"Unreadable token response: {e}")
            raise error_cls(f"Unreadable token response: {e}")

    # -------------------------------------------------------------------------
    # USER INFO
    # -------------------------------------------------------------------------

    async def get_user_info(self, access_token: str) -> UserInfo:
        """
        Get the Google account profile.

        Args:
            access_token: Valid access token with the profile scopes

        Returns:
            UserInfo with Google account ID and email

        Raises:
            AuthenticationError: If the request could not be sent
            ResponseDecodeError: If Google answered with an error or an
                unreadable body
        """
        logger.info("Fetching user info from Google")

        async with self._http_client() as client:
            try:
                response = await client.get(
                    self.USERINFO_URL,
                    headers={"Authorization": f"Bearer {access_token}"},
                )
            except httpx.RequestError as e:
                logger.error(f"Network error fetching user info: {e}")
                raise AuthenticationError(f"Network error: {e}")

        if response.status_code != 200:
            logger.error(f"Failed to fetch user info: {response.status_code} - {response.text}")
            raise ResponseDecodeError(f"Userinfo returned status {response.status_code}")

        try:
            google_user = GoogleUserInfo(**response.json())
        except (ValueError, TypeError, ValidationError) as e:
            logger.error(f"Unable to parse user info: {e}")
            raise ResponseDecodeError(f"Invalid userinfo response: {e}")

        logger.info("Successfully fetched Google user info")

        return UserInfo(
            provider_user_id=google_user.id,
            email=google_user.email,
            name=google_user.name,
            picture_url=google_user.picture,
            extra_data={
                "given_name": google_user.given_name,
                "family_name": google_user.family_name,
                "verified_email": google_user.verified_email,
                "locale": google_user.locale,
                "hd": google_user.hd,
            },
        )
