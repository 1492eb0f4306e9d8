"""
Base classes and interfaces for the remote provider integration.

This module defines the contracts the Google clients implement and the
exceptions they raise, so the services can handle remote failures without
knowing about HTTP details.

- EnvironmentProvider: Abstract base for OAuth providers (authorization code flow)
- OAuthTokens / UserInfo: Provider-agnostic results of that flow
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional


# ---------------------------------------------------------------------------
# CUSTOM EXCEPTIONS
# ---------------------------------------------------------------------------


class EnvironmentError(Exception):
    """Base exception for all remote provider errors."""
    pass


class AuthenticationError(EnvironmentError):
    """Raised when the token exchange or profile lookup fails."""
    pass


class TokenExpiredError(EnvironmentError):
    """Raised when an access token has expired and could not be refreshed."""
    pass


class ResponseDecodeError(EnvironmentError):
    """Raised when a provider response cannot be decoded into the expected shape."""
    pass


class APIError(EnvironmentError):
    """Raised when an API call to the provider fails."""

    def __init__(self, message: str, status_code: Optional[int] = None, response: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.response = response


# ---------------------------------------------------------------------------
# DATA STRUCTURES
# ---------------------------------------------------------------------------


@dataclass
class OAuthTokens:
    """
    Token data returned by the provider's token endpoint.

    expires_at is None when the provider did not report a lifetime.
    """
    access_token: str
    token_type: str = "Bearer"
    refresh_token: Optional[str] = None
    expires_at: Optional[datetime] = None
    scopes: Optional[List[str]] = None
    extra_data: Optional[Dict[str, Any]] = None


@dataclass
class UserInfo:
    """
    Basic user information from the provider's userinfo endpoint.
    """
    provider_user_id: str  # Google's account "id"
    email: Optional[str] = None
    name: Optional[str] = None
    picture_url: Optional[str] = None
    extra_data: Optional[Dict[str, Any]] = None


# ---------------------------------------------------------------------------
# ABSTRACT BASE CLASSES
# ---------------------------------------------------------------------------


class EnvironmentProvider(ABC):
    """
    Abstract base class for OAuth providers.

    The provider is responsible for:
    - Generating authorization URLs
    - Exchanging authorization codes for tokens
    - Refreshing expired access tokens
    - Fetching the account profile
    """

    # Unique identifier for this provider (e.g., "google")
    provider_name: str = ""

    @abstractmethod
    def get_authorization_url(
        self,
        scopes: List[str],
        state: str,
        access_type: str = "offline",
    ) -> str:
        """
        Generate the OAuth authorization URL.

        Args:
            scopes: List of OAuth scopes to request
            state: Anti-forgery state parameter
            access_type: "offline" to also receive a refresh token

        Returns:
            URL to redirect the user to for authorization
        """
        pass

    @abstractmethod
    async def exchange_code_for_tokens(self, code: str) -> OAuthTokens:
        """
        Exchange authorization code for access/refresh tokens.

        Raises:
            AuthenticationError: If code exchange fails
        """
        pass

    @abstractmethod
    async def refresh_access_token(self, refresh_token: str) -> OAuthTokens:
        """
        Use a refresh token to get a new access token.

        Raises:
            TokenExpiredError: If the refresh token is invalid or revoked
        """
        pass

    @abstractmethod
    async def get_user_info(self, access_token: str) -> UserInfo:
        """
        Get the account profile from the provider.

        Raises:
            AuthenticationError: If the request or decoding fails
        """
        pass
