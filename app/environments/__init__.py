"""
Environments Module - integrations with remote providers.

Only Google is implemented: OAuth login and Calendar event creation.
"""

from app.environments.base import (
    APIError,
    AuthenticationError,
    EnvironmentError,
    EnvironmentProvider,
    OAuthTokens,
    ResponseDecodeError,
    TokenExpiredError,
    UserInfo,
)

__all__ = [
    "EnvironmentProvider",
    "EnvironmentError",
    "AuthenticationError",
    "APIError",
    "ResponseDecodeError",
    "TokenExpiredError",
    "OAuthTokens",
    "UserInfo",
]
