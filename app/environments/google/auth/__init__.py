"""
Google Auth Module - OAuth 2.0 Authentication for Google Services

OAuth 2.0 Flow Overview:
========================
1. Browser hits /google-login
2. Backend generates authorization URL with calendar + profile scopes
3. User grants permissions on Google's consent screen
4. Google redirects back to /google/redirect with an authorization code
5. Backend exchanges code for access + refresh tokens
6. Tokens are stored on the User row for later calendar calls
"""

from app.environments.google.auth.client import GoogleAuthClient
from app.environments.google.auth.schemas import (
    CALENDAR_SCOPES,
    PROFILE_SCOPES,
    GoogleTokenResponse,
    GoogleUserInfo,
)

__all__ = [
    "GoogleAuthClient",
    "GoogleTokenResponse",
    "GoogleUserInfo",
    "CALENDAR_SCOPES",
    "PROFILE_SCOPES",
]
