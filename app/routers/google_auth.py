"""
Google Auth Router - OAuth 2.0 endpoints for Google login.

Endpoints:
==========
- GET /google-login     → Redirect to Google OAuth consent screen
- GET /google/redirect  → Handle OAuth callback, store tokens, set session

OAuth Flow:
===========
1. Browser opens GET /google-login
2. Backend redirects to Google's consent screen
3. User grants calendar + profile permissions
4. Google redirects to /google/redirect with code
5. Backend exchanges code for tokens, stores them on the User row
6. Browser is redirected to Google Calendar with a session cookie set
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import RedirectResponse

from app.core.config import Settings
from app.deps import get_oauth_flow, get_settings
from app.services.oauth_flow import OAuthFlowController


logger = logging.getLogger("calendar_service.routers.google_auth")


router = APIRouter(tags=["google-auth"])


@router.get("/google-login")
async def google_login(flow: OAuthFlowController = Depends(get_oauth_flow)):
    """
    Initiate Google OAuth login flow.

    Returns:
        302 redirect to Google's OAuth consent screen
    """
    auth_url = flow.start_login()
    return RedirectResponse(url=auth_url, status_code=status.HTTP_302_FOUND)


@router.get("/google/redirect")
async def google_callback(
    request: Request,
    code: Optional[str] = Query(None, description="Authorization code from Google"),
    flow: OAuthFlowController = Depends(get_oauth_flow),
    settings: Settings = Depends(get_settings),
):
    """
    Handle Google OAuth callback.

    Args:
        code: Authorization code from Google

    Returns:
        302 redirect to the Google Calendar web UI, with the session cookie

    Errors:
        400 if code is missing, 500 if any downstream step fails
    """
    result = await flow.handle_callback(
        code=code,
        session_id=request.cookies.get(settings.SESSION_COOKIE_NAME),
    )

    response = RedirectResponse(url=result.redirect_url, status_code=status.HTTP_302_FOUND)
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=result.session_id,
        max_age=settings.SESSION_TTL_MINUTES * 60,
        httponly=True,
        samesite="lax",
    )
    return response
