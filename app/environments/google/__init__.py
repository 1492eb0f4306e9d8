"""
Google Environment Module - Google OAuth and Calendar integration.

Architecture:
=============
google/
├── __init__.py           # Module exports
├── auth/                 # OAuth authorization code flow
│   ├── client.py         # GoogleAuthClient
│   └── schemas.py        # Token / userinfo structures, scopes
└── calendar/             # Google Calendar API
    ├── client.py         # GoogleCalendarClient (event insert)
    └── schemas.py        # Event structures

Usage:
======
    from app.environments.google import GoogleAuthClient, GoogleCalendarClient

    auth_client = GoogleAuthClient(client_id, client_secret, redirect_uri)
    auth_url = auth_client.get_authorization_url(scopes=CALENDAR_SCOPES, state="state-token")

    tokens = await auth_client.exchange_code_for_tokens(code)

    calendar = GoogleCalendarClient(access_token=tokens.access_token, auth_client=auth_client)
    created = await calendar.insert_event(request)
"""

from app.environments.google.auth import CALENDAR_SCOPES, PROFILE_SCOPES, GoogleAuthClient
from app.environments.google.calendar import CalendarEvent, EventCreateRequest, GoogleCalendarClient

__all__ = [
    "GoogleAuthClient",
    "GoogleCalendarClient",
    "CalendarEvent",
    "EventCreateRequest",
    "CALENDAR_SCOPES",
    "PROFILE_SCOPES",
]
