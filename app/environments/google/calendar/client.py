"""
Google Calendar API Client - Insert events on behalf of a stored user.

The client is rebuilt for each request from the tokens saved on the User
row. Before a call it checks the stored expiry: if the access token has
expired and a refresh token is available it asks Google for a new access
token, holds it in memory for this client only, and carries on. A zero
expiry means the token is treated as non-expiring.

API Reference:
==============
- Events API: https://developers.google.com/calendar/api/v3/reference/events

Usage Example:
==============
    client = GoogleCalendarClient(
        access_token=user.access_token,
        refresh_token=user.refresh_token,
        token_expiry=user.token_expiry,
        auth_client=auth_client,
    )
    created = await client.insert_event(EventCreateRequest(...))
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import httpx

from app.environments.base import APIError, EnvironmentProvider, ResponseDecodeError, TokenExpiredError
from app.environments.google.calendar.schemas import EventCreateRequest


logger = logging.getLogger("calendar_service.environments.google.calendar")


# Tokens this close to expiry are refreshed before use
EXPIRY_DELTA = timedelta(seconds=10)


class GoogleCalendarClient:
    """
    Google Calendar API client.

    Attributes:
        access_token: Google OAuth access token with calendar scope
        refresh_token: Refresh token used when access_token has expired
        token_expiry: Expiry of access_token (None or year 1 = never)
    """

    service_name = "calendar"

    # Google Calendar API base URL
    BASE_URL = "https://www.googleapis.com/calendar/v3"

    def __init__(
        self,
        access_token: str,
        refresh_token: Optional[str] = None,
        token_expiry: Optional[datetime] = None,
        auth_client: Optional[EnvironmentProvider] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.access_token = access_token
        self.refresh_token = refresh_token
        self.token_expiry = token_expiry
        self.auth_client = auth_client
        self.timeout = timeout
        self._transport = transport

    # -------------------------------------------------------------------------
    # TOKEN HANDLING
    # -------------------------------------------------------------------------

    def is_token_expired(self) -> bool:
        """
        True when the stored access token can no longer be used.

        An empty access token counts as expired. A missing or zero expiry
        (year 1) never expires.
        """
        if not self.access_token:
            return True
        if self.token_expiry is None or self.token_expiry.year <= 1:
            return False

        expiry = self.token_expiry
        if expiry.tzinfo is None:
            # SQLite hands back naive datetimes; values are stored in UTC
            expiry = expiry.replace(tzinfo=timezone.utc)
        return datetime.now(timezone.utc) >= expiry - EXPIRY_DELTA

    async def _ensure_token(self) -> str:
        """Return a usable access token, refreshing it once if needed."""
        if not self.is_token_expired():
            return self.access_token

        if not self.refresh_token or self.auth_client is None:
            logger.error("Calendar API: access token expired and no refresh token available")
            raise TokenExpiredError("Access token expired and cannot be refreshed")

        tokens = await self.auth_client.refresh_access_token(self.refresh_token)
        self.access_token = tokens.access_token
        self.refresh_token = tokens.refresh_token or self.refresh_token
        self.token_expiry = tokens.expires_at
        return self.access_token

    def _get_headers(self, access_token: str) -> dict:
        """Get authorization headers for API requests."""
        return {
            "Authorization": f"Bearer {access_token}",
            "Accept": "application/json",
        }

    # -------------------------------------------------------------------------
    # HTTP
    # -------------------------------------------------------------------------

    async def _make_post_request(self, endpoint: str, json_body: dict) -> dict:
        """
        Make an authenticated POST request to the Calendar API.

        Args:
            endpoint: API endpoint path
            json_body: JSON body to send

        Returns:
            Parsed JSON response

        Raises:
            APIError: If the request fails
            ResponseDecodeError: If the response body is not a JSON object
            TokenExpiredError: If the token expired and could not be refreshed
        """
        access_token = await self._ensure_token()
        url = f"{self.BASE_URL}{endpoint}"

        async with httpx.AsyncClient(transport=self._transport, timeout=self.timeout) as client:
            try:
                response = await client.post(
                    url=url,
                    headers=self._get_headers(access_token),
                    json=json_body,
                )
            except httpx.RequestError as e:
                logger.error(f"Network error in Calendar API: {e}")
                raise APIError(f"Network error: {e}")

        if response.status_code == 401:
            logger.error("Calendar API: Unauthorized (token may be expired)")
            raise APIError(
                "Unauthorized - access token may be expired",
                status_code=401,
                response=response.text,
            )

        if response.status_code == 403:
            logger.error("Calendar API: Forbidden (calendar scope may be missing)")
            raise APIError(
                "Forbidden - calendar scope may not be granted",
                status_code=403,
                response=response.text,
            )

        if response.status_code not in (200, 201):
            error_detail = response.text
            logger.error(f"Calendar API error: {response.status_code} - {error_detail}")
            raise APIError(
                f"API request failed: {error_detail}",
                status_code=response.status_code,
                response=error_detail,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise ResponseDecodeError(f"Calendar API returned invalid JSON: {e}")
        if not isinstance(data, dict):
            raise ResponseDecodeError("Calendar API returned a non-object body")
        return data

    # -------------------------------------------------------------------------
    # EVENT CREATION
    # -------------------------------------------------------------------------

    async def insert_event(
        self,
        request: EventCreateRequest,
        calendar_id: str = "primary",
    ) -> dict:
        """
        Create a timed calendar event.

        Args:
            request: EventCreateRequest with event details
            calendar_id: Calendar identifier (default: "primary")

        Returns:
            The full event resource Google returned, as a dict

        Raises:
            APIError: If event creation fails
            ResponseDecodeError: If the response has no event ID
        """
        event_body = request.to_api_body()

        logger.info(
            "Creating calendar event",
            extra={"calendar_id": calendar_id, "has_guest": bool(request.guest_email)},
        )

        response_data = await self._make_post_request(
            endpoint=f"/calendars/{calendar_id}/events",
            json_body=event_body,
        )

        # Only the ID is required; the rest of the resource is passed through as-is
        event_id = response_data.get("id")
        if not isinstance(event_id, str) or not event_id:
            raise ResponseDecodeError("Created event has no usable ID")

        logger.info(f"Created event: {event_id}")

        return response_data
