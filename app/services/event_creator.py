"""
Calendar event creator - inserts an event into a stored user's calendar.

Steps for POST /create-event:
1. Require the caller's Google account ID (X-User-Id header)
2. Parse start/end as RFC 3339
3. Load the User row by Google account ID
4. Rebuild a calendar client from the stored tokens
5. Insert the event on Google Calendar with a single guest
6. Store a local Event row mirroring the remote event
7. Return Google's event resource unchanged

There is no compensation step: if the local write fails after Google
accepted the event, the remote event stays and the request reports 500.
"""

import logging
from datetime import datetime, timezone
from typing import Callable, Optional

import httpx
from sqlalchemy.exc import SQLAlchemyError

from app.core.config import Settings
from app.core.datetime_utils import parse_rfc3339
from app.environments.base import EnvironmentError, EnvironmentProvider
from app.environments.google.calendar.client import GoogleCalendarClient
from app.environments.google.calendar.schemas import EventCreateRequest
from app.models.user import User
from app.services.errors import BadRequestError, InternalError, UnauthorizedError
from app.services.persistence import PersistenceGateway


logger = logging.getLogger("calendar_service.services.event_creator")


# Builds a calendar client for a stored user
CalendarClientFactory = Callable[[User], GoogleCalendarClient]


class CalendarEventCreator:
    """
    Creates calendar events for users who logged in through Google.

    Args:
        gateway: Persistence gateway for the current request
        auth_client: Used by the calendar client to refresh expired tokens
        settings: Calendar ID and HTTP timeout
        calendar_client_factory: Override how the calendar client is built
        transport: Optional httpx transport for the default calendar client
    """

    def __init__(
        self,
        gateway: PersistenceGateway,
        auth_client: EnvironmentProvider,
        settings: Settings,
        calendar_client_factory: Optional[CalendarClientFactory] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.gateway = gateway
        self.transport = transport
        self.auth_client = auth_client
        self.settings = settings
        self.calendar_client_factory = calendar_client_factory or self._default_client

    def _default_client(self, user: User) -> GoogleCalendarClient:
        return GoogleCalendarClient(
            access_token=user.access_token,
            refresh_token=user.refresh_token,
            token_expiry=user.token_expiry,
            auth_client=self.auth_client,
            timeout=self.settings.HTTP_TIMEOUT,
            transport=self.transport,
        )

    async def create_event(
        self,
        user_identifier: Optional[str],
        summary: str,
        description: str,
        start: Optional[str],
        end: Optional[str],
        guest_email: str,
    ) -> dict:
        """
        Create an event on the user's calendar and record it locally.

        Args:
            user_identifier: Google account ID of the caller
            summary: Event title
            description: Event description
            start: RFC 3339 start time
            end: RFC 3339 end time
            guest_email: The single attendee to invite

        Returns:
            The event resource Google returned

        Raises:
            UnauthorizedError: If user_identifier is missing
            BadRequestError: If start or end is not a valid RFC 3339 timestamp
            InternalError: If the user is unknown or any downstream step fails
        """
        if not user_identifier:
            logger.warning("user_id not found in header")
            raise UnauthorizedError("user_id not found in header")

        start_time = self._parse_time(start, "start")
        end_time = self._parse_time(end, "end")

        try:
            user = self.gateway.get_user_by_google_id(user_identifier)
        except SQLAlchemyError as e:
            logger.error(f"Failed to retrieve user: {e}")
            raise InternalError("Failed to retrieve user")
        if user is None:
            logger.error(f"Failed to retrieve user: no user with Google account {user_identifier}")
            raise InternalError("Failed to retrieve user")

        request = EventCreateRequest(
            summary=summary,
            description=description,
            start_datetime=start_time,
            end_datetime=end_time,
            guest_email=guest_email,
            timezone="UTC",
        )

        calendar = self.calendar_client_factory(user)
        try:
            created_event = await calendar.insert_event(request, calendar_id=self.settings.CALENDAR_ID)
        except EnvironmentError as e:
            logger.error(f"Unable to create event: {e}")
            raise InternalError("Unable to create event")

        try:
            self.gateway.record_event(
                user=user,
                event_id=created_event["id"],
                summary=summary,
                description=description,
                start=start_time,
                end=end_time,
                guest_email=guest_email,
            )
        except SQLAlchemyError as e:
            logger.error(f"Failed to store event in the database: {e}")
            raise InternalError("Failed to store event in the database")

        return created_event

    @staticmethod
    def _parse_time(value: Optional[str], field_name: str) -> datetime:
        """Parse an RFC 3339 form value into a UTC datetime."""
        try:
            return parse_rfc3339(value or "").astimezone(timezone.utc)
        except ValueError:
            logger.warning(f"Invalid {field_name} time: {value!r}")
            raise BadRequestError(f"Invalid {field_name} time")
