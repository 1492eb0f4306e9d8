"""
Google Calendar Schemas - Data structures for calendar operations.

Reference: https://developers.google.com/calendar/api/v3/reference/events
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.core.datetime_utils import format_rfc3339


class EventTime(BaseModel):
    """
    Event start or end time.

    - dateTime: For timed events (e.g., "2024-01-15T10:00:00Z")
    - date: For all-day events (e.g., "2024-01-15")
    """
    model_config = ConfigDict(populate_by_name=True)

    date_time: Optional[str] = Field(None, alias="dateTime")
    date: Optional[str] = Field(None)
    time_zone: Optional[str] = Field(None, alias="timeZone")


class EventAttendee(BaseModel):
    """A person or resource invited to a calendar event."""
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    # Resources such as rooms come back without an email
    email: Optional[str] = Field(None, description="Attendee's email address")
    display_name: Optional[str] = Field(None, alias="displayName")
    organizer: Optional[bool] = Field(False)
    response_status: Optional[str] = Field(None, alias="responseStatus")


class CalendarEvent(BaseModel):
    """
    A Google Calendar event as returned by events.insert.

    Only the fields the service reads are typed; the raw response is what
    gets returned to API callers.
    """
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str = Field(..., description="Unique event identifier")
    status: Optional[str] = Field(None, description="confirmed, tentative, cancelled")
    html_link: Optional[str] = Field(None, alias="htmlLink")
    summary: Optional[str] = Field(None)
    description: Optional[str] = Field(None)
    start: Optional[EventTime] = Field(None)
    end: Optional[EventTime] = Field(None)
    attendees: Optional[List[EventAttendee]] = Field(None)
    creator: Optional[Dict[str, Any]] = Field(None)
    organizer: Optional[Dict[str, Any]] = Field(None)


class EventCreateRequest(BaseModel):
    """
    Request schema for creating a timed calendar event with one guest.

        EventCreateRequest(
            summary="Standup",
            start_datetime=datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc),
            end_datetime=datetime(2024, 1, 1, 9, 30, tzinfo=timezone.utc),
            guest_email="b@x.com",
        )
    """
    summary: str = Field("", description="Event title/summary")
    description: str = Field("", description="Event description")
    start_datetime: datetime = Field(..., description="Start time (timezone-aware)")
    end_datetime: datetime = Field(..., description="End time (timezone-aware)")
    guest_email: str = Field("", description="Single invited attendee")
    timezone: str = Field(default="UTC", description="Timezone name sent to Google")

    def to_api_body(self) -> dict:
        """Build the events.insert request body."""
        body: dict = {
            "summary": self.summary,
            "description": self.description,
            "start": {
                "dateTime": format_rfc3339(self.start_datetime),
                "timeZone": self.timezone,
            },
            "end": {
                "dateTime": format_rfc3339(self.end_datetime),
                "timeZone": self.timezone,
            },
        }
        # One attendee at most; an empty guest means no attendees
        if self.guest_email:
            body["attendees"] = [{"email": self.guest_email}]
        return body
