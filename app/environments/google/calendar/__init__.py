"""
Google Calendar Module - Calendar API Integration

Inserts events into a user's calendar using the tokens stored at login.
"""

from app.environments.google.calendar.client import GoogleCalendarClient
from app.environments.google.calendar.schemas import (
    CalendarEvent,
    EventAttendee,
    EventCreateRequest,
    EventTime,
)

__all__ = [
    "GoogleCalendarClient",
    "CalendarEvent",
    "EventAttendee",
    "EventCreateRequest",
    "EventTime",
]
