"""
Events Router - create events on the caller's Google Calendar.

Endpoints:
==========
- POST /create-event → Insert an event, return Google's event resource

Request:
    Header  X-User-Id: Google account ID of a user who logged in
    Form    summary, description, start (RFC 3339), end (RFC 3339), guest

Errors:
    401 missing X-User-Id, 400 malformed start/end, 500 downstream failure
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Form
from fastapi.responses import JSONResponse

from app.deps import get_event_creator, get_user_identifier
from app.services.event_creator import CalendarEventCreator


logger = logging.getLogger("calendar_service.routers.events")


router = APIRouter(tags=["events"])


@router.post("/create-event")
async def create_event(
    user_identifier: Optional[str] = Depends(get_user_identifier),
    summary: str = Form(""),
    description: str = Form(""),
    start: str = Form(""),
    end: str = Form(""),
    guest: str = Form(""),
    creator: CalendarEventCreator = Depends(get_event_creator),
):
    """
    Create a calendar event with a single guest.

    Returns:
        200 with the created event as Google returned it
    """
    created_event = await creator.create_event(
        user_identifier=user_identifier,
        summary=summary,
        description=description,
        start=start,
        end=end,
        guest_email=guest,
    )
    return JSONResponse(content=created_event)
