"""
Persistence gateway - User and Event records keyed by external identifiers.

Users are matched by google_id (the Google account ID), events by the ID
Google Calendar assigned. The gateway commits its own writes and rolls the
session back when a write fails, so callers only see SQLAlchemyError.
"""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.event import Event
from app.models.user import ZERO_TIME, User


logger = logging.getLogger("calendar_service.services.persistence")


class PersistenceGateway:
    """
    Reads and writes the users and events tables for one request.

    Usage:
        gateway = PersistenceGateway(db)
        user = gateway.find_or_create_user("abc123", "a@x.com", access_token="ya29...")
    """

    def __init__(self, db: Session):
        self.db = db

    # -------------------------------------------------------------------------
    # USERS
    # -------------------------------------------------------------------------

    def get_user_by_google_id(self, google_id: str) -> Optional[User]:
        """Return the user with this Google account ID, or None."""
        return self.db.scalars(select(User).where(User.google_id == google_id)).first()

    def find_or_create_user(
        self,
        google_id: str,
        google_email: str,
        access_token: str,
        refresh_token: Optional[str] = None,
        token_expiry: Optional[datetime] = None,
    ) -> User:
        """
        Insert or update the user matched by google_id.

        Matching key: google_id only. On a match the email and token fields
        are overwritten, except that an empty refresh token or a missing
        expiry keeps the stored value (Google omits the refresh token on
        repeat consents). A new user without an expiry gets ZERO_TIME.

        Returns:
            The stored User

        Raises:
            SQLAlchemyError: If the write fails (the session is rolled back)
        """
        try:
            user = self.get_user_by_google_id(google_id)

            if user is None:
                user = User(
                    google_id=google_id,
                    google_email=google_email,
                    access_token=access_token,
                    refresh_token=refresh_token or "",
                    token_expiry=token_expiry or ZERO_TIME,
                )
                self.db.add(user)
                logger.info(f"Creating user for Google account {google_id}")
            else:
                user.google_email = google_email
                user.access_token = access_token
                if refresh_token:
                    user.refresh_token = refresh_token
                if token_expiry is not None:
                    user.token_expiry = token_expiry
                logger.info(f"Updating tokens for Google account {google_id}")

            self.db.commit()
            self.db.refresh(user)
            return user
        except SQLAlchemyError:
            self.db.rollback()
            raise

    # -------------------------------------------------------------------------
    # EVENTS
    # -------------------------------------------------------------------------

    def record_event(
        self,
        user: User,
        event_id: str,
        summary: str,
        description: str,
        start: datetime,
        end: datetime,
        guest_email: str,
    ) -> Event:
        """
        Store the local copy of an event created on Google Calendar.

        Raises:
            SQLAlchemyError: If the write fails (the session is rolled back)
        """
        event = Event(
            user_id=user.id,
            event_id=event_id,
            summary=summary,
            description=description,
            start=start,
            end=end,
            guest_email=guest_email,
        )
        try:
            self.db.add(event)
            self.db.commit()
            self.db.refresh(event)
        except SQLAlchemyError:
            self.db.rollback()
            raise

        logger.info(f"Stored event {event_id} for user {user.id}")
        return event

    def get_event_by_remote_id(self, event_id: str) -> Optional[Event]:
        """Return the local event with this Google Calendar ID, or None."""
        return self.db.scalars(select(Event).where(Event.event_id == event_id)).first()
