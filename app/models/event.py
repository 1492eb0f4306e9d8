"""
Event model - local record of a calendar event created through this service.

Each row mirrors one event inserted into the user's Google Calendar.
event_id is the ID Google assigned; rows are written once and never updated.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base

if TYPE_CHECKING:
    from app.models.user import User


class Event(Base):
    """
    SQLAlchemy ORM model for the 'events' table.
    """

    __tablename__ = "events"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)

    # event_id: Google Calendar event ID (globally unique)
    event_id: Mapped[str] = mapped_column(String(1024), unique=True, index=True, nullable=False)

    # user_id: Owner of the calendar the event was inserted into
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id"), index=True, nullable=False
    )

    # ---------------------------------------------------------------------------
    # EVENT DETAILS (as submitted by the client)
    # ---------------------------------------------------------------------------
    summary: Mapped[str] = mapped_column(Text, nullable=False, default="")
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    start: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    # guest_email: The single invited attendee
    guest_email: Mapped[str] = mapped_column(String(255), nullable=False, default="")

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )

    owner: Mapped["User"] = relationship("User", back_populates="events")

    def __repr__(self) -> str:
        return f"<Event(event_id='{self.event_id}', user_id={self.user_id})>"
