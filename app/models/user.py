"""
User model - a Google account that has logged in through the OAuth flow.

One row per Google account, matched by google_id. The row is created on the
first successful login and its token fields are overwritten on every later
login. Rows are never deleted by this service.
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base


# Stored in token_expiry when Google did not report an expiry.
# A zero expiry means "does not expire" to the calendar client.
ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)


class User(Base):
    """
    SQLAlchemy ORM model for the 'users' table.
    """

    __tablename__ = "users"

    # ---------------------------------------------------------------------------
    # PRIMARY KEY
    # ---------------------------------------------------------------------------
    # id: Internal identifier, referenced by events.user_id
    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)

    # ---------------------------------------------------------------------------
    # GOOGLE ACCOUNT
    # ---------------------------------------------------------------------------
    # google_id: Google's stable account ID (userinfo "id")
    # - unique: the find-or-create matching key
    google_id: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)

    # google_email: Account email reported by Google
    google_email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)

    # ---------------------------------------------------------------------------
    # TOKEN DATA
    # ---------------------------------------------------------------------------
    # Text type to handle long tokens
    access_token: Mapped[str] = mapped_column(Text, nullable=False)

    # refresh_token: Empty string when Google did not issue one
    refresh_token: Mapped[str] = mapped_column(Text, nullable=False, default="")

    # token_expiry: When access_token expires, ZERO_TIME if unknown
    token_expiry: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=ZERO_TIME
    )

    # ---------------------------------------------------------------------------
    # TIMESTAMPS
    # ---------------------------------------------------------------------------
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    # ---------------------------------------------------------------------------
    # RELATIONSHIPS
    # ---------------------------------------------------------------------------
    events: Mapped[list["Event"]] = relationship("Event", back_populates="owner")

    def __repr__(self) -> str:
        return f"<User(id={self.id}, google_id='{self.google_id}')>"
