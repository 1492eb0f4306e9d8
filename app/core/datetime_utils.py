"""
RFC 3339 helpers shared by the HTTP layer and the calendar client.

- parse_rfc3339: Parse "2024-01-01T09:00:00Z" / "...+02:00" into an aware datetime
- format_rfc3339: Format an aware datetime the way Google Calendar expects
"""

import re
from datetime import datetime, timezone


# YYYY-MM-DDTHH:MM:SS[.frac] followed by Z or +HH:MM / -HH:MM
RFC3339_PATTERN = re.compile(
    r"\d{4}-\d{2}-\d{2}[Tt]\d{2}:\d{2}:\d{2}(\.\d+)?([Zz]|[+-]\d{2}:\d{2})"
)


def parse_rfc3339(value: str) -> datetime:
    """
    Parse an RFC 3339 timestamp.

    A timezone designator is required ("Z" or "+HH:MM"), naive or
    date-only strings are rejected.

    Args:
        value: Timestamp string such as "2024-01-01T09:00:00Z"

    Returns:
        Timezone-aware datetime

    Raises:
        ValueError: If the value is empty, malformed or lacks an offset
    """
    text = (value or "").strip()
    if not RFC3339_PATTERN.fullmatch(text):
        raise ValueError(f"Not an RFC 3339 timestamp: {value!r}")

    if text[-1] in ("Z", "z"):
        text = text[:-1] + "+00:00"

    # Range errors (month 13, hour 25) still raise ValueError here
    return datetime.fromisoformat(text)


def format_rfc3339(value: datetime) -> str:
    """
    Format an aware datetime as RFC 3339, using "Z" for UTC.

    Naive datetimes are treated as UTC.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)

    text = value.isoformat()
    if value.utcoffset().total_seconds() == 0 and text.endswith("+00:00"):
        text = text[: -len("+00:00")] + "Z"
    return text
