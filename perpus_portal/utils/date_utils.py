"""Date manipulation utilities"""

from datetime import date, datetime, timezone
from typing import Optional


def utc_today() -> date:
    """Current calendar date in UTC"""
    return datetime.now(timezone.utc).date()


def iso_timestamp(moment: datetime | None = None) -> str:
    """UTC timestamp with millisecond precision, e.g. 2024-05-01T08:30:00.123Z"""
    moment = (moment or datetime.now(timezone.utc)).astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def parse_calendar_date(value: object) -> Optional[date]:
    """
    Parse a stored date into its UTC calendar date.

    Accepts plain dates (2024-05-01) and ISO-8601 timestamps; timestamps with
    an offset are converted to UTC first, naive ones are taken as UTC.
    Returns None for anything unparseable.
    """
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    try:
        if len(text) == 10:
            return date.fromisoformat(text)
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc)
    return parsed.date()


def days_between(start: date, end: date) -> int:
    """Whole calendar days from start to end (negative when end is earlier)"""
    return (end - start).days
