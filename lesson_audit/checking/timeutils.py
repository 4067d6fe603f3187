"""
Date and time helpers for the compliance checker.

Lesson times arrive as ``HH:MM`` strings plus a calendar date, while
schedule windows arrive as absolute instants. These helpers normalize
both sides into comparable ``datetime`` values without mutating anything.
"""

import logging
import re
from datetime import date, datetime, time
from typing import Optional, Union


logger = logging.getLogger(__name__)


# Accepted shapes for a lesson's calendar date at the ingestion boundary
FullDateInput = Union[date, datetime, str, None]

TIME_OF_DAY_PATTERN = re.compile(r'^(\d{1,2}):(\d{2})$')

PERIOD_FORMAT = "%Y-%m-%d %H:%M"


def _parse_iso_datetime(text: str) -> datetime:
    """
    ``datetime.fromisoformat`` that also accepts a trailing ``Z`` (UTC).

    Examples:
        >>> _parse_iso_datetime("2025-04-17T15:00:00.000Z")
        datetime.datetime(2025, 4, 17, 15, 0, tzinfo=datetime.timezone.utc)
    """
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


def normalize_full_date(value: FullDateInput) -> Optional[date]:
    """
    Normalize a lesson date to ``datetime.date``.

    Offset-aware values (including a ``Z`` suffix) are converted to local
    time first, the same way schedule boundaries are.

    Args:
        value: A date, datetime, ISO-8601 string or None

    Returns:
        Calendar date, or None when the value cannot be compared

    Examples:
        >>> normalize_full_date("2025-04-18")
        datetime.date(2025, 4, 18)
        >>> normalize_full_date("2025-04-18T00:00:00")
        datetime.date(2025, 4, 18)
        >>> normalize_full_date("not a date") is None
        True
    """
    if value is None:
        return None

    # datetime is a subclass of date, check it first
    if isinstance(value, datetime):
        return to_local_naive(value).date()

    if isinstance(value, date):
        return value

    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return date.fromisoformat(text)
        except ValueError:
            pass
        try:
            return to_local_naive(_parse_iso_datetime(text)).date()
        except ValueError:
            logger.debug(f"Unparseable lesson date: {value!r}")
            return None

    logger.debug(f"Unsupported lesson date type: {type(value).__name__}")
    return None


def parse_time_of_day(value: str) -> time:
    """
    Parse a ``H:MM`` or ``HH:MM`` 24-hour string.

    Raises:
        ValueError: If the string is not a valid time of day
    """
    match = TIME_OF_DAY_PATTERN.match(value.strip()) if isinstance(value, str) else None
    if not match:
        raise ValueError(f"Invalid time of day: {value!r} (expected HH:MM)")

    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23 or minute > 59:
        raise ValueError(f"Time of day out of range: {value!r}")

    return time(hour, minute)


def is_valid_time_of_day(value: str) -> bool:
    """Check whether ``value`` parses as a time of day."""
    try:
        parse_time_of_day(value)
    except ValueError:
        return False
    return True


def anchor(day: date, time_of_day: str) -> datetime:
    """
    Combine a calendar date and a ``HH:MM`` string into a new instant.

    Examples:
        >>> anchor(date(2025, 4, 18), "13:40")
        datetime.datetime(2025, 4, 18, 13, 40)
    """
    return datetime.combine(day, parse_time_of_day(time_of_day))


def to_local_naive(value: datetime) -> datetime:
    """Convert an aware datetime to naive local wall-clock time."""
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


def parse_instant(value: Union[datetime, str]) -> datetime:
    """
    Parse a schedule boundary into a naive local datetime.

    Raises:
        ValueError: If the value is neither a datetime nor an ISO string
    """
    if isinstance(value, datetime):
        return to_local_naive(value)

    if isinstance(value, str):
        return to_local_naive(_parse_iso_datetime(value.strip()))

    raise ValueError(
        f"Schedule time must be a datetime or ISO string, got {type(value).__name__}"
    )


def minutes_between(start_time: str, end_time: str) -> int:
    """Clock difference in minutes between two same-day ``HH:MM`` strings."""
    start = parse_time_of_day(start_time)
    end = parse_time_of_day(end_time)
    return (end.hour * 60 + end.minute) - (start.hour * 60 + start.minute)


def windows_overlap(
    lesson_start: datetime,
    lesson_end: datetime,
    schedule_start: datetime,
    schedule_end: datetime
) -> bool:
    """
    Check whether a lesson window overlaps a schedule window.

    Windows that only touch at an endpoint do not overlap.
    """
    return not (lesson_end <= schedule_start or lesson_start >= schedule_end)


def format_period(start: datetime, end: datetime) -> str:
    """
    Format a schedule window for display.

    Examples:
        >>> format_period(datetime(2025, 12, 16, 14, 30), datetime(2025, 12, 16, 16, 30))
        '2025-12-16 14:30 ~ 2025-12-16 16:30'
    """
    return f"{start.strftime(PERIOD_FORMAT)} ~ {end.strftime(PERIOD_FORMAT)}"
