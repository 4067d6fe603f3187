"""
Lesson and schedule data models.

Raw payloads produced by the ingestion adapters are described with
TypedDicts; the checker works on the frozen dataclasses built from them.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Dict, TypedDict, Union

from ..checking.timeutils import FullDateInput, parse_instant
from ..validation.record_validators import LessonRecordValidator, ScheduleRecordValidator
from ..validation.validators import MalformedRecordError


logger = logging.getLogger(__name__)


class LessonPayload(TypedDict, total=False):
    """
    Lesson structure returned by document extraction.

    Examples:
        >>> lesson: LessonPayload = {
        ...     "date": "4. 18. (금)",
        ...     "startTime": "13:40",
        ...     "endTime": "14:20",
        ...     "duration": 40,
        ...     "fullDate": "2025-04-18"
        ... }
    """

    date: str
    startTime: str
    endTime: str
    duration: int
    fullDate: Union[date, str, None]


class SchedulePayload(TypedDict, total=False):
    """Schedule structure returned by spreadsheet extraction."""

    startTime: Union[datetime, str]
    endTime: Union[datetime, str]
    type: str
    detail: str


_lesson_validator = LessonRecordValidator()
_schedule_validator = ScheduleRecordValidator()


@dataclass(frozen=True)
class LessonRecord:
    """
    One supplementary lesson taken from a lesson log.

    Attributes:
        date: Display date as written in the log (e.g. "4. 18. (금)")
        start_time: Start time of day, "HH:MM"
        end_time: End time of day, "HH:MM"
        duration: Lesson length in minutes, trusted as given
        full_date: Calendar date as delivered by extraction; may be a
            date, an ISO string or None
    """

    date: str
    start_time: str
    end_time: str
    duration: int
    full_date: FullDateInput = None

    @property
    def time_range(self) -> str:
        """Display form of the lesson window, e.g. "13:40~14:20"."""
        return f"{self.start_time}~{self.end_time}"

    @classmethod
    def from_dict(cls, data: LessonPayload, index: int = 0) -> 'LessonRecord':
        """
        Create a lesson from an extraction payload.

        Args:
            data: Payload with date/startTime/endTime/duration/fullDate keys
            index: Position in the input sequence, used in error messages

        Returns:
            LessonRecord instance

        Raises:
            MalformedRecordError: If required fields are missing or mistyped
        """
        result = _lesson_validator.validate(data)
        if not result.is_valid:
            raise MalformedRecordError("lesson", index, result.errors)

        if result.has_warnings:
            logger.debug(f"Lesson {index}: {result.get_summary()}")

        return cls(
            date=data["date"],
            start_time=data["startTime"],
            end_time=data["endTime"],
            duration=data["duration"],
            full_date=data.get("fullDate")
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert back to the extraction payload shape."""
        full_date = self.full_date
        if isinstance(full_date, date):
            full_date = full_date.isoformat()

        return {
            "date": self.date,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "duration": self.duration,
            "fullDate": full_date
        }


@dataclass(frozen=True)
class ScheduleRecord:
    """
    An approved duty-status or business-trip window.

    Attributes:
        start_time: Window start (local wall-clock)
        end_time: Window end (local wall-clock)
        type: Duty-status name or trip destination
        detail: Reason or purpose
    """

    start_time: datetime
    end_time: datetime
    type: str
    detail: str = ""

    @classmethod
    def from_dict(cls, data: SchedulePayload, index: int = 0) -> 'ScheduleRecord':
        """
        Create a schedule from a raw payload.

        Raises:
            MalformedRecordError: If the payload cannot be interpreted
        """
        result = _schedule_validator.validate(data)
        if not result.is_valid:
            raise MalformedRecordError("schedule", index, result.errors)

        if result.has_warnings:
            logger.debug(f"Schedule {index}: {result.get_summary()}")

        return cls(
            start_time=parse_instant(data["startTime"]),
            end_time=parse_instant(data["endTime"]),
            type=data["type"],
            detail=data.get("detail") or ""
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-friendly dictionary."""
        return {
            "startTime": self.start_time.isoformat(),
            "endTime": self.end_time.isoformat(),
            "type": self.type,
            "detail": self.detail
        }

