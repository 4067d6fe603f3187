"""
Lesson and schedule record validators.

Validates raw payloads coming out of the ingestion adapters before they
are turned into model objects.
"""

from datetime import datetime
from typing import Any, Dict

from .validators import Validator, ValidationResult
from ..checking.timeutils import minutes_between, normalize_full_date, parse_instant


class LessonRecordValidator(Validator):
    """
    Validator for raw lesson payloads.

    Validates:
    - Required fields (date, startTime, endTime, duration)
    - Time-of-day format
    - Duration type and sign
    - Consistency warnings (duration vs clock difference, unreadable fullDate)

    Examples:
        >>> validator = LessonRecordValidator()
        >>> result = validator.validate({
        ...     "date": "4. 18. (금)",
        ...     "startTime": "13:40",
        ...     "endTime": "14:20",
        ...     "duration": 40,
        ...     "fullDate": "2025-04-18"
        ... })
        >>> result.is_valid
        True
    """

    REQUIRED_FIELDS = ["date", "startTime", "endTime", "duration"]

    def validate(self, data: Dict[str, Any]) -> ValidationResult:
        result = ValidationResult(is_valid=True)

        if not isinstance(data, dict):
            return result.add_error(
                f"Lesson record must be a mapping, got {type(data).__name__}"
            )

        for error in self.validate_required_fields(data, self.REQUIRED_FIELDS):
            result.add_error(error)

        if not result.is_valid:
            return result

        error = self.validate_string(data["date"], "date")
        if error:
            result.add_error(error)

        for name in ("startTime", "endTime"):
            error = self.validate_time_of_day(data[name], name)
            if error:
                result.add_error(error)

        error = self.validate_non_negative_integer(data["duration"], "duration")
        if error:
            result.add_error(error)

        if not result.is_valid:
            return result

        clock_minutes = minutes_between(data["startTime"], data["endTime"])
        if clock_minutes != data["duration"]:
            result.add_warning(
                f"Duration {data['duration']} min differs from "
                f"{data['startTime']}~{data['endTime']} ({clock_minutes} min)"
            )

        full_date = data.get("fullDate")
        if full_date is not None and normalize_full_date(full_date) is None:
            result.add_warning(
                f"Unreadable fullDate: {full_date!r} (excluded from date checks)"
            )

        return result


class ScheduleRecordValidator(Validator):
    """
    Validator for raw duty/trip schedule payloads.

    Examples:
        >>> validator = ScheduleRecordValidator()
        >>> result = validator.validate({
        ...     "startTime": "2025-12-16T14:30:00",
        ...     "endTime": "2025-12-16T16:30:00",
        ...     "type": "연가",
        ...     "detail": "개인 사유"
        ... })
        >>> result.is_valid
        True
    """

    REQUIRED_FIELDS = ["startTime", "endTime", "type"]

    def validate(self, data: Dict[str, Any]) -> ValidationResult:
        result = ValidationResult(is_valid=True)

        if not isinstance(data, dict):
            return result.add_error(
                f"Schedule record must be a mapping, got {type(data).__name__}"
            )

        for error in self.validate_required_fields(data, self.REQUIRED_FIELDS):
            result.add_error(error)

        if not result.is_valid:
            return result

        instants = {}
        for name in ("startTime", "endTime"):
            try:
                instants[name] = parse_instant(data[name])
            except ValueError as e:
                result.add_error(f"Invalid {name}: {e}")

        error = self.validate_string(data["type"], "type")
        if error:
            result.add_error(error)

        detail = data.get("detail")
        if detail is not None:
            error = self.validate_string(detail, "detail")
            if error:
                result.add_error(error)

        if len(instants) == 2:
            start: datetime = instants["startTime"]
            end: datetime = instants["endTime"]
            if end < start:
                result.add_warning(
                    f"Schedule ends before it starts: {start.isoformat()} > {end.isoformat()}"
                )

        return result
