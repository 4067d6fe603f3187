"""
Compliance checking engine for supplementary lesson logs.

Rules applied to every lesson, in input order:
1. Duration: a session must last at least ``min_session_minutes``.
2. Consecutive sessions: two same-day sessions where the first ends exactly
   when the second starts must last at least ``min_consecutive_minutes``
   together. Only the immediately preceding lesson is considered.
3. Duty conflicts: a session must not overlap an approved duty window.
4. Trip conflicts: a session must not overlap an approved business trip.

Lessons whose calendar date cannot be read still go through the duration
rule but are skipped by the date-dependent rules 2-4.
"""

import logging
from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Any, List, Mapping, Optional, Sequence, Union

from .policy import CheckPolicy
from .timeutils import (
    anchor,
    format_period,
    normalize_full_date,
    to_local_naive,
    windows_overlap,
)
from ..models.lesson import LessonRecord, ScheduleRecord
from ..models.report import (
    ConflictIssue,
    ConflictType,
    ConsecutiveIssue,
    DurationIssue,
    LessonDetail,
    ViolationReport,
)
from ..validation.validators import MalformedRecordError


logger = logging.getLogger(__name__)


LessonInput = Union[LessonRecord, Mapping[str, Any]]
ScheduleInput = Union[ScheduleRecord, Mapping[str, Any]]

_CONFLICT_LABELS = {
    ConflictType.DUTY: "Duty conflict",
    ConflictType.BUSINESS_TRIP: "Business trip conflict",
}


@dataclass(frozen=True)
class _CheckedLesson:
    """Lesson paired with its normalized calendar date."""
    record: LessonRecord
    day: Optional[date]


def _coerce_lesson(item: LessonInput, index: int) -> LessonRecord:
    if isinstance(item, LessonRecord):
        # Re-validate hand-built records the same way as raw payloads
        return LessonRecord.from_dict(item.to_dict(), index)
    if isinstance(item, Mapping):
        return LessonRecord.from_dict(dict(item), index)
    raise MalformedRecordError(
        "lesson", index, [f"Unsupported lesson type: {type(item).__name__}"]
    )


def _coerce_schedule(item: ScheduleInput, index: int) -> ScheduleRecord:
    if isinstance(item, ScheduleRecord):
        if not isinstance(item.start_time, datetime) or not isinstance(item.end_time, datetime):
            raise MalformedRecordError(
                "schedule", index, ["startTime and endTime must be datetimes"]
            )
        return replace(
            item,
            start_time=to_local_naive(item.start_time),
            end_time=to_local_naive(item.end_time)
        )
    if isinstance(item, Mapping):
        return ScheduleRecord.from_dict(dict(item), index)
    raise MalformedRecordError(
        "schedule", index, [f"Unsupported schedule type: {type(item).__name__}"]
    )


class ComplianceChecker:
    """
    Stateless checker turning lessons and schedules into a violation report.

    Examples:
        >>> checker = ComplianceChecker()
        >>> report = checker.check(lessons, duty_schedules, trip_schedules)
        >>> for issue in report.duration_issues:
        ...     print(issue.date, issue.shortage)

        >>> # Stricter policy for a what-if review
        >>> checker = ComplianceChecker(CheckPolicy(min_session_minutes=45))
    """

    def __init__(self, policy: Optional[CheckPolicy] = None):
        self.policy = policy or CheckPolicy()

    def check(
        self,
        lessons: Sequence[LessonInput],
        duty_schedules: Sequence[ScheduleInput],
        trip_schedules: Sequence[ScheduleInput]
    ) -> ViolationReport:
        """
        Check lessons against the policy and the two schedule lists.

        Args:
            lessons: Lessons in chronological order
            duty_schedules: Approved duty-status windows
            trip_schedules: Approved business-trip windows

        Returns:
            Fully materialized ViolationReport

        Raises:
            MalformedRecordError: If an input record is structurally invalid
        """
        checked = [
            _CheckedLesson(record, normalize_full_date(record.full_date))
            for record in (
                _coerce_lesson(item, index) for index, item in enumerate(lessons)
            )
        ]
        duty = [_coerce_schedule(item, index) for index, item in enumerate(duty_schedules)]
        trips = [_coerce_schedule(item, index) for index, item in enumerate(trip_schedules)]

        duration_issues: List[DurationIssue] = []
        consecutive_issues: List[ConsecutiveIssue] = []
        conflict_issues: List[ConflictIssue] = []
        details: List[LessonDetail] = []

        for index, current in enumerate(checked):
            lesson = current.record
            issues: List[str] = []

            duration_issue = self._check_duration(lesson)
            if duration_issue:
                duration_issues.append(duration_issue)
                issues.append(
                    f"Lesson too short: {lesson.duration} min "
                    f"(under {self.policy.min_session_minutes} min)"
                )

            if index > 0:
                consecutive_issue = self._check_consecutive(checked[index - 1], current)
                if consecutive_issue:
                    consecutive_issues.append(consecutive_issue)
                    issues.append(
                        f"Consecutive sessions too short: {consecutive_issue.total_duration} min "
                        f"(under {self.policy.min_consecutive_minutes} min)"
                    )

            for conflict_type, schedules in (
                (ConflictType.DUTY, duty),
                (ConflictType.BUSINESS_TRIP, trips),
            ):
                for schedule in self._find_conflicts(current, schedules):
                    conflict_issues.append(
                        ConflictIssue(
                            lesson_date=lesson.date,
                            lesson_time=lesson.time_range,
                            conflict_type=conflict_type,
                            conflict_detail=f"{schedule.type}: {schedule.detail}",
                            conflict_period=format_period(schedule.start_time, schedule.end_time)
                        )
                    )
                    issues.append(
                        f"{_CONFLICT_LABELS[conflict_type]}: {schedule.type} ({schedule.detail})"
                    )

            if issues:
                logger.debug(f"Lesson {index + 1} ({lesson.date} {lesson.time_range}): {issues}")

            details.append(
                LessonDetail(
                    index=index + 1,
                    date=lesson.date,
                    time=lesson.time_range,
                    duration=lesson.duration,
                    issues=tuple(issues)
                )
            )

        report = ViolationReport(
            total_lessons=len(checked),
            duration_issues=tuple(duration_issues),
            consecutive_issues=tuple(consecutive_issues),
            conflict_issues=tuple(conflict_issues),
            lessons_detail=tuple(details)
        )

        logger.info(
            f"Checked {report.total_lessons} lessons: "
            f"{len(duration_issues)} duration, {len(consecutive_issues)} consecutive, "
            f"{len(conflict_issues)} conflict issues"
        )
        return report

    def _check_duration(self, lesson: LessonRecord) -> Optional[DurationIssue]:
        minimum = self.policy.min_session_minutes
        if lesson.duration >= minimum:
            return None

        return DurationIssue(
            date=lesson.date,
            time=lesson.time_range,
            duration=lesson.duration,
            shortage=minimum - lesson.duration
        )

    def _check_consecutive(
        self,
        previous: _CheckedLesson,
        current: _CheckedLesson
    ) -> Optional[ConsecutiveIssue]:
        if not _is_adjacent(previous, current):
            return None

        prev, lesson = previous.record, current.record
        total = prev.duration + lesson.duration
        minimum = self.policy.min_consecutive_minutes
        if total >= minimum:
            return None

        return ConsecutiveIssue(
            date=lesson.date,
            time=f"{prev.start_time}~{lesson.end_time}",
            total_duration=total,
            shortage=minimum - total
        )

    def _find_conflicts(
        self,
        current: _CheckedLesson,
        schedules: Sequence[ScheduleRecord]
    ) -> List[ScheduleRecord]:
        if current.day is None:
            return []

        lesson_start = anchor(current.day, current.record.start_time)
        lesson_end = anchor(current.day, current.record.end_time)

        return [
            schedule for schedule in schedules
            if windows_overlap(lesson_start, lesson_end, schedule.start_time, schedule.end_time)
        ]


def _is_adjacent(previous: _CheckedLesson, current: _CheckedLesson) -> bool:
    """Same calendar day and zero gap, compared as literal time strings."""
    if previous.day is None or current.day is None:
        return False
    if previous.day != current.day:
        return False
    return previous.record.end_time == current.record.start_time


def check_lessons(
    lessons: Sequence[LessonInput],
    duty_schedules: Sequence[ScheduleInput],
    trip_schedules: Sequence[ScheduleInput],
    policy: Optional[CheckPolicy] = None
) -> ViolationReport:
    """
    Check lessons with a one-off checker.

    Examples:
        >>> report = check_lessons(lessons, [], [])
        >>> report.total_lessons == len(lessons)
        True
    """
    return ComplianceChecker(policy).check(lessons, duty_schedules, trip_schedules)

