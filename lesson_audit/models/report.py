"""
Violation report data models.

This module provides the immutable structures produced by the compliance
checker and consumed by rendering and export.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Tuple


class ConflictType(Enum):
    """Source of a conflicting schedule."""
    DUTY = "duty"
    BUSINESS_TRIP = "business trip"


@dataclass(frozen=True)
class DurationIssue:
    """A single lesson shorter than the minimum session length."""

    date: str
    time: str
    duration: int
    shortage: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date,
            "time": self.time,
            "duration": self.duration,
            "shortage": self.shortage
        }


@dataclass(frozen=True)
class ConsecutiveIssue:
    """
    Two back-to-back lessons whose combined length is too short.

    Attributes:
        date: Display date of the later lesson
        time: Span from the first lesson's start to the second's end
        total_duration: Sum of both durations in minutes
        shortage: Minutes missing to reach the consecutive minimum
    """

    date: str
    time: str
    total_duration: int
    shortage: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date,
            "time": self.time,
            "totalDuration": self.total_duration,
            "shortage": self.shortage
        }


@dataclass(frozen=True)
class ConflictIssue:
    """
    A lesson overlapping an approved duty or trip window.

    Attributes:
        lesson_date: Display date of the lesson
        lesson_time: Lesson window, "HH:MM~HH:MM"
        conflict_type: Duty or business trip
        conflict_detail: "{type}: {detail}" of the schedule
        conflict_period: "YYYY-MM-DD HH:MM ~ YYYY-MM-DD HH:MM"
    """

    lesson_date: str
    lesson_time: str
    conflict_type: ConflictType
    conflict_detail: str
    conflict_period: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "lessonDate": self.lesson_date,
            "lessonTime": self.lesson_time,
            "conflictType": self.conflict_type.value,
            "conflictDetail": self.conflict_detail,
            "conflictPeriod": self.conflict_period
        }


@dataclass(frozen=True)
class LessonDetail:
    """Per-lesson outcome; an empty ``issues`` tuple means compliant."""

    index: int
    date: str
    time: str
    duration: int
    issues: Tuple[str, ...] = ()

    @property
    def is_compliant(self) -> bool:
        return len(self.issues) == 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "index": self.index,
            "date": self.date,
            "time": self.time,
            "duration": self.duration,
            "issues": list(self.issues)
        }


@dataclass(frozen=True)
class ViolationReport:
    """
    Result of one compliance check.

    Attributes:
        total_lessons: Number of input lessons
        duration_issues: Lessons under the minimum session length
        consecutive_issues: Adjacent pairs under the minimum combined length
        conflict_issues: Lesson/schedule overlaps
        lessons_detail: One entry per input lesson, in input order

    Examples:
        >>> report = ViolationReport(total_lessons=0)
        >>> report.is_compliant
        True
        >>> report.to_dict()["totalLessons"]
        0
    """

    total_lessons: int
    duration_issues: Tuple[DurationIssue, ...] = ()
    consecutive_issues: Tuple[ConsecutiveIssue, ...] = ()
    conflict_issues: Tuple[ConflictIssue, ...] = ()
    lessons_detail: Tuple[LessonDetail, ...] = ()

    @property
    def total_issues(self) -> int:
        """Number of entries across all three issue lists."""
        return (
            len(self.duration_issues)
            + len(self.consecutive_issues)
            + len(self.conflict_issues)
        )

    @property
    def passed_lessons(self) -> int:
        """Number of lessons without any issue."""
        return sum(1 for detail in self.lessons_detail if detail.is_compliant)

    @property
    def is_compliant(self) -> bool:
        return self.total_issues == 0

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert to dictionary format.

        Returns:
            Dictionary with camelCase keys for presentation layers
        """
        return {
            "totalLessons": self.total_lessons,
            "durationIssues": [issue.to_dict() for issue in self.duration_issues],
            "consecutiveIssues": [issue.to_dict() for issue in self.consecutive_issues],
            "conflictIssues": [issue.to_dict() for issue in self.conflict_issues],
            "lessonsDetail": [detail.to_dict() for detail in self.lessons_detail]
        }
