"""
Data models for lessons, schedules, reports and step results.
"""

from .lesson import LessonPayload, LessonRecord, SchedulePayload, ScheduleRecord
from .report import (
    ConflictIssue,
    ConflictType,
    ConsecutiveIssue,
    DurationIssue,
    LessonDetail,
    ViolationReport,
)
from .result import Result, ResultStatus

__all__ = [
    "LessonPayload",
    "LessonRecord",
    "SchedulePayload",
    "ScheduleRecord",
    "ConflictIssue",
    "ConflictType",
    "ConsecutiveIssue",
    "DurationIssue",
    "LessonDetail",
    "ViolationReport",
    "Result",
    "ResultStatus",
]
