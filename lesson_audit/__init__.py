"""
Supplementary lesson log auditing.

Checks lesson logs against approved duty-status and business-trip
schedules and reports short lessons, short back-to-back sessions and
schedule conflicts.

Usage:
    >>> from lesson_audit import ComplianceChecker, LessonRecord
    >>>
    >>> checker = ComplianceChecker()
    >>> report = checker.check(lessons, duty_schedules, trip_schedules)
    >>> print(report.total_issues)
"""

from .checking import CheckPolicy, ComplianceChecker, check_lessons
from .models import LessonRecord, ScheduleRecord, ViolationReport

__all__ = [
    "CheckPolicy",
    "ComplianceChecker",
    "check_lessons",
    "LessonRecord",
    "ScheduleRecord",
    "ViolationReport",
]

__version__ = "0.1.0"
