"""
Ingestion adapters producing lesson and schedule records.

Usage:
    >>> from lesson_audit.ingestion import load_schedules, ScheduleKind
    >>> duty = load_schedules(Path("근무상황목록.xlsx"), ScheduleKind.DUTY).unwrap()
"""

from .document_parser import DocumentParseClient
from .lesson_extractor import LessonExtractor
from .lessons import load_lesson_log, load_lessons_json
from .spreadsheet import ScheduleKind, load_schedules

__all__ = [
    "DocumentParseClient",
    "LessonExtractor",
    "load_lesson_log",
    "load_lessons_json",
    "ScheduleKind",
    "load_schedules",
]
