"""
Unit tests for lesson, schedule, report and result models.
"""

from dataclasses import FrozenInstanceError
from datetime import date, datetime

import pytest

from lesson_audit.models.lesson import LessonRecord, ScheduleRecord
from lesson_audit.models.report import (
    ConflictIssue,
    ConflictType,
    DurationIssue,
    LessonDetail,
    ViolationReport,
)
from lesson_audit.models.result import Result, ResultStatus
from lesson_audit.validation.validators import MalformedRecordError


class TestLessonRecord:
    """Test cases for LessonRecord."""

    @pytest.fixture
    def payload(self):
        return {
            "date": "4. 18. (금)",
            "startTime": "13:40",
            "endTime": "14:20",
            "duration": 40,
            "fullDate": "2025-04-18"
        }

    def test_from_dict(self, payload):
        lesson = LessonRecord.from_dict(payload)

        assert lesson.date == "4. 18. (금)"
        assert lesson.start_time == "13:40"
        assert lesson.end_time == "14:20"
        assert lesson.duration == 40
        assert lesson.full_date == "2025-04-18"
        assert lesson.time_range == "13:40~14:20"

    def test_missing_full_date_allowed(self, payload):
        del payload["fullDate"]

        assert LessonRecord.from_dict(payload).full_date is None

    def test_unreadable_full_date_kept(self, payload):
        """Unreadable dates are kept as given; the checker skips them."""
        payload["fullDate"] = "모름"

        assert LessonRecord.from_dict(payload).full_date == "모름"

    def test_missing_field_raises(self, payload):
        del payload["endTime"]

        with pytest.raises(MalformedRecordError) as exc_info:
            LessonRecord.from_dict(payload, index=3)

        assert exc_info.value.index == 3
        assert "Missing required field: endTime" in exc_info.value.errors
        assert "index 3" in str(exc_info.value)

    def test_to_dict_serializes_date(self, payload):
        lesson = LessonRecord("4. 18. (금)", "13:40", "14:20", 40, date(2025, 4, 18))

        assert lesson.to_dict() == payload

    def test_frozen(self, payload):
        lesson = LessonRecord.from_dict(payload)

        with pytest.raises(FrozenInstanceError):
            lesson.duration = 50


class TestScheduleRecord:
    """Test cases for ScheduleRecord."""

    def test_from_dict_with_strings(self):
        schedule = ScheduleRecord.from_dict({
            "startTime": "2025-12-16T14:30:00",
            "endTime": "2025-12-16T16:30:00",
            "type": "연가",
            "detail": "개인 사유"
        })

        assert schedule.start_time == datetime(2025, 12, 16, 14, 30)
        assert schedule.end_time == datetime(2025, 12, 16, 16, 30)
        assert schedule.type == "연가"
        assert schedule.detail == "개인 사유"

    def test_missing_detail_defaults_to_empty(self):
        schedule = ScheduleRecord.from_dict({
            "startTime": datetime(2025, 12, 16, 14, 30),
            "endTime": datetime(2025, 12, 16, 16, 30),
            "type": "조퇴",
            "detail": None
        })

        assert schedule.detail == ""

    def test_invalid_instant_raises(self):
        with pytest.raises(MalformedRecordError) as exc_info:
            ScheduleRecord.from_dict({
                "startTime": "yesterday",
                "endTime": "2025-12-16T16:30:00",
                "type": "연가"
            })

        assert exc_info.value.record_kind == "schedule"
        assert exc_info.value.errors[0].startswith("Invalid startTime")

    def test_to_dict(self):
        schedule = ScheduleRecord(
            datetime(2025, 12, 31, 13, 0), datetime(2025, 12, 31, 16, 30), "교육청", "회의"
        )

        assert schedule.to_dict() == {
            "startTime": "2025-12-31T13:00:00",
            "endTime": "2025-12-31T16:30:00",
            "type": "교육청",
            "detail": "회의"
        }


class TestViolationReport:
    """Test cases for ViolationReport aggregates."""

    @pytest.fixture
    def report(self):
        return ViolationReport(
            total_lessons=2,
            duration_issues=(DurationIssue("4. 18. (금)", "13:40~14:10", 30, 10),),
            conflict_issues=(
                ConflictIssue(
                    "4. 18. (금)", "13:40~14:10", ConflictType.DUTY,
                    "연가: 개인 사유", "2025-04-18 13:00 ~ 2025-04-18 15:00"
                ),
            ),
            lessons_detail=(
                LessonDetail(1, "4. 18. (금)", "13:40~14:10", 30, ("a", "b")),
                LessonDetail(2, "4. 21. (월)", "13:40~14:20", 40),
            )
        )

    def test_counts(self, report):
        assert report.total_issues == 2
        assert report.passed_lessons == 1
        assert not report.is_compliant

    def test_lesson_detail_compliance(self, report):
        assert not report.lessons_detail[0].is_compliant
        assert report.lessons_detail[1].is_compliant

    def test_to_dict(self, report):
        data = report.to_dict()

        assert data["durationIssues"] == [
            {"date": "4. 18. (금)", "time": "13:40~14:10", "duration": 30, "shortage": 10}
        ]
        assert data["conflictIssues"][0]["conflictType"] == "duty"
        assert data["consecutiveIssues"] == []
        assert data["lessonsDetail"][0]["issues"] == ["a", "b"]


class TestResult:
    """Test cases for Result."""

    def test_success(self):
        result = Result.success([1, 2], message="loaded")

        assert result.status == ResultStatus.SUCCESS
        assert result.is_success
        assert not result.is_failure
        assert result.unwrap() == [1, 2]
        assert result.unwrap_or([]) == [1, 2]
        assert result.message == "loaded"

    def test_failure(self):
        error = OSError("disk")
        result = Result.failure("Could not read file", error=error)

        assert result.is_failure
        assert result.value is None
        assert result.error is error
        assert result.unwrap_or([]) == []

    def test_unwrap_failure_raises(self):
        with pytest.raises(ValueError, match="Cannot unwrap failure result: boom"):
            Result.failure("boom").unwrap()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
