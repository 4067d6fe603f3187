"""
Tests for the lesson check command line.
"""

import json
import logging

import pytest

import run_lesson_check
from lesson_audit.checking.policy import CheckPolicy
from lesson_audit.utils.config import Config
from run_lesson_check import (
    EXIT_COMPLIANT,
    EXIT_ERROR,
    EXIT_VIOLATIONS,
    build_policy,
    main,
    parse_arguments,
)


@pytest.fixture(autouse=True)
def reset_package_logger():
    """main() attaches handlers to the package logger; each test starts without any."""
    logger = logging.getLogger("lesson_audit")

    def drop_handlers():
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)

    drop_handlers()
    yield
    drop_handlers()


def write_lessons(path, lessons):
    path.write_text(json.dumps({"lessons": lessons}, ensure_ascii=False), encoding="utf-8")
    return path


class TestParseArguments:
    """Test cases for argument parsing."""

    def test_required_and_defaults(self, tmp_path):
        args = parse_arguments([
            "--lessons", "lessons.json", "--duty", "duty.xlsx", "--trip", "trip.xlsx",
        ])

        assert args.lessons.name == "lessons.json"
        assert args.duty.suffix == ".xlsx"
        assert args.min_session is None
        assert args.min_consecutive is None
        assert args.formats == ["json"]
        assert args.output_dir is None

    def test_missing_required(self):
        with pytest.raises(SystemExit):
            parse_arguments(["--lessons", "lessons.json"])

    def test_unknown_format_rejected(self):
        with pytest.raises(SystemExit):
            parse_arguments([
                "--lessons", "a.json", "--duty", "b.xlsx", "--trip", "c.xlsx",
                "--format", "docx",
            ])


class TestBuildPolicy:
    """Test cases for build_policy."""

    def test_cli_overrides(self):
        args = parse_arguments([
            "--lessons", "a.json", "--duty", "b.xlsx", "--trip", "c.xlsx",
            "--min-session", "45", "--min-consecutive", "90",
        ])

        assert build_policy(args) == CheckPolicy(45, 90)

    def test_falls_back_to_config(self):
        args = parse_arguments(["--lessons", "a.json", "--duty", "b.xlsx", "--trip", "c.xlsx"])

        assert build_policy(args) == CheckPolicy.from_config(run_lesson_check.config)


class TestMain:
    """End-to-end runs with a lessons JSON file and NEIS workbooks."""

    def run(self, tmp_path, lessons_path, duty, trip, *extra):
        return main([
            "--lessons", str(lessons_path),
            "--duty", str(duty),
            "--trip", str(trip),
            "--output-dir", str(tmp_path / "reports"),
            *extra,
        ])

    def test_compliant(self, tmp_path, duty_workbook, trip_workbook, capsys):
        lessons = write_lessons(tmp_path / "lessons.json", [
            {"date": "4. 18. (금)", "startTime": "13:20", "endTime": "14:00",
             "duration": 40, "fullDate": "2025-04-18"},
        ])

        exit_code = self.run(tmp_path, lessons, duty_workbook, trip_workbook)

        assert exit_code == EXIT_COMPLIANT
        out = capsys.readouterr().out
        assert "[4/4] Checking lessons..." in out
        assert "1 approved duty windows" in out
        assert len(list((tmp_path / "reports").glob("*.json"))) == 1

    def test_violations(self, tmp_path, duty_workbook, trip_workbook):
        lessons = write_lessons(tmp_path / "lessons.json", [
            {"date": "4. 18. (금)", "startTime": "13:40", "endTime": "14:20",
             "duration": 40, "fullDate": "2025-04-18"},
            {"date": "4. 22. (화)", "startTime": "13:40", "endTime": "14:10",
             "duration": 30, "fullDate": "2025-04-22"},
        ])

        exit_code = self.run(
            tmp_path, lessons, duty_workbook, trip_workbook, "--format", "json", "xlsx"
        )

        assert exit_code == EXIT_VIOLATIONS
        report_file = next((tmp_path / "reports").glob("*.json"))
        data = json.loads(report_file.read_text(encoding="utf-8"))
        assert data["totalLessons"] == 2
        assert [i["conflictType"] for i in data["conflictIssues"]] == ["duty", "business trip"]
        assert len(data["durationIssues"]) == 1
        assert len(list((tmp_path / "reports").glob("*.xlsx"))) == 1

    def test_cancelled_duty_is_ignored(self, tmp_path, duty_workbook, trip_workbook):
        """The cancelled 4/21 duty window in the fixture produces no conflict."""
        lessons = write_lessons(tmp_path / "lessons.json", [
            {"date": "4. 21. (월)", "startTime": "13:40", "endTime": "14:20",
             "duration": 40, "fullDate": "2025-04-21"},
        ])

        assert self.run(tmp_path, lessons, duty_workbook, trip_workbook) == EXIT_COMPLIANT

    def test_custom_threshold(self, tmp_path, duty_workbook, trip_workbook):
        lessons = write_lessons(tmp_path / "lessons.json", [
            {"date": "4. 25. (금)", "startTime": "13:40", "endTime": "14:20",
             "duration": 40, "fullDate": "2025-04-25"},
        ])

        exit_code = self.run(
            tmp_path, lessons, duty_workbook, trip_workbook, "--min-session", "45"
        )

        assert exit_code == EXIT_VIOLATIONS

    def test_invalid_threshold(self, tmp_path, duty_workbook, trip_workbook):
        lessons = write_lessons(tmp_path / "lessons.json", [])

        exit_code = self.run(
            tmp_path, lessons, duty_workbook, trip_workbook, "--min-session", "0"
        )

        assert exit_code == EXIT_ERROR

    def test_missing_duty_file(self, tmp_path, trip_workbook, capsys):
        lessons = write_lessons(tmp_path / "lessons.json", [])

        exit_code = self.run(tmp_path, lessons, tmp_path / "missing.xlsx", trip_workbook)

        assert exit_code == EXIT_ERROR
        assert "Spreadsheet not found" in capsys.readouterr().out

    def test_document_without_credentials(
        self, tmp_path, duty_workbook, trip_workbook, monkeypatch, capsys
    ):
        """A lesson log document needs the OCR and Vertex settings."""
        for name in ("UPSTAGE_API_KEY", "ANTHROPIC_VERTEX_PROJECT_ID"):
            monkeypatch.delenv(name, raising=False)
        monkeypatch.setattr(run_lesson_check, "config", Config())
        document = tmp_path / "지도일지.pdf"
        document.write_bytes(b"%PDF-1.4")

        exit_code = self.run(tmp_path, document, duty_workbook, trip_workbook)

        assert exit_code == EXIT_ERROR
        assert "UPSTAGE_API_KEY is required" in capsys.readouterr().out

    def test_log_file_option(self, tmp_path, duty_workbook, trip_workbook):
        lessons = write_lessons(tmp_path / "lessons.json", [
            {"date": "4. 18. (금)", "startTime": "13:20", "endTime": "14:00",
             "duration": 40, "fullDate": "2025-04-18"},
        ])
        log_file = tmp_path / "logs" / "check.log"

        self.run(
            tmp_path, lessons, duty_workbook, trip_workbook,
            "--log-file", str(log_file), "--log-level", "INFO"
        )

        assert log_file.exists()
        assert "Checked 1 lessons" in log_file.read_text(encoding="utf-8")

    def test_default_output_layout(
        self, tmp_path, duty_workbook, trip_workbook, monkeypatch
    ):
        """Without --output-dir, reports and the log go under OUTPUT_DIR."""
        monkeypatch.setenv("OUTPUT_DIR", str(tmp_path / "out"))
        monkeypatch.setattr(run_lesson_check, "config", Config())
        lessons = write_lessons(tmp_path / "lessons.json", [
            {"date": "4. 18. (금)", "startTime": "13:20", "endTime": "14:00",
             "duration": 40, "fullDate": "2025-04-18"},
        ])

        exit_code = main([
            "--lessons", str(lessons),
            "--duty", str(duty_workbook),
            "--trip", str(trip_workbook),
            "--log-level", "INFO",
        ])

        assert exit_code == EXIT_COMPLIANT
        assert len(list((tmp_path / "out" / "reports").glob("*.json"))) == 1
        log_file = tmp_path / "out" / "logs" / "lesson_check.log"
        assert "Checked 1 lessons" in log_file.read_text(encoding="utf-8")

    def test_malformed_lessons_file(self, tmp_path, duty_workbook, trip_workbook):
        lessons = write_lessons(tmp_path / "lessons.json", [{"date": "4. 18. (금)"}])

        exit_code = self.run(tmp_path, lessons, duty_workbook, trip_workbook)

        assert exit_code == EXIT_ERROR


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
