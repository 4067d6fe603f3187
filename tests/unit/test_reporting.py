"""
Unit tests for console rendering and report export.
"""

import csv
import json
from unittest.mock import patch

import openpyxl
import pytest
from reportlab.platypus import PageBreak, Paragraph

from lesson_audit.checking.checker import check_lessons
from lesson_audit.reporting.console import render_report, translate_weekday
from lesson_audit.reporting.export import build_pdf, export_report, lessons_dataframe
from lesson_audit.models.report import ViolationReport


@pytest.fixture
def report():
    lessons = [
        {"date": "4. 18. (금)", "startTime": "13:00", "endTime": "13:40",
         "duration": 40, "fullDate": "2025-04-18"},
        {"date": "4. 18. (금)", "startTime": "13:40", "endTime": "14:10",
         "duration": 30, "fullDate": "2025-04-18"},
        {"date": "4. 22. (화)", "startTime": "13:40", "endTime": "14:20",
         "duration": 40, "fullDate": "2025-04-22"},
    ]
    trips = [
        {"startTime": "2025-04-22T13:00:00", "endTime": "2025-04-22T16:30:00",
         "type": "서울시교육청", "detail": "연수 참석"},
    ]
    return check_lessons(lessons, [], trips)


class TestTranslateWeekday:
    """Test cases for translate_weekday."""

    @pytest.mark.parametrize("text,expected", [
        ("4. 18. (금)", "4. 18. (Fri)"),
        ("4. 20. (일)", "4. 20. (Sun)"),
        ("4. 18.", "4. 18."),
    ])
    def test_translate(self, text, expected):
        assert translate_weekday(text) == expected


class TestRenderReport:
    """Test cases for render_report."""

    def test_sections(self, report):
        text = render_report(report)

        assert "LESSON CHECK SUMMARY" in text
        assert "Total lessons:            3" in text
        assert "Passed:                   1" in text
        assert "Issues found:             3" in text
        assert "Duration issues: 1" in text
        assert "Consecutive session issues: 1" in text
        assert "Schedule conflicts: 1" in text
        assert "[business trip] 서울시교육청: 연수 참석" in text
        assert "  1. 4. 18. (금) | 13:00~13:40 |  40min | OK" in text

    def test_compliant_report_omits_sections(self):
        text = render_report(ViolationReport(total_lessons=0))

        assert "Issues found:             0" in text
        assert "Duration issues" not in text
        assert "Schedule conflicts" not in text


class TestExportReport:
    """Test cases for export_report."""

    def test_lessons_dataframe(self, report):
        df = lessons_dataframe(report)

        assert list(df.columns) == ["index", "date", "time", "duration", "status", "issues"]
        assert list(df["status"]) == ["OK", "ISSUE", "ISSUE"]

    def test_all_formats(self, report, tmp_path):
        written = export_report(report, tmp_path / "reports", prefix="check")

        assert set(written) == {"json", "csv", "xlsx", "pdf"}
        assert all(path.exists() for path in written.values())
        assert len({path.stem for path in written.values()}) == 1
        assert written["json"].name.startswith("check_")

    def test_json_content(self, report, tmp_path):
        written = export_report(report, tmp_path, formats=["json"])

        with open(written["json"], encoding="utf-8") as f:
            data = json.load(f)

        assert data == report.to_dict()
        assert data["conflictIssues"][0]["conflictType"] == "business trip"

    def test_csv_content(self, report, tmp_path):
        written = export_report(report, tmp_path, formats=["csv"])

        with open(written["csv"], encoding="utf-8-sig", newline="") as f:
            rows = list(csv.DictReader(f))

        assert len(rows) == 3
        assert rows[0]["date"] == "4. 18. (금)"
        assert rows[0]["status"] == "OK"
        assert "Consecutive sessions too short" in rows[1]["issues"]

    def test_xlsx_content(self, report, tmp_path):
        written = export_report(report, tmp_path, formats=["xlsx"])

        wb = openpyxl.load_workbook(written["xlsx"])

        assert wb.sheetnames == ["Summary", "Lessons", "Duration", "Consecutive", "Conflicts"]
        assert [c.value for c in wb["Summary"][4]] == [3, 1, 3]
        assert wb["Lessons"]["B2"].value == "4. 18. (Fri)"
        assert wb["Lessons"]["E2"].value == "OK"
        assert wb["Duration"]["D2"].value == "10min"
        assert wb["Conflicts"]["C2"].value == "business trip"

    def test_pdf_file(self, report, tmp_path):
        written = export_report(report, tmp_path, formats=["pdf"])

        data = written["pdf"].read_bytes()
        assert written["pdf"].suffix == ".pdf"
        assert data.startswith(b"%PDF")
        assert data.rstrip().endswith(b"%%EOF")

    def test_pdf_for_empty_report(self, tmp_path):
        path = tmp_path / "empty.pdf"

        build_pdf(ViolationReport(total_lessons=0), path)

        assert path.read_bytes().startswith(b"%PDF")

    @patch("lesson_audit.reporting.export.SimpleDocTemplate.build")
    def test_pdf_layout(self, mock_build, report, tmp_path):
        build_pdf(report, tmp_path / "report.pdf")

        story = mock_build.call_args[0][0]
        headings = [f.getPlainText() for f in story if isinstance(f, Paragraph)]
        assert headings[0] == "Lesson Check Report"
        assert headings[2:] == [
            "Duration Issues",
            "Consecutive Session Issues",
            "Schedule Conflicts",
            "All Lessons",
        ]
        assert any(isinstance(f, PageBreak) for f in story)

    @patch("lesson_audit.reporting.export.SimpleDocTemplate.build")
    def test_pdf_omits_empty_sections(self, mock_build, tmp_path):
        build_pdf(ViolationReport(total_lessons=0), tmp_path / "report.pdf")

        story = mock_build.call_args[0][0]
        headings = [f.getPlainText() for f in story if isinstance(f, Paragraph)]
        assert "Duration Issues" not in headings
        assert "Schedule Conflicts" not in headings
        assert headings[-1] == "All Lessons"

    def test_unknown_format(self, report, tmp_path):
        with pytest.raises(ValueError, match="Unsupported export format"):
            export_report(report, tmp_path, formats=["docx"])


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
