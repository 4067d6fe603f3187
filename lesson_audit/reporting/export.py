"""
Report export to JSON, CSV, Excel and PDF.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Dict, Iterable, Sequence
from xml.sax.saxutils import escape

import openpyxl
import pandas as pd
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.cidfonts import UnicodeCIDFont
from reportlab.platypus import PageBreak, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from .console import translate_weekday
from ..models.report import ViolationReport
from ..utils.file_utils import generate_filename, save_csv, save_json


logger = logging.getLogger(__name__)


SUPPORTED_FORMATS = ("json", "csv", "xlsx", "pdf")

# Styles
THIN = Side(border_style="thin", color="000000")
THIN_BORDER = Border(left=THIN, right=THIN, top=THIN, bottom=THIN)
HEADER_FILL = PatternFill(start_color="252540", end_color="252540", fill_type="solid")
ISSUE_HEADER_FILL = PatternFill(start_color="F59E0B", end_color="F59E0B", fill_type="solid")
CONFLICT_HEADER_FILL = PatternFill(start_color="EF4444", end_color="EF4444", fill_type="solid")
FAILED_FILL = PatternFill(start_color="FDE2E2", end_color="FDE2E2", fill_type="solid")
HEADER_FONT = Font(bold=True, size=11, color="FFFFFF")
TITLE_FONT = Font(bold=True, size=14)
LEFT = Alignment(horizontal="left", vertical="center", wrap_text=True)
CENTER = Alignment(horizontal="center", vertical="center")

# PDF (built-in CID font covers Hangul in details and display dates)
PDF_FONT = "HYSMyeongJo-Medium"
pdfmetrics.registerFont(UnicodeCIDFont(PDF_FONT))
PDF_SUMMARY_COLOR = colors.HexColor("#252540")
PDF_ISSUE_COLOR = colors.HexColor("#F59E0B")
PDF_CONFLICT_COLOR = colors.HexColor("#EF4444")
PDF_LESSONS_COLOR = colors.HexColor("#6366F1")
PDF_OK_COLOR = colors.HexColor("#16A34A")
PDF_ISSUE_TEXT_COLOR = colors.HexColor("#DC2626")


def lessons_dataframe(report: ViolationReport) -> pd.DataFrame:
    """Per-lesson table with issues joined into one column."""
    return pd.DataFrame(
        [
            {
                "index": detail.index,
                "date": detail.date,
                "time": detail.time,
                "duration": detail.duration,
                "status": "OK" if detail.is_compliant else "ISSUE",
                "issues": "; ".join(detail.issues),
            }
            for detail in report.lessons_detail
        ],
        columns=["index", "date", "time", "duration", "status", "issues"]
    )


def _write_table(
    ws,
    start_row: int,
    headers: Sequence[str],
    rows: Iterable[Sequence],
    header_fill: PatternFill
) -> int:
    """Write a bordered table and return the next free row."""
    for col, header in enumerate(headers, start=1):
        cell = ws.cell(row=start_row, column=col, value=header)
        cell.font = HEADER_FONT
        cell.fill = header_fill
        cell.alignment = CENTER
        cell.border = THIN_BORDER

    row_number = start_row
    for row_number, values in enumerate(rows, start=start_row + 1):
        for col, value in enumerate(values, start=1):
            cell = ws.cell(row=row_number, column=col, value=value)
            cell.alignment = LEFT
            cell.border = THIN_BORDER

    for col, header in enumerate(headers, start=1):
        width = max(
            [len(str(header))]
            + [len(str(ws.cell(row=r, column=col).value or "")) for r in range(start_row + 1, row_number + 1)]
        )
        ws.column_dimensions[get_column_letter(col)].width = min(max(width + 2, 10), 60)

    return row_number + 1


def build_workbook(report: ViolationReport) -> openpyxl.Workbook:
    """
    Build an Excel workbook for a report.

    Sheets: Summary, Lessons, Duration, Consecutive, Conflicts.
    """
    wb = openpyxl.Workbook()

    ws = wb.active
    ws.title = "Summary"
    ws.cell(row=1, column=1, value="Lesson Check Report").font = TITLE_FONT
    _write_table(
        ws,
        3,
        ["Total Lessons", "Passed", "Issues Found"],
        [[report.total_lessons, report.passed_lessons, report.total_issues]],
        HEADER_FILL
    )

    ws = wb.create_sheet("Lessons")
    _write_table(
        ws,
        1,
        ["#", "Date", "Time", "Duration", "Issues"],
        [
            [
                detail.index,
                translate_weekday(detail.date),
                detail.time,
                f"{detail.duration}min",
                "OK" if detail.is_compliant else "\n".join(detail.issues),
            ]
            for detail in report.lessons_detail
        ],
        HEADER_FILL
    )
    for detail in report.lessons_detail:
        if not detail.is_compliant:
            for col in range(1, 6):
                ws.cell(row=detail.index + 1, column=col).fill = FAILED_FILL

    ws = wb.create_sheet("Duration")
    _write_table(
        ws,
        1,
        ["Date", "Time", "Duration", "Shortage"],
        [
            [translate_weekday(i.date), i.time, f"{i.duration}min", f"{i.shortage}min"]
            for i in report.duration_issues
        ],
        ISSUE_HEADER_FILL
    )

    ws = wb.create_sheet("Consecutive")
    _write_table(
        ws,
        1,
        ["Date", "Time", "Total Duration", "Shortage"],
        [
            [translate_weekday(i.date), i.time, f"{i.total_duration}min", f"{i.shortage}min"]
            for i in report.consecutive_issues
        ],
        ISSUE_HEADER_FILL
    )

    ws = wb.create_sheet("Conflicts")
    _write_table(
        ws,
        1,
        ["Lesson Date", "Lesson Time", "Type", "Detail", "Conflict Period"],
        [
            [
                translate_weekday(i.lesson_date),
                i.lesson_time,
                i.conflict_type.value,
                i.conflict_detail,
                i.conflict_period,
            ]
            for i in report.conflict_issues
        ],
        CONFLICT_HEADER_FILL
    )

    return wb


def _pdf_table(rows: Sequence[Sequence], header_color, col_widths=None) -> Table:
    """Grid table with a colored header row."""
    table = Table([list(row) for row in rows], colWidths=col_widths, repeatRows=1)
    table.setStyle(TableStyle([
        ("FONTNAME", (0, 0), (-1, -1), PDF_FONT),
        ("FONTSIZE", (0, 0), (-1, -1), 8),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("BACKGROUND", (0, 0), (-1, 0), header_color),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, colors.HexColor("#F5F5F5")]),
        ("GRID", (0, 0), (-1, -1), 0.25, colors.HexColor("#C8C8C8")),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
    ]))
    return table


def _pdf_footer(canvas, doc) -> None:
    canvas.saveState()
    canvas.setFont("Helvetica", 8)
    canvas.setFillColor(colors.grey)
    canvas.drawCentredString(A4[0] / 2, 10 * mm, f"Page {doc.page}")
    canvas.restoreState()


def build_pdf(report: ViolationReport, path: Path) -> None:
    """
    Render a report as a PDF document.

    Layout: summary table, then one table per non-empty issue category,
    then every lesson with its OK/ISSUE status on a new page. Korean
    weekdays in display dates are translated to English.

    Args:
        report: Report to render
        path: Target .pdf file
    """
    styles = getSampleStyleSheet()
    cell_style = ParagraphStyle("Cell", fontName=PDF_FONT, fontSize=8, leading=10)
    doc = SimpleDocTemplate(
        str(path),
        pagesize=A4,
        leftMargin=14 * mm,
        rightMargin=14 * mm,
        topMargin=16 * mm,
        bottomMargin=18 * mm,
        title="Lesson Check Report"
    )

    story = [
        Paragraph("Lesson Check Report", styles["Title"]),
        Paragraph(f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}", styles["Normal"]),
        Spacer(1, 6 * mm),
        _pdf_table(
            [
                ["Total Lessons", "Passed", "Issues Found"],
                [str(report.total_lessons), str(report.passed_lessons), str(report.total_issues)],
            ],
            PDF_SUMMARY_COLOR,
            col_widths=[60 * mm] * 3
        ),
    ]

    if report.duration_issues:
        story.append(Spacer(1, 6 * mm))
        story.append(Paragraph("Duration Issues", styles["Heading3"]))
        story.append(_pdf_table(
            [["Date", "Time", "Duration", "Shortage"]]
            + [
                [translate_weekday(i.date), i.time, f"{i.duration}min", f"{i.shortage}min"]
                for i in report.duration_issues
            ],
            PDF_ISSUE_COLOR
        ))

    if report.consecutive_issues:
        story.append(Spacer(1, 6 * mm))
        story.append(Paragraph("Consecutive Session Issues", styles["Heading3"]))
        story.append(_pdf_table(
            [["Date", "Time", "Total Duration", "Shortage"]]
            + [
                [translate_weekday(i.date), i.time, f"{i.total_duration}min", f"{i.shortage}min"]
                for i in report.consecutive_issues
            ],
            PDF_ISSUE_COLOR
        ))

    if report.conflict_issues:
        story.append(Spacer(1, 6 * mm))
        story.append(Paragraph("Schedule Conflicts", styles["Heading3"]))
        story.append(_pdf_table(
            [["Lesson Date", "Lesson Time", "Type", "Detail", "Conflict Period"]]
            + [
                [
                    translate_weekday(i.lesson_date),
                    i.lesson_time,
                    i.conflict_type.value,
                    Paragraph(escape(i.conflict_detail), cell_style),
                    Paragraph(escape(i.conflict_period), cell_style),
                ]
                for i in report.conflict_issues
            ],
            PDF_CONFLICT_COLOR,
            col_widths=[28 * mm, 24 * mm, 24 * mm, 50 * mm, 56 * mm]
        ))

    story.append(PageBreak())
    story.append(Paragraph("All Lessons", styles["Heading2"]))
    lessons_table = _pdf_table(
        [["#", "Date", "Time", "Duration", "Status"]]
        + [
            [
                str(detail.index),
                translate_weekday(detail.date),
                detail.time,
                f"{detail.duration}min",
                "OK" if detail.is_compliant else "ISSUE",
            ]
            for detail in report.lessons_detail
        ],
        PDF_LESSONS_COLOR,
        col_widths=[12 * mm, 50 * mm, 45 * mm, 30 * mm, 30 * mm]
    )
    status_styles = []
    for row, detail in enumerate(report.lessons_detail, start=1):
        if detail.is_compliant:
            status_styles.append(("TEXTCOLOR", (4, row), (4, row), PDF_OK_COLOR))
        else:
            status_styles.append(("TEXTCOLOR", (4, row), (4, row), PDF_ISSUE_TEXT_COLOR))
            status_styles.append(("FONTNAME", (4, row), (4, row), "Helvetica-Bold"))
    if status_styles:
        lessons_table.setStyle(TableStyle(status_styles))
    story.append(lessons_table)

    doc.build(story, onFirstPage=_pdf_footer, onLaterPages=_pdf_footer)


def export_report(
    report: ViolationReport,
    output_dir: Path,
    formats: Sequence[str] = SUPPORTED_FORMATS,
    prefix: str = "lesson_check"
) -> Dict[str, Path]:
    """
    Write a report in the requested formats.

    Args:
        report: Report to export
        output_dir: Target directory (created if missing)
        formats: Any of "json", "csv", "xlsx", "pdf"
        prefix: Filename prefix; a timestamp is appended

    Returns:
        Mapping of format to written path; failed writes are left out

    Raises:
        ValueError: If an unknown format is requested
    """
    unknown = [fmt for fmt in formats if fmt not in SUPPORTED_FORMATS]
    if unknown:
        raise ValueError(
            f"Unsupported export format(s): {', '.join(unknown)} "
            f"(supported: {', '.join(SUPPORTED_FORMATS)})"
        )

    output_dir.mkdir(parents=True, exist_ok=True)
    written: Dict[str, Path] = {}
    stem = Path(generate_filename(prefix, "json")).stem

    if "json" in formats:
        path = output_dir / f"{stem}.json"
        if save_json(report.to_dict(), path):
            written["json"] = path

    if "csv" in formats:
        path = output_dir / f"{stem}.csv"
        if save_csv(lessons_dataframe(report), path):
            written["csv"] = path

    if "xlsx" in formats:
        path = output_dir / f"{stem}.xlsx"
        try:
            build_workbook(report).save(path)
            written["xlsx"] = path
        except OSError as e:
            logger.error(f"Failed to save Excel report {path}: {e}", exc_info=True)

    if "pdf" in formats:
        path = output_dir / f"{stem}.pdf"
        try:
            build_pdf(report, path)
            written["pdf"] = path
        except OSError as e:
            logger.error(f"Failed to save PDF report {path}: {e}", exc_info=True)

    for fmt, path in written.items():
        logger.info(f"Exported {fmt} report: {path}")

    return written
