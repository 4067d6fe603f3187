"""
Plain-text rendering of violation reports.
"""

from typing import List

from ..models.report import ViolationReport


WEEKDAY_TRANSLATIONS = {
    "(월)": "(Mon)",
    "(화)": "(Tue)",
    "(수)": "(Wed)",
    "(목)": "(Thu)",
    "(금)": "(Fri)",
    "(토)": "(Sat)",
    "(일)": "(Sun)",
}

RULE = "=" * 60
THIN_RULE = "-" * 60


def translate_weekday(text: str) -> str:
    """
    Replace Korean weekday markers with English abbreviations.

    Examples:
        >>> translate_weekday("4. 18. (금)")
        '4. 18. (Fri)'
    """
    for korean, english in WEEKDAY_TRANSLATIONS.items():
        text = text.replace(korean, english)
    return text


def render_report(report: ViolationReport) -> str:
    """
    Render a report as console text.

    Sections without issues are omitted; the per-lesson table is always
    shown and marks compliant lessons with ``OK``.
    """
    lines: List[str] = [
        RULE,
        "LESSON CHECK SUMMARY",
        RULE,
        f"Total lessons:            {report.total_lessons}",
        f"Passed:                   {report.passed_lessons}",
        f"Issues found:             {report.total_issues}",
        RULE,
    ]

    if report.duration_issues:
        lines.append(f"\nDuration issues: {len(report.duration_issues)}")
        lines.append(THIN_RULE)
        for issue in report.duration_issues:
            lines.append(
                f"  {issue.date} {issue.time} -> {issue.duration}min "
                f"({issue.shortage}min short)"
            )

    if report.consecutive_issues:
        lines.append(f"\nConsecutive session issues: {len(report.consecutive_issues)}")
        lines.append(THIN_RULE)
        for issue in report.consecutive_issues:
            lines.append(
                f"  {issue.date} {issue.time} -> {issue.total_duration}min "
                f"({issue.shortage}min short)"
            )

    if report.conflict_issues:
        lines.append(f"\nSchedule conflicts: {len(report.conflict_issues)}")
        lines.append(THIN_RULE)
        for issue in report.conflict_issues:
            lines.append(
                f"  {issue.lesson_date} {issue.lesson_time} <-> "
                f"[{issue.conflict_type.value}] {issue.conflict_detail} "
                f"({issue.conflict_period})"
            )

    lines.append("\nLessons:")
    lines.append(THIN_RULE)
    for detail in report.lessons_detail:
        status = "OK" if detail.is_compliant else "; ".join(detail.issues)
        lines.append(
            f"{detail.index:3d}. {detail.date} | {detail.time} | "
            f"{detail.duration:3d}min | {status}"
        )
    lines.append(THIN_RULE)

    return "\n".join(lines)
