"""
NEIS spreadsheet adapter for duty-status and business-trip exports.

Both exports are read header-less from the first sheet. Only rows whose
approval state is finalized (``완결``) and not a cancelled approval
(``기결취소``) become schedule records.

Duty-status list columns:
    부서명, 성명, 근무상황, 기간, 일수/기간, 사유, 목적지, 연가신청구분,
    신청자, 결재상태, 삭제여부

Business-trip list columns:
    순번, 부서, 신청당시부서, 출장종류, 출장지, 출장목적, 공용차량,
    출장기간, 일수/기간, 결재상태, 출장인원, 신청자, 삭제여부
"""

import logging
import re
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, List, Optional, Sequence

import pandas as pd

from ..models.lesson import ScheduleRecord
from ..models.result import Result


logger = logging.getLogger(__name__)


class ScheduleKind(Enum):
    """Which NEIS export a spreadsheet comes from."""
    DUTY = "workStatus"
    TRIP = "businessTrip"


APPROVED_MARK = "완결"
CANCELLED_MARK = "기결취소"

SUPPORTED_EXTENSIONS = (".xlsx", ".xls")

# "2025-12-16 14:30 ~ 2025-12-16 16:30"
DUTY_PERIOD_PATTERN = re.compile(
    r'(\d{4}-\d{2}-\d{2}\s+\d{2}:\d{2})\s*~\s*(\d{4}-\d{2}-\d{2}\s+\d{2}:\d{2})'
)

# "2025.12.31 13:00 ~ 2025.12.31 16:30"
TRIP_PERIOD_PATTERN = re.compile(
    r'(\d{4}\.\d{2}\.\d{2}\s+\d{2}:\d{2})\s*~\s*(\d{4}\.\d{2}\.\d{2}\s+\d{2}:\d{2})'
)


def parse_period_instant(text: str, date_sep: str) -> datetime:
    """
    Parse one side of a period cell.

    Examples:
        >>> parse_period_instant("2025.12.31  13:00", ".")
        datetime.datetime(2025, 12, 31, 13, 0)
    """
    date_part, time_part = text.strip().split()
    year, month, day = (int(part) for part in date_part.split(date_sep))
    hour, minute = (int(part) for part in time_part.split(":"))
    return datetime(year, month, day, hour, minute)


def _cell_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _is_approved(approval: str) -> bool:
    return APPROVED_MARK in approval and CANCELLED_MARK not in approval


def _trim_row(row: Optional[Sequence[Any]]) -> List[Any]:
    """Drop trailing empty cells so short rows can be detected."""
    if not row:
        return []
    cells = list(row)
    while cells and (cells[-1] is None or _cell_text(cells[-1]) == ""):
        cells.pop()
    return cells


def _parse_rows(
    rows: Sequence[Sequence[Any]],
    min_columns: int,
    period_col: int,
    type_col: int,
    detail_col: int,
    approval_col: int,
    pattern: re.Pattern,
    date_sep: str
) -> List[ScheduleRecord]:
    schedules: List[ScheduleRecord] = []

    # First row is the header
    for row_number, raw in enumerate(rows[1:], start=2):
        row = _trim_row(raw)
        if len(row) < min_columns:
            continue

        period = _cell_text(row[period_col])
        approval = _cell_text(row[approval_col])
        if not period or not approval or not _is_approved(approval):
            continue

        match = pattern.search(period)
        if not match:
            logger.debug(f"Row {row_number}: unrecognised period {period!r}")
            continue

        try:
            start = parse_period_instant(match.group(1), date_sep)
            end = parse_period_instant(match.group(2), date_sep)
        except ValueError as e:
            logger.warning(f"Row {row_number}: invalid period {period!r}: {e}")
            continue

        detail = row[detail_col] if detail_col < len(row) else None
        schedules.append(
            ScheduleRecord(
                start_time=start,
                end_time=end,
                type=_cell_text(row[type_col]),
                detail=_cell_text(detail)
            )
        )

    return schedules


def parse_duty_rows(rows: Sequence[Sequence[Any]]) -> List[ScheduleRecord]:
    """
    Extract approved duty-status windows from sheet rows.

    Args:
        rows: Sheet rows including the header row

    Returns:
        Schedule records with the duty status as type and the reason as detail
    """
    return _parse_rows(
        rows,
        min_columns=10,
        period_col=3,
        type_col=2,
        detail_col=5,
        approval_col=9,
        pattern=DUTY_PERIOD_PATTERN,
        date_sep="-"
    )


def parse_trip_rows(rows: Sequence[Sequence[Any]]) -> List[ScheduleRecord]:
    """
    Extract approved business-trip windows from sheet rows.

    The export is downloaded per staff member, so every trip row belongs
    to the person under review.

    Returns:
        Schedule records with the destination as type and the purpose as detail
    """
    return _parse_rows(
        rows,
        min_columns=12,
        period_col=7,
        type_col=4,
        detail_col=5,
        approval_col=9,
        pattern=TRIP_PERIOD_PATTERN,
        date_sep="."
    )


def read_sheet_rows(filepath: Path) -> List[List[Any]]:
    """
    Read the first sheet of a workbook as raw rows.

    Empty cells come back as None.
    """
    df = pd.read_excel(filepath, sheet_name=0, header=None, dtype=object)
    df = df.astype(object).where(df.notna(), None)
    return df.values.tolist()


def load_schedules(filepath: Path, kind: ScheduleKind) -> Result[List[ScheduleRecord]]:
    """
    Load approved schedules from a NEIS spreadsheet export.

    Args:
        filepath: Path to the .xlsx/.xls export
        kind: Duty-status or business-trip export

    Returns:
        Result containing the schedule records

    Examples:
        >>> result = load_schedules(Path("근무상황목록.xlsx"), ScheduleKind.DUTY)
        >>> if result.is_success:
        ...     print(f"{len(result.value)} duty windows")
    """
    if filepath.suffix.lower() not in SUPPORTED_EXTENSIONS:
        return Result.failure(
            f"Unsupported spreadsheet type: {filepath.name} "
            f"(expected {', '.join(SUPPORTED_EXTENSIONS)})"
        )

    if not filepath.exists():
        return Result.failure(f"Spreadsheet not found: {filepath}")

    try:
        rows = read_sheet_rows(filepath)
    except (OSError, ValueError, ImportError) as e:
        logger.error(f"Failed to read spreadsheet {filepath}: {e}", exc_info=True)
        return Result.failure(f"Could not read spreadsheet {filepath.name}: {e}", e)

    if kind == ScheduleKind.DUTY:
        schedules = parse_duty_rows(rows)
    else:
        schedules = parse_trip_rows(rows)

    logger.info(f"Loaded {len(schedules)} {kind.value} schedules from {filepath.name}")
    return Result.success(schedules, f"{len(schedules)} approved schedules")
