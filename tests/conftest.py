"""
Shared fixtures for lesson audit tests.
"""

import pytest

from tests.neis_rows import DUTY_HEADER, TRIP_HEADER, duty_row, trip_row, write_workbook


@pytest.fixture
def duty_workbook(tmp_path):
    """Duty-status export with one approved and one cancelled row."""
    return write_workbook(
        tmp_path / "근무상황목록.xlsx",
        [
            DUTY_HEADER,
            duty_row("2025-04-18 14:00 ~ 2025-04-18 16:30"),
            duty_row("2025-04-21 09:00 ~ 2025-04-21 18:00", approval="기결취소"),
        ]
    )


@pytest.fixture
def trip_workbook(tmp_path):
    """Business-trip export with one approved trip."""
    return write_workbook(
        tmp_path / "출장목록.xlsx",
        [
            TRIP_HEADER,
            trip_row("2025.04.22 13:00 ~ 2025.04.22 16:30"),
        ]
    )
