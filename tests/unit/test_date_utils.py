"""Unit tests for date helpers"""

from datetime import date, datetime
from sacco_lending.utils.date_utils import add_months, months_elapsed


def test_add_months_simple():
    assert add_months(date(2025, 3, 10), 1) == date(2025, 4, 10)
    assert add_months(date(2025, 3, 10), 0) == date(2025, 3, 10)


def test_add_months_crosses_year():
    assert add_months(date(2024, 11, 30), 3) == date(2025, 2, 28)
    assert add_months(date(2025, 12, 1), 25) == date(2028, 1, 1)


def test_add_months_clamps_to_month_end():
    """Test day is clamped to the last day of shorter months"""
    assert add_months(date(2025, 1, 31), 1) == date(2025, 2, 28)
    assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)
    assert add_months(date(2025, 5, 31), 1) == date(2025, 6, 30)


def test_months_elapsed_whole_periods():
    """Test account age counts whole 30-day periods"""
    assert months_elapsed(date(2023, 1, 1), date(2025, 1, 1)) == 24  # 731 days
    assert months_elapsed(date(2025, 1, 1), date(2025, 1, 30)) == 0
    assert months_elapsed(date(2025, 1, 1), date(2025, 1, 31)) == 1


def test_months_elapsed_accepts_datetimes():
    assert months_elapsed(datetime(2024, 1, 1, 9, 30), datetime(2024, 3, 1, 8, 0)) == 2


def test_months_elapsed_missing_or_future():
    assert months_elapsed(None, date(2025, 1, 1)) == 0
    assert months_elapsed(date(2026, 1, 1), date(2025, 1, 1)) == 0
