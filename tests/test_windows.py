"""Tests for the time window resolver."""

import pytest
from datetime import date

from moneywatch.models.ledger import BudgetPeriod
from moneywatch.windows import (
    day_windows,
    days_in_month,
    month_window,
    period_window,
    previous_month,
    resolve_target_month,
    shift_month,
    span_windows,
    week_window,
)


class TestMonthWindows:
    """Tests for month_window and span_windows."""

    def test_month_window_bounds(self):
        """Test that a month window ends at the next month's first day."""
        window = month_window(2025, 3)
        assert window.start == date(2025, 3, 1)
        assert window.end == date(2025, 4, 1)

    def test_december_rolls_into_next_year(self):
        """Test year rollover."""
        window = month_window(2024, 12)
        assert window.end == date(2025, 1, 1)

    def test_adjacent_months_do_not_overlap(self):
        """Test that a boundary day belongs to exactly one window."""
        january = month_window(2025, 1)
        february = month_window(2025, 2)
        boundary = date(2025, 2, 1)
        assert not january.contains(boundary)
        assert february.contains(boundary)
        assert january.end == february.start

    def test_invalid_month_rejected(self):
        """Test that month 13 is a programming error."""
        with pytest.raises(ValueError):
            month_window(2025, 13)

    def test_span_is_oldest_first_and_crosses_years(self):
        """Test a six-month span ending in February."""
        windows = span_windows(6, 2025, 2)
        assert [w.start for w in windows] == [
            date(2024, 9, 1),
            date(2024, 10, 1),
            date(2024, 11, 1),
            date(2024, 12, 1),
            date(2025, 1, 1),
            date(2025, 2, 1),
        ]

    @pytest.mark.parametrize("n", [3, 6, 12])
    def test_span_is_contiguous(self, n):
        """Test that consecutive windows touch without gaps."""
        windows = span_windows(n, 2025, 6)
        assert len(windows) == n
        for older, newer in zip(windows, windows[1:]):
            assert older.end == newer.start
        assert windows[-1] == month_window(2025, 6)

    def test_span_must_be_positive(self):
        """Test that an empty span is rejected."""
        with pytest.raises(ValueError):
            span_windows(0, 2025, 1)

    def test_month_arithmetic(self):
        """Test previous_month and shift_month."""
        assert previous_month(2025, 1) == (2024, 12)
        assert previous_month(2025, 7) == (2025, 6)
        assert shift_month(2025, 11, 3) == (2026, 2)
        assert shift_month(2025, 2, -14) == (2023, 12)


class TestDayWindows:
    """Tests for day_windows."""

    @pytest.mark.parametrize(
        "year,month,expected",
        [
            (2024, 2, 29),  # leap year
            (2023, 2, 28),
            (2100, 2, 28),  # century, not a leap year
            (2000, 2, 29),
            (2025, 4, 30),
            (2025, 12, 31),
        ],
    )
    def test_length_matches_calendar(self, year, month, expected):
        """Test that one window is produced per calendar day."""
        windows = day_windows(year, month)
        assert len(windows) == expected == days_in_month(year, month)
        assert all(w.days == 1 for w in windows)
        assert windows[0].start == date(year, month, 1)
        assert windows[-1].end == month_window(year, month).end


class TestWeekAndPeriodWindows:
    """Tests for weekly windows and budget periods."""

    def test_week_starts_monday_by_default(self):
        """Test the Monday-start week holding a Wednesday."""
        window = week_window(date(2025, 3, 12))  # Wednesday
        assert window.start == date(2025, 3, 10)
        assert window.end == date(2025, 3, 17)

    def test_week_can_start_sunday(self):
        """Test a Sunday-start week."""
        window = week_window(date(2025, 3, 12), week_start=6)
        assert window.start == date(2025, 3, 9)

    def test_reference_on_week_start(self):
        """Test that the start day itself opens its own week."""
        monday = date(2025, 3, 10)
        assert week_window(monday).start == monday

    def test_period_window(self):
        """Test monthly and weekly budget periods."""
        today = date(2025, 3, 12)
        assert period_window(BudgetPeriod.MONTHLY, today) == month_window(2025, 3)
        assert period_window(BudgetPeriod.WEEKLY, today) == week_window(today)


class TestTargetMonth:
    """Tests for resolve_target_month."""

    def test_defaults_to_today(self):
        """Test that the wall-clock month is used when nothing is chosen."""
        target = resolve_target_month(today=date(2025, 8, 19))
        assert (target.year, target.month) == (2025, 8)
        assert target.today == date(2025, 8, 19)

    def test_explicit_selection(self):
        """Test an explicit month/year."""
        target = resolve_target_month(2024, 2, today=date(2025, 8, 19))
        assert (target.year, target.month) == (2024, 2)

    def test_invalid_month(self):
        """Test that month 0 is rejected."""
        with pytest.raises(ValueError):
            resolve_target_month(2025, 0, today=date(2025, 1, 1))
