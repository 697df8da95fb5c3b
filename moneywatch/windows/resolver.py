"""
Time Window Resolver

Pure calendar arithmetic. Every aggregation is scoped by half-open
[start, end) windows produced here, so a transaction dated on a boundary
lands in exactly one window.

Month lengths come from the calendar module, never from a fixed table.
"""

import calendar
from datetime import date, timedelta
from typing import Optional

from moneywatch.models.ledger import BudgetPeriod
from moneywatch.models.views import TargetMonth, Window


def _check_month(month: int) -> None:
    if not 1 <= month <= 12:
        raise ValueError(f"Month must be between 1 and 12, got {month}")


def next_month(year: int, month: int) -> tuple[int, int]:
    _check_month(month)
    return (year + 1, 1) if month == 12 else (year, month + 1)


def previous_month(year: int, month: int) -> tuple[int, int]:
    _check_month(month)
    return (year - 1, 12) if month == 1 else (year, month - 1)


def shift_month(year: int, month: int, offset: int) -> tuple[int, int]:
    """Move `offset` months forward (or backward when negative)."""
    _check_month(month)
    index = year * 12 + (month - 1) + offset
    return index // 12, index % 12 + 1


def days_in_month(year: int, month: int) -> int:
    _check_month(month)
    return calendar.monthrange(year, month)[1]


def month_window(year: int, month: int) -> Window:
    """[first day of month, first day of following month)."""
    end_year, end_month = next_month(year, month)
    return Window(start=date(year, month, 1), end=date(end_year, end_month, 1))


def span_windows(n: int, reference_year: int, reference_month: int) -> list[Window]:
    """
    n consecutive month windows ending at the reference month, oldest first.

    Args:
        n: Number of months (3, 6 and 12 are the dashboard spans)
        reference_year: Year of the newest month
        reference_month: Newest month (1-12)
    """
    if n < 1:
        raise ValueError(f"Span must cover at least one month, got {n}")
    return [
        month_window(*shift_month(reference_year, reference_month, offset))
        for offset in range(-(n - 1), 1)
    ]


def day_windows(year: int, month: int) -> list[Window]:
    """One single-day window per calendar day of the month."""
    first = date(year, month, 1)
    one_day = timedelta(days=1)
    return [
        Window(start=first + one_day * i, end=first + one_day * (i + 1))
        for i in range(days_in_month(year, month))
    ]


def week_window(reference: date, week_start: int = 0) -> Window:
    """
    The calendar week holding `reference`.

    Args:
        reference: Any day inside the week
        week_start: First weekday of the week (0=Monday ... 6=Sunday)
    """
    if not 0 <= week_start <= 6:
        raise ValueError(f"week_start must be between 0 and 6, got {week_start}")
    offset = (reference.weekday() - week_start) % 7
    start = reference - timedelta(days=offset)
    return Window(start=start, end=start + timedelta(days=7))


def period_window(period: BudgetPeriod, today: date, week_start: int = 0) -> Window:
    """The current instance of a budget period."""
    if period == BudgetPeriod.WEEKLY:
        return week_window(today, week_start)
    return month_window(today.year, today.month)


def resolve_target_month(
    year: Optional[int] = None,
    month: Optional[int] = None,
    today: Optional[date] = None,
) -> TargetMonth:
    """
    Fix the month a query batch runs against.

    Call once per batch and pass the result around, so every view in the
    batch agrees even if the wall clock rolls over mid-computation.
    """
    today = today or date.today()
    target_month = month if month is not None else today.month
    _check_month(target_month)
    return TargetMonth(
        year=year if year is not None else today.year,
        month=target_month,
        today=today,
    )
