"""Calendar window package."""

from moneywatch.windows.resolver import (
    day_windows,
    days_in_month,
    month_window,
    next_month,
    period_window,
    previous_month,
    resolve_target_month,
    shift_month,
    span_windows,
    week_window,
)

__all__ = [
    "day_windows",
    "days_in_month",
    "month_window",
    "next_month",
    "period_window",
    "previous_month",
    "resolve_target_month",
    "shift_month",
    "span_windows",
    "week_window",
]
