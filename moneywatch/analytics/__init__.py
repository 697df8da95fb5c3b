"""Aggregation package."""

from moneywatch.analytics.engine import (
    AggregationEngine,
    days_until_billing,
    month_over_month_change,
    percent_change,
    savings_rate,
    subscription_monthly_equivalent,
    transaction_totals,
)

__all__ = [
    "AggregationEngine",
    "days_until_billing",
    "month_over_month_change",
    "percent_change",
    "savings_rate",
    "subscription_monthly_equivalent",
    "transaction_totals",
]
