"""
Derived View Models for MoneyWatch

Everything in this module is computed from a ledger snapshot and is never
persisted. These are the shapes the presentation layer renders.
"""

import datetime as dt
from decimal import Decimal
from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from moneywatch.models.ledger import (
    Account,
    Budget,
    Subscription,
    Transaction,
)


ZERO = Decimal("0")


# =============================================================================
# CALENDAR WINDOWS
# =============================================================================

class Window(BaseModel):
    """
    A half-open calendar interval [start, end).

    A day equal to `end` belongs to the next window, never to both.
    """
    model_config = ConfigDict(frozen=True)

    start: dt.date
    end: dt.date

    @model_validator(mode='after')
    def validate_order(self) -> 'Window':
        if self.end <= self.start:
            raise ValueError("Window end must be after its start")
        return self

    def contains(self, day: dt.date) -> bool:
        return self.start <= day < self.end

    @property
    def days(self) -> int:
        return (self.end - self.start).days

    @property
    def label(self) -> str:
        """Short label for chart axes ('Mar 2025' for months, ISO date for days)."""
        if self.days == 1:
            return self.start.isoformat()
        if self.start.day == 1 and self.days >= 28:
            return self.start.strftime("%b %Y")
        return f"{self.start.isoformat()}..{self.end.isoformat()}"


class TargetMonth(BaseModel):
    """The month a query batch is computed for, resolved exactly once."""
    model_config = ConfigDict(frozen=True)

    year: int = Field(..., ge=1, le=9999)
    month: int = Field(..., ge=1, le=12)
    today: dt.date = Field(
        ...,
        description="Wall-clock date captured when the batch was resolved"
    )


# =============================================================================
# BUDGET VIEWS
# =============================================================================

class BudgetStatus(str, Enum):
    """Traffic-light state of a budget."""
    ON_TRACK = "on_track"
    WARNING = "warning"
    OVER_BUDGET = "over_budget"


class BudgetProgress(BaseModel):
    """
    A budget together with its spend for the current period.

    This replaces the stored "spent" field: it is recomputed on every
    reconciliation and discarded afterwards.
    """
    model_config = ConfigDict(frozen=True)

    budget: Budget
    window: Window
    spent: Decimal = Field(..., ge=0)
    remaining: Decimal
    utilization_pct: Decimal = Field(
        ...,
        description="spent / limit * 100, uncapped (0 when limit is 0)"
    )
    progress_pct: Decimal = Field(
        ...,
        description="Utilization capped at 100 for progress bars"
    )
    status: BudgetStatus

    @property
    def is_over_budget(self) -> bool:
        return self.spent > self.budget.limit


class BudgetSummary(BaseModel):
    """Totals across every budget."""

    budget_count: int = 0
    total_budgeted: Decimal = ZERO
    total_spent: Decimal = ZERO
    total_remaining: Decimal = ZERO
    over_budget_count: int = 0


# =============================================================================
# AGGREGATION VIEWS
# =============================================================================

class CategoryTotal(BaseModel):
    """Expense total for one category inside a window."""

    category: str
    total: Decimal = Field(..., ge=0)
    share_pct: Decimal = Field(
        default=ZERO,
        description="Share of all expenses in the window (before truncation)"
    )


class TrendPoint(BaseModel):
    """Income, expense and savings for one window."""

    window: Window
    income: Decimal = ZERO
    expense: Decimal = ZERO
    savings: Decimal = ZERO
    savings_rate_pct: Decimal = ZERO
    budget_spent: Decimal = ZERO
    budget_limit: Decimal = ZERO
    transaction_count: int = 0

    @property
    def label(self) -> str:
        return self.window.label


class DailyPoint(BaseModel):
    """Income and expense for a single calendar day."""

    day: dt.date
    income: Decimal = ZERO
    expense: Decimal = ZERO
    net: Decimal = ZERO
    transaction_count: int = 0


class TransactionTotals(BaseModel):
    """Summary of an arbitrary list of transactions."""

    count: int = 0
    income: Decimal = ZERO
    expense: Decimal = ZERO
    net: Decimal = ZERO


# =============================================================================
# SNAPSHOT
# =============================================================================

class LedgerSnapshot(BaseModel):
    """
    An immutable copy of the ledger for one query batch.

    Every derived view computed from the same snapshot agrees with every
    other, even if the store is mutated while the batch runs.
    """
    model_config = ConfigDict(frozen=True)

    as_of: dt.date
    accounts: tuple[Account, ...] = ()
    transactions: tuple[Transaction, ...] = ()
    budgets: tuple[Budget, ...] = ()
    subscriptions: tuple[Subscription, ...] = ()
    categories: tuple[str, ...] = ()
    budget_progress: tuple[BudgetProgress, ...] = ()


# =============================================================================
# DASHBOARD BATCH
# =============================================================================

class DashboardQuery(BaseModel):
    """
    Parameters for one dashboard render.

    year/month default to the wall-clock month at resolution time.
    """

    year: Optional[int] = Field(default=None, ge=1, le=9999)
    month: Optional[int] = Field(default=None, ge=1, le=12)
    trend_span_months: Optional[Literal[3, 6, 12]] = None
    exclude_categories: tuple[str, ...] = ("Income",)
    upcoming_horizon_days: Optional[int] = Field(default=None, ge=0)
    recent_limit: Optional[int] = Field(default=None, ge=0)


class DashboardView(BaseModel):
    """
    Every derived figure for one dashboard render.

    All fields were computed against the same snapshot and target month.
    """

    target: TargetMonth
    net_worth: Decimal
    current_month: TrendPoint
    previous_month: TrendPoint
    spending_change_pct: Decimal
    income_change_pct: Decimal
    trend: list[TrendPoint] = Field(default_factory=list)
    category_breakdown: list[CategoryTotal] = Field(default_factory=list)
    daily: list[DailyPoint] = Field(default_factory=list)
    budget_summary: BudgetSummary
    budget_progress: list[BudgetProgress] = Field(default_factory=list)
    monthly_subscription_cost: Decimal = ZERO
    yearly_subscription_cost: Decimal = ZERO
    active_subscription_count: int = 0
    upcoming_bills: list[Subscription] = Field(default_factory=list)
    recent_transactions: list[Transaction] = Field(default_factory=list)
