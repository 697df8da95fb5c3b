"""
Aggregation Engine

DESIGN DECISION: Aggregation is a pure query layer. Every method takes a
LedgerSnapshot and returns derived values; nothing here mutates state or
reads the wall clock (the snapshot's as_of, or an explicitly resolved
TargetMonth, stands in for "now").

GUARANTEES:
- Ratios with a zero denominator saturate to 0, never NaN or infinity
- Orderings are deterministic: ties keep the snapshot's collection order
- A dashboard batch resolves its target month exactly once
"""

from datetime import date, timedelta
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from moneywatch.config import LedgerSettings, get_settings
from moneywatch.ledger.reconciler import BudgetReconciler
from moneywatch.models.ledger import (
    Subscription,
    SubscriptionFrequency,
    SubscriptionStatus,
    Transaction,
)
from moneywatch.models.views import (
    CategoryTotal,
    DailyPoint,
    DashboardQuery,
    DashboardView,
    LedgerSnapshot,
    TargetMonth,
    TransactionTotals,
    TrendPoint,
    Window,
)
from moneywatch.windows import (
    day_windows,
    month_window,
    previous_month,
    resolve_target_month,
    span_windows,
)


ZERO = Decimal("0")
HUNDRED = Decimal("100")
WEEKS_PER_MONTH = Decimal("4.33")
MONTHS_PER_YEAR = Decimal("12")

ALL_CATEGORIES = "All"

TREND_FIELDS = ("income", "expense", "savings", "savings_rate_pct", "budget_spent", "budget_limit")


# =============================================================================
# PURE HELPERS
# =============================================================================

def subscription_monthly_equivalent(subscription: Subscription) -> Decimal:
    """
    Normalize a subscription's billing amount to a per-month figure.

    weekly x 4.33, yearly / 12, monthly as-is.
    """
    if subscription.frequency == SubscriptionFrequency.WEEKLY:
        return subscription.amount * WEEKS_PER_MONTH
    if subscription.frequency == SubscriptionFrequency.YEARLY:
        return subscription.amount / MONTHS_PER_YEAR
    return subscription.amount


def percent_change(current: Decimal, previous: Decimal) -> Decimal:
    """(current - previous) / |previous| * 100, or 0 when previous is 0."""
    if previous == 0:
        return ZERO
    return (Decimal(current) - Decimal(previous)) / abs(Decimal(previous)) * HUNDRED


def month_over_month_change(current: TrendPoint, previous: TrendPoint, field: str) -> Decimal:
    """
    Percentage change of one trend field between two periods.

    Saturates to 0 when the previous value is 0.

    Raises:
        ValueError: If `field` is not a numeric trend field
    """
    if field not in TREND_FIELDS:
        raise ValueError(f"Unknown trend field: {field}. Expected one of {TREND_FIELDS}")
    return percent_change(getattr(current, field), getattr(previous, field))


def savings_rate(income: Decimal, expense: Decimal) -> Decimal:
    """Savings as a percentage of income, 0 when there is no income."""
    if income <= 0:
        return ZERO
    return (income - expense) / income * HUNDRED


def transaction_totals(transactions: Iterable[Transaction]) -> TransactionTotals:
    """Income, expense (as a positive figure) and net over any transactions."""
    count = 0
    income = ZERO
    expense = ZERO
    for t in transactions:
        count += 1
        if t.amount > 0:
            income += t.amount
        elif t.amount < 0:
            expense += abs(t.amount)
    return TransactionTotals(count=count, income=income, expense=expense, net=income - expense)


def days_until_billing(subscription: Subscription, today: date) -> int:
    """Whole days until the next billing date (negative if overdue)."""
    return (subscription.next_billing - today).days


# =============================================================================
# ENGINE
# =============================================================================

class AggregationEngine:
    """
    Produces every derived view from a ledger snapshot.

    Configuration (top-N cutoff, horizons, week start) comes from
    LedgerSettings; the engine itself holds no ledger state.
    """

    def __init__(self, settings: Optional[LedgerSettings] = None):
        self._settings = settings or get_settings().ledger
        self._reconciler = BudgetReconciler(
            week_start=self._settings.week_start_day,
            warning_pct=self._settings.budget_warning_pct,
        )

    # -------------------------------------------------------------------------
    # Transactions
    # -------------------------------------------------------------------------

    @staticmethod
    def transactions_in(snapshot: LedgerSnapshot, window: Window) -> list[Transaction]:
        return [t for t in snapshot.transactions if window.contains(t.date)]

    @staticmethod
    def filter_transactions(
        snapshot: LedgerSnapshot,
        search: str = "",
        category: Optional[str] = None,
    ) -> list[Transaction]:
        """
        Transactions matching a search term and category.

        The search is a case-insensitive substring match on description or
        category. A category of None or "All" matches everything.
        """
        needle = search.strip().lower()
        results = []
        for t in snapshot.transactions:
            if category not in (None, ALL_CATEGORIES) and t.category != category:
                continue
            if needle and needle not in t.description.lower() and needle not in t.category.lower():
                continue
            results.append(t)
        return results

    @staticmethod
    def recent_transactions(snapshot: LedgerSnapshot, limit: int) -> list[Transaction]:
        """Newest by date; same-day ties keep collection order."""
        ordered = sorted(snapshot.transactions, key=lambda t: t.date, reverse=True)
        return ordered[:limit]

    # -------------------------------------------------------------------------
    # Spending breakdowns
    # -------------------------------------------------------------------------

    def category_breakdown(
        self,
        snapshot: LedgerSnapshot,
        window: Window,
        exclude_categories: Sequence[str] = ("Income",),
        limit: Optional[int] = None,
    ) -> list[CategoryTotal]:
        """
        Expense totals per category, largest first, top N only.

        Grouping preserves first-encountered order and the sort is stable, so
        equal totals keep that order.
        """
        limit = self._settings.top_category_limit if limit is None else limit
        excluded = set(exclude_categories)

        totals: dict[str, Decimal] = {}
        for t in snapshot.transactions:
            if t.amount >= 0 or t.category in excluded or not window.contains(t.date):
                continue
            totals[t.category] = totals.get(t.category, ZERO) + abs(t.amount)

        grand_total = sum(totals.values(), ZERO)
        ranked = sorted(totals.items(), key=lambda item: item[1], reverse=True)

        return [
            CategoryTotal(
                category=category,
                total=total,
                share_pct=total / grand_total * HUNDRED if grand_total else ZERO,
            )
            for category, total in ranked[:limit]
        ]

    def trend_point(self, snapshot: LedgerSnapshot, window: Window) -> TrendPoint:
        in_window = self.transactions_in(snapshot, window)
        totals = transaction_totals(in_window)

        budget_spent = sum(
            (self._reconciler.spending(in_window, b.category, window) for b in snapshot.budgets),
            ZERO,
        )
        budget_limit = sum((b.limit for b in snapshot.budgets), ZERO)

        return TrendPoint(
            window=window,
            income=totals.income,
            expense=totals.expense,
            savings=totals.net,
            savings_rate_pct=savings_rate(totals.income, totals.expense),
            budget_spent=budget_spent,
            budget_limit=budget_limit,
            transaction_count=totals.count,
        )

    def trend_series(self, snapshot: LedgerSnapshot, windows: Sequence[Window]) -> list[TrendPoint]:
        """One point per window, in the order given (oldest first by convention)."""
        return [self.trend_point(snapshot, window) for window in windows]

    def daily_series(self, snapshot: LedgerSnapshot, windows: Sequence[Window]) -> list[DailyPoint]:
        """
        One point per day window, zero-filled.

        Buckets are assigned in a single pass, so the counts always add up to
        the number of transactions inside the month.
        """
        days = [w.start for w in windows]
        income = {day: ZERO for day in days}
        expense = {day: ZERO for day in days}
        counts = {day: 0 for day in days}

        for t in snapshot.transactions:
            if t.date not in counts:
                continue
            counts[t.date] += 1
            if t.amount > 0:
                income[t.date] += t.amount
            elif t.amount < 0:
                expense[t.date] += abs(t.amount)

        return [
            DailyPoint(
                day=day,
                income=income[day],
                expense=expense[day],
                net=income[day] - expense[day],
                transaction_count=counts[day],
            )
            for day in days
        ]

    # -------------------------------------------------------------------------
    # Subscriptions
    # -------------------------------------------------------------------------

    @staticmethod
    def filter_subscriptions(
        snapshot: LedgerSnapshot,
        status: Optional[SubscriptionStatus] = None,
    ) -> list[Subscription]:
        if status is None:
            return list(snapshot.subscriptions)
        return [s for s in snapshot.subscriptions if s.status == status]

    def total_monthly_subscription_cost(self, snapshot: LedgerSnapshot) -> Decimal:
        """Monthly-equivalent cost of active subscriptions only."""
        return sum(
            (
                subscription_monthly_equivalent(s)
                for s in self.filter_subscriptions(snapshot, SubscriptionStatus.ACTIVE)
            ),
            ZERO,
        )

    def total_yearly_subscription_cost(self, snapshot: LedgerSnapshot) -> Decimal:
        return self.total_monthly_subscription_cost(snapshot) * MONTHS_PER_YEAR

    def upcoming_bills(
        self,
        snapshot: LedgerSnapshot,
        from_date: date,
        horizon_days: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> list[Subscription]:
        """
        Active subscriptions billing in [from_date, from_date + horizon_days].

        Sorted by next billing date; ties keep collection order.
        """
        horizon_days = self._settings.upcoming_horizon_days if horizon_days is None else horizon_days
        until = from_date + timedelta(days=horizon_days)
        due = [
            s for s in self.filter_subscriptions(snapshot, SubscriptionStatus.ACTIVE)
            if from_date <= s.next_billing <= until
        ]
        due.sort(key=lambda s: s.next_billing)
        return due if limit is None else due[:limit]

    # -------------------------------------------------------------------------
    # Accounts
    # -------------------------------------------------------------------------

    @staticmethod
    def net_worth(snapshot: LedgerSnapshot) -> Decimal:
        """Sum of signed balances; credit card debt is already negative."""
        return sum((a.balance for a in snapshot.accounts), ZERO)

    # -------------------------------------------------------------------------
    # Dashboard batch
    # -------------------------------------------------------------------------

    def build_dashboard(
        self,
        snapshot: LedgerSnapshot,
        query: Optional[DashboardQuery] = None,
        target: Optional[TargetMonth] = None,
    ) -> DashboardView:
        """
        Compute every dashboard figure against one snapshot and one month.

        Args:
            snapshot: The ledger copy to read
            query: Display options; defaults to the configured ones
            target: Pre-resolved month. If None, it is resolved once here
                    from the query and the snapshot's as_of date.
        """
        query = query or DashboardQuery()
        if target is None:
            target = resolve_target_month(query.year, query.month, today=snapshot.as_of)

        span = query.trend_span_months or self._settings.trend_span_months
        horizon = (
            query.upcoming_horizon_days
            if query.upcoming_horizon_days is not None
            else self._settings.upcoming_horizon_days
        )
        recent_limit = (
            query.recent_limit
            if query.recent_limit is not None
            else self._settings.recent_transaction_limit
        )

        current_window = month_window(target.year, target.month)
        previous_window = month_window(*previous_month(target.year, target.month))
        current = self.trend_point(snapshot, current_window)
        previous = self.trend_point(snapshot, previous_window)

        progress = list(snapshot.budget_progress)

        return DashboardView(
            target=target,
            net_worth=self.net_worth(snapshot),
            current_month=current,
            previous_month=previous,
            spending_change_pct=month_over_month_change(current, previous, "expense"),
            income_change_pct=month_over_month_change(current, previous, "income"),
            trend=self.trend_series(snapshot, span_windows(span, target.year, target.month)),
            category_breakdown=self.category_breakdown(
                snapshot, current_window, exclude_categories=query.exclude_categories
            ),
            daily=self.daily_series(snapshot, day_windows(target.year, target.month)),
            budget_summary=self._reconciler.summarize(progress),
            budget_progress=progress,
            monthly_subscription_cost=self.total_monthly_subscription_cost(snapshot),
            yearly_subscription_cost=self.total_yearly_subscription_cost(snapshot),
            active_subscription_count=len(
                self.filter_subscriptions(snapshot, SubscriptionStatus.ACTIVE)
            ),
            upcoming_bills=self.upcoming_bills(snapshot, target.today, horizon),
            recent_transactions=self.recent_transactions(snapshot, recent_limit),
        )
