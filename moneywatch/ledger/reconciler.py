"""
Budget Reconciler

Derives each budget's spend for its current period from the transaction set.

POLICY: the period is always the one containing "today" at reconciliation
time, regardless of which month the dashboard is displaying. Budget progress
means "this billing period".

Cost is O(transactions x budgets), fine at client scale.
"""

from datetime import date
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from moneywatch.models.ledger import Budget, Transaction
from moneywatch.models.views import (
    BudgetProgress,
    BudgetStatus,
    BudgetSummary,
    Window,
)
from moneywatch.windows import period_window


HUNDRED = Decimal("100")


class BudgetReconciler:
    """
    Computes BudgetProgress views.

    Stateless apart from calendar configuration: reconciling twice with the
    same inputs yields identical results.
    """

    def __init__(self, week_start: int = 0, warning_pct: float = 80.0):
        self._week_start = week_start
        self._warning_pct = Decimal(str(warning_pct))

    @staticmethod
    def spending(
        transactions: Iterable[Transaction],
        category: str,
        window: Window,
    ) -> Decimal:
        """Sum of absolute expense amounts in `category` inside `window`."""
        return sum(
            (
                abs(t.amount)
                for t in transactions
                if t.category == category and t.amount < 0 and window.contains(t.date)
            ),
            Decimal("0"),
        )

    def current_window(self, budget: Budget, today: date) -> Window:
        return period_window(budget.period, today, self._week_start)

    def reconcile_budget(
        self,
        budget: Budget,
        transactions: Sequence[Transaction],
        today: date,
    ) -> BudgetProgress:
        window = self.current_window(budget, today)
        spent = self.spending(transactions, budget.category, window)

        # guards legacy rows with a zero limit
        utilization = spent / budget.limit * HUNDRED if budget.limit > 0 else Decimal("0")

        if utilization >= HUNDRED:
            status = BudgetStatus.OVER_BUDGET
        elif utilization >= self._warning_pct:
            status = BudgetStatus.WARNING
        else:
            status = BudgetStatus.ON_TRACK

        return BudgetProgress(
            budget=budget,
            window=window,
            spent=spent,
            remaining=budget.limit - spent,
            utilization_pct=utilization,
            progress_pct=min(utilization, HUNDRED),
            status=status,
        )

    def reconcile(
        self,
        budgets: Sequence[Budget],
        transactions: Sequence[Transaction],
        today: date,
    ) -> list[BudgetProgress]:
        """Reconcile every budget, preserving budget order."""
        return [self.reconcile_budget(b, transactions, today) for b in budgets]

    @staticmethod
    def summarize(progress: Sequence[BudgetProgress]) -> BudgetSummary:
        total_budgeted = sum((p.budget.limit for p in progress), Decimal("0"))
        total_spent = sum((p.spent for p in progress), Decimal("0"))
        return BudgetSummary(
            budget_count=len(progress),
            total_budgeted=total_budgeted,
            total_spent=total_spent,
            total_remaining=total_budgeted - total_spent,
            over_budget_count=sum(1 for p in progress if p.is_over_budget),
        )


def find_progress(
    progress: Sequence[BudgetProgress],
    budget_id: str,
) -> Optional[BudgetProgress]:
    """Look up the progress entry for a budget id."""
    for entry in progress:
        if entry.budget.id == budget_id:
            return entry
    return None
