"""Tests for budget reconciliation."""

import pytest
from datetime import date
from decimal import Decimal

from moneywatch.ledger.reconciler import BudgetReconciler
from moneywatch.models.ledger import Budget, BudgetPeriod, Transaction
from moneywatch.models.views import BudgetStatus
from moneywatch.windows import month_window


TODAY = date(2025, 3, 26)


def tx(amount: str, category: str, day: date) -> Transaction:
    return Transaction.from_amount(
        Decimal(amount), description=f"{category} {amount}", category=category, date=day
    )


@pytest.fixture
def reconciler():
    return BudgetReconciler(week_start=0, warning_pct=80.0)


class TestSpending:
    """Tests for BudgetReconciler.spending."""

    def test_only_expenses_in_category_and_window(self, reconciler):
        """Test the category, sign and window filters together."""
        transactions = [
            tx("-50", "Food", date(2025, 3, 3)),
            tx("-30", "Food", date(2025, 3, 20)),
            tx("-99", "Food", date(2025, 2, 28)),   # previous month
            tx("-99", "Food", date(2025, 4, 1)),    # boundary, next month
            tx("-12", "Travel", date(2025, 3, 5)),  # other category
            tx("500", "Food", date(2025, 3, 5)),    # income
        ]
        spent = reconciler.spending(transactions, "Food", month_window(2025, 3))
        assert spent == Decimal("80")

    def test_no_matches_is_zero(self, reconciler):
        """Test that an unused category reports zero."""
        assert reconciler.spending([], "Food", month_window(2025, 3)) == Decimal("0")


class TestReconcileBudget:
    """Tests for reconcile_budget and reconcile."""

    def test_food_scenario(self, reconciler):
        """Test spend, remaining and status for a simple monthly budget."""
        budget = Budget(category="Food", limit=Decimal("100"))
        transactions = [
            tx("-50", "Food", date(2025, 3, 3)),
            tx("-30", "Food", date(2025, 3, 20)),
        ]
        progress = reconciler.reconcile_budget(budget, transactions, TODAY)
        assert progress.spent == Decimal("80")
        assert progress.remaining == Decimal("20")
        assert not progress.is_over_budget
        assert progress.status == BudgetStatus.WARNING
        assert progress.window == month_window(2025, 3)

    def test_over_budget(self, reconciler):
        """Test that overspending is flagged and progress is capped."""
        budget = Budget(category="Food", limit=Decimal("50"))
        progress = reconciler.reconcile_budget(budget, [tx("-75", "Food", TODAY)], TODAY)
        assert progress.is_over_budget
        assert progress.status == BudgetStatus.OVER_BUDGET
        assert progress.utilization_pct == Decimal("150")
        assert progress.progress_pct == Decimal("100")
        assert progress.remaining == Decimal("-25")

    def test_weekly_budget_uses_current_week(self, reconciler):
        """Test that weekly budgets only count this week's expenses."""
        budget = Budget(category="Food", limit=Decimal("100"), period=BudgetPeriod.WEEKLY)
        transactions = [
            tx("-10", "Food", date(2025, 3, 24)),  # Monday of TODAY's week
            tx("-20", "Food", date(2025, 3, 23)),  # Sunday before
        ]
        progress = reconciler.reconcile_budget(budget, transactions, TODAY)
        assert progress.spent == Decimal("10")
        assert progress.status == BudgetStatus.ON_TRACK

    def test_reconcile_is_idempotent(self, reconciler):
        """Test that reconciling twice gives identical results."""
        budgets = [
            Budget(category="Food", limit=Decimal("100")),
            Budget(category="Travel", limit=Decimal("300")),
        ]
        transactions = [tx("-50", "Food", TODAY), tx("-200", "Travel", TODAY)]
        first = reconciler.reconcile(budgets, transactions, TODAY)
        second = reconciler.reconcile(budgets, transactions, TODAY)
        assert first == second
        assert [p.budget.id for p in first] == [b.id for b in budgets]


class TestSummary:
    """Tests for BudgetReconciler.summarize."""

    def test_totals(self, reconciler):
        """Test totals and over-budget count."""
        budgets = [
            Budget(category="Food", limit=Decimal("100")),
            Budget(category="Travel", limit=Decimal("50")),
        ]
        transactions = [tx("-40", "Food", TODAY), tx("-60", "Travel", TODAY)]
        summary = reconciler.summarize(reconciler.reconcile(budgets, transactions, TODAY))
        assert summary.budget_count == 2
        assert summary.total_budgeted == Decimal("150")
        assert summary.total_spent == Decimal("100")
        assert summary.total_remaining == Decimal("50")
        assert summary.over_budget_count == 1

    def test_empty(self, reconciler):
        """Test the summary of no budgets."""
        summary = reconciler.summarize([])
        assert summary.budget_count == 0
        assert summary.total_spent == Decimal("0")
