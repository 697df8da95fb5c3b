"""Tests for default collections and the synthetic history generator."""

import pytest
from datetime import date
from decimal import Decimal

from moneywatch.ledger.seed import (
    DEFAULT_CATEGORIES,
    default_accounts,
    default_budgets,
    default_categories,
    default_subscriptions,
    generate_transactions,
)
from moneywatch.models.ledger import SubscriptionStatus, TransactionType


TODAY = date(2025, 3, 26)


class TestDefaults:
    """Tests for the fixed default collections."""

    def test_accounts(self):
        """Test the three default accounts and their net worth."""
        accounts = default_accounts()
        assert [a.id for a in accounts] == ["1", "2", "3"]
        assert sum(a.balance for a in accounts) == Decimal("19419.56")

    def test_budgets_have_distinct_categories(self):
        """Test one default budget per category."""
        budgets = default_budgets()
        assert len(budgets) == 8
        assert len({b.category for b in budgets}) == 8
        assert all(b.category in DEFAULT_CATEGORIES for b in budgets)

    def test_subscriptions_relative_to_today(self):
        """Test billing dates and the single cancelled subscription."""
        subscriptions = default_subscriptions(TODAY)
        assert len(subscriptions) == 6
        cancelled = [s for s in subscriptions if s.status == SubscriptionStatus.CANCELLED]
        assert [s.name for s in cancelled] == ["Disney+"]
        gym = next(s for s in subscriptions if s.name == "Gym Membership")
        assert gym.next_billing == date(2025, 3, 31)

    def test_categories_are_a_copy(self):
        """Test that callers cannot mutate the module default."""
        categories = default_categories()
        categories.append("Pets")
        assert "Pets" not in DEFAULT_CATEGORIES


class TestGeneratedHistory:
    """Tests for generate_transactions."""

    def test_same_seed_same_ledger(self):
        """Test reproducibility."""
        first = generate_transactions(today=TODAY, seed=11)
        second = generate_transactions(today=TODAY, seed=11)
        assert first == second

    def test_no_future_dates(self):
        """Test that nothing is dated after today."""
        history = generate_transactions(today=TODAY, seed=5)
        assert max(t.date for t in history) <= TODAY

    def test_covers_requested_months(self):
        """Test that a year of history starts eleven months back."""
        history = generate_transactions(today=TODAY, months=12, seed=5)
        assert min(t.date for t in history) >= date(2024, 4, 1)
        assert {(t.date.year, t.date.month) for t in history} >= {(2024, 4), (2025, 3)}

    def test_enough_records_for_a_full_year(self):
        """Test the default history clears the reseed minimum."""
        assert len(generate_transactions(today=TODAY, seed=5)) >= 100

    def test_sign_and_type_agree(self):
        """Test every generated record's sign against its type."""
        for t in generate_transactions(today=TODAY, seed=9):
            assert (t.amount > 0) == (t.type == TransactionType.INCOME)
            assert t.amount == t.amount.quantize(Decimal("0.01"))

    def test_sorted_newest_first_with_unique_ids(self):
        """Test ordering and id uniqueness."""
        history = generate_transactions(today=TODAY, seed=9)
        dates = [t.date for t in history]
        assert dates == sorted(dates, reverse=True)
        assert len({t.id for t in history}) == len(history)

    def test_months_must_be_positive(self):
        """Test that an empty history is rejected."""
        with pytest.raises(ValueError):
            generate_transactions(today=TODAY, months=0)
