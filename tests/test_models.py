"""
Tests for MoneyWatch models

Test strategy:
1. Unit tests for individual components (models, windows, reconciler, engine)
2. Integration tests for store + repository flows (in-memory storage)
3. No real filesystem outside pytest's tmp_path
"""

import pytest
from datetime import date, datetime
from decimal import Decimal

from pydantic import ValidationError

from moneywatch.models.ledger import (
    Account,
    AccountType,
    Budget,
    BudgetPeriod,
    Subscription,
    SubscriptionFrequency,
    SubscriptionStatus,
    Transaction,
    TransactionType,
)
from moneywatch.models.views import Window
from moneywatch.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)


class TestTransactionModel:
    """Tests for the Transaction model."""

    def test_expense_creation(self):
        """Test a negative amount typed as expense."""
        tx = Transaction(
            amount=Decimal("-42.50"),
            description="Whole Foods",
            category="Food & Dining",
            date=date(2025, 3, 4),
            type=TransactionType.EXPENSE,
        )
        assert tx.is_expense
        assert not tx.is_income
        assert tx.id

    def test_sign_type_mismatch_rejected(self):
        """Test that a positive amount cannot be an expense."""
        with pytest.raises(ValidationError, match="disagrees"):
            Transaction(
                amount=Decimal("10"),
                description="Refund",
                category="Shopping",
                date=date(2025, 3, 4),
                type=TransactionType.EXPENSE,
            )

    def test_negative_income_rejected(self):
        """Test that a negative amount cannot be income."""
        with pytest.raises(ValidationError):
            Transaction(
                amount=Decimal("-10"),
                description="Salary",
                category="Income",
                date=date(2025, 3, 4),
                type=TransactionType.INCOME,
            )

    def test_from_amount_derives_type(self):
        """Test that from_amount picks the type from the sign."""
        income = Transaction.from_amount(Decimal("100"), description="Pay", category="Income", date=date(2025, 1, 7))
        expense = Transaction.from_amount(Decimal("-5"), description="Coffee", category="Food & Dining", date=date(2025, 1, 7))
        assert income.type == TransactionType.INCOME
        assert expense.type == TransactionType.EXPENSE

    def test_timestamp_string_becomes_date(self):
        """Test that a browser-style timestamp is reduced to its date."""
        tx = Transaction.model_validate({
            "id": "t1",
            "accountId": "Chase Checking",
            "amount": -15.99,
            "description": "Netflix Subscription",
            "category": "Entertainment",
            "date": "2024-02-08T05:00:00.000Z",
            "type": "expense",
        })
        assert tx.date == date(2024, 2, 8)
        assert tx.account_id == "Chase Checking"

    def test_records_are_frozen(self):
        """Test that ledger records cannot be mutated in place."""
        tx = Transaction.from_amount(Decimal("-1"), description="x", category="Other", date=date(2025, 1, 1))
        with pytest.raises(ValidationError):
            tx.amount = Decimal("-2")

    def test_camel_case_dump(self):
        """Test that persisted keys use camelCase."""
        tx = Transaction.from_amount(
            Decimal("-1"), description="x", category="Other", date=date(2025, 1, 1), account_id="1"
        )
        dumped = tx.model_dump(by_alias=True)
        assert "accountId" in dumped
        assert "isRecurring" in dumped


class TestOtherRecords:
    """Tests for accounts, budgets and subscriptions."""

    def test_account_defaults(self):
        """Test Account defaults."""
        account = Account(name="Card", type=AccountType.CREDIT_CARD, balance=Decimal("-100"))
        assert account.currency == "USD"
        assert isinstance(account.last_updated, datetime)

    def test_budget_limit_must_be_positive(self):
        """Test that a zero limit is rejected."""
        with pytest.raises(ValidationError):
            Budget(category="Food", limit=Decimal("0"))

    def test_budget_ignores_legacy_spent(self):
        """Test that a stored 'spent' figure is dropped on load."""
        budget = Budget.model_validate({
            "id": "1", "category": "Food & Dining", "limit": 800,
            "spent": 123.45, "color": "#3B82F6", "period": "monthly",
        })
        assert budget.period == BudgetPeriod.MONTHLY
        assert "spent" not in budget.model_dump()

    def test_subscription_parses_next_billing(self):
        """Test nextBilling alias and timestamp parsing."""
        sub = Subscription.model_validate({
            "name": "Netflix", "amount": 15.99, "frequency": "monthly",
            "nextBilling": "2024-02-15T00:00:00.000Z", "status": "active",
            "category": "Entertainment",
        })
        assert sub.next_billing == date(2024, 2, 15)
        assert sub.status == SubscriptionStatus.ACTIVE
        assert sub.frequency == SubscriptionFrequency.MONTHLY

    def test_subscription_amount_must_be_positive(self):
        """Test that subscriptions cannot have negative amounts."""
        with pytest.raises(ValidationError):
            Subscription(name="Bad", amount=Decimal("-1"), next_billing=date(2025, 1, 1))


class TestWindowModel:
    """Tests for the half-open Window."""

    def test_contains_is_half_open(self):
        """Test that the end date is excluded."""
        window = Window(start=date(2025, 1, 1), end=date(2025, 2, 1))
        assert window.contains(date(2025, 1, 1))
        assert window.contains(date(2025, 1, 31))
        assert not window.contains(date(2025, 2, 1))

    def test_end_must_follow_start(self):
        """Test that empty windows are rejected."""
        with pytest.raises(ValidationError):
            Window(start=date(2025, 1, 1), end=date(2025, 1, 1))

    def test_labels(self):
        """Test month and day labels."""
        assert Window(start=date(2025, 3, 1), end=date(2025, 4, 1)).label == "Mar 2025"
        assert Window(start=date(2025, 3, 5), end=date(2025, 3, 6)).label == "2025-03-05"


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        """Test AuditEvent model creation."""
        event = AuditEvent(
            event_type=AuditEventType.CATEGORY_ADDED,
            description="Category added: Pets",
        )
        assert event.event_type == AuditEventType.CATEGORY_ADDED
        assert event.severity == AuditSeverity.INFO

    def test_audit_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        event = AuditEventBuilder.entity_changed(
            "transaction", "added", "tx-1", {"amount": "-5.00"}
        )
        log_dict = event.to_log_dict()
        assert log_dict["event_type"] == "transaction_added"
        assert log_dict["entity_id"] == "tx-1"
        assert log_dict["details"]["amount"] == "-5.00"
        assert log_dict["is_user_action"] is True

    def test_unknown_mutation_rejected(self):
        """Test that the builder refuses unknown entity/action pairs."""
        with pytest.raises(ValueError):
            AuditEventBuilder.entity_changed("category", "deleted", "Food")

    def test_collection_recovered_is_warning(self):
        """Test that recovery events are warnings."""
        event = AuditEventBuilder.collection_recovered("moneywatch-budgets", "bad json", 8)
        assert event.event_type == AuditEventType.PERSISTED_DATA_RECOVERED
        assert event.severity == AuditSeverity.WARNING
        assert event.error_message == "bad json"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
