"""
Data Models Package

This package contains all Pydantic models used by the MoneyWatch ledger engine.
Authoritative records live in `ledger`; everything in `views` is derived.
"""

from moneywatch.models.ledger import (
    Account,
    AccountType,
    Budget,
    BudgetPeriod,
    LedgerData,
    Subscription,
    SubscriptionFrequency,
    SubscriptionStatus,
    Transaction,
    TransactionType,
    new_id,
)
from moneywatch.models.views import (
    BudgetProgress,
    BudgetStatus,
    BudgetSummary,
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
from moneywatch.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Ledger records
    "Account",
    "AccountType",
    "Budget",
    "BudgetPeriod",
    "LedgerData",
    "Subscription",
    "SubscriptionFrequency",
    "SubscriptionStatus",
    "Transaction",
    "TransactionType",
    "new_id",
    # Derived views
    "BudgetProgress",
    "BudgetStatus",
    "BudgetSummary",
    "CategoryTotal",
    "DailyPoint",
    "DashboardQuery",
    "DashboardView",
    "LedgerSnapshot",
    "TargetMonth",
    "TransactionTotals",
    "TrendPoint",
    "Window",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
