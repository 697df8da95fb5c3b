"""Ledger package: the mutable store, budget reconciliation and seed data."""

from moneywatch.ledger.reconciler import BudgetReconciler
from moneywatch.ledger.seed import (
    DEFAULT_CATEGORIES,
    default_accounts,
    default_budgets,
    default_categories,
    default_subscriptions,
    generate_transactions,
)
from moneywatch.ledger.store import LedgerStore

__all__ = [
    "BudgetReconciler",
    "DEFAULT_CATEGORIES",
    "LedgerStore",
    "default_accounts",
    "default_budgets",
    "default_categories",
    "default_subscriptions",
    "generate_transactions",
]
