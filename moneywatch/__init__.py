"""
MoneyWatch - Ledger Aggregation Engine

The core of a personal-finance tracker: it owns the mutable ledger
(accounts, transactions, budgets, subscriptions, categories) and derives
every time-windowed view a dashboard shows.

DESIGN PRINCIPLES:
1. The ledger store is the single source of truth
2. Derived state is recomputed, never stored
3. Queries run against immutable snapshots
4. Lenient by default: bad local data is reseeded, unknown ids are no-ops
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "MoneyWatch Team"
