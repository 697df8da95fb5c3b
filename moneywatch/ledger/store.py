"""
Ledger Store

The single source of truth for accounts, transactions, budgets,
subscriptions and categories.

GUARANTEES:
- Every mutation touching transactions or budgets reconciles budget
  progress before returning (synchronous, no deferred recomputation)
- Progress read after the clock has moved into a new day is reconciled
  again first, so a period rollover never shows last period's spend
- Updates and deletes of unknown ids are silent no-ops
- Updates are full replacements, never patches
- snapshot() hands out an immutable copy, so a dashboard batch computed
  from it stays self-consistent

Persistence is a checkpoint after each mutation when a repository is
attached. A failed save is logged; the in-memory ledger stays authoritative.
"""

from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING, Callable, Optional, TypeVar

from moneywatch.audit import AuditLogger
from moneywatch.config import LedgerSettings, get_settings
from moneywatch.ledger.reconciler import BudgetReconciler, find_progress
from moneywatch.models.audit import AuditEventBuilder
from moneywatch.models.ledger import (
    Account,
    Budget,
    LedgerData,
    LedgerRecord,
    Subscription,
    SubscriptionStatus,
    Transaction,
    new_id,
)
from moneywatch.models.views import BudgetProgress, LedgerSnapshot, Window
from moneywatch.services.storage.interface import LedgerKey, StorageError
from moneywatch.windows import month_window

if TYPE_CHECKING:
    from moneywatch.services.storage.repository import LedgerRepository


RecordT = TypeVar("RecordT", bound=LedgerRecord)


class LedgerStore:
    """
    Owns the mutable ledger.

    Collections are held as lists of frozen records; accessors return
    tuples so callers cannot mutate the store behind its back.
    """

    def __init__(
        self,
        data: Optional[LedgerData] = None,
        repository: Optional["LedgerRepository"] = None,
        clock: Optional[Callable[[], date]] = None,
        audit_logger: Optional[AuditLogger] = None,
        settings: Optional[LedgerSettings] = None,
    ):
        """
        Initialize the store.

        Args:
            data: Initial collections (empty ledger if None)
            repository: Persistence checkpoint target. If None, the ledger
                        lives only in memory.
            clock: Returns "today"; budget periods are resolved against it
            audit_logger: Where mutation events go
            settings: Ledger settings (week start, warning threshold)
        """
        data = data or LedgerData()
        self._accounts: list[Account] = list(data.accounts)
        self._transactions: list[Transaction] = list(data.transactions)
        self._budgets: list[Budget] = list(data.budgets)
        self._subscriptions: list[Subscription] = list(data.subscriptions)
        self._categories: list[str] = list(data.categories)

        self._repository = repository
        self._clock = clock or date.today
        self._audit = audit_logger or AuditLogger()
        self._settings = settings or get_settings().ledger
        self._reconciler = BudgetReconciler(
            week_start=self._settings.week_start_day,
            warning_pct=self._settings.budget_warning_pct,
        )
        self._progress: list[BudgetProgress] = []
        self._progress_as_of: Optional[date] = None
        self._reconcile_all()

    @classmethod
    def from_repository(
        cls,
        repository: "LedgerRepository",
        clock: Optional[Callable[[], date]] = None,
        audit_logger: Optional[AuditLogger] = None,
        settings: Optional[LedgerSettings] = None,
    ) -> "LedgerStore":
        """Load (or seed) every collection and attach the repository."""
        clock = clock or date.today
        return cls(
            data=repository.load(today=clock()),
            repository=repository,
            clock=clock,
            audit_logger=audit_logger,
            settings=settings,
        )

    # =========================================================================
    # READ ACCESS
    # =========================================================================

    @property
    def accounts(self) -> tuple[Account, ...]:
        return tuple(self._accounts)

    @property
    def transactions(self) -> tuple[Transaction, ...]:
        """Transactions in insertion order (newest insert first)."""
        return tuple(self._transactions)

    @property
    def budgets(self) -> tuple[Budget, ...]:
        return tuple(self._budgets)

    @property
    def subscriptions(self) -> tuple[Subscription, ...]:
        return tuple(self._subscriptions)

    @property
    def categories(self) -> tuple[str, ...]:
        return tuple(self._categories)

    def get_account(self, account_id: str) -> Optional[Account]:
        return _find(self._accounts, account_id)

    def get_transaction(self, transaction_id: str) -> Optional[Transaction]:
        return _find(self._transactions, transaction_id)

    def get_budget(self, budget_id: str) -> Optional[Budget]:
        return _find(self._budgets, budget_id)

    def get_subscription(self, subscription_id: str) -> Optional[Subscription]:
        return _find(self._subscriptions, subscription_id)

    def budget_progress(self) -> list[BudgetProgress]:
        """Reconciled progress for every budget, in budget order."""
        return list(self._current_progress())

    def get_budget_progress(self, budget_id: str) -> Optional[BudgetProgress]:
        return find_progress(self._current_progress(), budget_id)

    def get_budget_spending(self, category: str, window: Optional[Window] = None) -> Decimal:
        """
        Expense total for a category.

        Without a window, the current calendar month is used.
        """
        if window is None:
            today = self._clock()
            window = month_window(today.year, today.month)
        return self._reconciler.spending(self._transactions, category, window)

    def transactions_for_display(self) -> list[Transaction]:
        """Date descending; same-day ties keep insertion order."""
        return sorted(self._transactions, key=lambda t: t.date, reverse=True)

    def snapshot(self) -> LedgerSnapshot:
        """Immutable copy of the ledger for one query batch."""
        progress = self._current_progress()
        return LedgerSnapshot(
            as_of=self._progress_as_of,
            accounts=tuple(self._accounts),
            transactions=tuple(self._transactions),
            budgets=tuple(self._budgets),
            subscriptions=tuple(self._subscriptions),
            categories=tuple(self._categories),
            budget_progress=tuple(progress),
        )

    def to_data(self) -> LedgerData:
        return LedgerData(
            accounts=list(self._accounts),
            transactions=list(self._transactions),
            budgets=list(self._budgets),
            subscriptions=list(self._subscriptions),
            categories=list(self._categories),
        )

    # =========================================================================
    # ACCOUNTS
    # =========================================================================

    def add_account(self, account: Account) -> Account:
        account = account.model_copy(update={"id": new_id()})
        self._accounts.append(account)
        self._audit.log_entity_changed("account", "added", account.id, {"name": account.name})
        self._persist(LedgerKey.ACCOUNTS)
        return account

    def update_account(self, account_id: str, account: Account) -> Optional[Account]:
        updated = self._replace(self._accounts, account_id, account, "account")
        if updated is not None:
            self._persist(LedgerKey.ACCOUNTS)
        return updated

    def delete_account(self, account_id: str) -> bool:
        """Remove an account. Its transactions are kept (orphans are allowed)."""
        if not self._remove(self._accounts, account_id, "account"):
            return False
        self._persist(LedgerKey.ACCOUNTS)
        return True

    # =========================================================================
    # TRANSACTIONS
    # =========================================================================

    def add_transaction(self, transaction: Transaction) -> Transaction:
        """Assign a fresh id and prepend (newest first)."""
        transaction = transaction.model_copy(update={"id": new_id()})
        self._transactions.insert(0, transaction)
        self._audit.log_entity_changed(
            "transaction", "added", transaction.id,
            {"amount": str(transaction.amount), "category": transaction.category},
        )
        self._after_transactions_changed()
        return transaction

    def update_transaction(self, transaction_id: str, transaction: Transaction) -> Optional[Transaction]:
        """Replace the whole record. Unknown ids are ignored."""
        updated = self._replace(self._transactions, transaction_id, transaction, "transaction")
        if updated is not None:
            self._after_transactions_changed()
        return updated

    def delete_transaction(self, transaction_id: str) -> bool:
        if not self._remove(self._transactions, transaction_id, "transaction"):
            return False
        self._after_transactions_changed()
        return True

    # =========================================================================
    # BUDGETS
    # =========================================================================

    def add_budget(self, budget: Budget) -> BudgetProgress:
        """Add a budget and return its freshly reconciled progress."""
        budget = budget.model_copy(update={"id": new_id()})
        self._current_progress()
        self._budgets.append(budget)
        progress = self._reconcile_one(budget)
        self._progress.append(progress)
        self._audit.log_entity_changed(
            "budget", "added", budget.id,
            {"category": budget.category, "limit": str(budget.limit)},
        )
        self._persist(LedgerKey.BUDGETS)
        return progress

    def update_budget(self, budget_id: str, budget: Budget) -> Optional[BudgetProgress]:
        self._current_progress()
        updated = self._replace(self._budgets, budget_id, budget, "budget")
        if updated is None:
            return None
        progress = self._reconcile_one(updated)
        self._progress = [
            progress if entry.budget.id == budget_id else entry
            for entry in self._progress
        ]
        self._persist(LedgerKey.BUDGETS)
        return progress

    def delete_budget(self, budget_id: str) -> bool:
        if not self._remove(self._budgets, budget_id, "budget"):
            return False
        self._progress = [p for p in self._progress if p.budget.id != budget_id]
        self._persist(LedgerKey.BUDGETS)
        return True

    # =========================================================================
    # SUBSCRIPTIONS
    # =========================================================================

    def add_subscription(self, subscription: Subscription) -> Subscription:
        subscription = subscription.model_copy(update={"id": new_id()})
        self._subscriptions.append(subscription)
        self._audit.log_entity_changed(
            "subscription", "added", subscription.id, {"name": subscription.name}
        )
        self._persist(LedgerKey.SUBSCRIPTIONS)
        return subscription

    def update_subscription(self, subscription_id: str, subscription: Subscription) -> Optional[Subscription]:
        updated = self._replace(self._subscriptions, subscription_id, subscription, "subscription")
        if updated is not None:
            self._persist(LedgerKey.SUBSCRIPTIONS)
        return updated

    def update_subscription_status(
        self,
        subscription_id: str,
        status: SubscriptionStatus,
    ) -> Optional[Subscription]:
        """
        Move a subscription to any status.

        Every transition is allowed, including cancelled -> active.
        next_billing is left untouched.
        """
        status = SubscriptionStatus(status)
        for index, current in enumerate(self._subscriptions):
            if current.id == subscription_id:
                updated = current.model_copy(update={"status": status})
                self._subscriptions[index] = updated
                self._audit.log(AuditEventBuilder.subscription_status_changed(
                    subscription_id, current.status.value, status.value
                ))
                self._persist(LedgerKey.SUBSCRIPTIONS)
                return updated
        self._audit.log_not_found("subscription", subscription_id, "status change")
        return None

    def delete_subscription(self, subscription_id: str) -> bool:
        if not self._remove(self._subscriptions, subscription_id, "subscription"):
            return False
        self._persist(LedgerKey.SUBSCRIPTIONS)
        return True

    # =========================================================================
    # CATEGORIES
    # =========================================================================

    def add_category(self, name: str) -> bool:
        """
        Append a category.

        Idempotent: blank names and names already present are ignored.
        Returns True only if the set grew.
        """
        name = name.strip()
        if not name or name in self._categories:
            return False
        self._categories.append(name)
        self._audit.log(AuditEventBuilder.category_added(name))
        self._persist(LedgerKey.CATEGORIES)
        return True

    # =========================================================================
    # INTERNALS
    # =========================================================================

    def _replace(
        self,
        records: list[RecordT],
        record_id: str,
        replacement: RecordT,
        entity_type: str,
    ) -> Optional[RecordT]:
        for index, current in enumerate(records):
            if current.id == record_id:
                updated = replacement.model_copy(update={"id": record_id})
                records[index] = updated
                self._audit.log_entity_changed(entity_type, "updated", record_id)
                return updated
        self._audit.log_not_found(entity_type, record_id, "update")
        return None

    def _remove(self, records: list[RecordT], record_id: str, entity_type: str) -> bool:
        for index, current in enumerate(records):
            if current.id == record_id:
                del records[index]
                self._audit.log_entity_changed(entity_type, "deleted", record_id)
                return True
        self._audit.log_not_found(entity_type, record_id, "delete")
        return False

    def _reconcile_one(self, budget: Budget) -> BudgetProgress:
        return self._reconciler.reconcile_budget(budget, self._transactions, self._progress_as_of)

    def _current_progress(self) -> list[BudgetProgress]:
        """Progress for today's periods; recomputed once the clock moves on."""
        if self._progress_as_of != self._clock():
            self._reconcile_all()
        return self._progress

    def _reconcile_all(self) -> None:
        today = self._clock()
        self._progress = self._reconciler.reconcile(self._budgets, self._transactions, today)
        self._progress_as_of = today
        self._audit.log(AuditEventBuilder.budgets_reconciled(
            len(self._budgets), len(self._transactions), today.isoformat()
        ))

    def _after_transactions_changed(self) -> None:
        self._reconcile_all()
        self._persist(LedgerKey.TRANSACTIONS)

    def _persist(self, key: LedgerKey) -> None:
        if self._repository is None:
            return
        collections = {
            LedgerKey.ACCOUNTS: self._accounts,
            LedgerKey.TRANSACTIONS: self._transactions,
            LedgerKey.BUDGETS: self._budgets,
            LedgerKey.SUBSCRIPTIONS: self._subscriptions,
            LedgerKey.CATEGORIES: self._categories,
        }
        try:
            self._repository.save_collection(key, collections[key])
        except StorageError as e:
            self._audit.log_save_failed(self._repository.key_for(key), str(e))


def _find(records: list[RecordT], record_id: str) -> Optional[RecordT]:
    for record in records:
        if record.id == record_id:
            return record
    return None
