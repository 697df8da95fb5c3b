"""
Ledger Repository

Bridges the typed ledger collections and the opaque key-value store.

Responsibilities:
1. Serialize collections to JSON (camelCase keys, ISO dates)
2. Rebuild date-typed fields on load
3. Fall back to defaults when a key is absent or its value is unreadable
4. Report whether the persisted ledger looks stale enough to offer a reset

DESIGN DECISION: Unreadable data is never fatal. The ledger is a local,
non-critical cache that can always be reseeded.
"""

from datetime import date, timedelta
from typing import Any, Callable, Optional

from pydantic import TypeAdapter, ValidationError

from moneywatch.audit import AuditLogger
from moneywatch.config import LedgerSettings, StorageSettings, get_settings
from moneywatch.ledger.seed import (
    default_accounts,
    default_budgets,
    default_categories,
    default_subscriptions,
    generate_transactions,
)
from moneywatch.models.audit import AuditEventBuilder
from moneywatch.models.ledger import (
    Account,
    Budget,
    LedgerData,
    Subscription,
    Transaction,
)
from moneywatch.services.storage.interface import (
    CorruptDataError,
    KeyValueStore,
    LedgerKey,
)


_ADAPTERS: dict[LedgerKey, TypeAdapter] = {
    LedgerKey.ACCOUNTS: TypeAdapter(list[Account]),
    LedgerKey.TRANSACTIONS: TypeAdapter(list[Transaction]),
    LedgerKey.BUDGETS: TypeAdapter(list[Budget]),
    LedgerKey.SUBSCRIPTIONS: TypeAdapter(list[Subscription]),
    LedgerKey.CATEGORIES: TypeAdapter(list[str]),
}


def encode_collection(key: LedgerKey, items: list[Any]) -> str:
    """Serialize one collection to JSON text."""
    return _ADAPTERS[key].dump_json(list(items), by_alias=True).decode("utf-8")


def decode_collection(key: LedgerKey, payload: str) -> list[Any]:
    """
    Parse one collection from JSON text.

    Raises:
        CorruptDataError: If the text is not valid JSON or any record fails
                          validation (bad dates, sign/type mismatch, ...)
    """
    try:
        return _ADAPTERS[key].validate_json(payload)
    except ValidationError as e:
        raise CorruptDataError(
            f"{key.value}: {e.error_count()} invalid value(s); first: {e.errors()[0]['msg']}"
        ) from e


class LedgerRepository:
    """
    Typed access to the five persisted collections.

    Every load either returns stored records or defaults; it never raises
    for bad data. Backend failures (StorageError) on save propagate to the
    caller, which decides how to report them.
    """

    def __init__(
        self,
        store: KeyValueStore,
        settings: Optional[LedgerSettings] = None,
        storage_settings: Optional[StorageSettings] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._store = store
        self._settings = settings or get_settings().ledger
        self._prefix = (storage_settings or get_settings().storage).key_prefix
        self._audit = audit_logger or AuditLogger()

    def key_for(self, key: LedgerKey) -> str:
        return key.storage_key(self._prefix)

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    def _load(self, key: LedgerKey, defaults: Callable[[], list[Any]]) -> list[Any]:
        storage_key = self.key_for(key)
        try:
            payload = self._store.load(storage_key)
            if payload is None:
                items = defaults()
                self._audit.log(AuditEventBuilder.collection_seeded(storage_key, len(items)))
                return items
            items = decode_collection(key, payload)
        except CorruptDataError as e:
            items = defaults()
            self._audit.log(AuditEventBuilder.collection_recovered(storage_key, str(e), len(items)))
            return items

        self._audit.log(AuditEventBuilder.collection_loaded(storage_key, len(items)))
        return items

    def load_accounts(self) -> list[Account]:
        return self._load(LedgerKey.ACCOUNTS, default_accounts)

    def load_transactions(self, today: Optional[date] = None) -> list[Transaction]:
        return self._load(
            LedgerKey.TRANSACTIONS,
            lambda: generate_transactions(
                today=today,
                months=self._settings.seed_history_months,
                seed=self._settings.seed_random_seed,
            ),
        )

    def load_budgets(self) -> list[Budget]:
        return self._load(LedgerKey.BUDGETS, default_budgets)

    def load_subscriptions(self, today: Optional[date] = None) -> list[Subscription]:
        return self._load(LedgerKey.SUBSCRIPTIONS, lambda: default_subscriptions(today))

    def load_categories(self) -> list[str]:
        return self._load(LedgerKey.CATEGORIES, default_categories)

    def load(self, today: Optional[date] = None) -> LedgerData:
        """Load all five collections, seeding whichever are missing."""
        today = today or date.today()
        return LedgerData(
            accounts=self.load_accounts(),
            transactions=self.load_transactions(today),
            budgets=self.load_budgets(),
            subscriptions=self.load_subscriptions(today),
            categories=self.load_categories(),
        )

    # -------------------------------------------------------------------------
    # Saving
    # -------------------------------------------------------------------------

    def save_collection(self, key: LedgerKey, items: list[Any]) -> None:
        """
        Persist one collection.

        Raises:
            StorageError: If the backend write fails
        """
        storage_key = self.key_for(key)
        self._store.save(storage_key, encode_collection(key, items))
        self._audit.log(AuditEventBuilder.collection_saved(storage_key, len(items)))

    def save_accounts(self, accounts: list[Account]) -> None:
        self.save_collection(LedgerKey.ACCOUNTS, accounts)

    def save_transactions(self, transactions: list[Transaction]) -> None:
        self.save_collection(LedgerKey.TRANSACTIONS, transactions)

    def save_budgets(self, budgets: list[Budget]) -> None:
        self.save_collection(LedgerKey.BUDGETS, budgets)

    def save_subscriptions(self, subscriptions: list[Subscription]) -> None:
        self.save_collection(LedgerKey.SUBSCRIPTIONS, subscriptions)

    def save_categories(self, categories: list[str]) -> None:
        self.save_collection(LedgerKey.CATEGORIES, categories)

    def save_all(self, data: LedgerData) -> None:
        self.save_accounts(data.accounts)
        self.save_transactions(data.transactions)
        self.save_budgets(data.budgets)
        self.save_subscriptions(data.subscriptions)
        self.save_categories(data.categories)

    # -------------------------------------------------------------------------
    # Maintenance
    # -------------------------------------------------------------------------

    def needs_reseed(self, today: Optional[date] = None) -> bool:
        """
        Advisory check used to offer the user a data reset.

        True when the persisted transactions are missing, unreadable, fewer
        than the configured minimum, or dated beyond the generation horizon.
        Never triggers a reset by itself.
        """
        try:
            payload = self._store.load(self.key_for(LedgerKey.TRANSACTIONS))
            if payload is None:
                return True
            transactions = decode_collection(LedgerKey.TRANSACTIONS, payload)
        except CorruptDataError:
            return True

        if len(transactions) < self._settings.min_transaction_count:
            return True

        horizon = (today or date.today()) + timedelta(days=self._settings.future_date_tolerance_days)
        return any(t.date > horizon for t in transactions)

    def reset(self) -> list[str]:
        """
        Delete every persisted collection.

        The next load() reseeds from defaults. Returns the keys that existed.
        """
        removed = [
            self.key_for(key)
            for key in LedgerKey
            if self._store.delete(self.key_for(key))
        ]
        self._audit.log(AuditEventBuilder.ledger_reset(removed))
        return removed
