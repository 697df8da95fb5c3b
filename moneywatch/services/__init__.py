"""Services package."""

from moneywatch.services.storage import (
    CorruptDataError,
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueStore,
    LedgerKey,
    LedgerRepository,
    StorageError,
)

__all__ = [
    "CorruptDataError",
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "KeyValueStore",
    "LedgerKey",
    "LedgerRepository",
    "StorageError",
]
