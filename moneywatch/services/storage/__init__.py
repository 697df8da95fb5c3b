"""
Storage Services Package

Provides the abstract key-value interface, concrete backends, and the
typed repository the ledger store persists through.
"""

from moneywatch.services.storage.interface import (
    CorruptDataError,
    KeyValueStore,
    LedgerKey,
    StorageError,
)
from moneywatch.services.storage.memory import InMemoryKeyValueStore
from moneywatch.services.storage.json_file import JsonFileKeyValueStore
from moneywatch.services.storage.repository import (
    LedgerRepository,
    decode_collection,
    encode_collection,
)

__all__ = [
    # Interfaces
    "KeyValueStore",
    "LedgerKey",
    # Exceptions
    "CorruptDataError",
    "StorageError",
    # Backends
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    # Repository
    "LedgerRepository",
    "decode_collection",
    "encode_collection",
]
