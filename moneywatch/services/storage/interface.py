"""
Abstract Key-Value Storage Interface

DESIGN DECISION: The ledger engine sees persistence only as an opaque
key-value store holding serialized collections. This allows us to:
1. Use in-memory storage for testing
2. Persist to local JSON files for a desktop/CLI host
3. Put the ledger behind any other backend (browser storage bridge,
   SQLite blob table) without touching the engine

The interface is intentionally tiny: load, save, delete.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Optional


class LedgerKey(str, Enum):
    """The five logical keys, one per ledger collection."""
    ACCOUNTS = "accounts"
    TRANSACTIONS = "transactions"
    BUDGETS = "budgets"
    SUBSCRIPTIONS = "subscriptions"
    CATEGORIES = "categories"

    def storage_key(self, prefix: str = "moneywatch") -> str:
        """Physical key, e.g. 'moneywatch-transactions'."""
        return f"{prefix}-{self.value}"


class KeyValueStore(ABC):
    """
    Abstract interface for the persistence collaborator.

    Any backend must implement these methods. Values are serialized
    collections (JSON text); the store never interprets them.
    """

    @abstractmethod
    def load(self, key: str) -> Optional[str]:
        """
        Read the value stored under a key.

        Args:
            key: Physical storage key

        Returns:
            The stored text, or None if the key is absent

        Raises:
            StorageError: If the backend cannot be read
            CorruptDataError: If the stored bytes are not readable text
        """
        pass

    @abstractmethod
    def save(self, key: str, payload: str) -> None:
        """
        Store a value, replacing any previous one (last write wins).

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    def delete(self, key: str) -> bool:
        """
        Remove a key.

        Returns:
            True if the key existed
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class CorruptDataError(StorageError):
    """Stored value could not be decoded into a valid collection."""
    pass
