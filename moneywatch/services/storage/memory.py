"""In-memory key-value store for tests and throwaway sessions."""

from typing import Optional

from moneywatch.services.storage.interface import KeyValueStore


class InMemoryKeyValueStore(KeyValueStore):
    """Dictionary-backed store. Nothing survives the process."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._data: dict[str, str] = dict(initial or {})

    def load(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def save(self, key: str, payload: str) -> None:
        self._data[key] = payload

    def delete(self, key: str) -> bool:
        return self._data.pop(key, None) is not None

    def keys(self) -> list[str]:
        return sorted(self._data)
