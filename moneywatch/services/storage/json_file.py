"""
JSON File Storage Implementation

DESIGN DECISION: Local JSON files mirror the browser key-value layout:
one file per key, holding the serialized collection verbatim.

TRADEOFFS:
- Whole-collection rewrites on every save (fine for client-scale ledgers)
- No cross-process locking; last write wins

Writes go to a temporary file first and are moved into place, so a crash
mid-write leaves the previous value intact.
"""

import os
import re
import tempfile
from pathlib import Path
from typing import Optional

from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from moneywatch.config import get_settings
from moneywatch.services.storage.interface import (
    CorruptDataError,
    KeyValueStore,
    StorageError,
)


_SAFE_KEY = re.compile(r"^[A-Za-z0-9._-]+$")

_retry_io = retry(
    retry=retry_if_exception_type(OSError),
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=0.1, min=0.1, max=1),
    reraise=True,
)


class JsonFileKeyValueStore(KeyValueStore):
    """
    Directory-backed key-value store.

    Each key maps to '<directory>/<key>.json'.
    """

    def __init__(self, directory: Optional[Path] = None):
        self._directory = Path(directory or get_settings().storage.data_dir)

    @property
    def directory(self) -> Path:
        return self._directory

    def _path(self, key: str) -> Path:
        if not _SAFE_KEY.match(key):
            raise StorageError(f"Invalid storage key: {key!r}")
        return self._directory / f"{key}.json"

    @_retry_io
    def _read(self, path: Path) -> Optional[str]:
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

    @_retry_io
    def _write(self, path: Path, payload: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.stem}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(payload)
            os.replace(tmp_name, path)
        except OSError:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def load(self, key: str) -> Optional[str]:
        """Read a key's file, None if it does not exist."""
        try:
            return self._read(self._path(key))
        except UnicodeDecodeError as e:
            raise CorruptDataError(f"{key} is not valid UTF-8: {e}") from e
        except OSError as e:
            raise StorageError(f"Failed to read {key}: {e}") from e

    def save(self, key: str, payload: str) -> None:
        """Atomically replace a key's file."""
        try:
            self._write(self._path(key), payload)
        except OSError as e:
            raise StorageError(f"Failed to save {key}: {e}") from e

    def delete(self, key: str) -> bool:
        path = self._path(key)
        try:
            path.unlink()
            return True
        except FileNotFoundError:
            return False
        except OSError as e:
            raise StorageError(f"Failed to delete {key}: {e}") from e
