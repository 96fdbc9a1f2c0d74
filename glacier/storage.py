"""
Persistence adapter.

Each store is saved as one JSON document under its own key. Writes are
full-collection overwrites; the last write wins.
"""

import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Optional, Protocol

logger = logging.getLogger(__name__)

PRODUCTS_KEY = "products"
SALES_KEY = "sales"
CUSTOMERS_KEY = "customers"
EXPENSES_KEY = "expenses"

STORE_KEYS = (PRODUCTS_KEY, SALES_KEY, CUSTOMERS_KEY, EXPENSES_KEY)


class CorruptSnapshotError(RuntimeError):
    def __init__(self, key: str, reason: str) -> None:
        super().__init__(f"Persisted '{key}' snapshot is unreadable: {reason}")
        self.key = key


class KeyValueStorage(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...

    def clear(self) -> None: ...


class InMemoryStorage:
    def __init__(self) -> None:
        self.values: dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self.values.get(key)

    def set(self, key: str, value: str) -> None:
        self.values[key] = value

    def delete(self, key: str) -> None:
        self.values.pop(key, None)

    def clear(self) -> None:
        for key in STORE_KEYS:
            self.delete(key)


class JsonFileStorage:
    """One ``<key>.json`` file per store inside ``data_dir``."""

    # one writer at a time per process
    _file_lock = threading.RLock()

    def __init__(self, data_dir: str | os.PathLike) -> None:
        self.data_dir = Path(data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        return self.data_dir / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        with self._file_lock:
            if not path.exists():
                return None
            return path.read_text(encoding="utf-8")

    def set(self, key: str, value: str) -> None:
        path = self._path(key)
        with self._file_lock:
            # unique temp file per write, swapped in atomically
            f = tempfile.NamedTemporaryFile(
                "w", encoding="utf-8", dir=self.data_dir, prefix=f"{key}.", suffix=".tmp", delete=False
            )
            temp_path = Path(f.name)
            try:
                with f:
                    f.write(value)
                os.replace(temp_path, path)
            except OSError:
                temp_path.unlink(missing_ok=True)
                raise
        logger.debug("Wrote %s (%d bytes)", path, len(value))

    def delete(self, key: str) -> None:
        with self._file_lock:
            self._path(key).unlink(missing_ok=True)

    def clear(self) -> None:
        for key in STORE_KEYS:
            self.delete(key)
