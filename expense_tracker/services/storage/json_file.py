"""
JSON File Storage Implementation

DESIGN DECISION: A single JSON file holds every key as a string value,
mirroring the browser storage the tracker was designed around:
1. No database setup required
2. The file is human-readable and easy to back up
3. Each write replaces the file atomically, so a crash mid-write
   leaves the previous version intact

TRADEOFFS:
- Every write rewrites the whole file (fine for a personal ledger)
- Not safe for concurrent writers (there is only one)
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Optional, Union

import structlog

from expense_tracker.services.storage.interface import (
    KeyValueStoreInterface,
    StorageReadError,
    StorageWriteError,
)


logger = structlog.get_logger(__name__)


class JsonFileStore(KeyValueStoreInterface):
    """
    File-backed key-value store.

    The file contains one JSON object mapping keys to string values.
    A missing file is an empty store.
    """

    def __init__(self, path: Union[str, Path]):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def _read_all(self) -> dict[str, str]:
        """Load the whole key map from disk."""
        if not self._path.exists():
            return {}

        try:
            raw = self._path.read_text(encoding="utf-8")
        except OSError as e:
            raise StorageReadError(f"Cannot read {self._path}: {e}") from e

        if not raw.strip():
            return {}

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise StorageReadError(f"{self._path} is not valid JSON: {e}") from e

        if not isinstance(data, dict):
            raise StorageReadError(f"{self._path} does not contain a JSON object")

        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def read(self, key: str) -> Optional[str]:
        return self._read_all().get(key)

    def write(self, key: str, value: str) -> None:
        try:
            data = self._read_all()
        except StorageReadError as e:
            # The unreadable file is replaced rather than blocking every save
            logger.warning("store_file_replaced", path=str(self._path), error=str(e))
            data = {}

        data[key] = value

        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self._path.parent,
                prefix=f".{self._path.name}.",
                suffix=".tmp",
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    json.dump(data, handle, indent=2)
                os.replace(tmp_name, self._path)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
        except OSError as e:
            raise StorageWriteError(f"Cannot write {self._path}: {e}") from e
