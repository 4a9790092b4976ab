"""In-memory key-value store, for tests and throwaway sessions."""

from typing import Optional

from expense_tracker.services.storage.interface import KeyValueStoreInterface


class InMemoryStore(KeyValueStoreInterface):
    """Dictionary-backed store. Nothing survives the process."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._data: dict[str, str] = dict(initial or {})

    def read(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def write(self, key: str, value: str) -> None:
        self._data[key] = value

    def snapshot(self) -> dict[str, str]:
        """Copy of everything stored."""
        return dict(self._data)
