"""Services package."""

from expense_tracker.services.storage import (
    CorruptDataError,
    InMemoryStore,
    JsonFileStore,
    KeyValueStoreInterface,
    PersistenceAdapter,
    StorageError,
    StorageReadError,
    StorageWriteError,
)

__all__ = [
    # Storage services
    "CorruptDataError",
    "InMemoryStore",
    "JsonFileStore",
    "KeyValueStoreInterface",
    "PersistenceAdapter",
    "StorageError",
    "StorageReadError",
    "StorageWriteError",
]
