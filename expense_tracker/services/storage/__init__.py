"""
Storage Services Package

Provides the key-value store interface, concrete stores, and the
persistence adapter that maps the ledger onto a store.
"""

from expense_tracker.services.storage.interface import (
    KeyValueStoreInterface,
    StorageError,
    StorageReadError,
    StorageWriteError,
)
from expense_tracker.services.storage.memory import InMemoryStore
from expense_tracker.services.storage.json_file import JsonFileStore
from expense_tracker.services.storage.adapter import (
    THEME_KEY,
    TRANSACTIONS_KEY,
    CorruptDataError,
    PersistenceAdapter,
    deserialize_transactions,
    serialize_transactions,
)

__all__ = [
    # Interfaces
    "KeyValueStoreInterface",
    # Exceptions
    "CorruptDataError",
    "StorageError",
    "StorageReadError",
    "StorageWriteError",
    # Stores
    "InMemoryStore",
    "JsonFileStore",
    # Adapter
    "PersistenceAdapter",
    "THEME_KEY",
    "TRANSACTIONS_KEY",
    "deserialize_transactions",
    "serialize_transactions",
]
