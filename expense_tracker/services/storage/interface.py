"""
Abstract Storage Interface

DESIGN DECISION: The tracker treats its host storage as an opaque
key-value store of strings. This allows us to:
1. Keep data in a local JSON file for the desktop app
2. Use in-memory storage for testing
3. Swap in any other string store without touching the ledger

The interface is intentionally tiny - read a string, write a string.
Everything about what the strings mean lives in the persistence adapter.
"""

from abc import ABC, abstractmethod
from typing import Optional


class KeyValueStoreInterface(ABC):
    """
    Abstract interface for the host's key-value string store.

    Both operations are synchronous and complete before returning.
    """

    @abstractmethod
    def read(self, key: str) -> Optional[str]:
        """
        Read the value stored under a key.

        Args:
            key: Store key

        Returns:
            The stored string, or None if nothing is stored

        Raises:
            StorageReadError: If the store cannot be read
        """
        pass

    @abstractmethod
    def write(self, key: str, value: str) -> None:
        """
        Store a value under a key, replacing any previous value.

        Args:
            key: Store key
            value: String to store

        Raises:
            StorageWriteError: If the value could not be stored
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class StorageReadError(StorageError):
    """Stored data could not be read or understood."""
    pass


class StorageWriteError(StorageError):
    """Data could not be written (disk full, permissions, quota)."""
    pass
