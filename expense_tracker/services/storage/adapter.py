"""
Persistence Adapter

Translates between the ledger's Transaction objects and the strings kept
in the key-value store.

Stored layout (one key per concern):
- "transactions": JSON array of transaction records, most recent first
- "theme": "light" or "dark"

DESIGN DECISION: The adapter reports problems, it does not decide what to
do about them. A corrupt payload raises CorruptDataError; the ledger
chooses to degrade to an empty list.
"""

import json
from typing import Iterable, Optional

import structlog
from pydantic import ValidationError as PydanticValidationError

from expense_tracker.models.preferences import ThemePreference
from expense_tracker.models.transaction import Transaction
from expense_tracker.services.storage.interface import (
    KeyValueStoreInterface,
    StorageError,
    StorageReadError,
    StorageWriteError,
)


TRANSACTIONS_KEY = "transactions"
THEME_KEY = "theme"


logger = structlog.get_logger(__name__)


class CorruptDataError(StorageReadError):
    """Stored value exists but is not in the expected shape."""
    pass


def serialize_transactions(transactions: Iterable[Transaction]) -> str:
    """
    Serialize transactions to the stored JSON array.

    Raises:
        ValueError: If an amount has no JSON number form (infinite as a float)
    """
    return json.dumps([t.to_record() for t in transactions], allow_nan=False)


def deserialize_transactions(raw: str) -> tuple[list[Transaction], int]:
    """
    Parse the stored JSON array.

    Records that fail validation, and records repeating an id already
    seen, are skipped.

    Returns:
        (transactions, skipped_count)

    Raises:
        CorruptDataError: If the payload is not a JSON array
    """
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as e:
        raise CorruptDataError(f"Stored transactions are not valid JSON: {e}") from e

    if not isinstance(payload, list):
        raise CorruptDataError(
            f"Stored transactions must be a list, got {type(payload).__name__}"
        )

    transactions: list[Transaction] = []
    seen_ids: set[str] = set()
    skipped = 0

    for index, record in enumerate(payload):
        if not isinstance(record, dict):
            skipped += 1
            continue
        try:
            transaction = Transaction.from_record(record)
        except PydanticValidationError as e:
            logger.warning(
                "stored_record_skipped",
                index=index,
                errors=e.error_count(),
            )
            skipped += 1
            continue
        if transaction.id in seen_ids:
            logger.warning("duplicate_record_skipped", index=index, transaction_id=transaction.id)
            skipped += 1
            continue
        seen_ids.add(transaction.id)
        transactions.append(transaction)

    return transactions, skipped


class PersistenceAdapter:
    """
    Loads and saves ledger state through a key-value store.

    Holds no state of its own besides the store.
    """

    def __init__(self, store: KeyValueStoreInterface):
        self._store = store

    @property
    def store(self) -> KeyValueStoreInterface:
        return self._store

    def load_transactions(self) -> tuple[list[Transaction], int]:
        """
        Load stored transactions.

        Returns:
            (transactions, skipped_count); an empty list if nothing is stored

        Raises:
            StorageReadError: If the store cannot be read
            CorruptDataError: If the stored value is malformed
        """
        raw = self._store.read(TRANSACTIONS_KEY)
        if raw is None:
            return [], 0
        return deserialize_transactions(raw)

    def save_transactions(self, transactions: Iterable[Transaction]) -> None:
        """
        Store the complete transaction list, replacing what was there.

        Raises:
            StorageWriteError: If the store rejects the write, or an amount
                has no JSON number form
        """
        try:
            payload = serialize_transactions(transactions)
        except ValueError as e:
            raise StorageWriteError(f"Transactions could not be serialized: {e}") from e
        self._store.write(TRANSACTIONS_KEY, payload)

    def load_theme(self) -> ThemePreference:
        """Stored theme, light when absent, unknown or unreadable."""
        try:
            raw: Optional[str] = self._store.read(THEME_KEY)
        except StorageError as e:
            logger.warning("theme_read_failed", error=str(e))
            return ThemePreference.LIGHT
        return ThemePreference.from_stored(raw)

    def save_theme(self, theme: ThemePreference) -> None:
        """
        Raises:
            StorageWriteError: If the store rejects the write
        """
        self._store.write(THEME_KEY, theme.value)
