"""
Transaction Ledger

The ledger owns the ordered, in-memory list of transactions and is the
only thing allowed to change it.

GUARANTEES:
- Ordering is insertion order, most recent first. The user-chosen `date`
  never reorders the list.
- Ids are unique across the ledger and never reused.
- Every mutation is written through to storage before the call returns.
- A failed write leaves memory exactly as it was before the call, then
  raises StorageError. Memory and storage never silently disagree.
- Loading never fails: missing or corrupt storage means an empty ledger.
"""

from collections.abc import Mapping
from typing import Any, Callable, Iterator, Optional, Union

from expense_tracker.events import EventCallback, EventLogger
from expense_tracker.models.events import LedgerEventBuilder
from expense_tracker.models.transaction import (
    Transaction,
    TransactionInput,
    new_transaction_id,
)
from expense_tracker.services.storage import PersistenceAdapter, StorageError
from expense_tracker.validation import TransactionValidator, ValidationError


class Ledger:
    """
    Ordered collection of transactions with write-through persistence.

    Lifecycle: construct → load() → add/delete/clear.
    """

    def __init__(
        self,
        adapter: PersistenceAdapter,
        event_logger: Optional[EventLogger] = None,
        validator: Optional[TransactionValidator] = None,
    ):
        self._adapter = adapter
        self._events = event_logger or EventLogger()
        self._validator = validator or TransactionValidator()
        self._transactions: list[Transaction] = []
        self._loaded = False

    # -------------------------------------------------------------------------
    # Reading
    # -------------------------------------------------------------------------

    @property
    def transactions(self) -> tuple[Transaction, ...]:
        """Snapshot in ledger order (most recent insertion first)."""
        return tuple(self._transactions)

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    def get(self, transaction_id: str) -> Optional[Transaction]:
        for transaction in self._transactions:
            if transaction.id == transaction_id:
                return transaction
        return None

    def __len__(self) -> int:
        return len(self._transactions)

    def __iter__(self) -> Iterator[Transaction]:
        return iter(self.transactions)

    def __contains__(self, transaction_id: object) -> bool:
        return any(t.id == transaction_id for t in self._transactions)

    def subscribe(self, callback: EventCallback) -> Callable[[], None]:
        """Receive an event after every load and mutation."""
        return self._events.subscribe(callback)

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    def load(self) -> list[Transaction]:
        """
        Replace in-memory state with what storage holds.

        Returns:
            The loaded transactions; empty when storage is missing,
            unreadable or corrupt
        """
        try:
            transactions, skipped = self._adapter.load_transactions()
        except StorageError as e:
            self._transactions = []
            self._loaded = True
            self._events.log(LedgerEventBuilder.load_degraded(str(e)))
            return []

        self._transactions = transactions
        self._loaded = True
        self._events.log(LedgerEventBuilder.ledger_loaded(len(transactions), skipped))
        return list(transactions)

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def add(self, data: Union[TransactionInput, Mapping[str, Any]]) -> Transaction:
        """
        Record a new transaction at the front of the ledger.

        Args:
            data: Validated input, or raw field values to validate

        Returns:
            The stored transaction, with its id and creation time

        Raises:
            ValidationError: If the input is invalid (nothing is stored)
            StorageError: If the ledger could not be saved (nothing is kept)
        """
        if not isinstance(data, TransactionInput):
            try:
                data = self._validator.validate(data)
            except ValidationError as e:
                self._events.log(LedgerEventBuilder.validation_failed(
                    [issue.model_dump() for issue in e.issues]
                ))
                raise

        transaction = Transaction.from_input(data)
        while transaction.id in self:
            transaction = transaction.model_copy(update={"id": new_transaction_id()})

        previous = self._transactions
        self._transactions = [transaction] + previous
        self._persist("add", previous, transaction.id)

        self._events.log(LedgerEventBuilder.transaction_added(transaction, len(self)))
        return transaction

    def delete(self, transaction_id: str) -> bool:
        """
        Remove a transaction by id. Unknown ids are not an error.

        Returns:
            True if a transaction was removed

        Raises:
            StorageError: If the ledger could not be saved
        """
        previous = self._transactions
        self._transactions = [t for t in previous if t.id != transaction_id]
        removed = len(self._transactions) != len(previous)
        self._persist("delete", previous, transaction_id)

        self._events.log(
            LedgerEventBuilder.transaction_deleted(transaction_id, removed, len(self))
        )
        return removed

    def clear(self) -> None:
        """
        Remove every transaction.

        Raises:
            StorageError: If the ledger could not be saved
        """
        previous = self._transactions
        self._transactions = []
        self._persist("clear", previous)

        self._events.log(LedgerEventBuilder.ledger_cleared(len(previous)))

    def _persist(
        self,
        operation: str,
        previous: list[Transaction],
        transaction_id: Optional[str] = None,
    ) -> None:
        """Write the whole ledger; on failure restore `previous` and re-raise."""
        try:
            self._adapter.save_transactions(self._transactions)
        except StorageError as e:
            self._transactions = previous
            self._events.log(
                LedgerEventBuilder.save_failed(operation, str(e), transaction_id)
            )
            raise
