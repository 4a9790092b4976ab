"""Shared fixtures: stores, adapters and ledgers backed by memory."""

from datetime import date
from typing import Optional

import pytest

from expense_tracker.events import EventLogger
from expense_tracker.ledger import Ledger
from expense_tracker.models import LedgerEvent, Transaction, TransactionType
from expense_tracker.services.storage import (
    InMemoryStore,
    PersistenceAdapter,
    StorageReadError,
    StorageWriteError,
)


class FlakyStore(InMemoryStore):
    """In-memory store whose reads or writes can be made to fail."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        super().__init__(initial)
        self.fail_reads = False
        self.fail_writes = False
        self.write_count = 0

    def read(self, key: str) -> Optional[str]:
        if self.fail_reads:
            raise StorageReadError("simulated read failure")
        return super().read(key)

    def write(self, key: str, value: str) -> None:
        if self.fail_writes:
            raise StorageWriteError("simulated quota exceeded")
        self.write_count += 1
        super().write(key, value)


def make_transaction(
    title: str = "Lunch",
    amount: str = "10.00",
    txn_type: TransactionType = TransactionType.EXPENSE,
    category: str = "food",
    day: date = date(2024, 3, 15),
) -> Transaction:
    return Transaction(
        title=title,
        amount=amount,
        type=txn_type,
        category=category,
        date=day,
    )


def raw_input(**overrides) -> dict:
    data = {
        "title": "Groceries",
        "amount": "42.50",
        "type": "expense",
        "category": "food",
        "date": "2024-03-15",
    }
    data.update(overrides)
    return data


@pytest.fixture
def store() -> FlakyStore:
    return FlakyStore()


@pytest.fixture
def adapter(store) -> PersistenceAdapter:
    return PersistenceAdapter(store)


@pytest.fixture
def events() -> list[LedgerEvent]:
    return []


@pytest.fixture
def ledger(adapter, events) -> Ledger:
    event_logger = EventLogger()
    event_logger.subscribe(events.append)
    ledger = Ledger(adapter, event_logger=event_logger)
    ledger.load()
    return ledger
