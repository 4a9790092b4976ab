"""Tests for the transaction ledger."""

import json

import pytest
from datetime import date
from decimal import Decimal

from expense_tracker.events import EventLogger
from expense_tracker.ledger import Ledger
from expense_tracker.models import LedgerEventType, TransactionInput, TransactionType
from expense_tracker.services.storage import (
    TRANSACTIONS_KEY,
    PersistenceAdapter,
    StorageError,
)
from expense_tracker.validation import ValidationError

from conftest import FlakyStore, make_transaction, raw_input


def reload(store) -> Ledger:
    """Fresh ledger over the same store, simulating a restart."""
    ledger = Ledger(PersistenceAdapter(store))
    ledger.load()
    return ledger


class TestLoad:
    """Loading never fails the caller."""

    def test_empty_store(self, ledger, events):
        assert ledger.transactions == ()
        assert ledger.is_loaded is True
        assert events[-1].event_type == LedgerEventType.LEDGER_LOADED

    @pytest.mark.parametrize("payload", ["not json", '{"a": 1}', "42", "null"])
    def test_corrupt_store_degrades_to_empty(self, payload):
        store = FlakyStore({TRANSACTIONS_KEY: payload})
        events = []
        event_logger = EventLogger()
        event_logger.subscribe(events.append)
        ledger = Ledger(PersistenceAdapter(store), event_logger=event_logger)

        assert ledger.load() == []
        assert events[-1].event_type == LedgerEventType.LOAD_DEGRADED

    def test_read_failure_degrades_to_empty(self, store):
        store.fail_reads = True
        assert Ledger(PersistenceAdapter(store)).load() == []

    def test_load_replaces_memory(self, store, ledger):
        other = reload(store)
        other.add(raw_input(title="Elsewhere"))
        assert len(ledger) == 0
        ledger.load()
        assert [t.title for t in ledger] == ["Elsewhere"]


class TestAdd:
    """Adding transactions."""

    def test_add_then_reload_preserves_fields(self, store, ledger):
        """Test an added transaction survives a persistence round-trip."""
        added = ledger.add(raw_input(amount="42.50"))
        restored = reload(store).transactions

        assert restored == (added,)
        assert restored[0].amount == Decimal("42.50")
        assert restored[0].amount > 0

    def test_add_accepts_validated_input(self, ledger):
        data = TransactionInput(
            title="Salary",
            amount=Decimal("3000"),
            type=TransactionType.INCOME,
            category="salary",
            date=date(2024, 3, 1),
        )
        added = ledger.add(data)
        assert added.type == TransactionType.INCOME
        assert ledger.get(added.id) == added

    def test_ids_unique_for_rapid_adds(self, ledger):
        """Test that two adds in the same instant still get distinct ids."""
        first = ledger.add(raw_input())
        second = ledger.add(raw_input())
        assert first.id != second.id
        assert len({t.id for t in ledger}) == 2

    def test_order_is_insertion_not_date(self, ledger):
        """Test that the newest insertion comes first whatever its date."""
        for title, day in [("a", "2020-01-01"), ("b", "2099-01-01"), ("c", "2010-01-01")]:
            ledger.add(raw_input(title=title, date=day))
        assert [t.title for t in ledger.transactions] == ["c", "b", "a"]

    def test_every_add_writes_whole_ledger(self, store, ledger):
        ledger.add(raw_input(title="one"))
        ledger.add(raw_input(title="two"))
        stored = json.loads(store.read(TRANSACTIONS_KEY))
        assert [r["title"] for r in stored] == ["two", "one"]
        assert store.write_count == 2

    @pytest.mark.parametrize("amount", [0, -5])
    def test_non_positive_amount_rejected(self, store, ledger, events, amount):
        with pytest.raises(ValidationError):
            ledger.add(raw_input(amount=amount))
        assert len(ledger) == 0
        assert store.write_count == 0
        assert events[-1].event_type == LedgerEventType.VALIDATION_FAILED

    def test_one_cent_accepted(self, ledger):
        assert ledger.add(raw_input(amount=0.01)).amount == Decimal("0.01")

    @pytest.mark.parametrize(
        "amount",
        ["0.01", "9999999999999.99", "1234567.8", 0.1, "12.500"],
    )
    def test_accepted_amounts_survive_reload(self, store, ledger, amount):
        """Test every amount the ledger accepts comes back from storage unchanged."""
        added = ledger.add(raw_input(amount=amount))
        assert reload(store).transactions == (added,)

    @pytest.mark.parametrize(
        "amount",
        ["1e-400", "1e400", "12345678901234567.89", "0.1234567890123456789", "10000000000000"],
    )
    def test_amounts_without_exact_storage_rejected(self, store, ledger, amount):
        """Test amounts a JSON number cannot hold exactly are refused up front."""
        with pytest.raises(ValidationError) as exc_info:
            ledger.add(raw_input(amount=amount))
        assert exc_info.value.fields == ["amount"]
        assert len(ledger) == 0
        assert store.write_count == 0

    def test_add_emits_event(self, ledger, events):
        added = ledger.add(raw_input())
        assert events[-1].event_type == LedgerEventType.TRANSACTION_ADDED
        assert events[-1].transaction_id == added.id

    def test_failed_write_keeps_memory_unchanged(self, store, ledger, events):
        """Test that a rejected write is reported and nothing is kept."""
        ledger.add(raw_input(title="kept"))
        store.fail_writes = True

        with pytest.raises(StorageError):
            ledger.add(raw_input(title="lost"))

        assert [t.title for t in ledger] == ["kept"]
        assert events[-1].event_type == LedgerEventType.SAVE_FAILED


class TestDelete:
    """Deleting transactions."""

    def test_delete_existing(self, store, ledger):
        keep = ledger.add(raw_input(title="keep"))
        drop = ledger.add(raw_input(title="drop"))

        assert ledger.delete(drop.id) is True
        assert ledger.transactions == (keep,)
        assert drop.id not in ledger
        assert reload(store).transactions == (keep,)

    def test_delete_unknown_is_noop(self, ledger, events):
        ledger.add(raw_input())
        before = ledger.transactions

        assert ledger.delete("does-not-exist") is False
        assert ledger.transactions == before
        assert events[-1].details["removed"] is False

    def test_delete_twice(self, ledger):
        txn = ledger.add(raw_input())
        assert ledger.delete(txn.id) is True
        assert ledger.delete(txn.id) is False

    def test_failed_delete_restores(self, store, ledger):
        txn = ledger.add(raw_input())
        store.fail_writes = True
        with pytest.raises(StorageError):
            ledger.delete(txn.id)
        assert txn.id in ledger


class TestClear:
    """Clearing the ledger."""

    def test_clear(self, store, ledger, events):
        ledger.add(raw_input())
        ledger.add(raw_input())
        ledger.clear()

        assert len(ledger) == 0
        assert json.loads(store.read(TRANSACTIONS_KEY)) == []
        assert events[-1].details["removed_count"] == 2

    def test_clear_empty_is_fine(self, ledger):
        ledger.clear()
        ledger.clear()
        assert ledger.transactions == ()

    def test_failed_clear_restores(self, store, ledger):
        ledger.add(raw_input())
        store.fail_writes = True
        with pytest.raises(StorageError):
            ledger.clear()
        assert len(ledger) == 1


class TestRoundTrip:
    """Serialize and reload a whole ledger."""

    def test_structurally_equal_after_reload(self, store, ledger):
        ledger.add(raw_input(title="a", type="income", category="salary", amount="1000"))
        ledger.add(raw_input(title="b", category="custom-stuff", amount="0.3"))
        ledger.add(raw_input(title="c", date="2023-12-31"))

        assert reload(store).transactions == ledger.transactions

    def test_loaded_records_keep_their_ids(self):
        legacy = make_transaction().to_record()
        legacy["id"] = "1709285400000"
        store = FlakyStore({TRANSACTIONS_KEY: json.dumps([legacy])})
        assert reload(store).get("1709285400000") is not None


class TestSubscribers:
    """Observer interface."""

    def test_unsubscribe(self, ledger):
        seen = []
        unsubscribe = ledger.subscribe(seen.append)
        ledger.add(raw_input())
        unsubscribe()
        ledger.add(raw_input())
        assert len(seen) == 1

    def test_failing_subscriber_does_not_break_mutation(self, store, ledger):
        def explode(event):
            raise RuntimeError("boom")

        ledger.subscribe(explode)
        added = ledger.add(raw_input())
        assert reload(store).get(added.id) is not None
