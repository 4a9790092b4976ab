"""
Expense Tracker Facade

This module ties the components together and is the only surface the
presentation layer talks to:
1. Mutations (add / delete / clear) go to the ledger
2. Derived values (totals, monthly stats, filtered lists) are computed
   fresh from the current ledger snapshot on every call
3. Filter selection and theme preference live here, not in the ledger

DESIGN DECISION: There is no global tracker. create_tracker() builds one
explicit instance which the host keeps and passes around. Its lifecycle
is construct → load() → ready; querying before load() is an error.

Confirmation prompts ("are you sure?") belong to the presentation layer.
delete_transaction() and clear_all() here are unconditional.
"""

from collections.abc import Iterable, Mapping
from decimal import Decimal
from typing import Any, Callable, Optional, Union

import structlog

from expense_tracker.config import TrackerSettings, get_settings
from expense_tracker.events import EventCallback, EventLogger
from expense_tracker.ledger import Ledger
from expense_tracker.models.events import LedgerEventBuilder
from expense_tracker.models.preferences import ThemePreference
from expense_tracker.models.summary import MonthKey, MonthlyStats, Totals
from expense_tracker.models.transaction import (
    Transaction,
    TransactionInput,
    TransactionType,
)
from expense_tracker.queries import (
    FilterState,
    ViewFilterState,
    category_breakdown,
    monthly_stats,
    observed_months,
    recent,
    totals,
)
from expense_tracker.queries.aggregation import MonthSelector
from expense_tracker.services.storage import (
    InMemoryStore,
    JsonFileStore,
    KeyValueStoreInterface,
    PersistenceAdapter,
)


logger = structlog.get_logger(__name__)


class TrackerNotReadyError(RuntimeError):
    """The tracker was used before load() was called."""
    pass


class ExpenseTracker:
    """
    Presentation-facing API over the ledger, filters and preferences.
    """

    def __init__(
        self,
        adapter: PersistenceAdapter,
        event_logger: Optional[EventLogger] = None,
        recent_limit: int = 5,
    ):
        self._adapter = adapter
        self._events = event_logger or EventLogger()
        self._ledger = Ledger(adapter, event_logger=self._events)
        self._filters = ViewFilterState()
        self._theme = ThemePreference.LIGHT
        self._recent_limit = recent_limit

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def load(self) -> "ExpenseTracker":
        """Load ledger and theme from storage. Never fails on bad data."""
        self._ledger.load()
        self._theme = self._adapter.load_theme()
        return self

    @property
    def is_ready(self) -> bool:
        return self._ledger.is_loaded

    def _require_ready(self) -> None:
        if not self._ledger.is_loaded:
            raise TrackerNotReadyError("Call load() before using the tracker")

    @property
    def ledger(self) -> Ledger:
        return self._ledger

    def subscribe(self, callback: EventCallback) -> Callable[[], None]:
        """Be told about every ledger change (and theme change)."""
        return self._events.subscribe(callback)

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def add_transaction(
        self,
        data: Union[TransactionInput, Mapping[str, Any]],
    ) -> Transaction:
        """
        Raises:
            ValidationError: Bad input, with per-field issues
            StorageError: The ledger could not be saved
        """
        self._require_ready()
        return self._ledger.add(data)

    def delete_transaction(self, transaction_id: str) -> bool:
        self._require_ready()
        return self._ledger.delete(transaction_id)

    def clear_all(self) -> None:
        self._require_ready()
        self._ledger.clear()

    # -------------------------------------------------------------------------
    # Derived views
    # -------------------------------------------------------------------------

    @property
    def transactions(self) -> tuple[Transaction, ...]:
        self._require_ready()
        return self._ledger.transactions

    def get_filtered_transactions(self) -> list[Transaction]:
        """Ledger filtered by the type and category selectors."""
        self._require_ready()
        return self._filters.apply(self._ledger.transactions)

    def get_totals(self) -> Totals:
        """Totals over the type/category-filtered list."""
        return totals(self.get_filtered_transactions())

    def get_monthly_stats(self, month: MonthSelector = None) -> MonthlyStats:
        """
        Summary for one month over the whole, unfiltered ledger.

        Args:
            month: Month to summarize; defaults to the month selector
        """
        self._require_ready()
        if month is None:
            return self._filters.monthly_stats(self._ledger.transactions)
        return monthly_stats(self._ledger.transactions, month)

    def get_observed_months(self) -> list[MonthKey]:
        self._require_ready()
        return observed_months(self._ledger.transactions)

    def get_recent_transactions(self) -> list[Transaction]:
        """Most recently added transactions, ignoring filters."""
        self._require_ready()
        return recent(self._ledger.transactions, self._recent_limit)

    def get_category_breakdown(
        self,
        txn_type: Optional[TransactionType] = TransactionType.EXPENSE,
    ) -> dict[str, Decimal]:
        """Per-category sums over the type/category-filtered list."""
        return category_breakdown(self.get_filtered_transactions(), txn_type)

    # -------------------------------------------------------------------------
    # Filters
    # -------------------------------------------------------------------------

    @property
    def filters(self) -> FilterState:
        return self._filters.state

    def set_filter(self, **partial: Any) -> FilterState:
        """
        Change filter selectors, e.g. set_filter(type="expense").

        Raises:
            ValueError: Unknown selector or invalid value
        """
        return self._filters.set_filter(**partial)

    def reset_filters(self) -> FilterState:
        return self._filters.reset()

    # -------------------------------------------------------------------------
    # Theme
    # -------------------------------------------------------------------------

    def get_theme(self) -> ThemePreference:
        return self._theme

    def set_theme(self, theme: Union[ThemePreference, str]) -> ThemePreference:
        """
        Raises:
            ValueError: Unknown theme name
            StorageError: The preference could not be saved
        """
        theme = ThemePreference(theme)
        self._adapter.save_theme(theme)
        self._theme = theme
        self._events.log(LedgerEventBuilder.theme_changed(theme.value))
        return theme

    def toggle_theme(self) -> ThemePreference:
        return self.set_theme(self._theme.toggled())


def create_store(settings: TrackerSettings) -> KeyValueStoreInterface:
    """Build the key-value store selected by configuration."""
    if settings.storage_backend == "memory":
        return InMemoryStore()
    return JsonFileStore(settings.data_path)


def create_tracker(
    settings: Optional[TrackerSettings] = None,
    store: Optional[KeyValueStoreInterface] = None,
    subscribers: Iterable[EventCallback] = (),
) -> ExpenseTracker:
    """
    Factory function to create a ready-to-use tracker.

    Args:
        settings: Configuration; defaults to get_settings()
        store: Explicit store, overriding the configured backend
        subscribers: Callbacks registered before loading, so they also
            see the load event

    Returns:
        A loaded ExpenseTracker
    """
    settings = settings or get_settings()
    if store is None:
        store = create_store(settings)
    logger.info(
        "tracker_starting",
        storage_backend=type(store).__name__,
        data_file=str(settings.data_path) if isinstance(store, JsonFileStore) else None,
    )
    tracker = ExpenseTracker(
        PersistenceAdapter(store),
        recent_limit=settings.recent_limit,
    )
    for callback in subscribers:
        tracker.subscribe(callback)
    return tracker.load()
