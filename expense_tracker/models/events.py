"""
Ledger Event Models

Every change to the ledger produces an event. Events serve two purposes:
1. Structured log lines for debugging
2. Change notifications for whoever renders the ledger

DESIGN DECISION: Events are transient. They are logged and handed to
subscribers, never stored, so there is no edit history to maintain.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from expense_tracker.models.transaction import Transaction, utc_now


class LedgerEventType(str, Enum):
    """Types of events the ledger emits."""
    # Lifecycle
    LEDGER_LOADED = "ledger_loaded"
    LOAD_DEGRADED = "load_degraded"

    # Mutations
    TRANSACTION_ADDED = "transaction_added"
    TRANSACTION_DELETED = "transaction_deleted"
    LEDGER_CLEARED = "ledger_cleared"

    # Failures
    VALIDATION_FAILED = "validation_failed"
    SAVE_FAILED = "save_failed"

    # Preferences
    THEME_CHANGED = "theme_changed"


class EventSeverity(str, Enum):
    """Severity level for ledger events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class LedgerEvent(BaseModel):
    """A single ledger event."""

    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=utc_now,
        description="When the event occurred (UTC)"
    )
    event_type: LedgerEventType
    severity: EventSeverity = EventSeverity.INFO

    transaction_id: Optional[str] = Field(
        default=None,
        description="Transaction this event is about, if any"
    )
    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(default_factory=dict)
    error_message: Optional[str] = None

    @property
    def is_mutation(self) -> bool:
        """Did the ledger contents change?"""
        return self.event_type in {
            LedgerEventType.TRANSACTION_ADDED,
            LedgerEventType.TRANSACTION_DELETED,
            LedgerEventType.LEDGER_CLEARED,
        }

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.

        The event time goes under `event_timestamp`; structlog adds its own
        `timestamp` when the line is written.
        """
        return {
            "event_id": str(self.event_id),
            "event_timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "transaction_id": self.transaction_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class LedgerEventBuilder:
    """
    Helper class to build ledger events with common patterns.

    Usage:
        event = LedgerEventBuilder.transaction_added(transaction, count)
        event = LedgerEventBuilder.save_failed("add", str(error))
    """

    @staticmethod
    def ledger_loaded(count: int, skipped: int = 0) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.LEDGER_LOADED,
            severity=EventSeverity.WARNING if skipped else EventSeverity.INFO,
            description=f"Ledger loaded with {count} transactions",
            details={"count": count, "skipped_records": skipped},
        )

    @staticmethod
    def load_degraded(reason: str) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.LOAD_DEGRADED,
            severity=EventSeverity.WARNING,
            description="Stored transactions unreadable, starting empty",
            error_message=reason,
        )

    @staticmethod
    def transaction_added(transaction: Transaction, count: int) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.TRANSACTION_ADDED,
            transaction_id=transaction.id,
            description=f"Transaction added: {transaction.title}",
            details={
                "type": transaction.type.value,
                "category": transaction.category,
                "amount": str(transaction.amount),
                "date": transaction.date.isoformat(),
                "count": count,
            },
        )

    @staticmethod
    def transaction_deleted(
        transaction_id: str,
        removed: bool,
        count: int,
    ) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.TRANSACTION_DELETED,
            transaction_id=transaction_id,
            description=(
                "Transaction deleted" if removed
                else "Delete requested for unknown transaction"
            ),
            details={"removed": removed, "count": count},
        )

    @staticmethod
    def ledger_cleared(removed_count: int) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.LEDGER_CLEARED,
            description=f"All transactions cleared ({removed_count} removed)",
            details={"removed_count": removed_count, "count": 0},
        )

    @staticmethod
    def validation_failed(issues: list[dict]) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.VALIDATION_FAILED,
            severity=EventSeverity.WARNING,
            description=f"Transaction rejected with {len(issues)} issue(s)",
            details={"issues": issues},
        )

    @staticmethod
    def save_failed(
        operation: str,
        error_message: str,
        transaction_id: Optional[str] = None,
    ) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.SAVE_FAILED,
            severity=EventSeverity.ERROR,
            transaction_id=transaction_id,
            description=f"Could not save ledger after {operation}",
            details={"operation": operation},
            error_message=error_message,
        )

    @staticmethod
    def theme_changed(theme: str) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.THEME_CHANGED,
            description=f"Theme switched to {theme}",
            details={"theme": theme},
        )
