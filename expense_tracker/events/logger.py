"""
Event Logger

DESIGN DECISION: Every ledger event goes through one place.
This provides:
1. A structured log line for each change
2. Change notifications to subscribers (the presentation layer)

The event logger:
- Is synchronous, like everything else in the tracker
- Isolates subscribers (a failing subscriber never undoes a saved change)
- Logs at the level matching the event severity
"""

import logging
import sys
from typing import Callable, Optional, Union

import structlog

from expense_tracker.models.events import EventSeverity, LedgerEvent


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


EventCallback = Callable[[LedgerEvent], None]


def configure_logging(level: Union[int, str] = "INFO") -> None:
    """
    Route structlog output through the standard library root logger.

    Call once from the entry point; library code only asks for loggers.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    logging.basicConfig(
        level=level,
        format="%(message)s",
        stream=sys.stderr,
    )
    logging.getLogger().setLevel(level)


class EventLogger:
    """
    Central event dispatch.

    Sends events both to:
    1. Structured local log (for debugging)
    2. Every subscribed callback (for re-rendering)
    """

    def __init__(self, logger: Optional[structlog.stdlib.BoundLogger] = None):
        self._logger = logger or structlog.get_logger("expense_tracker.events")
        self._subscribers: list[EventCallback] = []

    def subscribe(self, callback: EventCallback) -> Callable[[], None]:
        """
        Register a callback for every future event.

        Returns:
            A function that removes the callback again
        """
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def log(self, event: LedgerEvent) -> None:
        """Log an event locally, then notify subscribers."""
        log_dict = event.to_log_dict()

        if event.severity == EventSeverity.ERROR:
            self._logger.error("ledger_event", **log_dict)
        elif event.severity == EventSeverity.WARNING:
            self._logger.warning("ledger_event", **log_dict)
        elif event.severity == EventSeverity.DEBUG:
            self._logger.debug("ledger_event", **log_dict)
        else:
            self._logger.info("ledger_event", **log_dict)

        for callback in list(self._subscribers):
            try:
                callback(event)
            except Exception:
                self._logger.exception(
                    "event_subscriber_failed",
                    event_id=str(event.event_id),
                    event_type=event.event_type.value,
                )
