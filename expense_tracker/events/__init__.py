"""Ledger event logging package."""

from expense_tracker.events.logger import EventCallback, EventLogger, configure_logging

__all__ = ["EventCallback", "EventLogger", "configure_logging"]
