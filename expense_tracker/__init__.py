"""
Expense Tracker - Source Package

A single-user personal finance tracker that records income and expense
transactions, keeps them in a local key-value store, and derives totals,
monthly breakdowns and filtered views from them.

DESIGN PRINCIPLES:
1. The ledger is the single source of truth
2. Write-through persistence after every change
3. Corrupt storage degrades to "nothing saved yet", failed writes are loud
4. Derived views are pure functions of a ledger snapshot
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Expense Tracker Team"
