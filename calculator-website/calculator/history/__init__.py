"""Calculation history.

This package provides:
- The newest-first, size-bounded history ledger
- Key-value stores it persists through (SQLAlchemy or in-memory)
- CSV export of the ledger
"""

from .export import history_csv, history_frame
from .ledger import HistoryLedger
from .models import HistoryEntry
from .store import KeyValueStore, MemoryKeyValueStore, SqlKeyValueStore, build_store

__all__ = [
    "HistoryEntry",
    "HistoryLedger",
    "KeyValueStore",
    "MemoryKeyValueStore",
    "SqlKeyValueStore",
    "build_store",
    "history_csv",
    "history_frame",
]
