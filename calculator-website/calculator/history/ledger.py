from __future__ import annotations

import json
import logging
from typing import Callable, Dict, List, Optional, Tuple

from calculator.config import DEFAULT_HISTORY_KEY

from .models import HistoryEntry, utc_timestamp
from .store import KeyValueStore


logger = logging.getLogger(__name__)

Change = Callable[[List[HistoryEntry]], List[HistoryEntry]]


class HistoryLedger:
    """Newest-first list of past evaluations, saved after every change.

    Every change is applied to the list currently in the store, so ledgers of
    different sessions sharing one store and key keep each other's entries.
    A missing or unreadable snapshot starts an empty history; a failed save
    is logged and the in-memory list stays authoritative.
    """

    def __init__(
        self,
        store: KeyValueStore,
        *,
        key: str = DEFAULT_HISTORY_KEY,
        max_entries: int = 50,
        clock: Callable[[], str] = utc_timestamp,
    ) -> None:
        self.store = store
        self.key = key
        self.max_entries = max(1, int(max_entries))
        self._clock = clock
        self._entries: List[HistoryEntry] = []
        self._unsaved = False
        self.refresh()

    def _decode(self, raw: Optional[str]) -> List[HistoryEntry]:
        if not raw:
            return []
        try:
            data = json.loads(raw)
        except ValueError:
            logger.warning("Ignoring malformed history snapshot under %r", self.key)
            return []
        if not isinstance(data, list):
            return []
        entries = [e for e in (HistoryEntry.from_dict(item) for item in data) if e is not None]
        return entries[: self.max_entries]

    def _with_local(self, entries: List[HistoryEntry]) -> List[HistoryEntry]:
        missing = [e for e in self._entries if e not in entries]
        if not missing:
            return entries
        return sorted(entries + missing, key=lambda e: e.timestamp, reverse=True)

    def _encode(self, entries: List[HistoryEntry]) -> str:
        return json.dumps([e.to_dict() for e in entries], ensure_ascii=False)

    def refresh(self) -> None:
        """Reload from the store; keeps the current list if the read fails."""
        try:
            raw = self.store.get(self.key)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Could not read history %r: %s", self.key, exc)
            return
        self._entries = self._decode(raw)

    def _apply(self, change: Change) -> None:
        merged: Dict[str, List[HistoryEntry]] = {}

        def transform(raw: Optional[str]) -> str:
            entries = self._decode(raw)
            if self._unsaved:
                entries = self._with_local(entries)
            merged["entries"] = change(entries)[: self.max_entries]
            return self._encode(merged["entries"])

        try:
            self.store.update(self.key, transform)
            self._unsaved = False
        except Exception as exc:  # noqa: BLE001
            logger.warning("Could not save history %r: %s", self.key, exc)
            self._unsaved = True
            if "entries" not in merged:
                merged["entries"] = change(list(self._entries))[: self.max_entries]
        self._entries = merged["entries"]

    def __len__(self) -> int:
        return len(self._entries)

    def all(self) -> Tuple[HistoryEntry, ...]:
        return tuple(self._entries)

    def get(self, index: int) -> Optional[HistoryEntry]:
        if 0 <= index < len(self._entries):
            return self._entries[index]
        return None

    def record(self, expression: str, result: str) -> HistoryEntry:
        entry = HistoryEntry(expression=expression, result=str(result), timestamp=self._clock())
        self._apply(lambda entries: [entry] + entries)
        return entry

    def delete_at(self, index: int) -> bool:
        """Delete the entry shown at ``index`` in this ledger's current list."""
        if isinstance(index, bool) or not isinstance(index, int):
            return False
        if not 0 <= index < len(self._entries):
            return False
        target = self._entries[index]

        def without_target(entries: List[HistoryEntry]) -> List[HistoryEntry]:
            if target in entries:
                entries.remove(target)
            return entries

        self._apply(without_target)
        return True

    def clear(self) -> None:
        self._apply(lambda entries: [])

    def flush(self) -> None:
        """Save entries that only exist in memory after a failed save."""
        if self._unsaved:
            self._apply(lambda entries: entries)
