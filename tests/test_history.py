import json
from datetime import datetime

from calculator.history import HistoryEntry, HistoryLedger, MemoryKeyValueStore


class BrokenStore:
    def get(self, key):
        raise RuntimeError("backend down")

    def set(self, key, value):
        raise RuntimeError("backend down")


class FlakyStore(MemoryKeyValueStore):
    def __init__(self):
        super().__init__()
        self.down = False

    def get(self, key):
        if self.down:
            raise RuntimeError("backend down")
        return super().get(key)

    def set(self, key, value):
        if self.down:
            raise RuntimeError("backend down")
        super().set(key, value)


def test_record_prepends_newest_first(ledger):
    ledger.record("1+1", "2")
    ledger.record("2*3", "6")
    assert [e.expression for e in ledger.all()] == ["2*3", "1+1"]
    assert ledger.get(0).result == "6"


def test_overflow_evicts_oldest(ledger):
    for i in range(51):
        ledger.record(f"{i}+0", str(i))
    entries = ledger.all()
    assert len(entries) == 50
    assert entries[0].expression == "50+0"
    assert entries[-1].expression == "1+0"
    assert all(e.expression != "0+0" for e in entries)


def test_delete_at_out_of_range_is_a_no_op(ledger):
    ledger.record("1+1", "2")
    ledger.record("2+2", "4")
    before = ledger.all()
    for index in (-1, 2, 99):
        assert ledger.delete_at(index) is False
    assert ledger.all() == before


def test_delete_at_removes_one_entry(ledger):
    for expr, res in [("1+1", "2"), ("2+2", "4"), ("3+3", "6")]:
        ledger.record(expr, res)
    assert ledger.delete_at(1) is True
    assert [e.expression for e in ledger.all()] == ["3+3", "1+1"]


def test_clear_persists_empty_list(ledger, store):
    ledger.record("1+1", "2")
    ledger.clear()
    assert len(ledger) == 0
    assert json.loads(store.get("calc_history_v1")) == []


def test_snapshot_format(ledger, store):
    ledger.record("50%", "0.5")
    assert json.loads(store.get("calc_history_v1")) == [
        {"expr": "50%", "res": "0.5", "at": "2024-01-01T00:00:01.000Z"}
    ]


def test_reload_preserves_order_and_content(ledger, store):
    for expr, res in [("1+1", "2"), ("10/4", "2.5"), ("(20+30)%", "0.5")]:
        ledger.record(expr, res)
    reloaded = HistoryLedger(store)
    assert reloaded.all() == ledger.all()


def test_all_is_read_only_snapshot(ledger):
    ledger.record("1+1", "2")
    snapshot = ledger.all()
    ledger.clear()
    assert len(snapshot) == 1


def test_default_timestamp_is_iso_utc():
    ledger = HistoryLedger(MemoryKeyValueStore())
    entry = ledger.record("1+1", "2")
    assert entry.timestamp.endswith("Z")
    parsed = datetime.fromisoformat(entry.timestamp.replace("Z", "+00:00"))
    assert parsed.utcoffset().total_seconds() == 0


def test_missing_or_malformed_snapshot_is_empty():
    assert len(HistoryLedger(MemoryKeyValueStore())) == 0
    assert len(HistoryLedger(MemoryKeyValueStore({"calc_history_v1": "not json"}))) == 0
    assert len(HistoryLedger(MemoryKeyValueStore({"calc_history_v1": '{"expr": "1"}'}))) == 0


def test_malformed_items_are_skipped():
    raw = json.dumps([{"expr": "1+1", "res": "2", "at": "t"}, 5, {"res": "3"}, {"expr": "2+2", "res": 4}])
    ledger = HistoryLedger(MemoryKeyValueStore({"calc_history_v1": raw}))
    assert ledger.all() == (
        HistoryEntry("1+1", "2", "t"),
        HistoryEntry("2+2", "4", ""),
    )


def test_oversized_snapshot_is_truncated():
    raw = json.dumps([{"expr": f"{i}+0", "res": str(i), "at": ""} for i in range(10)])
    ledger = HistoryLedger(MemoryKeyValueStore({"calc_history_v1": raw}), max_entries=3)
    assert [e.expression for e in ledger.all()] == ["0+0", "1+0", "2+0"]


def test_custom_key():
    store = MemoryKeyValueStore()
    HistoryLedger(store, key="other").record("1+1", "2")
    assert store.get("calc_history_v1") is None
    assert store.get("other") is not None


def test_broken_store_degrades_gracefully():
    ledger = HistoryLedger(BrokenStore())
    assert len(ledger) == 0
    ledger.record("1+1", "2")
    assert ledger.get(0).result == "2"


def test_delete_at_rejects_bool_index(ledger):
    ledger.record("1+1", "2")
    ledger.record("2+2", "4")
    before = ledger.all()
    assert ledger.delete_at(True) is False
    assert ledger.delete_at(False) is False
    assert ledger.all() == before


def test_ledgers_sharing_a_store_keep_each_others_entries(store, stamps):
    first = HistoryLedger(store, clock=stamps)
    second = HistoryLedger(store, clock=stamps)
    first.record("1+1", "2")
    second.record("2+2", "4")
    assert [e.expression for e in second.all()] == ["2+2", "1+1"]
    assert [e.expression for e in HistoryLedger(store).all()] == ["2+2", "1+1"]

    first.refresh()
    assert [e.expression for e in first.all()] == ["2+2", "1+1"]


def test_delete_at_removes_the_entry_shown_even_after_other_writes(store, stamps):
    first = HistoryLedger(store, clock=stamps)
    second = HistoryLedger(store, clock=stamps)
    first.record("1+1", "2")
    second.record("2+2", "4")
    # first still shows only "1+1" at index 0
    assert first.delete_at(0) is True
    assert [e.expression for e in first.all()] == ["2+2"]
    assert [e.expression for e in HistoryLedger(store).all()] == ["2+2"]


def test_refresh_keeps_entries_when_store_read_fails(stamps):
    store = FlakyStore()
    ledger = HistoryLedger(store, clock=stamps)
    ledger.record("1+1", "2")
    store.down = True
    ledger.refresh()
    assert [e.expression for e in ledger.all()] == ["1+1"]


def test_flush_saves_entries_kept_after_failed_save(stamps):
    store = FlakyStore()
    ledger = HistoryLedger(store, clock=stamps)
    ledger.record("1+1", "2")
    store.down = True
    ledger.record("2+2", "4")
    assert [e.expression for e in ledger.all()] == ["2+2", "1+1"]
    store.down = False
    ledger.flush()
    assert [e.expression for e in HistoryLedger(store).all()] == ["2+2", "1+1"]


def test_flush_does_not_restore_entries_cleared_elsewhere(store, stamps):
    first = HistoryLedger(store, clock=stamps)
    first.record("1+1", "2")
    HistoryLedger(store).clear()
    first.flush()
    assert HistoryLedger(store).all() == ()
