import pickle
from threading import RLock
from typing import Any, List

import pytest

from kvtable import Item, KVTable, PutOutcome
from kvtable.core.table import logger


def test_put_then_get_value() -> None:
    t = KVTable()
    assert t.put("user", "alice") is PutOutcome.ADDED
    assert t.get_value("user") == "alice"


def test_second_put_replaces_value() -> None:
    t = KVTable()
    t.put("user", "alice")
    assert t.put("user", "bob") is PutOutcome.UPDATED
    assert t.count() == 1
    assert t.get_value("user") == "bob"


def test_keys_match_ignoring_case() -> None:
    t = KVTable()
    t.put("Foo", "x")
    assert t.get_value("fOO") == "x"
    assert "FOO" in t
    t.put("FOO", "y")
    assert t.count() == 1
    # first spelling is kept
    assert t.get_by_index(0) == ("Foo", "y")


def test_session_scenario() -> None:
    t = KVTable("session")
    t.put("user", "alice")
    t.put("port", "5004")
    t.put("user", "bob")
    assert t.count() == 2
    assert t.get_value("user") == "bob"
    assert t.get_value("PORT") == "5004"
    assert t.get_by_index(0) == ("user", "bob")
    assert t.get_by_index(1) == ("port", "5004")


def test_none_value_is_stored_and_clears() -> None:
    t = KVTable()
    assert t.put("flag") is PutOutcome.ADDED
    assert t.find("flag") == Item("flag", None)
    assert t.get_value("flag") is None
    t.put("flag", "on")
    assert t.get_value("flag") == "on"
    t.put("flag", None)
    assert t.get_value("flag") is None
    assert t.count() == 1


def test_missing_key_is_absent() -> None:
    t = KVTable()
    assert t.get_value("missing") is None
    assert t.find("missing") is None
    t.put("present", "1")
    assert t.get_value("missing") is None
    assert "missing" not in t


@pytest.mark.parametrize("key", ["", None, 7])
def test_put_with_invalid_key_is_ignored(key: object) -> None:
    t = KVTable()
    assert t.put(key, "v") is PutOutcome.IGNORED  # type: ignore[arg-type]
    assert t.count() == 0


def test_put_with_non_text_value_is_ignored() -> None:
    t = KVTable()
    assert t.put("port", 5004) is PutOutcome.IGNORED  # type: ignore[arg-type]
    assert t.count() == 0


def test_find_with_non_text_key_is_absent() -> None:
    t = KVTable()
    t.put("1", "one")
    assert t.find(1) is None  # type: ignore[arg-type]
    assert 1 not in t


def test_count_tracks_unique_puts() -> None:
    t = KVTable()
    for i in range(20):
        t.put(f"k{i % 5}", str(i))
    assert t.count() == 5
    assert len(t) == 5


def test_iteration_by_index_follows_insertion_order() -> None:
    t = KVTable()
    pairs = [("a", "1"), ("B", "2"), ("c", None), ("d", "4")]
    for k, v in pairs:
        t.put(k, v)
    t.put("b", "two")

    seen = [t.get_by_index(i) for i in range(t.count())]
    assert seen == [("a", "1"), ("B", "two"), ("c", None), ("d", "4")]


@pytest.mark.parametrize("index", [4, 5, 100, -1])
def test_get_by_index_out_of_range_is_absent(index: int) -> None:
    t = KVTable()
    for k in "abcd":
        t.put(k, k.upper())
    assert t.get_by_index(index) == (None, None)


def test_get_by_index_on_empty_table() -> None:
    assert KVTable().get_by_index(0) == (None, None)


def test_found_item_is_a_snapshot() -> None:
    t = KVTable()
    t.put("user", "alice")
    item = t.find("user")
    t.put("user", "bob")
    assert item is not None
    assert item.value == "alice"
    with pytest.raises(AttributeError):
        item.value = "eve"  # type: ignore[misc]


def test_items_snapshot_is_detached() -> None:
    t = KVTable()
    t.put("a", "1")
    snap = t.items()
    snap.clear()
    assert t.count() == 1
    assert t.to_dict() == {"a": "1"}


def test_destroy_empties_table_and_is_idempotent() -> None:
    t = KVTable("session")
    t.put("user", "alice")
    t.destroy()
    assert t.destroyed
    assert not t
    assert t.name is None
    assert t.count() == 0
    assert t.get_value("user") is None
    assert t.get_by_index(0) == (None, None)
    assert t.put("user", "bob") is PutOutcome.IGNORED
    assert t.items() == []
    assert repr(t) == "KVTable(<destroyed>)"
    t.destroy()
    assert t.count() == 0


def test_locked_context_does_not_swallow_exceptions() -> None:
    t = KVTable()
    with pytest.raises(ValueError):
        with t.locked() as locked:
            locked.put("a", "1")
            raise ValueError("force exit")
    # confirm lock released
    t.put("b", "2")
    assert t.get_value("b") == "2"
    assert t.get_value("a") == "1"


def test_pickle_keeps_name_and_items() -> None:
    t = KVTable("session")
    t.put("user", "alice")
    t.put("empty")
    restored = pickle.loads(pickle.dumps(t))
    assert restored.name == "session"
    assert restored.items() == [Item("user", "alice"), Item("empty", None)]
    assert restored.get_value("USER") == "alice"
    restored.put("port", "5004")
    assert t.count() == 2


def test_pickle_of_destroyed_table_stays_destroyed() -> None:
    t = KVTable()
    t.put("a", "1")
    t.destroy()
    restored = pickle.loads(pickle.dumps(t))
    assert restored.destroyed
    assert restored.put("a", "1") is PutOutcome.IGNORED


def test_item_rejects_missing_or_empty_key() -> None:
    with pytest.raises(ValueError):
        Item("")
    with pytest.raises(TypeError):
        Item(None)  # type: ignore[arg-type]
    with pytest.raises(TypeError):
        Item("port", 5004)  # type: ignore[arg-type]


def test_pickle_restores_default_sink_and_lock() -> None:
    class ListSink:
        def __init__(self) -> None:
            self.lines: List[str] = []

        def log(self, level: int, msg: str, *args: Any) -> None:
            self.lines.append(msg % args)

    sink = ListSink()
    lock = RLock()
    t = KVTable("session", lock=lock, sink=sink)
    t.put("user", "alice")
    restored = pickle.loads(pickle.dumps(t))
    assert restored._sink is logger
    assert restored._lock is not lock
    restored.dump()
    assert sink.lines == []
