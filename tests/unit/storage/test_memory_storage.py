"""
Test suite for MemoryStorage

Covers keyed access and secondary indexes over dict and object records.
"""

from dataclasses import dataclass

from tracechain.storage.memory_storage import MemoryStorage


@dataclass
class Record:
    batch_number: str


def test_set_get_contains():
    storage = MemoryStorage()
    storage.set("a", {"value": 1})

    assert storage.get("a") == {"value": 1}
    assert storage.get("missing") is None
    assert storage.contains("a")
    assert not storage.contains("missing")
    assert storage.size() == 1


def test_set_overwrites_without_check():
    storage = MemoryStorage()
    storage.set("a", {"value": 1})
    storage.set("a", {"value": 2})

    assert storage.get("a") == {"value": 2}
    assert storage.size() == 1


def test_index_on_object_records():
    storage = MemoryStorage()
    storage.create_index("batch_number")
    storage.set("p1", Record("B1"))
    storage.set("p2", Record("B2"))
    storage.set("p3", Record("B1"))

    assert storage.query_by_index("batch_number", "B1") == ["p1", "p3"]
    assert storage.query_by_index("batch_number", "B9") == []
    assert storage.query_by_index("unknown_index", "B1") == []


def test_index_created_after_records_covers_them():
    storage = MemoryStorage()
    storage.set("e1", {"product_id": "p1"})
    storage.create_index("product_id")

    assert storage.query_by_index("product_id", "p1") == ["e1"]


def test_overwrite_moves_index_entry():
    storage = MemoryStorage()
    storage.create_index("batch_number")
    storage.set("p1", Record("B1"))
    storage.set("p1", Record("B2"))

    assert storage.query_by_index("batch_number", "B1") == []
    assert storage.query_by_index("batch_number", "B2") == ["p1"]


def test_query_result_is_a_copy():
    storage = MemoryStorage()
    storage.create_index("product_id")
    storage.set("e1", {"product_id": "p1"})

    storage.query_by_index("product_id", "p1").append("forged")
    assert storage.query_by_index("product_id", "p1") == ["e1"]


def test_enumeration():
    storage = MemoryStorage()
    storage.set("a", 1)
    storage.set("b", 2)

    assert sorted(storage.get_all_keys()) == ["a", "b"]
    assert sorted(storage.get_all_values()) == [1, 2]
