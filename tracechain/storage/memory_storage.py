"""
Memory Storage Module for TraceChain

This module provides the in-memory keyed collection backing each entity kind
of the ledger. Records are stored as-is (dataclass instances or dicts) and
secondary indexes can be declared on any record field.
"""

from typing import Any


def _field_value(record: Any, field_name: str) -> Any:
    """Read a field from a dict record or an attribute from an object record."""
    if isinstance(record, dict):
        return record.get(field_name)
    return getattr(record, field_name, None)


class MemoryStorage:
    """Simple in-memory storage backend for TraceChain"""

    def __init__(self):
        self.data: dict[str, Any] = {}
        self.indexes: dict[str, dict[Any, list[str]]] = {}

    def create_index(self, field_name: str):
        """Create index for field, indexing records already stored"""
        if field_name in self.indexes:
            return
        self.indexes[field_name] = {}
        for key, value in self.data.items():
            self._index_record(field_name, key, value)

    def _index_record(self, field_name: str, key: str, value: Any):
        field_value = _field_value(value, field_name)
        if field_value is None:
            return
        keys = self.indexes[field_name].setdefault(field_value, [])
        if key not in keys:
            keys.append(key)

    def get(self, key: str) -> Any | None:
        """Get value by key"""
        return self.data.get(key)

    def set(self, key: str, value: Any):
        """Set value by key, overwriting any existing record"""
        previous = self.data.get(key)
        self.data[key] = value

        for field_name in self.indexes:
            if previous is not None:
                old_value = _field_value(previous, field_name)
                keys = self.indexes[field_name].get(old_value)
                if keys and key in keys:
                    keys.remove(key)
                    if not keys:
                        del self.indexes[field_name][old_value]
            self._index_record(field_name, key, value)

    def contains(self, key: str) -> bool:
        """Check whether a key is stored"""
        return key in self.data

    def query_by_index(self, index_name: str, value: Any) -> list[str]:
        """Query using index, returning keys in insertion order"""
        if index_name not in self.indexes:
            return []
        return list(self.indexes[index_name].get(value, []))

    def get_all_keys(self) -> list[str]:
        """Get all keys in storage"""
        return list(self.data.keys())

    def get_all_values(self) -> list[Any]:
        """Get all values in storage"""
        return list(self.data.values())

    def size(self) -> int:
        """Get number of items in storage"""
        return len(self.data)
