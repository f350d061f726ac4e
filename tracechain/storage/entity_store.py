"""
Entity Store for the TraceChain ledger.

The store holds four independent keyed collections, one per entity kind.
It is the single owner of ledger state: every operation reaches the data
through it, and a single re-entrant lock guards all four collections so a
multi-step operation (check the product, then append to its trace) can hold
the lock for its whole duration.

The EVENTS collection does not duplicate event records. It maps each event
id to the id of the product whose trace owns the event; the trace is the
only place the event itself lives.
"""

import logging
import threading
from enum import Enum
from typing import Any

from tracechain.core.results import StoreNotInitializedError
from tracechain.storage.memory_storage import MemoryStorage

logger = logging.getLogger(__name__)


class EntityKind(Enum):
    """Entity collections kept by the store"""
    PRODUCTS = "products"
    PARTICIPANTS = "participants"
    EVENTS = "events"
    TRACES = "traces"


class EntityStore:
    """Keyed collections for products, participants, events and traces"""

    def __init__(self, initialize: bool = True):
        """
        Args:
            initialize: Allocate the collections immediately. Pass False to
                defer allocation to an explicit initialize() call.
        """
        self.lock = threading.RLock()
        self._collections: dict[EntityKind, MemoryStorage] | None = None
        if initialize:
            self.initialize()

    def initialize(self):
        """Allocate the four collections; calling it again is a no-op"""
        with self.lock:
            if self._collections is not None:
                return
            self._collections = {kind: MemoryStorage() for kind in EntityKind}
            self._collections[EntityKind.PRODUCTS].create_index("batch_number")
            logger.debug("Entity store initialized with collections: %s",
                         ", ".join(kind.value for kind in EntityKind))

    @property
    def is_initialized(self) -> bool:
        return self._collections is not None

    def _collection(self, kind: EntityKind) -> MemoryStorage:
        if self._collections is None:
            raise StoreNotInitializedError(kind.value)
        return self._collections[kind]

    def put(self, kind: EntityKind, entity_id: str, record: Any):
        """Insert or overwrite a record; no uniqueness check is made"""
        with self.lock:
            self._collection(kind).set(entity_id, record)

    def get(self, kind: EntityKind, entity_id: str) -> Any | None:
        """Return the record stored under entity_id, or None"""
        with self.lock:
            return self._collection(kind).get(entity_id)

    def contains(self, kind: EntityKind, entity_id: str) -> bool:
        with self.lock:
            return self._collection(kind).contains(entity_id)

    def values(self, kind: EntityKind) -> list[Any]:
        """All records of a kind. Callers must not rely on the ordering."""
        with self.lock:
            return self._collection(kind).get_all_values()

    def query_by_index(self, kind: EntityKind, index_name: str, value: Any) -> list[str]:
        """Keys of records of a kind whose indexed field equals value"""
        with self.lock:
            return self._collection(kind).query_by_index(index_name, value)

    def count(self, kind: EntityKind) -> int:
        with self.lock:
            return self._collection(kind).size()

    def __repr__(self) -> str:
        if self._collections is None:
            return "EntityStore(initialized=False)"
        sizes = ", ".join(f"{kind.value}={self._collections[kind].size()}" for kind in EntityKind)
        return f"EntityStore({sizes})"
