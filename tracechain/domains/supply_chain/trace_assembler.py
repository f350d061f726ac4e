"""
Trace Assembler for the TraceChain supply chain domain.

Owns creation of the per-product trace and the append path for events. An
append is all-or-nothing: the product check, the trace lookup, the event
index entry and the trace mutation happen under the store lock, and nothing
is written unless every check passes.
"""

import logging
import time
from typing import Callable

from tracechain.core.identifiers import current_timestamp
from tracechain.core.models import SupplyChainEvent, SupplyChainTrace
from tracechain.core.results import LedgerError, OperationResult
from tracechain.storage.entity_store import EntityKind, EntityStore

logger = logging.getLogger(__name__)


class TraceAssembler:
    """Creates product traces and appends events to them in arrival order"""

    def __init__(self, store: EntityStore, clock: Callable[[], float] = time.time):
        self.store = store
        self.clock = clock

    def create_trace(self, product_id: str, created_at: int | None = None) -> SupplyChainTrace:
        """
        Seed an empty trace for a freshly created product.

        Args:
            product_id: Identifier of the product the trace belongs to
            created_at: Creation time, normally the product's production_date
                (read from the clock when omitted)

        Returns:
            The new trace, with created_at == last_updated
        """
        now = created_at if created_at is not None else current_timestamp(self.clock)
        trace = SupplyChainTrace(product_id=product_id, created_at=now, last_updated=now)
        self.store.put(EntityKind.TRACES, product_id, trace)
        return trace

    def append_event(self, product_id: str, event: SupplyChainEvent) -> OperationResult:
        """
        Append an event to a product's trace.

        Args:
            product_id: Product whose trace receives the event
            event: Event to append

        Returns:
            OperationResult carrying the event id, or PRODUCT_NOT_FOUND /
            TRACE_NOT_FOUND with no state changed
        """
        with self.store.lock:
            if not self.store.contains(EntityKind.PRODUCTS, product_id):
                return OperationResult.fail(LedgerError.PRODUCT_NOT_FOUND)

            trace: SupplyChainTrace | None = self.store.get(EntityKind.TRACES, product_id)
            if trace is None:
                logger.error("Trace missing for existing product %s", product_id)
                return OperationResult.fail(LedgerError.TRACE_NOT_FOUND)

            self.store.put(EntityKind.EVENTS, event.id, {
                "event_id": event.id,
                "product_id": product_id,
                "position": len(trace.events)
            })
            trace.events.append(event)
            # last_updated tracks the newest event time and never moves backwards
            trace.last_updated = max(trace.last_updated, event.timestamp)

            logger.debug("Event %s appended to trace of %s (%d events)",
                         event.id, product_id, len(trace.events))
            return OperationResult.ok(event.id)

    def get_trace(self, product_id: str) -> SupplyChainTrace | None:
        """Return a detached snapshot of a product's trace, or None"""
        with self.store.lock:
            trace = self.store.get(EntityKind.TRACES, product_id)
            return trace.snapshot() if trace is not None else None

    def get_event(self, event_id: str) -> SupplyChainEvent | None:
        """Resolve an event through the event index into its owning trace"""
        with self.store.lock:
            entry = self.store.get(EntityKind.EVENTS, event_id)
            if entry is None:
                return None
            trace = self.store.get(EntityKind.TRACES, entry["product_id"])
            if trace is None or entry["position"] >= len(trace.events):
                return None
            return trace.events[entry["position"]]
