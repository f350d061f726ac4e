"""
Authenticity Checker for the TraceChain supply chain domain.

"Authentic" here means plausible, not proven: a trace passes when it has at
least one event and its event timestamps, read in arrival order, never go
backwards. Equal consecutive timestamps are allowed. Actor identity,
signatures and location plausibility are not examined.
"""

import logging
from typing import NamedTuple, Sequence

from tracechain.core.models import SupplyChainEvent
from tracechain.core.results import LedgerError, OperationResult, StoreNotInitializedError
from tracechain.storage.entity_store import EntityKind, EntityStore

logger = logging.getLogger(__name__)


def is_chronological(events: Sequence[SupplyChainEvent]) -> bool:
    """
    Check that timestamps never decrease across the sequence.

    Args:
        events: Events in arrival order

    Returns:
        False for an empty sequence or any regression, True otherwise
    """
    if not events:
        return False

    previous = events[0].timestamp
    for event in events[1:]:
        if event.timestamp < previous:
            return False
        previous = event.timestamp
    return True


def first_regression(events: Sequence[SupplyChainEvent]) -> int | None:
    """Index of the first event whose timestamp is below its predecessor's, or None"""
    for index in range(1, len(events)):
        if events[index].timestamp < events[index - 1].timestamp:
            return index
    return None


class AuthenticityReport(NamedTuple):
    """Verdict together with the number of events it was computed over"""
    authentic: bool
    event_count: int


class AuthenticityChecker:
    """Read-only plausibility check over a product's trace"""

    def __init__(self, store: EntityStore):
        self.store = store

    def examine(self, product_id: str) -> OperationResult:
        """
        Examine the recorded history of a product.

        The verdict and the event count are read from the same trace state,
        under the store lock.

        Args:
            product_id: Product to examine

        Returns:
            OperationResult with an AuthenticityReport, or PRODUCT_NOT_FOUND /
            PRODUCTS_NOT_INITIALIZED / TRACES_NOT_INITIALIZED
        """
        with self.store.lock:
            try:
                product_exists = self.store.contains(EntityKind.PRODUCTS, product_id)
            except StoreNotInitializedError:
                return OperationResult.fail(LedgerError.PRODUCTS_NOT_INITIALIZED)
            if not product_exists:
                return OperationResult.fail(LedgerError.PRODUCT_NOT_FOUND)

            try:
                trace = self.store.get(EntityKind.TRACES, product_id)
            except StoreNotInitializedError:
                return OperationResult.fail(LedgerError.TRACES_NOT_INITIALIZED)

            # A product without a trace has no history to vouch for it
            if trace is None:
                logger.warning("No trace recorded for product %s", product_id)
                return OperationResult.ok(AuthenticityReport(authentic=False, event_count=0))

            regression = first_regression(trace.events)
            if regression is not None:
                logger.warning(
                    "Trace of %s goes back in time at event %s (%d < %d)",
                    product_id, trace.events[regression].id,
                    trace.events[regression].timestamp, trace.events[regression - 1].timestamp
                )
            return OperationResult.ok(AuthenticityReport(
                authentic=is_chronological(trace.events),
                event_count=len(trace.events)
            ))

    def verify(self, product_id: str) -> OperationResult:
        """Like examine(), with the bare bool verdict as the result value"""
        result = self.examine(product_id)
        if not result.success:
            return result
        return OperationResult.ok(result.value.authentic)
