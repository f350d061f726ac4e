"""
Supply Chain Ledger for the TraceChain Framework.

SupplyChainLedger is the operation surface of the system: it creates products,
registers participants, appends custody events and answers provenance and
authenticity queries. It owns an EntityStore and wires the identifier
generator, the TraceAssembler and the AuthenticityChecker around it.

The ledger is an explicit object. Whatever dispatches requests (the REST
server, the tests) constructs one and passes it to each operation; there is
no module-level state.
"""

import logging
import time
from typing import Any, Callable, Iterable

import pyarrow as pa

from tracechain.core.identifiers import IdentifierGenerator, UNIQUE_STRATEGY, current_timestamp
from tracechain.core.models import (
    Coordinates, EventType, Participant, ParticipantRole, Product,
    SupplyChainEvent, SupplyChainTrace
)
from tracechain.core.results import LedgerError, OperationResult, StoreNotInitializedError
from tracechain.core.schemas import events_to_table
from tracechain.domains.supply_chain.authenticity import AuthenticityChecker
from tracechain.domains.supply_chain.trace_assembler import TraceAssembler
from tracechain.security.secure_logging import get_audit_logger, sanitize_for_log
from tracechain.storage.entity_store import EntityKind, EntityStore

logger = logging.getLogger(__name__)


class SupplyChainLedger:
    """
    In-memory traceability ledger.

    Every public operation takes the store lock for its full duration, so
    each operation's effects become visible all at once.
    """

    def __init__(self, store: EntityStore | None = None,
                 clock: Callable[[], float] = time.time,
                 id_generator: IdentifierGenerator | None = None,
                 id_strategy: str = UNIQUE_STRATEGY):
        """
        Initialize the ledger.

        Args:
            store: Entity store to operate on (a fresh initialized one by default)
            clock: Wall clock returning seconds since the epoch
            id_generator: Identifier generator (built from id_strategy by default)
            id_strategy: Strategy for the default identifier generator
        """
        self.store = store if store is not None else EntityStore()
        self.clock = clock
        self.id_generator = id_generator or IdentifierGenerator(strategy=id_strategy, clock=clock)
        self.trace_assembler = TraceAssembler(self.store, clock=clock)
        self.authenticity_checker = AuthenticityChecker(self.store)
        self.audit = get_audit_logger()

    @classmethod
    def from_config(cls, config: dict[str, Any], **kwargs) -> "SupplyChainLedger":
        """Build a ledger from Settings.get_ledger_config() output"""
        return cls(id_strategy=config.get("id_strategy", UNIQUE_STRATEGY), **kwargs)

    def _now(self) -> int:
        return current_timestamp(self.clock)

    def _new_id(self, kind: EntityKind) -> str:
        """Draw identifiers until one is free in the target collection"""
        entity_id = self.id_generator.generate_id()
        while self.store.contains(kind, entity_id):
            logger.warning("Identifier collision on %s for %s, regenerating", entity_id, kind.value)
            entity_id = self.id_generator.generate_id()
        return entity_id

    # Creation operations

    def create_product(self, name: str, description: str, manufacturer: str,
                       batch_number: str, ingredients: Iterable[str] = (),
                       certifications: Iterable[str] = ()) -> str:
        """
        Create a product and its empty trace.

        Returns:
            The new product id

        Raises:
            StoreNotInitializedError: If the store has not been initialized
        """
        with self.store.lock:
            product_id = self._new_id(EntityKind.PRODUCTS)
            now = self._now()
            product = Product(
                id=product_id,
                name=name,
                description=description,
                manufacturer=manufacturer,
                batch_number=batch_number,
                production_date=now,
                ingredients=tuple(ingredients),
                certifications=tuple(certifications)
            )
            self.store.put(EntityKind.PRODUCTS, product_id, product)
            self.trace_assembler.create_trace(product_id, created_at=now)

        self.audit.audit("create", "product", entity_id=product_id,
                         name=name, batch_number=batch_number)
        return product_id

    def add_supply_chain_event(self, product_id: str, event_type: EventType | str,
                               location: str, actor: str, details: str,
                               coordinates: Coordinates | tuple[float, float] | None = None,
                               temperature: float | None = None,
                               humidity: float | None = None) -> OperationResult:
        """
        Record a custody/inspection event for an existing product.

        The event timestamp is assigned here from the ledger clock.

        Returns:
            OperationResult with the new event id, or PRODUCT_NOT_FOUND,
            TRACE_NOT_FOUND or PRODUCTS_NOT_INITIALIZED with nothing recorded
        """
        event_type = EventType.from_label(event_type)
        if coordinates is not None and not isinstance(coordinates, Coordinates):
            coordinates = Coordinates(*coordinates)

        try:
            with self.store.lock:
                event = SupplyChainEvent(
                    id=self._new_id(EntityKind.EVENTS),
                    product_id=product_id,
                    event_type=event_type,
                    location=location,
                    timestamp=self._now(),
                    actor=actor,
                    details=details,
                    coordinates=coordinates,
                    temperature=temperature,
                    humidity=humidity
                )
                result = self.trace_assembler.append_event(product_id, event)
        except StoreNotInitializedError:
            logger.warning("Rejected %s event for product %s: store not initialized",
                           event_type.value, sanitize_for_log(product_id))
            return OperationResult.fail(LedgerError.PRODUCTS_NOT_INITIALIZED)

        if result.success:
            self.audit.audit("append", "event", entity_id=event.id, product_id=product_id,
                             event_type=event_type, actor=actor)
        else:
            logger.warning("Rejected %s event for product %s: %s",
                           event_type.value, sanitize_for_log(product_id), result.message)
        return result

    def register_participant(self, name: str, role: ParticipantRole | str,
                             location: str, public_key: str) -> str:
        """
        Register a supply chain participant. Participants start unverified.

        Returns:
            The new participant id
        """
        role = role if isinstance(role, ParticipantRole) else ParticipantRole(role)

        with self.store.lock:
            participant_id = self._new_id(EntityKind.PARTICIPANTS)
            participant = Participant(
                id=participant_id,
                name=name,
                role=role,
                location=location,
                public_key=public_key
            )
            self.store.put(EntityKind.PARTICIPANTS, participant_id, participant)

        self.audit.audit("register", "participant", entity_id=participant_id,
                         name=name, role=role)
        return participant_id

    # Query surface

    def get_product(self, product_id: str) -> OperationResult:
        """Look up one product; fails with PRODUCT_NOT_FOUND or PRODUCTS_NOT_INITIALIZED"""
        try:
            product = self.store.get(EntityKind.PRODUCTS, product_id)
        except StoreNotInitializedError:
            return OperationResult.fail(LedgerError.PRODUCTS_NOT_INITIALIZED)
        if product is None:
            return OperationResult.fail(LedgerError.PRODUCT_NOT_FOUND)
        return OperationResult.ok(product)

    def get_supply_chain_trace(self, product_id: str) -> SupplyChainTrace | None:
        """Snapshot of a product's trace, or None when absent or uninitialized"""
        try:
            return self.trace_assembler.get_trace(product_id)
        except StoreNotInitializedError:
            return None

    def get_all_products(self) -> list[Product]:
        """Every product currently stored, in no guaranteed order"""
        try:
            return self.store.values(EntityKind.PRODUCTS)
        except StoreNotInitializedError:
            return []

    def get_participants(self) -> list[Participant]:
        """Every registered participant, in no guaranteed order"""
        try:
            return self.store.values(EntityKind.PARTICIPANTS)
        except StoreNotInitializedError:
            return []

    def get_participant(self, participant_id: str) -> Participant | None:
        try:
            return self.store.get(EntityKind.PARTICIPANTS, participant_id)
        except StoreNotInitializedError:
            return None

    def get_event(self, event_id: str) -> SupplyChainEvent | None:
        try:
            return self.trace_assembler.get_event(event_id)
        except StoreNotInitializedError:
            return None

    def get_all_events(self) -> list[SupplyChainEvent]:
        """Events of every trace, each trace's events in arrival order"""
        try:
            with self.store.lock:
                events = []
                for trace in self.store.values(EntityKind.TRACES):
                    events.extend(trace.events)
                return events
        except StoreNotInitializedError:
            return []

    def get_trace_by_batch_number(self, batch_number: str) -> SupplyChainTrace | None:
        """
        Trace of the product carrying a batch number.

        Batch numbers are free text and not unique; when several products
        share one, the earliest created product's trace is returned.
        """
        try:
            with self.store.lock:
                product_ids = self.store.query_by_index(EntityKind.PRODUCTS, "batch_number", batch_number)
                if not product_ids:
                    return None
                return self.trace_assembler.get_trace(product_ids[0])
        except StoreNotInitializedError:
            return None

    def verify_product_authenticity(self, product_id: str) -> OperationResult:
        """
        Check that a product's recorded history is plausible.

        Returns:
            OperationResult with True/False, or PRODUCT_NOT_FOUND,
            PRODUCTS_NOT_INITIALIZED or TRACES_NOT_INITIALIZED
        """
        result = self.check_product_authenticity(product_id)
        if not result.success:
            return result
        return OperationResult.ok(result.value.authentic)

    def check_product_authenticity(self, product_id: str) -> OperationResult:
        """Verdict plus the number of events it covers, as an AuthenticityReport"""
        result = self.authenticity_checker.examine(product_id)
        if result.success:
            self.audit.audit("verify", "product", entity_id=product_id,
                             authentic=result.value.authentic, event_count=result.value.event_count)
        return result

    def export_events_table(self, product_id: str | None = None) -> pa.Table:
        """
        Events as an Arrow table, for one product or the whole ledger.

        An unknown product yields an empty table.
        """
        if product_id is None:
            return events_to_table(self.get_all_events())
        trace = self.get_supply_chain_trace(product_id)
        return events_to_table(trace.events if trace is not None else [])

    def stats(self) -> dict[str, int]:
        """Entity counts per collection"""
        try:
            with self.store.lock:
                return {kind.value: self.store.count(kind) for kind in EntityKind}
        except StoreNotInitializedError:
            return {kind.value: 0 for kind in EntityKind}

    def __repr__(self) -> str:
        return f"SupplyChainLedger(store={self.store!r}, id_generator={self.id_generator!r})"
