"""
Arrow schemas for TraceChain supply chain events.

Events are exported as Apache Arrow tables so downstream analytics can read
a product's history (or the whole ledger) without going through the REST
representation. Optional fields map to nullable columns.
"""

from typing import Iterable

import pyarrow as pa

from tracechain.core.models import SupplyChainEvent


SUPPLY_CHAIN_EVENT_SCHEMA = pa.schema([
    ('id', pa.string()),
    ('product_id', pa.string()),
    ('event_type', pa.string()),
    ('location', pa.string()),
    ('timestamp', pa.int64()),
    ('actor', pa.string()),
    ('details', pa.string()),
    ('latitude', pa.float64()),
    ('longitude', pa.float64()),
    ('temperature', pa.float64()),
    ('humidity', pa.float64()),
])


def get_event_schema() -> pa.Schema:
    """Return the Arrow schema for a supply chain event."""
    return SUPPLY_CHAIN_EVENT_SCHEMA


def events_to_table(events: Iterable[SupplyChainEvent]) -> pa.Table:
    """
    Convert events to an Arrow table, preserving the given order.

    Args:
        events: Events to convert

    Returns:
        Table conforming to SUPPLY_CHAIN_EVENT_SCHEMA
    """
    columns: dict[str, list] = {name: [] for name in SUPPLY_CHAIN_EVENT_SCHEMA.names}

    for event in events:
        columns['id'].append(event.id)
        columns['product_id'].append(event.product_id)
        columns['event_type'].append(event.event_type.value)
        columns['location'].append(event.location)
        columns['timestamp'].append(event.timestamp)
        columns['actor'].append(event.actor)
        columns['details'].append(event.details)
        columns['latitude'].append(event.coordinates.latitude if event.coordinates else None)
        columns['longitude'].append(event.coordinates.longitude if event.coordinates else None)
        columns['temperature'].append(event.temperature)
        columns['humidity'].append(event.humidity)

    return pa.Table.from_pydict(columns, schema=SUPPLY_CHAIN_EVENT_SCHEMA)


def table_to_ipc_bytes(table: pa.Table) -> bytes:
    """Serialize a table to the Arrow IPC streaming format."""
    sink = pa.BufferOutputStream()
    with pa.ipc.new_stream(sink, table.schema) as writer:
        writer.write_table(table)
    return sink.getvalue().to_pybytes()
