"""
Entity model for the TraceChain supply chain ledger.

This module defines the records kept by the ledger: products, the participants
that handle them, custody/inspection events and the per-product trace that
orders those events by arrival. Time fields are integer seconds since the
Unix epoch and are always assigned by the ledger, never by callers.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, NamedTuple


class EventType(Enum):
    """Kinds of custody/inspection events a product can go through"""
    PRODUCTION = "Production"
    QUALITY_CHECK = "QualityCheck"
    PACKAGING = "Packaging"
    SHIPPING = "Shipping"
    CUSTOMS = "Customs"
    DELIVERY = "Delivery"
    RETAIL = "Retail"

    @classmethod
    def from_label(cls, label: "str | EventType") -> "EventType":
        """
        Resolve an event type from its value, member name or display label.

        Accepts "QualityCheck", "QUALITY_CHECK" and "Quality Check" alike.

        Raises:
            ValueError: If the label matches no event type
        """
        if isinstance(label, cls):
            return label

        normalized = str(label).replace(" ", "").replace("_", "").lower()
        for member in cls:
            if member.value.lower() == normalized:
                return member
        raise ValueError(f"Unknown event type: {label!r}")


class ParticipantRole(Enum):
    """Closed set of roles a supply chain participant can hold"""
    MANUFACTURER = "Manufacturer"
    SUPPLIER = "Supplier"
    DISTRIBUTOR = "Distributor"
    RETAILER = "Retailer"
    CONSUMER = "Consumer"
    AUDITOR = "Auditor"


class Coordinates(NamedTuple):
    """Latitude/longitude pair in decimal degrees"""
    latitude: float
    longitude: float


@dataclass(frozen=True)
class Product:
    """A physical good tracked by the ledger"""
    id: str
    name: str
    description: str
    manufacturer: str
    batch_number: str
    production_date: int
    ingredients: tuple[str, ...] = ()
    certifications: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "manufacturer": self.manufacturer,
            "batch_number": self.batch_number,
            "production_date": self.production_date,
            "ingredients": list(self.ingredients),
            "certifications": list(self.certifications)
        }


@dataclass(frozen=True)
class Participant:
    """
    An organisation or person that handles products.

    public_key is stored as an opaque string and never validated. is_verified
    is always False: no operation promotes a participant to verified.
    """
    id: str
    name: str
    role: ParticipantRole
    location: str
    public_key: str
    is_verified: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "role": self.role.value,
            "location": self.location,
            "public_key": self.public_key,
            "is_verified": self.is_verified
        }


@dataclass(frozen=True)
class SupplyChainEvent:
    """
    A single custody or inspection record for a product.

    actor is free text; it is not a reference to a registered Participant.
    """
    id: str
    product_id: str
    event_type: EventType
    location: str
    timestamp: int
    actor: str
    details: str
    coordinates: Coordinates | None = None
    temperature: float | None = None
    humidity: float | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "product_id": self.product_id,
            "event_type": self.event_type.value,
            "location": self.location,
            "timestamp": self.timestamp,
            "actor": self.actor,
            "details": self.details,
            "coordinates": (
                {"latitude": self.coordinates.latitude, "longitude": self.coordinates.longitude}
                if self.coordinates is not None else None
            ),
            "temperature": self.temperature,
            "humidity": self.humidity
        }


@dataclass
class SupplyChainTrace:
    """
    Ordered event history of one product.

    events is kept in arrival order, which is not necessarily timestamp
    order. Only the TraceAssembler appends to it.
    """
    product_id: str
    created_at: int
    last_updated: int
    events: list[SupplyChainEvent] = field(default_factory=list)

    def snapshot(self) -> "SupplyChainTrace":
        """Return a copy whose event list is detached from this trace."""
        return SupplyChainTrace(
            product_id=self.product_id,
            created_at=self.created_at,
            last_updated=self.last_updated,
            events=list(self.events)
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "product_id": self.product_id,
            "events": [event.to_dict() for event in self.events],
            "created_at": self.created_at,
            "last_updated": self.last_updated
        }
