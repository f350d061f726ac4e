"""
Pydantic schemas for API v1 requests and responses

This module defines the data models used for validating and serializing
TraceChain API requests and responses. Only shapes and types are checked
here; the ledger itself accepts any string content (empty names, negative
coordinates and so on).
"""

from typing import Any
from pydantic import BaseModel, Field, ConfigDict

from tracechain.core.models import (
    EventType, ParticipantRole, Participant, Product, SupplyChainEvent, SupplyChainTrace
)


class CoordinatesModel(BaseModel):
    """Latitude/longitude pair"""
    latitude: float = Field(..., description="Latitude in decimal degrees")
    longitude: float = Field(..., description="Longitude in decimal degrees")


class ProductCreateRequest(BaseModel):
    """Request schema for creating a product"""
    model_config = ConfigDict(
        json_schema_extra = {
            "example": {
                "name": "Milk Batch A",
                "description": "Whole milk, 1L bottles",
                "manufacturer": "Farm Co",
                "batch_number": "MILK-2024-001",
                "ingredients": ["milk"],
                "certifications": ["organic"]
            }
        }
    )

    name: str = Field(..., description="Product name")
    description: str = Field("", description="Product description")
    manufacturer: str = Field(..., description="Manufacturer name")
    batch_number: str = Field(..., description="Manufacturer batch number")
    ingredients: list[str] = Field(default_factory=list, description="Ordered list of ingredients")
    certifications: list[str] = Field(default_factory=list, description="Ordered list of certifications")


class ProductResponse(BaseModel):
    """Product record"""
    id: str
    name: str
    description: str
    manufacturer: str
    batch_number: str
    production_date: int = Field(..., description="Creation time, seconds since epoch")
    ingredients: list[str]
    certifications: list[str]

    @classmethod
    def from_model(cls, product: Product) -> "ProductResponse":
        return cls(**product.to_dict())


class ProductCreateResponse(BaseModel):
    """Response schema for product creation"""
    success: bool = Field(..., description="Whether the operation was successful")
    message: str = Field(..., description="Response message")
    product_id: str = Field(..., description="Identifier of the new product")


class EventCreateRequest(BaseModel):
    """Request schema for adding a supply chain event"""
    model_config = ConfigDict(
        json_schema_extra = {
            "example": {
                "product_id": "1717987200_3f2a9c1b04de",
                "event_type": "Shipping",
                "location": "Rotterdam",
                "actor": "Blue Freight",
                "details": "Reefer container 42",
                "coordinates": {"latitude": 51.92, "longitude": 4.48},
                "temperature": 4.0,
                "humidity": 60.5
            }
        }
    )

    product_id: str = Field(..., description="Product the event belongs to")
    event_type: str = Field(..., description="Event type, e.g. 'Production' or 'Quality Check'")
    location: str = Field(..., description="Where the event happened")
    actor: str = Field(..., description="Who performed the event (free text)")
    details: str = Field("", description="Free-text details")
    coordinates: CoordinatesModel | None = Field(None, description="Optional geo-coordinates")
    temperature: float | None = Field(None, description="Optional temperature reading")
    humidity: float | None = Field(None, description="Optional humidity reading")


class EventResponse(BaseModel):
    """Supply chain event record"""
    id: str
    product_id: str
    event_type: EventType
    location: str
    timestamp: int = Field(..., description="Recording time, seconds since epoch")
    actor: str
    details: str
    coordinates: CoordinatesModel | None = None
    temperature: float | None = None
    humidity: float | None = None

    @classmethod
    def from_model(cls, event: SupplyChainEvent) -> "EventResponse":
        return cls(**event.to_dict())


class EventCreateResponse(BaseModel):
    """Response schema for event creation"""
    success: bool = Field(..., description="Whether the operation was successful")
    message: str = Field(..., description="Response message")
    event_id: str = Field(..., description="Identifier of the new event")


class TraceResponse(BaseModel):
    """Ordered event history of a product"""
    product_id: str
    events: list[EventResponse]
    created_at: int
    last_updated: int

    @classmethod
    def from_model(cls, trace: SupplyChainTrace) -> "TraceResponse":
        return cls(
            product_id=trace.product_id,
            events=[EventResponse.from_model(event) for event in trace.events],
            created_at=trace.created_at,
            last_updated=trace.last_updated
        )


class ParticipantCreateRequest(BaseModel):
    """Request schema for registering a participant"""
    model_config = ConfigDict(
        json_schema_extra = {
            "example": {
                "name": "Farm Co",
                "role": "Manufacturer",
                "location": "Wisconsin",
                "public_key": "ed25519:9f8e..."
            }
        }
    )

    name: str = Field(..., description="Participant name")
    role: ParticipantRole = Field(..., description="Participant role")
    location: str = Field(..., description="Participant location")
    public_key: str = Field("", description="Opaque public key string (not validated)")


class ParticipantResponse(BaseModel):
    """Participant record"""
    id: str
    name: str
    role: ParticipantRole
    location: str
    public_key: str
    is_verified: bool

    @classmethod
    def from_model(cls, participant: Participant) -> "ParticipantResponse":
        return cls(**participant.to_dict())


class ParticipantCreateResponse(BaseModel):
    """Response schema for participant registration"""
    success: bool = Field(..., description="Whether the operation was successful")
    message: str = Field(..., description="Response message")
    participant_id: str = Field(..., description="Identifier of the new participant")


class VerificationResponse(BaseModel):
    """Authenticity verdict for a product"""
    product_id: str
    authentic: bool = Field(..., description="True when the trace is non-empty and chronological")
    event_count: int = Field(..., description="Number of events examined")


class HealthResponse(BaseModel):
    """Health check response"""
    status: str
    version: str
    timestamp: float
    initialized: bool
    counts: dict[str, Any]
