"""
API v1 endpoints for the TraceChain Framework

This module exposes the supply chain ledger over REST: product creation and
lookup, event recording, participant registration, provenance traces and the
authenticity check. The ledger instance lives on app.state and reaches each
handler through the get_ledger dependency.
"""

import time
from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status

from tracechain import __version__
from tracechain.api.v1.schemas import (
    EventCreateRequest, EventCreateResponse, EventResponse, HealthResponse,
    ParticipantCreateRequest, ParticipantCreateResponse, ParticipantResponse,
    ProductCreateRequest, ProductCreateResponse, ProductResponse,
    TraceResponse, VerificationResponse
)
from tracechain.core.models import EventType
from tracechain.core.results import LedgerError, OperationResult
from tracechain.core.schemas import table_to_ipc_bytes
from tracechain.domains.supply_chain.ledger import SupplyChainLedger
from tracechain.security.secure_logging import get_api_logger

router = APIRouter(prefix="/api/v1", tags=["TraceChain"])

api_logger = get_api_logger()

ARROW_STREAM_MEDIA_TYPE = "application/vnd.apache.arrow.stream"


def get_ledger(request: Request) -> SupplyChainLedger:
    """Ledger owned by the running application"""
    return request.app.state.ledger


def _raise_for_failure(result: OperationResult):
    """Translate a failed ledger result into the matching HTTP error"""
    if result.success:
        return
    if result.error.is_not_found:
        status_code = status.HTTP_404_NOT_FOUND
    elif result.error in (LedgerError.PRODUCTS_NOT_INITIALIZED, LedgerError.TRACES_NOT_INITIALIZED):
        status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    else:
        status_code = status.HTTP_400_BAD_REQUEST
    raise HTTPException(status_code=status_code, detail=result.message)


@router.get("/health", response_model=HealthResponse)
def health_check(ledger: SupplyChainLedger = Depends(get_ledger)):
    """Health check endpoint"""
    return HealthResponse(
        status="healthy" if ledger.store.is_initialized else "initializing",
        version=__version__,
        timestamp=time.time(),
        initialized=ledger.store.is_initialized,
        counts=ledger.stats()
    )


@router.post("/products", response_model=ProductCreateResponse, status_code=status.HTTP_201_CREATED)
def create_product(product_request: ProductCreateRequest,
                   ledger: SupplyChainLedger = Depends(get_ledger)):
    """Create a product together with its empty trace"""
    product_id = ledger.create_product(
        name=product_request.name,
        description=product_request.description,
        manufacturer=product_request.manufacturer,
        batch_number=product_request.batch_number,
        ingredients=product_request.ingredients,
        certifications=product_request.certifications
    )
    return ProductCreateResponse(
        success=True,
        message=f"Product '{product_id}' created",
        product_id=product_id
    )


@router.get("/products", response_model=list[ProductResponse])
def list_products(ledger: SupplyChainLedger = Depends(get_ledger)):
    """List every product"""
    return [ProductResponse.from_model(product) for product in ledger.get_all_products()]


@router.get("/products/{product_id}", response_model=ProductResponse)
def get_product(product_id: str, ledger: SupplyChainLedger = Depends(get_ledger)):
    """Get one product"""
    result = ledger.get_product(product_id)
    _raise_for_failure(result)
    return ProductResponse.from_model(result.value)


@router.get("/products/{product_id}/trace", response_model=TraceResponse)
def get_supply_chain_trace(product_id: str, ledger: SupplyChainLedger = Depends(get_ledger)):
    """Get the ordered event history of a product"""
    trace = ledger.get_supply_chain_trace(product_id)
    if trace is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND,
                            detail=f"No trace for product '{product_id}'")
    return TraceResponse.from_model(trace)


@router.get("/products/{product_id}/verify", response_model=VerificationResponse)
def verify_product_authenticity(product_id: str, ledger: SupplyChainLedger = Depends(get_ledger)):
    """Check that a product's trace is non-empty and chronological"""
    result = ledger.check_product_authenticity(product_id)
    _raise_for_failure(result)
    return VerificationResponse(
        product_id=product_id,
        authentic=result.value.authentic,
        event_count=result.value.event_count
    )


@router.post("/events", response_model=EventCreateResponse, status_code=status.HTTP_201_CREATED)
def add_supply_chain_event(event_request: EventCreateRequest,
                           ledger: SupplyChainLedger = Depends(get_ledger)):
    """Record a custody or inspection event for an existing product"""
    try:
        event_type = EventType.from_label(event_request.event_type)
    except ValueError as e:
        api_logger.warning("Rejected event with unknown type", event_type=event_request.event_type)
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))

    coordinates = None
    if event_request.coordinates is not None:
        coordinates = (event_request.coordinates.latitude, event_request.coordinates.longitude)

    result = ledger.add_supply_chain_event(
        product_id=event_request.product_id,
        event_type=event_type,
        location=event_request.location,
        actor=event_request.actor,
        details=event_request.details,
        coordinates=coordinates,
        temperature=event_request.temperature,
        humidity=event_request.humidity
    )
    _raise_for_failure(result)
    return EventCreateResponse(
        success=True,
        message=f"Event added to trace of product '{event_request.product_id}'",
        event_id=result.value
    )


@router.get("/events", response_model=list[EventResponse])
def list_events(ledger: SupplyChainLedger = Depends(get_ledger)):
    """List the events of every product"""
    return [EventResponse.from_model(event) for event in ledger.get_all_events()]


@router.get("/events/export")
def export_events(product_id: str | None = Query(None, description="Restrict the export to one product"),
                  ledger: SupplyChainLedger = Depends(get_ledger)):
    """Export events as an Arrow IPC stream"""
    table = ledger.export_events_table(product_id)
    return Response(content=table_to_ipc_bytes(table), media_type=ARROW_STREAM_MEDIA_TYPE)


@router.get("/events/{event_id}", response_model=EventResponse)
def get_event(event_id: str, ledger: SupplyChainLedger = Depends(get_ledger)):
    """Get one event"""
    event = ledger.get_event(event_id)
    if event is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND,
                            detail=f"Event '{event_id}' not found")
    return EventResponse.from_model(event)


@router.get("/batches/{batch_number}/trace", response_model=TraceResponse)
def get_trace_by_batch_number(batch_number: str, ledger: SupplyChainLedger = Depends(get_ledger)):
    """Get the trace of the product carrying a batch number"""
    trace = ledger.get_trace_by_batch_number(batch_number)
    if trace is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND,
                            detail=f"No product with batch number '{batch_number}'")
    return TraceResponse.from_model(trace)


@router.post("/participants", response_model=ParticipantCreateResponse, status_code=status.HTTP_201_CREATED)
def register_participant(participant_request: ParticipantCreateRequest,
                         ledger: SupplyChainLedger = Depends(get_ledger)):
    """Register a supply chain participant"""
    participant_id = ledger.register_participant(
        name=participant_request.name,
        role=participant_request.role,
        location=participant_request.location,
        public_key=participant_request.public_key
    )
    return ParticipantCreateResponse(
        success=True,
        message=f"Participant '{participant_id}' registered",
        participant_id=participant_id
    )


@router.get("/participants", response_model=list[ParticipantResponse])
def list_participants(ledger: SupplyChainLedger = Depends(get_ledger)):
    """List every participant"""
    return [ParticipantResponse.from_model(participant) for participant in ledger.get_participants()]


@router.get("/participants/{participant_id}", response_model=ParticipantResponse)
def get_participant(participant_id: str, ledger: SupplyChainLedger = Depends(get_ledger)):
    """Get one participant"""
    participant = ledger.get_participant(participant_id)
    if participant is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND,
                            detail=f"Participant '{participant_id}' not found")
    return ParticipantResponse.from_model(participant)
