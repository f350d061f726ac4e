"""
Integration tests for the TraceChain REST API (v1)

Requests go through fastapi's TestClient against an application bound to the
ledger fixture, so the FakeClock controls every recorded timestamp.
"""

import pyarrow as pa
import pytest
from fastapi.testclient import TestClient

from tracechain.api.server import create_app
from tracechain.config.settings import TestingSettings
from tracechain.domains.supply_chain.ledger import SupplyChainLedger
from tracechain.storage.entity_store import EntityStore

PRODUCT = {
    "name": "Milk Batch A",
    "description": "Whole milk, 1L bottles",
    "manufacturer": "Farm Co",
    "batch_number": "MILK-2024-001",
    "ingredients": ["milk"],
    "certifications": ["organic"]
}


def _create_product(client, **overrides):
    response = client.post("/api/v1/products", json={**PRODUCT, **overrides})
    assert response.status_code == 201
    return response.json()["product_id"]


def _add_event(client, product_id, event_type="Shipping", **extra):
    return client.post("/api/v1/events", json={
        "product_id": product_id,
        "event_type": event_type,
        "location": "Depot",
        "actor": "Carrier",
        "details": "",
        **extra
    })


class TestProductsApi:

    def test_create_and_fetch_product(self, client, clock):
        product_id = _create_product(client)

        response = client.get(f"/api/v1/products/{product_id}")
        assert response.status_code == 200
        body = response.json()
        assert body["id"] == product_id
        assert body["production_date"] == int(clock())
        assert body["certifications"] == ["organic"]

    def test_unknown_product_is_404(self, client):
        response = client.get("/api/v1/products/ghost")
        assert response.status_code == 404
        assert response.json() == {
            "error": "HTTP error",
            "message": "Product not found",
            "status_code": 404
        }

    def test_list_products(self, client):
        _create_product(client)
        _create_product(client, name="Cheese", batch_number="CHEESE-1")

        names = sorted(product["name"] for product in client.get("/api/v1/products").json())
        assert names == ["Cheese", "Milk Batch A"]

    def test_missing_field_is_422(self, client):
        response = client.post("/api/v1/products", json={"name": "No manufacturer"})
        assert response.status_code == 422


class TestEventsApi:

    def test_trace_and_verification_flow(self, client, clock):
        product_id = _create_product(client)

        empty = client.get(f"/api/v1/products/{product_id}/verify").json()
        assert empty == {"product_id": product_id, "authentic": False, "event_count": 0}

        clock.set(100)
        assert _add_event(client, product_id, "Production").status_code == 201
        clock.set(200)
        assert _add_event(client, product_id, "Shipping",
                          coordinates={"latitude": 51.92, "longitude": 4.48}).status_code == 201
        assert client.get(f"/api/v1/products/{product_id}/verify").json()["authentic"] is True

        clock.set(150)
        _add_event(client, product_id, "Delivery")
        verdict = client.get(f"/api/v1/products/{product_id}/verify").json()
        assert verdict["authentic"] is False
        assert verdict["event_count"] == 3

        trace = client.get(f"/api/v1/products/{product_id}/trace").json()
        assert [event["timestamp"] for event in trace["events"]] == [100, 200, 150]
        assert [event["event_type"] for event in trace["events"]] == ["Production", "Shipping", "Delivery"]
        assert trace["events"][1]["coordinates"] == {"latitude": 51.92, "longitude": 4.48}
        assert trace["last_updated"] >= 200

    def test_display_label_event_type(self, client):
        product_id = _create_product(client)
        response = _add_event(client, product_id, "Quality Check")

        assert response.status_code == 201
        event = client.get(f"/api/v1/events/{response.json()['event_id']}").json()
        assert event["event_type"] == "QualityCheck"

    def test_unknown_event_type_is_422(self, client):
        product_id = _create_product(client)
        response = _add_event(client, product_id, "Teleport")

        assert response.status_code == 422
        assert client.get("/api/v1/events").json() == []

    def test_event_for_unknown_product_is_404(self, client):
        response = _add_event(client, "ghost")

        assert response.status_code == 404
        assert response.json()["message"] == "Product not found"
        assert client.get("/api/v1/events").json() == []

    def test_unknown_event_and_trace_are_404(self, client):
        assert client.get("/api/v1/events/ghost").status_code == 404
        assert client.get("/api/v1/products/ghost/trace").status_code == 404
        assert client.get("/api/v1/products/ghost/verify").status_code == 404

    def test_batch_trace(self, client):
        product_id = _create_product(client)
        _add_event(client, product_id)

        trace = client.get("/api/v1/batches/MILK-2024-001/trace").json()
        assert trace["product_id"] == product_id
        assert len(trace["events"]) == 1
        assert client.get("/api/v1/batches/NOPE/trace").status_code == 404

    def test_arrow_export(self, client):
        milk = _create_product(client)
        cheese = _create_product(client, name="Cheese", batch_number="CHEESE-1")
        _add_event(client, milk, "Production", temperature=4.0)
        _add_event(client, cheese, "Packaging")

        response = client.get("/api/v1/events/export")
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("application/vnd.apache.arrow.stream")
        table = pa.ipc.open_stream(response.content).read_all()
        assert table.num_rows == 2

        response = client.get("/api/v1/events/export", params={"product_id": milk})
        table = pa.ipc.open_stream(response.content).read_all()
        assert table.column("product_id").to_pylist() == [milk]
        assert table.column("temperature").to_pylist() == [4.0]


class TestParticipantsApi:

    def test_register_and_fetch(self, client):
        response = client.post("/api/v1/participants", json={
            "name": "Farm Co", "role": "Manufacturer", "location": "Wisconsin", "public_key": "pk"
        })
        assert response.status_code == 201
        participant_id = response.json()["participant_id"]

        participant = client.get(f"/api/v1/participants/{participant_id}").json()
        assert participant["role"] == "Manufacturer"
        assert participant["is_verified"] is False
        assert len(client.get("/api/v1/participants").json()) == 1

    def test_unknown_role_is_422(self, client):
        response = client.post("/api/v1/participants", json={
            "name": "X", "role": "Smuggler", "location": "Nowhere"
        })
        assert response.status_code == 422

    def test_unknown_participant_is_404(self, client):
        assert client.get("/api/v1/participants/ghost").status_code == 404


class TestServerBehaviour:

    def test_health(self, client):
        _create_product(client)
        body = client.get("/api/v1/health").json()

        assert body["status"] == "healthy"
        assert body["initialized"] is True
        assert body["counts"]["products"] == 1
        assert body["counts"]["traces"] == 1

    def test_root(self, client):
        assert client.get("/").json()["health_check"] == "/api/v1/health"

    def test_security_headers(self, client):
        response = client.get("/api/v1/health")
        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "DENY"
        assert response.headers["Content-Security-Policy"] == "default-src 'none'; frame-ancestors 'none'"

    def test_oversized_body_is_413(self, client):
        body = b"x" * (TestingSettings.MAX_UPLOAD_SIZE + 1)
        response = client.post("/api/v1/products", content=body,
                               headers={"content-type": "application/json"})
        assert response.status_code == 413
        assert response.json()["status_code"] == 413

    def test_invalid_configuration_rejected(self, monkeypatch):
        monkeypatch.setattr(TestingSettings, "ID_STRATEGY", "sequential")
        with pytest.raises(ValueError, match="Invalid configuration"):
            create_app(settings=TestingSettings())


class TestUninitializedStore:

    @pytest.fixture
    def cold_client(self, clock):
        ledger = SupplyChainLedger(store=EntityStore(initialize=False), clock=clock)
        # No context manager: the lifespan never runs, so the store stays cold
        return TestClient(create_app(ledger=ledger, settings=TestingSettings()))

    def test_creation_is_503(self, cold_client):
        response = cold_client.post("/api/v1/products", json=PRODUCT)
        assert response.status_code == 503
        assert response.json()["message"] == "Products not initialized"

    def test_event_append_is_503(self, cold_client):
        response = _add_event(cold_client, "any")
        assert response.status_code == 503
        assert response.json()["message"] == "Products not initialized"

    def test_lookup_is_503(self, cold_client):
        response = cold_client.get("/api/v1/products/any")
        assert response.status_code == 503

    def test_enumerations_are_empty(self, cold_client):
        assert cold_client.get("/api/v1/products").json() == []
        health = cold_client.get("/api/v1/health").json()
        assert health["initialized"] is False
        assert health["status"] == "initializing"

    def test_lifespan_initializes_store(self, clock):
        ledger = SupplyChainLedger(store=EntityStore(initialize=False), clock=clock)
        with TestClient(create_app(ledger=ledger, settings=TestingSettings())) as client:
            assert client.post("/api/v1/products", json=PRODUCT).status_code == 201
