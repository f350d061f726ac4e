"""
Pytest configuration for the TraceChain project.

Ensures the project root is on sys.path and provides shared fixtures: a
controllable clock, ledgers built on it, and a FastAPI test client bound to
such a ledger.
"""

import os
import sys

import pytest

# Compute project root (parent of this tests directory)
_PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
if _PROJECT_ROOT not in sys.path:
    sys.path.insert(0, _PROJECT_ROOT)

from fastapi.testclient import TestClient

from tracechain.api.server import create_app
from tracechain.config.settings import TestingSettings
from tracechain.domains.supply_chain.ledger import SupplyChainLedger


class FakeClock:
    """Settable wall clock returning seconds since the epoch"""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def set(self, value: float):
        self.now = value

    def advance(self, seconds: float):
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def ledger(clock):
    return SupplyChainLedger(clock=clock)


@pytest.fixture
def sample_product(ledger):
    """Id of a product created in the ledger fixture"""
    return ledger.create_product(
        name="Milk Batch A",
        description="Whole milk, 1L bottles",
        manufacturer="Farm Co",
        batch_number="MILK-2024-001",
        ingredients=["milk"],
        certifications=["organic", "grade A"]
    )


@pytest.fixture
def app(ledger):
    return create_app(ledger=ledger, settings=TestingSettings())


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client
