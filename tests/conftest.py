"""
Pytest configuration and fixtures for the transaction enrichment engine tests.

This module provides:
- Factory helpers for raw purchase/rental records and products
- In-memory and controllable fake transaction/product sources
- A manual clock for deterministic cache expiry
- Service fixtures wired the same way AppContext wires them
- A FastAPI test client bound to in-memory sources
"""

import asyncio
from datetime import datetime, timedelta
from typing import Optional

import pytest
from fastapi.testclient import TestClient

from txn_engine.app_context import AppContext, set_app_context
from txn_engine.config.settings import Settings, reset_settings
from txn_engine.core.timezone import UTC
from txn_engine.domain.models import Product, PurchaseRecord, RentalRecord
from txn_engine.providers import InMemoryProductSource, InMemoryTransactionSource
from txn_engine.services import (
    CacheService,
    EnrichmentCoordinator,
    MutationGateway,
    TransactionService,
)


# =============================================================================
# RECORD FACTORIES
# =============================================================================


def make_purchase(
    id: int = 1,
    product: int = 10,
    buyer: int = 2,
    seller: int = 3,
    purchase_date: Optional[str] = "2024-01-01",
) -> PurchaseRecord:
    """Build a raw purchase record using the store's wire names."""
    return PurchaseRecord.model_validate(
        {
            "id": id,
            "product": product,
            "buyer": buyer,
            "seller": seller,
            "purchase_date": purchase_date,
        }
    )


def make_rental(
    id: int = 1,
    product: int = 11,
    renter: int = 2,
    seller: int = 3,
    total_price: Optional[str] = "60.00",
    rent_option: str = "daily",
    rent_date: Optional[str] = "2024-01-28",
) -> RentalRecord:
    """Build a raw rental record using the store's wire names."""
    return RentalRecord.model_validate(
        {
            "id": id,
            "product": product,
            "renter": renter,
            "seller": seller,
            "rent_option": rent_option,
            "rent_period_start_date": "2024-02-01",
            "rent_period_end_date": "2024-02-04",
            "total_price": total_price,
            "rent_date": rent_date,
        }
    )


def make_product(
    id: int = 10,
    purchase_price: Optional[str] = "89.99",
    title: str = "Cordless Drill",
    rent_price: Optional[str] = "12.00",
    seller: int = 3,
) -> Product:
    """Build a product using the store's wire names."""
    return Product.model_validate(
        {
            "id": id,
            "seller": seller,
            "title": title,
            "purchase_price": purchase_price,
            "rent_price": rent_price,
            "rent_option": "day",
        }
    )


# =============================================================================
# CLOCK
# =============================================================================


class ManualClock:
    """Clock that only moves when told to."""

    def __init__(self, start: Optional[datetime] = None):
        self.now = start or UTC.localize(datetime(2024, 6, 15, 14, 30, 0))

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


@pytest.fixture
def clock() -> ManualClock:
    """Deterministic clock for cache freshness."""
    return ManualClock()


# =============================================================================
# FAKE SOURCES
# =============================================================================


class GatedProductSource:
    """
    Product source whose lookups block until released one by one.

    Lets tests force completion order and observe concurrency.
    """

    def __init__(self, products: list[Product]):
        self._products = {str(p.id): p for p in products}
        self._gates: dict[str, asyncio.Event] = {}
        self.started: list[str] = []
        self.failures: dict[str, Exception] = {}

    def _gate(self, product_id: str) -> asyncio.Event:
        if product_id not in self._gates:
            self._gates[product_id] = asyncio.Event()
        return self._gates[product_id]

    def release(self, product_id: str) -> None:
        self._gate(str(product_id)).set()

    async def get_product(self, product_id: str) -> Product:
        self.started.append(product_id)
        await self._gate(product_id).wait()
        if product_id in self.failures:
            raise self.failures[product_id]
        return self._products[product_id]


class GatedFetcher:
    """Cache fetcher that counts calls and waits for release()."""

    def __init__(self, values: Optional[list] = None):
        self.calls = 0
        self._values = list(values or ["value"])
        self._event: Optional[asyncio.Event] = None
        self.error: Optional[Exception] = None

    def release(self) -> None:
        if self._event is not None:
            self._event.set()

    async def __call__(self):
        self.calls += 1
        self._event = asyncio.Event()
        await self._event.wait()
        if self.error is not None:
            raise self.error
        index = min(self.calls - 1, len(self._values) - 1)
        return self._values[index]


class CountingFetcher:
    """Cache fetcher that returns immediately and counts calls."""

    def __init__(self, values: Optional[list] = None):
        self.calls = 0
        self._values = list(values or ["value"])
        self.error: Optional[Exception] = None

    async def __call__(self):
        self.calls += 1
        if self.error is not None:
            raise self.error
        index = min(self.calls - 1, len(self._values) - 1)
        return self._values[index]


@pytest.fixture
def products() -> list[Product]:
    """Products 10, 11 and 12."""
    return [
        make_product(10, "89.99", "Cordless Drill"),
        make_product(11, "149.50", "Camping Tent"),
        make_product(12, "640.00", "Road Bike"),
    ]


@pytest.fixture
def product_source(products) -> InMemoryProductSource:
    """Provide in-memory product source."""
    return InMemoryProductSource(products=products)


@pytest.fixture
def transaction_source(products) -> InMemoryTransactionSource:
    """Provide in-memory transaction source with two purchases and one rental."""
    return InMemoryTransactionSource(
        purchases=[make_purchase(1, 10), make_purchase(2, 11)],
        rentals=[make_rental(1, 12)],
        products=products,
    )


# =============================================================================
# SERVICE FIXTURES
# =============================================================================


@pytest.fixture
def cache_service(clock) -> CacheService:
    """Provide a fresh CacheService per test."""
    return CacheService(list_stale_seconds=120, detail_stale_seconds=300, clock=clock)


@pytest.fixture
def coordinator(transaction_source, product_source) -> EnrichmentCoordinator:
    """Provide EnrichmentCoordinator over in-memory sources."""
    return EnrichmentCoordinator(
        transaction_source=transaction_source,
        product_source=product_source,
    )


@pytest.fixture
def gateway(transaction_source, cache_service) -> MutationGateway:
    """Provide MutationGateway."""
    return MutationGateway(transaction_source=transaction_source, cache=cache_service)


@pytest.fixture
def transaction_service(cache_service, coordinator, gateway) -> TransactionService:
    """Provide TransactionService."""
    return TransactionService(cache=cache_service, coordinator=coordinator, gateway=gateway)


# =============================================================================
# API TEST CLIENT FIXTURE
# =============================================================================


@pytest.fixture
def app_context(transaction_source, product_source) -> AppContext:
    """Provide an AppContext bound to the in-memory sources."""
    reset_settings()
    return AppContext(
        settings=Settings(api_base_url=None),
        transaction_source=transaction_source,
        product_source=product_source,
    )


@pytest.fixture
def client(app_context) -> TestClient:
    """Provide FastAPI test client using the in-memory app context."""
    from txn_engine.main import app

    set_app_context(app_context)
    with TestClient(app) as c:
        yield c
    set_app_context(None)
