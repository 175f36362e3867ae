"""In-memory transaction and product sources for offline/testing use."""

import asyncio
import math
from collections import Counter
from decimal import Decimal
from typing import Iterable, Optional, Union

from txn_engine.core.amounts import parse_amount
from txn_engine.core.exceptions import AppError, NotFoundError, ValidationError
from txn_engine.core.timezone import now_utc, parse_timestamp
from txn_engine.domain.models import (
    CreatePurchaseData,
    CreateRentalData,
    Product,
    PurchaseRecord,
    RentalRecord,
    RentType,
)


# Deterministic fake catalogue used when no remote store is configured
_STUB_PRODUCTS: list[dict] = [
    {"id": 10, "title": "Cordless Drill", "purchase_price": "89.99", "rent_price": "12.00", "rent_option": "day", "seller": 3},
    {"id": 11, "title": "Camping Tent", "purchase_price": "149.50", "rent_price": "20.00", "rent_option": "day", "seller": 3},
    {"id": 12, "title": "Road Bike", "purchase_price": "640.00", "rent_price": "35.00", "rent_option": "day", "seller": 4},
]

_STUB_PURCHASES: list[dict] = [
    {"id": 1, "product": 10, "buyer": 2, "seller": 3, "purchase_date": "2024-01-01"},
]

_STUB_RENTALS: list[dict] = [
    {
        "id": 1,
        "product": 11,
        "renter": 2,
        "seller": 3,
        "rent_option": "daily",
        "rent_period_start_date": "2024-02-01",
        "rent_period_end_date": "2024-02-04",
        "total_price": "60.00",
        "rent_date": "2024-01-28",
    },
]

# Length of one billing period
_PERIOD_SECONDS = {
    RentType.HOURLY: 60 * 60,
    RentType.DAILY: 24 * 60 * 60,
    RentType.WEEKLY: 7 * 24 * 60 * 60,
    RentType.MONTHLY: 30 * 24 * 60 * 60,
}

_CENTS = Decimal("0.01")


def stub_products() -> list[Product]:
    """Return a fresh copy of the default catalogue."""
    return [Product.model_validate(row) for row in _STUB_PRODUCTS]


def rental_total(product: Product, payload: CreateRentalData) -> Decimal:
    """
    Price a rental: the product's rent price times the number of started periods.

    The period length comes from the payload's rent_option; a zero-length
    rental is billed one period.

    Raises:
        ValidationError: product not rentable, unparsable dates, or end before start.
    """
    rent_price = parse_amount(product.rent_price)
    if not product.available_for_rent or rent_price is None:
        raise ValidationError(f"Product {product.id} is not available for rent")

    start = parse_timestamp(payload.rent_period_start_date)
    end = parse_timestamp(payload.rent_period_end_date)
    if start is None or end is None:
        raise ValidationError("Rental period dates must be valid dates")
    if end < start:
        raise ValidationError("Rental period ends before it starts")

    period = _PERIOD_SECONDS[RentType.from_option(payload.rent_option) or RentType.DAILY]
    periods = max(1, math.ceil((end - start).total_seconds() / period))
    return (rent_price * periods).quantize(_CENTS)


class InMemoryProductSource:
    """
    Product source backed by a dict.

    Counts lookups per product id and can be told to fail specific ids.
    """

    def __init__(
        self,
        products: Optional[Iterable[Product]] = None,
        delay: float = 0.0,
    ):
        if products is None:
            products = stub_products()
        self._products: dict[str, Product] = {str(p.id): p for p in products}
        self._failures: dict[str, AppError] = {}
        self._delay = delay
        self.calls: Counter[str] = Counter()

    def add(self, product: Product) -> None:
        self._products[str(product.id)] = product

    def products(self) -> list[Product]:
        """Return the catalogue in insertion order."""
        return list(self._products.values())

    def fail(self, product_id: str, error: AppError) -> None:
        """Make lookups of product_id raise error."""
        self._failures[str(product_id)] = error

    async def get_product(self, product_id: str) -> Product:
        product_id = str(product_id)
        self.calls[product_id] += 1
        if self._delay:
            await asyncio.sleep(self._delay)
        if product_id in self._failures:
            raise self._failures[product_id]
        if product_id not in self._products:
            raise NotFoundError("Product", product_id)
        return self._products[product_id]


class InMemoryTransactionSource:
    """
    Transaction store backed by ordered dicts of raw records.

    Created records are completed the way the remote store completes them:
    the seller comes from the product's owner, dates are stamped with the
    current UTC time and a rental's total_price is priced from the catalogue.

    Counts every call by method name; errors queued with fail_next() are
    raised by the next call of that method.
    """

    def __init__(
        self,
        purchases: Optional[Iterable[PurchaseRecord]] = None,
        rentals: Optional[Iterable[RentalRecord]] = None,
        products: Optional[Iterable[Product]] = None,
        delay: float = 0.0,
    ):
        if purchases is None:
            purchases = [PurchaseRecord.model_validate(row) for row in _STUB_PURCHASES]
        if rentals is None:
            rentals = [RentalRecord.model_validate(row) for row in _STUB_RENTALS]
        if products is None:
            products = stub_products()
        self._purchases: dict[str, PurchaseRecord] = {str(r.id): r for r in purchases}
        self._rentals: dict[str, RentalRecord] = {str(r.id): r for r in rentals}
        self._catalogue: dict[str, Product] = {str(p.id): p for p in products}
        self._pending_failures: dict[str, list[AppError]] = {}
        self._delay = delay
        self.calls: Counter[str] = Counter()

    def fail_next(self, method: str, error: AppError) -> None:
        """Queue error to be raised by the next call of method."""
        self._pending_failures.setdefault(method, []).append(error)

    async def _enter(self, method: str) -> None:
        self.calls[method] += 1
        if self._delay:
            await asyncio.sleep(self._delay)
        queued = self._pending_failures.get(method)
        if queued:
            raise queued.pop(0)

    async def list_purchases(self) -> list[PurchaseRecord]:
        await self._enter("list_purchases")
        return list(self._purchases.values())

    async def list_rentals(self) -> list[RentalRecord]:
        await self._enter("list_rentals")
        return list(self._rentals.values())

    async def get_purchase(self, record_id: str) -> PurchaseRecord:
        await self._enter("get_purchase")
        try:
            return self._purchases[str(record_id)]
        except KeyError:
            raise NotFoundError("Purchase", str(record_id)) from None

    async def get_rental(self, record_id: str) -> RentalRecord:
        await self._enter("get_rental")
        try:
            return self._rentals[str(record_id)]
        except KeyError:
            raise NotFoundError("Rental", str(record_id)) from None

    async def create_purchase(self, payload: CreatePurchaseData) -> PurchaseRecord:
        await self._enter("create_purchase")
        product = self._product_of(payload.product)
        record = PurchaseRecord(
            id=self._next_id(self._purchases),
            product=payload.product,
            buyer=payload.buyer,
            seller=self._seller_of(product),
            purchase_date=now_utc().isoformat(),
        )
        self._purchases[str(record.id)] = record
        return record

    async def create_rental(self, payload: CreateRentalData) -> RentalRecord:
        await self._enter("create_rental")
        product = self._product_of(payload.product)
        record = RentalRecord(
            id=self._next_id(self._rentals),
            product=payload.product,
            renter=payload.renter,
            seller=self._seller_of(product),
            rent_option=payload.rent_option,
            rent_period_start_date=payload.rent_period_start_date,
            rent_period_end_date=payload.rent_period_end_date,
            total_price=str(rental_total(product, payload)),
            rent_date=now_utc().isoformat(),
        )
        self._rentals[str(record.id)] = record
        return record

    async def delete_purchase(self, record_id: str) -> None:
        await self._enter("delete_purchase")
        if self._purchases.pop(str(record_id), None) is None:
            raise NotFoundError("Purchase", str(record_id))

    async def delete_rental(self, record_id: str) -> None:
        await self._enter("delete_rental")
        if self._rentals.pop(str(record_id), None) is None:
            raise NotFoundError("Rental", str(record_id))

    @staticmethod
    def _next_id(records: dict) -> int:
        numeric = [int(k) for k in records if k.isdigit()]
        return max(numeric, default=0) + 1

    def _product_of(self, product_id: int) -> Product:
        try:
            return self._catalogue[str(product_id)]
        except KeyError:
            raise ValidationError(f"Unknown product: {product_id}") from None

    @staticmethod
    def _seller_of(product: Product) -> Union[int, str]:
        return product.seller if product.seller is not None else 0
