"""HTTP-backed transaction and product sources."""

from typing import Any, Optional, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as SchemaError

from txn_engine.core.exceptions import UnknownError
from txn_engine.domain.models import (
    CreatePurchaseData,
    CreateRentalData,
    Product,
    PurchaseRecord,
    RentalRecord,
)
from txn_engine.providers.http_client import ApiClient

ModelT = TypeVar("ModelT", bound=BaseModel)

PURCHASES_PATH = "/purchases/"
RENTALS_PATH = "/rentals/"
PRODUCTS_PATH = "/products/"


def _detail_path(base: str, record_id: str) -> str:
    return f"{base}{record_id}/"


def _unwrap_list(body: Any) -> list[Any]:
    """
    Extract the record list from a list response.

    The store answers with a bare list or a paginated envelope carrying the
    rows under "data" or "results"; an envelope without rows means no records.
    """
    if body is None:
        return []
    if isinstance(body, list):
        return body
    if isinstance(body, dict):
        for field in ("data", "results"):
            rows = body.get(field)
            if isinstance(rows, list):
                return rows
        return []
    raise UnknownError(f"Unexpected list response type: {type(body).__name__}")


def _unwrap_item(body: Any) -> Any:
    """Unwrap {"data": {...}}; {"data": null} unwraps to None."""
    if isinstance(body, dict) and "data" in body and (body["data"] is None or isinstance(body["data"], dict)):
        return body["data"]
    return body


def _parse(model: type[ModelT], body: Any, resource: str) -> ModelT:
    try:
        return model.model_validate(_unwrap_item(body))
    except SchemaError as exc:
        raise UnknownError(f"Malformed {resource} payload", details=exc.errors()) from exc


def _parse_detail(model: type[ModelT], body: Any, resource: str) -> Optional[ModelT]:
    """Parse a detail body; an empty or null body means the store has no such record."""
    if not _unwrap_item(body):
        return None
    return _parse(model, body, resource)


class HttpTransactionSource:
    """Transaction store reached over its REST API."""

    def __init__(self, client: ApiClient):
        self._client = client

    async def list_purchases(self) -> list[PurchaseRecord]:
        body = await self._client.get(PURCHASES_PATH, resource="Purchases")
        return [_parse(PurchaseRecord, row, "purchase") for row in _unwrap_list(body)]

    async def list_rentals(self) -> list[RentalRecord]:
        body = await self._client.get(RENTALS_PATH, resource="Rentals")
        return [_parse(RentalRecord, row, "rental") for row in _unwrap_list(body)]

    async def get_purchase(self, record_id: str) -> Optional[PurchaseRecord]:
        body = await self._client.get(
            _detail_path(PURCHASES_PATH, record_id), resource="Purchase", identifier=record_id
        )
        return _parse_detail(PurchaseRecord, body, "purchase")

    async def get_rental(self, record_id: str) -> Optional[RentalRecord]:
        body = await self._client.get(
            _detail_path(RENTALS_PATH, record_id), resource="Rental", identifier=record_id
        )
        return _parse_detail(RentalRecord, body, "rental")

    async def create_purchase(self, payload: CreatePurchaseData) -> PurchaseRecord:
        body = await self._client.post(PURCHASES_PATH, payload.model_dump(), resource="Purchase")
        return _parse(PurchaseRecord, body, "purchase")

    async def create_rental(self, payload: CreateRentalData) -> RentalRecord:
        body = await self._client.post(RENTALS_PATH, payload.model_dump(), resource="Rental")
        return _parse(RentalRecord, body, "rental")

    async def delete_purchase(self, record_id: str) -> None:
        await self._client.delete(
            _detail_path(PURCHASES_PATH, record_id), resource="Purchase", identifier=record_id
        )

    async def delete_rental(self, record_id: str) -> None:
        await self._client.delete(
            _detail_path(RENTALS_PATH, record_id), resource="Rental", identifier=record_id
        )


class HttpProductSource:
    """Product store reached over its REST API."""

    def __init__(self, client: ApiClient):
        self._client = client

    async def get_product(self, product_id: str) -> Optional[Product]:
        body = await self._client.get(
            _detail_path(PRODUCTS_PATH, product_id), resource="Product", identifier=product_id
        )
        return _parse_detail(Product, body, "product")
