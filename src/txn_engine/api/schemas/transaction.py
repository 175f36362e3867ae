"""Pydantic schemas for transaction endpoints."""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, Field

from txn_engine.core.exceptions import AppError
from txn_engine.domain.models import (
    BuyTransaction,
    Product,
    RentTransaction,
    RentType,
    Transaction,
    TransactionKind,
    TransactionStatus,
    TransactionType,
)


class ResourceKind(str, Enum):
    """URL segment naming a transaction kind."""

    PURCHASES = "purchases"
    RENTALS = "rentals"

    @property
    def kind(self) -> TransactionKind:
        return TransactionKind.PURCHASE if self is ResourceKind.PURCHASES else TransactionKind.RENTAL


class ProductResponse(BaseModel):
    """Product attached to a transaction."""

    id: str
    owner_id: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    product_image: Optional[str] = None
    purchase_price: Optional[str] = None
    rent_price: Optional[str] = None
    rent_option: Optional[str] = None
    rent_type: Optional[RentType] = None
    available_for_sale: bool = False
    available_for_rent: bool = False
    date_posted: Optional[str] = None

    @classmethod
    def from_product(cls, product: Product) -> "ProductResponse":
        return cls(
            id=str(product.id),
            owner_id=product.owner_id,
            title=product.title,
            description=product.description,
            product_image=product.product_image,
            purchase_price=_str_or_none(product.purchase_price),
            rent_price=_str_or_none(product.rent_price),
            rent_option=product.rent_option,
            rent_type=product.rent_type,
            available_for_sale=product.available_for_sale,
            available_for_rent=product.available_for_rent,
            date_posted=product.date_posted,
        )


class TransactionResponse(BaseModel):
    """Response schema for an enriched transaction."""

    id: str
    txn_type: TransactionType
    product_id: str
    product: Optional[ProductResponse] = None
    seller_id: str
    buyer_id: Optional[str] = None
    renter_id: Optional[str] = None
    purchase_date: Optional[str] = None
    rent_option: Optional[str] = None
    rent_period_start_date: Optional[str] = None
    rent_period_end_date: Optional[str] = None
    total_price: Optional[str] = None
    rent_date: Optional[str] = None
    amount: Optional[Decimal] = None
    status: TransactionStatus
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_domain(cls, txn: Transaction) -> "TransactionResponse":
        product = ProductResponse.from_product(txn.product) if txn.product is not None else None
        fields: dict[str, Any] = {
            "id": txn.id,
            "txn_type": txn.txn_type,
            "product_id": txn.product_id,
            "product": product,
            "seller_id": txn.seller_id,
            "amount": txn.amount,
            "status": txn.status,
            "created_at": txn.created_at,
            "updated_at": txn.updated_at,
        }
        if isinstance(txn, BuyTransaction):
            fields.update(buyer_id=txn.buyer_id, purchase_date=txn.purchase_date)
        elif isinstance(txn, RentTransaction):
            fields.update(
                renter_id=txn.renter_id,
                rent_option=txn.rent_option,
                rent_period_start_date=txn.rent_period_start_date,
                rent_period_end_date=txn.rent_period_end_date,
                total_price=txn.total_price,
                rent_date=txn.rent_date,
            )
        return cls(**fields)


class QueryErrorResponse(BaseModel):
    """Error attached to a query that still returned fallback data."""

    kind: str
    code: str
    message: str

    @classmethod
    def from_exception(cls, exc: BaseException) -> "QueryErrorResponse":
        if isinstance(exc, AppError):
            return cls(kind=exc.kind.value, code=exc.code, message=exc.message)
        return cls(kind="UNKNOWN", code="UNKNOWN", message=str(exc))


class TransactionListResponse(BaseModel):
    """Response schema for a list query."""

    data: list[TransactionResponse]
    count: int
    is_loading: bool = Field(default=False, description="True while a background refresh runs")
    error: Optional[QueryErrorResponse] = None


class TransactionDetailResponse(BaseModel):
    """Response schema for a detail query."""

    data: Optional[TransactionResponse] = None
    is_loading: bool = False
    error: Optional[QueryErrorResponse] = None


class CreatedRecordResponse(BaseModel):
    """Raw record returned by the store after a create."""

    id: str
    kind: TransactionKind
    record: dict[str, Any]

    @classmethod
    def from_record(cls, kind: TransactionKind, record: BaseModel) -> "CreatedRecordResponse":
        raw = record.model_dump(mode="json", by_alias=True)
        return cls(id=str(raw["id"]), kind=kind, record=raw)


def _str_or_none(value: Optional[Union[str, float, int]]) -> Optional[str]:
    return None if value is None else str(value)
