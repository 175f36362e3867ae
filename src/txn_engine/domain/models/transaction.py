"""Transaction domain models (BUY / RENT variants)."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional, Union

from txn_engine.domain.models.enums import TransactionStatus, TransactionType
from txn_engine.domain.models.records import Product


@dataclass(kw_only=True)
class BaseTransaction:
    """
    Read-time projection of a raw record, enriched with its product.

    Never persisted. product_id is always set; product is None when the
    product lookup failed.
    """

    id: str
    txn_type: TransactionType
    product_id: str
    seller_id: str
    product: Optional[Product] = None
    amount: Optional[Decimal] = None
    status: TransactionStatus = TransactionStatus.COMPLETED
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        if isinstance(self.txn_type, str):
            self.txn_type = TransactionType(self.txn_type)

    @property
    def is_enriched(self) -> bool:
        """Return True if product data is attached."""
        return self.product is not None


@dataclass(kw_only=True)
class BuyTransaction(BaseTransaction):
    """Purchase of a product by a buyer."""

    txn_type: TransactionType = TransactionType.BUY
    buyer_id: str
    purchase_date: Optional[str] = None


@dataclass(kw_only=True)
class RentTransaction(BaseTransaction):
    """Rental of a product by a renter over a period."""

    txn_type: TransactionType = TransactionType.RENT
    renter_id: str
    rent_option: Optional[str] = None
    rent_period_start_date: Optional[str] = None
    rent_period_end_date: Optional[str] = None
    total_price: Optional[str] = None
    rent_date: Optional[str] = None


Transaction = Union[BuyTransaction, RentTransaction]
