"""Pure mapping from raw records (plus optional product) to domain Transactions."""

from typing import Optional

from txn_engine.core.amounts import parse_amount
from txn_engine.core.timezone import parse_timestamp
from txn_engine.domain.models import (
    BuyTransaction,
    Product,
    PurchaseRecord,
    RawRecord,
    RentalRecord,
    RentTransaction,
    Transaction,
    TransactionKind,
    TransactionStatus,
)


def transform_purchase(record: PurchaseRecord, product: Optional[Product] = None) -> BuyTransaction:
    """Project a purchase record; amount comes from the product's purchase price."""
    created_at = parse_timestamp(record.purchase_date)
    return BuyTransaction(
        id=str(record.id),
        product_id=str(record.product_id),
        product=product,
        buyer_id=str(record.buyer_id),
        seller_id=str(record.seller_id),
        purchase_date=record.purchase_date,
        amount=parse_amount(product.purchase_price) if product is not None else None,
        status=TransactionStatus.COMPLETED,
        created_at=created_at,
        updated_at=created_at,
    )


def transform_rental(record: RentalRecord, product: Optional[Product] = None) -> RentTransaction:
    """Project a rental record; amount is the record's own total price."""
    created_at = parse_timestamp(record.rent_date)
    return RentTransaction(
        id=str(record.id),
        product_id=str(record.product_id),
        product=product,
        renter_id=str(record.renter_id),
        seller_id=str(record.seller_id),
        rent_option=record.rent_option,
        rent_period_start_date=record.rent_period_start_date,
        rent_period_end_date=record.rent_period_end_date,
        total_price=str(record.total_price) if record.total_price is not None else None,
        rent_date=record.rent_date,
        amount=parse_amount(record.total_price),
        status=TransactionStatus.COMPLETED,
        created_at=created_at,
        updated_at=created_at,
    )


def transform(
    kind: TransactionKind,
    record: RawRecord,
    product: Optional[Product] = None,
) -> Transaction:
    """Dispatch to the kind-specific transform."""
    if kind == TransactionKind.PURCHASE:
        if not isinstance(record, PurchaseRecord):
            raise TypeError(f"Expected PurchaseRecord, got {type(record).__name__}")
        return transform_purchase(record, product)
    if not isinstance(record, RentalRecord):
        raise TypeError(f"Expected RentalRecord, got {type(record).__name__}")
    return transform_rental(record, product)
