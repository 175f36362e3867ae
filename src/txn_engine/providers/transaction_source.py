"""Remote transaction and product source protocols."""

from typing import Optional, Protocol

from txn_engine.domain.models import (
    CreatePurchaseData,
    CreateRentalData,
    Product,
    PurchaseRecord,
    RentalRecord,
)


class TransactionSource(Protocol):
    """
    Protocol for the remote transaction store.

    Implementations raise the AppError taxonomy from txn_engine.core.exceptions:
    NetworkError/ServerError on list calls, NotFoundError on detail and delete
    calls, ValidationError/ServerError on create calls.
    """

    async def list_purchases(self) -> list[PurchaseRecord]:
        """Fetch every purchase record visible to the caller."""
        ...

    async def list_rentals(self) -> list[RentalRecord]:
        """Fetch every rental record visible to the caller."""
        ...

    async def get_purchase(self, record_id: str) -> Optional[PurchaseRecord]:
        """Fetch one purchase record; None when the store answers with no body."""
        ...

    async def get_rental(self, record_id: str) -> Optional[RentalRecord]:
        """Fetch one rental record; None when the store answers with no body."""
        ...

    async def create_purchase(self, payload: CreatePurchaseData) -> PurchaseRecord:
        """Create a purchase and return the stored record."""
        ...

    async def create_rental(self, payload: CreateRentalData) -> RentalRecord:
        """Create a rental and return the stored record."""
        ...

    async def delete_purchase(self, record_id: str) -> None:
        """Delete a purchase record."""
        ...

    async def delete_rental(self, record_id: str) -> None:
        """Delete a rental record."""
        ...


class ProductSource(Protocol):
    """Protocol for the remote product store."""

    async def get_product(self, product_id: str) -> Optional[Product]:
        """Fetch one product (None for an empty body); raises NotFoundError or NetworkError."""
        ...
