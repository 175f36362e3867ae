"""Raw record shapes exchanged with the remote transaction and product stores.

Only the fields the transform needs are declared; anything else the remote
sends is kept as an extra attribute and never validated.
"""

from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from txn_engine.core.amounts import parse_amount
from txn_engine.domain.models.enums import RentType

RemoteId = Union[int, str]


class _RemoteModel(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)


class PurchaseRecord(_RemoteModel):
    """Purchase row as returned by the transaction store."""

    id: RemoteId
    product_id: RemoteId = Field(alias="product")
    buyer_id: RemoteId = Field(alias="buyer")
    seller_id: RemoteId = Field(alias="seller")
    purchase_date: Optional[str] = None


class RentalRecord(_RemoteModel):
    """Rental row as returned by the transaction store."""

    id: RemoteId
    product_id: RemoteId = Field(alias="product")
    renter_id: RemoteId = Field(alias="renter")
    seller_id: RemoteId = Field(alias="seller")
    rent_option: Optional[str] = None
    rent_period_start_date: Optional[str] = None
    rent_period_end_date: Optional[str] = None
    total_price: Optional[Union[str, float, int]] = None
    rent_date: Optional[str] = None


class Product(_RemoteModel):
    """Denormalized product attached to a transaction when its lookup succeeds.

    seller is the owner id as sent by the product store. rent_type and the
    availability flags are derived from the raw fields, never sent.
    """

    id: RemoteId
    seller: Optional[RemoteId] = None
    title: Optional[str] = None
    description: Optional[str] = None
    product_image: Optional[str] = None
    purchase_price: Optional[Union[str, float, int]] = None
    rent_price: Optional[Union[str, float, int]] = None
    rent_option: Optional[str] = None
    date_posted: Optional[str] = None

    @property
    def owner_id(self) -> Optional[str]:
        return None if self.seller is None else str(self.seller)

    @property
    def rent_type(self) -> Optional[RentType]:
        return RentType.from_option(self.rent_option)

    @property
    def available_for_sale(self) -> bool:
        """True when the product carries a positive purchase price."""
        price = parse_amount(self.purchase_price)
        return price is not None and price > 0

    @property
    def available_for_rent(self) -> bool:
        """True when the product carries a positive rent price."""
        price = parse_amount(self.rent_price)
        return price is not None and price > 0


class CreatePurchaseData(BaseModel):
    """Payload for creating a purchase."""

    buyer: int
    product: int


class CreateRentalData(BaseModel):
    """Payload for creating a rental."""

    renter: int
    product: int
    rent_option: str
    rent_period_start_date: str
    rent_period_end_date: str


RawRecord = Union[PurchaseRecord, RentalRecord]
CreatePayload = Union[CreatePurchaseData, CreateRentalData]
