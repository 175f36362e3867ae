"""Domain models package."""

from txn_engine.domain.models.enums import (
    TransactionKind,
    TransactionType,
    TransactionStatus,
    CacheScope,
    CacheState,
    MutationAction,
    RentType,
)
from txn_engine.domain.models.records import (
    PurchaseRecord,
    RentalRecord,
    Product,
    CreatePurchaseData,
    CreateRentalData,
    RawRecord,
    CreatePayload,
)
from txn_engine.domain.models.transaction import (
    BaseTransaction,
    BuyTransaction,
    RentTransaction,
    Transaction,
)
from txn_engine.domain.models.cache import CacheKey, CacheEntry

__all__ = [
    "TransactionKind",
    "TransactionType",
    "TransactionStatus",
    "CacheScope",
    "CacheState",
    "MutationAction",
    "RentType",
    "PurchaseRecord",
    "RentalRecord",
    "Product",
    "CreatePurchaseData",
    "CreateRentalData",
    "RawRecord",
    "CreatePayload",
    "BaseTransaction",
    "BuyTransaction",
    "RentTransaction",
    "Transaction",
    "CacheKey",
    "CacheEntry",
]
