"""Domain layer - records, transactions and cache models."""

from txn_engine.domain.models import (
    TransactionKind,
    TransactionType,
    TransactionStatus,
    CacheScope,
    CacheState,
    MutationAction,
    RentType,
    PurchaseRecord,
    RentalRecord,
    Product,
    CreatePurchaseData,
    CreateRentalData,
    BuyTransaction,
    RentTransaction,
    Transaction,
    CacheKey,
    CacheEntry,
)

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
    "BuyTransaction",
    "RentTransaction",
    "Transaction",
    "CacheKey",
    "CacheEntry",
]
