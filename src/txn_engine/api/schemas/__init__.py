"""Pydantic schemas for API request/response."""

from txn_engine.api.schemas.transaction import (
    ResourceKind,
    ProductResponse,
    TransactionResponse,
    QueryErrorResponse,
    TransactionListResponse,
    TransactionDetailResponse,
    CreatedRecordResponse,
)

__all__ = [
    "ResourceKind",
    "ProductResponse",
    "TransactionResponse",
    "QueryErrorResponse",
    "TransactionListResponse",
    "TransactionDetailResponse",
    "CreatedRecordResponse",
]
