"""Purchase and rental endpoints backed by the shared query cache."""

from typing import Optional

from fastapi import APIRouter, Depends, Response, status

from txn_engine.api.deps import get_transaction_service
from txn_engine.api.schemas import (
    CreatedRecordResponse,
    QueryErrorResponse,
    ResourceKind,
    TransactionDetailResponse,
    TransactionListResponse,
    TransactionResponse,
)
from txn_engine.core.exceptions import AppError, NotFoundError, UnknownError
from txn_engine.domain.models import (
    CacheScope,
    CreatePurchaseData,
    CreateRentalData,
    MutationAction,
)
from txn_engine.services import QueryResult, TransactionService

router = APIRouter(tags=["transactions"])


def _raise_if_empty_error(result: QueryResult) -> None:
    """A failed primary fetch with nothing cached surfaces as an error response."""
    if result.error is not None and result.data is None:
        if isinstance(result.error, AppError):
            raise result.error
        raise UnknownError(str(result.error)) from result.error


def _error_of(result: QueryResult) -> Optional[QueryErrorResponse]:
    return QueryErrorResponse.from_exception(result.error) if result.error is not None else None


@router.get("/{resource}", response_model=TransactionListResponse)
async def list_transactions(
    resource: ResourceKind,
    service: TransactionService = Depends(get_transaction_service),
) -> TransactionListResponse:
    """List enriched purchases or rentals."""
    result = await service.query(resource.kind, CacheScope.LIST)
    _raise_if_empty_error(result)
    items = [TransactionResponse.from_domain(txn) for txn in result.data or []]
    return TransactionListResponse(
        data=items,
        count=len(items),
        is_loading=result.is_loading,
        error=_error_of(result),
    )


@router.get("/{resource}/{record_id}", response_model=TransactionDetailResponse)
async def get_transaction(
    resource: ResourceKind,
    record_id: str,
    service: TransactionService = Depends(get_transaction_service),
) -> TransactionDetailResponse:
    """Get one enriched purchase or rental."""
    result = await service.query(resource.kind, CacheScope.DETAIL, record_id)
    _raise_if_empty_error(result)
    if result.data is None and not result.is_loading:
        # Blank id or an empty detail body from the store
        raise NotFoundError(resource.kind.value.title(), record_id)
    return TransactionDetailResponse(
        data=TransactionResponse.from_domain(result.data) if result.data is not None else None,
        is_loading=result.is_loading,
        error=_error_of(result),
    )


@router.post("/purchases", response_model=CreatedRecordResponse, status_code=status.HTTP_201_CREATED)
async def create_purchase(
    payload: CreatePurchaseData,
    service: TransactionService = Depends(get_transaction_service),
) -> CreatedRecordResponse:
    """Create a purchase; invalidates cached purchases."""
    kind = ResourceKind.PURCHASES.kind
    record = await service.mutate(kind, MutationAction.CREATE, payload)
    return CreatedRecordResponse.from_record(kind, record)


@router.post("/rentals", response_model=CreatedRecordResponse, status_code=status.HTTP_201_CREATED)
async def create_rental(
    payload: CreateRentalData,
    service: TransactionService = Depends(get_transaction_service),
) -> CreatedRecordResponse:
    """Create a rental; invalidates cached rentals."""
    kind = ResourceKind.RENTALS.kind
    record = await service.mutate(kind, MutationAction.CREATE, payload)
    return CreatedRecordResponse.from_record(kind, record)


@router.delete("/{resource}/{record_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_transaction(
    resource: ResourceKind,
    record_id: str,
    service: TransactionService = Depends(get_transaction_service),
) -> Response:
    """Delete a purchase or rental; invalidates that kind's cache."""
    await service.mutate(resource.kind, MutationAction.DELETE, record_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
