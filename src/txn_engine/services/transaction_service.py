"""Transaction query/mutation facade exposed to consumers."""

from functools import partial
from typing import Optional, Union

from txn_engine.domain.models import (
    CacheKey,
    CacheScope,
    CreatePayload,
    CreatePurchaseData,
    CreateRentalData,
    MutationAction,
    PurchaseRecord,
    RentalRecord,
    TransactionKind,
)
from txn_engine.services.cache_service import CacheService, QueryResult
from txn_engine.services.enrichment import EnrichmentCoordinator
from txn_engine.services.mutation_gateway import MutationGateway


class TransactionService:
    """
    Entry point for reading and mutating purchases and rentals.

    query() goes through the shared CacheService, fetching via the
    EnrichmentCoordinator on a miss; mutate() goes through the
    MutationGateway, which invalidates the mutated kind.
    """

    def __init__(
        self,
        cache: CacheService,
        coordinator: EnrichmentCoordinator,
        gateway: MutationGateway,
    ):
        self._cache = cache
        self._coordinator = coordinator
        self._gateway = gateway

    async def query(
        self,
        kind: TransactionKind,
        scope: CacheScope,
        record_id: Optional[Union[str, int]] = None,
    ) -> QueryResult:
        """
        Read the LIST of kind, or one DETAIL by record_id.

        A DETAIL query without a non-blank id is inert: no fetch, no cache
        entry, an empty result.
        """
        kind = TransactionKind(kind)
        scope = CacheScope(scope)
        if scope == CacheScope.LIST:
            key = CacheKey.for_list(kind)
            fetcher = partial(self._coordinator.list_transactions, kind)
        else:
            record_id = "" if record_id is None else str(record_id).strip()
            if not record_id:
                return QueryResult()
            key = CacheKey.for_detail(kind, record_id)
            fetcher = partial(self._coordinator.get_transaction, kind, record_id)
        return await self._cache.query(key, fetcher)

    async def mutate(
        self,
        kind: TransactionKind,
        action: MutationAction,
        payload_or_id: Union[CreatePayload, str, int],
    ) -> Optional[Union[PurchaseRecord, RentalRecord]]:
        """Run a CREATE or DELETE; errors propagate unchanged."""
        return await self._gateway.mutate(TransactionKind(kind), action, payload_or_id)

    # Convenience wrappers

    async def purchases(self) -> QueryResult:
        return await self.query(TransactionKind.PURCHASE, CacheScope.LIST)

    async def rentals(self) -> QueryResult:
        return await self.query(TransactionKind.RENTAL, CacheScope.LIST)

    async def purchase(self, record_id: Optional[Union[str, int]]) -> QueryResult:
        return await self.query(TransactionKind.PURCHASE, CacheScope.DETAIL, record_id)

    async def rental(self, record_id: Optional[Union[str, int]]) -> QueryResult:
        return await self.query(TransactionKind.RENTAL, CacheScope.DETAIL, record_id)

    async def create_purchase(self, payload: CreatePurchaseData) -> PurchaseRecord:
        return await self._gateway.create(TransactionKind.PURCHASE, payload)

    async def create_rental(self, payload: CreateRentalData) -> RentalRecord:
        return await self._gateway.create(TransactionKind.RENTAL, payload)

    async def delete_purchase(self, record_id: Union[str, int]) -> None:
        await self._gateway.delete(TransactionKind.PURCHASE, record_id)

    async def delete_rental(self, record_id: Union[str, int]) -> None:
        await self._gateway.delete(TransactionKind.RENTAL, record_id)
