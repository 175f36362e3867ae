"""Mutation gateway: create/delete against the store, then invalidate the cache."""

import logging
from typing import Optional, Union

from txn_engine.core.exceptions import ValidationError
from txn_engine.domain.models import (
    CreatePayload,
    CreatePurchaseData,
    CreateRentalData,
    MutationAction,
    PurchaseRecord,
    RentalRecord,
    TransactionKind,
)
from txn_engine.providers.transaction_source import TransactionSource
from txn_engine.services.cache_service import CacheService

logger = logging.getLogger(__name__)


class MutationGateway:
    """
    Wraps store mutations.

    On success the whole namespace of the mutated kind is invalidated. On
    failure the error propagates and the cache is left untouched; cached data
    is never edited optimistically.
    """

    def __init__(
        self,
        transaction_source: TransactionSource,
        cache: CacheService,
    ):
        self._transactions = transaction_source
        self._cache = cache

    async def create(
        self,
        kind: TransactionKind,
        payload: CreatePayload,
    ) -> Union[PurchaseRecord, RentalRecord]:
        """Create a record of kind and invalidate that kind's entries."""
        if kind == TransactionKind.PURCHASE:
            if not isinstance(payload, CreatePurchaseData):
                raise ValidationError("Purchase creation requires CreatePurchaseData")
            record: Union[PurchaseRecord, RentalRecord] = await self._transactions.create_purchase(payload)
        else:
            if not isinstance(payload, CreateRentalData):
                raise ValidationError("Rental creation requires CreateRentalData")
            record = await self._transactions.create_rental(payload)

        logger.info("Created %s %s", kind.value.lower(), record.id)
        self._cache.invalidate(kind)
        return record

    async def delete(self, kind: TransactionKind, record_id: Union[str, int]) -> None:
        """Delete a record of kind and invalidate that kind's entries."""
        record_id = _normalize_id(record_id)
        if not record_id:
            raise ValidationError("A record id is required to delete")
        if kind == TransactionKind.PURCHASE:
            await self._transactions.delete_purchase(record_id)
        else:
            await self._transactions.delete_rental(record_id)

        logger.info("Deleted %s %s", kind.value.lower(), record_id)
        self._cache.invalidate(kind)

    async def mutate(
        self,
        kind: TransactionKind,
        action: MutationAction,
        payload_or_id: Union[CreatePayload, str, int],
    ) -> Optional[Union[PurchaseRecord, RentalRecord]]:
        """Dispatch CREATE (payload) or DELETE (record id, str or int)."""
        action = MutationAction(action)
        is_payload = isinstance(payload_or_id, (CreatePurchaseData, CreateRentalData))
        if action == MutationAction.CREATE:
            if not is_payload:
                raise ValidationError("CREATE expects a payload, not an id")
            return await self.create(kind, payload_or_id)
        if not isinstance(payload_or_id, (str, int)) or isinstance(payload_or_id, bool):
            raise ValidationError("DELETE expects a record id")
        await self.delete(kind, payload_or_id)
        return None


def _normalize_id(record_id: Union[str, int, None]) -> str:
    return "" if record_id is None else str(record_id).strip()
