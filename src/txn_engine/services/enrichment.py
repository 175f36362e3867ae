"""Enrichment coordinator: raw records + concurrent product lookups -> Transactions."""

import asyncio
import logging
from typing import Optional, Sequence, cast

from txn_engine.domain.models import (
    Product,
    RawRecord,
    Transaction,
    TransactionKind,
)
from txn_engine.providers.transaction_source import ProductSource, TransactionSource
from txn_engine.services.transform import transform

logger = logging.getLogger(__name__)


class EnrichmentCoordinator:
    """
    Fetch raw records and attach their products.

    Product lookups for a batch run concurrently, one per record. A failed
    lookup degrades only its own record to "no product"; the batch fails
    only when the raw list or detail fetch itself fails.
    """

    def __init__(
        self,
        transaction_source: TransactionSource,
        product_source: ProductSource,
    ):
        self._transactions = transaction_source
        self._products = product_source

    async def list_transactions(self, kind: TransactionKind) -> list[Transaction]:
        """Fetch and enrich every record of kind. Raw fetch errors propagate."""
        if kind == TransactionKind.PURCHASE:
            records: Sequence[RawRecord] = await self._transactions.list_purchases()
        else:
            records = await self._transactions.list_rentals()
        return await self.enrich(kind, records)

    async def get_transaction(self, kind: TransactionKind, record_id: str) -> Optional[Transaction]:
        """
        Fetch and enrich one record. Raw fetch errors propagate.

        Returns None, without a product lookup, when the store has no record body.
        """
        if kind == TransactionKind.PURCHASE:
            record: Optional[RawRecord] = await self._transactions.get_purchase(record_id)
        else:
            record = await self._transactions.get_rental(record_id)
        if record is None:
            logger.debug("Empty %s detail for %s", kind.value.lower(), record_id)
            return None
        [transaction] = await self.enrich(kind, [record])
        return transaction

    async def enrich(
        self,
        kind: TransactionKind,
        records: Sequence[RawRecord],
    ) -> list[Transaction]:
        """
        Enrich records in input order.

        Returns a list of the same length where slot i holds the projection
        of records[i], whatever order the lookups complete in.
        """
        if not records:
            return []

        slots: list[Optional[Transaction]] = [None] * len(records)

        async def enrich_one(index: int, record: RawRecord) -> None:
            product = await self._fetch_product(kind, record)
            slots[index] = transform(kind, record, product)

        await asyncio.gather(*(enrich_one(i, record) for i, record in enumerate(records)))
        return cast(list[Transaction], slots)

    async def _fetch_product(self, kind: TransactionKind, record: RawRecord) -> Optional[Product]:
        product_id = str(record.product_id)
        try:
            return await self._products.get_product(product_id)
        except Exception as exc:
            logger.warning(
                "Failed to fetch product %s for %s %s: %s",
                product_id,
                kind.value.lower(),
                record.id,
                exc,
            )
            return None
