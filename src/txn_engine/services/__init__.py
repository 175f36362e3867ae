"""Service layer - enrichment, caching and mutation orchestration."""

from txn_engine.services.transform import (
    parse_amount,
    transform,
    transform_purchase,
    transform_rental,
)
from txn_engine.services.enrichment import EnrichmentCoordinator
from txn_engine.services.cache_service import CacheService, QueryResult
from txn_engine.services.mutation_gateway import MutationGateway
from txn_engine.services.transaction_service import TransactionService

__all__ = [
    "parse_amount",
    "transform",
    "transform_purchase",
    "transform_rental",
    "EnrichmentCoordinator",
    "CacheService",
    "QueryResult",
    "MutationGateway",
    "TransactionService",
]
