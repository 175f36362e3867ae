"""Cache models for enriched transaction queries."""

import asyncio
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from txn_engine.domain.models.enums import CacheScope, CacheState, TransactionKind


@dataclass(frozen=True)
class CacheKey:
    """
    Structured cache key: (kind, LIST) or (kind, DETAIL, id).

    The kind is the namespace invalidated as a whole after a mutation.
    """

    kind: TransactionKind
    scope: CacheScope
    id: Optional[str] = None

    def __post_init__(self) -> None:
        if self.scope == CacheScope.DETAIL and not self.id:
            raise ValueError("DETAIL cache keys require a non-empty id")
        if self.scope == CacheScope.LIST and self.id is not None:
            raise ValueError("LIST cache keys take no id")

    @classmethod
    def for_list(cls, kind: TransactionKind) -> "CacheKey":
        return cls(kind=kind, scope=CacheScope.LIST)

    @classmethod
    def for_detail(cls, kind: TransactionKind, record_id: str) -> "CacheKey":
        return cls(kind=kind, scope=CacheScope.DETAIL, id=str(record_id))

    def __str__(self) -> str:
        parts = [self.kind.value.lower(), self.scope.value.lower()]
        if self.id is not None:
            parts.append(self.id)
        return "/".join(parts)


@dataclass
class CacheEntry:
    """
    Cached query state for one key.

    IMPORTANT: value survives failed refetches and invalidation so it can
    serve as fallback data; only a successful fetch replaces it.
    """

    key: CacheKey
    state: CacheState = CacheState.EMPTY
    value: Any = None
    error: Optional[BaseException] = None
    last_fetched_at: Optional[datetime] = None
    has_value: bool = False
    invalidated: bool = False
    generation: int = 0
    in_flight: Optional[asyncio.Task] = field(default=None, repr=False)

    @property
    def is_fetching(self) -> bool:
        """Return True while a fetch task for this key is running."""
        return self.in_flight is not None and not self.in_flight.done()
