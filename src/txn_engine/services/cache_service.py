"""Stale-while-revalidate query cache keyed by CacheKey."""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime
from functools import partial
from typing import Any, Awaitable, Callable, Optional

from txn_engine.core.timezone import now_utc
from txn_engine.domain.models import (
    CacheEntry,
    CacheKey,
    CacheScope,
    CacheState,
    TransactionKind,
)

logger = logging.getLogger(__name__)

Fetcher = Callable[[], Awaitable[Any]]


async def _inert_refetch() -> "QueryResult":
    return QueryResult()


@dataclass
class QueryResult:
    """
    Snapshot handed to a query consumer.

    data is the cached (or fallback) value, is_loading is True while a
    fetch for the key is running, error is the last fetch failure.
    refetch forces a new fetch and resolves to a fresh snapshot.
    """

    data: Any = None
    is_loading: bool = False
    error: Optional[BaseException] = None
    state: Optional[CacheState] = None
    refetch: Callable[[], Awaitable["QueryResult"]] = field(default=_inert_refetch, repr=False)


@dataclass
class _Outcome:
    value: Any = None
    error: Optional[BaseException] = None


class CacheService:
    """
    Read-through cache over list and detail queries.

    - Fresh entries are served without a fetch.
    - Stale entries with a value are served immediately while a background
      refetch runs; entries without a usable value block on the fetch.
    - At most one fetch per key is in flight; concurrent readers share it.
    - A failed fetch moves the entry to ERROR but keeps the last good value.

    Construct one per process and pass it by reference.
    """

    def __init__(
        self,
        list_stale_seconds: float = 2 * 60,
        detail_stale_seconds: float = 5 * 60,
        clock: Callable[[], datetime] = now_utc,
    ):
        self._stale_seconds = {
            CacheScope.LIST: list_stale_seconds,
            CacheScope.DETAIL: detail_stale_seconds,
        }
        self._clock = clock
        self._entries: dict[CacheKey, CacheEntry] = {}
        # Strong references so background fetches are not garbage collected
        self._tasks: set[asyncio.Task] = set()

    def get_entry(self, key: CacheKey) -> Optional[CacheEntry]:
        """Return the entry for key, refreshing its FRESH/STALE state."""
        entry = self._entries.get(key)
        if entry is not None:
            self._expire(entry)
        return entry

    def keys(self, kind: Optional[TransactionKind] = None) -> list[CacheKey]:
        """List cached keys, optionally restricted to one kind's namespace."""
        return [key for key in self._entries if kind is None or key.kind == kind]

    async def query(self, key: CacheKey, fetcher: Fetcher) -> QueryResult:
        """Read key, fetching through fetcher when the entry is not fresh."""
        entry = self._entries.get(key)
        if entry is None:
            entry = self._entries[key] = CacheEntry(key=key)
        self._expire(entry)

        if entry.state == CacheState.FRESH:
            return self._snapshot(entry, fetcher, is_loading=entry.is_fetching)

        if entry.has_value and not entry.invalidated:
            error = entry.error if entry.state == CacheState.ERROR else None
            self._start_fetch(entry, fetcher)
            return self._snapshot(entry, fetcher, is_loading=True, error=error)

        return await self._await_fetch(entry, fetcher)

    async def refetch(self, key: CacheKey, fetcher: Fetcher) -> QueryResult:
        """Force a fetch for key (joining one already in flight)."""
        entry = self._entries.get(key)
        if entry is None:
            entry = self._entries[key] = CacheEntry(key=key)
        return await self._await_fetch(entry, fetcher)

    def invalidate(self, kind: TransactionKind) -> int:
        """
        Invalidate the LIST entry and every DETAIL entry of kind.

        Returns the number of entries touched.
        """
        touched = [entry for key, entry in self._entries.items() if key.kind == kind]
        for entry in touched:
            self._mark_invalid(entry)
        logger.info("Invalidated %d cache entries for %s", len(touched), kind.value)
        return len(touched)

    def invalidate_key(self, key: CacheKey) -> bool:
        """Invalidate a single entry; returns False if key was never queried."""
        entry = self._entries.get(key)
        if entry is None:
            return False
        self._mark_invalid(entry)
        logger.debug("Invalidated cache entry %s", key)
        return True

    def clear(self) -> None:
        """Drop every entry (test isolation and shutdown)."""
        self._entries.clear()

    async def _await_fetch(self, entry: CacheEntry, fetcher: Fetcher) -> QueryResult:
        task = self._start_fetch(entry, fetcher)
        # shield: a departing reader must not cancel the shared fetch
        outcome: _Outcome = await asyncio.shield(task)
        if outcome.error is not None:
            fallback = entry.value if entry.has_value else None
            return QueryResult(
                data=fallback,
                is_loading=entry.is_fetching,
                error=outcome.error,
                state=entry.state,
                refetch=partial(self.refetch, entry.key, fetcher),
            )
        return QueryResult(
            data=outcome.value,
            is_loading=entry.is_fetching,
            error=None,
            state=entry.state,
            refetch=partial(self.refetch, entry.key, fetcher),
        )

    def _start_fetch(self, entry: CacheEntry, fetcher: Fetcher) -> asyncio.Task:
        if entry.in_flight is not None and not entry.in_flight.done():
            return entry.in_flight

        entry.state = CacheState.LOADING
        task = asyncio.get_running_loop().create_task(
            self._run_fetch(entry, fetcher, entry.generation),
            name=f"cache-fetch:{entry.key}",
        )
        entry.in_flight = task
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _run_fetch(self, entry: CacheEntry, fetcher: Fetcher, generation: int) -> _Outcome:
        try:
            value = await fetcher()
        except Exception as exc:
            logger.warning("Fetch for %s failed: %s", entry.key, exc)
            if entry.generation == generation:
                entry.state = CacheState.ERROR
                entry.error = exc
            return _Outcome(error=exc)
        finally:
            current = entry.generation == generation
            if current and entry.in_flight is asyncio.current_task():
                entry.in_flight = None

        if current:
            entry.value = value
            entry.has_value = True
            entry.error = None
            entry.invalidated = False
            entry.last_fetched_at = self._clock()
            entry.state = CacheState.FRESH
        else:
            logger.debug("Discarding result for %s fetched before invalidation", entry.key)
        return _Outcome(value=value)

    def _mark_invalid(self, entry: CacheEntry) -> None:
        entry.generation += 1
        entry.invalidated = True
        # Detach the running fetch; its result predates the invalidation
        entry.in_flight = None
        entry.state = CacheState.STALE if entry.has_value else CacheState.EMPTY

    def _expire(self, entry: CacheEntry) -> None:
        if entry.state != CacheState.FRESH or entry.last_fetched_at is None:
            return
        age = (self._clock() - entry.last_fetched_at).total_seconds()
        if age >= self._stale_seconds[entry.key.scope]:
            entry.state = CacheState.STALE

    def _snapshot(
        self,
        entry: CacheEntry,
        fetcher: Fetcher,
        is_loading: bool,
        error: Optional[BaseException] = None,
    ) -> QueryResult:
        return QueryResult(
            data=entry.value if entry.has_value else None,
            is_loading=is_loading,
            error=error,
            state=entry.state,
            refetch=partial(self.refetch, entry.key, fetcher),
        )
