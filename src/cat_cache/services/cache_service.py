"""Cache service for core business logic.

This service implements the read-through fetch and the direct store and
remove operations by coordinating the blob store and the upstream fetcher.
"""

import logging
from collections.abc import Callable

from cat_cache.dto import ServiceStats, StoreStats
from cat_cache.entities import (
    FetchOutcome,
    FetchResult,
    MutationOutcome,
    MutationResult,
)
from cat_cache.models import OutcomeMetrics
from cat_cache.protocols import BlobStore, UpstreamFetcher

logger = logging.getLogger(__name__)

PersistFailureCallback = Callable[[str, BaseException | None], None]


class CacheService:
    """Read-through cache orchestration service.

    This service depends on PROTOCOLS, not concrete implementations:
    - BlobStore: can be files, Redis, etc.
    - UpstreamFetcher: http.cat or any other origin

    Every expected condition (hit, miss, not found, bad input) comes back as
    an explicit result; the methods do not raise for them.

    Example:
        ```python
        from cat_cache.repositories import FileBlobRepository, HttpUpstreamFetcher
        from cat_cache.services import CacheService

        cache = CacheService(
            store=FileBlobRepository("./cache"),
            upstream=HttpUpstreamFetcher(),
        )
        result = await cache.fetch("200")
        ```
    """

    def __init__(
        self,
        store: BlobStore,
        upstream: UpstreamFetcher,
        on_persist_failure: PersistFailureCallback | None = None,
    ) -> None:
        """Initialize the cache service.

        Args:
            store: Storage backend for cache entries (required).
            upstream: Source consulted on a local miss (required).
            on_persist_failure: Optional callback invoked with (key, error)
                when an upstream hit cannot be written to storage.
        """
        self._store = store
        self._upstream = upstream
        self._on_persist_failure = on_persist_failure
        self._metrics = OutcomeMetrics()

    async def fetch(self, key: str) -> FetchResult:
        """Fetch an entry, falling back to upstream on a local miss.

        Business logic:
        1. Read from storage; a hit is returned as HIT_LOCAL
        2. Absent locally: ask upstream
        3. Upstream hit: persist (best effort) and return HIT_UPSTREAM
        4. Upstream not-found: MISS, nothing written
        5. Storage or upstream error: FAILURE

        Args:
            key: The cache key

        Returns:
            FetchResult with the outcome and, for hits, the bytes
        """
        result = await self._fetch(key)
        self._metrics.record_fetch(result.outcome)
        return result

    async def _fetch(self, key: str) -> FetchResult:
        local = await self._store.get(key)

        if local.is_ok:
            logger.debug(f"[CacheService] Local hit: {key}")
            return FetchResult(FetchOutcome.HIT_LOCAL, data=local.data)

        if local.is_error:
            logger.error(f"[CacheService] Storage read failed for {key!r}: {local.error}")
            return FetchResult(FetchOutcome.FAILURE, error=local.error)

        remote = await self._upstream.fetch(key)

        if remote.is_not_found:
            logger.debug(f"[CacheService] Miss: {key}")
            return FetchResult(FetchOutcome.MISS)

        if remote.is_error:
            logger.error(f"[CacheService] Upstream fetch failed for {key!r}: {remote.error}")
            return FetchResult(FetchOutcome.FAILURE, error=remote.error)

        data = remote.data if remote.data is not None else b""
        await self.persist(key, data)
        return FetchResult(FetchOutcome.HIT_UPSTREAM, data=data)

    async def persist(self, key: str, data: bytes) -> bool:
        """Write an upstream hit into storage without affecting the caller.

        Failures are logged as warnings, counted, and passed to the
        ``on_persist_failure`` callback; they are never raised.

        Args:
            key: The cache key
            data: Bytes fetched from upstream

        Returns:
            True if the entry was written, False otherwise
        """
        error: BaseException | None
        try:
            written = await self._store.put(key, data)
            error = written.error
            ok = written.is_ok
        except Exception as e:
            error = e
            ok = False

        if ok:
            return True

        logger.warning(f"[CacheService] Cannot save {key!r} to cache: {error}")
        self._metrics.record_persist_failure()
        if self._on_persist_failure is not None:
            try:
                self._on_persist_failure(key, error)
            except Exception:
                logger.exception("[CacheService] on_persist_failure callback raised")
        return False

    async def store(self, key: str, data: bytes) -> MutationResult:
        """Store an entry directly, bypassing upstream.

        Args:
            key: The cache key
            data: Entry bytes; must not be empty

        Returns:
            MutationResult with CREATED, BAD_REQUEST or FAILURE
        """
        if not data:
            return MutationResult(MutationOutcome.BAD_REQUEST, reason="Request body is empty")

        written = await self._store.put(key, data)
        if not written.is_ok:
            logger.error(f"[CacheService] Write error for {key!r}: {written.error}")
            return MutationResult(MutationOutcome.FAILURE, error=written.error)

        self._metrics.record_store()
        return MutationResult(MutationOutcome.CREATED)

    async def remove(self, key: str) -> MutationResult:
        """Remove an entry.

        Args:
            key: The cache key

        Returns:
            MutationResult with REMOVED, NOT_FOUND or FAILURE
        """
        deleted = await self._store.delete(key)

        if deleted.is_not_found:
            return MutationResult(MutationOutcome.NOT_FOUND, reason="Not Found")

        if deleted.is_error:
            logger.error(f"[CacheService] Delete error for {key!r}: {deleted.error}")
            return MutationResult(MutationOutcome.FAILURE, error=deleted.error)

        self._metrics.record_remove()
        return MutationResult(MutationOutcome.REMOVED)

    async def get_stats(self) -> ServiceStats:
        """Get service statistics.

        Returns:
            ServiceStats with outcome counters and store statistics
        """
        store_stats = StoreStats(**(await self._store.get_stats()))
        return ServiceStats(**self._metrics.to_dict(), store=store_stats)

    async def is_healthy(self) -> bool:
        """Check if the storage backend is healthy."""
        return await self._store.health_check()

    @property
    def metrics(self) -> OutcomeMetrics:
        """Get the outcome counters."""
        return self._metrics

    @property
    def store_backend(self) -> BlobStore:
        """Get the underlying store (for testing)."""
        return self._store

    @property
    def upstream(self) -> UpstreamFetcher:
        """Get the underlying upstream fetcher (for testing)."""
        return self._upstream
