"""Upstream fetcher protocol.

Defines the interface for the remote source consulted on a cache miss.
"""

from typing import Protocol, runtime_checkable

from cat_cache.entities import BlobResult


@runtime_checkable
class UpstreamFetcher(Protocol):
    """Protocol for retrieving entry bytes from the source of truth."""

    async def fetch(self, key: str) -> BlobResult:
        """Retrieve the bytes for ``key``.

        Returns:
            OK with the bytes, NOT_FOUND for a definitive not-found answer,
            or ERROR for transport failures, timeouts and unexpected statuses
        """
        ...

    async def close(self) -> None:
        """Release network resources."""
        ...
