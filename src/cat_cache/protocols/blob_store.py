"""Blob storage protocol.

Defines the interface for any byte-addressable key-value backend that can
hold cache entries.

Implementations:
- Files in a directory (default)
- Redis
"""

from typing import Protocol, runtime_checkable

from cat_cache.entities import BlobResult


@runtime_checkable
class BlobStore(Protocol):
    """Protocol for cache entry storage.

    Implementations never raise for expected conditions: absence is reported
    as ``BlobResult.not_found()`` and backend errors as
    ``BlobResult.failed(exc)``. Writes must be all-or-nothing.
    """

    async def get(self, key: str) -> BlobResult:
        """Read the entry for ``key``.

        Returns:
            OK with the bytes, NOT_FOUND, or ERROR
        """
        ...

    async def put(self, key: str, data: bytes) -> BlobResult:
        """Write ``data`` under ``key``, replacing any existing entry.

        Returns:
            OK or ERROR
        """
        ...

    async def delete(self, key: str) -> BlobResult:
        """Delete the entry for ``key``.

        Returns:
            OK, NOT_FOUND, or ERROR
        """
        ...

    async def health_check(self) -> bool:
        """Check if the backend is accessible."""
        ...

    async def get_stats(self) -> dict:
        """Get backend statistics (implementation-specific)."""
        ...
