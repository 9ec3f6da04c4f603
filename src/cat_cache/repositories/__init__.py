"""Repository layer for data access.

This layer wraps external dependencies (filesystem, Redis, the upstream
HTTP origin) behind protocol-based interfaces. This enables:
- Easy swapping of implementations (files -> Redis, http.cat -> mirror)
- Unit testing with in-memory fakes
- Clear separation of concerns

The repositories are protocol-based (structural typing), not inheritance-based.
Any class implementing the required methods will satisfy the protocol.
"""

from cat_cache.config import Settings
from cat_cache.protocols import BlobStore, UpstreamFetcher

from .file_repository import FileBlobRepository
from .http_upstream import HttpUpstreamFetcher
from .redis_repository import RedisBlobRepository, get_redis_client


def create_blob_store(settings: Settings) -> BlobStore:
    """Build the storage backend selected by ``settings.storage_backend``."""
    if settings.storage_backend == "redis":
        return RedisBlobRepository.create(settings)
    return FileBlobRepository.create(settings)


__all__ = [
    "BlobStore",
    "UpstreamFetcher",
    "FileBlobRepository",
    "HttpUpstreamFetcher",
    "RedisBlobRepository",
    "create_blob_store",
    "get_redis_client",
]
