"""Cat Cache - read-through cache proxy for http.cat images.

This package provides a layered architecture:

Layers:
    - routing: Request classification (method, path) -> (operation, key)
    - protocols: Interface contracts (BlobStore, UpstreamFetcher)
    - repositories: Storage and upstream implementations
    - services: Read-through business logic
    - handlers: HTTP endpoint handlers
    - dto: Data transfer objects (stats)
    - entities: Domain results and outcomes (internal)

Usage:
    ```python
    from cat_cache.repositories import FileBlobRepository, HttpUpstreamFetcher
    from cat_cache.services import CacheService

    cache = CacheService(store=FileBlobRepository("./cache"), upstream=HttpUpstreamFetcher())
    result = await cache.fetch("200")
    ```

For HTTP API:
    ```python
    from cat_cache.api.app import create_app

    app = create_app()
    ```
"""

from cat_cache.config import Settings, configure_logging
from cat_cache.entities import (
    BlobResult,
    FetchOutcome,
    FetchResult,
    MutationOutcome,
    MutationResult,
    ResultStatus,
)
from cat_cache.handlers import CacheHandler
from cat_cache.protocols import BlobStore, UpstreamFetcher
from cat_cache.repositories import FileBlobRepository, HttpUpstreamFetcher, RedisBlobRepository
from cat_cache.routing import RequestRouter
from cat_cache.services import CacheService

__all__ = [
    # Configuration
    "Settings",
    "configure_logging",
    # Protocols (interfaces)
    "BlobStore",
    "UpstreamFetcher",
    # Routing and services
    "RequestRouter",
    "CacheService",
    # Handlers (HTTP)
    "CacheHandler",
    # Repositories
    "FileBlobRepository",
    "HttpUpstreamFetcher",
    "RedisBlobRepository",
    # Entities
    "BlobResult",
    "ResultStatus",
    "FetchOutcome",
    "FetchResult",
    "MutationOutcome",
    "MutationResult",
]
