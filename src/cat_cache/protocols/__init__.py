"""Protocol interfaces for swappable implementations.

This package contains protocol definitions using structural typing.
Protocols enable:
- Easy swapping of implementations (files -> Redis, http.cat -> another origin)
- Unit testing with in-memory fakes
- Clear separation of concerns

Usage:
    ```python
    from cat_cache.protocols import BlobStore, UpstreamFetcher

    store: BlobStore = FileBlobRepository(cache_dir)   # works
    store: BlobStore = RedisBlobRepository(client)     # also works
    ```
"""

from .blob_store import BlobStore
from .upstream_fetcher import UpstreamFetcher

__all__ = [
    "BlobStore",
    "UpstreamFetcher",
]
