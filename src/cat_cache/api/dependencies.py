"""Dependency injection configuration for FastAPI app.

Uses FastAPI's app.state pattern for storing service instances.

Pattern:
    - Services stored in app.state during lifespan
    - Dependency functions retrieve from request.app.state
    - Clean separation, no global mutable state
"""

import logging
from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI, Request

from cat_cache.config import Settings
from cat_cache.handlers import CacheHandler
from cat_cache.protocols import BlobStore, UpstreamFetcher
from cat_cache.repositories import HttpUpstreamFetcher, create_blob_store
from cat_cache.services import CacheService

logger = logging.getLogger(__name__)


def get_handler(request: Request) -> CacheHandler:
    """Dependency injection for CacheHandler from app.state.

    Raises:
        RuntimeError: If handler is not initialized
    """
    handler = getattr(request.app.state, "cache_handler", None)
    if handler is None:
        raise RuntimeError("CacheHandler not initialized. Check lifespan setup.")
    return handler


def build_lifespan(
    settings: Settings,
    store: BlobStore | None = None,
    upstream: UpstreamFetcher | None = None,
):
    """Create the lifespan context manager for an app.

    Collaborators that are not passed in are built from ``settings``.

    Args:
        settings: Application settings
        store: Optional pre-built storage backend
        upstream: Optional pre-built upstream fetcher

    Returns:
        An async context manager factory suitable for ``FastAPI(lifespan=...)``
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Initialize all layers and store them in app.state.

        1. Repository and upstream fetcher (data access)
        2. Service (business logic) - app.state.cache_service
        3. Handler (HTTP endpoints) - app.state.cache_handler
        """
        blob_store = store or create_blob_store(settings)
        fetcher = upstream or HttpUpstreamFetcher.create(settings)

        cache_service = CacheService(store=blob_store, upstream=fetcher)
        cache_handler = CacheHandler(cache_service=cache_service, content_type=settings.content_type)

        app.state.settings = settings
        app.state.cache_service = cache_service
        app.state.cache_handler = cache_handler

        logger.info(f"Proxy cache server listening at http://{settings.api_host}:{settings.api_port}")
        logger.info(f"Storage backend: {settings.storage_backend}")
        if settings.storage_backend == "file":
            logger.info(f"Cache directory: {settings.cache_dir}")
        logger.info(f"Upstream: {settings.upstream_base_url}")
        if not await cache_service.is_healthy():
            logger.warning("Storage backend is not healthy")

        yield

        try:
            stats = await cache_service.get_stats()
            logger.info(f"Cache service shutting down: {stats.model_dump_json()}")
        except Exception:
            logger.exception("Could not collect final cache stats")
        finally:
            await fetcher.close()
            close_store = getattr(blob_store, "close", None)
            if close_store is not None:
                await close_store()

            del app.state.cache_handler
            del app.state.cache_service
            del app.state.settings

    return lifespan


# Type aliases for cleaner dependency injection
HandlerDep = Annotated[CacheHandler, Depends(get_handler)]