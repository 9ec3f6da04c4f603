import logging

from fastapi import FastAPI, Request, Response, status

from cat_cache.api.dependencies import HandlerDep, build_lifespan
from cat_cache.config import Settings
from cat_cache.handlers.cache_handler import INTERNAL_ERROR_MESSAGE, text_response
from cat_cache.protocols import BlobStore, UpstreamFetcher

logger = logging.getLogger(__name__)

# Every method is routed to the handler so unsupported ones get a plain 405
PROXY_METHODS = ["GET", "PUT", "DELETE", "POST", "PATCH", "HEAD", "OPTIONS"]


def create_app(
    settings: Settings | None = None,
    store: BlobStore | None = None,
    upstream: UpstreamFetcher | None = None,
) -> FastAPI:
    """Build the proxy application.

    Args:
        settings: Application settings. Defaults to ``Settings.from_env()``.
        store: Optional storage backend (tests inject fakes here).
        upstream: Optional upstream fetcher.

    Returns:
        Configured FastAPI app
    """
    settings = settings or Settings.from_env()

    # Every path is a cache key, so the docs endpoints stay off
    app = FastAPI(
        title="Cat Cache Proxy",
        description="Read-through cache proxy for http.cat images",
        version="0.1.0",
        lifespan=build_lifespan(settings, store=store, upstream=upstream),
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    @app.exception_handler(Exception)
    async def unexpected_error(request: Request, exc: Exception) -> Response:
        logger.exception(f"Unexpected error handling {request.method} {request.url.path}")
        return text_response(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR_MESSAGE)

    @app.api_route("/", methods=PROXY_METHODS, include_in_schema=False)
    @app.api_route("/{key:path}", methods=PROXY_METHODS, include_in_schema=False)
    async def proxy(request: Request, handler: HandlerDep) -> Response:
        """Serve, store or remove the entry named by the request path."""
        return await handler.handle(request)

    return app
