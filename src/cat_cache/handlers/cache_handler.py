"""HTTP handlers for cache operations.

Handlers route a request, call the service, and convert the resulting
outcome into a status code and body. Clients only ever see short plain-text
reasons; internal error detail stays in the logs.
"""

from fastapi import Request, Response, status
from fastapi.responses import PlainTextResponse

from cat_cache.entities import (
    FetchOutcome,
    FetchResult,
    MutationOutcome,
    MutationResult,
    Operation,
    Rejection,
)
from cat_cache.routing import RequestRouter
from cat_cache.services import CacheService

INTERNAL_ERROR_MESSAGE = "Internal Server Error"


def raw_request_path(request: Request) -> str:
    """Request path exactly as sent, percent-encoding intact, without query string."""
    raw_path = request.scope.get("raw_path")
    if raw_path is None:
        return request.url.path
    path, _, _ = raw_path.decode("latin-1").partition("?")
    return path


def text_response(status_code: int, message: str) -> Response:
    """Plain-text response with a trailing newline."""
    return PlainTextResponse(f"{message}\n", status_code=status_code)


class CacheHandler:
    """HTTP handler for the proxy surface.

    This handler delegates business logic to CacheService
    and handles HTTP-specific concerns like:
    - Classifying the request (method, path)
    - Reading the request body for stores
    - Mapping outcomes to status codes and bodies

    Example:
        ```python
        handler = CacheHandler(cache_service=service, content_type="image/jpeg")

        @app.api_route("/{key:path}", methods=["GET", "PUT", "DELETE"])
        async def proxy(request: Request):
            return await handler.handle(request)
        ```
    """

    def __init__(
        self,
        cache_service: CacheService,
        router: RequestRouter | None = None,
        content_type: str = "image/jpeg",
    ) -> None:
        """Initialize the cache handler.

        Args:
            cache_service: The cache service for business logic (required).
            router: Request classifier. Defaults to the standard GET/PUT/DELETE mapping.
            content_type: Media type used for served entries.
        """
        self._cache = cache_service
        self._router = router or RequestRouter()
        self._content_type = content_type

    async def handle(self, request: Request) -> Response:
        """Handle any request to ``/{key}``."""
        route = self._router.classify(request.method, raw_request_path(request))

        if route.is_rejected:
            if route.rejection is Rejection.METHOD_NOT_ALLOWED:
                return text_response(status.HTTP_405_METHOD_NOT_ALLOWED, route.reason)
            return text_response(status.HTTP_400_BAD_REQUEST, route.reason)

        if route.operation is Operation.FETCH:
            return self.fetch_response(await self._cache.fetch(route.key))

        if route.operation is Operation.STORE:
            body = await request.body()
            return self.store_response(await self._cache.store(route.key, body))

        return self.remove_response(await self._cache.remove(route.key))

    def fetch_response(self, result: FetchResult) -> Response:
        """Convert a fetch result to GET /{key} response."""
        if result.outcome is FetchOutcome.HIT_LOCAL:
            return self._image_response(result.data, cache_status="HIT")
        if result.outcome is FetchOutcome.HIT_UPSTREAM:
            return self._image_response(result.data, cache_status="MISS")
        if result.outcome is FetchOutcome.MISS:
            return text_response(status.HTTP_404_NOT_FOUND, "Not Found")
        return text_response(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR_MESSAGE)

    def store_response(self, result: MutationResult) -> Response:
        """Convert a store result to PUT /{key} response."""
        if result.outcome is MutationOutcome.CREATED:
            return text_response(status.HTTP_201_CREATED, "Created")
        if result.outcome is MutationOutcome.BAD_REQUEST:
            return text_response(status.HTTP_400_BAD_REQUEST, result.reason or "Bad Request")
        return text_response(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR_MESSAGE)

    def remove_response(self, result: MutationResult) -> Response:
        """Convert a remove result to DELETE /{key} response."""
        if result.outcome is MutationOutcome.REMOVED:
            return text_response(status.HTTP_200_OK, "Deleted")
        if result.outcome is MutationOutcome.NOT_FOUND:
            return text_response(status.HTTP_404_NOT_FOUND, "Not Found")
        return text_response(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR_MESSAGE)

    def _image_response(self, data: bytes | None, cache_status: str) -> Response:
        return Response(
            content=data or b"",
            media_type=self._content_type,
            headers={"X-Cache": cache_status},
        )
