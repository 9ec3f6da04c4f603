"""HTTP implementation of UpstreamFetcher.

Fetches ``<base_url>/<key>`` (http.cat by default) with a bounded timeout.
The key is appended as it appeared in the request path.

Status classification:
- 2xx: the body is the entry
- 404, 410: definitive not-found
- anything else, transport errors and timeouts: error
"""

import logging
from urllib.parse import quote

import httpx

from cat_cache.config import Settings
from cat_cache.entities import BlobResult
from cat_cache.exceptions import UnexpectedStatusError

logger = logging.getLogger(__name__)

NOT_FOUND_STATUSES = frozenset({404, 410})

# Keys arrive as raw request-path text; existing escapes and sub-delims pass through
KEY_SAFE_CHARS = "/%:@!$&'()*+,;=~"


class HttpUpstreamFetcher:
    """httpx-based implementation of UpstreamFetcher protocol.

    This class satisfies the UpstreamFetcher protocol through structural
    typing - no explicit inheritance needed.

    Example:
        ```python
        fetcher = HttpUpstreamFetcher(base_url="https://http.cat", timeout=10.0)
        result = await fetcher.fetch("200")
        if result.is_ok:
            image = result.data
        await fetcher.close()
        ```
    """

    def __init__(
        self,
        base_url: str = "https://http.cat",
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the upstream fetcher.

        Args:
            base_url: Root URL of the upstream; the key is appended as one path segment.
            timeout: Request timeout in seconds.
            transport: Optional httpx transport (used by tests).
        """
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @classmethod
    def create(cls, settings: Settings) -> "HttpUpstreamFetcher":
        """Factory method to create HttpUpstreamFetcher from settings."""
        return cls(base_url=settings.upstream_base_url, timeout=settings.upstream_timeout)

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy-load the async HTTP client.

        Returns:
            The httpx.AsyncClient instance
        """
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                follow_redirects=True,
                transport=self._transport,
                headers={"Accept": "image/*,*/*;q=0.8"},
            )
        return self._client

    def url_for(self, key: str) -> str:
        """Build the upstream URL for a key, escaping only what a URL path cannot hold."""
        return f"{self._base_url}/{quote(key, safe=KEY_SAFE_CHARS)}"

    async def fetch(self, key: str) -> BlobResult:
        """Retrieve the bytes for ``key`` from upstream.

        Returns:
            OK with the body, NOT_FOUND, or ERROR
        """
        url = self.url_for(key)
        logger.info(f"[Upstream] Fetching: {url}")

        try:
            response = await self.client.get(url)
        except httpx.TimeoutException as e:
            logger.error(f"[Upstream] Timeout after {self._timeout}s: {url}")
            return BlobResult.failed(e)
        except httpx.HTTPError as e:
            logger.error(f"[Upstream] Request error for {url}: {e}")
            return BlobResult.failed(e)

        if response.status_code in NOT_FOUND_STATUSES:
            logger.info(f"[Upstream] Not found ({response.status_code}): {url}")
            return BlobResult.not_found()

        if not response.is_success:
            logger.error(f"[Upstream] HTTP error {response.status_code}: {url}")
            return BlobResult.failed(UnexpectedStatusError(url, response.status_code))

        logger.info(f"[Upstream] Fetched: {url} ({len(response.content)} bytes)")
        return BlobResult.ok(response.content)

    async def close(self) -> None:
        """Close the async HTTP client.

        Should be called when shutting down the application.
        """
        if self._client is not None:
            await self._client.aclose()
            self._client = None
