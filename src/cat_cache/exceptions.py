"""Exception types raised inside collaborators.

These never cross the service boundary: repositories and the upstream
fetcher wrap them in ``BlobResult.failed(...)``.
"""


class CatCacheError(Exception):
    """Base class for cat_cache errors."""


class InvalidKeyError(CatCacheError):
    """The storage backend cannot address the given key."""

    def __init__(self, key: str, reason: str) -> None:
        super().__init__(f"Invalid cache key {key!r}: {reason}")
        self.key = key
        self.reason = reason


class UnexpectedStatusError(CatCacheError):
    """Upstream answered with a status that is neither success nor not-found."""

    def __init__(self, url: str, status_code: int) -> None:
        super().__init__(f"Upstream returned HTTP {status_code} for {url}")
        self.url = url
        self.status_code = status_code
