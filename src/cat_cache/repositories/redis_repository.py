"""Redis implementation of BlobStore.

Entries are plain string keys ``<prefix>:<key>`` holding the raw bytes.
``SET`` replaces the whole value in one step, so partial entries are never
visible.
"""

import logging

import redis
import redis.asyncio as aioredis

from cat_cache.config import Settings
from cat_cache.entities import BlobResult

logger = logging.getLogger(__name__)


def get_redis_client(settings: Settings) -> aioredis.Redis:
    """Create an async Redis client instance."""
    return aioredis.from_url(
        settings.redis_url,
        password=settings.redis_password,
        decode_responses=False,
    )


class RedisBlobRepository:
    """Redis-backed entry storage.

    This class satisfies the BlobStore protocol through structural
    typing - no explicit inheritance needed.
    """

    def __init__(self, redis_client: aioredis.Redis, key_prefix: str = "cat_cache") -> None:
        """Initialize the Redis repository.

        Args:
            redis_client: Async Redis client instance.
            key_prefix: Namespace prepended to every cache key.
        """
        self._client = redis_client
        self._prefix = key_prefix

    @classmethod
    def create(cls, settings: Settings) -> "RedisBlobRepository":
        """Factory method to create RedisBlobRepository from settings.

        Args:
            settings: Application settings.

        Returns:
            Configured RedisBlobRepository
        """
        return cls(redis_client=get_redis_client(settings), key_prefix=settings.redis_key_prefix)

    def _redis_key(self, key: str) -> str:
        return f"{self._prefix}:{key}"

    async def get(self, key: str) -> BlobResult:
        """Read an entry from Redis."""
        try:
            data = await self._client.get(self._redis_key(key))
        except redis.RedisError as e:
            return BlobResult.failed(e)
        if data is None:
            return BlobResult.not_found()
        return BlobResult.ok(bytes(data))

    async def put(self, key: str, data: bytes) -> BlobResult:
        """Write an entry to Redis, replacing any existing value."""
        try:
            await self._client.set(self._redis_key(key), data)
        except redis.RedisError as e:
            return BlobResult.failed(e)
        return BlobResult.ok()

    async def delete(self, key: str) -> BlobResult:
        """Delete an entry from Redis."""
        try:
            deleted: int = await self._client.delete(self._redis_key(key))
        except redis.RedisError as e:
            return BlobResult.failed(e)
        if deleted == 0:
            return BlobResult.not_found()
        return BlobResult.ok()

    async def count_all(self) -> int:
        """Count entries under this repository's prefix."""
        count = 0
        async for _ in self._client.scan_iter(match=f"{self._prefix}:*"):
            count += 1
        return count

    async def health_check(self) -> bool:
        """Check if Redis is accessible.

        Returns:
            True if healthy, False otherwise
        """
        try:
            return bool(await self._client.ping())
        except redis.RedisError:
            return False

    async def get_stats(self) -> dict:
        """Get repository statistics."""
        try:
            total = await self.count_all()
        except redis.RedisError as e:
            logger.warning(f"[RedisStore] Could not count entries: {e}")
            total = -1
        return {
            "backend": "redis",
            "key_prefix": self._prefix,
            "total_entries": total,
        }

    async def close(self) -> None:
        """Close the Redis connection pool."""
        await self._client.aclose()

    @property
    def client(self) -> aioredis.Redis:
        """Get the Redis client."""
        return self._client
