"""Redis client wrapper for cooldowns, pending verifications and job markers."""

import logging

import redis.asyncio as aioredis

from app.settings import settings

logger = logging.getLogger(__name__)


class RedisClient:
    """Redis client wrapper for async operations."""

    def __init__(self) -> None:
        """Initialize Redis client."""
        self._client: aioredis.Redis | None = None
        self._enabled: bool = settings.redis_enabled

    @property
    def is_connected(self) -> bool:
        return self._enabled and self._client is not None

    async def connect(self) -> None:
        """Connect to Redis."""
        if not self._enabled:
            logger.info("Redis disabled - skipping connection")
            return
        if self._client is None:
            try:
                self._client = aioredis.from_url(
                    settings.redis_url,
                    encoding="utf-8",
                    decode_responses=True,
                )
                await self._client.ping()
                logger.info("Redis connected successfully")
            except Exception as e:
                logger.warning(f"Redis connection failed: {e}. Continuing without Redis.")
                self._client = None
                self._enabled = False

    async def disconnect(self) -> None:
        """Disconnect from Redis."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def get(self, key: str) -> str | None:
        """Get value from Redis.

        Args:
            key: Redis key

        Returns:
            Value or None if not found
        """
        if not self.is_connected:
            return None
        return await self._client.get(key)

    async def set(self, key: str, value: str, ttl: int | None = None) -> bool:
        """Set value in Redis.

        Args:
            key: Redis key
            value: Value to set
            ttl: Optional time-to-live in seconds

        Returns:
            True if successful
        """
        if not self.is_connected:
            return False
        if ttl:
            return bool(await self._client.setex(key, ttl, value))
        return bool(await self._client.set(key, value))

    async def set_if_absent(self, key: str, value: str, ttl: int) -> bool:
        """Set value only if the key does not exist (SET NX EX).

        Returns:
            True if the key was set, False if it already existed
        """
        if not self.is_connected:
            return False
        return bool(await self._client.set(key, value, ex=ttl, nx=True))

    async def ttl(self, key: str) -> int | None:
        """Remaining time-to-live in seconds, or None if the key has no expiry or is missing."""
        if not self.is_connected:
            return None
        remaining = await self._client.ttl(key)
        return remaining if remaining >= 0 else None

    async def delete(self, key: str) -> int:
        """Delete key from Redis.

        Returns:
            Number of keys deleted
        """
        if not self.is_connected:
            return 0
        return await self._client.delete(key)


# Global Redis client instance
redis_client = RedisClient()
