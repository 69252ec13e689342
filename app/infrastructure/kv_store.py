"""Key-value store with per-key expiry.

Backs OTP resend cooldowns, pending verifications and follow-up sent
markers. Uses Redis when enabled and connected (shared across instances),
otherwise an in-memory store for development/single instance deployments.
"""

import asyncio
import json
import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Callable

from app.infrastructure.redis import RedisClient, redis_client

logger = logging.getLogger(__name__)


class TtlStore(ABC):
    """Key-value store whose entries expire."""

    @abstractmethod
    async def get(self, key: str) -> str | None:
        """Return the value for key, or None if missing or expired."""
        pass

    @abstractmethod
    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        """Store value under key for ttl_seconds."""
        pass

    @abstractmethod
    async def set_if_absent(self, key: str, value: str, ttl_seconds: int) -> bool:
        """Store value only when key is missing or expired.

        Returns:
            True if stored, False if a live entry already existed
        """
        pass

    @abstractmethod
    async def remaining_ttl(self, key: str) -> int | None:
        """Seconds until key expires, or None if missing."""
        pass

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove key if present."""
        pass

    async def get_json(self, key: str) -> dict[str, Any] | None:
        value = await self.get(key)
        if value is None:
            return None
        return json.loads(value)

    async def set_json(self, key: str, value: dict[str, Any], ttl_seconds: int) -> None:
        await self.set(key, json.dumps(value), ttl_seconds)


class InMemoryTtlStore(TtlStore):
    """In-process store for development/single instance deployments."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        # Structure: {key: (value, expires_at)}
        self._entries: dict[str, tuple[str, float]] = {}
        self._lock = asyncio.Lock()
        self._clock = clock

    def _live(self, key: str, now: float) -> tuple[str, float] | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry[1] <= now:
            del self._entries[key]
            return None
        return entry

    async def get(self, key: str) -> str | None:
        async with self._lock:
            entry = self._live(key, self._clock())
            return entry[0] if entry else None

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        async with self._lock:
            self._entries[key] = (value, self._clock() + ttl_seconds)

    async def set_if_absent(self, key: str, value: str, ttl_seconds: int) -> bool:
        async with self._lock:
            now = self._clock()
            if self._live(key, now) is not None:
                return False
            self._entries[key] = (value, now + ttl_seconds)
            return True

    async def remaining_ttl(self, key: str) -> int | None:
        async with self._lock:
            now = self._clock()
            entry = self._live(key, now)
            if entry is None:
                return None
            # Round up so a live entry never reports 0 seconds left
            return max(1, int(entry[1] - now + 0.999))

    async def delete(self, key: str) -> None:
        async with self._lock:
            self._entries.pop(key, None)


class RedisTtlStore(TtlStore):
    """Redis-backed store for distributed deployments."""

    def __init__(self, client: RedisClient) -> None:
        self._client = client

    async def get(self, key: str) -> str | None:
        return await self._client.get(key)

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        await self._client.set(key, value, ttl=ttl_seconds)

    async def set_if_absent(self, key: str, value: str, ttl_seconds: int) -> bool:
        return await self._client.set_if_absent(key, value, ttl_seconds)

    async def remaining_ttl(self, key: str) -> int | None:
        return await self._client.ttl(key)

    async def delete(self, key: str) -> None:
        await self._client.delete(key)


# Global store instances
_in_memory_store = InMemoryTtlStore()
_redis_store = RedisTtlStore(redis_client)


def get_ttl_store() -> TtlStore:
    """Return the Redis store when connected, otherwise the in-memory store."""
    if redis_client.is_connected:
        return _redis_store
    return _in_memory_store
