"""
Persistence adapters for the serialized cart.

An adapter stores one text blob under one key. ``load`` is called once when
a cart manager starts; ``save`` overwrites the blob after every successful
mutation.
"""
from typing import Optional, Protocol

from storecart.db import TTL, RedisKeys, get_redis
from storecart.logging import get_logger

logger = get_logger(__name__)


class CartStorage(Protocol):
    async def load(self) -> Optional[str]:
        ...

    async def save(self, data: str) -> None:
        ...


class RedisCartStorage:
    """Cart snapshot stored in Upstash Redis under ``cart:{owner}``."""

    def __init__(self, owner: str = "default", redis=None, ttl: int = TTL.CART):
        self.key = RedisKeys.cart_key(owner)
        self.ttl = ttl
        self._redis = redis  # Lazy initialization

    @property
    def redis(self):
        """Get Redis client (lazy initialization)."""
        if self._redis is None:
            try:
                self._redis = get_redis()
            except ValueError as e:
                raise ValueError(
                    f"Redis not available: {e}. Check UPSTASH_REDIS_REST_URL and "
                    "UPSTASH_REDIS_REST_TOKEN environment variables."
                )
        return self._redis

    async def load(self) -> Optional[str]:
        data = await self.redis.get(self.key)
        if data is None:
            return None
        if isinstance(data, bytes):
            return data.decode("utf-8")
        return data

    async def save(self, data: str) -> None:
        if self.ttl:
            await self.redis.set(self.key, data, ex=self.ttl)
        else:
            await self.redis.set(self.key, data)
        logger.debug(f"Saved cart snapshot to {self.key}")


class MemoryCartStorage:
    """Process-local storage. Used for tests and local runs without Redis."""

    def __init__(self, data: Optional[str] = None):
        self.data = data
        self.saves = 0

    async def load(self) -> Optional[str]:
        return self.data

    async def save(self, data: str) -> None:
        self.data = data
        self.saves += 1
