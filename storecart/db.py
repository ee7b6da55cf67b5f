"""
Redis client for cart persistence.

Provides a singleton Upstash Redis async client plus the key layout and TTL
constants used by the cart storage adapter.
"""

from typing import Optional

from upstash_redis.asyncio import Redis as AsyncRedis

from storecart import config

# Singleton instance
_redis_client: Optional[AsyncRedis] = None


def get_redis() -> AsyncRedis:
    """
    Get async Upstash Redis client (singleton).

    Uses standard Upstash env var names:
    - UPSTASH_REDIS_REST_URL
    - UPSTASH_REDIS_REST_TOKEN
    """
    global _redis_client

    if _redis_client is None:
        if not config.UPSTASH_REDIS_REST_URL or not config.UPSTASH_REDIS_REST_TOKEN:
            raise ValueError("UPSTASH_REDIS_REST_URL and UPSTASH_REDIS_REST_TOKEN must be set")
        _redis_client = AsyncRedis(
            url=config.UPSTASH_REDIS_REST_URL,
            token=config.UPSTASH_REDIS_REST_TOKEN,
        )

    return _redis_client


class RedisKeys:
    """Redis key prefixes."""

    CART = "cart:"  # cart:{owner}

    @staticmethod
    def cart_key(owner: str) -> str:
        return f"{RedisKeys.CART}{owner}"


class TTL:
    """Time-to-live constants for Redis keys (seconds, 0 = no expiry)."""

    CART = config.CART_TTL
