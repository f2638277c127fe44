"""
Redis client for cart persistence.

Provides a singleton synchronous Upstash Redis client. The cart slot is
written from synchronous code paths (remove is not a coroutine), so the
sync client is the one the store uses.
"""

from typing import Optional

from upstash_redis import Redis

from cartstore.config import Settings, load_settings

_redis_client: Optional[Redis] = None


def get_redis_sync(settings: Settings | None = None) -> Redis:
    """
    Get sync Upstash Redis client (singleton).

    Uses standard Upstash env var names:
    - UPSTASH_REDIS_REST_URL
    - UPSTASH_REDIS_REST_TOKEN
    """
    global _redis_client

    if _redis_client is None:
        settings = settings or load_settings()
        if not settings.use_redis:
            raise ValueError("UPSTASH_REDIS_REST_URL and UPSTASH_REDIS_REST_TOKEN must be set")
        _redis_client = Redis(url=settings.redis_url, token=settings.redis_token)

    return _redis_client


class RedisKeys:
    """Redis key prefixes for different data types."""

    CART = "cart:"  # cart:{storage_key}

    @staticmethod
    def cart_key(storage_key: str) -> str:
        return f"{RedisKeys.CART}{storage_key}"
