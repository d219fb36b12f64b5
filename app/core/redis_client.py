"""Redis client configuration and cache helpers."""

import json
from typing import Any, cast

import redis
import structlog

from app.config import settings

logger = structlog.get_logger()

# Global Redis client instance
_redis_client: redis.Redis | None = None


def get_redis_client() -> redis.Redis:
    """
    Get or create Redis client instance.

    Returns:
        Redis client instance
    """
    global _redis_client

    if _redis_client is None:
        _redis_client = redis.Redis(
            host=settings.redis_host,
            port=settings.redis_port,
            username=settings.redis_username,
            password=settings.redis_password,
            decode_responses=settings.redis_decode_responses,
            socket_connect_timeout=5,
            socket_keepalive=True,
            health_check_interval=30,
        )

    return _redis_client


async def check_redis_connection() -> bool:
    """Check if Redis connection is healthy."""
    try:
        client = get_redis_client()
        client.ping()
        return True
    except Exception:
        return False


def close_redis_connection() -> None:
    """Close Redis connection."""
    global _redis_client

    if _redis_client is not None:
        _redis_client.close()
        _redis_client = None


class CacheManager:
    """
    Redis-based cache manager.

    Every key is stored under the ``pharmacare:`` namespace. Redis failures
    never break a request: reads fall back to a miss and writes report
    ``False``.
    """

    NAMESPACE = "pharmacare"

    def __init__(self, redis_client: redis.Redis):
        """Initialize cache manager with Redis client."""
        self.redis = redis_client

    def _key(self, key: str) -> str:
        return f"{self.NAMESPACE}:{key}"

    def get(self, key: str) -> str | None:
        """Get value from cache."""
        try:
            return cast(str | None, self.redis.get(self._key(key)))
        except Exception as e:
            logger.warning("cache_get_failed", key=key, error=str(e))
            return None

    def set(self, key: str, value: str, ttl: int | None = None) -> bool:
        """
        Set value in cache.

        Args:
            key: Cache key
            value: Value to cache
            ttl: Time to live in seconds

        Returns:
            True if successful, False otherwise
        """
        try:
            if ttl:
                self.redis.setex(self._key(key), ttl, value)
            else:
                self.redis.set(self._key(key), value)
            return True
        except Exception as e:
            logger.warning("cache_set_failed", key=key, error=str(e))
            return False

    def delete(self, key: str) -> bool:
        """Delete key from cache."""
        try:
            self.redis.delete(self._key(key))
            return True
        except Exception as e:
            logger.warning("cache_delete_failed", key=key, error=str(e))
            return False

    def exists(self, key: str) -> bool:
        """Check if key exists in cache."""
        try:
            return bool(self.redis.exists(self._key(key)))
        except Exception as e:
            logger.warning("cache_exists_failed", key=key, error=str(e))
            return False

    def get_json(self, key: str) -> Any | None:
        """Get JSON value from cache and deserialize."""
        value = self.get(key)
        if not value:
            return None
        try:
            return json.loads(value)
        except (TypeError, ValueError):
            return None

    def set_json(self, key: str, value: Any, ttl: int | None = None) -> bool:
        """Serialize and set JSON value in cache."""
        return self.set(key, json.dumps(value, default=str), ttl=ttl)
