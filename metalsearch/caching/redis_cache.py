"""
Redis Cache Client
Byte-level Redis access shared by the query embedding cache and /status.
"""

import logging
from typing import Optional

import redis
from redis.connection import ConnectionPool

from ..api.config import get_settings, APISettings

logger = logging.getLogger(__name__)


class RedisCacheError(Exception):
    """Redis could not be reached."""


class RedisCache:
    """
    Pooled Redis client that never raises from get/set/ping.

    Failures are logged and reported as a miss (None) or False, so an
    unavailable Redis degrades to "no cache" instead of failing a search.
    """

    def __init__(self, settings: Optional[APISettings] = None, client: Optional[redis.Redis] = None):
        self.settings = settings or get_settings()
        self.client = client
        self.pool = None

        if client is None:
            self.pool = ConnectionPool(
                host=self.settings.redis_host,
                port=self.settings.redis_port,
                db=self.settings.redis_db,
                max_connections=20,
                socket_timeout=2,
                socket_connect_timeout=2,
            )
            logger.info(
                f"Redis pool configured for {self.settings.redis_host}:"
                f"{self.settings.redis_port}/{self.settings.redis_db}"
            )

    def _connect(self) -> redis.Redis:
        """
        Return the client, connecting on first use.

        Raises:
            RedisCacheError: If Redis does not answer PING
        """
        if self.client is not None:
            return self.client

        client = redis.Redis(connection_pool=self.pool)
        try:
            client.ping()
        except redis.RedisError as e:
            raise RedisCacheError(f"Redis unavailable: {e}") from e

        self.client = client
        return client

    def get(self, key: str) -> Optional[bytes]:
        """Raw value for key, or None on miss or error."""
        try:
            return self._connect().get(key)
        except (redis.RedisError, RedisCacheError) as e:
            logger.warning(f"Redis GET {key} failed: {e}")
            return None

    def set(self, key: str, value: bytes, ttl: Optional[int] = None) -> bool:
        """
        Store value under key.

        Args:
            key: Cache key
            value: Raw bytes
            ttl: Expiry in seconds; None keeps the key until evicted

        Returns:
            True if Redis accepted the write
        """
        try:
            client = self._connect()
            if ttl is None:
                client.set(key, value)
            else:
                client.setex(key, ttl, value)
        except (redis.RedisError, RedisCacheError) as e:
            logger.warning(f"Redis SET {key} failed: {e}")
            return False
        return True

    def ping(self) -> bool:
        try:
            return bool(self._connect().ping())
        except (redis.RedisError, RedisCacheError) as e:
            logger.error(f"Redis health check failed: {e}")
            return False


_redis_cache: Optional[RedisCache] = None


def get_redis_cache(settings: Optional[APISettings] = None) -> RedisCache:
    """Process-wide RedisCache."""
    global _redis_cache
    if _redis_cache is None:
        _redis_cache = RedisCache(settings=settings)
    return _redis_cache
