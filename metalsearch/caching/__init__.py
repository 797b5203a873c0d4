"""
Caching Module
Redis-based caching for query embeddings.
"""

from .redis_cache import RedisCache, RedisCacheError, get_redis_cache
from .embedding_cache import EmbeddingCache

__all__ = [
    "RedisCache",
    "RedisCacheError",
    "get_redis_cache",
    "EmbeddingCache",
]
