"""
Embedding Cache
Caches query embeddings in Redis so repeated queries skip the embedding API.
"""

import hashlib
import logging
from typing import Optional

import numpy as np

from ..api.config import get_settings, APISettings
from .redis_cache import RedisCache, get_redis_cache

logger = logging.getLogger(__name__)

# Embeddings are stored as raw little-endian float32 bytes
_DTYPE = np.dtype("<f4")


class EmbeddingCache:
    """
    Caches query embeddings in Redis with a TTL.

    Keys hash the model name with the normalized query text, so switching
    models never serves stale vectors. A cached value whose size does not
    match the configured dimension is treated as a miss.
    """

    QUERY_PREFIX = "embedding:query:"

    def __init__(
        self,
        settings: Optional[APISettings] = None,
        redis_cache: Optional[RedisCache] = None
    ):
        """
        Initialize embedding cache.

        Args:
            settings: API settings
            redis_cache: Redis cache client (uses global if not provided)
        """
        self.settings = settings or get_settings()
        self.redis = redis_cache or get_redis_cache(self.settings)
        self.ttl = self.settings.cache_ttl_embedding

    def _key(self, text: str, model: str) -> str:
        digest = hashlib.sha256(f"{model}|{text}".encode("utf-8")).hexdigest()
        return f"{self.QUERY_PREFIX}{digest}"

    def get_query_embedding(self, text: str, model: str) -> Optional[np.ndarray]:
        """
        Get cached query embedding.

        Returns:
            Embedding or None if not cached
        """
        data = self.redis.get(self._key(text, model))

        if data is None:
            logger.debug(f"Cache MISS for query '{text[:50]}'")
            return None

        expected_size = self.settings.embedding_dimension * _DTYPE.itemsize
        if len(data) != expected_size:
            logger.warning(
                f"Discarding cached embedding of {len(data)} bytes "
                f"(expected {expected_size})"
            )
            return None

        embedding = np.frombuffer(data, dtype=_DTYPE).astype(np.float32)

        logger.debug(f"Cache HIT for query '{text[:50]}'")
        return embedding

    def set_query_embedding(self, text: str, model: str, embedding: np.ndarray) -> bool:
        """Cache a query embedding. Returns True if stored."""
        data = np.asarray(embedding, dtype=_DTYPE).tobytes()
        return self.redis.set(self._key(text, model), data, ttl=self.ttl)
