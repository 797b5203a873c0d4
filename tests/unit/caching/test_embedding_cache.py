"""
Tests for the Redis-backed caches.
"""

from unittest.mock import MagicMock

import numpy as np
import redis
import requests

from metalsearch.api.config import APISettings
from metalsearch.caching import EmbeddingCache, RedisCache
from metalsearch.search import EmbeddingClient, SearchService, SearchStrategy
from tests.fakes import FakeSession


def test_redis_cache_set_with_ttl(settings):
    client = MagicMock()
    cache = RedisCache(settings=settings, client=client)

    assert cache.set("k", b"value", ttl=60) is True
    client.setex.assert_called_once_with("k", 60, b"value")

    assert cache.set("k", b"value") is True
    client.set.assert_called_once_with("k", b"value")


def test_redis_cache_get(settings):
    client = MagicMock()
    client.get.return_value = b"value"
    cache = RedisCache(settings=settings, client=client)

    assert cache.get("k") == b"value"


def test_redis_cache_errors_are_misses(settings):
    client = MagicMock()
    client.get.side_effect = redis.ConnectionError("down")
    client.setex.side_effect = redis.ConnectionError("down")
    client.ping.side_effect = redis.ConnectionError("down")
    cache = RedisCache(settings=settings, client=client)

    assert cache.get("k") is None
    assert cache.set("k", b"1", ttl=5) is False
    assert cache.ping() is False


def test_embedding_cache_keys_by_model_and_text(settings):
    redis_cache = MagicMock()
    cache = EmbeddingCache(settings=settings, redis_cache=redis_cache)

    cache.set_query_embedding("gold coin", "model-a", np.ones(4, dtype=np.float32))
    cache.set_query_embedding("gold coin", "model-b", np.ones(4, dtype=np.float32))

    key_a = redis_cache.set.call_args_list[0][0][0]
    key_b = redis_cache.set.call_args_list[1][0][0]
    assert key_a.startswith(EmbeddingCache.QUERY_PREFIX)
    assert key_a != key_b
    assert redis_cache.set.call_args_list[0][1]["ttl"] == settings.cache_ttl_embedding


def test_embedding_cache_stores_float32_bytes(settings):
    redis_cache = MagicMock()
    cache = EmbeddingCache(settings=settings, redis_cache=redis_cache)
    embedding = np.linspace(-1, 1, 1536, dtype=np.float32)

    cache.set_query_embedding("silver", "model-a", embedding)
    stored = redis_cache.set.call_args[0][1]
    redis_cache.get.return_value = stored

    cached = cache.get_query_embedding("silver", "model-a")

    assert len(stored) == 1536 * 4
    assert cached.dtype == np.float32
    assert np.array_equal(cached, embedding)


def test_embedding_cache_miss_and_wrong_size():
    settings = APISettings(_env_file=None, embedding_dimension=4)
    redis_cache = MagicMock()
    cache = EmbeddingCache(settings=settings, redis_cache=redis_cache)

    redis_cache.get.return_value = None
    assert cache.get_query_embedding("silver", "model-a") is None

    redis_cache.get.return_value = np.ones(3, dtype=np.float32).tobytes()
    assert cache.get_query_embedding("silver", "model-a") is None


def test_embedding_cache_truncated_value_is_a_miss(settings):
    redis_cache = MagicMock()
    redis_cache.get.return_value = b"\x00\x01\x02"
    cache = EmbeddingCache(settings=settings, redis_cache=redis_cache)

    assert cache.get_query_embedding("silver", "model-a") is None


def test_corrupt_cached_value_falls_back_to_embedding_api(settings):
    redis_cache = MagicMock()
    redis_cache.get.return_value = b"\x00\x01\x02"
    http = MagicMock(spec=requests.Session)
    http.post.return_value.json.return_value = {"data": [{"embedding": [0.01] * 1536}]}
    client = EmbeddingClient(
        settings=settings,
        http=http,
        cache=EmbeddingCache(settings=settings, redis_cache=redis_cache),
    )
    service = SearchService(embedding_client=client, settings=settings)

    outcome = service.search(FakeSession(), "gold bar", SearchStrategy.VECTOR_SIMILARITY)

    assert outcome.results == []
    http.post.assert_called_once()
    redis_cache.set.assert_called_once()
