"""
Embedding Client
Converts query text to embeddings using the OpenAI embeddings API.
"""

import logging
from typing import Optional

import numpy as np
import requests

from ..api.config import get_settings, APISettings
from ..caching import EmbeddingCache
from ..db.vectors import as_embedding
from .exceptions import EmbeddingUnavailable

logger = logging.getLogger(__name__)


class EmbeddingClient:
    """
    Client for the external embedding service.

    Any transport, HTTP or payload problem surfaces as EmbeddingUnavailable;
    nothing is retried.
    """

    def __init__(
        self,
        settings: Optional[APISettings] = None,
        http: Optional[requests.Session] = None,
        cache: Optional[EmbeddingCache] = None,
    ):
        """
        Initialize embedding client.

        Args:
            settings: API settings
            http: HTTP session (a new one is created if not provided)
            cache: Optional query embedding cache
        """
        self.settings = settings or get_settings()
        self.http = http or requests.Session()
        self.cache = cache
        self.model = self.settings.embedding_model
        self.dimension = self.settings.embedding_dimension

        logger.info(
            f"Embedding client initialized: model={self.model}, "
            f"dimension={self.dimension}, cache={'on' if cache else 'off'}"
        )

    def embed(self, text: str) -> np.ndarray:
        """
        Encode text to an embedding vector.

        Args:
            text: Text to embed

        Returns:
            Embedding vector of `dimension` floats

        Raises:
            ValueError: If text is empty
            EmbeddingUnavailable: If the service fails or returns a bad payload
        """
        if not text or not text.strip():
            raise ValueError("Text cannot be empty")

        cleaned = self._preprocess(text)

        if self.cache is not None:
            cached = self.cache.get_query_embedding(cleaned, self.model)
            if cached is not None:
                return cached

        embedding = self._request_embedding(cleaned)

        if self.cache is not None:
            self.cache.set_query_embedding(cleaned, self.model, embedding)

        return embedding

    def _request_embedding(self, text: str) -> np.ndarray:
        if not self.settings.openai_api_key:
            raise EmbeddingUnavailable("Embedding service is not configured (OPENAI_API_KEY unset)")

        try:
            response = self.http.post(
                self.settings.embedding_api_url,
                headers={"Authorization": f"Bearer {self.settings.openai_api_key}"},
                json={"model": self.model, "input": text},
                timeout=self.settings.embedding_timeout,
            )
            response.raise_for_status()
            payload = response.json()
        except requests.Timeout as e:
            logger.error(f"Embedding request timed out after {self.settings.embedding_timeout}s")
            raise EmbeddingUnavailable("Embedding service timed out") from e
        except requests.RequestException as e:
            logger.error(f"Embedding request failed: {e}")
            raise EmbeddingUnavailable("Embedding service request failed") from e
        except ValueError as e:
            logger.error(f"Embedding service returned invalid JSON: {e}")
            raise EmbeddingUnavailable("Embedding service returned an invalid response") from e

        try:
            values = payload["data"][0]["embedding"]
            embedding = as_embedding(values, self.dimension)
        except (KeyError, IndexError, TypeError, ValueError) as e:
            logger.error(f"Unexpected embedding payload: {e}")
            raise EmbeddingUnavailable("Embedding service returned an invalid response") from e

        logger.debug(f"Encoded text: '{text[:50]}' -> {embedding.shape[0]} dims")

        return embedding

    @staticmethod
    def _preprocess(text: str) -> str:
        """Collapse whitespace."""
        return " ".join(text.split())


# Singleton instance
_embedding_client: Optional[EmbeddingClient] = None


def get_embedding_client() -> EmbeddingClient:
    """Get global embedding client instance."""
    global _embedding_client
    if _embedding_client is None:
        settings = get_settings()
        cache = EmbeddingCache(settings) if settings.enable_embedding_cache else None
        _embedding_client = EmbeddingClient(settings=settings, cache=cache)
    return _embedding_client
