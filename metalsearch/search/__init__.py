"""
Search Module
Hybrid keyword / vector product search and the generic embedding store.
"""

from .exceptions import (
    SearchServiceError,
    ValidationError,
    InvalidFilter,
    EmbeddingUnavailable,
    PersistenceError,
)
from .types import SearchStrategy, ProductHit, SearchOutcome
from .filters import SearchFilters, ProductFilter, FilterOperator, FilterPredicate
from .embeddings import EmbeddingClient, get_embedding_client
from .text_search import TextSearchStrategy
from .vector_search import VectorSearchStrategy
from .search_service import SearchService
from .vector_store import VectorStore, VectorSearchResult

__all__ = [
    "SearchServiceError",
    "ValidationError",
    "InvalidFilter",
    "EmbeddingUnavailable",
    "PersistenceError",
    "SearchStrategy",
    "ProductHit",
    "SearchOutcome",
    "SearchFilters",
    "ProductFilter",
    "FilterOperator",
    "FilterPredicate",
    "EmbeddingClient",
    "get_embedding_client",
    "TextSearchStrategy",
    "VectorSearchStrategy",
    "SearchService",
    "VectorStore",
    "VectorSearchResult",
]
