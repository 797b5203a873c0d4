"""
Pydantic Models
Request/response models for API endpoints.
"""

from .search import (
    FilterParams,
    TextSearchRequest,
    VectorSearchRequest,
    ProductResult,
    SearchResponse,
)
from .vector import (
    VectorAction,
    StoreAction,
    SearchAction,
    StoreMessageAction,
    GetHistoryAction,
    CreateSessionAction,
    VectorResponse,
    vector_action_adapter,
)

__all__ = [
    "FilterParams",
    "TextSearchRequest",
    "VectorSearchRequest",
    "ProductResult",
    "SearchResponse",
    "VectorAction",
    "StoreAction",
    "SearchAction",
    "StoreMessageAction",
    "GetHistoryAction",
    "CreateSessionAction",
    "VectorResponse",
    "vector_action_adapter",
]
