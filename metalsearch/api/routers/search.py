"""
Search Endpoints
GET/POST /search/text   - Full-text product search
GET/POST /search/vector - Embedding similarity product search
"""

import logging
import time
from typing import Any, Dict, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ..dependencies import get_db, get_search_service, get_request_id
from ..errors import InvalidRequestError, SearchError
from ..models.search import SearchResponse, TextSearchRequest, VectorSearchRequest
from ...search import (
    SearchService,
    SearchStrategy,
    ValidationError,
    EmbeddingUnavailable,
    PersistenceError,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/search", tags=["search"])

QUERY_PARAM_REQUIRED = 'Query parameter "q" is required'
QUERY_REQUIRED = "Query is required"
TEXT_SEARCH_FAILED = "Failed to search products"
VECTOR_SEARCH_FAILED = "Failed to perform vector search"


def _run_search(
    service: SearchService,
    db: Session,
    query: Optional[str],
    strategy: SearchStrategy,
    raw_filters: Dict[str, Any],
    missing_query_message: str,
    failure_message: str,
    request_id: str,
) -> SearchResponse:
    """
    Run a search and translate search-layer errors into API errors.

    Validation problems become 400s; embedding and database failures become
    500s with a generic message (details are logged, not returned).
    """
    start_time = time.time()

    try:
        outcome = service.search(db, query, strategy, raw_filters)
    except ValidationError as e:
        message = missing_query_message if e.field == "query" else e.message
        raise InvalidRequestError(message, details={"field": e.field, "request_id": request_id})
    except (EmbeddingUnavailable, PersistenceError) as e:
        raise SearchError(
            failure_message,
            details={"error": e.message, "query": query, "request_id": request_id},
        )

    logger.info(
        f"{strategy.value} search completed: {outcome.total} results in "
        f"{(time.time() - start_time) * 1000:.2f}ms",
        extra={"request_id": request_id},
    )

    return SearchResponse(**outcome.to_dict())


@router.get(
    "/text",
    response_model=SearchResponse,
    response_model_exclude_unset=True,
    status_code=status.HTTP_200_OK,
)
def text_search_get(
    q: Optional[str] = Query(None, max_length=500, description="Search query text"),
    limit: Optional[str] = Query(None, description="Maximum number of results (default 5)"),
    category: Optional[str] = Query(None),
    metal_type: Optional[str] = Query(None, alias="metalType"),
    min_price: Optional[str] = Query(None, alias="minPrice"),
    max_price: Optional[str] = Query(None, alias="maxPrice"),
    db: Session = Depends(get_db),
    search_service: SearchService = Depends(get_search_service),
    request_id: str = Depends(get_request_id),
) -> SearchResponse:
    """
    Search products by keyword.

    Ranks by full-text relevance, then price ascending. Out-of-stock
    products are never returned.
    """
    raw_filters = {
        "category": category,
        "metal_type": metal_type,
        "min_price": min_price,
        "max_price": max_price,
        "limit": limit,
    }
    return _run_search(
        search_service, db, q, SearchStrategy.TEXT, raw_filters,
        QUERY_PARAM_REQUIRED, TEXT_SEARCH_FAILED, request_id,
    )


@router.post(
    "/text",
    response_model=SearchResponse,
    response_model_exclude_unset=True,
    status_code=status.HTTP_200_OK,
)
def text_search_post(
    request: TextSearchRequest,
    db: Session = Depends(get_db),
    search_service: SearchService = Depends(get_search_service),
    request_id: str = Depends(get_request_id),
) -> SearchResponse:
    """Search products by keyword (JSON body variant)."""
    return _run_search(
        search_service, db, request.query, SearchStrategy.TEXT, request.filters.to_raw(),
        QUERY_REQUIRED, TEXT_SEARCH_FAILED, request_id,
    )


@router.get(
    "/vector",
    response_model=SearchResponse,
    response_model_exclude_unset=True,
    status_code=status.HTTP_200_OK,
)
def vector_search_get(
    q: Optional[str] = Query(None, max_length=500, description="Search query text"),
    limit: Optional[str] = Query(None, description="Maximum number of results (default 5)"),
    category: Optional[str] = Query(None),
    metal_type: Optional[str] = Query(None, alias="metalType"),
    min_price: Optional[str] = Query(None, alias="minPrice"),
    max_price: Optional[str] = Query(None, alias="maxPrice"),
    db: Session = Depends(get_db),
    search_service: SearchService = Depends(get_search_service),
    request_id: str = Depends(get_request_id),
) -> SearchResponse:
    """
    Search products by embedding similarity.

    Ranks by cosine similarity, then price ascending. Products without an
    embedding are never returned.
    """
    raw_filters = {
        "category": category,
        "metal_type": metal_type,
        "min_price": min_price,
        "max_price": max_price,
        "limit": limit,
    }
    return _run_search(
        search_service, db, q, SearchStrategy.VECTOR_SIMILARITY, raw_filters,
        QUERY_PARAM_REQUIRED, VECTOR_SEARCH_FAILED, request_id,
    )


@router.post(
    "/vector",
    response_model=SearchResponse,
    response_model_exclude_unset=True,
    status_code=status.HTTP_200_OK,
)
def vector_search_post(
    request: VectorSearchRequest,
    db: Session = Depends(get_db),
    search_service: SearchService = Depends(get_search_service),
    request_id: str = Depends(get_request_id),
) -> SearchResponse:
    """Search products by embedding similarity (JSON body variant)."""
    raw_filters = request.filters.to_raw()
    if request.limit is not None:
        raw_filters["limit"] = request.limit

    return _run_search(
        search_service, db, request.query, SearchStrategy.VECTOR_SIMILARITY, raw_filters,
        QUERY_REQUIRED, VECTOR_SEARCH_FAILED, request_id,
    )
