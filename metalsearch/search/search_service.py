"""
Search Service
Single entry point for product search: validates input, picks a strategy and
builds the response envelope.
"""

import logging
import time
from typing import Dict, Optional, Union

from sqlalchemy.orm import Session

from ..api.config import get_settings, APISettings
from .embeddings import EmbeddingClient
from .exceptions import ValidationError
from .filters import SearchFilters
from .text_search import TextSearchStrategy
from .types import SearchOutcome, SearchStrategy
from .vector_search import VectorSearchStrategy
from .base import BaseSearchStrategy

logger = logging.getLogger(__name__)


class SearchService:
    """
    Product search facade.

    The caller always names the strategy; nothing is inferred from the query.
    """

    def __init__(
        self,
        embedding_client: EmbeddingClient,
        settings: Optional[APISettings] = None,
    ):
        """
        Initialize search service.

        Args:
            embedding_client: Client for query embeddings (vector strategy)
            settings: API settings
        """
        self.settings = settings or get_settings()

        self.strategies: Dict[SearchStrategy, BaseSearchStrategy] = {
            SearchStrategy.TEXT: TextSearchStrategy(),
            SearchStrategy.VECTOR_SIMILARITY: VectorSearchStrategy(
                embedding_client=embedding_client,
                threshold=self.settings.vector_search_threshold,
            ),
        }

    def search(
        self,
        session: Session,
        query: Optional[str],
        strategy: SearchStrategy,
        filters: Union[SearchFilters, dict, None] = None,
    ) -> SearchOutcome:
        """
        Execute a product search.

        Args:
            session: Database session
            query: Free-text query (required, non-blank)
            strategy: Retrieval strategy
            filters: Parsed SearchFilters, or a dict of raw values for
                SearchFilters.from_params

        Returns:
            Search outcome envelope

        Raises:
            ValidationError: If the query is missing or a filter is invalid
            EmbeddingUnavailable: If the vector strategy cannot embed the query
            PersistenceError: If the database query fails
        """
        start_time = time.time()

        if query is None or not str(query).strip():
            raise ValidationError("Query is required", field="query")
        # Match on the trimmed text; the envelope echoes what the caller sent
        search_text = str(query).strip()

        search_filters = self.normalize_filters(filters)

        logger.info(
            f"Search request: strategy={strategy.value}, query='{search_text}', "
            f"filters={search_filters.to_dict()}"
        )

        results = self.strategies[strategy].search(session, search_text, search_filters)

        search_time_ms = (time.time() - start_time) * 1000
        logger.info(
            f"Search completed: strategy={strategy.value}, results={len(results)}, "
            f"time={search_time_ms:.2f}ms"
        )

        return SearchOutcome(
            query=query,
            results=results,
            filters=search_filters.to_dict(),
            strategy=strategy,
        )

    def normalize_filters(self, filters: Union[SearchFilters, dict, None]) -> SearchFilters:
        """
        Parse raw filters and apply the configured limit default and ceiling.

        Raises:
            InvalidFilter: If a filter value cannot be parsed
        """
        if filters is None:
            filters = {}

        if isinstance(filters, dict):
            search_filters = SearchFilters.from_params(
                default_limit=self.settings.default_search_limit, **filters
            )
        else:
            search_filters = filters

        ceiling = self.settings.max_search_limit
        if search_filters.limit > ceiling:
            logger.warning(f"Requested limit {search_filters.limit} clamped to {ceiling}")
            search_filters = search_filters.with_limit(ceiling)

        return search_filters
