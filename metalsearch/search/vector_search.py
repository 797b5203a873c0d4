"""
Vector Search
Embedding similarity search over products using pgvector cosine distance.
"""

import logging
from typing import List, Optional

import numpy as np
from sqlalchemy import select
from sqlalchemy.orm import Session
from sqlalchemy.sql import Select

from ..db.models import Product
from .base import BaseSearchStrategy, product_columns
from .embeddings import EmbeddingClient
from .exceptions import EmbeddingUnavailable, ValidationError
from .filters import SearchFilters
from .types import ProductHit, SearchStrategy

logger = logging.getLogger(__name__)


class VectorSearchStrategy(BaseSearchStrategy):
    """
    Semantic search ranked by cosine similarity.

    Only products with a stored embedding are candidates. The query
    embedding is fetched before any SQL runs; if that fails the search is
    aborted with EmbeddingUnavailable.

    Ordering: similarity DESC, price ASC, id ASC.
    """

    strategy = SearchStrategy.VECTOR_SIMILARITY
    score_field = "similarity_score"

    def __init__(self, embedding_client: EmbeddingClient, threshold: Optional[float] = None):
        """
        Initialize vector search.

        Args:
            embedding_client: Client used to embed the query text
            threshold: Optional minimum similarity (exclusive); None keeps every match
        """
        self.embedding_client = embedding_client
        self.threshold = threshold

    def search(self, session: Session, query: str, filters: SearchFilters) -> List[ProductHit]:
        if query is None or not query.strip():
            raise ValidationError("Query is required", field="query")

        if filters.limit == 0:
            return []

        query = query.strip()
        query_embedding = self.embed_query(query)

        statement = self.build_statement(query_embedding, filters)
        return self._execute(session, statement, query)

    def embed_query(self, query: str) -> np.ndarray:
        """
        Get the query embedding.

        Raises:
            EmbeddingUnavailable: If the embedding client fails
        """
        try:
            return self.embedding_client.embed(query)
        except EmbeddingUnavailable:
            raise
        except Exception as e:
            logger.error(f"Failed to encode query '{query}': {e}", exc_info=True)
            raise EmbeddingUnavailable("Failed to encode search query") from e

    def build_statement(self, query_embedding: np.ndarray, filters: SearchFilters) -> Select:
        """
        Build the ranked SELECT for a query embedding.

        Args:
            query_embedding: Query vector
            filters: Parsed search filters

        Returns:
            SQLAlchemy Select
        """
        similarity_expr = 1 - Product.embedding.cosine_distance(query_embedding)
        similarity = similarity_expr.label(self.score_field)

        conditions = [Product.embedding.isnot(None), filters.to_predicate().clause()]
        if self.threshold is not None:
            conditions.append(similarity_expr > self.threshold)

        return (
            select(*product_columns(), similarity)
            .where(*conditions)
            .order_by(similarity.desc(), Product.price.asc(), Product.id.asc())
            .limit(filters.limit)
        )
