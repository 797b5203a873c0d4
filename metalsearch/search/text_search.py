"""
Text Search
PostgreSQL full-text search with a case-insensitive substring fallback.
"""

import logging

from sqlalchemy import cast, func, or_, select
from sqlalchemy.dialects.postgresql import REGCONFIG
from sqlalchemy.sql import Select

from ..db.models import Product
from .base import BaseSearchStrategy, product_columns
from .filters import SearchFilters
from .types import SearchStrategy

logger = logging.getLogger(__name__)

TEXT_SEARCH_CONFIG = "english"


def document_vector():
    """to_tsvector over name + description."""
    document = Product.name + " " + func.coalesce(Product.description, "")
    return func.to_tsvector(cast(TEXT_SEARCH_CONFIG, REGCONFIG), document)


def query_vector(query: str):
    return func.plainto_tsquery(cast(TEXT_SEARCH_CONFIG, REGCONFIG), query)


class TextSearchStrategy(BaseSearchStrategy):
    """
    Keyword search ranked by ts_rank.

    A product matches when the full-text query hits name + description, or
    when the query is a case-insensitive substring of the name or the
    description. Substring-only matches rank near zero, below full-text hits.

    Ordering: relevance DESC, price ASC, id ASC.
    """

    strategy = SearchStrategy.TEXT
    score_field = "relevance_score"

    def build_statement(self, query: str, filters: SearchFilters) -> Select:
        """
        Build the ranked SELECT for a text query.

        Args:
            query: Non-empty query text
            filters: Parsed search filters

        Returns:
            SQLAlchemy Select
        """
        document = document_vector()
        ts_query = query_vector(query)

        relevance = func.ts_rank(document, ts_query).label(self.score_field)

        matches = or_(
            document.bool_op("@@")(ts_query),
            Product.name.icontains(query, autoescape=True),
            Product.description.icontains(query, autoescape=True),
        )

        predicate = filters.to_predicate()

        return (
            select(*product_columns(), relevance)
            .where(matches, predicate.clause())
            .order_by(relevance.desc(), Product.price.asc(), Product.id.asc())
            .limit(filters.limit)
        )
