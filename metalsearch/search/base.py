"""
Search Strategy Base
Shared projection and execution logic for the product search strategies.
"""

import logging
import time
from typing import List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.sql import Select

from ..db.models import Product
from .exceptions import ValidationError, PersistenceError
from .filters import SearchFilters
from .types import PRODUCT_FIELDS, ProductHit, SearchStrategy

logger = logging.getLogger(__name__)


def product_columns() -> list:
    """Product columns selected by every strategy (never the embedding)."""
    return [getattr(Product, name).label(name) for name in PRODUCT_FIELDS]


class BaseSearchStrategy:
    """
    Base class for product search strategies.

    Subclasses build a SELECT statement; this class validates input, runs the
    statement and converts rows to ProductHit objects.
    """

    strategy: SearchStrategy
    score_field: str

    def search(self, session: Session, query: str, filters: SearchFilters) -> List[ProductHit]:
        """
        Run the search.

        Args:
            session: Database session
            query: Free-text query
            filters: Parsed search filters (limit included)

        Returns:
            Ranked product hits, at most filters.limit

        Raises:
            ValidationError: If query is empty
            PersistenceError: If the database query fails
        """
        if query is None or not query.strip():
            raise ValidationError("Query is required", field="query")

        if filters.limit == 0:
            return []

        query = query.strip()
        statement = self.build_statement(query, filters)
        return self._execute(session, statement, query)

    def build_statement(self, query: str, filters: SearchFilters) -> Select:
        raise NotImplementedError

    def _execute(self, session: Session, statement: Select, query: str) -> List[ProductHit]:
        start_time = time.time()

        try:
            rows = session.execute(statement).mappings().all()
        except SQLAlchemyError as e:
            logger.error(
                f"{self.strategy.value} search query failed for '{query}': {e}",
                exc_info=True,
            )
            raise PersistenceError("Product search query failed") from e

        hits = [ProductHit.from_row(row, self.score_field) for row in rows]

        logger.info(
            f"{self.strategy.value} search: {len(hits)} results for '{query}' "
            f"in {(time.time() - start_time) * 1000:.2f}ms"
        )

        return hits
