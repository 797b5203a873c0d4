"""
Test doubles for the database session and the embedding service.
"""

import uuid
from decimal import Decimal
from typing import Any, List, Optional

import numpy as np

from metalsearch.db.models import MetalType, ProductCategory
from metalsearch.search import EmbeddingUnavailable

DIMENSION = 1536


class FakeResult:
    """Stands in for a SQLAlchemy Result."""

    def __init__(self, rows: List[Any]):
        self._rows = rows

    def mappings(self):
        return self

    def scalars(self):
        return self

    def scalar(self):
        return self._rows[0] if self._rows else None

    def all(self):
        return list(self._rows)


class FakeSession:
    """
    Records executed statements and returns canned rows.

    Enough of the Session API for the search strategies and the vector store.
    """

    def __init__(self, rows: Optional[List[Any]] = None, error: Optional[Exception] = None):
        self.rows = rows or []
        self.error = error
        self.executed = []
        self.added = []
        self.objects = {}
        self.commits = 0
        self.rollbacks = 0
        self.commit_error: Optional[Exception] = None

    def execute(self, statement, params=None):
        self.executed.append((statement, params))
        if self.error is not None:
            raise self.error
        return FakeResult(self.rows)

    def add(self, obj):
        self.added.append(obj)

    def commit(self):
        if self.commit_error is not None:
            raise self.commit_error
        self.commits += 1

    def rollback(self):
        self.rollbacks += 1

    def refresh(self, obj):
        # Mimic column defaults being loaded after INSERT
        if getattr(obj, "id", None) is None:
            obj.id = uuid.uuid4()
        self.objects[obj.id] = obj

    def get(self, model, key):
        return self.objects.get(key)

    def close(self):
        pass


class FakeEmbeddingClient:
    """Returns a fixed unit vector, or raises when configured to fail."""

    model = "test-embedding"

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.calls = []

    def embed(self, text: str) -> np.ndarray:
        self.calls.append(text)
        if self.fail:
            raise EmbeddingUnavailable("Embedding service timed out")
        vector = np.zeros(DIMENSION, dtype=np.float32)
        vector[0] = 1.0
        return vector


def make_product_row(
    name: str = "1 oz Gold American Eagle",
    price: float = 2150.0,
    stock_count: int = 10,
    score_field: str = "relevance_score",
    score: float = 0.5,
    **overrides,
) -> dict:
    """Build a result row mapping as returned by the search SELECT."""
    row = {
        "id": uuid.uuid4(),
        "name": name,
        "description": f"{name} bullion",
        "metal_type": MetalType.GOLD,
        "category": ProductCategory.COINS,
        "condition": None,
        "weight": 1.0,
        "weight_unit": None,
        "purity": 91.67,
        "purity_level": None,
        "price": Decimal(str(price)),
        "currency": None,
        "sku": None,
        "stock_count": stock_count,
        "in_stock": stock_count > 0,
        "product_metadata": {},
        "mint": "US_MINT",
        "grade": None,
        "jewelry_type": None,
        score_field: score,
    }
    row.update(overrides)
    return row
