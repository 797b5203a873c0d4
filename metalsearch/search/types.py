"""
Search Types
Result containers shared by the search strategies and the facade.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional


class SearchStrategy(Enum):
    """Retrieval strategy selected by the caller."""

    TEXT = "text"
    VECTOR_SIMILARITY = "vector_similarity"


# Product columns returned by both strategies (everything except the embedding)
PRODUCT_FIELDS = (
    "id",
    "name",
    "description",
    "metal_type",
    "category",
    "condition",
    "weight",
    "weight_unit",
    "purity",
    "purity_level",
    "price",
    "currency",
    "sku",
    "stock_count",
    "in_stock",
    "product_metadata",
    "mint",
    "grade",
    "jewelry_type",
)


def _enum_value(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


@dataclass
class ProductHit:
    """
    A ranked product projection.

    Exactly one of relevance_score (text) or similarity_score (vector) is set.
    """

    id: str
    name: str
    description: Optional[str]
    price: float
    stock_count: int
    metal_type: Optional[str] = None
    category: Optional[str] = None
    condition: Optional[str] = None
    weight: Optional[float] = None
    weight_unit: Optional[str] = None
    purity: Optional[float] = None
    purity_level: Optional[str] = None
    currency: Optional[str] = None
    sku: Optional[str] = None
    in_stock: Optional[bool] = None
    metadata: Dict[str, Any] = field(default_factory=dict)
    mint: Optional[str] = None
    grade: Optional[str] = None
    jewelry_type: Optional[str] = None
    relevance_score: Optional[float] = None
    similarity_score: Optional[float] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any], score_field: str) -> "ProductHit":
        """
        Build a hit from a result row mapping.

        Args:
            row: Row mapping keyed by PRODUCT_FIELDS plus the score label
            score_field: Either "relevance_score" or "similarity_score"
        """
        values = {name: _enum_value(row[name]) for name in PRODUCT_FIELDS}
        values["id"] = str(values["id"])
        values["metadata"] = values.pop("product_metadata") or {}
        values["price"] = float(values["price"])

        score = row[score_field]
        values[score_field] = float(score) if score is not None else 0.0

        return cls(**values)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to camelCase dictionary for API responses."""
        data = {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "metalType": self.metal_type,
            "category": self.category,
            "condition": self.condition,
            "weight": self.weight,
            "weightUnit": self.weight_unit,
            "purity": self.purity,
            "purityLevel": self.purity_level,
            "price": self.price,
            "currency": self.currency,
            "sku": self.sku,
            "stockCount": self.stock_count,
            "inStock": self.in_stock,
            "metadata": self.metadata,
            "mint": self.mint,
            "grade": self.grade,
            "jewelryType": self.jewelry_type,
        }
        if self.relevance_score is not None:
            data["relevanceScore"] = self.relevance_score
        if self.similarity_score is not None:
            data["similarityScore"] = self.similarity_score
        return data


@dataclass
class SearchOutcome:
    """
    Search response envelope.

    total is the number of returned results, not a catalog-wide count.
    """

    query: str
    results: List[ProductHit]
    filters: Dict[str, Any]
    strategy: SearchStrategy

    @property
    def total(self) -> int:
        return len(self.results)

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "query": self.query,
            "results": [hit.to_dict() for hit in self.results],
            "filters": self.filters,
            "total": self.total,
            "searchType": self.strategy.value,
        }
