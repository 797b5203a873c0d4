"""
Search Models
Pydantic models for the text and vector search endpoints.

Filter values are accepted loosely (strings or numbers) and parsed by the
search layer, so bad values produce descriptive 400 errors.
"""

from typing import Optional, List, Dict, Any, Union
from pydantic import BaseModel, ConfigDict, Field

RawNumber = Union[float, str]


class FilterParams(BaseModel):
    """Optional structured filters."""

    model_config = ConfigDict(populate_by_name=True)

    category: Optional[str] = Field(None, description="Product category, e.g. BARS")
    metal_type: Optional[str] = Field(None, alias="metalType", description="Metal, e.g. GOLD")
    min_price: Optional[RawNumber] = Field(None, alias="minPrice", description="Inclusive lower price bound")
    max_price: Optional[RawNumber] = Field(None, alias="maxPrice", description="Inclusive upper price bound")
    limit: Optional[Union[int, str]] = Field(None, description="Maximum number of results")

    def to_raw(self) -> Dict[str, Any]:
        """Raw values keyed by SearchFilters.from_params argument names."""
        return {
            "category": self.category,
            "metal_type": self.metal_type,
            "min_price": self.min_price,
            "max_price": self.max_price,
            "limit": self.limit,
        }


class TextSearchRequest(BaseModel):
    """
    Text search request body.

    The result limit travels inside filters.
    """

    query: Optional[str] = Field(None, max_length=500, description="Search query text")
    filters: FilterParams = Field(default_factory=FilterParams)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "query": "gold coin",
                "filters": {"category": "COINS", "maxPrice": 2500, "limit": 5},
            }
        }
    )


class VectorSearchRequest(BaseModel):
    """Vector search request body."""

    query: Optional[str] = Field(None, max_length=500, description="Search query text")
    filters: FilterParams = Field(default_factory=FilterParams)
    limit: Optional[Union[int, str]] = Field(None, description="Maximum number of results")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "query": "investment grade silver",
                "filters": {"metalType": "SILVER"},
                "limit": 5,
            }
        }
    )


class ProductResult(BaseModel):
    """
    Single product result.

    Carries relevanceScore (text search) or similarityScore (vector search).
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., description="Product ID (UUID)")
    name: str
    description: Optional[str] = None
    metal_type: Optional[str] = Field(None, alias="metalType")
    category: Optional[str] = None
    condition: Optional[str] = None
    weight: Optional[float] = None
    weight_unit: Optional[str] = Field(None, alias="weightUnit")
    purity: Optional[float] = None
    purity_level: Optional[str] = Field(None, alias="purityLevel")
    price: float
    currency: Optional[str] = None
    sku: Optional[str] = None
    stock_count: int = Field(..., alias="stockCount")
    in_stock: Optional[bool] = Field(None, alias="inStock")
    metadata: Dict[str, Any] = Field(default_factory=dict)
    mint: Optional[str] = None
    grade: Optional[str] = None
    jewelry_type: Optional[str] = Field(None, alias="jewelryType")

    # Relevance scores
    relevance_score: Optional[float] = Field(None, alias="relevanceScore")
    similarity_score: Optional[float] = Field(None, alias="similarityScore")


class SearchResponse(BaseModel):
    """
    Search response model.

    total is the number of returned results.
    """

    model_config = ConfigDict(populate_by_name=True)

    query: str = Field(..., description="Original search query")
    results: List[ProductResult] = Field(..., description="Ranked product results")
    filters: Dict[str, Any] = Field(..., description="Effective filters")
    total: int = Field(..., description="Number of results returned")
    search_type: str = Field(..., alias="searchType", description="text or vector_similarity")
