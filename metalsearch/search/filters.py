"""
Product Filtering
Parse caller-supplied filters and build parameterized SQL predicates.
"""

import logging
import math
import operator
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Union

from sqlalchemy import and_
from sqlalchemy.sql.elements import ColumnElement

from ..db.models import MetalType, Product, ProductCategory
from .exceptions import InvalidFilter

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 5


class FilterOperator(Enum):
    """Comparison operators for filters."""

    EQ = "="
    GT = ">"
    GTE = ">="
    LTE = "<="


_OPERATOR_FUNCS: Dict[FilterOperator, Callable[[Any, Any], ColumnElement]] = {
    FilterOperator.EQ: operator.eq,
    FilterOperator.GT: operator.gt,
    FilterOperator.GTE: operator.ge,
    FilterOperator.LTE: operator.le,
}

# Fields a filter may constrain
_FILTERABLE_COLUMNS = {
    "category": Product.category,
    "metal_type": Product.metal_type,
    "price": Product.price,
    "stock_count": Product.stock_count,
}


@dataclass
class ProductFilter:
    """
    Single filter condition for products.

    Example:
        ProductFilter("price", FilterOperator.LTE, 100.0)  # price <= 100
        ProductFilter("category", FilterOperator.EQ, ProductCategory.BARS)
    """

    field: str
    operator: FilterOperator
    value: Any

    def __post_init__(self):
        if self.field not in _FILTERABLE_COLUMNS:
            raise ValueError(f"Unsupported filter field: {self.field}")

    def to_clause(self) -> ColumnElement:
        """
        Convert filter to a SQLAlchemy clause.

        The value is always sent as a bound parameter.
        """
        column = _FILTERABLE_COLUMNS[self.field]
        return _OPERATOR_FUNCS[self.operator](column, self.value)


@dataclass
class FilterPredicate:
    """Conjunction of product filters plus its bound values, in clause order."""

    filters: List[ProductFilter]

    @property
    def parameters(self) -> List[Any]:
        return [f.value for f in self.filters]

    def clause(self) -> ColumnElement:
        return and_(*(f.to_clause() for f in self.filters))

    def __len__(self) -> int:
        return len(self.filters)


def _is_absent(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _parse_enum(enum_cls: type, value: Any, name: str):
    if _is_absent(value):
        return None
    if isinstance(value, enum_cls):
        return value

    candidate = str(value).strip().upper()
    try:
        return enum_cls(candidate)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise InvalidFilter(
            f"Invalid {name} '{value}'. Expected one of: {allowed}",
            field=name,
        )


def _parse_price(value: Any, name: str) -> Optional[float]:
    if _is_absent(value):
        return None
    if isinstance(value, bool):
        raise InvalidFilter(f"{name} must be a number", field=name)

    try:
        price = float(value)
    except (TypeError, ValueError):
        raise InvalidFilter(f"{name} must be a number, got '{value}'", field=name)

    if not math.isfinite(price):
        raise InvalidFilter(f"{name} must be a finite number", field=name)
    if price < 0:
        raise InvalidFilter(f"{name} cannot be negative", field=name)

    return price


def _parse_limit(value: Any, default: int = DEFAULT_LIMIT) -> int:
    if _is_absent(value):
        return default
    if isinstance(value, bool):
        raise InvalidFilter("limit must be an integer", field="limit")

    if isinstance(value, float):
        if not value.is_integer():
            raise InvalidFilter(f"limit must be an integer, got '{value}'", field="limit")
        value = int(value)

    try:
        limit = int(value)
    except (TypeError, ValueError):
        raise InvalidFilter(f"limit must be an integer, got '{value}'", field="limit")

    if limit < 0:
        raise InvalidFilter("limit cannot be negative", field="limit")

    return limit


@dataclass
class SearchFilters:
    """
    Structured filters for product search.

    Omitted filters add no constraint. Products with stockCount <= 0 are
    always excluded, whatever else is set.
    """

    category: Optional[ProductCategory] = None
    metal_type: Optional[MetalType] = None
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    limit: int = DEFAULT_LIMIT

    @classmethod
    def from_params(
        cls,
        category: Union[str, ProductCategory, None] = None,
        metal_type: Union[str, MetalType, None] = None,
        min_price: Union[str, float, None] = None,
        max_price: Union[str, float, None] = None,
        limit: Union[str, int, None] = None,
        default_limit: int = DEFAULT_LIMIT,
    ) -> "SearchFilters":
        """
        Parse raw caller values into typed filters.

        An absent limit (None or blank) becomes default_limit.

        Raises:
            InvalidFilter: If any value cannot be parsed
        """
        return cls(
            category=_parse_enum(ProductCategory, category, "category"),
            metal_type=_parse_enum(MetalType, metal_type, "metalType"),
            min_price=_parse_price(min_price, "minPrice"),
            max_price=_parse_price(max_price, "maxPrice"),
            limit=_parse_limit(limit, default_limit),
        )

    def build_filters(self) -> List[ProductFilter]:
        """
        Build list of ProductFilter objects from this config.

        Returns:
            List of ProductFilter objects, stock constraint last
        """
        filters = []

        if self.category is not None:
            filters.append(ProductFilter("category", FilterOperator.EQ, self.category))
        if self.metal_type is not None:
            filters.append(ProductFilter("metal_type", FilterOperator.EQ, self.metal_type))

        # Price range is inclusive on both ends
        if self.min_price is not None:
            filters.append(ProductFilter("price", FilterOperator.GTE, self.min_price))
        if self.max_price is not None:
            filters.append(ProductFilter("price", FilterOperator.LTE, self.max_price))

        filters.append(ProductFilter("stock_count", FilterOperator.GT, 0))

        return filters

    def to_predicate(self) -> FilterPredicate:
        """
        Build the WHERE predicate for these filters.

        Returns:
            FilterPredicate with the SQLAlchemy conjunction and its bound values
        """
        predicate = FilterPredicate(self.build_filters())
        logger.debug(f"Built filter predicate with {len(predicate)} clauses")
        return predicate

    def with_limit(self, limit: int) -> "SearchFilters":
        """Return a copy with a different limit."""
        return SearchFilters(
            category=self.category,
            metal_type=self.metal_type,
            min_price=self.min_price,
            max_price=self.max_price,
            limit=limit,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Echo the effective filters using API field names."""
        return {
            "category": self.category.value if self.category else None,
            "metalType": self.metal_type.value if self.metal_type else None,
            "minPrice": self.min_price,
            "maxPrice": self.max_price,
            "limit": self.limit,
        }
