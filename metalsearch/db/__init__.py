"""
Database ORM Models
SQLAlchemy ORM models for database tables.
"""

from .models import (
    Base,
    Product,
    Embedding,
    ChatSession,
    ChatMessage,
    EMBEDDING_DIMENSION,
    MetalType,
    ProductCategory,
    ProductCondition,
    PurityLevel,
    WeightUnit,
    Currency,
    MintType,
    CoinGrade,
    JewelryType,
    MessageRole,
)
from .vectors import as_embedding, to_vector_literal

__all__ = [
    "Base",
    "Product",
    "Embedding",
    "ChatSession",
    "ChatMessage",
    "EMBEDDING_DIMENSION",
    "MetalType",
    "ProductCategory",
    "ProductCondition",
    "PurityLevel",
    "WeightUnit",
    "Currency",
    "MintType",
    "CoinGrade",
    "JewelryType",
    "MessageRole",
    "as_embedding",
    "to_vector_literal",
]
