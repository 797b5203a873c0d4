"""
SQLAlchemy ORM Models
Database table definitions for the product catalog and the generic embedding store.

Column names keep the camelCase spelling of the seeded catalog schema
(e.g. "metalType", "stockCount"); Python attribute names are snake_case.
"""

from __future__ import annotations

import enum
import uuid

from pgvector.sqlalchemy import Vector
from sqlalchemy import (
    Column, String, Integer, Float, Boolean, TIMESTAMP, Enum,
    ForeignKey, Text, Index
)
from sqlalchemy.dialects.postgresql import UUID as PGUUID, JSONB
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

# OpenAI text-embedding-3-small output size
EMBEDDING_DIMENSION = 1536

Base = declarative_base()


class MetalType(str, enum.Enum):
    """Precious metal of a product."""

    GOLD = "GOLD"
    SILVER = "SILVER"
    PLATINUM = "PLATINUM"
    PALLADIUM = "PALLADIUM"
    RHODIUM = "RHODIUM"


class ProductCategory(str, enum.Enum):
    """Catalog category."""

    COINS = "COINS"
    BARS = "BARS"
    ROUNDS = "ROUNDS"
    JEWELRY = "JEWELRY"
    COLLECTIBLE = "COLLECTIBLE"
    INVESTMENT = "INVESTMENT"


class ProductCondition(str, enum.Enum):
    NEW = "NEW"
    MINT = "MINT"
    EXCELLENT = "EXCELLENT"
    VERY_GOOD = "VERY_GOOD"
    GOOD = "GOOD"
    FAIR = "FAIR"


class PurityLevel(str, enum.Enum):
    PURE_585 = "PURE_585"
    PURE_750 = "PURE_750"
    PURE_900 = "PURE_900"
    PURE_916 = "PURE_916"
    PURE_999 = "PURE_999"
    PURE_9995 = "PURE_9995"
    PURE_9999 = "PURE_9999"


class WeightUnit(str, enum.Enum):
    GRAMS = "GRAMS"
    TROY_OUNCES = "TROY_OUNCES"
    KILOGRAMS = "KILOGRAMS"


class Currency(str, enum.Enum):
    USD = "USD"
    EUR = "EUR"
    GBP = "GBP"
    CAD = "CAD"


class MintType(str, enum.Enum):
    US_MINT = "US_MINT"
    ROYAL_CANADIAN_MINT = "ROYAL_CANADIAN_MINT"
    PERTH_MINT = "PERTH_MINT"
    ROYAL_MINT = "ROYAL_MINT"
    PAMP_SUISSE = "PAMP_SUISSE"
    GENERIC = "GENERIC"


class CoinGrade(str, enum.Enum):
    PROOF = "PROOF"
    UNCIRCULATED = "UNCIRCULATED"
    EXTRA_FINE = "EXTRA_FINE"
    VERY_FINE = "VERY_FINE"
    VERY_GOOD = "VERY_GOOD"


class JewelryType(str, enum.Enum):
    CHAIN = "CHAIN"
    RING = "RING"
    BRACELET = "BRACELET"
    EARRINGS = "EARRINGS"
    PENDANT = "PENDANT"


class MessageRole(str, enum.Enum):
    """Author of a chat message."""

    USER = "USER"
    ASSISTANT = "ASSISTANT"
    SYSTEM = "SYSTEM"


def _pg_enum(enum_cls: type) -> Enum:
    """Map a Python enum onto the PostgreSQL enum type of the same name."""
    return Enum(enum_cls, name=enum_cls.__name__)


class Product(Base):
    """
    Product model.

    Read-only from the search layer's point of view. The embedding stays
    NULL until the external embedding pipeline has processed the product.
    """
    __tablename__ = 'products'

    id = Column(PGUUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    # Descriptive
    name = Column(Text, nullable=False)
    description = Column(Text, nullable=False)
    sku = Column(String(64), unique=True, nullable=False)

    # Classification
    metal_type = Column('metalType', _pg_enum(MetalType), nullable=False, index=True)
    category = Column(_pg_enum(ProductCategory), nullable=False, index=True)
    condition = Column(_pg_enum(ProductCondition), nullable=False)
    mint = Column(_pg_enum(MintType), nullable=True)
    grade = Column(_pg_enum(CoinGrade), nullable=True)
    jewelry_type = Column('jewelryType', _pg_enum(JewelryType), nullable=True)

    # Physical attributes
    weight = Column(Float, nullable=False)
    weight_unit = Column('weightUnit', _pg_enum(WeightUnit), nullable=False)
    purity = Column(Float, nullable=False, comment='Purity percentage (0-100)')
    purity_level = Column('purityLevel', _pg_enum(PurityLevel), nullable=True)

    # Pricing and stock
    price = Column(Float, nullable=False, index=True)
    currency = Column(_pg_enum(Currency), nullable=False, server_default=Currency.USD.value)
    in_stock = Column('inStock', Boolean, nullable=False, server_default='true')
    stock_count = Column('stockCount', Integer, nullable=False, server_default='0')

    # Free-form attributes (year, diameter, iraEligible, ...)
    product_metadata = Column('metadata', JSONB, nullable=True)

    embedding = Column(Vector(EMBEDDING_DIMENSION), nullable=True,
                       comment='text-embedding-3-small vector of the product text')

    created_at = Column('createdAt', TIMESTAMP, nullable=False, server_default=func.now())
    updated_at = Column('updatedAt', TIMESTAMP, nullable=False, server_default=func.now(),
                        onupdate=func.now())

    def __repr__(self):
        return f"<Product(id={self.id}, name={self.name[:30]})>"


class Embedding(Base):
    """
    Generic embedding row.

    Arbitrary text stored next to its embedding, independent of the catalog.
    """
    __tablename__ = 'embeddings'

    id = Column(PGUUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    text = Column(Text, nullable=False)
    embedding = Column(Vector(EMBEDDING_DIMENSION), nullable=False)
    embedding_metadata = Column('metadata', JSONB, nullable=True)
    created_at = Column('createdAt', TIMESTAMP, nullable=False, server_default=func.now())

    def __repr__(self):
        return f"<Embedding(id={self.id}, text={self.text[:30]})>"


class ChatSession(Base):
    """Chat session grouping an append-only message log."""
    __tablename__ = 'chat_sessions'

    id = Column(PGUUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    title = Column(String(255), nullable=True)
    created_at = Column('createdAt', TIMESTAMP, nullable=False, server_default=func.now())
    updated_at = Column('updatedAt', TIMESTAMP, nullable=False, server_default=func.now(),
                        onupdate=func.now())

    messages = relationship("ChatMessage", back_populates="session",
                            cascade="all, delete-orphan")

    def __repr__(self):
        return f"<ChatSession(id={self.id}, title={self.title})>"


class ChatMessage(Base):
    """Role-tagged chat message with an optional embedding."""
    __tablename__ = 'chat_messages'

    id = Column(PGUUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    session_id = Column('sessionId', PGUUID(as_uuid=True),
                        ForeignKey('chat_sessions.id', ondelete='CASCADE'), nullable=False)
    role = Column(_pg_enum(MessageRole), nullable=False)
    content = Column(Text, nullable=False)
    embedding = Column(Vector(EMBEDDING_DIMENSION), nullable=True)
    created_at = Column('createdAt', TIMESTAMP, nullable=False, server_default=func.now())

    session = relationship("ChatSession", back_populates="messages")

    __table_args__ = (
        Index('idx_chat_messages_session_created', 'sessionId', 'createdAt'),
    )

    def __repr__(self):
        return f"<ChatMessage(id={self.id}, session_id={self.session_id}, role={self.role})>"
