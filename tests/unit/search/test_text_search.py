"""
Tests for the full-text search strategy.
"""

import pytest
from sqlalchemy.dialects import postgresql
from sqlalchemy.exc import OperationalError

from tests.fakes import FakeSession, make_product_row
from metalsearch.search import PersistenceError, SearchFilters, TextSearchStrategy, ValidationError


def compile_sql(statement) -> str:
    return str(statement.compile(dialect=postgresql.dialect()))


def test_statement_ranks_by_relevance_then_price():
    strategy = TextSearchStrategy()

    sql = compile_sql(strategy.build_statement("gold coin", SearchFilters()))

    assert "ts_rank(to_tsvector(" in sql
    assert "plainto_tsquery(" in sql
    assert "@@" in sql
    assert "LIKE" in sql.upper()
    assert "ORDER BY relevance_score DESC, products.price ASC, products.id ASC" in sql
    assert "LIMIT" in sql


def test_statement_never_selects_embedding():
    sql = compile_sql(TextSearchStrategy().build_statement("silver", SearchFilters()))

    select_list = sql.split("FROM")[0]
    assert "products.embedding" not in select_list


def test_statement_applies_filters_and_stock():
    filters = SearchFilters.from_params(category="COINS", max_price="2500")

    sql = compile_sql(TextSearchStrategy().build_statement("gold", filters))

    assert "products.category =" in sql
    assert "products.price <=" in sql
    assert '"stockCount" >' in sql


def test_query_text_is_bound():
    sql = compile_sql(TextSearchStrategy().build_statement("krugerrand'; DROP TABLE products", SearchFilters()))

    assert "DROP TABLE" not in sql


def test_search_returns_hits(fake_session):
    fake_session.rows = [
        make_product_row("1 oz Gold American Eagle", price=2150.0, score=0.6),
        make_product_row("1 oz Gold Maple Leaf", price=2100.0, score=0.3),
    ]

    hits = TextSearchStrategy().search(fake_session, "  gold  ", SearchFilters())

    assert [hit.name for hit in hits] == ["1 oz Gold American Eagle", "1 oz Gold Maple Leaf"]
    assert hits[0].relevance_score == 0.6
    assert hits[0].similarity_score is None
    assert hits[0].metal_type == "GOLD"
    assert hits[0].category == "COINS"
    assert isinstance(hits[0].id, str)
    assert len(fake_session.executed) == 1


def test_blank_query_never_touches_database(fake_session):
    with pytest.raises(ValidationError):
        TextSearchStrategy().search(fake_session, "   ", SearchFilters())

    assert fake_session.executed == []


def test_zero_limit_returns_empty_without_query(fake_session):
    hits = TextSearchStrategy().search(fake_session, "gold", SearchFilters(limit=0))

    assert hits == []
    assert fake_session.executed == []


def test_database_error_becomes_persistence_error():
    session = FakeSession(error=OperationalError("SELECT", {}, Exception("connection refused")))

    with pytest.raises(PersistenceError):
        TextSearchStrategy().search(session, "gold", SearchFilters())
