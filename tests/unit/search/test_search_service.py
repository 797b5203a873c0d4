"""
Tests for the search facade.
"""

import pytest

from tests.fakes import FakeEmbeddingClient, make_product_row
from metalsearch.api.config import APISettings
from metalsearch.search import (
    EmbeddingUnavailable,
    InvalidFilter,
    SearchFilters,
    SearchService,
    SearchStrategy,
    ValidationError,
)


@pytest.mark.parametrize("query", [None, "", "   "])
def test_missing_query_rejected_before_database(search_service, fake_session, embedding_client, query):
    with pytest.raises(ValidationError) as exc_info:
        search_service.search(fake_session, query, SearchStrategy.VECTOR_SIMILARITY, {})

    assert exc_info.value.field == "query"
    assert exc_info.value.message == "Query is required"
    assert fake_session.executed == []
    assert embedding_client.calls == []


def test_default_limit_is_five(search_service, fake_session):
    outcome = search_service.search(fake_session, "gold", SearchStrategy.TEXT, {})

    assert outcome.filters["limit"] == 5


def test_blank_limit_uses_configured_default(fake_session):
    settings = APISettings(_env_file=None, default_search_limit=8)
    service = SearchService(FakeEmbeddingClient(), settings=settings)

    for limit in (None, "", "  "):
        outcome = service.search(fake_session, "gold", SearchStrategy.TEXT, {"limit": limit})
        assert outcome.filters["limit"] == 8


def test_query_is_trimmed_for_matching_only(search_service, fake_session, embedding_client):
    outcome = search_service.search(fake_session, "  eagle ", SearchStrategy.VECTOR_SIMILARITY)

    assert embedding_client.calls == ["eagle"]
    assert outcome.query == "  eagle "


def test_limit_is_clamped(fake_session):
    settings = APISettings(_env_file=None, max_search_limit=20)
    service = SearchService(FakeEmbeddingClient(), settings=settings)

    outcome = service.search(fake_session, "gold", SearchStrategy.TEXT, {"limit": "500"})

    assert outcome.filters["limit"] == 20


def test_limit_zero_returns_empty(search_service, fake_session):
    outcome = search_service.search(fake_session, "gold", SearchStrategy.TEXT, {"limit": 0})

    assert outcome.results == []
    assert outcome.total == 0
    assert fake_session.executed == []


def test_invalid_filter_raised_before_database(search_service, fake_session):
    with pytest.raises(InvalidFilter):
        search_service.search(fake_session, "gold", SearchStrategy.TEXT, {"category": "SPOONS"})

    assert fake_session.executed == []


def test_outcome_envelope(search_service, fake_session):
    fake_session.rows = [
        make_product_row("Gold Bar 1 oz", price=2080.0, score=0.4),
        make_product_row("Gold Bar 10 oz", price=20500.0, score=0.4),
    ]

    outcome = search_service.search(
        fake_session, " gold bar ", SearchStrategy.TEXT, {"category": "bars", "max_price": "30000"}
    )
    data = outcome.to_dict()

    assert data["query"] == " gold bar "
    assert data["searchType"] == "text"
    assert data["total"] == 2
    assert data["filters"]["category"] == "BARS"
    assert data["filters"]["maxPrice"] == 30000.0
    assert data["results"][0]["name"] == "Gold Bar 1 oz"
    assert data["results"][0]["relevanceScore"] == 0.4
    assert "similarityScore" not in data["results"][0]


def test_vector_strategy_dispatch(search_service, fake_session, embedding_client):
    fake_session.rows = [make_product_row(score_field="similarity_score", score=0.8)]

    outcome = search_service.search(fake_session, "eagle", SearchStrategy.VECTOR_SIMILARITY)

    assert outcome.to_dict()["searchType"] == "vector_similarity"
    assert embedding_client.calls == ["eagle"]
    assert outcome.results[0].similarity_score == pytest.approx(0.8)


def test_embedding_failure_propagates(settings, fake_session):
    service = SearchService(FakeEmbeddingClient(fail=True), settings=settings)

    with pytest.raises(EmbeddingUnavailable):
        service.search(fake_session, "silver", SearchStrategy.VECTOR_SIMILARITY, {})

    assert fake_session.executed == []


def test_accepts_parsed_filters(search_service, fake_session):
    filters = SearchFilters.from_params(metal_type="PALLADIUM", limit=3)

    outcome = search_service.search(fake_session, "palladium", SearchStrategy.TEXT, filters)

    assert outcome.filters["metalType"] == "PALLADIUM"
    assert outcome.filters["limit"] == 3


def test_repeated_search_is_idempotent(search_service, fake_session):
    fake_session.rows = [make_product_row(), make_product_row("Silver Round", price=32.0)]

    first = search_service.search(fake_session, "coin", SearchStrategy.TEXT, {}).to_dict()
    second = search_service.search(fake_session, "coin", SearchStrategy.TEXT, {}).to_dict()

    assert first == second
