"""
API test fixtures
"""

import pytest
from fastapi.testclient import TestClient

from tests.fakes import FakeEmbeddingClient, FakeSession
from metalsearch.api.dependencies import get_db, get_search_service, get_vector_store
from metalsearch.api.main import create_app
from metalsearch.search import SearchService, VectorStore


@pytest.fixture
def db_session():
    return FakeSession()


@pytest.fixture
def api_embedding_client():
    return FakeEmbeddingClient()


@pytest.fixture
def app(settings, db_session, api_embedding_client):
    application = create_app()
    service = SearchService(embedding_client=api_embedding_client, settings=settings)

    application.dependency_overrides[get_db] = lambda: db_session
    application.dependency_overrides[get_search_service] = lambda: service
    application.dependency_overrides[get_vector_store] = lambda: VectorStore(db_session)

    return application


@pytest.fixture
def client(app):
    return TestClient(app, raise_server_exceptions=False)
