"""
Pytest configuration and shared fixtures
"""

import sys
from pathlib import Path

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from metalsearch.api.config import APISettings
from metalsearch.search import SearchService
from tests.fakes import DIMENSION, FakeEmbeddingClient, FakeSession


@pytest.fixture
def settings():
    """Settings isolated from the environment's .env file."""
    return APISettings(_env_file=None, openai_api_key="test-key")


@pytest.fixture
def fake_session():
    return FakeSession()


@pytest.fixture
def embedding_client():
    return FakeEmbeddingClient()


@pytest.fixture
def failing_embedding_client():
    return FakeEmbeddingClient(fail=True)


@pytest.fixture
def search_service(settings, embedding_client):
    return SearchService(embedding_client=embedding_client, settings=settings)


@pytest.fixture
def unit_vector():
    vector = [0.0] * DIMENSION
    vector[0] = 1.0
    return vector
