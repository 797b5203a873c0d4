"""
Dependency Injection
FastAPI dependencies: database sessions, the search facade and the vector store.
"""

import logging
import uuid
from typing import Iterator, Optional

from fastapi import Depends, Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from .config import get_settings
from ..search import EmbeddingClient, SearchService, VectorStore, get_embedding_client

logger = logging.getLogger(__name__)

_engine: Optional[Engine] = None
_session_factory: Optional[sessionmaker] = None
_search_service: Optional[SearchService] = None


def get_db_engine() -> Engine:
    """Process-wide engine; connections are checked before reuse."""
    global _engine
    if _engine is None:
        settings = get_settings()
        _engine = create_engine(
            settings.database_url,
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=True,
        )
        # Host/db only; credentials stay out of the log
        logger.info(f"Database engine created for {settings.database_url.rsplit('@', 1)[-1]}")
    return _engine


def get_session_factory() -> sessionmaker:
    global _session_factory
    if _session_factory is None:
        _session_factory = sessionmaker(bind=get_db_engine(), autoflush=False, expire_on_commit=False)
    return _session_factory


def get_db() -> Iterator[Session]:
    """
    One session per request, always closed.

    Search handlers only read; the vector store commits its own writes.
    """
    session = get_session_factory()()
    try:
        yield session
    finally:
        session.close()


def get_search_service(
    embedding_client: EmbeddingClient = Depends(get_embedding_client),
) -> SearchService:
    """Shared SearchService; it keeps no per-request state."""
    global _search_service
    if _search_service is None:
        _search_service = SearchService(embedding_client=embedding_client, settings=get_settings())
    return _search_service


def get_vector_store(db: Session = Depends(get_db)) -> VectorStore:
    """VectorStore bound to the request's session."""
    return VectorStore(session=db, dimension=get_settings().embedding_dimension)


def get_request_id(request: Request) -> str:
    """
    Request ID assigned by RequestLoggingMiddleware.

    Falls back to the X-Request-ID header, then a fresh UUID, when the
    middleware is not installed.
    """
    request_id = getattr(request.state, "request_id", None)
    return request_id or request.headers.get("X-Request-ID") or str(uuid.uuid4())


def reset_dependencies() -> None:
    """Dispose the engine and drop cached singletons (tests)."""
    global _engine, _session_factory, _search_service
    if _engine is not None:
        _engine.dispose()
    _engine = None
    _session_factory = None
    _search_service = None
