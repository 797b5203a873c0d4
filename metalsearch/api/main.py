"""
FastAPI Main Application
Builds the Metalsearch app: middleware, error envelope and routers.

Run with:
    uvicorn metalsearch.api.main:app
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from .config import APISettings, get_settings
from .dependencies import get_db_engine, reset_dependencies
from .errors import setup_error_handlers
from .middleware import RequestLoggingMiddleware, RequestTimingMiddleware
from .routers import health_router, search_router, vector_router

logger = logging.getLogger(__name__)


def configure_logging(settings: APISettings) -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def check_database() -> None:
    """Log whether PostgreSQL and pgvector are reachable; never raises."""
    try:
        with get_db_engine().connect() as conn:
            has_vector = conn.execute(
                text("SELECT 1 FROM pg_extension WHERE extname = 'vector'")
            ).scalar() is not None
    except SQLAlchemyError as e:
        logger.error(f"Database unreachable at startup: {e}")
        return

    if has_vector:
        logger.info("Database ready (pgvector installed)")
    else:
        logger.warning("pgvector extension missing; vector search will fail")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup checks, then engine cleanup on shutdown."""
    settings = get_settings()
    logger.info(f"Starting {settings.app_name} v{settings.version}")

    if not settings.openai_api_key:
        logger.warning("OPENAI_API_KEY is not set; vector search will return 500 until it is")
    if settings.vector_search_threshold is not None:
        logger.info(f"Product vector search threshold: {settings.vector_search_threshold}")
    check_database()

    yield

    reset_dependencies()
    logger.info(f"{settings.app_name} stopped")


def create_app(settings: APISettings = None) -> FastAPI:
    """
    Build the FastAPI application.

    Middleware order (outermost first): request logging, timing, gzip, CORS.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app_name,
        description=settings.description,
        version=settings.version,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )
    app.add_middleware(GZipMiddleware, minimum_size=1000)
    app.add_middleware(RequestTimingMiddleware, slow_threshold_ms=settings.target_p95_latency_ms)
    app.add_middleware(RequestLoggingMiddleware)

    setup_error_handlers(app)

    for router in (health_router, search_router, vector_router):
        app.include_router(router)

    @app.get("/", include_in_schema=False)
    async def root():
        return {
            "name": settings.app_name,
            "version": settings.version,
            "description": settings.description,
            "endpoints": {
                "text_search": "/api/v1/search/text",
                "vector_search": "/api/v1/search/vector",
                "vector_store": "/api/v1/vector",
                "health": "/health",
                "status": "/status",
                "ready": "/ready",
                "docs": "/docs",
            },
        }

    return app


configure_logging(get_settings())
app = create_app()


if __name__ == "__main__":
    import uvicorn

    _settings = get_settings()
    uvicorn.run(
        "metalsearch.api.main:app",
        host=_settings.host,
        port=_settings.port,
        reload=_settings.reload,
        log_level=_settings.log_level.lower(),
    )
