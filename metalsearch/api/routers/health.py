"""
Health Check Endpoints
/health (liveness), /ready (readiness) and /status (component detail).
"""

import logging
from datetime import datetime, timezone
from typing import Dict, Any
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..config import get_settings, APISettings
from ..dependencies import get_db
from ..middleware.timing import get_latency_tracker
from ...caching import get_redis_cache

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])

PGVECTOR_INSTALLED_SQL = text("SELECT 1 FROM pg_extension WHERE extname = 'vector'")


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _database_component(db: Session, settings: APISettings) -> Dict[str, Any]:
    try:
        db.execute(text("SELECT 1"))
        has_vector = db.execute(PGVECTOR_INSTALLED_SQL).scalar() is not None
    except SQLAlchemyError as e:
        logger.error(f"Database health check failed: {e}")
        return {"status": "unhealthy", "error": str(e)}

    return {
        "status": "healthy" if has_vector else "degraded",
        "pgvector": has_vector,
        "host": settings.database_url.rsplit("@", 1)[-1],
    }


def _redis_component(settings: APISettings) -> Dict[str, Any]:
    # Redis only backs the optional embedding cache
    if not settings.enable_embedding_cache:
        return {"status": "disabled"}
    return {"status": "healthy" if get_redis_cache(settings).ping() else "unhealthy"}


@router.get("/health", status_code=status.HTTP_200_OK)
async def health_check() -> Dict[str, str]:
    """Liveness probe; does not touch dependencies."""
    return {"status": "healthy", "timestamp": _now()}


@router.get("/status", status_code=status.HTTP_200_OK)
def status_check(
    settings: APISettings = Depends(get_settings),
    db: Session = Depends(get_db),
) -> Dict[str, Any]:
    """
    Detailed status.

    Overall status is "degraded" when any component is not healthy
    (a disabled Redis cache does not count).
    """
    components = {
        "database": _database_component(db, settings),
        "redis": _redis_component(settings),
    }
    degraded = any(c["status"] not in ("healthy", "disabled") for c in components.values())

    latency = get_latency_tracker().get_stats()

    return {
        "status": "degraded" if degraded else "healthy",
        "timestamp": _now(),
        "version": settings.version,
        "components": components,
        "performance": {
            "request_count": latency["count"],
            "latency_p50_ms": round(latency["p50"], 2),
            "latency_p95_ms": round(latency["p95"], 2),
            "latency_p99_ms": round(latency["p99"], 2),
            "target_p95_ms": settings.target_p95_latency_ms,
            "meets_target": latency["p95"] <= settings.target_p95_latency_ms,
        },
    }


@router.get("/ready", status_code=status.HTTP_200_OK)
def readiness_check(db: Session = Depends(get_db)):
    """Readiness probe: 503 until the database answers."""
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error(f"Readiness check failed: {e}")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not_ready", "reason": "database unavailable"},
        )

    return {"status": "ready", "timestamp": _now()}
