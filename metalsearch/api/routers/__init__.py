"""
API Routers
FastAPI route handlers for different endpoints.
"""

from .health import router as health_router
from .search import router as search_router
from .vector import router as vector_router

__all__ = [
    "health_router",
    "search_router",
    "vector_router",
]
