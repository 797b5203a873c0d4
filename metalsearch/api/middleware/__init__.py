"""
Middleware
Request ID tagging, request logging and latency tracking.
"""

from .logging import RequestLoggingMiddleware, REQUEST_ID_HEADER
from .timing import RequestTimingMiddleware, LatencyTracker, get_latency_tracker

__all__ = [
    "RequestLoggingMiddleware",
    "REQUEST_ID_HEADER",
    "RequestTimingMiddleware",
    "LatencyTracker",
    "get_latency_tracker",
]
