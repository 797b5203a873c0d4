"""
Request Timing Middleware
Records per-request latency and reports percentiles on /status.
"""

import logging
import time
from collections import deque
from threading import Lock
from typing import Callable, Dict, Optional

import numpy as np
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

PERCENTILES = (50, 95, 99)


class LatencyTracker:
    """Bounded window of recent request latencies (ms), shared across threads."""

    def __init__(self, window_size: int = 1000):
        self._samples: deque = deque(maxlen=window_size)
        self._lock = Lock()

    def record(self, latency_ms: float) -> None:
        with self._lock:
            self._samples.append(latency_ms)

    def reset(self) -> None:
        with self._lock:
            self._samples.clear()

    def get_stats(self) -> Dict[str, float]:
        """count, mean, min, max and p50/p95/p99 over the current window."""
        with self._lock:
            samples = np.fromiter(self._samples, dtype=np.float64)

        stats = {"count": int(samples.size)}
        if samples.size == 0:
            stats.update({"mean": 0.0, "min": 0.0, "max": 0.0})
            stats.update({f"p{p}": 0.0 for p in PERCENTILES})
            return stats

        stats.update({
            "mean": float(samples.mean()),
            "min": float(samples.min()),
            "max": float(samples.max()),
        })
        for p, value in zip(PERCENTILES, np.percentile(samples, PERCENTILES)):
            stats[f"p{p}"] = float(value)
        return stats


_latency_tracker = LatencyTracker()


def get_latency_tracker() -> LatencyTracker:
    return _latency_tracker


class RequestTimingMiddleware(BaseHTTPMiddleware):
    """
    Times each request, sets X-Response-Time and warns above slow_threshold_ms.
    """

    def __init__(self, app, tracker: Optional[LatencyTracker] = None, slow_threshold_ms: float = 300.0):
        super().__init__(app)
        self.tracker = tracker or get_latency_tracker()
        self.slow_threshold_ms = slow_threshold_ms

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        self.tracker.record(elapsed_ms)
        response.headers["X-Response-Time"] = f"{elapsed_ms:.2f}ms"

        if elapsed_ms > self.slow_threshold_ms:
            logger.warning(
                f"Slow request: {request.method} {request.url.path} took {elapsed_ms:.2f}ms "
                f"(threshold {self.slow_threshold_ms:.0f}ms)"
            )

        return response
