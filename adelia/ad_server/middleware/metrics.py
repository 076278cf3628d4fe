"""
Prometheus metrics middleware for monitoring.

Provides:
- Request latency histograms
- Request counters by endpoint
- Active request gauge
- Business metrics (builds, renders, uploads, tracking events)
"""

import time
from typing import Callable

from fastapi import Request, Response
from prometheus_client import Counter, Gauge, Histogram, Info, generate_latest
from starlette.responses import Response as StarletteResponse
from starlette.middleware.base import BaseHTTPMiddleware

from adelia import __version__
from adelia.common.logger import get_logger

logger = get_logger(__name__)

# =============================================================================
# Prometheus Metrics Definitions
# =============================================================================

APP_INFO = Info("adelia_app", "Adelia application information")
APP_INFO.info({
    "version": __version__,
    "name": "adelia",
    "description": "Interactive ad creative engine",
})

# HTTP request metrics
HTTP_REQUEST_TOTAL = Counter(
    "adelia_http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status"],
)

HTTP_REQUEST_DURATION = Histogram(
    "adelia_http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.075, 0.1, 0.25, 0.5, 0.75, 1.0, 2.5, 5.0),
)

HTTP_REQUESTS_IN_PROGRESS = Gauge(
    "adelia_http_requests_in_progress",
    "HTTP requests currently in progress",
    ["method", "endpoint"],
)

# Build pipeline metrics
CREATIVE_BUILDS_TOTAL = Counter(
    "adelia_creative_builds_total",
    "Creative builds by kind and outcome",
    ["kind", "status"],
)

BUILD_LATENCY = Histogram(
    "adelia_build_latency_seconds",
    "End-to-end creative build latency",
    ["kind"],
    buckets=(0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
)

RENDER_LATENCY = Histogram(
    "adelia_render_latency_seconds",
    "Time to render one build phase",
    ["kind", "phase"],
    buckets=(0.0005, 0.001, 0.0025, 0.005, 0.01, 0.025, 0.05, 0.1),
)

UPLOADS_TOTAL = Counter(
    "adelia_uploads_total",
    "Upload attempts by outcome",
    ["status"],
)

UPLOAD_BYTES = Counter(
    "adelia_upload_bytes_total",
    "Bytes handed to the upload collaborator",
)

# Tracking metrics
TRACKING_EVENTS_TOTAL = Counter(
    "adelia_tracking_events_total",
    "Creative lifecycle events received",
    ["event"],
)

# Standard events get their own label; custom ones share "custom"
_STANDARD_EVENTS = frozenset({"view", "impression", "click", "close", "expand", "collapse", "unlock"})


# =============================================================================
# Metrics Middleware
# =============================================================================

class MetricsMiddleware(BaseHTTPMiddleware):
    """
    Middleware that collects Prometheus metrics for all HTTP requests.
    """

    async def dispatch(
        self, request: Request, call_next: Callable
    ) -> Response:
        """Process request and record metrics."""
        method = request.method
        endpoint = self._get_endpoint(request)

        HTTP_REQUESTS_IN_PROGRESS.labels(method=method, endpoint=endpoint).inc()

        start_time = time.perf_counter()
        status_code = 500

        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        except Exception as e:
            logger.error("Request error", error=str(e))
            raise
        finally:
            duration = time.perf_counter() - start_time

            HTTP_REQUEST_TOTAL.labels(
                method=method,
                endpoint=endpoint,
                status=str(status_code),
            ).inc()

            HTTP_REQUEST_DURATION.labels(
                method=method,
                endpoint=endpoint,
            ).observe(duration)

            HTTP_REQUESTS_IN_PROGRESS.labels(
                method=method,
                endpoint=endpoint,
            ).dec()

    def _get_endpoint(self, request: Request) -> str:
        """Get endpoint path, collapsing ids and uploaded file paths."""
        path = request.url.path
        if path.startswith("/media/"):
            return "/media/{path}"

        parts = path.split("/")
        normalized = []
        for part in parts:
            if part.isdigit() or (len(part) == 32 and all(c in "0123456789abcdef" for c in part)):
                normalized.append("{id}")
            else:
                normalized.append(part)

        return "/".join(normalized)


# =============================================================================
# Metrics Endpoint
# =============================================================================

async def metrics_endpoint() -> StarletteResponse:
    """
    Prometheus metrics endpoint.

    Returns metrics in Prometheus text format.
    """
    return StarletteResponse(
        content=generate_latest(),
        media_type="text/plain; charset=utf-8",
    )


# =============================================================================
# Helper Functions for Recording Business Metrics
# =============================================================================

def record_build(kind: str, success: bool, duration: float | None = None) -> None:
    """Record a finished or failed creative build."""
    CREATIVE_BUILDS_TOTAL.labels(kind=kind, status="success" if success else "error").inc()
    if duration is not None:
        BUILD_LATENCY.labels(kind=kind).observe(duration)


def record_render(kind: str, phase: str, duration: float) -> None:
    RENDER_LATENCY.labels(kind=kind, phase=phase).observe(duration)


def record_upload(size: int, success: bool) -> None:
    """Record one upload attempt."""
    UPLOADS_TOTAL.labels(status="success" if success else "error").inc()
    if success:
        UPLOAD_BYTES.inc(size)


def record_tracking_event(event: str) -> None:
    """Record a tracking beacon."""
    label = event if event in _STANDARD_EVENTS else "custom"
    TRACKING_EVENTS_TOTAL.labels(event=label).inc()
