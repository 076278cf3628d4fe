"""
Middleware for the creative service.
"""

from adelia.ad_server.middleware.metrics import (
    MetricsMiddleware,
    metrics_endpoint,
    record_build,
    record_tracking_event,
    record_upload,
)

__all__ = [
    "MetricsMiddleware",
    "metrics_endpoint",
    "record_build",
    "record_tracking_event",
    "record_upload",
]
