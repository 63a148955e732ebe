"""
Request logging middleware for json-exporter.

Logs every request with method, path, status and latency, and records
the request in the exporter's own HTTP self-metrics. Metrics are labelled
with the matched route template, never the raw URL, so unknown paths all
share the ``unmatched`` label.
"""

from __future__ import annotations

import time

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.routing import Match

from json_exporter.metrics import http_request_duration_seconds, http_requests_total

logger = structlog.get_logger(__name__)

UNMATCHED_PATH = "unmatched"


def route_template(request: Request) -> str:
    """Return the path template of the route serving *request*."""
    for route in request.app.router.routes:
        match, _ = route.matches(request.scope)
        if match != Match.NONE:
            return getattr(route, "path", UNMATCHED_PATH)
    return UNMATCHED_PATH


class LoggingMiddleware(BaseHTTPMiddleware):
    """Log every HTTP request with method, path, status, and latency."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint,
    ) -> Response:
        # Match before routing; the router rewrites scope paths for mounts.
        template = route_template(request)
        start = time.monotonic()
        response = await call_next(request)
        duration = time.monotonic() - start
        http_requests_total.labels(request.method, template, str(response.status_code)).inc()
        http_request_duration_seconds.labels(request.method, template).observe(duration)
        logger.info(
            "http_request",
            method=request.method,
            path=request.url.path,
            route=template,
            status=response.status_code,
            duration_ms=round(duration * 1000, 2),
        )
        return response
