"""
Probe endpoint for json-exporter.

``GET /probe?target=<url>&prefix=<str>&jsonpath=<expr>`` fetches the
target, optionally narrows the document with a JSONPath expression,
flattens it into gauges on a fresh registry and renders that registry.

Probe failures never become HTTP errors: the scrape succeeds with a
single ``up`` gauge set to 0 so the endpoint stays scrapable while the
target is down. Only a missing ``target`` (400), an unmatched
``jsonpath`` (404) and a metric name clash (500) fail the request.
"""

from __future__ import annotations

import time

import structlog
from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import PlainTextResponse, Response

from json_exporter import sink
from json_exporter.dependencies import get_prober
from json_exporter.exceptions import MetricRegistrationError, ProbeError, SelectionNotFound
from json_exporter.metrics import (
    PROBE_ERROR,
    PROBE_FAILURE,
    PROBE_NOT_FOUND,
    PROBE_SUCCESS,
    probe_duration_seconds,
    probes_total,
)
from json_exporter.prober import Prober
from json_exporter.selector import select

logger = structlog.get_logger()

router = APIRouter(tags=["probe"])


@router.get("/probe")
async def probe(
    request: Request,
    target: str = Query(default="", description="URL of the JSON endpoint to probe."),
    prefix: str = Query(default="", description="Prepended to every metric name."),
    jsonpath: str = Query(default="", description="JSONPath applied before flattening."),
    prober: Prober = Depends(get_prober),
) -> Response:
    """Probe *target* and return its numeric values in exposition format."""
    if not target:
        return PlainTextResponse("Target parameter is missing", status_code=400)

    log = logger.bind(target=target, prefix=prefix)
    registry = sink.new_registry()
    start = time.perf_counter()
    outcome = PROBE_ERROR

    try:
        try:
            data = await prober.probe(target, request.headers.get("authorization", ""))
        except ProbeError as exc:
            log.warning("probe_failed", error=str(exc))
            sink.publish_up(registry, prefix, False)
            outcome = PROBE_FAILURE
        else:
            if jsonpath:
                try:
                    data = select(data, jsonpath)
                except SelectionNotFound as exc:
                    log.info("jsonpath_not_found", jsonpath=jsonpath, error=str(exc))
                    outcome = PROBE_NOT_FOUND
                    return PlainTextResponse("Jsonpath not found", status_code=404)
                log.debug("jsonpath_selected", jsonpath=jsonpath)

            try:
                count = sink.publish_values(registry, prefix, data)
                sink.publish_up(registry, prefix, True)
            except MetricRegistrationError as exc:
                log.error("metric_registration_failed", error=str(exc))
                return PlainTextResponse(str(exc), status_code=500)
            log.debug("probe_succeeded", gauges=count)
            outcome = PROBE_SUCCESS
    finally:
        probe_duration_seconds.observe(time.perf_counter() - start)
        probes_total.labels(outcome).inc()

    body, content_type = sink.render(registry, request.headers.get("accept", ""))
    return Response(content=body, media_type=content_type)
