"""
Per-scrape metrics registry for json-exporter.

Every ``/probe`` request gets its own ``CollectorRegistry``; flattened
values are registered on it as gauges together with an ``up`` gauge and
the registry is rendered once, then discarded.
"""

from __future__ import annotations

import re
from typing import Any

from prometheus_client import CollectorRegistry, Gauge
from prometheus_client.exposition import choose_encoder

from json_exporter.exceptions import MetricRegistrationError
from json_exporter.flattener import sanitize_key, walk_json

VALUE_HELP = "Retrieved value"
UP_HELP = "Json API Up status"

_METRIC_NAME_RE = re.compile(r"^[a-zA-Z_:][a-zA-Z0-9_:]*$")


def new_registry() -> CollectorRegistry:
    """Return an empty registry that is not shared with any other scrape."""
    return CollectorRegistry()


def register_gauge(
    registry: CollectorRegistry,
    name: str,
    documentation: str,
    value: float,
) -> Gauge:
    """Register a gauge called *name* on *registry* and set it to *value*.

    Raises:
        MetricRegistrationError: If *name* is not a valid metric name or a
            metric with that name is already registered.
    """
    if not _METRIC_NAME_RE.match(name):
        raise MetricRegistrationError(f"invalid metric name {name!r}")
    try:
        gauge = Gauge(name, documentation, registry=registry)
    except ValueError as exc:
        raise MetricRegistrationError(f"cannot register metric {name!r}: {exc}") from exc
    gauge.set(value)
    return gauge


def publish_values(registry: CollectorRegistry, prefix: str, data: Any) -> int:
    """Flatten *data* into gauges named ``prefix + sanitized path``.

    Returns:
        Number of gauges registered.
    """
    count = 0
    for path, value in walk_json(data):
        register_gauge(registry, prefix + sanitize_key(path), VALUE_HELP, value)
        count += 1
    return count


def publish_up(registry: CollectorRegistry, prefix: str, up: bool) -> None:
    register_gauge(registry, prefix + "up", UP_HELP, 1.0 if up else 0.0)


def render(registry: CollectorRegistry, accept_header: str = "") -> tuple[bytes, str]:
    """Render *registry* in the exposition format negotiated from *accept_header*.

    Returns:
        ``(body, content_type)``.
    """
    encoder, content_type = choose_encoder(accept_header or "")
    return encoder(registry), content_type
