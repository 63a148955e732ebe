"""
Prometheus self-metrics for json-exporter.

Process-wide counters and histograms registered on the default
registry and exposed at ``/metrics`` next to the process, platform and
GC collectors that ``prometheus_client`` installs by default. Probe
results themselves never land here; they go to the per-scrape registry.
"""

from __future__ import annotations

from prometheus_client import Counter, Histogram

# ── Probes ──
probes_total = Counter(
    "json_exporter_probes_total",
    "Total probes handled, by outcome",
    ["outcome"],
)
probe_duration_seconds = Histogram(
    "json_exporter_probe_duration_seconds",
    "Time spent fetching, selecting and flattening a probe target",
)

# ── HTTP ──
http_requests_total = Counter(
    "json_exporter_http_requests_total",
    "Total HTTP requests served by the exporter",
    ["method", "path", "status"],
)
http_request_duration_seconds = Histogram(
    "json_exporter_http_request_duration_seconds",
    "HTTP request latency in seconds",
    ["method", "path"],
)

PROBE_SUCCESS = "success"
PROBE_FAILURE = "failure"
PROBE_NOT_FOUND = "not_found"
PROBE_ERROR = "error"
