"""
json-exporter: Prometheus exporter for arbitrary JSON HTTP endpoints.

Fetches a JSON document on every ``/probe`` scrape, flattens it into
numeric key/value pairs and republishes them as gauges in a registry
that only lives for the duration of that scrape.
"""

__version__ = "0.1.0"
