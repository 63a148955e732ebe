"""Exception hierarchy shared by the exporter modules."""

from __future__ import annotations


class JsonExporterError(Exception):
    """Base class for all exporter errors."""


class ProbeError(JsonExporterError):
    """The target could not be fetched or its body is not valid JSON."""


class SelectionNotFound(JsonExporterError):
    """A JSONPath expression did not match (or could not be parsed)."""


class MetricRegistrationError(JsonExporterError):
    """A gauge name is invalid or already registered in the scrape registry."""
