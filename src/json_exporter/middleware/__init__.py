"""HTTP middleware for json-exporter."""
