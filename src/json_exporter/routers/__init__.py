"""HTTP routers for json-exporter."""
