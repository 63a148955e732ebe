"""
FastAPI dependency providers for json-exporter.

The shared :class:`~json_exporter.prober.Prober` is created in the
application lifespan and stored on ``app.state``; routes obtain it
through :func:`get_prober` so tests can override it.
"""

from __future__ import annotations

from fastapi import Request

from json_exporter.prober import Prober


def get_prober(request: Request) -> Prober:
    """Return the process-wide prober.

    Raises:
        RuntimeError: If the application has not started yet.
    """
    prober: Prober | None = getattr(request.app.state, "prober", None)
    if prober is None:
        raise RuntimeError("Prober not initialised.")
    return prober
