"""
Health check endpoint for json-exporter.

Exposes a /health endpoint reporting that the exporter process is up.
It says nothing about any probe target; that is what the ``up`` gauge
of ``/probe`` is for.
"""

from __future__ import annotations

from fastapi import APIRouter

router = APIRouter()


@router.get("/health")
async def health() -> dict[str, str]:
    """Return ``{"status": "ok"}`` when the service is alive."""
    return {"status": "ok", "service": "json-exporter"}
