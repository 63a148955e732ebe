"""Shared fixtures for json-exporter tests."""

from __future__ import annotations

import json
import os
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

import httpx
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from prometheus_client.parser import text_string_to_metric_families

# Use *append* so test modules can import the helpers below.
sys.path.append(str(Path(__file__).resolve().parent))

# Set env vars before any json_exporter settings are read.
os.environ.setdefault("JSON_EXPORTER_LOG_LEVEL", "DEBUG")

from json_exporter.config import Settings  # noqa: E402
from json_exporter.dependencies import get_prober  # noqa: E402
from json_exporter.main import create_app  # noqa: E402
from json_exporter.prober import Prober  # noqa: E402

TARGET_URL = "http://target.example/stats.json"

Handler = Callable[[httpx.Request], httpx.Response]


def json_handler(payload: Any, status_code: int = 200) -> Handler:
    """Return a MockTransport handler that always answers with *payload*."""

    def _handle(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            status_code,
            content=json.dumps(payload).encode(),
            headers={"Content-Type": "application/json"},
        )

    return _handle


def parse_gauges(text: str) -> dict[str, float]:
    """Map every sample name in an exposition body to its value."""
    return {
        sample.name: sample.value
        for family in text_string_to_metric_families(text)
        for sample in family.samples
    }


# ─── Fixtures ────────────────────────────────────────────────────


@pytest.fixture()
def make_prober() -> Callable[[Handler], Prober]:
    """Factory building a ``Prober`` whose requests are served by *handler*."""

    def _make(handler: Handler) -> Prober:
        return Prober(transport=httpx.MockTransport(handler))

    return _make


@pytest.fixture()
def make_client(make_prober) -> Callable[[Handler], TestClient]:
    """Factory building a ``TestClient`` for an app probing through *handler*."""

    def _make(handler: Handler) -> TestClient:
        app: FastAPI = create_app(Settings())
        prober = make_prober(handler)
        app.dependency_overrides[get_prober] = lambda: prober
        return TestClient(app)

    return _make
