"""
Tests for the application factory and CLI entry point.

Validates route registration, prober lifecycle, the index, health and
self-metrics endpoints, and ``-listen-address`` parsing.
"""

from __future__ import annotations

from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient
from prometheus_client import REGISTRY

from json_exporter.config import Settings
from json_exporter.main import create_app, main, parse_args
from json_exporter.prober import Prober


@pytest.fixture()
def client() -> TestClient:
    return TestClient(create_app(Settings()))


class TestRoutes:
    """Tests for the non-probe endpoints."""

    def test_index_page(self, client: TestClient) -> None:
        resp = client.get("/")
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/html")
        assert "<h1>Json Exporter</h1>" in resp.text
        assert 'href="/probe"' in resp.text
        assert 'href="/metrics"' in resp.text

    def test_health(self, client: TestClient) -> None:
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok", "service": "json-exporter"}

    def test_self_metrics(self, client: TestClient) -> None:
        resp = client.get("/metrics/")
        assert resp.status_code == 200
        assert "json_exporter_probes_total" in resp.text
        assert "json_exporter_http_requests_total" in resp.text

    def test_requests_are_counted(self, client: TestClient) -> None:
        labels = {"method": "GET", "path": "/health", "status": "200"}
        before = REGISTRY.get_sample_value("json_exporter_http_requests_total", labels) or 0.0
        client.get("/health")
        assert REGISTRY.get_sample_value("json_exporter_http_requests_total", labels) == before + 1

    def test_unknown_paths_share_one_label(self, client: TestClient) -> None:
        labels = {"method": "GET", "path": "unmatched", "status": "404"}
        before = REGISTRY.get_sample_value("json_exporter_http_requests_total", labels) or 0.0
        for index in range(5):
            assert client.get(f"/scan-{index}").status_code == 404
        assert REGISTRY.get_sample_value("json_exporter_http_requests_total", labels) == before + 5
        for index in range(5):
            assert (
                REGISTRY.get_sample_value(
                    "json_exporter_http_requests_total",
                    {"method": "GET", "path": f"/scan-{index}", "status": "404"},
                )
                is None
            )

    def test_mounted_metrics_use_mount_path(self, client: TestClient) -> None:
        labels = {"method": "GET", "path": "/metrics", "status": "200"}
        before = REGISTRY.get_sample_value("json_exporter_http_requests_total", labels) or 0.0
        client.get("/metrics/")
        assert REGISTRY.get_sample_value("json_exporter_http_requests_total", labels) == before + 1

    def test_started_app_rejects_probe_without_target(self) -> None:
        with TestClient(create_app(Settings())) as started:
            assert started.get("/probe").status_code == 400


class TestLifespan:
    """Tests for the prober lifecycle."""

    def test_prober_created_on_startup(self) -> None:
        app = create_app(Settings(probe_timeout_s=3))
        with TestClient(app):
            assert isinstance(app.state.prober, Prober)
            assert app.state.prober.options.timeout_s == 3.0
            assert app.state.prober.options.verify_tls is False


class TestCli:
    """Tests for flag parsing and ``main``."""

    def test_default_listen_address(self) -> None:
        args = parse_args([], Settings(listen_address=":9116"))
        assert args.listen_address == ("0.0.0.0", 9116)

    def test_single_dash_flag(self) -> None:
        args = parse_args(["-listen-address", "127.0.0.1:9200"], Settings())
        assert args.listen_address == ("127.0.0.1", 9200)

    def test_double_dash_flag(self) -> None:
        args = parse_args(["--listen-address=:9300"], Settings())
        assert args.listen_address == ("0.0.0.0", 9300)

    def test_invalid_flag_exits(self) -> None:
        with pytest.raises(SystemExit):
            parse_args(["-listen-address", "nope"], Settings())

    def test_main_runs_uvicorn(self) -> None:
        with patch("json_exporter.main.uvicorn.run") as run, patch(
            "json_exporter.main.configure_logging"
        ) as configure:
            main(["-listen-address", "127.0.0.1:9555"])
        configure.assert_called_once()
        kwargs = run.call_args.kwargs
        assert kwargs["host"] == "127.0.0.1"
        assert kwargs["port"] == 9555
