"""
json-exporter entry point.

Builds the FastAPI application (``/``, ``/probe``, ``/health`` and the
``/metrics`` self-metrics endpoint), owns the shared prober through the
application lifespan, and parses the ``-listen-address`` flag before
handing the app to uvicorn.
"""

from __future__ import annotations

import argparse
from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager

import structlog
import uvicorn
from fastapi import FastAPI
from prometheus_client import make_asgi_app

from json_exporter import __version__
from json_exporter.config import Settings, get_settings, parse_listen_address
from json_exporter.logging import configure_logging
from json_exporter.middleware.logging import LoggingMiddleware
from json_exporter.prober import Prober, ProberOptions
from json_exporter.routers import health, index, probe

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Create the shared prober on startup and close its pool on shutdown."""
    settings: Settings = app.state.settings
    options = ProberOptions.from_settings(settings)
    app.state.prober = Prober(options)
    logger.info(
        "exporter_starting",
        verify_tls=options.verify_tls,
        timeout_s=options.timeout_s,
    )
    yield
    logger.info("exporter_stopping")
    await app.state.prober.aclose()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build and return the FastAPI application."""
    app = FastAPI(
        title="JSON Exporter",
        version=__version__,
        docs_url=None,
        redoc_url=None,
        lifespan=lifespan,
    )
    app.state.settings = settings or get_settings()

    app.include_router(index.router)
    app.include_router(probe.router)
    app.include_router(health.router)

    # Prometheus self-metrics endpoint
    app.mount("/metrics", make_asgi_app())

    app.add_middleware(LoggingMiddleware)
    return app


def _listen_address(value: str) -> tuple[str, int]:
    try:
        return parse_listen_address(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def parse_args(argv: Sequence[str] | None = None, settings: Settings | None = None) -> argparse.Namespace:
    """Parse command-line flags; defaults come from *settings*."""
    settings = settings or get_settings()
    parser = argparse.ArgumentParser(
        prog="json-exporter",
        description="Prometheus exporter for JSON HTTP endpoints",
    )
    parser.add_argument(
        "-listen-address",
        "--listen-address",
        dest="listen_address",
        type=_listen_address,
        default=settings.listen_address,
        help="The address to listen on for HTTP requests.",
    )
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> None:
    settings = get_settings()
    args = parse_args(argv, settings)
    configure_logging(settings.log_level, json_output=settings.log_json)

    host, port = args.listen_address
    logger.info("listening", host=host, port=port)
    uvicorn.run(create_app(settings), host=host, port=port, log_config=None)


if __name__ == "__main__":
    main()
