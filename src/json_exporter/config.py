"""
Environment-based configuration management for json-exporter.

Uses pydantic-settings to load configuration values from environment
variables and .env files. The ``-listen-address`` CLI flag overrides
``listen_address`` at startup.

All environment variables are prefixed with ``JSON_EXPORTER_`` to avoid
collisions.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_LISTEN_ADDRESS = ":9116"


class Settings(BaseSettings):
    """Central configuration loaded from ``JSON_EXPORTER_``-prefixed environment variables.

    Attributes:
        listen_address: ``host:port`` to bind; an empty host binds all interfaces.
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_json: Render log lines as JSON; ``False`` uses the console renderer.
        probe_timeout_s: Outbound probe timeout in seconds, ``0`` disables it.
        probe_verify_tls: Verify TLS certificates of probed targets.
        probe_max_idle_connections: Keep-alive connections kept in the pool.
    """

    model_config = SettingsConfigDict(
        env_prefix="JSON_EXPORTER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Server ──
    listen_address: str = Field(
        default=DEFAULT_LISTEN_ADDRESS,
        description="The address to listen on for HTTP requests.",
    )

    # ── Logging ──
    log_level: str = Field(default="INFO", description="Logging level.")
    log_json: bool = Field(default=True, description="Emit JSON log lines.")

    # ── Probe client ──
    probe_timeout_s: float = Field(
        default=30.0,
        ge=0.0,
        description="Outbound probe timeout in seconds (0 disables).",
    )
    probe_verify_tls: bool = Field(
        default=False,
        description="Verify TLS certificates of probed targets.",
    )
    probe_max_idle_connections: int = Field(
        default=100,
        ge=1,
        description="Maximum idle keep-alive connections in the probe pool.",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the cached application settings singleton."""
    return Settings()


def parse_listen_address(address: str) -> tuple[str, int]:
    """Split a ``host:port`` listen address into a bindable pair.

    ``":9116"`` binds every interface, ``"[::1]:9116"`` is accepted for
    IPv6 literals.

    Raises:
        ValueError: If the address has no port or the port is out of range.
    """
    host, sep, port_text = address.strip().rpartition(":")
    if not sep or not port_text.isdigit():
        raise ValueError(f"invalid listen address {address!r}: expected host:port")
    port = int(port_text)
    if not 0 < port < 65536:
        raise ValueError(f"invalid listen address {address!r}: port out of range")
    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]
    elif ":" in host:
        raise ValueError(f"invalid listen address {address!r}: bracket IPv6 hosts")
    return host or "0.0.0.0", port
