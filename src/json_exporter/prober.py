"""
HTTP prober for json-exporter.

Performs a single GET against the target URL and decodes the body as
JSON. One pooled ``httpx.AsyncClient`` is built at startup from an
immutable :class:`ProberOptions` and shared by every scrape.
"""

from __future__ import annotations

import json
import math
from dataclasses import dataclass
from typing import Any

import httpx
import structlog

from json_exporter.config import Settings
from json_exporter.exceptions import ProbeError

logger = structlog.get_logger()

_DEFAULT_TIMEOUT_S = 30.0
_DEFAULT_MAX_IDLE_CONNECTIONS = 100


# Numbers must fit a 64-bit float; NaN and Infinity are not JSON.
def _parse_int(text: str) -> int:
    value = int(text)
    try:
        float(value)
    except OverflowError as exc:
        raise ValueError(f"number {text[:32]}... out of float64 range") from exc
    return value


def _parse_float(text: str) -> float:
    value = float(text)
    if math.isinf(value):
        raise ValueError(f"number {text!r} out of float64 range")
    return value


def _reject_constant(name: str) -> float:
    raise ValueError(f"invalid JSON token {name!r}")


@dataclass(frozen=True)
class ProberOptions:
    """Client configuration fixed for the lifetime of the process.

    Attributes:
        verify_tls: Verify certificates of HTTPS targets (off by default).
        max_idle_connections: Keep-alive connections kept in the pool.
        timeout_s: Per-probe timeout in seconds; ``None`` or ``0`` waits
            indefinitely.
    """

    verify_tls: bool = False
    max_idle_connections: int = _DEFAULT_MAX_IDLE_CONNECTIONS
    timeout_s: float | None = _DEFAULT_TIMEOUT_S

    @classmethod
    def from_settings(cls, settings: Settings) -> ProberOptions:
        return cls(
            verify_tls=settings.probe_verify_tls,
            max_idle_connections=settings.probe_max_idle_connections,
            timeout_s=settings.probe_timeout_s or None,
        )


class Prober:
    """Fetch and decode JSON documents from probe targets.

    Args:
        options: Client configuration; defaults to :class:`ProberOptions`.
        transport: Optional transport override, used by tests to serve
            canned responses.
    """

    def __init__(
        self,
        options: ProberOptions | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.options = options or ProberOptions()
        self._client = httpx.AsyncClient(
            verify=self.options.verify_tls,
            limits=httpx.Limits(
                max_connections=None,
                max_keepalive_connections=self.options.max_idle_connections,
            ),
            timeout=httpx.Timeout(self.options.timeout_s or None),
            follow_redirects=True,
            transport=transport,
        )

    async def probe(self, target: str, auth_header: str = "") -> Any:
        """GET *target* and return its decoded JSON body.

        The response status is not checked: a non-2xx body is decoded like
        any other.

        Args:
            target: URL to fetch.
            auth_header: Sent verbatim as ``Authorization`` when non-empty.

        Raises:
            ProbeError: If the URL is malformed, the request fails, or the
                body is not valid JSON.
        """
        headers = {"Authorization": auth_header} if auth_header else {}
        try:
            response = await self._client.get(target, headers=headers)
        except httpx.InvalidURL as exc:
            raise ProbeError(f"invalid target {target!r}: {exc}") from exc
        except httpx.HTTPError as exc:
            raise ProbeError(f"request to {target} failed: {exc}") from exc

        logger.debug(
            "probe_response",
            target=target,
            status=response.status_code,
            bytes=len(response.content),
        )
        try:
            return json.loads(
                response.content,
                parse_int=_parse_int,
                parse_float=_parse_float,
                parse_constant=_reject_constant,
            )
        except ValueError as exc:
            raise ProbeError(f"response from {target} is not valid JSON: {exc}") from exc

    async def aclose(self) -> None:
        """Close the pooled HTTP client."""
        await self._client.aclose()
