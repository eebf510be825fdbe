"""HTTP sink posting SignalFx v2 datapoint payloads."""

from __future__ import annotations

import logging
from typing import Mapping, Optional, Sequence

import httpx

from exporters.interfaces import BaseMetricsSink
from utils.async_http import AsyncHTTP

from .datapoint import Datapoint, encode_datapoints
from .errors import SinkError

logger = logging.getLogger(__name__)

TOKEN_HEADER = "X-SF-Token"
USER_AGENT = "signalfx-metrics-exporter/0.1"


def build_headers(
    access_token: str, extra: Optional[Mapping[str, str]] = None
) -> httpx.Headers:
    """Return the request headers for an ingest call.

    Caller supplied headers are applied last and replace a default with the
    same name regardless of case. Their keys keep the caller's spelling.
    """

    headers = httpx.Headers(
        {
            "Content-Type": "application/json",
            "User-Agent": USER_AGENT,
        }
    )
    if access_token:
        headers[TOKEN_HEADER] = access_token
    for key, value in (extra or {}).items():
        headers[key] = value
    return headers


class HttpMetricsSink(BaseMetricsSink):
    """Sends datapoint batches to one ingest URL over a pooled HTTP client."""

    def __init__(
        self,
        ingest_url: str,
        *,
        access_token: str = "",
        headers: Optional[Mapping[str, str]] = None,
        timeout: Optional[float] = None,
        http: Optional[AsyncHTTP] = None,
    ) -> None:
        self.ingest_url = ingest_url
        self.headers = build_headers(access_token, headers)
        self.timeout = timeout
        self._http = http or AsyncHTTP(headers=self.headers, timeout=timeout)

    @property
    def is_closed(self) -> bool:
        return self._http.is_closed

    async def send(self, datapoints: Sequence[Datapoint]) -> None:
        if not datapoints:
            return

        body = encode_datapoints(datapoints)
        try:
            response = await self._http.post(self.ingest_url, json=body)
        except httpx.HTTPError as exc:
            logger.error(
                "Ingest request failed",
                extra={"url": self.ingest_url, "count": len(datapoints), "error": str(exc)},
            )
            raise SinkError(f"ingest request to {self.ingest_url} failed: {exc}") from exc
        if response.status_code >= 300:
            logger.error(
                "Ingest endpoint rejected datapoints",
                extra={
                    "status_code": response.status_code,
                    "url": self.ingest_url,
                    "count": len(datapoints),
                },
            )
            raise SinkError(
                f"ingest request to {self.ingest_url} failed with HTTP {response.status_code}",
                status_code=response.status_code,
            )
        logger.debug(
            "Sent datapoints", extra={"count": len(datapoints), "url": self.ingest_url}
        )

    async def aclose(self) -> None:
        await self._http.aclose()


__all__ = ["HttpMetricsSink", "TOKEN_HEADER", "USER_AGENT", "build_headers"]
