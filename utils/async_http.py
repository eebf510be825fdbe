"""Shared asynchronous HTTP client used by metric sinks."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Union

import httpx
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_random_exponential,
)

from .retry import DEFAULT_MAX_ATTEMPTS, INITIAL_BACKOFF_SECONDS, MAX_BACKOFF_SECONDS

logger = logging.getLogger(__name__)

DEFAULT_CONNECT_TIMEOUT = 5.0
DEFAULT_TOTAL_TIMEOUT = 30.0


def _log_retry(retry_state) -> None:
    if retry_state.attempt_number > 1:
        logger.warning(
            "Retrying HTTP request after exception",
            extra={"attempt": retry_state.attempt_number},
        )


def _build_timeout(timeout: Optional[float]) -> httpx.Timeout:
    if timeout is None:
        return httpx.Timeout(DEFAULT_TOTAL_TIMEOUT, connect=DEFAULT_CONNECT_TIMEOUT)
    if timeout == 0:
        # Zero disables the per-request deadline.
        return httpx.Timeout(None)
    return httpx.Timeout(timeout, connect=min(timeout, DEFAULT_CONNECT_TIMEOUT))


class AsyncHTTP:
    """Wrapper around :class:`httpx.AsyncClient` with shared retry policy.

    ``headers`` are attached to every request; keys keep their spelling.
    """

    def __init__(
        self,
        *,
        base_url: Optional[str] = None,
        headers: Optional[Union[Mapping[str, str], httpx.Headers]] = None,
        timeout: Optional[float] = None,
        follow_redirects: bool = True,
    ) -> None:
        self._headers = httpx.Headers(headers or {})
        self._client = httpx.AsyncClient(
            base_url=base_url or "",
            headers=self._headers,
            timeout=_build_timeout(timeout),
            follow_redirects=follow_redirects,
        )

    @property
    def headers(self) -> httpx.Headers:
        return httpx.Headers(self._headers)

    @property
    def is_closed(self) -> bool:
        return self._client.is_closed

    async def aclose(self) -> None:
        await self._client.aclose()

    @retry(
        reraise=True,
        stop=stop_after_attempt(DEFAULT_MAX_ATTEMPTS),
        # Jittered exponential backoff using Tenacity's built-in helper
        wait=wait_random_exponential(
            multiplier=INITIAL_BACKOFF_SECONDS, max=MAX_BACKOFF_SECONDS
        ),
        retry=retry_if_exception_type(httpx.TransportError),
        before=_log_retry,
    )
    async def request(
        self,
        method: str,
        url: str,
        *,
        params: Optional[Mapping[str, Any]] = None,
        json: Optional[Any] = None,
        content: Optional[bytes] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> httpx.Response:
        logger.debug("AsyncHTTP request", extra={"method": method, "url": url})
        response = await self._client.request(
            method,
            url,
            params=params,
            json=json,
            content=content,
            headers=headers,
        )
        return response

    async def post(self, url: str, **kw: Any) -> httpx.Response:
        return await self.request("POST", url, **kw)
