"""Async HTTP fetch helper shared by every price source."""

from __future__ import annotations

import json
import logging
from typing import Any, Mapping

import httpx

from unified_price.core.config import HttpConfig
from unified_price.core.exceptions import ParseError, TransportError

logger = logging.getLogger(__name__)

_DEFAULT_ACCEPT = "application/json"


class HttpFetcher:
    """Thin GET-only wrapper around one ``httpx.AsyncClient``.

    Every request carries a browser-like header set; per-call headers are
    merged on top. Non-2xx responses and network failures become
    ``TransportError``. No retries: each call is one round trip.

    Use via ``async with HttpFetcher(...) as fetcher:``. The underlying
    client is safe to share between concurrent resolutions.
    """

    def __init__(
        self,
        config: HttpConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config or HttpConfig()
        self._client = httpx.AsyncClient(
            headers={
                "User-Agent": self._config.user_agent,
                "Accept": _DEFAULT_ACCEPT,
                "Content-Type": "application/json",
            },
            timeout=httpx.Timeout(self._config.timeout),
            follow_redirects=True,
            transport=transport,
        )

    async def __aenter__(self) -> HttpFetcher:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the underlying HTTP client. Called automatically by __aexit__."""
        await self._client.aclose()

    async def get_bytes(
        self,
        url: str,
        params: Mapping[str, str] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> bytes:
        """GET ``url`` and return the raw body."""
        response = await self._get(url, params, headers)
        return response.content

    async def get_text(
        self,
        url: str,
        params: Mapping[str, str] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> str:
        """GET ``url`` and return the body decoded with the response charset."""
        response = await self._get(url, params, headers)
        return response.text

    async def get_json(
        self,
        url: str,
        params: Mapping[str, str] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Any:
        """GET ``url`` and parse the body as JSON.

        Raises:
            TransportError: Non-2xx status or network failure.
            ParseError: Body is not valid JSON.
        """
        text = await self.get_text(url, params, headers)
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise ParseError(
                f"Invalid JSON from {url}: {e.msg}",
                context={"url": url, "reason": "json"},
            ) from e

    async def _get(
        self,
        url: str,
        params: Mapping[str, str] | None,
        headers: Mapping[str, str] | None,
    ) -> httpx.Response:
        try:
            response = await self._client.get(
                url,
                params=dict(params) if params else None,
                headers=dict(headers) if headers else None,
            )
        except httpx.RequestError as e:
            raise TransportError(
                f"Request to {url} failed: {e}",
                context={"url": url, "status_code": None},
            ) from e

        if not response.is_success:
            raise TransportError(
                f"HTTP {response.status_code} from {url}",
                context={"url": url, "status_code": response.status_code},
            )

        logger.debug("GET %s -> %d", response.url, response.status_code)
        return response
