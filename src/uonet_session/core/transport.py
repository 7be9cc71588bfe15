"""HTTP transport built on httpx.

Follows redirects transparently and keeps every cookie in a single jar that
the session store owns the lifecycle of.
"""

from __future__ import annotations

from dataclasses import dataclass

import httpx

from uonet_session.core.config import HttpConfig
from uonet_session.core.logging import get_logger

log = get_logger("transport")


@dataclass
class PageResponse:
    status: int
    url: str
    headers: httpx.Headers
    text: str


class HttpTransport:
    """Thin async wrapper exposing ``fetch`` and ``post_form``."""

    def __init__(
        self,
        config: HttpConfig | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.config = config or HttpConfig()
        self._client = client or httpx.AsyncClient(
            follow_redirects=True,
            timeout=self.config.timeout,
            verify=self.config.verify,
        )
        self._client.headers["User-Agent"] = self.config.user_agent

    @property
    def cookies(self) -> httpx.Cookies:
        return self._client.cookies

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def close(self) -> None:
        await self._client.aclose()
        log.debug("transport_closed")

    async def __aenter__(self) -> HttpTransport:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    # ------------------------------------------------------------------
    # Requests
    # ------------------------------------------------------------------

    async def fetch(self, url: str, headers: dict[str, str] | None = None) -> PageResponse:
        """GET a page, following redirects."""
        response = await self._client.get(url, headers=headers)
        return self._finish(response)

    async def post_form(
        self,
        url: str,
        fields: dict[str, str],
        headers: dict[str, str] | None = None,
    ) -> PageResponse:
        """POST url-encoded form fields, following redirects."""
        response = await self._client.post(url, data=fields, headers=headers)
        return self._finish(response)

    def _finish(self, response: httpx.Response) -> PageResponse:
        log.debug(
            "http_response",
            method=response.request.method,
            url=str(response.request.url),
            status=response.status_code,
            redirects=len(response.history),
        )
        response.raise_for_status()
        return PageResponse(
            status=response.status_code,
            url=str(response.url),
            headers=response.headers,
            text=response.text,
        )
