"""httpx wrapper.

Why a wrapper:
- Standardizes timeouts, headers and redirects for every call.
- Keeps httpx out of the core: the dispatcher only sees `RequestDescriptor`
  and `RawResponse`, and tests can swap in `httpx.MockTransport`.
"""

from __future__ import annotations

import logging

import httpx

from core.config import ConversationSettings
from core.errors import TransportError
from core.request import RawResponse, RequestDescriptor

logger = logging.getLogger(__name__)


def build_async_client(
    settings: ConversationSettings | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Create an `httpx.AsyncClient` with the client's defaults.

    Why a builder:
    - Centralizes timeouts/headers so every endpoint behaves the same.
    - `transport` lets tests plug in `httpx.MockTransport`.
    """

    settings = settings or ConversationSettings()
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Accept": "application/json",
    }
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        headers=headers,
        transport=transport,
    )


class HttpxTransport:
    """`core.interfaces.Transport` implemented on `httpx.AsyncClient`."""

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        *,
        settings: ConversationSettings | None = None,
    ) -> None:
        self._owns_client = client is None
        self._client = client or build_async_client(settings)

    async def perform(self, request: RequestDescriptor) -> RawResponse:
        try:
            response = await self._client.request(
                request.method.value,
                request.url,
                params=list(request.query),
                headers=request.wire_headers(),
                content=request.body,
            )
        except httpx.HTTPError as exc:
            logger.debug("Transport failure for %s %s: %s", request.method.value, request.url, exc)
            raise TransportError(f"{type(exc).__name__}: {exc}") from exc
        return RawResponse(
            status_code=response.status_code,
            headers=dict(response.headers),
            body=response.content,
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
