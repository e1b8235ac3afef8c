"""Transport contract used by the dispatcher."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from core.request import RawResponse, RequestDescriptor


@runtime_checkable
class Transport(Protocol):
    """Performs one HTTP exchange.

    Design rules:
    - `perform` is async: it always does network I/O.
    - Connection-level failures are raised as `core.errors.TransportError`;
      HTTP error statuses are returned, not raised.
    """

    async def perform(self, request: RequestDescriptor) -> RawResponse:
        ...

    async def aclose(self) -> None:
        ...
