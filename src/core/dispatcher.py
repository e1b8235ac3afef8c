"""Request dispatch and response mapping.

Every endpoint goes through the same steps:

    Built -> Sent -> ErrorMapped | Decoded | DecodeFailed | TransportFailed

- The error hook always runs before any attempt to decode the body.
- A 2xx body that does not fit the target model is a `ResponseDecodeError`,
  never a domain error.
- Nothing is retried here; retry policy belongs to the transport.
"""

from __future__ import annotations

import logging
from typing import Any, TypeVar

from core.codec import encode_json
from core.error_mapper import ErrorMapper
from core.errors import DecodeError, ResponseDecodeError
from core.interfaces.transport import Transport
from core.json_value import JSONValue
from core.request import RawResponse, RequestDescriptor

T = TypeVar("T")

logger = logging.getLogger(__name__)


class Dispatcher:
    def __init__(self, transport: Transport, error_mapper: ErrorMapper | None = None) -> None:
        self._transport = transport
        self._error_mapper = error_mapper

    @property
    def transport(self) -> Transport:
        return self._transport

    @staticmethod
    def encode_body(payload: Any | None) -> bytes | None:
        """Encode an outgoing payload before the request is built.

        Raises `RequestEncodeError`, so a bad payload never reaches the network.
        """

        if payload is None:
            return None
        return encode_json(payload)

    async def send(self, request: RequestDescriptor) -> RawResponse:
        logger.debug("%s %s", request.method.value, request.url)
        response = await self._transport.perform(request)
        logger.debug("%s %s -> HTTP %s", request.method.value, request.url, response.status_code)
        return response

    async def expect_object(self, request: RequestDescriptor, type_: type[T]) -> T:
        response = await self.send(request)
        self._check(response)
        try:
            payload = JSONValue.parse(response.body, require_container=True)
            return payload.decode(type_=type_)
        except (DecodeError, ValueError) as exc:
            logger.debug("Decoding %s failed: %s", type_.__name__, exc)
            raise ResponseDecodeError(type_.__name__, exc) from exc

    async def expect_void(self, request: RequestDescriptor) -> None:
        response = await self.send(request)
        self._check(response)

    def _check(self, response: RawResponse) -> None:
        if self._error_mapper is not None:
            error = self._error_mapper(response.status_code, response.body or None)
            if error is not None:
                logger.debug("Service error: %s", error)
                raise error
        response.raise_for_status()
