"""Immutable request/response records exchanged with the transport."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Iterable, Mapping

from core.credentials import Credentials
from core.errors import TransportError


class HTTPMethod(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    HEAD = "HEAD"


@dataclass(frozen=True)
class RequestDescriptor:
    """Everything needed to perform one HTTP call.

    Rules:
    - `headers` is a map: on duplicate keys the last write wins.
    - `query` is an ordered list of pairs: repeated names are kept, in order.
    """

    method: HTTPMethod
    url: str
    credentials: Credentials | None = None
    headers: Mapping[str, str] = field(default_factory=dict)
    query: tuple[tuple[str, str], ...] = ()
    content_type: str | None = None
    body: bytes | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "method", HTTPMethod(self.method))
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))
        object.__setattr__(self, "query", tuple((str(k), str(v)) for k, v in self.query))

    @classmethod
    def build(
        cls,
        method: HTTPMethod | str,
        url: str,
        *,
        credentials: Credentials | None = None,
        headers: Iterable[tuple[str, str]] | Mapping[str, str] | None = None,
        query: Iterable[tuple[str, str]] | None = None,
        content_type: str | None = None,
        body: bytes | None = None,
    ) -> "RequestDescriptor":
        merged: dict[str, str] = {}
        items = headers.items() if isinstance(headers, Mapping) else (headers or ())
        for key, value in items:
            merged[key] = value
        return cls(
            method=HTTPMethod(method),
            url=url,
            credentials=credentials,
            headers=merged,
            query=tuple(query or ()),
            content_type=content_type,
            body=body,
        )

    def wire_headers(self) -> dict[str, str]:
        """Headers as sent: explicit headers, then content type, then credentials."""

        out = dict(self.headers)
        if self.content_type and self.body is not None:
            out["Content-Type"] = self.content_type
        if self.credentials is not None:
            out.update(self.credentials.auth_headers())
        return out


@dataclass(frozen=True)
class RawResponse:
    status_code: int
    headers: Mapping[str, str] = field(default_factory=dict)
    body: bytes = b""

    def __post_init__(self) -> None:
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300

    def raise_for_status(self) -> None:
        if not self.is_success:
            raise TransportError(f"HTTP {self.status_code}", status_code=self.status_code)
