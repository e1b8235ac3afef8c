"""Error taxonomy for the conversation client.

Why a single hierarchy:
- Callers can catch `ConversationError` once and still branch on the concrete
  failure (decode, encode, service, transport).
- Decode-time errors carry the JSON path where they happened, so a failure
  deep inside a nested model points at the exact field.
"""

from __future__ import annotations

from typing import Sequence

PathElement = str | int


def format_path(path: Sequence[PathElement]) -> str:
    """Render a key path as `a.b[2].c`."""

    out = ""
    for element in path:
        if isinstance(element, int):
            out += f"[{element}]"
        elif out:
            out += f".{element}"
        else:
            out = element
    return out or "<root>"


class ConversationError(Exception):
    """Base class for every failure surfaced by the client."""


class ConfigurationError(ConversationError):
    """The client cannot be built from the current settings."""


class DecodeError(ConversationError):
    """A JSON payload could not be read into the requested shape."""

    def __init__(self, path: Sequence[PathElement] = ()) -> None:
        self.path: tuple[PathElement, ...] = tuple(path)
        super().__init__()

    def prefix_path(self, prefix: Sequence[PathElement]) -> None:
        self.path = (*prefix, *self.path)

    def __str__(self) -> str:
        return f"{self._describe()} at '{format_path(self.path)}'"

    def _describe(self) -> str:
        return "invalid JSON value"


class MalformedPayloadError(DecodeError):
    """The bytes are not valid JSON, or not the container that was expected."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__()

    def __str__(self) -> str:
        return f"malformed JSON payload: {self.reason}"


class FieldMissingError(DecodeError):
    def _describe(self) -> str:
        return "missing field"


class FieldTypeMismatchError(DecodeError):
    def __init__(self, path: Sequence[PathElement], expected: str, actual: str) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(path)

    def _describe(self) -> str:
        return f"expected {self.expected}, got {self.actual}"


class RequestEncodeError(ConversationError):
    """The outgoing payload could not be serialized; nothing was sent."""


class ResponseDecodeError(ConversationError):
    """The service answered 2xx but the body does not match the expected model."""

    def __init__(self, model_name: str, cause: Exception) -> None:
        self.model_name = model_name
        self.cause = cause
        super().__init__(f"could not decode {model_name}: {cause}")


class DomainError(ConversationError):
    """Failure reported by the service itself (status outside [200, 300))."""

    def __init__(self, status_code: int, message: str | None = None) -> None:
        self.status_code = status_code
        self.message = message
        super().__init__(f"HTTP {status_code}: {message}" if message else f"HTTP {status_code}")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DomainError):
            return NotImplemented
        return (self.status_code, self.message) == (other.status_code, other.message)

    def __hash__(self) -> int:
        return hash((self.status_code, self.message))


class TransportError(ConversationError):
    """Network-level failure, or a non-2xx status the error hook did not explain."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)
