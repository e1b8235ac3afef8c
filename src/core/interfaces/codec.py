"""JSON codec contracts.

Why Protocol:
- Defines a structural contract (duck typing) without forcing a base class.
- Record-like models get it from `core.codec.JSONModel`; pass-through types
  (raw server echoes) implement it by hand and are equally accepted by the
  dispatcher and by nested decoding.
"""

from __future__ import annotations

from typing import Any, Protocol, TypeVar, runtime_checkable

from core.json_value import JSONValue

D = TypeVar("D", bound="JSONDecodable")


@runtime_checkable
class JSONDecodable(Protocol):
    """Can be built from a `JSONValue`.

    Design rules:
    - Raise a `DecodeError` subclass on failure, never return a partial value.
    - Ignore keys the type does not model.
    """

    @classmethod
    def from_json(cls: type[D], value: JSONValue) -> D:
        ...


@runtime_checkable
class JSONEncodable(Protocol):
    """Can be turned into data accepted by `json.dumps`.

    Optional fields that are absent must be omitted, not emitted as `null`.
    """

    def to_json_object(self) -> Any:
        ...
