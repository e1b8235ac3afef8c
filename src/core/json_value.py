"""Immutable JSON value with typed, fallible accessors.

Why a wrapper instead of plain dicts:
- Every model decodes through the same small set of accessors, so "required"
  vs "optional" is decided by which accessor a field uses (`get_*` raises,
  `try_*` returns `None`), not by ad-hoc `dict.get` calls.
- Failures carry the key path (`output.text[2]`), which makes server-side
  schema drift easy to diagnose.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any, Callable, Sequence, TypeVar

from pydantic_core import core_schema

from core.errors import (
    DecodeError,
    FieldMissingError,
    FieldTypeMismatchError,
    MalformedPayloadError,
    PathElement,
)

T = TypeVar("T")

_MISSING = object()


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not a JSON value")


def json_kind(raw: Any) -> str:
    """Name of the JSON type of an already-parsed value."""

    if raw is None:
        return "null"
    if isinstance(raw, bool):
        return "boolean"
    if isinstance(raw, (int, float)):
        return "number"
    if isinstance(raw, str):
        return "string"
    if isinstance(raw, list):
        return "array"
    if isinstance(raw, dict):
        return "object"
    return type(raw).__name__


def _normalise(value: Any) -> Any:
    # Copies containers so callers never share mutable state with a JSONValue.
    if isinstance(value, JSONValue):
        return _normalise(value._raw)
    if isinstance(value, Mapping):
        return {str(k): _normalise(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_normalise(v) for v in value]
    return value


def _structurally_equal(a: Any, b: Any) -> bool:
    if json_kind(a) != json_kind(b):
        return False
    if isinstance(a, dict):
        return a.keys() == b.keys() and all(_structurally_equal(a[k], b[k]) for k in a)
    if isinstance(a, list):
        return len(a) == len(b) and all(_structurally_equal(x, y) for x, y in zip(a, b))
    return a == b


class JSONValue:
    """A parsed JSON document (or a piece of one)."""

    __slots__ = ("_raw",)

    def __init__(self, raw: Any = None) -> None:
        object.__setattr__(self, "_raw", _normalise(raw))

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("JSONValue is immutable")

    # ------------------------------------------------------------------ construction
    @classmethod
    def parse(cls, data: bytes | str, *, require_container: bool = False) -> "JSONValue":
        """Parse raw bytes into a `JSONValue`.

        Raises `MalformedPayloadError` when the input is not JSON (including
        `NaN` / `Infinity` and nesting too deep to parse), or when
        `require_container` is set and the top level is a scalar.
        """

        try:
            raw = json.loads(data, parse_constant=_reject_constant)
        except (TypeError, ValueError, RecursionError) as exc:
            raise MalformedPayloadError(str(exc)) from exc
        if require_container and not isinstance(raw, (dict, list)):
            raise MalformedPayloadError(f"expected an object or array, got {json_kind(raw)}")
        return cls._wrap(raw)

    @classmethod
    def from_python(cls, value: Any) -> "JSONValue":
        return value if isinstance(value, JSONValue) else cls(value)

    @classmethod
    def _wrap(cls, raw: Any) -> "JSONValue":
        # Sub-values of an owned tree are shared, never copied: nothing mutates them.
        instance = object.__new__(cls)
        object.__setattr__(instance, "_raw", raw)
        return instance

    # ------------------------------------------------------------------ introspection
    @property
    def kind(self) -> str:
        return json_kind(self._raw)

    def to_python(self) -> Any:
        """Plain Python copy of the value (dict / list / scalars)."""

        return _normalise(self._raw)

    def get_dictionary_object(self) -> dict[str, Any]:
        """The underlying object as a plain (copied) mapping."""

        if not isinstance(self._raw, dict):
            raise FieldTypeMismatchError((), "object", self.kind)
        return _normalise(self._raw)

    # ------------------------------------------------------------------ lookup
    def _lookup(self, path: Sequence[PathElement]) -> Any:
        current = self._raw
        for depth, key in enumerate(path):
            if isinstance(key, int):
                if not isinstance(current, list):
                    raise FieldTypeMismatchError(path[:depth], "array", json_kind(current))
                if not 0 <= key < len(current):
                    raise FieldMissingError(path[: depth + 1])
                current = current[key]
            else:
                if not isinstance(current, dict):
                    raise FieldTypeMismatchError(path[:depth], "object", json_kind(current))
                if key not in current:
                    raise FieldMissingError(path[: depth + 1])
                current = current[key]
        return current

    def _try_lookup(self, path: Sequence[PathElement]) -> Any:
        try:
            return self._lookup(path)
        except (FieldMissingError, FieldTypeMismatchError):
            return _MISSING

    # ------------------------------------------------------------------ hard accessors
    def get_string(self, *path: PathElement) -> str:
        raw = self._lookup(path)
        if not isinstance(raw, str):
            raise FieldTypeMismatchError(path, "string", json_kind(raw))
        return raw

    def get_int(self, *path: PathElement) -> int:
        raw = self._lookup(path)
        if isinstance(raw, bool):
            raise FieldTypeMismatchError(path, "integer", "boolean")
        if isinstance(raw, int):
            return raw
        if isinstance(raw, float) and raw.is_integer():
            return int(raw)
        raise FieldTypeMismatchError(path, "integer", json_kind(raw))

    def get_double(self, *path: PathElement) -> float:
        raw = self._lookup(path)
        if isinstance(raw, bool) or not isinstance(raw, (int, float)):
            raise FieldTypeMismatchError(path, "number", json_kind(raw))
        try:
            return float(raw)
        except OverflowError:
            raise FieldTypeMismatchError(path, "number", "number out of range") from None

    def get_bool(self, *path: PathElement) -> bool:
        raw = self._lookup(path)
        if not isinstance(raw, bool):
            raise FieldTypeMismatchError(path, "boolean", json_kind(raw))
        return raw

    def get_json(self, *path: PathElement) -> "JSONValue":
        return JSONValue._wrap(self._lookup(path))

    def get_array(self, *path: PathElement) -> list["JSONValue"]:
        raw = self._lookup(path)
        if not isinstance(raw, list):
            raise FieldTypeMismatchError(path, "array", json_kind(raw))
        return [JSONValue._wrap(item) for item in raw]

    def decode(self, *path: PathElement, type_: type[T]) -> T:
        """Decode the sub-value at `path` as `type_`.

        `type_` is a decodable model (anything with `from_json`) or one of
        `str`, `int`, `float`, `bool`. Nested failures are re-raised with the
        enclosing path prepended.
        """

        sub = self.get_json(*path)
        try:
            return _decode_value(sub, type_)
        except DecodeError as exc:
            exc.prefix_path(path)
            raise

    def decoded_array(self, *path: PathElement, type_: type[T]) -> list[T]:
        """Decode every element of the array at `path`; the first bad element fails the call."""

        out: list[T] = []
        for index, item in enumerate(self.get_array(*path)):
            try:
                out.append(_decode_value(item, type_))
            except DecodeError as exc:
                exc.prefix_path((*path, index))
                raise
        return out

    # ------------------------------------------------------------------ try accessors
    def try_get_string(self, *path: PathElement) -> str | None:
        return self._optional(self.get_string, path)

    def try_get_int(self, *path: PathElement) -> int | None:
        return self._optional(self.get_int, path)

    def try_get_double(self, *path: PathElement) -> float | None:
        return self._optional(self.get_double, path)

    def try_get_bool(self, *path: PathElement) -> bool | None:
        return self._optional(self.get_bool, path)

    def try_get_json(self, *path: PathElement) -> "JSONValue | None":
        return self._optional(self.get_json, path)

    def try_decode(self, *path: PathElement, type_: type[T]) -> T | None:
        raw = self._try_lookup(path)
        if raw is _MISSING or not _has_expected_kind(raw, type_):
            return None
        return self.decode(*path, type_=type_)

    def try_decoded_array(self, *path: PathElement, type_: type[T]) -> list[T] | None:
        raw = self._try_lookup(path)
        if not isinstance(raw, list):
            return None
        return self.decoded_array(*path, type_=type_)

    @staticmethod
    def _optional(accessor: Callable[..., T], path: Sequence[PathElement]) -> T | None:
        try:
            return accessor(*path)
        except (FieldMissingError, FieldTypeMismatchError):
            return None

    # ------------------------------------------------------------------ dunder
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, JSONValue):
            return NotImplemented
        return _structurally_equal(self._raw, other._raw)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"JSONValue({self._raw!r})"

    def __copy__(self) -> "JSONValue":
        return self

    def __deepcopy__(self, memo: dict[int, Any]) -> "JSONValue":
        return self

    def __reduce__(self) -> tuple[Any, ...]:
        return (JSONValue, (self._raw,))

    # ------------------------------------------------------------------ pydantic
    @classmethod
    def __get_pydantic_core_schema__(cls, source_type: Any, handler: Any) -> core_schema.CoreSchema:
        return core_schema.no_info_plain_validator_function(
            cls.from_python,
            serialization=core_schema.plain_serializer_function_ser_schema(lambda v: v.to_python()),
        )


_SCALAR_GETTERS: dict[type, str] = {
    str: "get_string",
    int: "get_int",
    float: "get_double",
    bool: "get_bool",
}

_SCALAR_KINDS: dict[type, tuple[str, ...]] = {
    str: ("string",),
    int: ("number",),
    float: ("number",),
    bool: ("boolean",),
}


def _decode_value(value: JSONValue, type_: type[T]) -> T:
    getter = _SCALAR_GETTERS.get(type_)
    if getter is not None:
        return getattr(value, getter)()
    if type_ is JSONValue:
        return value  # type: ignore[return-value]
    return type_.from_json(value)  # type: ignore[attr-defined]


def _has_expected_kind(raw: Any, type_: type) -> bool:
    if type_ is JSONValue:
        return True
    kinds = _SCALAR_KINDS.get(type_)
    if kinds is not None:
        return json_kind(raw) in kinds
    return isinstance(raw, dict)
