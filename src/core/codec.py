"""Field-table driven JSON codec for record-like models (Pydantic v2).

How a model declares its wire contract:
- `name: str` is required: read with `get_string`, absence fails decoding.
- `name: str | None = None` is optional: read with `try_get_string`, absence
  (or a value of the wrong JSON type) becomes `None`, and `None` is omitted
  when encoding.
- `name: JSONValue` is opaque: kept as raw JSON, no validation.
- nested models and `list[...]` use `decode` / `decoded_array`.
- `Field(alias="wire_key")` is the static field → key table.
"""

from __future__ import annotations

import json
import types
from dataclasses import dataclass
from functools import cache
from typing import Any, TypeVar, Union, get_args, get_origin

from pydantic import BaseModel, ConfigDict
from pydantic_core import core_schema

from core.errors import DecodeError, FieldTypeMismatchError, RequestEncodeError
from core.json_value import JSONValue

M = TypeVar("M", bound="JSONModel")
T = TypeVar("T")

_SCALAR_ACCESSORS: dict[type, tuple[str, str]] = {
    str: ("get_string", "try_get_string"),
    int: ("get_int", "try_get_int"),
    float: ("get_double", "try_get_double"),
    bool: ("get_bool", "try_get_bool"),
}


@dataclass(frozen=True)
class WireField:
    name: str
    key: str
    item_type: Any
    is_list: bool
    optional: bool

    def read(self, value: JSONValue) -> Any:
        if self.is_list:
            accessor = value.try_decoded_array if self.optional else value.decoded_array
            return accessor(self.key, type_=self.item_type)
        if self.item_type is JSONValue:
            return value.try_get_json(self.key) if self.optional else value.get_json(self.key)
        scalar = _SCALAR_ACCESSORS.get(self.item_type)
        if scalar is not None:
            required_name, optional_name = scalar
            return getattr(value, optional_name if self.optional else required_name)(self.key)
        accessor = value.try_decode if self.optional else value.decode
        return accessor(self.key, type_=self.item_type)


def _wire_field(name: str, key: str, annotation: Any) -> WireField:
    optional = False
    if get_origin(annotation) in (Union, types.UnionType):
        args = get_args(annotation)
        remaining = [arg for arg in args if arg is not type(None)]
        if len(remaining) != 1:
            raise TypeError(f"field {name!r}: unions other than `X | None` are not supported")
        optional = len(remaining) < len(args)
        annotation = remaining[0]
    is_list = get_origin(annotation) is list
    item_type = get_args(annotation)[0] if is_list else annotation
    return WireField(name=name, key=key, item_type=item_type, is_list=is_list, optional=optional)


@cache
def wire_fields(model: type[BaseModel]) -> tuple[WireField, ...]:
    """The static field → wire key table of a model, in declaration order."""

    return tuple(
        _wire_field(name, info.alias or name, info.annotation)
        for name, info in model.model_fields.items()
    )


def to_json_data(value: Any) -> Any:
    """Convert a model attribute to data accepted by `json.dumps`."""

    if isinstance(value, JSONValue):
        return value.to_python()
    if hasattr(value, "to_json_object"):
        return value.to_json_object()
    if isinstance(value, list):
        return [to_json_data(item) for item in value]
    return value


class JSONModel(BaseModel):
    """Flat data record implementing `JSONDecodable` and `JSONEncodable`."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    @classmethod
    def from_json(cls: type[M], value: JSONValue) -> M:
        if value.kind != "object":
            raise FieldTypeMismatchError((), "object", value.kind)
        values = {field.name: field.read(value) for field in wire_fields(cls)}
        return cls(**values)

    def to_json_object(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        for field in wire_fields(type(self)):
            attribute = getattr(self, field.name)
            if attribute is None and field.optional:
                continue
            out[field.key] = to_json_data(attribute)
        return out


class PassThroughObject:
    """A JSON object kept verbatim; `to_json_object` echoes what was decoded.

    Subclasses may expose typed views by overriding `_load`, which runs on
    construction and may raise `DecodeError`. The typed views are not part of
    the encoding: round-trips preserve the raw object exactly.
    """

    def __init__(self, data: Any = None) -> None:
        value = JSONValue.from_python({} if data is None else data)
        if value.kind != "object":
            raise FieldTypeMismatchError((), "object", value.kind)
        self._json = value
        self._load(value)

    def _load(self, value: JSONValue) -> None:
        pass

    @classmethod
    def from_json(cls: type[T], value: JSONValue) -> T:
        return cls(value)

    @property
    def json(self) -> JSONValue:
        return self._json

    def to_json_object(self) -> dict[str, Any]:
        return self._json.get_dictionary_object()

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self._json == other._json  # type: ignore[attr-defined]

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._json.to_python()!r})"

    @classmethod
    def _coerce(cls, value: Any) -> Any:
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except DecodeError as exc:
            raise ValueError(str(exc)) from exc

    @classmethod
    def __get_pydantic_core_schema__(cls, source_type: Any, handler: Any) -> core_schema.CoreSchema:
        return core_schema.no_info_plain_validator_function(
            cls._coerce,
            serialization=core_schema.plain_serializer_function_ser_schema(lambda v: v.to_json_object()),
        )


def encode_json(payload: Any) -> bytes:
    """Serialize an encodable model (or plain JSON data) to UTF-8 bytes.

    Raises `RequestEncodeError` when the payload holds values JSON cannot express.
    """

    try:
        data = to_json_data(payload)
        return json.dumps(data, ensure_ascii=False, allow_nan=False).encode("utf-8")
    except (TypeError, ValueError) as exc:
        raise RequestEncodeError(f"could not encode {type(payload).__name__}: {exc}") from exc


def decode_json(data: bytes | str, type_: type[T]) -> T:
    """Parse bytes and decode them as `type_` (raises `DecodeError` subclasses)."""

    return JSONValue.parse(data, require_container=True).decode(type_=type_)
