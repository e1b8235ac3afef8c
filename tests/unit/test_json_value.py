from __future__ import annotations

import copy
import pickle

import pytest

from core.domain.runtime import RuntimeDialogStack
from core.errors import FieldMissingError, FieldTypeMismatchError, MalformedPayloadError
from core.json_value import JSONValue, json_kind


def test_parse_rejects_invalid_json():
    with pytest.raises(MalformedPayloadError):
        JSONValue.parse(b"{not json")


def test_parse_can_require_a_container():
    assert JSONValue.parse(b"42").get_int() == 42
    with pytest.raises(MalformedPayloadError):
        JSONValue.parse(b"42", require_container=True)
    assert JSONValue.parse(b"[]", require_container=True).kind == "array"


def test_json_kind_names():
    assert [json_kind(v) for v in (None, True, 1, 1.5, "s", [], {})] == [
        "null",
        "boolean",
        "number",
        "number",
        "string",
        "array",
        "object",
    ]


def test_hard_accessors_follow_paths():
    value = JSONValue.parse(
        b'{"name": "pizza", "count": 3, "ratio": 0.5, "on": true, "nested": {"deep": ["a", "b"]}}'
    )

    assert value.get_string("name") == "pizza"
    assert value.get_int("count") == 3
    assert value.get_double("count") == 3.0
    assert value.get_double("ratio") == 0.5
    assert value.get_bool("on") is True
    assert value.get_string("nested", "deep", 1) == "b"
    assert [item.get_string() for item in value.get_array("nested", "deep")] == ["a", "b"]


def test_integral_float_is_accepted_as_int():
    assert JSONValue.parse(b'{"n": 2.0}').get_int("n") == 2
    with pytest.raises(FieldTypeMismatchError):
        JSONValue.parse(b'{"n": 2.5}').get_int("n")


def test_missing_field_reports_its_path():
    value = JSONValue.parse(b'{"nested": {"items": []}}')

    with pytest.raises(FieldMissingError) as info:
        value.get_string("nested", "deep")
    assert info.value.path == ("nested", "deep")
    assert "nested.deep" in str(info.value)

    with pytest.raises(FieldMissingError) as info:
        value.get_string("nested", "items", 0)
    assert info.value.path == ("nested", "items", 0)


def test_type_mismatch_reports_expected_and_actual():
    value = JSONValue.parse(b'{"count": "3", "flag": 1, "yes": true}')

    with pytest.raises(FieldTypeMismatchError) as info:
        value.get_int("count")
    assert (info.value.expected, info.value.actual) == ("integer", "string")

    with pytest.raises(FieldTypeMismatchError):
        value.get_bool("flag")
    with pytest.raises(FieldTypeMismatchError):
        value.get_int("yes")
    with pytest.raises(FieldTypeMismatchError):
        value.get_double("yes")


def test_walking_through_a_scalar_is_a_type_mismatch():
    with pytest.raises(FieldTypeMismatchError) as info:
        JSONValue.parse(b'{"a": 1}').get_string("a", "b")
    assert info.value.path == ("a",)
    assert info.value.expected == "object"


def test_try_accessors_return_none_for_missing_null_or_mismatch():
    value = JSONValue.parse(b'{"text": 5, "nothing": null}')

    assert value.try_get_string("text") is None
    assert value.try_get_string("absent") is None
    assert value.try_get_string("nothing") is None
    assert value.try_get_int("text") == 5
    assert value.try_get_bool("text") is None
    assert value.try_get_json("absent") is None
    assert value.try_get_json("nothing") == JSONValue(None)


def test_try_decode_does_not_hide_nested_failures():
    value = JSONValue.parse(b'{"frame": {"invoked_subdialog": "x"}, "scalar": 3}')

    assert value.try_decode("absent", type_=RuntimeDialogStack) is None
    assert value.try_decode("scalar", type_=RuntimeDialogStack) is None
    with pytest.raises(FieldMissingError) as info:
        value.try_decode("frame", type_=RuntimeDialogStack)
    assert info.value.path == ("frame", "dialog_node")


def test_decoded_array_fails_on_first_bad_element():
    value = JSONValue.parse(
        b'{"stack": [{"dialog_node": "a"}, {"dialog_node": "b"}, {"dialog_node": 3},'
        b' {"dialog_node": "d"}, {"dialog_node": "e"}]}'
    )

    with pytest.raises(FieldTypeMismatchError) as info:
        value.decoded_array("stack", type_=RuntimeDialogStack)
    assert info.value.path == ("stack", 2, "dialog_node")
    assert "stack[2].dialog_node" in str(info.value)


def test_empty_array_is_distinct_from_missing():
    value = JSONValue.parse(b'{"stack": [], "names": ["a", "b"]}')

    assert value.decoded_array("stack", type_=RuntimeDialogStack) == []
    assert value.try_decoded_array("other", type_=RuntimeDialogStack) is None
    assert value.decoded_array("names", type_=str) == ["a", "b"]
    with pytest.raises(FieldMissingError):
        value.decoded_array("other", type_=RuntimeDialogStack)


def test_raw_access_returns_copies():
    value = JSONValue.parse(b'{"a": {"b": [1, 2]}}')

    raw = value.get_dictionary_object()
    raw["a"]["b"].append(3)

    assert value.get_dictionary_object() == {"a": {"b": [1, 2]}}
    with pytest.raises(FieldTypeMismatchError):
        JSONValue.parse(b"[1]").get_dictionary_object()


def test_construction_copies_caller_data():
    source = {"items": [1, 2]}
    value = JSONValue(source)
    source["items"].append(3)

    assert value.to_python() == {"items": [1, 2]}


def test_values_are_immutable_and_structurally_equal():
    value = JSONValue.from_python({"a": [1, None]})

    assert value == JSONValue.parse(b'{"a": [1, null]}')
    assert JSONValue(True) != JSONValue(1)
    assert JSONValue.from_python(value) is value
    with pytest.raises(AttributeError):
        value._raw = 2
    with pytest.raises(TypeError):
        hash(value)


def test_copy_and_pickle_keep_the_value():
    value = JSONValue.parse(b'{"a": [1, {"b": "c"}]}')

    assert copy.deepcopy(value) is value
    assert pickle.loads(pickle.dumps(value)) == value


@pytest.mark.parametrize("constant", [b"NaN", b"Infinity", b"-Infinity"])
def test_parse_rejects_non_finite_constants(constant):
    with pytest.raises(MalformedPayloadError):
        JSONValue.parse(b'{"confidence": ' + constant + b"}")


def test_parse_rejects_nesting_too_deep_to_parse():
    depth = 100_000
    payload = b'{"extra": ' + b"[" * depth + b"]" * depth + b"}"

    with pytest.raises(MalformedPayloadError):
        JSONValue.parse(payload)


def test_integer_too_large_for_a_double_is_a_type_mismatch():
    value = JSONValue.parse(b'{"x": 1' + b"0" * 400 + b"}")

    with pytest.raises(FieldTypeMismatchError) as info:
        value.get_double("x")
    assert info.value.path == ("x",)
    assert info.value.actual == "number out of range"
    assert value.try_get_double("x") is None
    assert value.get_int("x") == 10**400
