"""Tests for Marshal coercion and validation."""

import types
from collections import OrderedDict
from dataclasses import dataclass

import pytest
from pydantic import BaseModel

from entitymarshal import (
    CircularReferenceError,
    LocalRuntimeCache,
    Marshal,
    PropertyDefinition,
    TypeMismatchError,
    UnknownPropertyError,
    UnknownTypeError,
)


@dataclass
class Point:
    x: int
    y: int


class Money(BaseModel):
    amount: int
    currency: str


class Bucket:
    pass


class Slotted:
    __slots__ = ("x",)


class StubTarget:
    """Minimal MarshalTarget with a fixed set of definitions."""

    def __init__(self, definitions, permissive=False):
        self._definitions = {d.name: d for d in definitions}
        self._permissive = permissive
        self._cache = LocalRuntimeCache()

    @classmethod
    def type_id(cls):
        return "tests.StubTarget"

    def resolve_definition(self, name):
        if name in self._definitions:
            return self._definitions[name]
        if self._permissive:
            self._definitions[name] = PropertyDefinition(name, "int")
            return self._definitions[name]
        raise UnknownPropertyError(name, self.type_id(), action="set")

    @property
    def runtime_cache(self):
        return self._cache


def _define(raw, name="field"):
    return PropertyDefinition(name, raw)


@pytest.mark.parametrize(
    ("raw", "value"),
    [
        ("int", 5),
        ("integer", -3),
        ("float", 1.25),
        ("bool", False),
        ("string", "text"),
        ("str", ""),
        ("numeric", "12.5"),
        ("scalar", 7),
        ("array", [1, "a"]),
        ("dict", {"a": 1}),
        ("mixed", object()),
    ],
)
def test_value_matching_declared_type_is_unchanged(marshal, raw, value):
    assert marshal.coerce(value, _define(raw)) is value


def test_numeric_text_is_cast_to_int(marshal):
    assert marshal.coerce("12", _define("int")) == 12


def test_partial_numeric_text_fails_with_type_mismatch(marshal):
    with pytest.raises(TypeMismatchError) as exc_info:
        marshal.coerce("12abc", _define("int", name="age"), owner_type="User")

    error = exc_info.value
    assert error.field == "age"
    assert error.owner_type == "User"
    assert error.expected == "int"
    assert error.actual == "str"
    assert error.value == "12abc"
    assert "12abc" in str(error)


def test_int_is_widened_to_float(marshal):
    result = marshal.coerce(3, _define("double"))

    assert result == 3.0
    assert isinstance(result, float)


def test_fractional_float_is_not_truncated_into_int(marshal):
    with pytest.raises(TypeMismatchError):
        marshal.coerce(3.5, _define("int"))


def test_bool_text_tokens_are_cast(marshal):
    assert marshal.coerce("true", _define("boolean")) is True
    with pytest.raises(TypeMismatchError):
        marshal.coerce("maybe", _define("bool"))


def test_none_is_accepted_for_constrained_fields(marshal):
    assert marshal.coerce(None, _define("int")) is None
    assert marshal.coerce(None, _define("test_marshal.Point")) is None


def test_clear_type_turns_empty_scalars_into_none(marshal):
    assert marshal.coerce("", _define("unset")) is None
    with pytest.raises(TypeMismatchError):
        marshal.coerce("text", _define("null"))


def test_unknown_declared_type_raises(marshal):
    with pytest.raises(UnknownTypeError) as exc_info:
        marshal.coerce(1, _define("NoSuchTypeAnywhere", name="ghost"), owner_type="User")

    assert exc_info.value.type_name == "NoSuchTypeAnywhere"
    assert exc_info.value.field == "ghost"


def test_typed_list_elements_are_coerced_in_order(marshal):
    assert marshal.coerce(["1", "2", 3], _define("int[]")) == [1, 2, 3]


def test_typed_tuple_keeps_its_kind(marshal):
    assert marshal.coerce(("1", "2"), _define("array<int>")) == (1, 2)


def test_typed_mapping_preserves_keys(marshal):
    result = marshal.coerce(OrderedDict([("b", "2"), ("a", "1")]), _define("int[]"))

    assert result == {"b": 2, "a": 1}
    assert list(result) == ["b", "a"]


def test_nested_typed_collections_recurse(marshal):
    assert marshal.coerce([["1"], ["2", "3"]], _define("int[][]")) == [[1], [2, 3]]


def test_element_failure_names_the_element(marshal):
    with pytest.raises(TypeMismatchError) as exc_info:
        marshal.coerce(["1", "x"], _define("int[]", name="nums"))

    assert exc_info.value.field == "nums[1]"
    assert exc_info.value.expected == "int"


def test_scalar_for_typed_collection_fails(marshal):
    with pytest.raises(TypeMismatchError):
        marshal.coerce("1,2", _define("int[]"))


def test_mapping_becomes_namespace_for_object_type(marshal):
    result = marshal.coerce({"a": 1, "b": "two"}, _define("object"))

    assert isinstance(result, types.SimpleNamespace)
    assert result.a == 1
    assert result.b == "two"


def test_mapping_constructs_registered_dataclass(registry):
    marshal = Marshal(registry)
    name = registry.register(Point)

    result = marshal.coerce({"x": 1, "y": 2}, _define(name))

    assert result == Point(1, 2)


def test_mapping_constructs_pydantic_model_without_validation(registry):
    marshal = Marshal(registry)
    registry.register(Money)

    result = marshal.coerce({"amount": "5", "currency": "EUR"}, _define("Money"))

    assert isinstance(result, Money)
    assert result.amount == "5"
    assert result.currency == "EUR"


def test_mapping_is_copied_onto_plain_class(registry):
    marshal = Marshal(registry)
    registry.register(Bucket)

    result = marshal.coerce({"size": 3}, _define("Bucket"))

    assert isinstance(result, Bucket)
    assert result.size == 3


def test_dataclass_rejecting_keys_fails_with_type_mismatch(registry):
    marshal = Marshal(registry)
    registry.register(Point)

    with pytest.raises(TypeMismatchError) as exc_info:
        marshal.coerce({"x": 1, "y": 2, "z": 3}, _define("Point", name="origin"), owner_type="Map")

    assert exc_info.value.field == "origin"
    assert exc_info.value.owner_type == "Map"
    assert isinstance(exc_info.value.__cause__, TypeError)


def test_slotted_class_rejecting_keys_fails_with_type_mismatch(registry):
    marshal = Marshal(registry)
    registry.register(Slotted)

    with pytest.raises(TypeMismatchError) as exc_info:
        marshal.coerce({"y": 1}, _define("Slotted", name="slot"))

    assert exc_info.value.field == "slot"
    assert isinstance(exc_info.value.__cause__, AttributeError)


def test_builtin_class_rejecting_mapping_fails_with_type_mismatch(marshal):
    with pytest.raises(TypeMismatchError) as exc_info:
        marshal.coerce({"a": 1}, _define("set", name="tags"))

    assert exc_info.value.expected == "set"


def test_instance_of_declared_class_passes_through(registry):
    marshal = Marshal(registry)
    registry.register(Point)
    point = Point(0, 0)

    assert marshal.coerce(point, _define("Point")) is point


def test_wrong_instance_for_declared_class_fails(registry):
    marshal = Marshal(registry)
    registry.register(Point)

    with pytest.raises(TypeMismatchError) as exc_info:
        marshal.coerce(Bucket(), _define("Point"))

    assert exc_info.value.actual == "Bucket"


def test_dotted_path_types_are_imported(marshal):
    result = marshal.coerce(OrderedDict(a=1), _define("collections.OrderedDict"))

    assert isinstance(result, OrderedDict)


def test_ratify_rejects_self_reference_before_anything_else(marshal):
    target = StubTarget([])

    with pytest.raises(CircularReferenceError) as exc_info:
        marshal.ratify(target, "undeclared", target)

    assert exc_info.value.field == "undeclared"
    assert exc_info.value.owner_type == "tests.StubTarget"


def test_ratify_resolves_definition_through_owner(marshal):
    strict = StubTarget([_define("int", name="age")])

    assert marshal.ratify(strict, "age", "7") == 7
    with pytest.raises(UnknownPropertyError):
        marshal.ratify(strict, "extra", 1)

    permissive = StubTarget([], permissive=True)
    assert marshal.ratify(permissive, "extra", "9") == 9


def test_alias_type_and_cast(marshal):
    marshal.alias_type("money", "float")
    marshal.alias_cast("money", "float")

    assert marshal.coerce("9.99", _define("money")) == 9.99
    assert marshal.is_known_type("money")


def test_alias_to_unsupported_target_raises(marshal):
    with pytest.raises(ValueError):
        marshal.alias_type("money", "decimal")
    with pytest.raises(ValueError):
        marshal.alias_cast("money", "decimal")


def test_validate_definition_checks_element_type(marshal):
    marshal.validate_definition(_define("int[]"))

    with pytest.raises(UnknownTypeError):
        marshal.validate_definition(_define("NoSuchTypeAnywhere[]"), "User")
