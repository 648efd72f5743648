"""Tests for the loss-free cast policy."""

import math

import pytest

from entitymarshal.core.marshal.casts import cast_value


@pytest.mark.parametrize(
    ("value", "cast", "expected"),
    [
        ("12", "int", 12),
        (" 12 ", "int", 12),
        (3.0, "int", 3),
        (True, "int", 1),
        (7, "float", 7.0),
        ("1.5", "float", 1.5),
        ("yes", "bool", True),
        ("OFF", "bool", False),
        (1, "bool", True),
        (0.0, "bool", False),
        (12, "str", "12"),
        (1.5, "str", "1.5"),
        ("", "null", None),
        (0, "null", None),
        (False, "null", None),
    ],
)
def test_loss_free_casts_are_accepted(value, cast, expected):
    result = cast_value(value, cast)

    assert result == expected
    assert type(result) is type(expected)


@pytest.mark.parametrize(
    ("value", "cast"),
    [
        ("12abc", "int"),
        ("1.5", "int"),
        (3.5, "int"),
        (True, "float"),
        (2**60 + 1, "float"),
        ("abc", "float"),
        ("maybe", "bool"),
        (2, "bool"),
        (True, "str"),
        ("text", "null"),
        (1, "null"),
    ],
)
def test_lossy_casts_leave_value_uncast(value, cast):
    assert cast_value(value, cast) is value


def test_value_already_of_target_kind_is_unchanged():
    text = "already text"

    assert cast_value(text, "str") is text
    assert cast_value(42, "int") == 42
    assert math.isclose(cast_value(2.5, "float"), 2.5)


def test_unknown_cast_rule_raises():
    with pytest.raises(ValueError, match="invalid type 'decimal'"):
        cast_value(1, "decimal")
