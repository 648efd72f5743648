"""Scalar cast rules and the loss-free acceptance policy.

A cast is accepted only when no information is lost: converting the result
back to the raw value's kind reproduces an equal value. Text is compared in
the target's domain, so it must parse completely as the target type.

    target int    bool -> 1/0; float only if integral; text only if int() parses it
    target float  int only if it survives the round trip; text only if float() parses it
    target bool   numbers 0/1; text true/false/1/0/yes/no/on/off (any case)
    target str    int/float via str(); bool is never cast
    target null   any falsy scalar becomes None

A rejected cast leaves the value uncast. The final type predicate decides.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

_TRUE_TOKENS = frozenset({"true", "1", "yes", "on"})
_FALSE_TOKENS = frozenset({"false", "0", "no", "off"})


class _Rejected:
    """Marker for a cast that would lose information."""

    def __repr__(self) -> str:
        return "REJECTED"


REJECTED: Any = _Rejected()


def cast_int(value: Any) -> Any:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else REJECTED
    if isinstance(value, str):
        try:
            return int(value, 10)
        except ValueError:
            return REJECTED
    return REJECTED


def cast_float(value: Any) -> Any:
    if isinstance(value, bool):
        return REJECTED
    if isinstance(value, float):
        return value
    if isinstance(value, int):
        try:
            result = float(value)
        except OverflowError:
            return REJECTED
        return result if int(result) == value else REJECTED
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return REJECTED
    return REJECTED


def cast_bool(value: Any) -> Any:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value) if value in (0, 1) else REJECTED
    if isinstance(value, str):
        token = value.strip().lower()
        if token in _TRUE_TOKENS:
            return True
        if token in _FALSE_TOKENS:
            return False
    return REJECTED


def cast_str(value: Any) -> Any:
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return REJECTED
    if isinstance(value, (int, float)):
        return str(value)
    return REJECTED


def cast_null(value: Any) -> Any:
    return None if not value else REJECTED


CASTS: dict[str, Callable[[Any], Any]] = {
    "int": cast_int,
    "float": cast_float,
    "bool": cast_bool,
    "str": cast_str,
    "null": cast_null,
}
"""Cast function per cast rule name."""

DEFAULT_CAST_MAP: dict[str, str] = {
    **{name: name for name in CASTS},
    "integer": "int",
    "long": "int",
    "double": "float",
    "real": "float",
    "boolean": "bool",
    "string": "str",
    "none": "null",
    "unset": "null",
    "clear": "null",
}
"""Declared type name -> cast rule name."""


def cast_value(value: Any, cast: str) -> Any:
    """Cast value with the named rule, keeping it uncast if the cast is lossy.

    Args:
        value: Scalar value to cast.
        cast: Cast rule name (a key of CASTS).

    Returns:
        The cast value, or value unchanged if the cast was rejected.

    Raises:
        ValueError: If cast is not a known rule.
    """
    try:
        rule = CASTS[cast]
    except KeyError:
        raise ValueError(f"Attempt to cast value to invalid type '{cast}'") from None
    result = rule(value)
    return value if result is REJECTED else result
