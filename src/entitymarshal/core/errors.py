"""Error taxonomy.

Every failure names the field and the owning type so a diagnostic can be
rendered without re-deriving state.

Usage:
    try:
        user.set("age", "12abc")
    except TypeMismatchError as e:
        print(e.field, e.expected, e.actual, e.value)
"""

from __future__ import annotations

from typing import Any


class EntityMarshalError(Exception):
    """Base class for all entitymarshal failures."""

    def __init__(self, message: str, field: str = "", owner_type: str = "") -> None:
        super().__init__(message)
        self.field = field
        self.owner_type = owner_type


class InvalidInputError(EntityMarshalError):
    """Raised when a bulk-import argument is not mapping-like."""


class UnknownPropertyError(EntityMarshalError):
    """Raised on read, or strict-mode write, of an undeclared field."""

    def __init__(self, field: str, owner_type: str, action: str = "access") -> None:
        super().__init__(
            f"Attempt to {action} property '{field}' of class '{owner_type}' failed. "
            "Property does not exist.",
            field=field,
            owner_type=owner_type,
        )
        self.action = action


class TypeMismatchError(EntityMarshalError):
    """Raised when a (possibly coerced) value fails its declared type."""

    def __init__(
        self, field: str, owner_type: str, expected: str, actual: str, value: Any
    ) -> None:
        super().__init__(
            f"Attempt to set property '{field}' of class '{owner_type}' failed. "
            f"Property type '{expected}' expected while type '{actual}' was given "
            f"for value {value!r}",
            field=field,
            owner_type=owner_type,
        )
        self.expected = expected
        self.actual = actual
        self.value = value


class CircularReferenceError(EntityMarshalError):
    """Raised on self-assignment, or by strict converters on a cycle."""

    def __init__(self, field: str = "", owner_type: str = "", action: str = "set") -> None:
        if field:
            message = (
                f"Attempt to {action} property '{field}' of class '{owner_type}' failed. "
                "Circular reference detected."
            )
        else:
            message = f"Circular reference detected in '{owner_type}'."
        super().__init__(message, field=field, owner_type=owner_type)
        self.action = action


class UnknownTypeError(EntityMarshalError):
    """Raised when a declared type is neither native nor a resolvable class."""

    def __init__(self, type_name: str, field: str = "", owner_type: str = "") -> None:
        super().__init__(
            f"'{type_name}' is not a valid native or class type for property "
            f"'{field}' of class '{owner_type}'",
            field=field,
            owner_type=owner_type,
        )
        self.type_name = type_name


class CacheCorruptError(EntityMarshalError):
    """Raised when a cache snapshot does not deserialize to a valid snapshot."""
