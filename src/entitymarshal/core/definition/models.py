"""Property definition: one field's declared type.

Usage:
    prop = PropertyDefinition().set_name("tags").set_raw_type("string[]")
    prop.base_type      # "array"
    prop.element_type   # "string"
"""

from __future__ import annotations

import re

COLLECTION_TYPE = "array"
"""Base type marker for typed collections."""

_COLLECTION_SUFFIX = "[]"
_GENERIC_PATTERN = re.compile(r"^(?:array<([^<>]+)>|list\[([^\[\]]+)\])$", re.IGNORECASE)


def extract_element_type(raw_type: str | None) -> str | None:
    """Extract the element type from a typed-collection declaration.

    Args:
        raw_type: Unparsed declared type, e.g. "Address[]" or "list[int]".

    Returns:
        The element type, or None if raw_type is not a typed collection.
    """
    if not raw_type:
        return None
    if raw_type.endswith(_COLLECTION_SUFFIX):
        return raw_type[: -len(_COLLECTION_SUFFIX)]
    match = _GENERIC_PATTERN.match(raw_type)
    if match:
        return (match.group(1) or match.group(2)).strip()
    return None


class PropertyDefinition:
    """Declared type of a single field.

    base_type is the collection marker (not the element type) whenever
    element_type is present.
    """

    __slots__ = ("name", "raw_type", "base_type", "element_type")

    def __init__(self, name: str = "", raw_type: str | None = None) -> None:
        self.name = name
        self.raw_type: str = ""
        self.base_type: str = ""
        self.element_type: str | None = None
        if raw_type is not None:
            self.set_raw_type(raw_type)

    def set_name(self, name: str) -> PropertyDefinition:
        self.name = name
        return self

    def set_raw_type(self, raw_type: str | None) -> PropertyDefinition:
        """Parse raw_type into base and element types.

        No check that the types are known; the marshal decides that.
        """
        self.raw_type = raw_type or ""
        element = extract_element_type(self.raw_type)
        if element is not None:
            self.base_type = COLLECTION_TYPE
            self.element_type = element
        else:
            self.base_type = self.raw_type
            self.element_type = None
        return self

    def is_generic(self) -> bool:
        """True if this field is a typed collection."""
        return bool(self.element_type)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PropertyDefinition):
            return NotImplemented
        return (self.name, self.raw_type) == (other.name, other.raw_type)

    def __hash__(self) -> int:
        return hash((self.name, self.raw_type))

    def __repr__(self) -> str:
        return f"PropertyDefinition(name={self.name!r}, raw_type={self.raw_type!r})"
