"""Ordered name -> PropertyDefinition mapping for one concrete type.

Built once per type, cached, and shared read-only by every instance.

Usage:
    definitions = PropertyDefinitionCollection()
    definitions.import_({"name": "string", "tags": "string[]"})
    definitions.get("tags").element_type  # "string"
"""

from __future__ import annotations

import copy
from collections.abc import Iterable, Iterator, Mapping

from entitymarshal.core.definition.models import PropertyDefinition
from entitymarshal.core.errors import InvalidInputError


class PropertyDefinitionCollection:
    """Collection of property definitions keyed by field name.

    Args:
        prototype: Definition copied for every added field. Swap it to use a
            PropertyDefinition subclass with different parsing rules.
    """

    def __init__(self, prototype: PropertyDefinition | None = None) -> None:
        self._prototype = prototype if prototype is not None else PropertyDefinition()
        self._collection: dict[str, PropertyDefinition] = {}

    def has(self, name: str) -> bool:
        return name in self._collection

    def get(self, name: str) -> PropertyDefinition | None:
        """Return the definition for name, or None if it is not declared."""
        return self._collection.get(name)

    def keys(self) -> list[str]:
        """Field names in discovery order."""
        return list(self._collection)

    def add(self, name: str, raw_type: str | None) -> PropertyDefinitionCollection:
        """Add (or overwrite) a single field definition."""
        definition = copy.copy(self._prototype)
        self._collection[name] = definition.set_name(name).set_raw_type(raw_type)
        return self

    def import_(
        self, items: Mapping[str, str | None] | Iterable[tuple[str, str | None]]
    ) -> PropertyDefinitionCollection:
        """Add every name -> raw type pair from an ordered source.

        Args:
            items: Mapping or iterable of (name, raw_type) pairs.

        Returns:
            self, for chaining.

        Raises:
            InvalidInputError: If items is not mapping-like.
        """
        if isinstance(items, Mapping):
            pairs: Iterable[tuple[str, str | None]] = items.items()
        elif isinstance(items, (str, bytes)) or not isinstance(items, Iterable):
            raise InvalidInputError("Expected a list of properties and types")
        else:
            pairs = items

        for pair in pairs:
            try:
                name, raw_type = pair
            except (TypeError, ValueError) as e:
                raise InvalidInputError("Expected a list of properties and types") from e
            self.add(name, raw_type)
        return self

    def export(self) -> dict[str, str]:
        """Return the name -> raw type mapping."""
        return {name: definition.raw_type for name, definition in self._collection.items()}

    def copy(self) -> PropertyDefinitionCollection:
        clone = PropertyDefinitionCollection(self._prototype)
        clone._collection = dict(self._collection)
        return clone

    def __contains__(self, name: object) -> bool:
        return name in self._collection

    def __iter__(self) -> Iterator[str]:
        return iter(self._collection)

    def __len__(self) -> int:
        return len(self._collection)

    def __repr__(self) -> str:
        return f"PropertyDefinitionCollection({self.export()!r})"
