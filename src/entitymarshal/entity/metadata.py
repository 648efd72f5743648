"""Metadata providers: where a type's declared fields come from.

The entity core never parses declarations itself. A provider returns an
ordered name -> raw type mapping and the default values for one concrete
type.

Usage:
    class User(Entity):
        name: str = ""
        tags: list[str] = []
        address: Address | None = None

    AnnotationMetadataProvider().properties_and_types(User)
    # {"name": "str", "tags": "str[]", "address": "myapp.models.Address"}
"""

from __future__ import annotations

import collections.abc
import inspect
import logging
import re
import types
import typing
from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

from entitymarshal.core.marshal.types import TypeRegistry, get_type_registry

logger = logging.getLogger(__name__)

_NATIVE_NAMES: dict[Any, str] = {
    int: "int",
    float: "float",
    str: "str",
    bool: "bool",
    bytes: "bytes",
    list: "list",
    tuple: "tuple",
    dict: "dict",
    object: "object",
    type(None): "null",
    None: "null",
    Any: "mixed",
    collections.abc.Callable: "callable",
}

_SEQUENCE_ORIGINS = (
    list,
    collections.abc.Sequence,
    collections.abc.MutableSequence,
)
_MAPPING_ORIGINS = (dict, collections.abc.Mapping, collections.abc.MutableMapping)

_OPTIONAL_TEXT = re.compile(r"^Optional\[(.+)\]$")
_MAPPING_TEXT = re.compile(r"^(?:dict|Mapping)\[[^,\[\]]+,\s*(.+)\]$")
_TUPLE_TEXT = re.compile(r"^tuple\[(.+),\s*\.\.\.\]$")


@runtime_checkable
class MetadataProvider(Protocol):
    """Source of declared fields for a concrete type."""

    def properties_and_types(self, cls: type) -> dict[str, str | None]:
        """Ordered name -> raw type mapping. A None or empty type means undeclared."""
        ...

    def default_values(self, cls: type) -> dict[str, Any]:
        """Default value per field name. Missing names default to None."""
        ...


def _own_annotations(klass: type) -> dict[str, Any]:
    try:
        return inspect.get_annotations(klass)
    except NameError:
        # Unresolvable forward reference: fall back to the annotation text.
        import annotationlib

        return annotationlib.get_annotations(klass, format=annotationlib.Format.STRING)


def _split_union(text: str) -> list[str]:
    """Split "A | B[C | D]" on top-level bars only."""
    parts: list[str] = []
    depth = 0
    current = ""
    for char in text:
        if char in "[<":
            depth += 1
        elif char in "]>":
            depth -= 1
        if char == "|" and depth == 0:
            parts.append(current.strip())
            current = ""
        else:
            current += char
    parts.append(current.strip())
    return parts


def _is_classvar(annotation: Any) -> bool:
    if isinstance(annotation, str):
        return annotation.startswith(("ClassVar", "typing.ClassVar"))
    return annotation is typing.ClassVar or typing.get_origin(annotation) is typing.ClassVar


def field_annotations(klass: type) -> dict[str, Any]:
    """Public, non-ClassVar annotations declared directly on klass."""
    return {
        name: annotation
        for name, annotation in _own_annotations(klass).items()
        if not name.startswith("_") and not _is_classvar(annotation)
    }


class AnnotationMetadataProvider:
    """Reads fields from class annotations and defaults from the class body.

    Annotations are rendered to raw type strings: natives by name, typed
    collections with the "[]" suffix, optionals as their inner type, and
    classes by their registered fully qualified name.

    Args:
        registry: Registry that classes found in annotations are added to.
        default_type: Raw type used for unions that cannot be narrowed.
    """

    def __init__(self, registry: TypeRegistry | None = None, default_type: str = "mixed") -> None:
        self._registry = registry if registry is not None else get_type_registry()
        self._default_type = default_type

    def properties_and_types(self, cls: type) -> dict[str, str | None]:
        result: dict[str, str | None] = {}
        for klass in reversed(cls.__mro__):
            for name, annotation in field_annotations(klass).items():
                result[name] = self.render(annotation, cls, name)
        logger.debug("Discovered %d fields on %s", len(result), cls.__qualname__)
        return result

    def default_values(self, cls: type) -> dict[str, Any]:
        result: dict[str, Any] = {}
        for klass in reversed(cls.__mro__):
            result.update(klass.__dict__.get("__entity_defaults__", {}))
        return result

    def render(self, annotation: Any, cls: type | None = None, name: str = "") -> str | None:
        """Render an annotation to a raw type string.

        Args:
            annotation: Annotation object or text.
            cls: Owning class, for log messages.
            name: Field name, for log messages.

        Returns:
            The raw type, or None for an empty annotation.
        """
        if isinstance(annotation, str):
            return self._render_text(annotation, cls, name)

        try:
            native = _NATIVE_NAMES.get(annotation)
        except TypeError:  # unhashable annotation
            native = None
        if native is not None:
            return native

        origin = typing.get_origin(annotation)
        args = typing.get_args(annotation)

        if origin is typing.Annotated:
            return self.render(args[0], cls, name)
        if origin is typing.Union or origin is types.UnionType:
            members = [arg for arg in args if arg is not type(None)]
            if len(members) == 1:
                return self.render(members[0], cls, name)
            return self._collapse(annotation, cls, name)
        if origin is tuple and len(args) == 2 and args[1] is Ellipsis:
            return f"{self.render(args[0], cls, name)}[]"
        if origin in _SEQUENCE_ORIGINS and len(args) == 1:
            return f"{self.render(args[0], cls, name)}[]"
        if origin in _MAPPING_ORIGINS and len(args) == 2:
            return f"{self.render(args[1], cls, name)}[]"
        if origin is not None:
            return self.render(origin, cls, name)

        if isinstance(annotation, type):
            return self._registry.register(annotation)
        return self._collapse(annotation, cls, name)

    def _render_text(self, text: str, cls: type | None, name: str) -> str | None:
        text = text.strip()
        if not text:
            return None

        match = _OPTIONAL_TEXT.match(text)
        if match:
            text = match.group(1).strip()

        if "|" in text:
            members = [part for part in _split_union(text) if part != "None"]
            if len(members) != 1:
                return self._collapse(text, cls, name)
            text = members[0]

        match = _MAPPING_TEXT.match(text) or _TUPLE_TEXT.match(text)
        if match:
            return f"{match.group(1).strip()}[]"
        return {"Any": "mixed", "None": "null"}.get(text, text)

    def _collapse(self, annotation: Any, cls: type | None, name: str) -> str:
        owner = cls.__qualname__ if cls is not None else "?"
        logger.warning(
            "Annotation %r of %s.%s cannot be narrowed to one type, using %r",
            annotation,
            owner,
            name,
            self._default_type,
        )
        return self._default_type


class MappingMetadataProvider:
    """Serves explicit schema declarations.

    Args:
        schemas: Type identifier or class -> ordered name -> raw type mapping.
        defaults: Type identifier or class -> name -> default value.
    """

    def __init__(
        self,
        schemas: Mapping[type | str, Mapping[str, str | None]],
        defaults: Mapping[type | str, Mapping[str, Any]] | None = None,
    ) -> None:
        self._schemas = dict(schemas)
        self._defaults = dict(defaults or {})

    @staticmethod
    def _lookup(table: dict[type | str, Any], cls: type) -> Any:
        if cls in table:
            return table[cls]
        for key in (TypeRegistry.type_name(cls), cls.__qualname__):
            if key in table:
                return table[key]
        return {}

    def properties_and_types(self, cls: type) -> dict[str, str | None]:
        return dict(self._lookup(self._schemas, cls))

    def default_values(self, cls: type) -> dict[str, Any]:
        return dict(self._lookup(self._defaults, cls))
