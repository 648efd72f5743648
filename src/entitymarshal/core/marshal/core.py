"""Marshal: validates and coerces values against property definitions.

Coercion runs in a fixed order: self-reference guard, unknown-field
resolution, scalar cast, element recursion for typed collections, implicit
construction of composites from mappings, and a final type predicate.

Usage:
    marshal = Marshal()
    marshal.coerce("12", PropertyDefinition("age", "int"))  # 12
    marshal.coerce("12abc", PropertyDefinition("age", "int"))  # TypeMismatchError
"""

from __future__ import annotations

import dataclasses
import logging
import types
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from entitymarshal.core.definition import PropertyDefinition
from entitymarshal.core.errors import (
    CircularReferenceError,
    TypeMismatchError,
    UnknownTypeError,
)
from entitymarshal.core.marshal.casts import CASTS, DEFAULT_CAST_MAP, cast_value
from entitymarshal.core.marshal.types import (
    DEFAULT_TYPE_MAP,
    OBJECT_TYPE,
    PREDICATES,
    UNCONSTRAINED_TYPES,
    TypeRegistry,
    get_type_registry,
    is_pydantic_model,
    is_scalar,
)

if TYPE_CHECKING:
    from entitymarshal.cache.protocol import RuntimeCache

logger = logging.getLogger(__name__)


@runtime_checkable
class MarshalTarget(Protocol):
    """Object whose fields are populated through a Marshal."""

    @classmethod
    def type_id(cls) -> str:
        """Identifier of the concrete type, used in errors and cache keys."""
        ...

    def resolve_definition(self, name: str) -> PropertyDefinition:
        """Return the definition for name, declaring it if the access mode allows.

        Raises:
            UnknownPropertyError: If name is undeclared and cannot be declared.
        """
        ...

    @property
    def runtime_cache(self) -> RuntimeCache:
        """Cache shared with nested composites built for this target."""
        ...


def _type_name(value: Any) -> str:
    if value is None:
        return "null"
    return type(value).__qualname__


class Marshal:
    """Coerces raw values so they satisfy their declared types.

    Stateless apart from its type and cast tables, so one instance is shared
    by every entity.

    Args:
        registry: Resolver for composite type names (default: global registry).
    """

    def __init__(self, registry: TypeRegistry | None = None) -> None:
        self._registry = registry if registry is not None else get_type_registry()
        self._type_map: dict[str, str] = dict(DEFAULT_TYPE_MAP)
        self._cast_map: dict[str, str] = dict(DEFAULT_CAST_MAP)

    @property
    def registry(self) -> TypeRegistry:
        return self._registry

    def alias_type(self, name: str, mapped: str) -> None:
        """Map a declared type name onto a native predicate.

        Raises:
            ValueError: If mapped is not a supported predicate.
        """
        if mapped not in PREDICATES:
            raise ValueError(
                f"'{mapped}' is not a supported map type value while adding '{name}' to type map."
            )
        self._type_map[name] = mapped

    def alias_cast(self, name: str, cast: str) -> None:
        """Map a declared type name onto a cast rule.

        Raises:
            ValueError: If cast is not a supported cast rule.
        """
        if cast not in CASTS:
            raise ValueError(
                f"'{cast}' is not a supported cast type value while adding '{name}' to cast map."
            )
        self._cast_map[name] = cast

    def is_known_type(self, type_name: str) -> bool:
        """True if type_name is unconstrained, native, or a resolvable class."""
        return (
            type_name in UNCONSTRAINED_TYPES
            or type_name in self._type_map
            or self._registry.resolve(type_name) is not None
        )

    def validate_definition(self, definition: PropertyDefinition, owner_type: str = "") -> None:
        """Check that a definition's base and element types are known.

        Raises:
            UnknownTypeError: If either type cannot be resolved.
        """
        for type_name in (definition.base_type, definition.element_type):
            if type_name is not None and not self.is_known_type(type_name):
                raise UnknownTypeError(type_name, definition.name, owner_type)

    def ratify(self, owner: MarshalTarget, name: str, value: Any) -> Any:
        """Coerce a value being written to a field of owner.

        Args:
            owner: Object being populated.
            name: Field name.
            value: Raw value.

        Returns:
            The coerced value.

        Raises:
            CircularReferenceError: If value is owner itself.
            UnknownPropertyError: If name is undeclared and owner is strict.
            TypeMismatchError: If the value cannot satisfy the declared type.
        """
        owner_type = owner.type_id()
        if value is owner:
            raise CircularReferenceError(name, owner_type)
        definition = owner.resolve_definition(name)
        return self.coerce(value, definition, owner_type, owner)

    def coerce(
        self,
        value: Any,
        definition: PropertyDefinition,
        owner_type: str = "",
        owner: MarshalTarget | None = None,
    ) -> Any:
        """Coerce value against definition.

        None is accepted for every field and returned as-is.

        Args:
            value: Raw value.
            definition: Declared type of the field.
            owner_type: Owning type name for error messages.
            owner: Owning object, whose cache nested entities share.

        Returns:
            A value satisfying the declared type.

        Raises:
            TypeMismatchError: If the coerced value fails the declared type.
            UnknownTypeError: If the declared type cannot be resolved.
        """
        if value is None:
            return None

        declared = definition.base_type or "mixed"
        unconstrained = declared in UNCONSTRAINED_TYPES
        mapped = self._type_map.get(declared)
        cls: type | None = None
        if not unconstrained and mapped is None:
            cls = self._registry.resolve(declared)
            if cls is None:
                raise UnknownTypeError(declared, definition.name, owner_type)

        cast = self._cast_map.get(declared)
        if cast is not None and is_scalar(value):
            value = cast_value(value, cast)

        if definition.element_type and isinstance(value, (list, tuple, Mapping)):
            value = self._coerce_elements(value, definition, owner_type, owner)

        if isinstance(value, Mapping) and (cls is not None or mapped == OBJECT_TYPE):
            if cls is None or not isinstance(value, cls):
                try:
                    value = self._construct(cls, value, owner)
                except (TypeError, AttributeError, ValueError) as e:
                    raise TypeMismatchError(
                        definition.name,
                        owner_type,
                        definition.raw_type or declared,
                        _type_name(value),
                        value,
                    ) from e

        if unconstrained:
            return value
        if cls is not None:
            satisfied = isinstance(value, cls)
        else:
            satisfied = PREDICATES[mapped](value)  # type: ignore[index]
        if not satisfied:
            raise TypeMismatchError(
                definition.name,
                owner_type,
                definition.raw_type or declared,
                _type_name(value),
                value,
            )
        return value

    def _coerce_elements(
        self,
        value: list[Any] | tuple[Any, ...] | Mapping[Any, Any],
        definition: PropertyDefinition,
        owner_type: str,
        owner: MarshalTarget | None,
    ) -> list[Any] | tuple[Any, ...] | dict[Any, Any]:
        element_type = definition.element_type

        def element(key: Any, item: Any) -> Any:
            synthetic = PropertyDefinition(f"{definition.name}[{key}]", element_type)
            return self.coerce(item, synthetic, owner_type, owner)

        if isinstance(value, Mapping):
            return {key: element(key, item) for key, item in value.items()}
        coerced = [element(index, item) for index, item in enumerate(value)]
        return tuple(coerced) if isinstance(value, tuple) else coerced

    def _construct(
        self, cls: type | None, data: Mapping[Any, Any], owner: MarshalTarget | None
    ) -> Any:
        """Build an instance of cls (or a namespace for 'object') from a mapping.

        Entity-family types are built through their own constructor, so the
        mapping is marshaled recursively. Everything else gets a flat copy.

        Raises:
            TypeError, AttributeError, ValueError: If cls rejects the mapping.
        """
        if cls is None:
            return types.SimpleNamespace(**{str(k): v for k, v in data.items()})

        logger.debug("Constructing %s from mapping with keys %s", cls.__qualname__, list(data))
        if self._registry.is_family(cls):
            options: dict[str, Any] = {"marshal": self}
            if owner is not None:
                options["cache"] = owner.runtime_cache
                settings = getattr(owner, "settings", None)
                if settings is not None:
                    options["settings"] = settings
            return cls(data, **options)
        if dataclasses.is_dataclass(cls):
            return cls(**data)
        if is_pydantic_model(cls):
            return cls.model_construct(**data)  # type: ignore[attr-defined]
        instance = cls()
        for key, item in data.items():
            setattr(instance, str(key), item)
        return instance

