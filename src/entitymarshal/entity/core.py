"""Entity: a data holder whose fields are typed, validated and coerced.

Usage:
    class Address(Entity):
        street: str = ""
        zip: int = 0

    class User(Entity, mode=AccessMode.PERMISSIVE):
        name: str = ""
        age: int = 0
        addresses: list[Address] = []

    user = User({"name": "Alice", "age": "42"})
    user.get("age")                       # 42
    user.set("addresses", [{"street": "Main St", "zip": "1000"}])
    user.get("addresses")[0]              # Address instance
    user.to_dict()                        # plain nested dicts and lists
    print(user.dump())
"""

from __future__ import annotations

import copy
import logging
import reprlib
from collections.abc import Iterable, Mapping
from typing import Any, ClassVar, Self

from entitymarshal.cache import RuntimeCache, get_runtime_cache, restoring_cache
from entitymarshal.config import MarshalSettings, get_settings
from entitymarshal.convert import ConverterStrategy, Dump, FlatArray
from entitymarshal.core.definition import PropertyDefinition, PropertyDefinitionCollection
from entitymarshal.core.errors import (
    InvalidInputError,
    TypeMismatchError,
    UnknownPropertyError,
)
from entitymarshal.core.marshal import Marshal, TypeRegistry, get_type_registry
from entitymarshal.entity.metadata import (
    AnnotationMetadataProvider,
    MetadataProvider,
    field_annotations,
)
from entitymarshal.entity.models import DEFAULTS_PURPOSE, DEFINITIONS_PURPOSE, AccessMode

logger = logging.getLogger(__name__)

_default_marshal: Marshal | None = None


def get_default_marshal() -> Marshal:
    """Access the marshal shared by entities constructed without one.

    Returns:
        The process-local default Marshal instance.
    """
    global _default_marshal
    if _default_marshal is None:
        _default_marshal = Marshal()
    return _default_marshal


class Entity:
    """Base class for typed data holders.

    Fields are declared with class annotations; class-level values are their
    defaults. Subclasses may pass class keywords:

        mode: AccessMode for writes to undeclared names (default STRICT).
        default_type: Raw type for fields declared without a type and for
            names declared implicitly in permissive mode. A typed collection
            such as "int[]" also sets the default element type.
        provider: MetadataProvider replacing annotation discovery.

    Per-type metadata (definitions and marshaled defaults) is discovered once
    and kept in the runtime cache under the type identifier.

    Args:
        data: Optional mapping (or iterable of pairs, or another entity) to import.
        marshal: Marshal used for every write (default: shared instance).
        definitions: Collection to import this type's fields into, bypassing
            the cached one.
        cache: Runtime cache (default: process-wide instance).
        settings: Settings (default: loaded from the environment).
    """

    __entity_mode__: ClassVar[AccessMode] = AccessMode.STRICT
    __entity_default_type__: ClassVar[str | None] = None
    __entity_provider__: ClassVar[MetadataProvider | None] = None
    __entity_defaults__: ClassVar[dict[str, Any]] = {}

    def __init_subclass__(
        cls,
        mode: AccessMode | None = None,
        default_type: str | None = None,
        provider: MetadataProvider | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init_subclass__(**kwargs)
        if mode is not None:
            cls.__entity_mode__ = mode
        if default_type is not None:
            cls.__entity_default_type__ = default_type
        if provider is not None:
            cls.__entity_provider__ = provider

        # Class-level defaults move out of the class body so that they cannot
        # shadow the marshaled values.
        inherited = {name for base in cls.__mro__[1:] for name in field_annotations(base)}
        defaults: dict[str, Any] = {}
        for name in [*field_annotations(cls), *inherited]:
            if name in cls.__dict__ and name not in defaults:
                defaults[name] = cls.__dict__[name]
                delattr(cls, name)
        cls.__entity_defaults__ = defaults

        get_type_registry().register(cls, family=True)

    def __init__(
        self,
        data: Any = None,
        *,
        marshal: Marshal | None = None,
        definitions: PropertyDefinitionCollection | None = None,
        cache: RuntimeCache | None = None,
        settings: MarshalSettings | None = None,
    ) -> None:
        self._marshal = marshal if marshal is not None else get_default_marshal()
        self._cache = cache if cache is not None else get_runtime_cache()
        self._settings = settings if settings is not None else get_settings()
        self._extra: PropertyDefinitionCollection | None = None
        self._values: dict[str, Any] = {}
        self._definitions: PropertyDefinitionCollection | None = self._resolve_definitions(
            definitions
        )
        self._resolve_defaults(cached=definitions is None)

        if data is not None:
            self.from_dict(data)

    # --- Type metadata ---

    @classmethod
    def type_id(cls) -> str:
        """Identifier of the concrete type, used for cache keys and errors."""
        return TypeRegistry.type_name(cls)

    @classmethod
    def export_cache(cls) -> bytes:
        """Export the process-wide runtime cache as an opaque blob."""
        return get_runtime_cache().export_snapshot()

    @classmethod
    def import_cache(cls, blob: bytes) -> bool:
        """Replace the process-wide runtime cache with an exported blob.

        Raises:
            CacheCorruptError: If blob is not a well-formed snapshot.
        """
        return get_runtime_cache().import_snapshot(blob)

    def _provider(self) -> MetadataProvider:
        provider = type(self).__entity_provider__
        if provider is None:
            provider = AnnotationMetadataProvider(
                registry=self._marshal.registry, default_type=self._default_type()
            )
        return provider

    def _default_type(self) -> str:
        return type(self).__entity_default_type__ or self._settings.default_field_type

    def _properties_and_types(self) -> dict[str, str]:
        default_type = self._default_type()
        return {
            name: raw_type or default_type
            for name, raw_type in self._provider().properties_and_types(type(self)).items()
        }

    def _build_definitions(
        self, collection: PropertyDefinitionCollection
    ) -> PropertyDefinitionCollection:
        collection.import_(self._properties_and_types())
        for name in collection:
            definition = collection.get(name)
            if definition is not None:
                self._marshal.validate_definition(definition, self.type_id())
        return collection

    def _resolve_definitions(
        self, injected: PropertyDefinitionCollection | None
    ) -> PropertyDefinitionCollection:
        if injected is not None:
            return self._build_definitions(injected)
        return self._cache.setdefault(
            self.type_id(),
            DEFINITIONS_PURPOSE,
            lambda: self._build_definitions(PropertyDefinitionCollection()),
        )

    def _resolve_defaults(self, cached: bool = True) -> None:
        # Injected definitions bypass the shared defaults snapshot.
        type_id = self.type_id()
        snapshot = self._cache.get(type_id, DEFAULTS_PURPOSE) if cached else None
        if snapshot is None:
            self._values = dict.fromkeys(self.definitions.keys())
            for name, value in self._provider().default_values(type(self)).items():
                if name in self._values:
                    self.set(name, copy.deepcopy(value))
            if not cached:
                return
            snapshot = copy.deepcopy(self._values)
            self._cache.set(type_id, snapshot, DEFAULTS_PURPOSE)
            logger.debug("Cached %d default values for %s", len(snapshot), type_id)
            return
        self._values = copy.deepcopy(snapshot)

    # --- Definitions ---

    @property
    def definitions(self) -> PropertyDefinitionCollection:
        """Shared, read-only definitions of this type's declared fields."""
        if self._definitions is None:
            self._definitions = self._resolve_definitions(None)
        return self._definitions

    @property
    def marshal(self) -> Marshal:
        return self._marshal

    @property
    def runtime_cache(self) -> RuntimeCache:
        return self._cache

    @property
    def settings(self) -> MarshalSettings:
        return self._settings

    def definition(self, name: str) -> PropertyDefinition | None:
        """Return the definition for name, including implicitly declared ones."""
        definition = self.definitions.get(name)
        if definition is None and self._extra is not None:
            definition = self._extra.get(name)
        return definition

    def resolve_definition(self, name: str) -> PropertyDefinition:
        """Return the definition for a field being written.

        In permissive mode an undeclared name is declared on this instance
        with the type's default field type.

        Raises:
            UnknownPropertyError: If name is undeclared in strict mode.
        """
        definition = self.definition(name)
        if definition is not None:
            return definition

        if type(self).__entity_mode__ is not AccessMode.PERMISSIVE:
            raise UnknownPropertyError(name, self.type_id(), action="set")

        if self._extra is None:
            self._extra = PropertyDefinitionCollection()
        definition = PropertyDefinition(name, self._default_type())
        self._marshal.validate_definition(definition, self.type_id())
        self._extra.add(name, definition.raw_type)
        logger.debug("Declared %s.%s as %r", self.type_id(), name, definition.raw_type)
        return definition

    def typeof(self, name: str) -> str:
        """Declared base type of name, or "" if undeclared."""
        definition = self.definition(name)
        return definition.base_type if definition is not None else ""

    # --- Accessors ---

    def keys(self) -> list[str]:
        """Field names, declared first, then implicitly declared ones."""
        return list(self._values)

    def get(self, name: str) -> Any:
        """Get a field value.

        Raises:
            UnknownPropertyError: If name is not a field of this entity.
        """
        if name not in self._values:
            raise UnknownPropertyError(name, self.type_id(), action="access")
        return self._values[name]

    def set(self, name: str, value: Any) -> Self:
        """Validate, coerce and store a field value.

        Returns:
            self, for chaining.

        Raises:
            CircularReferenceError: If value is this entity.
            UnknownPropertyError: If name is undeclared in strict mode.
            TypeMismatchError: If value cannot satisfy the declared type.
        """
        self._values[name] = self._marshal.ratify(self, name, value)
        return self

    def has(self, name: str) -> bool:
        """True if name is a field holding a value other than None."""
        return self._values.get(name) is not None

    def unset(self, name: str) -> Self:
        """Reset a field to None.

        Raises:
            UnknownPropertyError: If name is not a field of this entity.
        """
        if name not in self._values:
            raise UnknownPropertyError(name, self.type_id(), action="unset")
        self._values[name] = None
        return self

    def from_dict(self, data: Any, skip_invalid: bool | None = None) -> Self:
        """Bulk import field values, each through the marshal.

        Args:
            data: Mapping, iterable of (name, value) pairs, or another entity.
            skip_invalid: Skip unknown or mismatched fields instead of failing
                (default: settings.skip_invalid_on_import).

        Returns:
            self, for chaining.

        Raises:
            InvalidInputError: If data is not mapping-like.
        """
        if skip_invalid is None:
            skip_invalid = self._settings.skip_invalid_on_import

        if isinstance(data, Entity):
            pairs: Iterable[Any] = [(name, data.get(name)) for name in data.keys()]
        elif isinstance(data, Mapping):
            pairs = data.items()
        elif isinstance(data, Iterable) and not isinstance(data, (str, bytes)):
            pairs = data
        else:
            raise InvalidInputError(
                f"Unable to import from array in class '{self.type_id()}' failed. "
                "Argument must be a mapping or an iterable of pairs",
                owner_type=self.type_id(),
            )

        for pair in pairs:
            try:
                name, value = pair
            except (TypeError, ValueError) as e:
                raise InvalidInputError(
                    f"Unable to import {pair!r} into class '{self.type_id()}'. "
                    "Expected a (name, value) pair",
                    owner_type=self.type_id(),
                ) from e
            try:
                self.set(name, value)
            except (UnknownPropertyError, TypeMismatchError) as e:
                if not skip_invalid:
                    raise
                logger.warning("Skipping field during import: %s", e)
        return self

    def to_dict(self, recursive: bool = True) -> dict[str, Any]:
        """Export field values.

        Args:
            recursive: Convert nested composites to plain containers.

        Raises:
            CircularReferenceError: On a cycle unless settings.flat_graceful.
        """
        if not recursive:
            return dict(self._values)
        return self.convert(FlatArray(graceful=self._settings.flat_graceful))

    def convert(self, strategy: ConverterStrategy) -> Any:
        """Render this entity with a converter strategy."""
        return strategy.convert(self)

    def dump(self, max_depth: int | None = None) -> str:
        """Render this entity as an annotated text tree."""
        if max_depth is None:
            max_depth = self._settings.dump_max_depth
        dump = Dump(max_depth=max_depth, indent=self._settings.dump_indent)
        return "\n".join(self.convert(dump))

    # --- Python protocols ---

    def __getitem__(self, name: str) -> Any:
        return self.get(name)

    def __setitem__(self, name: str, value: Any) -> None:
        self.set(name, value)

    def __contains__(self, name: object) -> bool:
        return name in self._values

    def __len__(self) -> int:
        return len(self._values)

    @reprlib.recursive_repr()
    def __repr__(self) -> str:
        fields = ", ".join(f"{name}={value!r}" for name, value in self._values.items())
        return f"{type(self).__qualname__}({fields})"

    def __deepcopy__(self, memo: dict[int, Any]) -> Self:
        clone = type(self).__new__(type(self))
        memo[id(self)] = clone
        clone._marshal = self._marshal
        clone._cache = self._cache
        clone._settings = self._settings
        clone._definitions = self._definitions
        clone._extra = self._extra.copy() if self._extra is not None else None
        clone._values = copy.deepcopy(self._values, memo)
        return clone

    def __getstate__(self) -> dict[str, Any]:
        extra = self._extra.export() if self._extra is not None else None
        return {"values": self._values, "extra": extra}

    def __setstate__(self, state: dict[str, Any]) -> None:
        # Bind to the cache importing a snapshot, if any. Definitions resolve on
        # first use so that unpickling writes to no cache.
        cache = restoring_cache()
        self._marshal = get_default_marshal()
        self._cache = cache if cache is not None else get_runtime_cache()
        self._settings = get_settings()
        self._definitions = None
        self._extra = None
        if state.get("extra") is not None:
            self._extra = PropertyDefinitionCollection().import_(state["extra"])
        self._values = state["values"]
