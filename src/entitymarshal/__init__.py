"""entitymarshal: typed-property marshaling for data-holder objects.

Usage:
    from entitymarshal import Entity, AccessMode

    class Address(Entity):
        city: str = ""

    class User(Entity):
        name: str = ""
        age: int = 0
        addresses: list[Address] = []

    user = User({"name": "Alice", "age": "42", "addresses": [{"city": "Berlin"}]})
    user.get("age")                 # 42
    user.get("addresses")[0]        # Address(city='Berlin')
    user.to_dict()                  # {"name": "Alice", "age": 42, "addresses": [...]}
    print(user.dump())
"""

__version__ = "0.1.0"

# Core primitives
from entitymarshal.core import (
    COLLECTION_TYPE,
    CacheCorruptError,
    CircularReferenceError,
    EntityMarshalError,
    InvalidInputError,
    Marshal,
    MarshalTarget,
    PropertyDefinition,
    PropertyDefinitionCollection,
    TypeMismatchError,
    TypeRegistry,
    UnknownPropertyError,
    UnknownTypeError,
    get_type_registry,
)

# Runtime cache
from entitymarshal.cache import (
    LocalRuntimeCache,
    RuntimeCache,
    get_runtime_cache,
)

# Configuration
from entitymarshal.config import MarshalSettings, get_settings

# Converters
from entitymarshal.convert import (
    ConverterStrategy,
    Dump,
    FlatArray,
)

# Entity
from entitymarshal.entity import (
    AccessMode,
    AnnotationMetadataProvider,
    Entity,
    MappingMetadataProvider,
    MetadataProvider,
)

__all__ = [
    # Version
    "__version__",
    # Errors
    "EntityMarshalError",
    "InvalidInputError",
    "UnknownPropertyError",
    "TypeMismatchError",
    "CircularReferenceError",
    "UnknownTypeError",
    "CacheCorruptError",
    # Definitions
    "COLLECTION_TYPE",
    "PropertyDefinition",
    "PropertyDefinitionCollection",
    # Marshal
    "Marshal",
    "MarshalTarget",
    "TypeRegistry",
    "get_type_registry",
    # Runtime cache
    "RuntimeCache",
    "LocalRuntimeCache",
    "get_runtime_cache",
    # Configuration
    "MarshalSettings",
    "get_settings",
    # Converters
    "ConverterStrategy",
    "FlatArray",
    "Dump",
    # Entity
    "Entity",
    "AccessMode",
    "MetadataProvider",
    "AnnotationMetadataProvider",
    "MappingMetadataProvider",
]
