"""Core functionalities: errors, property definitions and the marshal.

Architecture Note:
    core/ contains pure building blocks with no process-wide state beyond
    the type registry. For the shared runtime cache see cache/, for output
    rendering see convert/, and for the composed data holder see entity/.
"""

from entitymarshal.core.definition import (
    COLLECTION_TYPE,
    PropertyDefinition,
    PropertyDefinitionCollection,
)
from entitymarshal.core.errors import (
    CacheCorruptError,
    CircularReferenceError,
    EntityMarshalError,
    InvalidInputError,
    TypeMismatchError,
    UnknownPropertyError,
    UnknownTypeError,
)
from entitymarshal.core.marshal import (
    Marshal,
    MarshalTarget,
    TypeRegistry,
    get_type_registry,
)

__all__ = [
    # Errors
    "EntityMarshalError",
    "InvalidInputError",
    "UnknownPropertyError",
    "TypeMismatchError",
    "CircularReferenceError",
    "UnknownTypeError",
    "CacheCorruptError",
    # Definition
    "COLLECTION_TYPE",
    "PropertyDefinition",
    "PropertyDefinitionCollection",
    # Marshal
    "Marshal",
    "MarshalTarget",
    "TypeRegistry",
    "get_type_registry",
]
