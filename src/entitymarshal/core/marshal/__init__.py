"""Value coercion and validation."""

from entitymarshal.core.marshal.casts import CASTS, DEFAULT_CAST_MAP, cast_value
from entitymarshal.core.marshal.core import Marshal, MarshalTarget
from entitymarshal.core.marshal.types import (
    DEFAULT_TYPE_MAP,
    PREDICATES,
    UNCONSTRAINED_TYPES,
    TypeRegistry,
    get_type_registry,
)

__all__ = [
    "Marshal",
    "MarshalTarget",
    "TypeRegistry",
    "get_type_registry",
    "cast_value",
    "CASTS",
    "DEFAULT_CAST_MAP",
    "DEFAULT_TYPE_MAP",
    "PREDICATES",
    "UNCONSTRAINED_TYPES",
]
