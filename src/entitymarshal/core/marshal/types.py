"""Native type predicates and the composite type registry.

Native names map to an `is_*` style predicate; composite names resolve to
classes through the TypeRegistry.

Usage:
    registry = get_type_registry()
    registry.register(Address)
    registry.resolve("Address")  # <class Address>
"""

from __future__ import annotations

import builtins
import importlib
import logging
import numbers
from collections.abc import Callable, Mapping
from typing import Any

logger = logging.getLogger(__name__)

UNCONSTRAINED_TYPES = frozenset({"mixed", "any"})
"""Declared types that accept any value."""

OBJECT_TYPE = "object"
"""Declared type for an arbitrary instance; mappings become SimpleNamespace."""

_NATIVE_CONTAINERS = (list, tuple, dict)


def is_scalar(value: Any) -> bool:
    """True for text, numbers and booleans."""
    return isinstance(value, (str, int, float, bool))


def is_numeric(value: Any) -> bool:
    """True for numbers (not booleans) and text that parses as a number."""
    if isinstance(value, bool):
        return False
    if isinstance(value, numbers.Real):
        return True
    if isinstance(value, str):
        try:
            float(value)
        except ValueError:
            return False
        return True
    return False


def is_pydantic_model(cls: type) -> bool:
    """Check if class is a Pydantic model without importing pydantic.

    Args:
        cls: Class to check.

    Returns:
        True if class inherits from pydantic.BaseModel, False otherwise.
    """
    for base in cls.__mro__:
        if base.__module__.startswith("pydantic") and base.__name__ == "BaseModel":
            return True
    return False


def is_object(value: Any) -> bool:
    """True for any instance that is not scalar, None, bytes or a native container."""
    return not (
        value is None
        or is_scalar(value)
        or isinstance(value, (bytes, Mapping, *_NATIVE_CONTAINERS))
    )


PREDICATES: dict[str, Callable[[Any], bool]] = {
    "array": lambda v: isinstance(v, (list, tuple, Mapping)),
    "list": lambda v: isinstance(v, (list, tuple)),
    "tuple": lambda v: isinstance(v, tuple),
    "dict": lambda v: isinstance(v, Mapping),
    "bool": lambda v: isinstance(v, bool),
    "int": lambda v: isinstance(v, int) and not isinstance(v, bool),
    "float": lambda v: isinstance(v, float),
    "numeric": is_numeric,
    "str": lambda v: isinstance(v, str),
    "bytes": lambda v: isinstance(v, (bytes, bytearray)),
    "scalar": is_scalar,
    "callable": callable,
    "null": lambda v: v is None,
    "object": is_object,
}
"""Native predicate per mapped type name."""

DEFAULT_TYPE_MAP: dict[str, str] = {
    **{name: name for name in PREDICATES},
    "boolean": "bool",
    "integer": "int",
    "long": "int",
    "double": "float",
    "real": "float",
    "string": "str",
    "none": "null",
    "unset": "null",
    "clear": "null",
}
"""Declared type name -> predicate name."""


class TypeRegistry:
    """Process-local registry resolving declared type names to classes.

    Classes are indexed by fully qualified name, qualified name and bare name.
    Names not registered are tried as dotted import paths. Classes registered
    with family=True are constructed through their own constructor when a
    mapping is implicitly converted to them.
    """

    def __init__(self) -> None:
        self._by_name: dict[str, type] = {}
        self._family: set[type] = set()

    @staticmethod
    def type_name(cls: type) -> str:
        """Fully qualified name used to reference cls in raw types."""
        return f"{cls.__module__}.{cls.__qualname__}"

    def register(self, cls: type, family: bool = False) -> str:
        """Register a class and return its fully qualified name.

        Args:
            cls: Class to register.
            family: True if cls belongs to the typed-entity family.

        Returns:
            Fully qualified name of cls.
        """
        fqn = self.type_name(cls)
        for name in (fqn, cls.__qualname__, cls.__name__):
            existing = self._by_name.get(name)
            if existing is not None and existing is not cls:
                logger.debug("Type name %r rebound from %r to %r", name, existing, cls)
            self._by_name[name] = cls
        if family:
            self._family.add(cls)
        return fqn

    def is_family(self, cls: type) -> bool:
        """Check if cls (or one of its bases) is a registered entity-family type."""
        return any(base in self._family for base in cls.__mro__)

    def resolve(self, name: str) -> type | None:
        """Resolve a declared type name to a class.

        Args:
            name: Registered name or dotted import path.

        Returns:
            The class, or None if name cannot be resolved.
        """
        if not name:
            return None
        cls = self._by_name.get(name)
        if cls is not None:
            return cls
        return self._import(name)

    def _import(self, name: str) -> type | None:
        if "." not in name:
            builtin = getattr(builtins, name, None)
            return builtin if isinstance(builtin, type) else None

        # Try every module/attribute split, longest module path first.
        parts = name.split(".")
        for split in range(len(parts) - 1, 0, -1):
            module_name = ".".join(parts[:split])
            try:
                target: Any = importlib.import_module(module_name)
            except (ImportError, ValueError):
                continue
            try:
                for attr in parts[split:]:
                    target = getattr(target, attr)
            except AttributeError:
                continue
            if isinstance(target, type):
                self._by_name[name] = target
                return target
        return None


# Module-level registry instance
_registry = TypeRegistry()


def get_type_registry() -> TypeRegistry:
    """Access the global type registry.

    Returns:
        The process-local TypeRegistry instance.
    """
    return _registry
