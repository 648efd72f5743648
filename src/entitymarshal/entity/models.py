"""Entity models: access modes and runtime cache purposes."""

from __future__ import annotations

from enum import Enum, auto


class AccessMode(Enum):
    """How writes to undeclared field names are handled."""

    STRICT = auto()  # Raise UnknownPropertyError
    PERMISSIVE = auto()  # Declare the field with the type's default field type


DEFINITIONS_PURPOSE = "definitions"
"""Runtime cache purpose for a type's PropertyDefinitionCollection."""

DEFAULTS_PURPOSE = "defaults"
"""Runtime cache purpose for a type's marshaled default values."""
