"""Entity: composed typed data holder and its metadata providers."""

from entitymarshal.entity.core import Entity, get_default_marshal
from entitymarshal.entity.metadata import (
    AnnotationMetadataProvider,
    MappingMetadataProvider,
    MetadataProvider,
)
from entitymarshal.entity.models import DEFAULTS_PURPOSE, DEFINITIONS_PURPOSE, AccessMode

__all__ = [
    "Entity",
    "AccessMode",
    "MetadataProvider",
    "AnnotationMetadataProvider",
    "MappingMetadataProvider",
    "get_default_marshal",
    "DEFINITIONS_PURPOSE",
    "DEFAULTS_PURPOSE",
]
