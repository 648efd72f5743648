"""Property definitions: declared field types and their per-type collection."""

from entitymarshal.core.definition.collection import PropertyDefinitionCollection
from entitymarshal.core.definition.models import (
    COLLECTION_TYPE,
    PropertyDefinition,
    extract_element_type,
)

__all__ = [
    "COLLECTION_TYPE",
    "PropertyDefinition",
    "PropertyDefinitionCollection",
    "extract_element_type",
]
