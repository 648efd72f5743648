"""Configuration settings using Pydantic Settings.

Provides typed configuration with environment variable support for entity
behavior and converters.

Usage:
    from entitymarshal.config import MarshalSettings

    # Load from environment variables (ENTITYMARSHAL_*)
    settings = MarshalSettings()

    # Or override with explicit values
    settings = MarshalSettings(skip_invalid_on_import=True)
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class MarshalSettings(BaseSettings):  # type: ignore[misc]
    """Configuration for entities and converters.

    Attributes:
        default_field_type: Raw type given to fields declared without a type,
            and to undeclared fields written in permissive mode.
        skip_invalid_on_import: Skip unknown or mismatched fields during bulk
            import instead of failing on the first one.
        dump_max_depth: Nesting depth at which Dump stops descending (0 = no limit).
        dump_indent: Indentation string for one Dump level.
        flat_graceful: Make FlatArray emit None for cycles instead of failing.

    Environment Variables:
        ENTITYMARSHAL_DEFAULT_FIELD_TYPE
        ENTITYMARSHAL_SKIP_INVALID_ON_IMPORT
        ENTITYMARSHAL_DUMP_MAX_DEPTH
        ENTITYMARSHAL_DUMP_INDENT
        ENTITYMARSHAL_FLAT_GRACEFUL
    """

    model_config = SettingsConfigDict(
        env_prefix="ENTITYMARSHAL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    default_field_type: str = "mixed"
    skip_invalid_on_import: bool = False
    dump_max_depth: int = Field(default=5, ge=0)
    dump_indent: str = "    "
    flat_graceful: bool = False


@lru_cache(maxsize=1)
def get_settings() -> MarshalSettings:
    """Return the process-wide settings, loaded once from the environment."""
    return MarshalSettings()
