"""Configuration module using Pydantic Settings.

Usage:
    from entitymarshal.config import MarshalSettings

    settings = MarshalSettings(dump_max_depth=3)
    entity = MyEntity(settings=settings)
"""

from entitymarshal.config.settings import MarshalSettings, get_settings

__all__ = [
    "MarshalSettings",
    "get_settings",
]
