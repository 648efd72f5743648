"""Runtime cache: process-wide store of per-type metadata."""

from entitymarshal.cache.local import LocalRuntimeCache, restoring_cache
from entitymarshal.cache.protocol import RuntimeCache

# Module-level default cache instance
_default_cache = LocalRuntimeCache()


def get_runtime_cache() -> LocalRuntimeCache:
    """Access the process-wide default runtime cache.

    Returns:
        The process-local LocalRuntimeCache instance.
    """
    return _default_cache


__all__ = [
    "RuntimeCache",
    "LocalRuntimeCache",
    "get_runtime_cache",
    "restoring_cache",
]
