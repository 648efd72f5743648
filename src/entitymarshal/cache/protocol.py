"""Runtime cache protocol for swappable backends.

The runtime cache stores facts derived once per concrete type (definition
collections, default-value snapshots) so that metadata discovery is paid
once per process. Entries are keyed by (subject, purpose).

Usage:
    cache = LocalRuntimeCache()
    entity = MyEntity(cache=cache)
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Protocol, TypeVar, runtime_checkable

T = TypeVar("T")


@runtime_checkable
class RuntimeCache(Protocol):
    """Abstract runtime cache interface."""

    def has(self, subject: str, purpose: str = "") -> bool:
        """Check if an entry exists."""
        ...

    def get(self, subject: str, purpose: str = "", default: Any = None) -> Any:
        """Get an entry, or default on a miss."""
        ...

    def set(self, subject: str, payload: Any, purpose: str = "") -> None:
        """Store an entry, replacing any existing one."""
        ...

    def setdefault(self, subject: str, purpose: str, factory: Callable[[], T]) -> T:
        """Return the entry, computing and storing it with factory on a miss."""
        ...

    def clear(self) -> None:
        """Drop every entry."""
        ...

    def export_snapshot(self) -> bytes:
        """Serialize all entries to an opaque blob."""
        ...

    def import_snapshot(self, blob: bytes) -> bool:
        """Replace all entries with a previously exported snapshot.

        Raises:
            CacheCorruptError: If blob is not a well-formed snapshot.
        """
        ...
