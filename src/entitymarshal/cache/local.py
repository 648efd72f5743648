"""Local in-memory runtime cache.

Dict-based, process-lifetime storage. Entries are never evicted or
invalidated; keeping them coherent with runtime field-set changes is the
caller's responsibility.

Usage:
    cache = LocalRuntimeCache()
    blob = cache.export_snapshot()
    LocalRuntimeCache().import_snapshot(blob)
"""

from __future__ import annotations

import logging
import pickle  # nosec B403 - Snapshots are produced and consumed by the same application
from collections.abc import Callable
from contextvars import ContextVar
from typing import Any, TypeVar

from entitymarshal.core.errors import CacheCorruptError

logger = logging.getLogger(__name__)

T = TypeVar("T")

_SNAPSHOT_VERSION = 1

# Cache whose snapshot is being unpickled, for objects restored from it
_restoring: ContextVar[LocalRuntimeCache | None] = ContextVar(
    "entitymarshal_restoring_cache", default=None
)


class LocalRuntimeCache:
    """Simple in-memory runtime cache.

    Structure:
        _entries[(subject, purpose)] = payload

    Concurrent writers of one key race benignly: both derive the same payload
    from the same static metadata, and a single dict assignment is atomic.
    """

    def __init__(self) -> None:
        self._entries: dict[tuple[str, str], Any] = {}

    def has(self, subject: str, purpose: str = "") -> bool:
        return (subject, purpose) in self._entries

    def get(self, subject: str, purpose: str = "", default: Any = None) -> Any:
        """Get an entry.

        Args:
            subject: Type identifier the entry describes.
            purpose: Tag separating independent facts about one subject.
            default: Returned on a miss.

        Returns:
            The stored payload, or default if absent.
        """
        return self._entries.get((subject, purpose), default)

    def set(self, subject: str, payload: Any, purpose: str = "") -> None:
        self._entries[(subject, purpose)] = payload

    def setdefault(self, subject: str, purpose: str, factory: Callable[[], T]) -> T:
        """Read-then-write-if-absent.

        Args:
            subject: Type identifier the entry describes.
            purpose: Tag separating independent facts about one subject.
            factory: Computes the payload on a miss.

        Returns:
            The cached or freshly computed payload.
        """
        key = (subject, purpose)
        if key in self._entries:
            return self._entries[key]
        logger.debug("Runtime cache miss for %s (%s)", subject, purpose)
        payload = factory()
        self._entries[key] = payload
        return payload

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def export_snapshot(self) -> bytes:
        """Pickle every entry.

        Entries that cannot be pickled (e.g. defaults holding a lambda) are
        left out with a warning; a missing entry is recomputed on first use.

        Returns:
            Opaque snapshot bytes for import_snapshot().
        """
        snapshot = {"version": _SNAPSHOT_VERSION, "entries": dict(self._entries)}
        try:
            return pickle.dumps(snapshot)
        except (pickle.PicklingError, TypeError, AttributeError):
            snapshot["entries"] = {
                key: payload
                for key, payload in self._entries.items()
                if _is_picklable(key, payload)
            }
            return pickle.dumps(snapshot)

    def import_snapshot(self, blob: bytes) -> bool:
        """Replace all entries with a snapshot.

        Current entries are left untouched if the snapshot is rejected.

        Args:
            blob: Bytes from a previous export_snapshot() call.

        Returns:
            True on success.

        Raises:
            CacheCorruptError: If blob does not deserialize to a well-formed snapshot.
        """
        token = _restoring.set(self)
        try:
            state = pickle.loads(blob)  # nosec B301 - Snapshots come from export_snapshot()
        except Exception as e:
            raise CacheCorruptError(
                f"Could not unserialize {blob!r:.80} in LocalRuntimeCache.import_snapshot"
            ) from e
        finally:
            _restoring.reset(token)

        entries = state.get("entries") if isinstance(state, dict) else None
        if (
            not isinstance(state, dict)
            or state.get("version") != _SNAPSHOT_VERSION
            or not isinstance(entries, dict)
            or not all(_is_key(key) for key in entries)
        ):
            raise CacheCorruptError(
                f"Could not unserialize {blob!r:.80} in LocalRuntimeCache.import_snapshot"
            )

        self._entries = dict(entries)
        logger.debug("Imported runtime cache snapshot with %d entries", len(entries))
        return True


def _is_key(key: Any) -> bool:
    return (
        isinstance(key, tuple)
        and len(key) == 2
        and isinstance(key[0], str)
        and isinstance(key[1], str)
    )


def restoring_cache() -> LocalRuntimeCache | None:
    """Return the cache currently importing a snapshot, if any."""
    return _restoring.get()


def _is_picklable(key: tuple[str, str], payload: Any) -> bool:
    try:
        pickle.dumps(payload)
    except (pickle.PicklingError, TypeError, AttributeError) as e:
        logger.warning("Leaving %s (%s) out of the cache snapshot: %s", *key, e)
        return False
    return True
