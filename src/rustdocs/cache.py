"""In-memory TTL cache shared by every tool handler.

One ``TTLCache`` instance is created in the server lifespan and passed to all
query operations through ``AppState``. Entries live until their TTL elapses;
expiry is checked on read and, in HTTP mode, by a periodic sweep. There is no
size bound and no LRU eviction.

Failures are never cached: if ``compute`` raises, nothing is stored and the
next call runs ``compute`` again. Concurrent misses for the same key are not
de-duplicated: both callers fetch and the last writer wins. Fetches are pure
reads, so the only cost is duplicate network work.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from enum import StrEnum
from typing import TYPE_CHECKING, Any, TypeVar
from urllib.parse import quote

import structlog

from rustdocs.models.cache import CacheEntry, CacheStats
from rustdocs.models.docs import LATEST

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, MutableMapping

    from rustdocs.config import CacheSettings

T = TypeVar("T")

log = structlog.get_logger()


def _utcnow() -> datetime:
    return datetime.now(UTC)


class TTLClass(StrEnum):
    """Duration buckets keyed to how often the underlying content changes."""

    SEARCH = "search"  # new crates are published constantly
    LATEST = "latest"  # "latest" moves when a release lands
    VERSIONED = "versioned"  # docs for a pinned version never change


class CachePolicy:
    """Maps TTL classes to durations.

    VERSIONED >= LATEST >= SEARCH is the intended ordering; it is not enforced.
    """

    def __init__(self, search: timedelta, latest: timedelta, versioned: timedelta) -> None:
        self._ttls = {
            TTLClass.SEARCH: search,
            TTLClass.LATEST: latest,
            TTLClass.VERSIONED: versioned,
        }

    @classmethod
    def from_settings(cls, settings: CacheSettings) -> CachePolicy:
        return cls(
            search=timedelta(minutes=settings.search_ttl_minutes),
            latest=timedelta(hours=settings.latest_ttl_hours),
            versioned=timedelta(hours=settings.versioned_ttl_hours),
        )

    def ttl_for(self, ttl_class: TTLClass) -> timedelta:
        return self._ttls[ttl_class]

    @staticmethod
    def class_for_version(version: str) -> TTLClass:
        return TTLClass.LATEST if version == LATEST else TTLClass.VERSIONED

    def for_version(self, version: str) -> timedelta:
        return self.ttl_for(self.class_for_version(version))


def cache_key(kind: str, *parts: str | None) -> str:
    """Build a cache key from an operation kind and its query components.

    Each component is percent-encoded, so ``:`` only ever appears as the
    separator and distinct component tuples can never produce the same key.
    ``None`` becomes an empty component.
    """
    encoded = [quote(part if part is not None else "", safe="") for part in parts]
    return ":".join([quote(kind, safe=""), *encoded])


class TTLCache:
    """Key/value store with per-entry expiry.

    ``store`` is any mutable mapping (a plain dict by default) and ``clock``
    returns the current aware datetime; both are injectable for tests.
    """

    def __init__(
        self,
        store: MutableMapping[str, CacheEntry] | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._store: MutableMapping[str, CacheEntry] = store if store is not None else {}
        self._clock = clock or _utcnow

    def get(self, key: str) -> Any | None:
        """Return the fresh value for ``key``, or ``None`` if missing or expired."""
        entry = self._store.get(key)
        if entry is None or not entry.is_fresh(self._clock()):
            return None
        return entry.value

    def set(self, key: str, value: Any, ttl: timedelta) -> None:
        now = self._clock()
        self._store[key] = CacheEntry(value=value, fetched_at=now, expires_at=now + ttl)

    async def get_or_compute(
        self,
        key: str,
        ttl: timedelta,
        compute: Callable[[], Awaitable[T]],
    ) -> T:
        """Return the cached value for ``key`` or run ``compute`` once and store it."""
        entry = self._store.get(key)
        if entry is not None and entry.is_fresh(self._clock()):
            log.debug("cache_hit", key=key)
            return entry.value

        log.debug("cache_miss", key=key, expired=entry is not None)
        value = await compute()
        self.set(key, value, ttl)
        return value

    def invalidate(self, key: str) -> bool:
        """Remove one entry. Returns whether the key was present."""
        return self._store.pop(key, None) is not None

    def clear(self) -> None:
        self._store.clear()

    def purge_expired(self) -> int:
        """Drop every entry whose TTL has elapsed. Returns the number removed."""
        now = self._clock()
        expired = [key for key, entry in self._store.items() if not entry.is_fresh(now)]
        for key in expired:
            del self._store[key]
        return len(expired)

    def stats(self) -> CacheStats:
        return CacheStats(size=len(self._store), keys=list(self._store.keys()))

    def __len__(self) -> int:
        return len(self._store)
