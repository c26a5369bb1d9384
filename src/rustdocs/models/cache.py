from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from datetime import datetime


@dataclass(frozen=True)
class CacheEntry:
    """Immutable snapshot stored per cache key. Replaced wholesale on refresh."""

    value: Any
    fetched_at: datetime
    expires_at: datetime

    def is_fresh(self, now: datetime) -> bool:
        return now < self.expires_at


@dataclass(frozen=True)
class CacheStats:
    """Debug view of the cache contents."""

    size: int
    keys: list[str]
