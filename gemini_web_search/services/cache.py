"""In-memory LRU cache with TTL for formatted search responses."""

from __future__ import annotations

import re
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable

from gemini_web_search.config import CacheSettings
from gemini_web_search.domain.models import ToolResponse

Clock = Callable[[], float]

_WHITESPACE_RE = re.compile(r"\s+")


def normalize_key(query: str) -> str:
    return _WHITESPACE_RE.sub(" ", query.lower().strip())


@dataclass(slots=True)
class CacheEntry:
    inserted_at: float
    value: ToolResponse


class SearchCache:
    """Bounded LRU mapping from normalized query to response.

    Expired entries are purged on every ``get``/``set``/``size`` call rather
    than skipped, so ``size`` always reflects live entries. A disabled cache
    misses on every lookup and ignores stores.
    """

    def __init__(
        self,
        *,
        enabled: bool = True,
        max_entries: int = 100,
        ttl_seconds: float = 300,
        clock: Clock = time.monotonic,
    ) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self.enabled = enabled
        self.max_entries = max_entries
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._store: OrderedDict[str, CacheEntry] = OrderedDict()

    @classmethod
    def from_settings(cls, settings: CacheSettings, clock: Clock = time.monotonic) -> "SearchCache":
        return cls(
            enabled=settings.enabled,
            max_entries=settings.max_entries,
            ttl_seconds=settings.ttl_seconds,
            clock=clock,
        )

    def get(self, query: str) -> ToolResponse | None:
        if not self.enabled:
            return None
        self._evict_expired()
        key = normalize_key(query)
        entry = self._store.get(key)
        if entry is None:
            return None
        self._store.move_to_end(key)
        return entry.value

    def set(self, query: str, value: ToolResponse) -> None:
        if not self.enabled or value.is_error:
            return
        self._evict_expired()
        key = normalize_key(query)
        self._store.pop(key, None)
        self._store[key] = CacheEntry(inserted_at=self._clock(), value=value)
        while len(self._store) > self.max_entries:
            self._store.popitem(last=False)

    def size(self) -> int:
        self._evict_expired()
        return len(self._store)

    def clear(self) -> None:
        self._store.clear()

    def _evict_expired(self) -> None:
        now = self._clock()
        expired = [
            key
            for key, entry in self._store.items()
            if now - entry.inserted_at >= self.ttl_seconds
        ]
        for key in expired:
            del self._store[key]


__all__ = ["CacheEntry", "SearchCache", "normalize_key"]
