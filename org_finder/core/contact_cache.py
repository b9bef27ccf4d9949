"""In-memory TTL cache for contact page discovery results."""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 300


def epoch_millis() -> int:
    return int(time.time() * 1000)


@dataclass(frozen=True)
class ContactPageCacheEntry:
    resolved_url: str
    resolved_at_ms: int


class ContactPageCache:
    """Process-wide cache keyed by normalized website URL.

    Entries are evicted lazily on lookup; an empty ``resolved_url`` is a cached
    negative result.
    """

    def __init__(
        self,
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
        clock: Callable[[], int] = epoch_millis,
    ) -> None:
        self.ttl_ms = int(ttl_seconds * 1000)
        self._clock = clock
        self._entries: Dict[str, ContactPageCacheEntry] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[ContactPageCacheEntry]:
        now = self._clock()
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if now - entry.resolved_at_ms < self.ttl_ms:
                return entry
            del self._entries[key]
        logger.debug("Contact cache entry expired for %s", key)
        return None

    def put(self, key: str, resolved_url: str) -> ContactPageCacheEntry:
        entry = ContactPageCacheEntry(resolved_url=resolved_url or "", resolved_at_ms=self._clock())
        with self._lock:
            self._entries[key] = entry
        return entry

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


_DEFAULT_CACHE: Optional[ContactPageCache] = None
_DEFAULT_CACHE_LOCK = threading.Lock()


def get_default_contact_cache(ttl_seconds: int = DEFAULT_TTL_SECONDS) -> ContactPageCache:
    """Return the shared cache that survives across searches in this process."""
    global _DEFAULT_CACHE
    with _DEFAULT_CACHE_LOCK:
        if _DEFAULT_CACHE is None:
            _DEFAULT_CACHE = ContactPageCache(ttl_seconds=ttl_seconds)
        elif _DEFAULT_CACHE.ttl_ms != int(ttl_seconds * 1000):
            logger.info(
                "Contact cache TTL changed from %dms to %ds", _DEFAULT_CACHE.ttl_ms, ttl_seconds
            )
            _DEFAULT_CACHE.ttl_ms = int(ttl_seconds * 1000)
        return _DEFAULT_CACHE
