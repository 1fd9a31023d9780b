"""
Bounded in-process cache of text embeddings.
LRU eviction plus a time-to-live, measured on an injected clock.
"""

import hashlib
import threading
import time
from collections import OrderedDict
from typing import Callable, Dict, List, Optional

from ..util.logging import logger

DEFAULT_TTL_SECONDS = 30 * 24 * 60 * 60


def text_hash(text: str) -> str:
    """SHA-256 hex digest used as the cache key for a text."""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


class EmbeddingCache:
    """Thread-safe LRU cache mapping text hashes to embedding vectors."""

    def __init__(self, max_entries: int = 1024, ttl_seconds: float = DEFAULT_TTL_SECONDS,
                 clock: Callable[[], float] = time.monotonic):
        if max_entries < 1:
            raise ValueError("max_entries must be >= 1")
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be > 0")
        self.max_entries = max_entries
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries = OrderedDict()  # key -> (stored_at, vector)
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    def get(self, key: str) -> Optional[List[float]]:
        """Return the cached vector, or None if absent or expired."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self._misses += 1
                return None

            stored_at, vector = entry
            if self._clock() - stored_at >= self.ttl_seconds:
                del self._entries[key]
                self._misses += 1
                return None

            self._entries.move_to_end(key)
            self._hits += 1
            return list(vector)

    def put(self, key: str, vector: List[float]) -> None:
        """Store a vector, evicting the least recently used entry when full."""
        evicted = 0
        with self._lock:
            self._entries[key] = (self._clock(), tuple(vector))
            self._entries.move_to_end(key)
            while len(self._entries) > self.max_entries:
                self._entries.popitem(last=False)
                evicted += 1
        if evicted:
            logger.log_cache_eviction("capacity", evicted)

    def evict_expired(self) -> int:
        """Drop every expired entry and return how many were removed."""
        with self._lock:
            now = self._clock()
            expired = [key for key, (stored_at, _) in self._entries.items()
                       if now - stored_at >= self.ttl_seconds]
            for key in expired:
                del self._entries[key]
        if expired:
            logger.log_cache_eviction("ttl", len(expired))
        return len(expired)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._hits = 0
            self._misses = 0

    def stats(self) -> Dict[str, float]:
        with self._lock:
            lookups = self._hits + self._misses
            return {
                "entries": len(self._entries),
                "max_entries": self.max_entries,
                "hits": self._hits,
                "misses": self._misses,
                "hit_rate": self._hits / lookups if lookups else 0.0,
            }

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._entries
