"""Conversion cache façade over the eviction store."""

from __future__ import annotations

import logging
import threading

from mermaid2png.cache.keys import options_key
from mermaid2png.cache.stats import CacheStats
from mermaid2png.cache.store import EvictionStore
from mermaid2png.types import RenderOptions

logger = logging.getLogger(__name__)


class ConversionCache:
    """Cache of rendered PNGs keyed by diagram text and requested dimensions."""

    def __init__(
        self,
        store: EvictionStore | None = None,
        enabled: bool = True,
    ) -> None:
        self._enabled = enabled
        self._store = store if store is not None else EvictionStore()
        self._stats = CacheStats()
        self._stats_lock = threading.Lock()

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def store_backend(self) -> EvictionStore:
        return self._store

    def initialize(self) -> int:
        if not self._enabled:
            return 0
        return self._store.initialize()

    def lookup(self, mermaid_syntax: str, options: RenderOptions | None = None) -> bytes | None:
        """Return the cached PNG for this diagram and options, if any."""
        if not self._enabled:
            self._count(misses=1)
            return None

        key = options_key(mermaid_syntax, options)
        data = self._store.get(key)
        if data is None:
            logger.debug("Cache miss: %s", key)
            self._count(misses=1)
            return None

        self._count(hits=1)
        return data

    def store(
        self,
        mermaid_syntax: str,
        options: RenderOptions | None,
        image: bytes,
    ) -> bool:
        """Cache a rendered PNG. Returns False if it could not be persisted."""
        if not self._enabled:
            return False
        key = options_key(mermaid_syntax, options)
        stored = self._store.put(key, image)
        if not stored:
            self._count(store_failures=1)
        return stored

    def clear(self) -> int:
        """Clear all cached PNGs and reset counters."""
        deleted = self._store.clear()
        with self._stats_lock:
            self._stats = CacheStats()
        return deleted

    def stats(self) -> CacheStats:
        """Return aggregate cache statistics."""
        with self._stats_lock:
            counters = self._stats.model_copy()
        return CacheStats(
            entries=len(self._store) if self._enabled else 0,
            size_mb=(self._store.size_bytes / (1024 * 1024)) if self._enabled else 0.0,
            hits=counters.hits,
            misses=counters.misses,
            evictions=self._store.evictions,
            store_failures=counters.store_failures,
        )

    def _count(self, hits: int = 0, misses: int = 0, store_failures: int = 0) -> None:
        with self._stats_lock:
            self._stats.hits += hits
            self._stats.misses += misses
            self._stats.store_failures += store_failures
