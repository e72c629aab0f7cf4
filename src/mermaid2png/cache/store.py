"""Bounded LRU + TTL index over durable PNG storage."""

from __future__ import annotations

import logging
import threading
import time
from collections import OrderedDict
from collections.abc import Callable

from mermaid2png.cache.stats import CacheEntry
from mermaid2png.cache.storage import DirectoryStorage
from mermaid2png.errors.exceptions import (
    CorruptIndexStateError,
    InvalidConfigurationError,
    StorageUnavailableError,
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_ENTRIES = 100
DEFAULT_TTL_SECONDS = 24 * 60 * 60


class EvictionStore:
    """Key → rendered PNG map with least-recently-used and time-to-live eviction.

    The index is an OrderedDict kept in access order (least recently used
    first). Every index mutation happens under a single lock. Artifact bytes
    are staged to disk outside the lock and published with an atomic rename
    inside it, so the index never claims a key whose bytes are not fully
    written. Artifacts are deleted only after their index entry is gone.

    Storage failures never escape: a failed listing means a cold cache, a
    failed read is a miss, a failed write is a dropped store, and a failed
    delete is logged while the entry still leaves the index.
    """

    def __init__(
        self,
        storage: DirectoryStorage | None = None,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if isinstance(max_entries, bool) or not isinstance(max_entries, int) or max_entries <= 0:
            raise InvalidConfigurationError(
                f"max_entries must be a positive integer, got {max_entries!r}",
                field="max_entries",
            )
        if ttl_seconds <= 0:
            raise InvalidConfigurationError(
                f"ttl_seconds must be positive, got {ttl_seconds!r}",
                field="ttl_seconds",
            )
        self._storage = storage or DirectoryStorage()
        self._max_entries = max_entries
        self._ttl_seconds = float(ttl_seconds)
        self._clock = clock
        self._index: OrderedDict[str, CacheEntry] = OrderedDict()
        self._lock = threading.Lock()
        # Serializes index rebuilds; never taken while holding self._lock.
        self._init_lock = threading.Lock()
        self._initialized = False
        self._evictions = 0

    @property
    def storage(self) -> DirectoryStorage:
        return self._storage

    @property
    def max_entries(self) -> int:
        return self._max_entries

    @property
    def ttl_seconds(self) -> float:
        return self._ttl_seconds

    @property
    def evictions(self) -> int:
        return self._evictions

    @property
    def size_bytes(self) -> int:
        with self._lock:
            return sum(e.size_bytes for e in self._index.values())

    def __len__(self) -> int:
        with self._lock:
            return len(self._index)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.has(key)

    def keys(self) -> list[str]:
        """Indexed keys, least recently used first."""
        with self._lock:
            return list(self._index)

    # ── Lifecycle ──

    def initialize(self) -> int:
        """Rebuild the index from artifacts left by a previous process.

        Temp files from interrupted writes are removed on the first run.
        Expired artifacts are removed, then the least recently written
        surplus is evicted down to ``max_entries``. Keys stored while the
        directory was being scanned keep their place as most recently used.
        Returns the number of live entries.
        """
        with self._init_lock:
            return self._rebuild_index()

    def _rebuild_index(self) -> int:
        entries: list[CacheEntry] = []
        try:
            self._storage.ensure_dir()
            if not self._initialized:
                self._storage.purge_staged()
            keys = self._storage.list()
        except StorageUnavailableError as e:
            logger.error("Error loading cache index, starting cold: %s", e)
            keys = []

        for key in keys:
            try:
                mtime = self._storage.stat_mtime(key)
                size = self._storage.size(key)
            except StorageUnavailableError as e:
                logger.error("Error accessing cache file %s: %s", key, e)
                continue
            entries.append(
                CacheEntry(
                    key=key,
                    path=self._storage.path_for(key),
                    created_at=mtime,
                    last_accessed=mtime,
                    size_bytes=size,
                )
            )

        entries.sort(key=lambda e: e.created_at)
        with self._lock:
            merged = OrderedDict((e.key, e) for e in entries if e.key not in self._index)
            merged.update(self._index)
            self._index = merged
            self._initialized = True
            doomed = self._collect_expired_locked(self._clock())
            doomed += self._collect_surplus_locked()
            self._delete_artifacts_locked(doomed)
            count = len(self._index)

        logger.info("Cache initialized with %d items", count)
        return count

    def sweep(self) -> int:
        """Drop expired entries and entries whose artifact has vanished.

        Returns the number of entries removed.
        """
        self._ensure_initialized()
        with self._lock:
            doomed = self._collect_expired_locked(self._clock())
            for key in list(self._index):
                if not self._storage.exists(key):
                    self._heal_locked(key, "artifact missing from storage")
                    doomed.append(self._index.pop(key))
            self._delete_artifacts_locked(doomed)
        if doomed:
            logger.debug("Sweep removed %d cache items", len(doomed))
        return len(doomed)

    def clear(self) -> int:
        """Remove every entry and every artifact in storage, indexed or not."""
        self._ensure_initialized()
        with self._lock:
            self._index.clear()
            try:
                keys = self._storage.list()
            except StorageUnavailableError as e:
                logger.error("Error listing cache for clear: %s", e)
                return 0
            deleted = 0
            for key in keys:
                try:
                    self._storage.delete(key)
                    deleted += 1
                except StorageUnavailableError as e:
                    logger.error("Failed to delete %s: %s", key, e)
        logger.info("Cleared %d cached files", deleted)
        return deleted

    # ── Access ──

    def has(self, key: str) -> bool:
        """True when ``key`` is indexed, unexpired, and its artifact exists.

        Any negative finding evicts the key before returning.
        """
        self._ensure_initialized()
        with self._lock:
            return self._check_locked(key) is not None

    def get(self, key: str) -> bytes | None:
        """Return cached bytes for ``key`` and mark it most recently used."""
        self._ensure_initialized()
        with self._lock:
            entry = self._check_locked(key)
            if entry is None:
                return None
            self._index.move_to_end(key)
            entry.touch(self._clock())

        try:
            data = self._storage.read(key)
        except StorageUnavailableError as e:
            logger.error("Error reading cached item %s: %s", key, e)
            with self._lock:
                # Only drop the entry we checked; a concurrent put may have replaced it.
                if self._index.get(key) is entry:
                    del self._index[key]
                    self._delete_artifacts_locked([entry])
            return None

        logger.debug("Cache hit: %s", key)
        return data

    def put(self, key: str, data: bytes) -> bool:
        """Store ``data`` under ``key``, refreshing its timestamp if present.

        Returns False when the artifact could not be written; the index is
        left untouched in that case.
        """
        self._ensure_initialized()
        try:
            staged = self._storage.stage(key, data)
        except StorageUnavailableError as e:
            logger.error("Error caching item %s: %s", key, e)
            return False

        with self._lock:
            try:
                path = self._storage.commit(key, staged)
            except StorageUnavailableError as e:
                logger.error("Error caching item %s: %s", key, e)
                return False

            now = self._clock()
            self._index.pop(key, None)
            self._index[key] = CacheEntry(
                key=key,
                path=path,
                created_at=now,
                last_accessed=now,
                size_bytes=len(data),
            )
            doomed = self._collect_expired_locked(now)
            doomed += self._collect_surplus_locked()
            self._delete_artifacts_locked(doomed)

        logger.debug("Cached item: %s", key)
        return True

    def evict(self, key: str) -> bool:
        """Remove ``key`` from the index and delete its artifact."""
        self._ensure_initialized()
        with self._lock:
            entry = self._index.pop(key, None)
            if entry is None:
                return False
            self._delete_artifacts_locked([entry])
        return True

    def purge_expired(self) -> int:
        self._ensure_initialized()
        with self._lock:
            doomed = self._collect_expired_locked(self._clock())
            self._delete_artifacts_locked(doomed)
        return len(doomed)

    def _ensure_initialized(self) -> None:
        if self._initialized:
            return
        with self._init_lock:
            if not self._initialized:
                self._rebuild_index()

    # ── Internals (caller holds self._lock) ──

    def _check_locked(self, key: str) -> CacheEntry | None:
        entry = self._index.get(key)
        if entry is None:
            return None

        if entry.is_expired(self._ttl_seconds, self._clock()):
            del self._index[key]
            self._delete_artifacts_locked([entry])
            logger.debug("Removed expired cache item: %s", key)
            return None

        if not self._storage.exists(key):
            self._heal_locked(key, "artifact missing from storage")
            del self._index[key]
            return None

        return entry

    def _collect_expired_locked(self, now: float) -> list[CacheEntry]:
        expired = [
            key for key, e in self._index.items() if e.is_expired(self._ttl_seconds, now)
        ]
        doomed = [self._index.pop(key) for key in expired]
        for entry in doomed:
            logger.debug("Removed expired cache item: %s", entry.key)
        return doomed

    def _collect_surplus_locked(self) -> list[CacheEntry]:
        doomed: list[CacheEntry] = []
        while len(self._index) > self._max_entries:
            _, entry = self._index.popitem(last=False)
            logger.debug("Removed LRU cache item: %s", entry.key)
            doomed.append(entry)
        return doomed

    def _delete_artifacts_locked(self, entries: list[CacheEntry]) -> None:
        for entry in entries:
            self._evictions += 1
            try:
                self._storage.delete(entry.key)
            except StorageUnavailableError as e:
                logger.error("Error removing cache item %s: %s", entry.key, e)

    def _heal_locked(self, key: str, reason: str) -> None:
        err = CorruptIndexStateError(f"Dropping inconsistent cache key {key}: {reason}", key=key)
        logger.warning("%s", err.message)
