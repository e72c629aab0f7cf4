"""Cache entry and statistics models."""

from __future__ import annotations

import time
from pathlib import Path

from pydantic import BaseModel, Field


class CacheEntry(BaseModel):
    """Index metadata for one rendered PNG held in durable storage."""

    key: str
    path: Path
    created_at: float = Field(default_factory=time.time)
    last_accessed: float = Field(default_factory=time.time)
    size_bytes: int = 0

    def is_expired(self, ttl_seconds: float, now: float | None = None) -> bool:
        now = time.time() if now is None else now
        return now - self.created_at > ttl_seconds

    def touch(self, now: float | None = None) -> None:
        self.last_accessed = time.time() if now is None else now


class CacheStats(BaseModel):
    """Aggregate cache statistics."""

    entries: int = 0
    size_mb: float = 0.0
    hits: int = 0
    misses: int = 0
    evictions: int = 0
    store_failures: int = 0

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        return self.hits / total if total > 0 else 0.0
