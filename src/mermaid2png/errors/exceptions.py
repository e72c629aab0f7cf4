"""Custom exception hierarchy for mermaid2png."""

from __future__ import annotations

from typing import Any


class Mermaid2PngError(Exception):
    """Base exception for all mermaid2png errors."""

    def __init__(self, message: str = "", **kwargs: Any) -> None:
        super().__init__(message)
        self.message = message


class StorageUnavailableError(Mermaid2PngError):
    """Durable cache storage could not be listed, read, written or deleted.

    Never crosses the cache boundary: the eviction store turns it into a
    cache miss, a failed store or a cold cache.
    """

    def __init__(
        self,
        message: str = "",
        operation: str = "read",
        key: str | None = None,
        original: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.operation = operation
        self.key = key
        self.original = original


class CorruptIndexStateError(Mermaid2PngError):
    """The in-memory cache index disagrees with itself or with storage.

    Recoverable: the offending key is dropped from the index.
    """

    def __init__(self, message: str = "", key: str | None = None) -> None:
        super().__init__(message)
        self.key = key


class InvalidConfigurationError(Mermaid2PngError):
    """A capacity, TTL or dimension bound is out of range.

    Raised at construction time; indicates a deployment mistake.
    """

    def __init__(self, message: str = "", field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class RenderError(Mermaid2PngError):
    """A renderer failed to produce a PNG."""

    def __init__(
        self,
        message: str = "",
        renderer: str | None = None,
        stderr: str | None = None,
    ) -> None:
        super().__init__(message)
        self.renderer = renderer
        self.stderr = stderr


class RendererTimeoutError(RenderError):
    """Transient renderer failure, safe to retry."""
