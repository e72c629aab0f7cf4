"""Exception hierarchy and renderer fallback."""

from mermaid2png.errors.exceptions import (
    CorruptIndexStateError,
    InvalidConfigurationError,
    Mermaid2PngError,
    RenderError,
    RendererTimeoutError,
    StorageUnavailableError,
)

__all__ = [
    "Mermaid2PngError",
    "StorageUnavailableError",
    "CorruptIndexStateError",
    "InvalidConfigurationError",
    "RenderError",
    "RendererTimeoutError",
]
