"""Cache subsystem for rendered PNGs."""

from mermaid2png.cache.keys import generate_cache_key, options_key
from mermaid2png.cache.manager import ConversionCache
from mermaid2png.cache.stats import CacheEntry, CacheStats
from mermaid2png.cache.storage import DirectoryStorage
from mermaid2png.cache.store import EvictionStore

__all__ = [
    "ConversionCache",
    "EvictionStore",
    "DirectoryStorage",
    "CacheEntry",
    "CacheStats",
    "generate_cache_key",
    "options_key",
]
