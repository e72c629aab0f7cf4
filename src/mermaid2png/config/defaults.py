"""Package-level default configuration values."""

from __future__ import annotations

from typing import Any

# Server
DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 3000

# Working directories
DEFAULT_TEMP_DIR = "temp"
DEFAULT_CACHE_DIR = "temp/cache"

# Cache
DEFAULT_CACHE_MAX_ENTRIES = 100
DEFAULT_CACHE_TTL_SECONDS = 24 * 60 * 60
DEFAULT_CACHE_DISABLED = False
DEFAULT_CACHE_SWEEP_INTERVAL_SECONDS = 60 * 60

# Rendering
DEFAULT_MERMAID_COMMAND = "npx mmdc"
DEFAULT_RENDER_TIMEOUT_SECONDS = 120.0
DEFAULT_BROWSER_FALLBACK = True
DEFAULT_FALLBACK_ALL_TYPES = True

# Dimension planning
DEFAULT_WIDTH = 1920
DEFAULT_HEIGHT = 1080
DEFAULT_SCALE_FACTOR = 2.0
DEFAULT_MIN_WIDTH = 800
DEFAULT_MAX_WIDTH = 8000
DEFAULT_MIN_HEIGHT = 400
DEFAULT_MAX_HEIGHT = 8000
DEFAULT_MIN_SCALE = 1.0
DEFAULT_MAX_SCALE = 3.0

# Log level
DEFAULT_LOG_LEVEL = "INFO"


def get_defaults() -> dict[str, Any]:
    """Return all defaults as a flat dictionary for merging."""
    return {
        "host": DEFAULT_HOST,
        "port": DEFAULT_PORT,
        "temp_dir": DEFAULT_TEMP_DIR,
        "cache_dir": DEFAULT_CACHE_DIR,
        "cache_max_entries": DEFAULT_CACHE_MAX_ENTRIES,
        "cache_ttl_seconds": DEFAULT_CACHE_TTL_SECONDS,
        "cache_disabled": DEFAULT_CACHE_DISABLED,
        "cache_sweep_interval_seconds": DEFAULT_CACHE_SWEEP_INTERVAL_SECONDS,
        "mermaid_command": DEFAULT_MERMAID_COMMAND,
        "render_timeout_seconds": DEFAULT_RENDER_TIMEOUT_SECONDS,
        "browser_fallback": DEFAULT_BROWSER_FALLBACK,
        "fallback_all_types": DEFAULT_FALLBACK_ALL_TYPES,
        "default_width": DEFAULT_WIDTH,
        "default_height": DEFAULT_HEIGHT,
        "default_scale": DEFAULT_SCALE_FACTOR,
        "min_width": DEFAULT_MIN_WIDTH,
        "max_width": DEFAULT_MAX_WIDTH,
        "min_height": DEFAULT_MIN_HEIGHT,
        "max_height": DEFAULT_MAX_HEIGHT,
        "min_scale": DEFAULT_MIN_SCALE,
        "max_scale": DEFAULT_MAX_SCALE,
        "log_level": DEFAULT_LOG_LEVEL,
    }
