"""Configuration hierarchy: merges sources in priority order.

Precedence (later overrides earlier):
  1. Package defaults
  2. Global config   (~/.mermaid2png/config.yaml)
  3. Project config   (./mermaid2png.yaml, searched upward)
  4. Environment variables (PORT, MERMAID2PNG_*)
  5. Runtime arguments
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml

from mermaid2png.config.defaults import get_defaults

logger = logging.getLogger(__name__)

_GLOBAL_CONFIG_PATH = Path.home() / ".mermaid2png" / "config.yaml"
_PROJECT_CONFIG_NAME = "mermaid2png.yaml"

# Map of environment variables to config keys
_ENV_MAP: dict[str, str] = {
    "PORT": "port",
    "TEMP_DIR": "temp_dir",
    "MERMAID_COMMAND": "mermaid_command",
    "MERMAID2PNG_HOST": "host",
    "MERMAID2PNG_PORT": "port",
    "MERMAID2PNG_TEMP_DIR": "temp_dir",
    "MERMAID2PNG_CACHE_DIR": "cache_dir",
    "MERMAID2PNG_CACHE_MAX_ENTRIES": "cache_max_entries",
    "MERMAID2PNG_CACHE_TTL_SECONDS": "cache_ttl_seconds",
    "MERMAID2PNG_CACHE_DISABLED": "cache_disabled",
    "MERMAID2PNG_CACHE_SWEEP_INTERVAL_SECONDS": "cache_sweep_interval_seconds",
    "MERMAID2PNG_MERMAID_COMMAND": "mermaid_command",
    "MERMAID2PNG_PUPPETEER_CONFIG": "puppeteer_config",
    "MERMAID2PNG_MERMAID_CONFIG": "mermaid_config",
    "MERMAID2PNG_RENDER_TIMEOUT_SECONDS": "render_timeout_seconds",
    "MERMAID2PNG_BROWSER_FALLBACK": "browser_fallback",
    "MERMAID2PNG_FALLBACK_ALL_TYPES": "fallback_all_types",
    "MERMAID2PNG_LOG_LEVEL": "log_level",
}

# Keys that should be parsed as specific types
_TYPE_MAP: dict[str, type] = {
    "port": int,
    "cache_max_entries": int,
    "cache_ttl_seconds": float,
    "cache_sweep_interval_seconds": float,
    "render_timeout_seconds": float,
}

_BOOL_KEYS = {"cache_disabled", "browser_fallback", "fallback_all_types"}

# Boolean env var values
_TRUTHY = {"1", "true", "yes", "on"}


def load_config_hierarchy(**runtime_overrides: Any) -> dict[str, Any]:
    """Load and merge configuration from all sources.

    Returns a merged dict with the final resolved values.
    """
    config = get_defaults()

    # Layer 2: Global config
    global_cfg = _load_yaml_config(_GLOBAL_CONFIG_PATH)
    if global_cfg:
        config.update(global_cfg)

    # Layer 3: Project config (search from cwd upward)
    project_path = _find_project_config()
    if project_path:
        project_cfg = _load_yaml_config(project_path)
        if project_cfg:
            config.update(project_cfg)

    # Layer 4: Environment variables
    config.update(_load_env_vars())

    # Layer 5: Runtime arguments; None means "not given"
    for key, value in runtime_overrides.items():
        if value is not None:
            config[key] = value

    return config


def _load_yaml_config(path: Path) -> dict[str, Any] | None:
    """Load a YAML config file if it exists."""
    if not path.exists() or not path.is_file():
        return None
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
        if isinstance(data, dict):
            return data
        logger.warning("Config file %s is not a mapping, ignoring", path)
    except (OSError, yaml.YAMLError) as e:
        logger.warning("Failed to load config %s: %s", path, e)
    return None


def _find_project_config() -> Path | None:
    """Search for mermaid2png.yaml from cwd upward."""
    cwd = Path.cwd()
    for parent in [cwd, *cwd.parents]:
        candidate = parent / _PROJECT_CONFIG_NAME
        if candidate.exists():
            return candidate
    return None


def _load_env_vars() -> dict[str, Any]:
    """Read PORT, MERMAID_COMMAND and MERMAID2PNG_* environment variables.

    Prefixed variables win over their bare aliases.
    """
    result: dict[str, Any] = {}
    for env_key, config_key in _ENV_MAP.items():
        value = os.environ.get(env_key)
        if value is None:
            continue
        result[config_key] = _coerce_env_value(config_key, value)
    return result


def _coerce_env_value(key: str, value: str) -> Any:
    """Coerce an environment variable string to the appropriate type."""
    if key in _BOOL_KEYS:
        return value.strip().lower() in _TRUTHY

    target_type = _TYPE_MAP.get(key)
    if target_type:
        try:
            return target_type(value)
        except (ValueError, TypeError):
            logger.warning(
                "Cannot convert env var for '%s' to %s: %s", key, target_type.__name__, value
            )
            return value

    return value
