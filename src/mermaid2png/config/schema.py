"""Pydantic model for resolved service settings."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError, model_validator

from mermaid2png.config import defaults
from mermaid2png.config.hierarchy import load_config_hierarchy
from mermaid2png.errors.exceptions import InvalidConfigurationError
from mermaid2png.planning.dimensions import PlannerLimits


class ServiceSettings(BaseModel):
    """Everything the service needs at construction time. Immutable once built."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    host: str = defaults.DEFAULT_HOST
    port: int = defaults.DEFAULT_PORT
    temp_dir: Path = Path(defaults.DEFAULT_TEMP_DIR)
    cache_dir: Path = Path(defaults.DEFAULT_CACHE_DIR)
    cache_max_entries: int = defaults.DEFAULT_CACHE_MAX_ENTRIES
    cache_ttl_seconds: float = defaults.DEFAULT_CACHE_TTL_SECONDS
    cache_disabled: bool = defaults.DEFAULT_CACHE_DISABLED
    cache_sweep_interval_seconds: float = defaults.DEFAULT_CACHE_SWEEP_INTERVAL_SECONDS
    mermaid_command: str = defaults.DEFAULT_MERMAID_COMMAND
    puppeteer_config: Path | None = None
    mermaid_config: Path | None = None
    render_timeout_seconds: float = defaults.DEFAULT_RENDER_TIMEOUT_SECONDS
    browser_fallback: bool = defaults.DEFAULT_BROWSER_FALLBACK
    fallback_all_types: bool = defaults.DEFAULT_FALLBACK_ALL_TYPES
    default_width: int = defaults.DEFAULT_WIDTH
    default_height: int = defaults.DEFAULT_HEIGHT
    default_scale: float = defaults.DEFAULT_SCALE_FACTOR
    min_width: int = defaults.DEFAULT_MIN_WIDTH
    max_width: int = defaults.DEFAULT_MAX_WIDTH
    min_height: int = defaults.DEFAULT_MIN_HEIGHT
    max_height: int = defaults.DEFAULT_MAX_HEIGHT
    min_scale: float = defaults.DEFAULT_MIN_SCALE
    max_scale: float = defaults.DEFAULT_MAX_SCALE
    log_level: str = defaults.DEFAULT_LOG_LEVEL

    @model_validator(mode="after")
    def _check_ranges(self) -> ServiceSettings:
        if self.cache_max_entries <= 0:
            raise InvalidConfigurationError(
                f"cache_max_entries must be positive, got {self.cache_max_entries}",
                field="cache_max_entries",
            )
        for name in ("cache_ttl_seconds", "render_timeout_seconds", "cache_sweep_interval_seconds"):
            if getattr(self, name) <= 0:
                raise InvalidConfigurationError(
                    f"{name} must be positive, got {getattr(self, name)}", field=name
                )
        # Bounds are checked by PlannerLimits itself.
        self.planner_limits()
        return self

    def planner_limits(self) -> PlannerLimits:
        return PlannerLimits(
            default_width=self.default_width,
            default_height=self.default_height,
            default_scale=self.default_scale,
            min_width=self.min_width,
            max_width=self.max_width,
            min_height=self.min_height,
            max_height=self.max_height,
            min_scale=self.min_scale,
            max_scale=self.max_scale,
        )


def load_settings(**runtime_overrides: Any) -> ServiceSettings:
    """Resolve the config hierarchy and validate it.

    Raises InvalidConfigurationError for any bad value.
    """
    raw = load_config_hierarchy(**runtime_overrides)
    try:
        return ServiceSettings(**raw)
    except ValidationError as e:
        raise InvalidConfigurationError(f"Invalid configuration: {e}") from e
