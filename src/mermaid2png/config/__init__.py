"""Layered configuration, from package defaults up to runtime overrides."""

from mermaid2png.config.hierarchy import load_config_hierarchy
from mermaid2png.config.schema import ServiceSettings, load_settings

__all__ = ["ServiceSettings", "load_config_hierarchy", "load_settings"]
