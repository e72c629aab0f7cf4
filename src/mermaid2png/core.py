"""Top-level entry points: Mermaid2Png and convert()."""

from __future__ import annotations

import asyncio
import logging

from mermaid2png.cache.manager import ConversionCache
from mermaid2png.cache.storage import DirectoryStorage
from mermaid2png.cache.store import EvictionStore
from mermaid2png.config.schema import ServiceSettings
from mermaid2png.planning.dimensions import DimensionPlanner
from mermaid2png.render.base import Renderer
from mermaid2png.render.browser import BrowserRenderer
from mermaid2png.render.cli import MermaidCliRenderer
from mermaid2png.render.orchestrator import RenderOrchestrator
from mermaid2png.types import DimensionPlan, RenderOptions, RenderResult

logger = logging.getLogger(__name__)


class Mermaid2Png:
    """Owns one cache, one planner and the renderer chain for a service process."""

    def __init__(
        self,
        settings: ServiceSettings | None = None,
        renderers: list[Renderer] | None = None,
        no_cache: bool = False,
    ) -> None:
        self._settings = settings or ServiceSettings()
        s = self._settings

        store = EvictionStore(
            storage=DirectoryStorage(s.cache_dir),
            max_entries=s.cache_max_entries,
            ttl_seconds=s.cache_ttl_seconds,
        )
        self._cache = ConversionCache(store, enabled=not (no_cache or s.cache_disabled))
        self._planner = DimensionPlanner(s.planner_limits())
        self._orchestrator = RenderOrchestrator(
            cache=self._cache,
            planner=self._planner,
            renderers=renderers if renderers is not None else self._default_renderers(),
            fallback_all_types=s.fallback_all_types,
        )

    @property
    def settings(self) -> ServiceSettings:
        return self._settings

    @property
    def cache(self) -> ConversionCache:
        return self._cache

    @property
    def planner(self) -> DimensionPlanner:
        return self._planner

    @property
    def orchestrator(self) -> RenderOrchestrator:
        return self._orchestrator

    def initialize(self) -> int:
        """Rebuild the cache index from disk. Returns the number of live entries."""
        return self._cache.initialize()

    async def convert_async(
        self,
        mermaid_syntax: str,
        width: int | None = None,
        height: int | None = None,
        scale_factor: float | None = None,
    ) -> RenderResult:
        """Render a diagram to PNG, using the cache when possible."""
        options = RenderOptions(width=width, height=height, scale_factor=scale_factor)
        return await self._orchestrator.render(mermaid_syntax, options)

    def convert(
        self,
        mermaid_syntax: str,
        width: int | None = None,
        height: int | None = None,
        scale_factor: float | None = None,
    ) -> RenderResult:
        """Synchronous wrapper around convert_async()."""
        return asyncio.run(self.convert_async(mermaid_syntax, width, height, scale_factor))

    def plan(
        self,
        mermaid_syntax: str,
        width: int | None = None,
        height: int | None = None,
        scale_factor: float | None = None,
    ) -> DimensionPlan:
        return self._planner.plan(mermaid_syntax, width, height, scale_factor)

    def _default_renderers(self) -> list[Renderer]:
        s = self._settings
        renderers: list[Renderer] = [
            MermaidCliRenderer(
                command=s.mermaid_command,
                temp_dir=s.temp_dir,
                puppeteer_config=s.puppeteer_config,
                mermaid_config=s.mermaid_config,
                timeout=s.render_timeout_seconds,
            )
        ]
        if s.browser_fallback:
            renderers.append(BrowserRenderer(timeout=s.render_timeout_seconds))
        return renderers


def convert(
    mermaid_syntax: str,
    width: int | None = None,
    height: int | None = None,
    scale_factor: float | None = None,
    no_cache: bool = False,
) -> bytes:
    """Render a diagram to PNG bytes with default settings."""
    converter = Mermaid2Png(no_cache=no_cache)
    return converter.convert(mermaid_syntax, width, height, scale_factor).image
