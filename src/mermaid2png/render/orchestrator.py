"""Render orchestration: cache lookup, then plan, render and fill the cache."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import AsyncIterator, Sequence

from mermaid2png.cache.keys import options_key
from mermaid2png.cache.manager import ConversionCache
from mermaid2png.diagram.detect import detect_diagram_type
from mermaid2png.diagram.syntax import normalize_syntax
from mermaid2png.errors.exceptions import RenderError
from mermaid2png.errors.fallback import RendererFallbackChain
from mermaid2png.planning.dimensions import DimensionPlanner
from mermaid2png.render.base import Renderer
from mermaid2png.types import DiagramType, DimensionPlan, RenderOptions, RenderResult

logger = logging.getLogger(__name__)


class RenderOrchestrator:
    """Serves renders from the cache and renders each missing fingerprint once.

    Concurrent misses for the same fingerprint queue on a per-key lock; the
    first renders and stores, the rest find the stored bytes on their lookup.
    The cache itself is synchronous and is called through a worker thread.
    """

    def __init__(
        self,
        cache: ConversionCache,
        planner: DimensionPlanner,
        renderers: Sequence[Renderer],
        fallback_all_types: bool = True,
    ) -> None:
        if not renderers:
            raise ValueError("RenderOrchestrator needs at least one renderer")
        self._cache = cache
        self._planner = planner
        self._renderers = list(renderers)
        self._fallback_all_types = fallback_all_types
        self._inflight: dict[str, asyncio.Lock] = {}
        self._waiters: dict[str, int] = {}

    @property
    def cache(self) -> ConversionCache:
        return self._cache

    @property
    def planner(self) -> DimensionPlanner:
        return self._planner

    async def render(
        self,
        mermaid_syntax: str,
        options: RenderOptions | None = None,
    ) -> RenderResult:
        """Return PNG bytes for a diagram, from cache when possible.

        Raises RenderError if every applicable renderer fails.
        """
        options = options or RenderOptions()
        diagram_type = detect_diagram_type(mermaid_syntax)
        key = options_key(mermaid_syntax, options)

        async with self._key_lock(key):
            cached = await asyncio.to_thread(self._cache.lookup, mermaid_syntax, options)
            if cached is not None:
                logger.info("Cache hit: using cached diagram image for %s", key)
                return RenderResult(
                    image=cached,
                    cached=True,
                    diagram_type=diagram_type,
                    options=options,
                )

            logger.info("Cache miss: converting diagram %s", key)
            plan = self._planner.plan(
                mermaid_syntax,
                options.width,
                options.height,
                options.scale_factor,
            )
            image, renderer_name = await self._render_with_fallback(
                normalize_syntax(mermaid_syntax), plan
            )
            await asyncio.to_thread(self._cache.store, mermaid_syntax, options, image)

        logger.info(
            "Converted %s diagram to PNG (%d bytes) with %s",
            diagram_type.value,
            len(image),
            renderer_name,
        )
        return RenderResult(
            image=image,
            cached=False,
            diagram_type=diagram_type,
            plan=plan,
            renderer=renderer_name,
            options=options,
        )

    def renderers_for(self, diagram_type: DiagramType) -> list[Renderer]:
        """Renderer chain for a diagram family."""
        if self._fallback_all_types or diagram_type == DiagramType.GANTT:
            return list(self._renderers)
        return self._renderers[:1]

    async def _render_with_fallback(
        self,
        normalized: str,
        plan: DimensionPlan,
    ) -> tuple[bytes, str]:
        chain = RendererFallbackChain(self.renderers_for(plan.diagram_type))
        while True:
            renderer = chain.current
            try:
                return await renderer.render(normalized, plan), renderer.name
            except RenderError as e:
                logger.warning("Renderer '%s' failed: %s", renderer.name, e.message)
                try:
                    chain.next_renderer()
                except RenderError as exhausted:
                    raise exhausted from e

    @contextlib.asynccontextmanager
    async def _key_lock(self, key: str) -> AsyncIterator[None]:
        lock = self._inflight.get(key)
        if lock is None:
            lock = self._inflight[key] = asyncio.Lock()
        self._waiters[key] = self._waiters.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._waiters[key] -= 1
            if self._waiters[key] == 0:
                del self._waiters[key]
                del self._inflight[key]
