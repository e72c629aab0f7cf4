"""Renderer fallback chain. Cycles through renderers on render errors."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

from mermaid2png.errors.exceptions import RenderError

if TYPE_CHECKING:
    from mermaid2png.render.base import Renderer

logger = logging.getLogger(__name__)


class RendererFallbackChain:
    """Manages renderer fallback (mmdc → headless browser → ...).

    Cycles through the renderer list in order, skipping names already tried.
    """

    def __init__(self, renderers: Sequence[Renderer]) -> None:
        if not renderers:
            raise ValueError("RendererFallbackChain needs at least one renderer")
        self._renderers = list(renderers)
        self._tried: set[str] = set()
        self._current_index = 0

    @property
    def current(self) -> Renderer:
        return self._renderers[self._current_index]

    @property
    def names(self) -> list[str]:
        return [r.name for r in self._renderers]

    def next_renderer(self) -> Renderer:
        """Advance to the next untried renderer.

        Raises RenderError if all renderers have been exhausted.
        """
        self._tried.add(self.current.name)

        for i in range(self._current_index + 1, len(self._renderers)):
            if self._renderers[i].name not in self._tried:
                self._current_index = i
                logger.info(
                    "Falling back to renderer '%s' (tried: %s)",
                    self.current.name,
                    ", ".join(sorted(self._tried)),
                )
                return self.current

        raise RenderError(
            f"All renderers exhausted: {', '.join(self.names)}",
            renderer=self.current.name,
        )
