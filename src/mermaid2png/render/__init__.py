"""Renderers and cache-aware render orchestration."""

from mermaid2png.render.base import Renderer, validate_png
from mermaid2png.render.browser import BrowserRenderer
from mermaid2png.render.cli import MermaidCliRenderer
from mermaid2png.render.orchestrator import RenderOrchestrator

__all__ = [
    "Renderer",
    "MermaidCliRenderer",
    "BrowserRenderer",
    "RenderOrchestrator",
    "validate_png",
]
