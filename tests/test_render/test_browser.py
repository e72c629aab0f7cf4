"""Tests for the headless-browser renderer."""

import asyncio

import pytest

from mermaid2png.errors.exceptions import RenderError
from mermaid2png.render.browser import BrowserRenderer, build_page
from mermaid2png.types import DimensionPlan

PLAN = DimensionPlan(width=1200, height=700, scale_factor=2.0)


class TestBuildPage:
    def test_viewport_dimensions(self):
        page = build_page("graph TD\n  A --> B", PLAN)
        assert "width: 1200px; height: 700px" in page

    def test_diagram_text_escaped(self):
        page = build_page("graph TD\n  A[<b>x</b>] --> B & C", PLAN)
        assert "&lt;b&gt;x&lt;/b&gt;" in page
        assert "--&gt; B &amp; C" in page
        assert "<b>x</b>" not in page

    def test_custom_script_url(self):
        page = build_page("pie", PLAN, script_url="http://localhost/mermaid.js")
        assert '<script src="http://localhost/mermaid.js"></script>' in page


class TestBrowserRenderer:
    async def test_returns_validated_png(self, monkeypatch, sample_png_bytes):
        renderer = BrowserRenderer()

        async def _shot(text, plan):
            return sample_png_bytes

        monkeypatch.setattr(renderer, "_screenshot", _shot)
        assert await renderer.render("gantt", PLAN) == sample_png_bytes

    async def test_timeout_becomes_render_error(self, monkeypatch):
        renderer = BrowserRenderer(timeout=0.01)

        async def _slow(text, plan):
            await asyncio.sleep(10)

        monkeypatch.setattr(renderer, "_screenshot", _slow)
        with pytest.raises(RenderError, match="timed out") as exc_info:
            await renderer.render("gantt", PLAN)
        assert exc_info.value.renderer == "browser"

    async def test_non_png_rejected(self, monkeypatch):
        renderer = BrowserRenderer()

        async def _shot(text, plan):
            return b""

        monkeypatch.setattr(renderer, "_screenshot", _shot)
        with pytest.raises(RenderError, match="empty"):
            await renderer.render("gantt", PLAN)
