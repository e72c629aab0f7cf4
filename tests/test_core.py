"""Tests for the Mermaid2Png service object."""

from mermaid2png.config.schema import ServiceSettings
from mermaid2png.core import Mermaid2Png
from mermaid2png.render.browser import BrowserRenderer
from mermaid2png.render.cli import MermaidCliRenderer

DIAGRAM = "graph TD\n  A --> B"


def _settings(tmp_path, **overrides) -> ServiceSettings:
    return ServiceSettings(cache_dir=tmp_path / "cache", temp_dir=tmp_path / "work", **overrides)


class TestConstruction:
    def test_default_renderer_chain(self, tmp_path):
        service = Mermaid2Png(_settings(tmp_path))
        renderers = service.orchestrator.renderers_for(service.plan(DIAGRAM).diagram_type)
        assert [type(r) for r in renderers] == [MermaidCliRenderer, BrowserRenderer]

    def test_browser_fallback_disabled(self, tmp_path):
        service = Mermaid2Png(_settings(tmp_path, browser_fallback=False))
        renderers = service.orchestrator.renderers_for(service.plan(DIAGRAM).diagram_type)
        assert [r.name for r in renderers] == ["mmdc"]

    def test_cache_configured_from_settings(self, tmp_path):
        service = Mermaid2Png(_settings(tmp_path, cache_max_entries=7, cache_ttl_seconds=60))
        store = service.cache.store_backend
        assert store.max_entries == 7
        assert store.ttl_seconds == 60
        assert store.storage.directory == tmp_path / "cache"

    def test_no_cache_flag(self, tmp_path):
        assert Mermaid2Png(_settings(tmp_path), no_cache=True).cache.enabled is False

    def test_cache_disabled_setting(self, tmp_path):
        assert Mermaid2Png(_settings(tmp_path, cache_disabled=True)).cache.enabled is False


class TestConvert:
    def test_sync_convert(self, tmp_path, make_renderer, sample_png_bytes):
        renderer = make_renderer()
        service = Mermaid2Png(_settings(tmp_path), renderers=[renderer])
        assert service.initialize() == 0

        result = service.convert(DIAGRAM, width=900, height=700)
        assert result.image == sample_png_bytes
        assert result.plan.width == 900

        again = service.convert(DIAGRAM, width=900, height=700)
        assert again.cached is True
        assert len(renderer.calls) == 1

    async def test_async_convert(self, tmp_path, make_renderer):
        service = Mermaid2Png(_settings(tmp_path), renderers=[make_renderer()])
        result = await service.convert_async(DIAGRAM, scale_factor=1.25)
        assert result.plan.scale_factor == 1.25

    def test_plan_uses_configured_limits(self, tmp_path):
        service = Mermaid2Png(_settings(tmp_path, default_width=1000, default_height=800))
        plan = service.plan("pie")
        assert (plan.width, plan.height) == (1000, 800)
