"""Tests for ConversionCache (fingerprinting + store delegation)."""

from mermaid2png.cache.keys import generate_cache_key
from mermaid2png.cache.manager import ConversionCache
from mermaid2png.cache.storage import DirectoryStorage
from mermaid2png.cache.store import EvictionStore
from mermaid2png.types import RenderOptions

DIAGRAM = "graph TD\n  A --> B"


def _cache(tmp_path, clock, enabled: bool = True, max_entries: int = 100) -> ConversionCache:
    store = EvictionStore(
        DirectoryStorage(tmp_path / "cache"),
        max_entries=max_entries,
        ttl_seconds=3600,
        clock=clock,
    )
    cache = ConversionCache(store, enabled=enabled)
    cache.initialize()
    return cache


class TestConversionCache:
    def test_store_and_lookup(self, tmp_path, clock, sample_png_bytes):
        cache = _cache(tmp_path, clock)
        options = RenderOptions(width=800, height=600)
        assert cache.store(DIAGRAM, options, sample_png_bytes) is True
        assert cache.lookup(DIAGRAM, options) == sample_png_bytes

    def test_lookup_miss(self, tmp_path, clock):
        cache = _cache(tmp_path, clock)
        assert cache.lookup(DIAGRAM) is None

    def test_dimensions_partition_entries(self, tmp_path, clock, sample_png_bytes):
        cache = _cache(tmp_path, clock)
        cache.store(DIAGRAM, RenderOptions(width=800), sample_png_bytes)
        assert cache.lookup(DIAGRAM, RenderOptions(width=800)) == sample_png_bytes
        assert cache.lookup(DIAGRAM, RenderOptions(width=801)) is None
        assert cache.lookup(DIAGRAM, RenderOptions()) is None

    def test_scale_factor_shares_entry(self, tmp_path, clock, sample_png_bytes):
        cache = _cache(tmp_path, clock)
        cache.store(DIAGRAM, RenderOptions(width=800, scale_factor=2.0), sample_png_bytes)
        assert cache.lookup(DIAGRAM, RenderOptions(width=800)) == sample_png_bytes

    def test_artifact_named_by_fingerprint(self, tmp_path, clock, sample_png_bytes):
        cache = _cache(tmp_path, clock)
        cache.store(DIAGRAM, RenderOptions(width=800, height=600), sample_png_bytes)
        key = generate_cache_key(DIAGRAM, 800, 600)
        assert (tmp_path / "cache" / f"{key}.png").read_bytes() == sample_png_bytes

    def test_disabled_cache_returns_none(self, tmp_path, clock, sample_png_bytes):
        cache = _cache(tmp_path, clock, enabled=False)
        assert cache.store(DIAGRAM, None, sample_png_bytes) is False
        assert cache.lookup(DIAGRAM) is None
        assert not (tmp_path / "cache").exists()

    def test_stats_tracks_hits_and_misses(self, tmp_path, clock, sample_png_bytes):
        cache = _cache(tmp_path, clock)
        cache.store(DIAGRAM, None, sample_png_bytes)
        cache.lookup(DIAGRAM)  # hit
        cache.lookup(DIAGRAM)  # hit
        cache.lookup("graph LR\n  X --> Y")  # miss
        stats = cache.stats()
        assert stats.hits == 2
        assert stats.misses == 1
        assert stats.entries == 1
        assert stats.hit_rate == 2 / 3
        assert stats.size_mb > 0

    def test_stats_count_store_failures(self, tmp_path, clock, monkeypatch, sample_png_bytes):
        cache = _cache(tmp_path, clock)
        monkeypatch.setattr(cache.store_backend, "put", lambda key, data: False)
        assert cache.store(DIAGRAM, None, sample_png_bytes) is False
        assert cache.stats().store_failures == 1

    def test_stats_report_evictions(self, tmp_path, clock, sample_png_bytes):
        cache = _cache(tmp_path, clock, max_entries=1)
        cache.store("graph TD\n A", None, sample_png_bytes)
        cache.store("graph TD\n B", None, sample_png_bytes)
        assert cache.stats().evictions == 1

    def test_clear_resets_everything(self, tmp_path, clock, sample_png_bytes):
        cache = _cache(tmp_path, clock)
        cache.store(DIAGRAM, None, sample_png_bytes)
        cache.lookup(DIAGRAM)
        assert cache.clear() == 1
        stats = cache.stats()
        assert stats.entries == 0
        assert stats.hits == 0
        assert cache.lookup(DIAGRAM) is None

    def test_survives_restart(self, tmp_path, clock, sample_png_bytes):
        first = _cache(tmp_path, clock)
        first.store(DIAGRAM, None, sample_png_bytes)

        second = _cache(tmp_path, clock)
        assert second.lookup(DIAGRAM) == sample_png_bytes
