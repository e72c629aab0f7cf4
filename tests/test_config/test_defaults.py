"""Tests for package defaults."""

from mermaid2png.config.defaults import (
    DEFAULT_CACHE_DISABLED,
    DEFAULT_CACHE_MAX_ENTRIES,
    DEFAULT_CACHE_TTL_SECONDS,
    DEFAULT_LOG_LEVEL,
    DEFAULT_PORT,
    get_defaults,
)


class TestDefaults:
    def test_default_port(self):
        assert DEFAULT_PORT == 3000

    def test_default_cache_capacity(self):
        assert DEFAULT_CACHE_MAX_ENTRIES == 100

    def test_default_ttl_is_one_day(self):
        assert DEFAULT_CACHE_TTL_SECONDS == 86400

    def test_default_cache_not_disabled(self):
        assert DEFAULT_CACHE_DISABLED is False

    def test_default_log_level(self):
        assert DEFAULT_LOG_LEVEL == "INFO"

    def test_get_defaults_returns_dict(self):
        d = get_defaults()
        assert isinstance(d, dict)
        assert d["cache_dir"] == "temp/cache"
        assert d["mermaid_command"] == "npx mmdc"

    def test_get_defaults_is_a_fresh_copy(self):
        d = get_defaults()
        d["port"] = 1
        assert get_defaults()["port"] == 3000
