"""
Tests for the JSON file document cache.
"""

import json
import time

import pytest

from groomer_directory.data.cache import DocumentCache


@pytest.fixture
def cache(tmp_path):
    """Create a DocumentCache with a temp directory."""
    return DocumentCache(cache_dir=str(tmp_path / "cache"), ttl_seconds=60)


class TestCacheBasicOperations:
    """Tests for basic cache get/set/invalidate."""

    def test_set_and_get(self, cache):
        cache.set("sitemap.xml", "<urlset/>")
        assert cache.get("sitemap.xml") == "<urlset/>"

    def test_get_missing(self, cache):
        assert cache.get("nothing") is None

    def test_invalidate_existing(self, cache):
        cache.set("sitemap.xml", "<urlset/>")
        assert cache.invalidate("sitemap.xml") is True
        assert cache.get("sitemap.xml") is None

    def test_invalidate_missing(self, cache):
        assert cache.invalidate("nothing") is False

    def test_overwrite(self, cache):
        cache.set("doc", "one")
        cache.set("doc", "two")
        assert cache.get("doc") == "two"

    def test_key_made_filesystem_safe(self, cache):
        cache.set("pages/../sitemap xml", "x")
        files = [p.name for p in cache.cache_dir.glob("*.json")]
        assert len(files) == 1
        assert "/" not in files[0] and " " not in files[0]
        assert cache.get("pages/../sitemap xml") == "x"

    def test_unicode_document(self, cache):
        cache.set("doc", "Café Pawz — Hampstead")
        assert cache.get("doc") == "Café Pawz — Hampstead"


class TestCacheTTL:
    """Tests for cache TTL (time-to-live) expiration."""

    def test_expired_entry_returns_none(self, tmp_path):
        cache = DocumentCache(cache_dir=str(tmp_path / "cache"), ttl_seconds=1)
        cache.set("doc", "x")
        time.sleep(1.1)
        assert cache.get("doc") is None

    def test_fresh_entry_returned(self, cache):
        cache.set("doc", "x")
        assert cache.get("doc") == "x"


class TestCacheRobustness:
    """Corrupt entries degrade to a miss."""

    def test_corrupt_file_is_a_miss(self, cache):
        cache.set("doc", "x")
        cache._path_for("doc").write_text("{not json", encoding="utf-8")
        assert cache.get("doc") is None

    @pytest.mark.parametrize("content", ['["x"]', "42", '{"payload": "x"}', '{"_cached_at": "soon", "payload": "x"}'])
    def test_non_envelope_json_is_a_miss(self, cache, content):
        cache.set("doc", "x")
        cache._path_for("doc").write_text(content, encoding="utf-8")
        assert cache.get("doc") is None

    def test_envelope_format(self, cache):
        cache.set("doc", "x")
        data = json.loads(cache._path_for("doc").read_text(encoding="utf-8"))
        assert data["payload"] == "x"
        assert data["_key"] == "doc"
        assert "_cached_at" in data


class TestCacheClear:
    """Tests for clearing the cache."""

    def test_clear(self, cache):
        cache.set("a", "1")
        cache.set("b", "2")
        assert cache.clear() == 2
        assert cache.get("a") is None
        assert list(cache.cache_dir.glob("*.lock")) == []
