# ABOUTME: Unit tests for the presentation-layer reply cache and its keys.
# ABOUTME: Checks SHA-256 photo keys, normalized text keys, and LRU eviction.

import hashlib

import pytest

from bookscout.cli.cache import RenderedReply, ReplyCache, image_cache_key, text_cache_key


class TestCacheKeys:
    def test_image_key_is_sha256_hex(self) -> None:
        data = b"\xff\xd8 cover"
        key = image_cache_key(data)
        assert key == hashlib.sha256(data).hexdigest()
        assert len(key) == 64

    def test_text_key_is_normalized(self) -> None:
        assert text_cache_key("Мастер и Маргарита!") == text_cache_key("  мастер И маргарита ")

    def test_text_and_image_keys_do_not_collide(self) -> None:
        assert text_cache_key("abc").startswith("text:")


class TestReplyCache:
    """Tests for ReplyCache."""

    def test_get_missing(self) -> None:
        assert ReplyCache().get("nope") is None

    def test_set_and_get(self) -> None:
        cache = ReplyCache()
        reply = RenderedReply(text="Found", links=(("Download MOBI", "https://x"),))
        cache.set("k", reply)
        assert cache.get("k") == reply
        assert len(cache) == 1

    def test_evicts_least_recently_used(self) -> None:
        cache = ReplyCache(max_size=2)
        cache.set("a", RenderedReply("A"))
        cache.set("b", RenderedReply("B"))
        cache.get("a")
        cache.set("c", RenderedReply("C"))

        assert cache.get("b") is None
        assert cache.get("a") == RenderedReply("A")
        assert cache.get("c") == RenderedReply("C")
        assert len(cache) == 2

    def test_overwrite_does_not_grow(self) -> None:
        cache = ReplyCache(max_size=2)
        cache.set("a", RenderedReply("A"))
        cache.set("a", RenderedReply("A2"))
        assert len(cache) == 1
        assert cache.get("a") == RenderedReply("A2")

    def test_rejects_non_positive_size(self) -> None:
        with pytest.raises(ValueError, match="max_size"):
            ReplyCache(max_size=0)
