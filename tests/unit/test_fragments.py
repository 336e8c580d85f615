"""Unit tests for timedfragment.fragments."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from pydantic import ValidationError

from timedfragment.fragments import FragmentCache
from timedfragment.models import FragmentOptions

if TYPE_CHECKING:
    from timedfragment.store import MemoryFragmentStore


class Producer:
    """Counts calls so tests can tell a cache hit from a fill."""

    def __init__(self, content: str | bytes = "<p>fresh</p>") -> None:
        self.content = content
        self.calls = 0

    def __call__(self) -> str | bytes:
        self.calls += 1
        return self.content


# ---------------------------------------------------------------------------
# read / write / expire
# ---------------------------------------------------------------------------


class TestFragmentAccess:
    def test_write_then_read(self, fragments: FragmentCache) -> None:
        fragments.write_fragment("page1", "<p>hi</p>")
        assert fragments.read_fragment("page1") == b"<p>hi</p>"

    def test_write_uses_derived_key(
        self, fragments: FragmentCache, store: MemoryFragmentStore
    ) -> None:
        fragments.write_fragment({"controller": "posts", "action": "index"}, "x")
        assert store.read("views/action=index/controller=posts") == b"x"

    def test_write_bytes_unchanged(self, fragments: FragmentCache) -> None:
        fragments.write_fragment("page1", b"\x00raw")
        assert fragments.read_fragment("page1") == b"\x00raw"

    def test_write_respects_encoding(self, fragments: FragmentCache) -> None:
        fragments.write_fragment("page1", "café", FragmentOptions(encoding="latin-1"))
        assert fragments.read_fragment("page1") == "café".encode("latin-1")

    def test_expire_fragment(self, fragments: FragmentCache) -> None:
        fragments.write_fragment("page1", "x")
        assert fragments.expire_fragment("page1") is True
        assert fragments.read_fragment("page1") is None
        assert fragments.expire_fragment("page1") is False


# ---------------------------------------------------------------------------
# cache_fragment
# ---------------------------------------------------------------------------


class TestCacheFragment:
    def test_miss_fills_and_returns(self, fragments: FragmentCache) -> None:
        produce = Producer()
        assert fragments.cache_fragment("page1", produce) == "<p>fresh</p>"
        assert produce.calls == 1
        assert fragments.read_fragment("page1") == b"<p>fresh</p>"

    def test_hit_skips_produce(self, fragments: FragmentCache) -> None:
        fragments.write_fragment("page1", "<p>cached</p>")
        produce = Producer()
        assert fragments.cache_fragment("page1", produce) == "<p>cached</p>"
        assert produce.calls == 0

    def test_second_call_is_a_hit(self, fragments: FragmentCache) -> None:
        produce = Producer()
        fragments.cache_fragment("page1", produce)
        fragments.cache_fragment("page1", produce)
        assert produce.calls == 1

    def test_bytes_content_returned_as_text(self, fragments: FragmentCache) -> None:
        produce = Producer(b"<p>bytes</p>")
        assert fragments.cache_fragment("page1", produce) == "<p>bytes</p>"

    def test_disabled_caching_always_produces(self, store: MemoryFragmentStore) -> None:
        fragments = FragmentCache(store, perform_caching=False)
        produce = Producer()
        fragments.cache_fragment("page1", produce)
        fragments.cache_fragment("page1", produce)
        assert produce.calls == 2
        assert len(store) == 0

    def test_produce_errors_propagate_and_store_nothing(
        self, fragments: FragmentCache, store: MemoryFragmentStore
    ) -> None:
        def boom() -> str:
            raise RuntimeError("render failed")

        with pytest.raises(RuntimeError, match="render failed"):
            fragments.cache_fragment("page1", boom)
        assert len(store) == 0


class TestFragmentOptions:
    def test_default_encoding(self) -> None:
        assert FragmentOptions().encoding == "utf-8"

    def test_unknown_encoding_rejected(self) -> None:
        with pytest.raises(ValidationError):
            FragmentOptions(encoding="no-such-codec")

    def test_unknown_field_rejected(self) -> None:
        with pytest.raises(ValidationError):
            FragmentOptions(ttl=5)  # type: ignore[call-arg]
