"""Base fragment caching: read, write, expire, and cache-or-fill.

This layer has no notion of expiry. A fragment, once written, is served until
something deletes it. ExpiryController builds time-based expiry on top of it by
composition.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog

from timedfragment.keys import fragment_cache_key
from timedfragment.models.fragments import FragmentOptions

if TYPE_CHECKING:
    from collections.abc import Callable

    from timedfragment.store import FragmentStore

log = structlog.get_logger()

_DEFAULT_OPTIONS = FragmentOptions()


class FragmentCache:
    def __init__(self, store: FragmentStore, *, perform_caching: bool = True) -> None:
        self.store = store
        self.perform_caching = perform_caching

    def fragment_cache_key(self, name: Any) -> str:
        return fragment_cache_key(name)

    # ------------------------------------------------------------------
    # Raw key access (meta records use pre-derived keys)
    # ------------------------------------------------------------------

    def read_raw(self, key: str) -> bytes | None:
        return self.store.read(key)

    def write_raw(self, key: str, data: bytes) -> None:
        self.store.write(key, data)

    # ------------------------------------------------------------------
    # Fragments by name
    # ------------------------------------------------------------------

    def read_fragment(self, name: Any) -> bytes | None:
        return self.store.read(self.fragment_cache_key(name))

    def write_fragment(
        self, name: Any, content: str | bytes, options: FragmentOptions | None = None
    ) -> bytes:
        """Store ``content`` under ``name`` and return the bytes written."""
        options = options or _DEFAULT_OPTIONS
        data = content if isinstance(content, bytes) else content.encode(options.encoding)
        self.store.write(self.fragment_cache_key(name), data)
        return data

    def expire_fragment(self, name: Any) -> bool:
        """Delete the fragment for ``name``. Returns whether anything was removed."""
        key = self.fragment_cache_key(name)
        removed = self.store.delete(key)
        log.debug("fragment_deleted", key=key, removed=removed)
        return removed

    def cache_fragment(
        self,
        name: Any,
        produce: Callable[[], str | bytes],
        options: FragmentOptions | None = None,
    ) -> str:
        """Return the cached fragment for ``name``, filling it from ``produce`` on a miss."""
        options = options or _DEFAULT_OPTIONS
        if not self.perform_caching:
            return _as_text(produce(), options)

        key = self.fragment_cache_key(name)
        cached = self.store.read(key)
        if cached is not None:
            log.debug("fragment_cache_hit", key=key)
            return cached.decode(options.encoding)

        log.debug("fragment_cache_miss", key=key)
        data = self.write_fragment(name, produce(), options)
        return data.decode(options.encoding)


def _as_text(content: str | bytes, options: FragmentOptions) -> str:
    if isinstance(content, bytes):
        return content.decode(options.encoding)
    return content
