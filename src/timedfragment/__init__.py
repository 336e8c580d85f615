from __future__ import annotations

from timedfragment.controller import ExpiryController
from timedfragment.errors import ErrorCode, TimedFragmentError
from timedfragment.fragments import FragmentCache
from timedfragment.helpers import CacheHelper, expires_in
from timedfragment.keys import fragment_cache_key, meta_fragment_key
from timedfragment.models import FragmentOptions
from timedfragment.store import FragmentStore, MemoryFragmentStore, SqliteFragmentStore

__all__ = [
    # expiry
    "ExpiryController",
    "CacheHelper",
    "expires_in",
    # base cache
    "FragmentCache",
    "FragmentOptions",
    "fragment_cache_key",
    "meta_fragment_key",
    # stores
    "FragmentStore",
    "MemoryFragmentStore",
    "SqliteFragmentStore",
    # errors
    "ErrorCode",
    "TimedFragmentError",
]
