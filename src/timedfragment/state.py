"""Wiring: settings -> store -> fragment cache -> expiry controller."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import structlog

from timedfragment.controller import ExpiryController
from timedfragment.fragments import FragmentCache
from timedfragment.helpers import CacheHelper
from timedfragment.store import MemoryFragmentStore, SqliteFragmentStore

if TYPE_CHECKING:
    from timedfragment.config import Settings
    from timedfragment.store import FragmentStore

log = structlog.get_logger()


@dataclass
class AppState:
    """Process-wide caching objects built once from Settings."""

    settings: Settings
    store: FragmentStore
    fragments: FragmentCache
    controller: ExpiryController

    def helpers(self) -> CacheHelper:
        """Return a fresh view helper bound to this state's controller."""
        return CacheHelper(self.controller)

    def close(self) -> None:
        if isinstance(self.store, SqliteFragmentStore):
            self.store.close()


def build_store(settings: Settings) -> FragmentStore:
    if settings.cache.backend == "sqlite":
        return SqliteFragmentStore.open(settings.cache.db_path)
    return MemoryFragmentStore()


def create_app_state(settings: Settings) -> AppState:
    store = build_store(settings)
    fragments = FragmentCache(store, perform_caching=settings.cache.perform_caching)
    controller = ExpiryController(fragments)
    log.info(
        "fragment_cache_ready",
        backend=settings.cache.backend,
        perform_caching=settings.cache.perform_caching,
    )
    return AppState(
        settings=settings,
        store=store,
        fragments=fragments,
        controller=controller,
    )
