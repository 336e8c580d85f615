"""Unit-specific fixtures (no I/O beyond in-memory SQLite)."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from timedfragment.controller import ExpiryController
from timedfragment.fragments import FragmentCache
from timedfragment.store import MemoryFragmentStore, SqliteFragmentStore


class FakeClock:
    """Manually advanced clock for expiry tests."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock(datetime(2026, 10, 18, 12, 0, tzinfo=UTC))


@pytest.fixture()
def store() -> MemoryFragmentStore:
    return MemoryFragmentStore()


@pytest.fixture()
def sqlite_store():
    """In-memory SQLite store."""
    s = SqliteFragmentStore.open(":memory:")
    yield s
    s.close()


@pytest.fixture()
def fragments(store: MemoryFragmentStore) -> FragmentCache:
    return FragmentCache(store)


@pytest.fixture()
def controller(fragments: FragmentCache, clock: FakeClock) -> ExpiryController:
    return ExpiryController(fragments, clock=clock)
