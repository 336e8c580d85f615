"""Time-based expiry for fragment caching.

Each timed fragment has a companion meta record, stored under
``<fragment key>_meta``, holding the time after which the fragment is stale.
The meta record is checked before the base cache is asked for the fragment:
when it says the fragment is stale, the fragment is deleted and a new expiry is
recorded first, so the base cache sees a genuine miss and runs ``produce``.

Usage::

    controller = ExpiryController(fragment_cache)
    html = controller.cache_with_expiry("sidebar", expires_in(minutes=10), render_sidebar)

    # Only do the expensive work when the fragment is stale. The fragment is
    # deleted afterwards so the next render recomputes it.
    controller.when_expired("sidebar", expires_in(minutes=10), refresh_stats)

A missing or corrupt meta record always counts as expired. There is no locking:
two callers racing on one name can both see it expired and both recompute, and
the last write wins for the fragment and its meta record.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

import structlog

from timedfragment.keys import meta_fragment_key
from timedfragment.meta import decode_meta, encode_meta
from timedfragment.models.meta import MetaDecoded

if TYPE_CHECKING:
    from collections.abc import Callable

    from timedfragment.fragments import FragmentCache
    from timedfragment.models.fragments import FragmentOptions
    from timedfragment.models.meta import MetaDecodeResult

log = structlog.get_logger()


def _utc_now() -> datetime:
    return datetime.now(UTC)


class ExpiryController:
    def __init__(
        self,
        cache: FragmentCache,
        *,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self.cache = cache
        self._clock = clock

    @property
    def perform_caching(self) -> bool:
        return self.cache.perform_caching

    # ------------------------------------------------------------------
    # Meta records
    # ------------------------------------------------------------------

    def meta_key(self, name: Any) -> str:
        return meta_fragment_key(name)

    def read_meta(self, name: Any) -> MetaDecodeResult:
        return decode_meta(self.cache.read_raw(self.meta_key(name)))

    def write_meta(self, name: Any, expires_at: datetime | None) -> None:
        key = self.meta_key(name)
        self.cache.write_raw(key, encode_meta(expires_at))
        log.debug("fragment_meta_written", key=key, expires_at=expires_at)

    # ------------------------------------------------------------------
    # Expiry decision
    # ------------------------------------------------------------------

    def is_expired(self, name: Any) -> bool:
        """True unless a readable meta record holds a time not yet reached."""
        result = self.read_meta(name)
        if not isinstance(result, MetaDecoded):
            if result.reason == "invalid":
                log.warning(
                    "fragment_meta_decode_failed", key=self.meta_key(name), error=result.detail
                )
            return True
        if result.expires_at is None:
            return True
        return result.expires_at < self._clock()

    def expire_and_record(self, name: Any, expires_at: datetime | None) -> None:
        """Delete the fragment, then record ``expires_at`` if one was given."""
        self.cache.expire_fragment(name)
        log.info(
            "fragment_expired",
            key=self.cache.fragment_cache_key(name),
            next_expiry=expires_at,
        )
        if expires_at is not None:
            self.write_meta(name, expires_at)

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def cache_with_expiry(
        self,
        name: Any,
        expires_at: datetime | None,
        produce: Callable[[], Any],
        options: FragmentOptions | None = None,
    ) -> Any:
        """Serve ``name`` from the cache, recomputing it once ``expires_at`` has passed.

        With caching disabled ``produce`` is called directly and its result
        returned untouched. With ``expires_at=None`` the meta record is never
        consulted and this behaves exactly like the base cache.
        """
        if not self.perform_caching:
            log.debug("fragment_caching_disabled", key=self.cache.fragment_cache_key(name))
            return produce()

        if expires_at is not None and self.is_expired(name):
            self.expire_and_record(name, expires_at)

        return self.cache.cache_fragment(name, produce, options)

    def run_if_expired(
        self,
        name: Any,
        expires_at: datetime | None,
        action: Callable[[], object],
    ) -> bool:
        """Run ``action`` only if ``name`` is expired. Returns whether it ran.

        After ``action`` runs the fragment is deleted and ``expires_at``
        recorded, so the next render of ``name`` recomputes it. Passing
        ``expires_at=None`` still checks expiry but records no new meta, so the
        action keeps running on every call until an expiry is supplied.
        """
        if not self.is_expired(name):
            return False

        action()
        log.debug("fragment_action_ran", key=self.cache.fragment_cache_key(name))
        self.expire_and_record(name, expires_at)
        return True

    when_expired = run_if_expired
