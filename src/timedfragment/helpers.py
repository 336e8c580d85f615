"""View-side helpers for timed fragment caching."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable

    from timedfragment.controller import ExpiryController


def expires_in(**kwargs: float) -> datetime:
    """Return now (UTC) plus a timedelta, e.g. ``expires_in(minutes=10)``."""
    return datetime.now(UTC) + timedelta(**kwargs)


class CacheHelper:
    """Declarative ``cache`` entry point for template code.

    Build one per request around that request's ExpiryController; the helper
    itself holds no state.
    """

    def __init__(self, controller: ExpiryController) -> None:
        self.controller = controller

    def cache(
        self,
        name: Any,
        expires_at: datetime | None,
        render: Callable[[], Any],
    ) -> Any:
        return self.controller.cache_with_expiry(name, expires_at, render, None)

    def cache_block(
        self, name: Any, expires_at: datetime | None = None
    ) -> Callable[[Callable[[], Any]], Any]:
        """Decorator form of :meth:`cache`.

        The decorated function is rendered (or served from cache) immediately
        and its name is bound to the resulting content::

            @helpers.cache_block("sidebar", expires_in(minutes=10))
            def sidebar():
                return render_sidebar()
        """

        def decorator(render: Callable[[], Any]) -> Any:
            return self.cache(name, expires_at, render)

        return decorator
