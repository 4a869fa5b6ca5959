"""Mixin that manages ViewCache watches with auto-cleanup."""

from __future__ import annotations

from typing import Callable

from tasklane.model.cache import Callback, ViewCache


class CacheWatcherMixin:
    """Mixin for widgets that re-render when a cache key is replaced.

    Subclasses should:
    - Call ``_init_watcher()`` in ``__init__``
    - Use ``self.cache_watch(cache, key, callback)`` instead of ``cache.watch(...)``
    - Skip writing ``on_unmount`` -- the mixin handles cleanup
    """

    def _init_watcher(self) -> None:
        self._watches: list[Callable[[], None]] = []

    def cache_watch(self, cache: ViewCache, key: str, callback: Callback) -> None:
        """Register a watch that is removed when the widget unmounts."""
        self._watches.append(cache.watch(key, callback))

    def on_unmount(self) -> None:
        for unwatch in self._watches:
            unwatch()
        self._watches.clear()
