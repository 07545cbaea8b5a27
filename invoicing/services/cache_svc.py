from __future__ import annotations

# invoicing/services/cache_svc.py
import logging
import threading
from typing import Any, Callable

logger = logging.getLogger(__name__)


class PathCache:
    """Rendered results keyed by view path. Stale entries are recomputed on next read."""

    def __init__(self):
        self._lock = threading.Lock()
        self._entries: dict[str, Any] = {}
        # bumped on every invalidate; a compute that overlaps one is not stored
        self._generations: dict[str, int] = {}

    def get_or_compute(self, path: str, compute: Callable[[], Any]) -> Any:
        with self._lock:
            if path in self._entries:
                return self._entries[path]
            generation = self._generations.get(path, 0)
        value = compute()
        with self._lock:
            if self._generations.get(path, 0) == generation:
                self._entries[path] = value
        return value

    def invalidate(self, path: str) -> None:
        with self._lock:
            self._generations[path] = self._generations.get(path, 0) + 1
            dropped = self._entries.pop(path, None) is not None
        logger.debug("invalidate %s (cached=%s)", path, dropped)

    def is_cached(self, path: str) -> bool:
        with self._lock:
            return path in self._entries

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()


_cache = PathCache()


def get_cache() -> PathCache:
    return _cache


def invalidate(path: str) -> None:
    _cache.invalidate(path)


def cached(path: str, compute: Callable[[], Any]) -> Any:
    return _cache.get_or_compute(path, compute)
