"""Namespaced cache for posts over Django's cache framework.

Django cache backends cannot delete "all keys with a prefix", so each
namespace carries a version number stored under its own key. Entries are
written under the current version; ``invalidate_all`` switches the
namespace to a new version and old entries simply stop being read
(the backend expires them).
"""

import logging
import time
from typing import Any, Final

from django.conf import settings
from django.core.cache import caches

logger = logging.getLogger(__name__)

POSTS_CACHE: Final = 'cache.posts'
POSTS_PAGE_CACHE: Final = f'{POSTS_CACHE}.page'

_DEFAULT_TIMEOUT: Final = 300


def get_cache_timeout() -> int:
    """Get cache entry lifetime in seconds.

    Returns:
        Timeout from settings or default of 300.
    """
    return getattr(settings, 'POSTS_CACHE_TIMEOUT', _DEFAULT_TIMEOUT)


class PostCache:
    """Cache with per-key and per-namespace invalidation."""

    def __init__(self, alias: str = 'default') -> None:
        """Initialize PostCache.

        Args:
            alias: Name of the Django cache to use.
        """
        self._alias = alias

    @property
    def _cache(self) -> Any:
        return caches[self._alias]

    def get(self, namespace: str, key: object) -> Any:
        """Get a cached value, or None on a miss."""
        return self._cache.get(self._entry_key(namespace, key))

    def set(self, namespace: str, key: object, value: Any) -> None:  # noqa: WPS125
        """Store a value under the namespace's current version."""
        self._cache.set(
            self._entry_key(namespace, key),
            value,
            get_cache_timeout(),
        )

    def invalidate(self, namespace: str, key: object) -> None:
        """Drop a single entry."""
        self._cache.delete(self._entry_key(namespace, key))
        logger.debug('Invalidated cache entry %s[%s]', namespace, key)

    def invalidate_all(self, namespace: str) -> None:
        """Drop every entry of a namespace."""
        version_key = self._version_key(namespace)
        try:
            self._cache.incr(version_key)
        except ValueError:
            # Version key expired or never set: start a fresh one
            self._cache.set(version_key, time.time_ns(), None)
        logger.debug('Invalidated cache namespace %s', namespace)

    def _entry_key(self, namespace: str, key: object) -> str:
        return f'{namespace}:{self._version(namespace)}:{key}'

    def _version(self, namespace: str) -> int:
        version_key = self._version_key(namespace)
        version = self._cache.get(version_key)
        if version is None:
            version = time.time_ns()
            # add() keeps a version another process set first
            if not self._cache.add(version_key, version, None):
                version = self._cache.get(version_key, version)
        return version

    def _version_key(self, namespace: str) -> str:
        return f'{namespace}:version'
